"""Retry orchestrator: generate, validate, and feed failures back.

Attempts run strictly one after another under a single time budget.  When a
generation call outlives the remaining budget the orchestrator stops waiting
on it and ends the loop; the backend itself is not interrupted beyond task
cancellation.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from uiguard.chain.formatting import format_errors_for_llm
from uiguard.chain.pipeline import ChainConfig, ValidationChain
from uiguard.models.errors import ChainValidationError, Severity, ValidationLayer
from uiguard.settings import Settings

logger = logging.getLogger("uiguard.retry")

DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_MS = 30_000

T = TypeVar("T")

GenerateFn = Callable[[str, str | None], Awaitable[str] | str]


class GenerationTimeoutError(TimeoutError):
    """Raised when generation does not finish within the remaining budget."""


# ---------------------------------------------------------------------------
# Configuration and results
# ---------------------------------------------------------------------------


class RetryStatus(StrEnum):
    GENERATING = "generating"
    VALIDATING = "validating"
    RETRYING = "retrying"
    COMPLETED = "completed"
    FAILED = "failed"


class RetryConfig(BaseModel):
    max_retries: int = Field(DEFAULT_MAX_RETRIES, ge=1)
    timeout_ms: float = Field(DEFAULT_TIMEOUT_MS, gt=0)
    chain_config: ChainConfig | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> RetryConfig:
        """Config seeded from the ``UIGUARD_RETRY_*`` settings; keywords win."""
        values: dict[str, Any] = {
            "max_retries": settings.retry_max_attempts,
            "timeout_ms": settings.retry_timeout_ms,
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class RetryProgressEvent:
    attempt: int
    total_attempts: int
    errors_fixed: int
    errors_remaining: int
    status: RetryStatus
    fixed_errors: list[ChainValidationError] = field(default_factory=list)
    remaining_errors: list[ChainValidationError] = field(default_factory=list)


ProgressCallback = Callable[[RetryProgressEvent], None]


@dataclass
class AttemptResult:
    """One generate-then-validate cycle."""

    attempt: int
    raw_output: str
    errors: list[ChainValidationError]
    warnings: list[ChainValidationError]
    valid: bool
    schema: dict[str, Any] | None = None
    document: Any = None


@dataclass
class BestAttempt:
    attempt: int
    schema: Any
    errors: list[ChainValidationError]


@dataclass
class RetryResult:
    success: bool
    errors: list[ChainValidationError]
    warnings: list[ChainValidationError]
    attempts: int
    total_time_ms: float
    schema: dict[str, Any] | None = None
    best_attempt: BestAttempt | None = None
    timed_out: bool = False
    history: list[AttemptResult] = field(default_factory=list)


@dataclass
class ErrorComparison:
    fixed: list[ChainValidationError]
    remaining: list[ChainValidationError]
    new_errors: list[ChainValidationError]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def compare_errors(
    previous: Sequence[ChainValidationError], current: Sequence[ChainValidationError]
) -> ErrorComparison:
    """Partition errors by identity ``(layer, path, message)``."""
    previous_keys = {e.key for e in previous}
    current_keys = {e.key for e in current}
    return ErrorComparison(
        fixed=[e for e in previous if e.key not in current_keys],
        remaining=[e for e in current if e.key in previous_keys],
        new_errors=[e for e in current if e.key not in previous_keys],
    )


def calculate_fix_rate(
    previous: Sequence[ChainValidationError], current: Sequence[ChainValidationError]
) -> float:
    """Fraction of *previous* errors absent from *current* (0.0 - 1.0)."""
    if not previous:
        return 1.0 if not current else 0.0
    return len(compare_errors(previous, current).fixed) / len(previous)


def build_retry_prompt(
    base_prompt: str,
    errors: Sequence[ChainValidationError],
    previous_output: str | None = None,
) -> str:
    parts = [base_prompt]
    error_context = format_errors_for_llm(errors)
    if error_context:
        parts.append("\n\n" + error_context)
    if previous_output:
        parts.append(
            "\n\n## Previous Output (for reference)\n```json\n" + previous_output + "\n```"
        )
    return "".join(parts)


def select_best_attempt(attempts: Sequence[AttemptResult]) -> BestAttempt | None:
    """Fewest errors among attempts that parsed; the earliest wins a tie."""
    candidates = [a for a in attempts if a.document is not None]
    if not candidates:
        return None
    best = min(candidates, key=lambda a: len(a.errors))
    return BestAttempt(attempt=best.attempt, schema=best.document, errors=best.errors)


async def with_timeout(awaitable: Awaitable[T], timeout_ms: float) -> T:
    """Await *awaitable*, giving up after *timeout_ms* milliseconds."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_ms / 1000)
    except TimeoutError as exc:
        raise GenerationTimeoutError(f"Operation timed out after {timeout_ms:g}ms") from exc


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class RetryOrchestrator:
    """Drives the generate -> validate -> retry loop over one chain."""

    def __init__(
        self, chain: ValidationChain | None = None, settings: Settings | None = None
    ) -> None:
        self._chain = chain or ValidationChain()
        self._default_config = RetryConfig.from_settings(settings or Settings())

    async def execute_with_retry(
        self,
        generate: GenerateFn,
        base_prompt: str,
        config: RetryConfig | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> RetryResult:
        config = config or self._default_config
        max_retries = config.max_retries
        started = time.monotonic()
        attempts: list[AttemptResult] = []
        previous_errors: list[ChainValidationError] = []
        previous_output: str | None = None
        last_comparison = ErrorComparison([], [], [])
        last_status: RetryStatus | None = None
        timed_out = False

        def emit(event: RetryProgressEvent) -> None:
            nonlocal last_status
            last_status = event.status
            if on_progress is not None:
                on_progress(event)

        def elapsed_ms() -> float:
            return (time.monotonic() - started) * 1000

        for attempt in range(1, max_retries + 1):
            elapsed = elapsed_ms()
            if elapsed >= config.timeout_ms:
                logger.warning(
                    "Retry budget of %sms exhausted before attempt %d", config.timeout_ms, attempt
                )
                timed_out = True
                break
            remaining_ms = config.timeout_ms - elapsed

            emit(
                RetryProgressEvent(
                    attempt=attempt,
                    total_attempts=max_retries,
                    errors_fixed=len(last_comparison.fixed),
                    errors_remaining=len(previous_errors),
                    status=RetryStatus.GENERATING if attempt == 1 else RetryStatus.RETRYING,
                    fixed_errors=list(last_comparison.fixed),
                    remaining_errors=list(previous_errors),
                )
            )

            if attempt == 1:
                prompt, error_context = base_prompt, None
            else:
                prompt = build_retry_prompt(base_prompt, previous_errors, previous_output)
                error_context = format_errors_for_llm(previous_errors)

            logger.info("Generation attempt %d/%d", attempt, max_retries)
            try:
                raw_output = await self._generate(generate, prompt, error_context, remaining_ms)
            except TimeoutError:
                logger.warning("Generation attempt %d timed out; stopping", attempt)
                timed_out = True
                break
            except Exception as exc:
                logger.warning("Generation attempt %d failed: %s", attempt, exc)
                attempts.append(
                    AttemptResult(
                        attempt=attempt,
                        raw_output="",
                        errors=[
                            ChainValidationError(
                                layer=ValidationLayer.JSON_SYNTAX,
                                severity=Severity.ERROR,
                                path="",
                                message=f"Generation failed: {exc}",
                            )
                        ],
                        warnings=[],
                        valid=False,
                    )
                )
                continue

            emit(
                RetryProgressEvent(
                    attempt=attempt,
                    total_attempts=max_retries,
                    errors_fixed=0,
                    errors_remaining=len(previous_errors),
                    status=RetryStatus.VALIDATING,
                    remaining_errors=list(previous_errors),
                )
            )
            outcome = self._chain.execute(raw_output, config.chain_config)
            attempts.append(
                AttemptResult(
                    attempt=attempt,
                    raw_output=raw_output,
                    errors=outcome.errors,
                    warnings=outcome.warnings,
                    valid=outcome.valid,
                    schema=outcome.schema,
                    document=outcome.document,
                )
            )
            comparison = compare_errors(previous_errors, outcome.errors)

            if outcome.valid and outcome.schema is not None:
                emit(
                    RetryProgressEvent(
                        attempt=attempt,
                        total_attempts=max_retries,
                        errors_fixed=len(comparison.fixed),
                        errors_remaining=0,
                        status=RetryStatus.COMPLETED,
                        fixed_errors=comparison.fixed,
                    )
                )
                logger.info("Attempt %d produced a valid document", attempt)
                return RetryResult(
                    success=True,
                    schema=outcome.schema,
                    errors=[],
                    warnings=outcome.warnings,
                    attempts=attempt,
                    total_time_ms=elapsed_ms(),
                    history=attempts,
                )

            logger.info(
                "Attempt %d invalid: %d errors (%d fixed, %d new)",
                attempt,
                len(outcome.errors),
                len(comparison.fixed),
                len(comparison.new_errors),
            )
            emit(
                RetryProgressEvent(
                    attempt=attempt,
                    total_attempts=max_retries,
                    errors_fixed=len(comparison.fixed),
                    errors_remaining=len(outcome.errors),
                    status=RetryStatus.RETRYING if attempt < max_retries else RetryStatus.FAILED,
                    fixed_errors=comparison.fixed,
                    remaining_errors=list(outcome.errors),
                )
            )
            last_comparison = comparison
            previous_errors = list(outcome.errors)
            previous_output = raw_output

        last = attempts[-1] if attempts else None
        if last_status is not RetryStatus.FAILED:
            emit(
                RetryProgressEvent(
                    attempt=len(attempts),
                    total_attempts=max_retries,
                    errors_fixed=0,
                    errors_remaining=len(last.errors) if last else 0,
                    status=RetryStatus.FAILED,
                    remaining_errors=list(last.errors) if last else [],
                )
            )
        return RetryResult(
            success=False,
            errors=list(last.errors) if last else [],
            warnings=list(last.warnings) if last else [],
            attempts=len(attempts),
            total_time_ms=elapsed_ms(),
            best_attempt=select_best_attempt(attempts),
            timed_out=timed_out,
            history=attempts,
        )

    @staticmethod
    async def _generate(
        generate: GenerateFn, prompt: str, error_context: str | None, remaining_ms: float
    ) -> str:
        produced = generate(prompt, error_context)
        if inspect.isawaitable(produced):
            return await with_timeout(produced, remaining_ms)
        return produced


async def execute_with_retry(
    generate: GenerateFn,
    base_prompt: str,
    config: RetryConfig | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    chain: ValidationChain | None = None,
    settings: Settings | None = None,
) -> RetryResult:
    """Module-level shortcut for :meth:`RetryOrchestrator.execute_with_retry`."""
    return await RetryOrchestrator(chain, settings).execute_with_retry(
        generate, base_prompt, config, on_progress
    )
