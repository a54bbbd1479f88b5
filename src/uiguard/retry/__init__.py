"""Bounded retry loop around an external generation backend."""

from uiguard.retry.orchestrator import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_MS,
    AttemptResult,
    BestAttempt,
    ErrorComparison,
    GenerateFn,
    GenerationTimeoutError,
    ProgressCallback,
    RetryConfig,
    RetryOrchestrator,
    RetryProgressEvent,
    RetryResult,
    RetryStatus,
    build_retry_prompt,
    calculate_fix_rate,
    compare_errors,
    execute_with_retry,
    select_best_attempt,
    with_timeout,
)

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT_MS",
    "AttemptResult",
    "BestAttempt",
    "ErrorComparison",
    "GenerateFn",
    "GenerationTimeoutError",
    "ProgressCallback",
    "RetryConfig",
    "RetryOrchestrator",
    "RetryProgressEvent",
    "RetryResult",
    "RetryStatus",
    "build_retry_prompt",
    "calculate_fix_rate",
    "compare_errors",
    "execute_with_retry",
    "select_best_attempt",
    "with_timeout",
]
