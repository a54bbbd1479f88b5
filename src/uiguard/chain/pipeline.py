"""Validation chain: ordered layers over a complete UI document.

Layers run in a fixed order.  Invalid JSON, a non-object document or a
missing ``root`` ends the run early; every other finding is recorded and the
remaining layers still execute so one run surfaces as much feedback as
possible.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from uiguard.catalog import CatalogLike, default_catalog
from uiguard.chain.components import ComponentValidator, categorize_layer
from uiguard.chain.structure import Finding, StructureValidator
from uiguard.chain.style import check_style_compliance
from uiguard.design.icon_compliance import IconChecker, check_icon_compliance
from uiguard.design.token_compliance import TokenChecker, check_token_compliance
from uiguard.design.tokens import default_tokens
from uiguard.models.errors import ChainValidationError, Severity, ValidationLayer
from uiguard.models.tokens import DesignTokens
from uiguard.parser.incremental import MAX_DEPTH

logger = logging.getLogger("uiguard.chain")

SYNTAX_SUGGESTION = "Check for missing brackets, quotes, or commas"

# A string literal (possibly unterminated) or a single bracket.
_STRUCTURE_RE = re.compile(r'"(?:[^"\\]|\\.)*"?|[\[\]{}]', re.DOTALL)


def layer_order() -> list[ValidationLayer]:
    """The fixed execution order of the chain."""
    return list(ValidationLayer)


class ChainConfig(BaseModel):
    """Per-run switches for the optional layers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    validate_style_compliance: bool = True
    validate_token_usage_compliance: bool = True
    validate_icon_compliance: bool = True
    strict: bool = False
    token_checker: TokenChecker | None = None
    icon_checker: IconChecker | None = None


@dataclass
class ChainResult:
    valid: bool
    errors: list[ChainValidationError]
    warnings: list[ChainValidationError]
    timing: dict[str, float]
    schema: dict[str, Any] | None = None
    document: Any = None

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass
class _Run:
    errors: list[ChainValidationError] = field(default_factory=list)
    warnings: list[ChainValidationError] = field(default_factory=list)
    timing: dict[str, float] = field(
        default_factory=lambda: {layer.value: 0.0 for layer in ValidationLayer}
    )

    def add(self, finding: ChainValidationError) -> None:
        if finding.severity is Severity.ERROR:
            self.errors.append(finding)
        else:
            self.warnings.append(finding)

    def result(self, document: Any = None) -> ChainResult:
        return ChainResult(
            valid=False,
            errors=self.errors,
            warnings=self.warnings,
            timing=self.timing,
            document=document,
        )


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _reject_constant(name: str) -> float:
    raise ValueError(f"Invalid JSON constant: {name}")


def find_excessive_nesting(text: str, max_depth: int = MAX_DEPTH) -> int | None:
    """Return the offset of the first bracket nested deeper than *max_depth*.

    Brackets inside string literals are ignored.  Documents that pass this
    check are shallow enough for ``json.loads`` and the recursive layer
    visitors.
    """
    depth = 0
    for match in _STRUCTURE_RE.finditer(text):
        token = match.group()
        if token in ("[", "{"):
            depth += 1
            if depth > max_depth:
                return match.start()
        elif token in ("]", "}"):
            depth -= 1
    return None


def _to_chain(layer: ValidationLayer, finding: Finding) -> ChainValidationError:
    return ChainValidationError(
        layer=layer,
        severity=finding.severity,
        path=finding.path,
        message=finding.message,
        suggestion=finding.suggestion,
    )


class ValidationChain:
    """Runs the seven validation layers over a complete JSON text."""

    def __init__(
        self,
        catalog: CatalogLike | None = None,
        tokens: DesignTokens | None = None,
        token_checker: TokenChecker | None = None,
        icon_checker: IconChecker | None = None,
    ) -> None:
        self._catalog = catalog if catalog is not None else default_catalog()
        self._tokens = tokens if tokens is not None else default_tokens()
        self._token_checker = token_checker or check_token_compliance
        self._icon_checker = icon_checker or check_icon_compliance
        self._structure = StructureValidator()
        self._components = ComponentValidator(self._catalog)

    @property
    def catalog(self) -> CatalogLike:
        return self._catalog

    def execute(self, text: str, config: ChainConfig | None = None) -> ChainResult:
        config = config or ChainConfig()
        run = _Run()

        # Layer 1: json-syntax
        start = time.perf_counter()
        document, syntax_error = self._parse(text)
        run.timing[ValidationLayer.JSON_SYNTAX] = _elapsed_ms(start)
        if syntax_error is not None:
            run.errors.append(syntax_error)
            logger.debug("Chain stopped at json-syntax: %s", syntax_error.message)
            return run.result()

        # Layer 2: schema-structure
        start = time.perf_counter()
        structure = self._structure.validate(document)
        run.timing[ValidationLayer.SCHEMA_STRUCTURE] = _elapsed_ms(start)
        for finding in structure:
            run.add(_to_chain(ValidationLayer.SCHEMA_STRUCTURE, finding))
        if StructureValidator.is_fatal(structure):
            logger.debug("Chain stopped at schema-structure: document has no usable root")
            return run.result(document)

        # Layers 3 and 4 share one traversal.
        start = time.perf_counter()
        for finding in self._components.validate(document):
            run.add(_to_chain(categorize_layer(finding.code), finding))
        shared = _elapsed_ms(start)
        run.timing[ValidationLayer.COMPONENT_EXISTENCE] = shared * 0.5
        run.timing[ValidationLayer.PROPS_VALIDATION] = shared * 0.5

        # Layer 5: style-compliance
        if config.validate_style_compliance:
            start = time.perf_counter()
            for warning in check_style_compliance(document, self._tokens):
                run.add(warning)
            run.timing[ValidationLayer.STYLE_COMPLIANCE] = _elapsed_ms(start)

        has_root_and_version = bool(document.get("root")) and bool(document.get("version"))

        # Layer 6: token-usage-compliance
        if config.validate_token_usage_compliance and has_root_and_version:
            start = time.perf_counter()
            self._fold_token_result(document, config, run)
            run.timing[ValidationLayer.TOKEN_USAGE_COMPLIANCE] = _elapsed_ms(start)

        # Layer 7: icon-compliance
        if config.validate_icon_compliance and has_root_and_version:
            start = time.perf_counter()
            self._fold_icon_result(document, config, run)
            run.timing[ValidationLayer.ICON_COMPLIANCE] = _elapsed_ms(start)

        if config.strict and run.warnings:
            promoted = (w.model_copy(update={"severity": Severity.ERROR}) for w in run.warnings)
            run.errors.extend(promoted)
            run.warnings = []

        valid = not any(e.severity is Severity.ERROR for e in run.errors)
        logger.debug(
            "Chain finished: valid=%s errors=%d warnings=%d timing=%s",
            valid,
            len(run.errors),
            len(run.warnings),
            run.timing,
        )
        return ChainResult(
            valid=valid,
            errors=run.errors,
            warnings=run.warnings,
            timing=run.timing,
            schema=document if valid else None,
            document=document,
        )

    # -- layers --------------------------------------------------------------

    @staticmethod
    def _parse(text: str) -> tuple[Any, ChainValidationError | None]:
        if not text or not text.strip():
            return None, ChainValidationError(
                layer=ValidationLayer.JSON_SYNTAX,
                severity=Severity.ERROR,
                path="",
                message="Empty input: JSON string is empty or contains only whitespace",
                suggestion="Provide a JSON object describing the UI",
                line=1,
                column=1,
            )
        offset = find_excessive_nesting(text)
        if offset is not None:
            return None, ChainValidationError(
                layer=ValidationLayer.JSON_SYNTAX,
                severity=Severity.ERROR,
                path="",
                message=f"Maximum nesting depth ({MAX_DEPTH}) exceeded",
                suggestion="Flatten the component tree",
                line=text.count("\n", 0, offset) + 1,
                column=offset - text.rfind("\n", 0, offset),
            )
        try:
            return json.loads(text, parse_constant=_reject_constant), None
        except json.JSONDecodeError as exc:
            return None, ChainValidationError(
                layer=ValidationLayer.JSON_SYNTAX,
                severity=Severity.ERROR,
                path="",
                message=exc.msg,
                suggestion=SYNTAX_SUGGESTION,
                line=exc.lineno,
                column=exc.colno,
            )
        except (ValueError, RecursionError) as exc:
            return None, ChainValidationError(
                layer=ValidationLayer.JSON_SYNTAX,
                severity=Severity.ERROR,
                path="",
                message=str(exc),
                suggestion=SYNTAX_SUGGESTION,
            )

    def _fold_token_result(self, document: dict[str, Any], config: ChainConfig, run: _Run) -> None:
        checker = config.token_checker or self._token_checker
        result = checker(document, self._tokens)
        for issue in result.errors:
            run.errors.append(
                ChainValidationError(
                    layer=ValidationLayer.TOKEN_USAGE_COMPLIANCE,
                    severity=Severity.ERROR,
                    path=issue.path,
                    message=issue.message,
                    suggestion=issue.suggestion,
                )
            )
        for issue in result.warnings:
            run.warnings.append(
                ChainValidationError(
                    layer=ValidationLayer.TOKEN_USAGE_COMPLIANCE,
                    severity=Severity.WARNING,
                    path=issue.path,
                    message=issue.message,
                    suggestion=issue.suggestion,
                )
            )

    def _fold_icon_result(self, document: dict[str, Any], config: ChainConfig, run: _Run) -> None:
        checker = config.icon_checker or self._icon_checker
        for warning in checker(document).warnings:
            run.warnings.append(
                ChainValidationError(
                    layer=ValidationLayer.ICON_COMPLIANCE,
                    severity=Severity.WARNING,
                    path=warning.path,
                    message=warning.message,
                    suggestion=warning.suggestion,
                )
            )


def execute_validation_chain(
    text: str,
    config: ChainConfig | None = None,
    *,
    catalog: CatalogLike | None = None,
    tokens: DesignTokens | None = None,
) -> ChainResult:
    """Run a one-off chain with the given (or default) catalog and tokens."""
    return ValidationChain(catalog, tokens).execute(text, config)
