"""Rendering of chain errors as a corrective block for the next generation."""

from __future__ import annotations

from collections.abc import Iterable

from uiguard.models.errors import ChainValidationError, ValidationLayer

ERRORS_HEADER = "## Previous Attempt Errors (MUST FIX)"

LAYER_LABELS: dict[ValidationLayer, str] = {
    ValidationLayer.JSON_SYNTAX: "JSON Syntax",
    ValidationLayer.SCHEMA_STRUCTURE: "Schema Structure",
    ValidationLayer.COMPONENT_EXISTENCE: "Component",
    ValidationLayer.PROPS_VALIDATION: "Props",
    ValidationLayer.STYLE_COMPLIANCE: "Style",
    ValidationLayer.TOKEN_USAGE_COMPLIANCE: "Token Usage",
    ValidationLayer.ICON_COMPLIANCE: "Icon",
}


def format_error_line(index: int, error: ChainValidationError) -> str:
    line = f"{index}. [{LAYER_LABELS[error.layer]}]"
    if error.line is not None:
        line += f" Line {error.line}"
        if error.column is not None:
            line += f":{error.column}"
        line += ":"
    elif error.path:
        line += f' at "{error.path}":'
    line += f" {error.message}"
    if error.suggestion:
        line += f" ({error.suggestion})"
    return line


def format_errors_for_llm(errors: Iterable[ChainValidationError]) -> str:
    """Numbered error list headed by :data:`ERRORS_HEADER`; empty for no errors."""
    lines = [format_error_line(i, error) for i, error in enumerate(errors, start=1)]
    if not lines:
        return ""
    return "\n".join([ERRORS_HEADER, "", *lines])
