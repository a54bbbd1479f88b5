"""Structured error models for parsing and validation results."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class ValidationLayer(StrEnum):
    """Validation chain layers, in execution order."""

    JSON_SYNTAX = "json-syntax"
    SCHEMA_STRUCTURE = "schema-structure"
    COMPONENT_EXISTENCE = "component-existence"
    PROPS_VALIDATION = "props-validation"
    STYLE_COMPLIANCE = "style-compliance"
    TOKEN_USAGE_COMPLIANCE = "token-usage-compliance"
    ICON_COMPLIANCE = "icon-compliance"


class SourceSpan(BaseModel):
    """Points to exact location in a YAML source for error reporting."""

    file: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class ParseError(BaseModel):
    """A fatal syntax error reported by the incremental parser."""

    model_config = ConfigDict(frozen=True)

    message: str
    line: int
    column: int
    path: str
    position: int


class ValidationIssue(BaseModel):
    """An error or warning produced by the streaming validator.

    Issues are deduplicated by ``(code, path)``.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    path: str
    severity: Severity
    line: int | None = None
    column: int | None = None
    suggestion: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.code, self.path)


ValidationError = ValidationIssue
ValidationWarning = ValidationIssue


class ChainValidationError(BaseModel):
    """A single finding of the validation chain, tagged with its layer."""

    model_config = ConfigDict(frozen=True)

    layer: ValidationLayer
    severity: Severity
    path: str
    message: str
    suggestion: str | None = None
    line: int | None = None
    column: int | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used to compare errors across retry attempts."""
        return (self.layer.value, self.path, self.message)
