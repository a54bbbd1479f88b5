"""Pydantic domain models for uiguard."""

from uiguard.models.catalog import ComponentDefinition, PropSchema, PropType
from uiguard.models.errors import (
    ChainValidationError,
    ParseError,
    Severity,
    SourceSpan,
    ValidationError,
    ValidationIssue,
    ValidationLayer,
    ValidationWarning,
)
from uiguard.models.tokens import DesignTokens

__all__ = [
    "ChainValidationError",
    "ComponentDefinition",
    "DesignTokens",
    "ParseError",
    "PropSchema",
    "PropType",
    "Severity",
    "SourceSpan",
    "ValidationError",
    "ValidationIssue",
    "ValidationLayer",
    "ValidationWarning",
]
