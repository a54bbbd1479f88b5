"""Style-compliance layer: hardcoded color literals in ``style`` objects."""

from __future__ import annotations

from typing import Any

from uiguard.design.colors import COLOR_PROPERTIES, is_hardcoded_color, suggest_color_token
from uiguard.models.errors import ChainValidationError, Severity, ValidationLayer
from uiguard.models.tokens import DesignTokens

GENERIC_COLOR_SUGGESTION = (
    "Use a Design Token color (e.g., colors.primary.500) instead of a hardcoded value"
)


def _scan_style(
    style: dict[str, Any], path: str, tokens: DesignTokens, out: list[ChainValidationError]
) -> None:
    for key, value in style.items():
        if isinstance(value, dict):
            # Nested states such as {"hover": {"color": ...}}.
            _scan_style(value, f"{path}.{key}", tokens, out)
        elif key in COLOR_PROPERTIES and isinstance(value, str) and is_hardcoded_color(value):
            token = suggest_color_token(value, tokens)
            out.append(
                ChainValidationError(
                    layer=ValidationLayer.STYLE_COMPLIANCE,
                    severity=Severity.WARNING,
                    path=f"{path}.{key}",
                    message=f'Hardcoded color value "{value}" found',
                    suggestion=f"Use Design Token: {token}" if token else GENERIC_COLOR_SUGGESTION,
                )
            )


def check_style_compliance(
    document: dict[str, Any], tokens: DesignTokens
) -> list[ChainValidationError]:
    """Warn about every hardcoded color under a component's ``style``."""
    warnings: list[ChainValidationError] = []

    def visit(component: Any, path: str) -> None:
        if not isinstance(component, dict):
            return
        style = component.get("style")
        if isinstance(style, dict):
            _scan_style(style, f"{path}.style", tokens, warnings)
        children = component.get("children")
        if isinstance(children, list):
            for index, child in enumerate(children):
                visit(child, f"{path}.children[{index}]")

    visit(document.get("root"), "root")
    return warnings
