"""Design token models used to suggest replacements for hardcoded styles."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DesignTokens(BaseModel):
    """Color scales and spacing steps of the design system.

    ``colors`` maps a semantic scale name (``primary``, ``neutral`` ...) to a
    mapping of shade (``"50"`` .. ``"950"``) to a hex color.
    """

    colors: dict[str, dict[str, str]] = Field(default_factory=dict)
    spacing: dict[str, str] = Field(default_factory=dict)

    def iter_colors(self) -> list[tuple[str, str, str]]:
        """Return ``(scale, shade, hex)`` triples in declaration order."""
        return [
            (scale, shade, value)
            for scale, shades in self.colors.items()
            for shade, value in shades.items()
        ]
