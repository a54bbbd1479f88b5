"""Color literal detection and nearest-token lookup."""

from __future__ import annotations

import colorsys
import math
import re

from uiguard.models.tokens import DesignTokens

DEFAULT_MAX_DISTANCE = 48.0

# Style properties whose values are colors.
COLOR_PROPERTIES = ("color", "backgroundColor", "borderColor", "background")

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_PREFIX_RE = re.compile(r"^rgba?\s*\(", re.IGNORECASE)
_HSL_PREFIX_RE = re.compile(r"^hsla?\s*\(", re.IGNORECASE)
_RGB_RE = re.compile(
    r"^rgba?\s*\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+%?\s*)?\)$",
    re.IGNORECASE,
)
_HSL_RE = re.compile(
    r"^hsla?\s*\(\s*([\d.]+)(?:deg)?\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*(?:,\s*[\d.]+%?\s*)?\)$",
    re.IGNORECASE,
)

# Color literals embedded in free text such as a className.
EMBEDDED_COLOR_RES = (
    re.compile(r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b"),
    re.compile(r"rgba?\s*\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*(?:,\s*[\d.]+\s*)?\)", re.IGNORECASE),
    re.compile(
        r"hsla?\s*\(\s*\d+\s*,\s*[\d.]+%?\s*,\s*[\d.]+%?\s*(?:,\s*[\d.]+\s*)?\)", re.IGNORECASE
    ),
)

RGB = tuple[int, int, int]


def is_hardcoded_color(value: str) -> bool:
    """True for a hex, ``rgb()/rgba()`` or ``hsl()/hsla()`` literal."""
    value = value.strip()
    return bool(
        _HEX_RE.match(value) or _RGB_PREFIX_RE.match(value) or _HSL_PREFIX_RE.match(value)
    )


def find_colors(text: str) -> list[str]:
    """All color literals appearing anywhere in *text*, hex first."""
    found: list[str] = []
    for pattern in EMBEDDED_COLOR_RES:
        found.extend(match.group(0) for match in pattern.finditer(text))
    return found


def parse_color(value: str) -> RGB | None:
    """Parse a color literal to an ``(r, g, b)`` triple; alpha is ignored."""
    value = value.strip()
    hex_match = _HEX_RE.match(value)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    rgb_match = _RGB_RE.match(value)
    if rgb_match:
        r, g, b = (min(int(part), 255) for part in rgb_match.groups())
        return (r, g, b)

    hsl_match = _HSL_RE.match(value)
    if hsl_match:
        h, s, lightness = (float(part) for part in hsl_match.groups())
        r_f, g_f, b_f = colorsys.hls_to_rgb(
            (h % 360) / 360, min(lightness, 100) / 100, min(s, 100) / 100
        )
        return (round(r_f * 255), round(g_f * 255), round(b_f * 255))
    return None


def color_distance(a: RGB, b: RGB) -> float:
    return math.dist(a, b)


def nearest_color_token(
    value: str, tokens: DesignTokens, max_distance: float = DEFAULT_MAX_DISTANCE
) -> tuple[str, str] | None:
    """Return ``(scale, shade)`` of the closest token within *max_distance*."""
    target = parse_color(value)
    if target is None:
        return None
    best: tuple[float, str, str] | None = None
    for scale, shade, hex_value in tokens.iter_colors():
        candidate = parse_color(hex_value)
        if candidate is None:
            continue
        distance = color_distance(target, candidate)
        if best is None or distance < best[0]:
            best = (distance, scale, shade)
    if best is None or best[0] > max_distance:
        return None
    return best[1], best[2]


def suggest_color_token(
    value: str, tokens: DesignTokens, max_distance: float = DEFAULT_MAX_DISTANCE
) -> str | None:
    """Token reference such as ``colors.primary.500`` for a hardcoded color."""
    match = nearest_color_token(value, tokens, max_distance)
    if match is None:
        return None
    scale, shade = match
    return f"colors.{scale}.{shade}"
