"""Design-token usage checker.

Hardcoded colors and pixel sizes inside ``props.className`` bypass the token
system entirely and are reported as errors.  Pixel values in ``style``
spacing fields are reported as warnings.  Color fields under ``style`` are
left to the style-compliance layer of the validation chain.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from uiguard.design.colors import find_colors, nearest_color_token
from uiguard.models.tokens import DesignTokens

SPACING_PROPERTIES = ("padding", "margin", "gap", "width", "height")

PX_TO_TAILWIND: dict[int, str] = {
    0: "0",
    4: "1",
    8: "2",
    16: "4",
    24: "6",
    32: "8",
    48: "12",
    64: "16",
}

_COLOR_CLASS_PREFIXES = (
    "bg-", "text-", "border-", "ring-", "fill-", "stroke-",
    "from-", "via-", "to-", "placeholder-", "divide-",
)
_SPACING_CLASS_PREFIXES = (
    "p-", "px-", "py-", "pt-", "pr-", "pb-", "pl-",
    "m-", "mx-", "my-", "mt-", "mr-", "mb-", "ml-",
    "gap-", "gap-x-", "gap-y-", "space-x-", "space-y-",
    "w-", "h-", "min-w-", "min-h-", "max-w-", "max-h-",
)
_PX_RE = re.compile(r"(\d+)px\b")


class TokenIssueKind(StrEnum):
    HARDCODED_COLOR = "hardcoded-color"
    HARDCODED_SPACING = "hardcoded-spacing"


@dataclass
class TokenIssue:
    path: str
    kind: TokenIssueKind
    message: str
    suggestion: str
    detected_value: str


@dataclass
class TokenComplianceResult:
    errors: list[TokenIssue] = field(default_factory=list)
    warnings: list[TokenIssue] = field(default_factory=list)
    tokenized_values: int = 0
    hardcoded_values: int = 0

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def compliance_score(self) -> int:
        """Share of tokenized values, 0-100 (100 when nothing was styled)."""
        total = self.tokenized_values + self.hardcoded_values
        if total == 0:
            return 100
        return int(self.tokenized_values * 100 / total + 0.5)


TokenChecker = Callable[[Mapping[str, Any], DesignTokens], TokenComplianceResult]


# -- suggestions ---------------------------------------------------------------


def suggest_color_class(value: str, tokens: DesignTokens) -> str:
    match = nearest_color_token(value, tokens)
    if match is None:
        return (
            "Use a Design Token color class (e.g., 'bg-primary-500', 'text-neutral-700') "
            f"instead of '{value}'"
        )
    scale, shade = match
    return f"Use 'bg-{scale}-{shade}' or 'text-{scale}-{shade}' instead of '{value}'"


def suggest_spacing_class(value: str) -> str:
    match = re.search(r"\d+", value)
    if not match:
        return f"Use a Tailwind spacing class (e.g., 'p-4', 'gap-2') instead of '{value}'"
    px = int(match.group(0))
    step = PX_TO_TAILWIND.get(px)
    if step is not None:
        return f"Use 'gap-{step}' or 'p-{step}' instead of '{value}'"
    closest = min(PX_TO_TAILWIND, key=lambda candidate: (abs(candidate - px), candidate))
    step = PX_TO_TAILWIND[closest]
    return f"Use 'gap-{step}' or 'p-{step}' ({closest}px) instead of '{value}'"


def count_tokenized_classes(class_name: str) -> int:
    return sum(
        1
        for cls in class_name.split()
        if cls.startswith(_COLOR_CLASS_PREFIXES) or cls.startswith(_SPACING_CLASS_PREFIXES)
    )


# -- traversal -----------------------------------------------------------------


def _check_class_name(
    class_name: str, path: str, tokens: DesignTokens, result: TokenComplianceResult
) -> None:
    result.tokenized_values += count_tokenized_classes(class_name)
    for color in find_colors(class_name):
        result.hardcoded_values += 1
        result.errors.append(
            TokenIssue(
                path=path,
                kind=TokenIssueKind.HARDCODED_COLOR,
                message=f'Hardcoded color value "{color}" found in className',
                suggestion=suggest_color_class(color, tokens),
                detected_value=color,
            )
        )
    for match in _PX_RE.finditer(class_name):
        value = match.group(0)
        result.hardcoded_values += 1
        result.errors.append(
            TokenIssue(
                path=path,
                kind=TokenIssueKind.HARDCODED_SPACING,
                message=f'Hardcoded spacing value "{value}" found in className',
                suggestion=suggest_spacing_class(value),
                detected_value=value,
            )
        )


def _check_style(style: Mapping[str, Any], path: str, result: TokenComplianceResult) -> None:
    for prop in SPACING_PROPERTIES:
        value = style.get(prop)
        if not isinstance(value, str):
            continue
        for match in _PX_RE.finditer(value):
            px_value = match.group(0)
            result.hardcoded_values += 1
            result.warnings.append(
                TokenIssue(
                    path=f"{path}.{prop}",
                    kind=TokenIssueKind.HARDCODED_SPACING,
                    message=f'Hardcoded spacing value "{px_value}" found in style.{prop}',
                    suggestion=suggest_spacing_class(px_value),
                    detected_value=px_value,
                )
            )


def _visit(
    component: Mapping[str, Any], path: str, tokens: DesignTokens, result: TokenComplianceResult
) -> None:
    props = component.get("props")
    if isinstance(props, Mapping) and isinstance(props.get("className"), str):
        _check_class_name(props["className"], f"{path}.props.className", tokens, result)
    style = component.get("style")
    if isinstance(style, Mapping):
        _check_style(style, f"{path}.style", result)
    children = component.get("children")
    if isinstance(children, list):
        for index, child in enumerate(children):
            if isinstance(child, Mapping):
                _visit(child, f"{path}.children[{index}]", tokens, result)


def check_token_compliance(
    schema: Mapping[str, Any], tokens: DesignTokens
) -> TokenComplianceResult:
    """Scan every component under ``schema["root"]`` for token bypasses."""
    result = TokenComplianceResult()
    root = schema.get("root")
    if isinstance(root, Mapping):
        _visit(root, "root", tokens, result)
    return result
