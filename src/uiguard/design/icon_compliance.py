"""Emoji detection: UI documents should use Icon components instead."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

EMOJI_ICON_MAP: dict[str, str] = {
    "\U0001F50D": "search",
    "\U0001F3E0": "home",
    "⚙": "settings",
    "\U0001F4C1": "folder",
    "\U0001F4C2": "folder-open",
    "\U0001F4C4": "file",
    "\U0001F4E6": "package",
    "➕": "plus",
    "➖": "minus",
    "❌": "x",
    "✅": "check",
    "✔": "check",
    "\U0001F4AC": "message-circle",
    "\U0001F514": "bell",
    "✉": "mail",
    "\U0001F464": "user",
    "\U0001F465": "users",
    "⭐": "star",
    "❤": "heart",
    "\U0001F512": "lock",
    "\U0001F513": "unlock",
    "\U0001F4DD": "edit",
    "\U0001F5D1": "trash",
}

_EMOJI_RE = re.compile(
    "["
    "\U0001F300-\U0001F9FF"
    "☀-⛿"
    "✀-➿"
    "⭐-⭕"
    "⏩-⏳"
    "⌚-⌛"
    "▪-▫"
    "▶◀"
    "◻-◾"
    "⤴-⤵"
    "⬅-⬇"
    "⬛-⬜"
    "〰〽㊗㊙"
    "]"
)


@dataclass
class IconWarning:
    path: str
    emoji: str
    suggested_icon: str | None
    suggestion: str

    @property
    def message(self) -> str:
        return f'Emoji "{self.emoji}" found in UI'


@dataclass
class IconComplianceResult:
    warnings: list[IconWarning] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.warnings


IconChecker = Callable[[Mapping[str, Any]], IconComplianceResult]


def detect_emojis(text: str) -> list[str]:
    """Distinct emoji in *text*, in order of first appearance."""
    return list(dict.fromkeys(_EMOJI_RE.findall(text)))


def icon_suggestion(icon: str | None) -> str:
    if icon:
        return f'Use Icon component: {{ "type": "Icon", "props": {{ "name": "{icon}" }} }}'
    return "Replace the emoji with an Icon component from the icon set"


def _scan(text: str, path: str, result: IconComplianceResult) -> None:
    for emoji in detect_emojis(text):
        icon = EMOJI_ICON_MAP.get(emoji)
        result.warnings.append(
            IconWarning(
                path=path, emoji=emoji, suggested_icon=icon, suggestion=icon_suggestion(icon)
            )
        )


def _visit(component: Mapping[str, Any], path: str, result: IconComplianceResult) -> None:
    props = component.get("props")
    if isinstance(props, Mapping):
        for key, value in props.items():
            if isinstance(value, str):
                _scan(value, f"{path}.props.{key}", result)
    children = component.get("children")
    if isinstance(children, list):
        for index, child in enumerate(children):
            child_path = f"{path}.children[{index}]"
            if isinstance(child, str):
                _scan(child, child_path, result)
            elif isinstance(child, Mapping):
                _visit(child, child_path, result)


def check_icon_compliance(schema: Mapping[str, Any]) -> IconComplianceResult:
    result = IconComplianceResult()
    root = schema.get("root")
    if isinstance(root, Mapping):
        _visit(root, "root", result)
    return result
