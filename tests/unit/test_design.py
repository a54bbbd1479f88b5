"""Tests for design tokens, color matching and the token/icon checkers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from uiguard.catalog import CatalogError
from uiguard.design import (
    check_icon_compliance,
    check_token_compliance,
    detect_emojis,
    find_colors,
    is_hardcoded_color,
    load_tokens,
    parse_color,
    suggest_color_token,
)
from uiguard.design.token_compliance import (
    TokenIssueKind,
    suggest_color_class,
    suggest_spacing_class,
)
from uiguard.models.tokens import DesignTokens


def _schema(root: dict[str, Any]) -> dict[str, Any]:
    return {"version": "1.0", "root": {"id": "root", "type": "Container", **root}}


class TestTokens:
    def test_default_tokens(self, tokens: DesignTokens) -> None:
        assert tokens.colors["primary"]["500"] == "#3b82f6"
        assert tokens.spacing["md"] == "16px"
        assert set(tokens.colors) == {
            "primary",
            "secondary",
            "neutral",
            "success",
            "warning",
            "error",
        }

    def test_iter_colors(self, tokens: DesignTokens) -> None:
        triples = tokens.iter_colors()
        assert triples[0][:2] == ("primary", "50")
        assert len(triples) == sum(len(shades) for shades in tokens.colors.values())

    def test_load_custom_tokens(self, tmp_path: Path) -> None:
        path = tmp_path / "tokens.yaml"
        path.write_text('colors:\n  brand:\n    "500": "#123456"\n', encoding="utf-8")
        tokens = load_tokens(path)
        assert tokens.colors == {"brand": {"500": "#123456"}}

    def test_invalid_tokens(self, tmp_path: Path) -> None:
        path = tmp_path / "tokens.yaml"
        path.write_text("colors: [1, 2]\n", encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid design tokens"):
            load_tokens(path)


class TestColors:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("#fff", (255, 255, 255)),
            ("#3b82f6", (59, 130, 246)),
            ("#3b82f6cc", (59, 130, 246)),
            ("rgb(59, 130, 246)", (59, 130, 246)),
            ("rgba(0,0,0,0.5)", (0, 0, 0)),
            ("hsl(0, 100%, 50%)", (255, 0, 0)),
            ("red", None),
            ("#12", None),
        ],
    )
    def test_parse_color(self, value: str, expected: tuple[int, int, int] | None) -> None:
        assert parse_color(value) == expected

    def test_is_hardcoded_color(self) -> None:
        assert is_hardcoded_color("#abc")
        assert is_hardcoded_color(" rgb(1, 2, 3)")
        assert is_hardcoded_color("hsla(1, 2%, 3%, 0.4)")
        assert not is_hardcoded_color("var(--primary)")
        assert not is_hardcoded_color("colors.primary.500")

    def test_find_colors(self) -> None:
        assert find_colors("bg-[#3b82f6] text-[rgb(1,2,3)] p-4") == ["#3b82f6", "rgb(1,2,3)"]

    def test_exact_token_match(self, tokens: DesignTokens) -> None:
        assert suggest_color_token("#3b82f6", tokens) == "colors.primary.500"

    def test_near_token_match(self, tokens: DesignTokens) -> None:
        assert suggest_color_token("#3a81f5", tokens) == "colors.primary.500"

    def test_far_color_has_no_token(self, tokens: DesignTokens) -> None:
        assert suggest_color_token("#ff00ff", tokens) is None

    def test_color_class_suggestion(self, tokens: DesignTokens) -> None:
        assert suggest_color_class("#3b82f6", tokens) == (
            "Use 'bg-primary-500' or 'text-primary-500' instead of '#3b82f6'"
        )


class TestTokenCompliance:
    def test_class_name_literals_are_errors(self, tokens: DesignTokens) -> None:
        result = check_token_compliance(
            _schema({"props": {"className": "bg-[#3b82f6] p-[13px]"}}), tokens
        )
        assert result.valid is False
        assert [e.kind for e in result.errors] == [
            TokenIssueKind.HARDCODED_COLOR,
            TokenIssueKind.HARDCODED_SPACING,
        ]
        assert result.errors[1].detected_value == "13px"
        assert result.errors[1].suggestion == "Use 'gap-4' or 'p-4' (16px) instead of '13px'"
        assert result.compliance_score == 50

    def test_style_spacing_is_warning(self, tokens: DesignTokens) -> None:
        result = check_token_compliance(
            _schema({"style": {"padding": "8px 16px", "color": "#3b82f6"}}), tokens
        )
        assert result.valid is True
        assert [w.detected_value for w in result.warnings] == ["8px", "16px"]
        assert result.warnings[0].path == "root.style.padding"

    def test_children_are_checked(self, tokens: DesignTokens) -> None:
        result = check_token_compliance(
            _schema({"children": [{"id": "a", "type": "Text", "props": {"className": "m-[7px]"}}]}),
            tokens,
        )
        assert result.errors[0].path == "root.children[0].props.className"

    def test_clean_schema(self, tokens: DesignTokens) -> None:
        result = check_token_compliance(_schema({"props": {"className": "p-4"}}), tokens)
        assert result.valid is True
        assert result.compliance_score == 100

    def test_spacing_suggestions(self) -> None:
        assert suggest_spacing_class("16px") == "Use 'gap-4' or 'p-4' instead of '16px'"
        assert suggest_spacing_class("auto").startswith("Use a Tailwind spacing class")


class TestIconCompliance:
    def test_detect_emojis(self) -> None:
        assert detect_emojis("⚙️ Settings \U0001F50D \U0001F50D") == ["⚙", "\U0001F50D"]
        assert detect_emojis("plain text") == []

    def test_props_and_text_children(self) -> None:
        result = check_icon_compliance(
            _schema(
                {
                    "props": {"title": "\U0001F3E0 Home"},
                    "children": ["Done ✅", {"id": "i", "type": "Icon", "props": {"name": "x"}}],
                }
            )
        )
        assert result.valid is False
        assert [(w.path, w.suggested_icon) for w in result.warnings] == [
            ("root.props.title", "home"),
            ("root.children[0]", "check"),
        ]
        assert result.warnings[0].message == 'Emoji "\U0001F3E0" found in UI'

    def test_unmapped_emoji(self) -> None:
        result = check_icon_compliance(_schema({"props": {"text": "\U0001F680"}}))
        assert result.warnings[0].suggested_icon is None
        assert result.warnings[0].suggestion.startswith("Replace the emoji")
