"""Tests for the chunk-by-chunk streaming validator."""

from __future__ import annotations

import json
from typing import Any

from uiguard.catalog import ComponentCatalog
from uiguard.models.errors import Severity, ValidationIssue
from uiguard.streaming.validator import (
    PartialComponent,
    StreamingValidator,
    extract_components,
    stream_validate,
)


def _chunks(text: str, size: int) -> list[str]:
    return [text[i : i + size] for i in range(0, len(text), size)]


class TestValidStreams:
    def test_valid_document_character_by_character(
        self, catalog: ComponentCatalog, valid_json: str
    ) -> None:
        validator = StreamingValidator(catalog)
        for ch in valid_json:
            outcome = validator.feed(ch)
            assert outcome.errors == []
        result = validator.finalize()
        assert result.valid is True
        assert result.complete is True
        assert result.errors == []
        assert result.warnings == []
        assert result.partial_schema == json.loads(valid_json)

    def test_feed_reports_partial_flag(self, catalog: ComponentCatalog, valid_json: str) -> None:
        validator = StreamingValidator(catalog)
        assert validator.feed(valid_json[:10]).partial is True
        assert validator.feed(valid_json[10:]).partial is False

    def test_aliases_accepted(self, catalog: ComponentCatalog) -> None:
        text = '{"version": "1.0", "root": {"id": "r", "type": "div"}}'
        result = stream_validate(text, catalog)
        assert result.valid is True

    def test_stream_validate_with_chunks(self, catalog: ComponentCatalog, valid_json: str) -> None:
        result = stream_validate(_chunks(valid_json, 7), catalog)
        assert result.valid is True
        assert result.complete is True


class TestUnknownComponents:
    def test_unknown_type_reported_once(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        first = validator.feed('{"version": "1.0", "root": {"type": "Buttn", "id": "a"')
        second = validator.feed("}}")
        assert [e.code for e in first.errors] == ["UNKNOWN_COMPONENT"]
        assert second.errors == []
        error = validator.errors[0]
        assert error.path == "root"
        assert error.message == 'Unknown component type "Buttn"'
        assert error.suggestion is not None and "Button" in error.suggestion

    def test_unknown_type_not_reported_until_type_complete(
        self, catalog: ComponentCatalog
    ) -> None:
        validator = StreamingValidator(catalog)
        # "Butto" would be unknown; the value is still arriving.
        assert validator.feed('{"root": {"type": "Butto').errors == []
        assert validator.feed('n"}}').errors == []

    def test_nested_child_path(self, catalog: ComponentCatalog) -> None:
        text = json.dumps(
            {
                "version": "1.0",
                "root": {
                    "id": "r",
                    "type": "Container",
                    "children": [
                        {"id": "a", "type": "Text"},
                        {"id": "b", "type": "Foo"},
                    ],
                },
            }
        )
        result = stream_validate(_chunks(text, 3), catalog)
        assert result.valid is False
        assert [e.path for e in result.errors] == ["root.children[1]"]

    def test_dedup_across_many_feeds(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        text = '{"root": {"type": "Nope", "id": "x", "props": {"a": 1, "b": 2, "c": 3}}}'
        for ch in text:
            validator.feed(ch)
        assert len(validator.errors) == 1


class TestCallbacks:
    def test_callbacks_fire_in_discovery_order(self, catalog: ComponentCatalog) -> None:
        events: list[tuple[str, Any]] = []
        validator = StreamingValidator(
            catalog,
            on_error=lambda e: events.append(("error", e.code)),
            on_warning=lambda w: events.append(("warning", w.code)),
            on_component=lambda c: events.append(("component", c.path)),
        )
        validator.feed('{"root": {"type": "Card", "id": "c", "children": [{"type": "Bogus"')
        assert events == [
            ("component", "root"),
            ("component", "root.children[0]"),
            ("error", "UNKNOWN_COMPONENT"),
        ]

    def test_component_reported_again_when_more_complete(
        self, catalog: ComponentCatalog
    ) -> None:
        seen: list[PartialComponent] = []
        validator = StreamingValidator(catalog, on_component=seen.append)
        validator.feed('{"root": {"type": "Card"')
        validator.feed(', "id": "c"}')
        validator.feed("}")
        assert seen == [
            PartialComponent(path="root", type="Card", id=None, complete=False),
            PartialComponent(path="root", type="Card", id="c", complete=True),
        ]

    def test_warning_callback_on_finalize(self, catalog: ComponentCatalog) -> None:
        warnings: list[ValidationIssue] = []
        validator = StreamingValidator(catalog, on_warning=warnings.append)
        validator.feed('{"version": "1.0", "root": {"type": "Card"')
        validator.finalize()
        assert {w.code for w in warnings} == {"MISSING_ROOT_ID", "INCOMPLETE_JSON"}


class TestSyntaxErrors:
    def test_syntax_error_reported_with_location(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        outcome = validator.feed('{"a": ]')
        assert len(outcome.errors) == 1
        error = outcome.errors[0]
        assert error.code == "JSON_SYNTAX_ERROR"
        assert error.severity is Severity.ERROR
        assert error.line == 1
        assert error.column == 7

    def test_input_ignored_after_syntax_error(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        validator.feed('{"a": ]')
        outcome = validator.feed('{"root": {"type": "Bogus"}}')
        assert outcome.errors == []
        assert outcome.components == []
        assert validator.get_state().failed is True

    def test_finalize_after_syntax_error_skips_incomplete_warning(
        self, catalog: ComponentCatalog
    ) -> None:
        validator = StreamingValidator(catalog)
        validator.feed("[1 2")
        result = validator.finalize()
        assert result.valid is False
        assert result.complete is False
        assert all(w.code != "INCOMPLETE_JSON" for w in result.warnings)


class TestFinalize:
    def test_incomplete_document(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        validator.feed('{"version": "1.0", "root": {"type": "Container", "id": "r"')
        result = validator.finalize()
        assert result.complete is False
        assert result.valid is True
        assert [w.code for w in result.warnings] == ["INCOMPLETE_JSON"]
        assert result.warnings[0].path == "root"
        assert result.partial_schema == {
            "version": "1.0",
            "root": {"type": "Container", "id": "r"},
        }

    def test_incomplete_warning_names_cut_off_point(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        validator.feed('{"root": {"type": "Card", "id": "c", "children": [{"type": "Text"')
        result = validator.finalize()
        incomplete = [w for w in result.warnings if w.code == "INCOMPLETE_JSON"]
        assert [w.path for w in incomplete] == ["root.children[0]"]

    def test_non_string_version(self, catalog: ComponentCatalog) -> None:
        text = '{"version": 1, "root": {"type": "Container", "id": "r"}}'
        result = stream_validate(text, catalog)
        assert [w.code for w in result.warnings] == ["INVALID_VERSION"]
        assert result.warnings[0].path == "version"

    def test_root_missing_type_and_id(self, catalog: ComponentCatalog) -> None:
        result = stream_validate('{"version": "1.0", "root": {"props": {}}}', catalog)
        codes = {w.code: w.path for w in result.warnings}
        assert codes == {"MISSING_ROOT_TYPE": "root.type", "MISSING_ROOT_ID": "root.id"}

    def test_finalize_twice_does_not_duplicate(self, catalog: ComponentCatalog) -> None:
        validator = StreamingValidator(catalog)
        validator.feed('{"root": {"type": "Card"')
        first = validator.finalize()
        second = validator.finalize()
        assert len(second.warnings) == len(first.warnings)

    def test_reset_allows_reuse(self, catalog: ComponentCatalog, valid_json: str) -> None:
        validator = StreamingValidator(catalog)
        validator.feed("]")
        validator.reset()
        validator.feed(valid_json)
        result = validator.finalize()
        assert result.valid is True
        assert validator.get_state().failed is False


class TestExtractComponents:
    def test_document_root(self) -> None:
        found = extract_components({"root": {"type": "Card", "children": [{"id": "x"}]}})
        assert found == [PartialComponent(path="root", type="Card", id=None, complete=False)]

    def test_bare_component_tree(self) -> None:
        found = extract_components(
            {"type": "Container", "id": "r", "children": ["text", {"type": "Text", "id": "t"}]}
        )
        assert [c.path for c in found] == ["root", "root.children[1]"]
        assert all(c.complete for c in found)

    def test_non_dict_value(self) -> None:
        assert extract_components([1, 2]) == []
        assert extract_components(None) == []
