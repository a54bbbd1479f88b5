"""Streaming validator: checks UI documents while they are still arriving.

Each ``feed`` call pushes one chunk through the incremental parser, then walks
the partial value tree for component declarations whose ``type`` has been
fully received.  Every newly established fact is reported synchronously, in
discovery order, through the optional callbacks and the returned
:class:`FeedResult`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from uiguard.catalog import CatalogLike, default_catalog, format_suggestion
from uiguard.models.errors import ParseError, Severity, ValidationIssue
from uiguard.parser.incremental import IncrementalParser, ParserState

logger = logging.getLogger("uiguard.streaming")

IssueCallback = Callable[[ValidationIssue], None]
ComponentCallback = Callable[["PartialComponent"], None]


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PartialComponent:
    """A component declaration seen in the stream so far."""

    path: str
    type: str | None
    id: str | None
    complete: bool


@dataclass
class FeedResult:
    """Facts newly established by a single ``feed`` call."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    components: list[PartialComponent] = field(default_factory=list)
    partial: bool = True


@dataclass
class ValidatorState:
    parser_state: ParserState
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]
    components: list[PartialComponent]
    validated_paths: set[str]
    failed: bool


@dataclass
class StreamingResult:
    """Outcome of :meth:`StreamingValidator.finalize`."""

    valid: bool
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]
    partial_schema: Any
    complete: bool


# ---------------------------------------------------------------------------
# Component extraction
# ---------------------------------------------------------------------------


def _child_path(parent: str, suffix: str) -> str:
    if not parent:
        return suffix
    if suffix.startswith("["):
        return parent + suffix
    return f"{parent}.{suffix}"


def extract_components(value: Any) -> list[PartialComponent]:
    """Collect every object carrying a ``type`` key, in document order.

    The walk follows ``children`` arrays and nested ``root`` objects, so both
    a full document and a bare component tree are accepted.
    """
    found: list[PartialComponent] = []

    def visit(node: Any, path: str) -> None:
        if not isinstance(node, dict):
            return
        if "type" in node:
            path = path or "root"
            type_name = node.get("type")
            component_id = node.get("id")
            found.append(
                PartialComponent(
                    path=path,
                    type=type_name if isinstance(type_name, str) else None,
                    id=component_id if isinstance(component_id, str) else None,
                    complete="type" in node and "id" in node,
                )
            )
        children = node.get("children")
        if isinstance(children, list):
            for index, child in enumerate(children):
                visit(child, _child_path(path, f"children[{index}]"))
        nested = node.get("root")
        if isinstance(nested, dict):
            visit(nested, _child_path(path, "root"))

    visit(value, "")
    return found


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class StreamingValidator:
    """Validate a UI document chunk by chunk.

    One instance serves one logical stream; call :meth:`reset` before reusing
    it.  After a fatal syntax error further chunks are ignored until reset.
    """

    def __init__(
        self,
        catalog: CatalogLike | None = None,
        *,
        on_error: IssueCallback | None = None,
        on_warning: IssueCallback | None = None,
        on_component: ComponentCallback | None = None,
    ) -> None:
        self._catalog = catalog if catalog is not None else default_catalog()
        self._on_error = on_error
        self._on_warning = on_warning
        self._on_component = on_component
        self._parser = IncrementalParser()
        self._init_tracking()

    def _init_tracking(self) -> None:
        self._errors: list[ValidationIssue] = []
        self._warnings: list[ValidationIssue] = []
        self._issue_keys: set[tuple[str, str]] = set()
        self._components: dict[str, PartialComponent] = {}
        self._validated_paths: set[str] = set()
        self._failed = False

    # -- public API ----------------------------------------------------------

    def feed(self, chunk: str) -> FeedResult:
        """Consume one chunk and report what became known because of it."""
        outcome = FeedResult()
        if self._failed:
            return outcome

        result = self._parser.resume(chunk)
        outcome.partial = result.partial
        if result.error is not None:
            self._failed = True
            error = result.error
            logger.debug("Stream syntax error at %d: %s", error.position, error.message)
            self._emit(self._syntax_issue(result.error), outcome)
            return outcome

        for component in extract_components(result.value):
            previous = self._components.get(component.path)
            if previous is None or self._more_complete(component, previous):
                self._components[component.path] = component
                outcome.components.append(component)
                if self._on_component is not None:
                    self._on_component(component)
            if component.type is not None and component.path not in self._validated_paths:
                self._validated_paths.add(component.path)
                self._check_type(component, outcome)
        return outcome

    def finalize(self) -> StreamingResult:
        """Run whole-document checks and report the merged outcome."""
        outcome = FeedResult()
        result = self._parser.resume("")
        document = result.value

        if isinstance(document, dict):
            if "version" in document and not isinstance(document["version"], str):
                self._emit(
                    ValidationIssue(
                        code="INVALID_VERSION",
                        message="Version should be a string",
                        path="version",
                        severity=Severity.WARNING,
                        suggestion='Use "version": "1.0"',
                    ),
                    outcome,
                )
            root = document.get("root")
            if isinstance(root, dict):
                if "type" not in root:
                    self._emit(
                        ValidationIssue(
                            code="MISSING_ROOT_TYPE",
                            message='Root component is missing "type" field',
                            path="root.type",
                            severity=Severity.WARNING,
                            suggestion='Add "type" field to root component',
                        ),
                        outcome,
                    )
                if "id" not in root:
                    self._emit(
                        ValidationIssue(
                            code="MISSING_ROOT_ID",
                            message='Root component is missing "id" field',
                            path="root.id",
                            severity=Severity.WARNING,
                            suggestion='Add "id" field to root component',
                        ),
                        outcome,
                    )

        complete = not result.partial and result.error is None
        if result.partial and not self._failed:
            self._emit(
                ValidationIssue(
                    code="INCOMPLETE_JSON",
                    message="JSON is incomplete",
                    path=result.pending_path,
                    severity=Severity.WARNING,
                    suggestion="The JSON structure is not complete",
                ),
                outcome,
            )

        return StreamingResult(
            valid=not self._errors,
            errors=list(self._errors),
            warnings=list(self._warnings),
            partial_schema=document,
            complete=complete,
        )

    def get_state(self) -> ValidatorState:
        return ValidatorState(
            parser_state=self._parser.get_state(),
            errors=list(self._errors),
            warnings=list(self._warnings),
            components=list(self._components.values()),
            validated_paths=set(self._validated_paths),
            failed=self._failed,
        )

    def reset(self) -> None:
        self._parser.reset()
        self._init_tracking()

    @property
    def errors(self) -> list[ValidationIssue]:
        return list(self._errors)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return list(self._warnings)

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _more_complete(current: PartialComponent, previous: PartialComponent) -> bool:
        def score(c: PartialComponent) -> int:
            return (c.type is not None) + (c.id is not None) + c.complete

        return score(current) > score(previous)

    @staticmethod
    def _syntax_issue(error: ParseError) -> ValidationIssue:
        return ValidationIssue(
            code="JSON_SYNTAX_ERROR",
            message=error.message,
            path=error.path,
            severity=Severity.ERROR,
            line=error.line,
            column=error.column,
            suggestion="Check for missing brackets, quotes, or commas",
        )

    def _check_type(self, component: PartialComponent, outcome: FeedResult) -> None:
        type_name = component.type or ""
        if self._catalog.is_valid_type(type_name):
            return
        self._emit(
            ValidationIssue(
                code="UNKNOWN_COMPONENT",
                message=f'Unknown component type "{type_name}"',
                path=component.path,
                severity=Severity.ERROR,
                suggestion=format_suggestion(type_name, self._catalog.get_all()),
            ),
            outcome,
        )

    def _emit(self, issue: ValidationIssue, outcome: FeedResult) -> None:
        if issue.key in self._issue_keys:
            return
        self._issue_keys.add(issue.key)
        if issue.severity is Severity.ERROR:
            self._errors.append(issue)
            outcome.errors.append(issue)
            if self._on_error is not None:
                self._on_error(issue)
        else:
            self._warnings.append(issue)
            outcome.warnings.append(issue)
            if self._on_warning is not None:
                self._on_warning(issue)


def stream_validate(
    chunks: str | Iterable[str], catalog: CatalogLike | None = None
) -> StreamingResult:
    """Feed *chunks* (or a whole string) through a fresh validator and finalize."""
    validator = StreamingValidator(catalog)
    if isinstance(chunks, str):
        chunks = [chunks]
    for chunk in chunks:
        validator.feed(chunk)
    return validator.finalize()
