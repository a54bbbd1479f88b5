"""Resumable JSON parser that tolerates truncated input.

The parser is a character-level state machine.  Every open container,
unfinished string and unfinished number/literal is an explicit frame on the
stack, so a chunk boundary can fall anywhere (inside a key, inside an escape
sequence, between a key and its colon) and parsing picks up exactly where it
stopped on the next ``resume`` call.  Truncation is a normal state reported
through ``partial=True``; only structurally invalid characters produce a
``ParseError``.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from uiguard.models.errors import ParseError

MAX_DEPTH = 100

_WHITESPACE = frozenset(" \t\r\n")
_NUMBER_CHARS = frozenset("0123456789+-.eE")
_NUMBER_START = frozenset("-0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_LITERALS: dict[str, bool | None] = {"true": True, "false": False, "null": None}
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class FrameKind(StrEnum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    VALUE = "value"


@dataclass
class StackFrame:
    """One not-yet-closed construct.

    Container frames hold the live dict/list they are filling.  ``key`` is the
    object key whose value is pending; ``index`` is the array slot being
    filled.  String frames accumulate decoded characters in ``value`` (a list)
    and keep an unfinished escape sequence in ``escape``; value frames hold the
    raw text of a number or literal.
    """

    kind: FrameKind
    key: str | None = None
    index: int | None = None
    value: Any = None
    expecting_key: bool = False
    expecting_value: bool = False
    is_key: bool = False
    escape: str | None = None


@dataclass
class ParserState:
    """Complete resumable state of one parser instance."""

    stack: list[StackFrame] = field(default_factory=list)
    position: int = 0
    line: int = 1
    column: int = 1
    consumed: int = 0
    # Append-only; snapshots share the list and read their own prefix.
    chunks: list[str] = field(default_factory=list)
    chunk_count: int = 0
    root: Any = None
    has_root: bool = False
    complete: bool = False
    error: ParseError | None = None

    @property
    def buffer(self) -> str:
        """Raw text consumed so far."""
        return "".join(self.chunks[: self.chunk_count])


@dataclass
class ParseResult:
    """Outcome of a single ``resume`` call."""

    partial: bool
    value: Any
    pending_path: str
    state: ParserState
    error: ParseError | None = None


class _SyntaxFault(Exception):
    """Raised internally when a character cannot continue the document."""


def build_path(stack: list[StackFrame]) -> str:
    """Render the location of the innermost pending node.

    Object keys are joined with dots and array slots use brackets, e.g.
    ``root.children[2].props``.  The document itself is the empty path.
    """
    path = ""
    for frame in stack:
        if frame.kind is FrameKind.OBJECT and frame.key is not None:
            path = f"{path}.{frame.key}" if path else frame.key
        elif frame.kind is FrameKind.ARRAY and frame.index is not None:
            path = f"{path}[{frame.index}]"
    return path


def _decode_surrogates(text: str) -> str:
    if any("\ud800" <= ch <= "\udfff" for ch in text):
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return text


class IncrementalParser:
    """Incremental JSON parser.

    Feeding ``A`` then ``B`` yields the same value as feeding ``A + B`` at
    once.  After a fatal ``ParseError`` the parser ignores further input until
    :meth:`reset` is called.
    """

    def __init__(self, max_depth: int = MAX_DEPTH) -> None:
        self._max_depth = max_depth
        self._state = ParserState()

    # -- public API ----------------------------------------------------------

    def get_state(self) -> ParserState:
        """Return a snapshot of the parser state."""
        return copy.deepcopy(self._state)

    def reset(self) -> None:
        self._state = ParserState()

    def resume(self, chunk: str) -> ParseResult:
        """Consume *chunk* and report the value tree built so far.

        An empty chunk performs no work and leaves the state untouched; it is
        used to ask whether the document is complete.
        """
        state = self._state
        if state.error is None and chunk:
            state.chunks.append(chunk)
            state.chunk_count += 1
            try:
                for ch in chunk:
                    self._step(ch)
                    self._advance(ch)
            except _SyntaxFault as fault:
                state.error = ParseError(
                    message=str(fault),
                    line=state.line,
                    column=state.column,
                    path=build_path(state.stack),
                    position=state.position,
                )
        return self._result()

    parse = resume

    # -- result --------------------------------------------------------------

    def _result(self) -> ParseResult:
        state = self._state
        snapshot = self._snapshot()
        return ParseResult(
            partial=not state.complete,
            value=snapshot.root if state.has_root else None,
            pending_path=build_path(state.stack),
            state=snapshot,
            error=state.error,
        )

    def _snapshot(self) -> ParserState:
        """Copy the open spine of the tree and share every closed subtree.

        Closed containers are never written to again, so only the containers
        still on the stack (and an unfinished string buffer) need copying.
        The cost is bounded by the width of the open containers, not by the
        size of the document.  Callers must treat the result as read-only.
        """
        state = self._state
        root = state.root
        stack: list[StackFrame] = []
        parent: StackFrame | None = None
        for frame in state.stack:
            clone = replace(frame)
            if frame.kind is FrameKind.OBJECT or frame.kind is FrameKind.ARRAY:
                clone.value = (
                    dict(frame.value) if frame.kind is FrameKind.OBJECT else list(frame.value)
                )
                if parent is None:
                    root = clone.value
                elif parent.kind is FrameKind.OBJECT:
                    parent.value[parent.key] = clone.value
                else:
                    parent.value[-1] = clone.value
                parent = clone
            elif frame.kind is FrameKind.STRING:
                clone.value = list(frame.value)
            stack.append(clone)
        return replace(state, stack=stack, root=root)

    # -- cursor --------------------------------------------------------------

    def _advance(self, ch: str) -> None:
        state = self._state
        state.position += 1
        state.consumed += 1
        if ch == "\n":
            state.line += 1
            state.column = 1
        else:
            state.column += 1

    # -- dispatch ------------------------------------------------------------

    def _step(self, ch: str) -> None:
        stack = self._state.stack
        top = stack[-1] if stack else None
        if top is not None and top.kind is FrameKind.STRING:
            self._string_char(top, ch)
            return
        if top is not None and top.kind is FrameKind.VALUE:
            if self._value_char(top, ch):
                return
            # A number ended; the terminating character belongs to the parent.
        self._structural_char(ch)

    def _structural_char(self, ch: str) -> None:
        if ch in _WHITESPACE:
            return
        state = self._state
        if not state.stack:
            if state.complete:
                raise _SyntaxFault(f"Unexpected character '{ch}' after end of document")
            self._begin_value(ch)
            return

        top = state.stack[-1]
        if top.kind is FrameKind.OBJECT:
            self._object_char(top, ch)
        else:
            self._array_char(top, ch)

    def _object_char(self, frame: StackFrame, ch: str) -> None:
        if frame.expecting_key:
            if ch == '"':
                self._state.stack.append(StackFrame(kind=FrameKind.STRING, value=[], is_key=True))
            elif ch == "}" and not frame.value:
                self._close_container()
            else:
                raise _SyntaxFault(f"Expected string key, got '{ch}'")
        elif frame.expecting_value:
            self._begin_value(ch)
        elif frame.key is not None:
            if ch != ":":
                raise _SyntaxFault(f"Expected colon after key \"{frame.key}\", got '{ch}'")
            frame.expecting_value = True
        elif ch == ",":
            frame.expecting_key = True
        elif ch == "}":
            self._close_container()
        else:
            raise _SyntaxFault(f"Expected ',' or '}}', got '{ch}'")

    def _array_char(self, frame: StackFrame, ch: str) -> None:
        if frame.expecting_value:
            if ch == "]" and not frame.value:
                self._close_container()
            else:
                self._begin_value(ch)
        elif ch == ",":
            frame.expecting_value = True
            frame.index = len(frame.value)
        elif ch == "]":
            self._close_container()
        else:
            raise _SyntaxFault(f"Expected ',' or ']', got '{ch}'")

    # -- values --------------------------------------------------------------

    def _begin_value(self, ch: str) -> None:
        stack = self._state.stack
        if ch in "{[":
            depth = sum(1 for f in stack if f.kind in (FrameKind.OBJECT, FrameKind.ARRAY))
            if depth >= self._max_depth:
                raise _SyntaxFault(f"Maximum nesting depth ({self._max_depth}) exceeded")
        if ch == "{":
            obj: dict[str, Any] = {}
            self._attach(obj)
            stack.append(StackFrame(kind=FrameKind.OBJECT, value=obj, expecting_key=True))
        elif ch == "[":
            arr: list[Any] = []
            self._attach(arr)
            stack.append(
                StackFrame(kind=FrameKind.ARRAY, value=arr, index=0, expecting_value=True)
            )
        elif ch == '"':
            stack.append(StackFrame(kind=FrameKind.STRING, value=[]))
        elif ch in _NUMBER_START or ch in "tfn":
            stack.append(StackFrame(kind=FrameKind.VALUE, value=ch))
        else:
            raise _SyntaxFault(f"Unexpected character '{ch}'")

    def _attach(self, value: Any) -> None:
        """Place a new value into the innermost container (or as the root)."""
        state = self._state
        parent = state.stack[-1] if state.stack else None
        if parent is None:
            state.root = value
            state.has_root = True
        elif parent.kind is FrameKind.OBJECT:
            parent.value[parent.key] = value
        else:
            parent.value.append(value)

    def _value_completed(self) -> None:
        """Mark the innermost container's pending slot as filled."""
        state = self._state
        parent = state.stack[-1] if state.stack else None
        if parent is None:
            state.complete = True
        elif parent.kind is FrameKind.OBJECT:
            parent.key = None
            parent.expecting_value = False
        else:
            parent.index = None
            parent.expecting_value = False

    def _finish_scalar(self, value: Any) -> None:
        self._state.stack.pop()
        self._attach(value)
        self._value_completed()

    def _close_container(self) -> None:
        self._state.stack.pop()
        self._value_completed()

    # -- strings -------------------------------------------------------------

    def _string_char(self, frame: StackFrame, ch: str) -> None:
        if frame.escape is not None:
            self._escape_char(frame, ch)
        elif ch == "\\":
            frame.escape = ""
        elif ch == '"':
            text = _decode_surrogates("".join(frame.value))
            if frame.is_key:
                self._state.stack.pop()
                owner = self._state.stack[-1]
                owner.key = text
                owner.expecting_key = False
            else:
                self._finish_scalar(text)
        else:
            frame.value.append(ch)

    def _escape_char(self, frame: StackFrame, ch: str) -> None:
        pending = frame.escape or ""
        if not pending:
            if ch == "u":
                frame.escape = "u"
            elif ch in _SIMPLE_ESCAPES:
                frame.value.append(_SIMPLE_ESCAPES[ch])
                frame.escape = None
            else:
                raise _SyntaxFault(f"Invalid escape sequence '\\{ch}'")
            return
        if ch not in _HEX_DIGITS:
            raise _SyntaxFault(f"Invalid unicode escape '\\{pending}{ch}'")
        pending += ch
        if len(pending) == 5:
            frame.value.append(chr(int(pending[1:], 16)))
            frame.escape = None
        else:
            frame.escape = pending

    # -- numbers and literals ------------------------------------------------

    def _value_char(self, frame: StackFrame, ch: str) -> bool:
        """Feed *ch* to a number/literal frame; return False if it ended the token."""
        raw: str = frame.value
        if raw[0] in "tfn":
            candidate = raw + ch
            for literal, value in _LITERALS.items():
                if literal == candidate:
                    self._finish_scalar(value)
                    return True
                if literal.startswith(candidate):
                    frame.value = candidate
                    return True
            raise _SyntaxFault(f"Invalid literal '{candidate}'")
        if ch in _NUMBER_CHARS:
            frame.value = raw + ch
            return True
        self._finish_number(raw)
        return False

    def _finish_number(self, raw: str) -> None:
        if not _NUMBER_RE.fullmatch(raw):
            raise _SyntaxFault(f"Invalid number '{raw}'")
        is_float = any(c in raw for c in ".eE")
        self._finish_scalar(float(raw) if is_float else int(raw))


def parse_incremental(text: str) -> ParseResult:
    """One-shot convenience wrapper around a fresh :class:`IncrementalParser`."""
    return IncrementalParser().resume(text)
