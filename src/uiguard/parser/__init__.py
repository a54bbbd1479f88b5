"""Parsers: the incremental JSON parser and the YAML resource loader."""

from uiguard.parser.incremental import (
    MAX_DEPTH,
    FrameKind,
    IncrementalParser,
    ParseResult,
    ParserState,
    StackFrame,
    build_path,
    parse_incremental,
)
from uiguard.parser.loader import SourceMap, TrackedLoader, YAMLSafetyError

__all__ = [
    "MAX_DEPTH",
    "FrameKind",
    "IncrementalParser",
    "ParseResult",
    "ParserState",
    "SourceMap",
    "StackFrame",
    "TrackedLoader",
    "YAMLSafetyError",
    "build_path",
    "parse_incremental",
]
