"""Streaming validation of UI documents and per-stream session management."""

from uiguard.streaming.sessions import (
    SessionNotFoundError,
    StreamFinalizedError,
    StreamInfo,
    StreamSessionManager,
)
from uiguard.streaming.validator import (
    FeedResult,
    PartialComponent,
    StreamingResult,
    StreamingValidator,
    ValidatorState,
    extract_components,
    stream_validate,
)

__all__ = [
    "FeedResult",
    "PartialComponent",
    "SessionNotFoundError",
    "StreamFinalizedError",
    "StreamInfo",
    "StreamSessionManager",
    "StreamingResult",
    "StreamingValidator",
    "ValidatorState",
    "extract_components",
    "stream_validate",
]
