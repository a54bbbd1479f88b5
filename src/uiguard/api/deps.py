"""Dependency injection for FastAPI: stream manager and validation chain singletons."""

from __future__ import annotations

from uiguard.chain.pipeline import ValidationChain
from uiguard.streaming.sessions import StreamSessionManager

_stream_manager: StreamSessionManager | None = None
_chain: ValidationChain | None = None


def init_services(manager: StreamSessionManager, chain: ValidationChain) -> None:
    """Set the global services (called at app startup)."""
    global _stream_manager, _chain  # noqa: PLW0603
    _stream_manager = manager
    _chain = chain


def get_stream_manager() -> StreamSessionManager:
    """FastAPI ``Depends`` provider for StreamSessionManager."""
    if _stream_manager is None:
        raise RuntimeError("StreamSessionManager not initialised; call init_services() first")
    return _stream_manager


def get_chain() -> ValidationChain:
    if _chain is None:
        raise RuntimeError("ValidationChain not initialised; call init_services() first")
    return _chain


def reset_services() -> None:
    """Clear the global services (for tests)."""
    global _stream_manager, _chain  # noqa: PLW0603
    _stream_manager = None
    _chain = None
