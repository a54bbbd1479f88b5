"""Stream sessions: TTL-scoped StreamingValidator instances for multi-client use."""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

from uiguard.catalog import CatalogLike
from uiguard.streaming.validator import FeedResult, StreamingResult, StreamingValidator


class SessionNotFoundError(KeyError):
    """Raised when a stream ID is not found or has expired."""


class StreamFinalizedError(RuntimeError):
    """Raised when a chunk arrives for a stream that was already finalized."""


@dataclass
class StreamInfo:
    """Public stream metadata (returned by list/get)."""

    stream_id: str
    created_at: datetime
    last_accessed_at: datetime
    chunks_received: int
    chars_received: int
    finalized: bool
    metadata: dict[str, str]


@dataclass
class _Stream:
    stream_id: str
    validator: StreamingValidator
    last_accessed: float  # monotonic clock for TTL checks
    metadata: dict[str, str] = field(default_factory=dict)
    chunks_received: int = 0
    chars_received: int = 0
    finalized: bool = False
    # Serializes feed/finalize on this stream; the validator is not thread-safe.
    lock: threading.Lock = field(default_factory=threading.Lock)
    created_at_wall: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_accessed_wall: datetime = field(default_factory=lambda: datetime.now(UTC))


class StreamSessionManager:
    """Manages TTL-scoped streams, each holding its own ``StreamingValidator``.

    Thread-safe.  Call :meth:`start` to begin the background cleanup thread
    and :meth:`stop` to shut it down.
    """

    def __init__(
        self,
        catalog: CatalogLike | None = None,
        ttl_seconds: int = 600,
        cleanup_interval: int = 60,
    ) -> None:
        self._catalog = catalog
        self._ttl = ttl_seconds
        self._cleanup_interval = cleanup_interval
        self._lock = threading.Lock()
        self._streams: dict[str, _Stream] = {}
        self._stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Start the background cleanup daemon thread."""
        if self._cleanup_thread is not None:
            return
        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(
            target=self._cleanup_loop, daemon=True, name="stream-cleanup"
        )
        self._cleanup_thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._cleanup_thread is not None:
            self._cleanup_thread.join(timeout=5)
            self._cleanup_thread = None

    # -- public API ----------------------------------------------------------

    def create_session(self, metadata: dict[str, str] | None = None) -> StreamInfo:
        stream_id = secrets.token_hex(16)
        stream = _Stream(
            stream_id=stream_id,
            validator=StreamingValidator(self._catalog),
            last_accessed=time.monotonic(),
            metadata=metadata or {},
        )
        with self._lock:
            self._streams[stream_id] = stream
        return self._stream_info(stream)

    def feed(self, stream_id: str, chunk: str) -> FeedResult:
        """Push one chunk into a stream's validator.

        Raises :class:`SessionNotFoundError` if the stream is missing or expired
        and :class:`StreamFinalizedError` once the stream has been finalized.
        """
        stream = self._touch(stream_id)
        with stream.lock:
            if stream.finalized:
                raise StreamFinalizedError(f"Stream '{stream_id}' is already finalized")
            stream.chunks_received += 1
            stream.chars_received += len(chunk)
            return stream.validator.feed(chunk)

    def finalize(self, stream_id: str) -> StreamingResult:
        """Close the stream to further chunks and report the merged outcome.

        Finalizing again returns the same outcome.
        """
        stream = self._touch(stream_id)
        with stream.lock:
            stream.finalized = True
            return stream.validator.finalize()

    def get_session(self, stream_id: str) -> StreamInfo:
        """Get stream info (also refreshes last-accessed)."""
        return self._stream_info(self._touch(stream_id))

    def close_session(self, stream_id: str) -> None:
        with self._lock:
            if stream_id not in self._streams:
                raise SessionNotFoundError(f"Stream '{stream_id}' not found")
            del self._streams[stream_id]

    def list_sessions(self) -> list[StreamInfo]:
        """Return info for all non-expired streams."""
        now_mono = time.monotonic()
        with self._lock:
            return [
                self._stream_info(s)
                for s in self._streams.values()
                if now_mono - s.last_accessed <= self._ttl
            ]

    @property
    def active_count(self) -> int:
        now_mono = time.monotonic()
        with self._lock:
            return sum(1 for s in self._streams.values() if now_mono - s.last_accessed <= self._ttl)

    # -- internal ------------------------------------------------------------

    def _touch(self, stream_id: str) -> _Stream:
        now_mono = time.monotonic()
        with self._lock:
            stream = self._streams.get(stream_id)
            if stream is None:
                raise SessionNotFoundError(f"Stream '{stream_id}' not found")
            # Lazy expiration check
            if now_mono - stream.last_accessed > self._ttl:
                del self._streams[stream_id]
                raise SessionNotFoundError(f"Stream '{stream_id}' has expired")
            stream.last_accessed = now_mono
            stream.last_accessed_wall = datetime.now(UTC)
            return stream

    @staticmethod
    def _stream_info(stream: _Stream) -> StreamInfo:
        return StreamInfo(
            stream_id=stream.stream_id,
            created_at=stream.created_at_wall,
            last_accessed_at=stream.last_accessed_wall,
            chunks_received=stream.chunks_received,
            chars_received=stream.chars_received,
            finalized=stream.finalized,
            metadata=stream.metadata,
        )

    def _purge_expired(self) -> None:
        now_mono = time.monotonic()
        with self._lock:
            expired = [
                sid for sid, s in self._streams.items() if now_mono - s.last_accessed > self._ttl
            ]
            for sid in expired:
                del self._streams[sid]

    def _cleanup_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._cleanup_interval):
            self._purge_expired()
