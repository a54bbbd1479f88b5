"""Stream-scoped endpoints: feed a document chunk by chunk, then finalize."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from uiguard.api.deps import get_stream_manager
from uiguard.api.schemas import (
    ChunkRequest,
    ChunkResponse,
    ComponentDetail,
    FinalizeResponse,
    StreamCreateRequest,
    StreamListResponse,
    StreamResponse,
)
from uiguard.streaming.sessions import (
    SessionNotFoundError,
    StreamFinalizedError,
    StreamInfo,
    StreamSessionManager,
)

router = APIRouter()


# -- helpers -----------------------------------------------------------------


def _not_found(stream_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Stream '{stream_id}' not found")


def _stream_response(info: StreamInfo) -> StreamResponse:
    return StreamResponse(**asdict(info))


# -- stream CRUD -------------------------------------------------------------


@router.post("", response_model=StreamResponse, status_code=201)
async def create_stream(
    body: StreamCreateRequest | None = None,
    mgr: StreamSessionManager = Depends(get_stream_manager),  # noqa: B008
) -> StreamResponse:
    """Open a new stream with its own validator."""
    metadata = body.metadata if body else {}
    return _stream_response(mgr.create_session(metadata=metadata))


@router.get("", response_model=StreamListResponse)
async def list_streams(
    mgr: StreamSessionManager = Depends(get_stream_manager),  # noqa: B008
) -> StreamListResponse:
    return StreamListResponse(streams=[_stream_response(s) for s in mgr.list_sessions()])


@router.get("/{stream_id}", response_model=StreamResponse)
async def get_stream(
    stream_id: str,
    mgr: StreamSessionManager = Depends(get_stream_manager),  # noqa: B008
) -> StreamResponse:
    try:
        return _stream_response(mgr.get_session(stream_id))
    except SessionNotFoundError:
        raise _not_found(stream_id) from None


@router.delete("/{stream_id}", status_code=204)
async def close_stream(
    stream_id: str,
    mgr: StreamSessionManager = Depends(get_stream_manager),  # noqa: B008
) -> None:
    try:
        mgr.close_session(stream_id)
    except SessionNotFoundError:
        raise _not_found(stream_id) from None


# -- validation --------------------------------------------------------------


@router.post("/{stream_id}/chunks", response_model=ChunkResponse)
async def feed_chunk(
    stream_id: str,
    body: ChunkRequest,
    mgr: StreamSessionManager = Depends(get_stream_manager),  # noqa: B008
) -> ChunkResponse:
    """Feed one chunk and return what it newly established."""
    try:
        result = mgr.feed(stream_id, body.chunk)
    except SessionNotFoundError:
        raise _not_found(stream_id) from None
    except StreamFinalizedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from None
    return ChunkResponse(
        partial=result.partial,
        errors=result.errors,
        warnings=result.warnings,
        components=[ComponentDetail(**asdict(c)) for c in result.components],
    )


@router.post("/{stream_id}/finalize", response_model=FinalizeResponse)
async def finalize_stream(
    stream_id: str,
    mgr: StreamSessionManager = Depends(get_stream_manager),  # noqa: B008
) -> FinalizeResponse:
    try:
        result = mgr.finalize(stream_id)
    except SessionNotFoundError:
        raise _not_found(stream_id) from None
    return FinalizeResponse(
        valid=result.valid,
        complete=result.complete,
        errors=result.errors,
        warnings=result.warnings,
        partial_schema=result.partial_schema,
    )
