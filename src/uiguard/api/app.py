"""FastAPI application factory for uiguard."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from uiguard import __version__
from uiguard.api.deps import init_services, reset_services
from uiguard.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from uiguard.api.routers import streams, validation
from uiguard.api.schemas import HealthResponse
from uiguard.catalog import load_catalog
from uiguard.chain.pipeline import ValidationChain
from uiguard.design.tokens import load_tokens
from uiguard.settings import Settings
from uiguard.streaming.sessions import StreamSessionManager

logger = logging.getLogger("uiguard.api")


def build_chain(settings: Settings) -> ValidationChain:
    """Validation chain over the configured (or packaged) catalog and tokens."""
    return ValidationChain(
        catalog=load_catalog(settings.catalog_path),
        tokens=load_tokens(settings.tokens_path),
    )


def build_stream_manager(settings: Settings, chain: ValidationChain) -> StreamSessionManager:
    return StreamSessionManager(
        catalog=chain.catalog,
        ttl_seconds=settings.session_ttl_seconds,
        cleanup_interval=settings.session_cleanup_interval,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Start/stop the stream manager alongside the application."""
    settings: Settings = app.state.settings
    chain = build_chain(settings)
    mgr = build_stream_manager(settings, chain)
    mgr.start()
    init_services(mgr, chain)
    try:
        yield
    finally:
        mgr.stop()
        reset_services()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="uiguard",
        description="Streaming validation and retry orchestration for generated UI documents.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestBodyLimitMiddleware)

    app.include_router(validation.router, tags=["validation"])
    app.include_router(streams.router, prefix="/streams", tags=["streams"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "uiguard API server v%s starting (host=%s, port=%d)",
        __version__,
        settings.api_server_host,
        settings.effective_port,
    )

    uvicorn.run(
        "uiguard.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
