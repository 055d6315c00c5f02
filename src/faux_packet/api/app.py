"""
FastAPI application for Faux Packet.

Provides the HTTP surface over one in-memory store:
1. Catalog, device and storage endpoints shaped like the Packet API
2. The device metadata endpoint for a deployment-chosen device
3. Health checks
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from faux_packet import __version__
from faux_packet.api.routes import bgp, devices, facilities, health, metadata, storage
from faux_packet.config import settings
from faux_packet.logging_config import (
    LogEventType,
    correlation_id_var,
    log_event,
    set_correlation_id,
)
from faux_packet.services.seed import load_seed
from faux_packet.services.store import MemoryStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    log_event(
        logger,
        LogEventType.APP_START,
        f"Faux Packet API started (metadata device: {app.state.metadata_device or 'none'})",
    )

    yield

    log_event(logger, LogEventType.APP_STOP, "Faux Packet API stopped")


def create_app(
    store: MemoryStore | None = None,
    metadata_device: str | None = None,
    seed_file: Path | str | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Store to serve; a fresh one built from settings by default
        metadata_device: Device served on /metadata; falls back to settings,
            then to the seed file's metadata device
        seed_file: YAML topology to load; falls back to settings
    """
    app = FastAPI(
        title="Faux Packet",
        description="""
In-memory Packet API for exercising clients without a live backend.

## Features

- **Catalog**: facilities and plans
- **Devices**: project scoped bare-metal devices
- **Block Storage**: volumes with attach/detach
- **Metadata**: the storage view a device reads from its metadata service
- **BGP**: per-project BGP configuration

All state is kept in memory and discarded on exit.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    store = store if store is not None else MemoryStore.from_settings()
    metadata_device = metadata_device or settings.metadata_device

    seed_file = seed_file or settings.seed_file
    if seed_file:
        result = load_seed(store, seed_file)
        metadata_device = metadata_device or result.metadata_device

    app.state.store = store
    app.state.metadata_device = metadata_device

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        correlation_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = set_correlation_id(correlation_id)
        started = time.perf_counter()
        try:
            log_event(
                logger,
                LogEventType.REQUEST_START,
                f"{request.method} {request.url.path}",
                level=logging.DEBUG,
            )
            response = await call_next(request)
            duration_ms = (time.perf_counter() - started) * 1000
            log_event(
                logger,
                LogEventType.REQUEST_END,
                f"{request.method} {request.url.path} -> {response.status_code}",
                duration_ms=round(duration_ms, 3),
                status_code=response.status_code,
            )
            response.headers["X-Request-ID"] = correlation_id
            return response
        finally:
            correlation_id_var.reset(token)

    # Register routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(facilities.router, tags=["Catalog"])
    app.include_router(devices.router, tags=["Devices"])
    app.include_router(storage.router, tags=["Storage"])
    app.include_router(bgp.router, tags=["BGP"])
    app.include_router(metadata.router, tags=["Metadata"])

    # Exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request, exc):
        return JSONResponse(
            status_code=400,
            content={"code": "BAD_REQUEST", "message": str(exc)},
        )

    @app.exception_handler(KeyError)
    async def key_error_handler(request, exc):
        return JSONResponse(
            status_code=404,
            content={"code": "NOT_FOUND", "message": str(exc)},
        )

    return app

