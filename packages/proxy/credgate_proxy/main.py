"""FastAPI application entry point for the credgate service."""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI

from credgate_proxy.api import executions, validation
from credgate_proxy.dependencies import get_observability_manager, get_settings
from credgate_proxy.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging, then log startup and shutdown of the service."""
    settings = get_settings()
    get_observability_manager()
    logger.info(
        "application_startup",
        provider=settings.provider,
        probe_timeout_seconds=settings.probe_timeout_seconds,
    )

    yield

    logger.info("application_shutdown", message="credgate service stopped")


def create_app(enable_hsts: bool | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        enable_hsts: Add HSTS headers; read from ENABLE_HSTS when None.
    """
    if enable_hsts is None:
        enable_hsts = os.getenv("ENABLE_HSTS", "false").lower() == "true"

    app = FastAPI(
        title="credgate",
        version="0.1.0",
        description="Validation and quota attribution for user-owned provider keys",
        lifespan=lifespan,
    )
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=enable_hsts)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "provider": get_settings().provider}

    app.include_router(validation.router, prefix="/api")
    app.include_router(executions.router, prefix="/api")
    return app


app = create_app()
