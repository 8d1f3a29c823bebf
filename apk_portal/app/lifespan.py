"""Application lifespan management.

Startup: logging, then the storage backend. Shutdown runs in reverse.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from apk_portal.infra.logging.config import setup_logging
from apk_portal.infra.storage.exceptions import StorageError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from apk_portal.core.settings import Settings
    from apk_portal.infra.storage.backends.protocol import StorageBackend

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start and stop the resources wired onto ``app.state`` by create_app()."""
    settings: Settings = app.state.settings
    backend: StorageBackend = app.state.storage_backend

    setup_logging(settings.logging)
    logger.info(
        "Starting application",
        extra={
            "service": settings.app.service_name,
            "version": settings.app.version,
            "environment": settings.app.environment,
        },
    )

    try:
        await backend.startup()
        logger.info(
            "Storage backend initialized",
            extra={"backend": backend.backend_name, "bucket": settings.storage.bucket},
        )
    except StorageError as e:
        if settings.storage.startup_require_storage:
            logger.error(
                "Storage backend required but unavailable, failing startup",
                extra={"error": e.detail},
            )
            raise
        logger.warning(
            "Storage backend unavailable, continuing in degraded mode",
            extra={"error": e.detail},
        )

    yield

    logger.info("Shutting down application")
    await backend.shutdown()
