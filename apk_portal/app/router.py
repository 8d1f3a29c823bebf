"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apk_portal.features.health.router import router as health_router
from apk_portal.features.packages.router import router as packages_router

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI) -> None:
    """Register all feature routers with the application.

    The portal page and its forms live at the root, as do the health probes.
    """
    app.include_router(packages_router)
    app.include_router(health_router)
    logger.debug("Routers registered", extra={"routes": len(app.routes)})
