"""FastAPI application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from apk_portal.app.exception_handlers import configure_exception_handlers
from apk_portal.app.lifespan import lifespan
from apk_portal.app.middleware import configure_middleware
from apk_portal.app.router import setup_routers
from apk_portal.core.settings import Settings, get_settings
from apk_portal.features.packages.service import PackageService
from apk_portal.infra.storage.backends.factory import create_storage_backend

if TYPE_CHECKING:
    from apk_portal.infra.storage.backends.protocol import StorageBackend


def create_app(
    settings: Settings | None = None,
    backend: StorageBackend | None = None,
) -> FastAPI:
    """Create and configure the portal application.

    Args:
        settings: Explicit settings; defaults to the cached environment settings.
        backend: Storage backend to use instead of the one selected by
            ``settings.storage.backend`` (tests pass an InMemoryBackend).

    Returns:
        Configured FastAPI application instance. The backend is started by
        the lifespan, so callers that bypass it must call ``startup()`` themselves.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    backend = backend or create_storage_backend(settings.storage)

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        docs_url=None if app_settings.disable_docs else "/docs",
        redoc_url=None,
        openapi_url=app_settings.get_openapi_url(),
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage_backend = backend
    app.state.package_service = PackageService(backend, settings.storage)

    # Exception handlers before middleware
    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app)

    return app


# Application instance for uvicorn
app = create_app()
