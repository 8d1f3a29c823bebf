"""Dependencies for the portal endpoints."""

from typing import Annotated

from fastapi import Depends, Request

from apk_portal.infra.storage.exceptions import StorageNotConfiguredError

from .rendering import PortalRenderer, get_renderer
from .service import PackageService


def get_package_service(request: Request) -> PackageService:
    """Return the PackageService wired onto the app by create_app()."""
    service = getattr(request.app.state, "package_service", None)
    if service is None:
        raise StorageNotConfiguredError("Package service is not configured")
    return service


def get_portal_renderer(request: Request) -> PortalRenderer:
    return get_renderer(request.app.title)


PackageServiceDep = Annotated[PackageService, Depends(get_package_service)]
PortalRendererDep = Annotated[PortalRenderer, Depends(get_portal_renderer)]

__all__ = ["PackageServiceDep", "PortalRendererDep"]
