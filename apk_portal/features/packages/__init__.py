"""APK package management feature.

Serves the portal page and its upload, replace and delete forms, backed by
the configured object storage.
"""

from .router import router
from .service import PackageService

__all__ = ["PackageService", "router"]
