"""Package management operations on top of a storage backend.

The service owns the key scheme and the public URL template; the backend
only moves bytes. Routes and CLI commands both go through this class.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apk_portal.infra.storage.keys import PackageKeyFactory, public_url

from .schemas import StoredPackage

if TYPE_CHECKING:
    from apk_portal.core.settings.storage import StorageSettings
    from apk_portal.infra.storage.backends.protocol import StorageBackend, UploadResult

logger = logging.getLogger(__name__)


class PackageService:
    """List, upload, replace and delete packages under the key prefix.

    Example:
        service = PackageService(backend, settings)
        result = await service.upload_package("app.apk", data)
        packages = await service.list_packages()
    """

    def __init__(
        self,
        backend: StorageBackend,
        settings: StorageSettings,
        key_factory: PackageKeyFactory | None = None,
    ) -> None:
        self.backend = backend
        self.settings = settings
        self.key_factory = key_factory or PackageKeyFactory(settings.key_prefix)

    @property
    def prefix(self) -> str:
        return self.key_factory.prefix

    def public_url(self, key: str) -> str:
        return public_url(
            self.settings.bucket,
            self.settings.region,
            key,
            base_url=self.settings.public_base_url,
        )

    async def list_packages(self) -> list[StoredPackage]:
        """All packages under the prefix, in the backend's listing order.

        Raises:
            StorageError: If the backend listing fails
        """
        objects = await self.backend.list_objects(self.prefix)
        return [
            StoredPackage(
                key=obj.key,
                size_bytes=obj.size_bytes,
                last_modified=obj.last_modified,
                url=self.public_url(obj.key),
            )
            for obj in objects
        ]

    async def upload_package(self, filename: str, data: bytes) -> UploadResult:
        """Store a new package under a freshly minted key.

        Raises:
            StorageValidationError: If ``filename`` has no usable base name
            StorageError: If the write fails
        """
        key = self.key_factory.mint(filename)
        result = await self.backend.upload_object(
            key,
            data,
            content_type=self.settings.content_type,
        )
        logger.info(
            "Package uploaded",
            extra={"key": key, "size_bytes": result.size_bytes, "original_filename": filename},
        )
        return result

    async def replace_package(self, key: str, data: bytes) -> UploadResult:
        """Overwrite the body at ``key``; an absent key is created."""
        result = await self.backend.upload_object(
            key,
            data,
            content_type=self.settings.content_type,
        )
        logger.info("Package replaced", extra={"key": key, "size_bytes": result.size_bytes})
        return result

    async def delete_package(self, key: str) -> None:
        """Delete ``key``; deleting an absent key is not an error."""
        await self.backend.delete_object(key)
        logger.info("Package deleted", extra={"key": key})
