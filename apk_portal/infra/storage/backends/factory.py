"""Backend factory for creating storage backends dynamically."""

from __future__ import annotations

from typing import TYPE_CHECKING

from apk_portal.core.settings.storage import StorageBackendType
from apk_portal.infra.storage.exceptions import StorageNotConfiguredError

if TYPE_CHECKING:
    from apk_portal.core.settings.storage import StorageSettings

    from .protocol import StorageBackend


def create_storage_backend(settings: StorageSettings) -> StorageBackend:
    """Create the backend selected by ``settings.backend``.

    The returned backend is not started; call ``startup()`` before use.

    Raises:
        StorageNotConfiguredError: If the backend type is unsupported

    Example:
        backend = create_storage_backend(get_storage_settings())
        await backend.startup()
        objects = await backend.list_objects("apks/")
        await backend.shutdown()
    """
    backend_type = settings.backend

    match backend_type:
        case StorageBackendType.S3 | StorageBackendType.MINIO:
            # Both S3 and MinIO use the same S3-compatible backend
            from .s3.backend import S3Backend

            return S3Backend(settings)

        case StorageBackendType.MEMORY:
            from .memory import InMemoryBackend

            return InMemoryBackend(bucket=settings.bucket)

        case _:
            msg = (
                f"Unsupported storage backend: {backend_type}. "
                f"Supported backends: {', '.join(t.value for t in StorageBackendType)}"
            )
            raise StorageNotConfiguredError(msg)
