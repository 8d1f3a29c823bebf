"""Object storage for uploaded packages.

Usage:
    from apk_portal.infra.storage import create_storage_backend

    backend = create_storage_backend(get_storage_settings())
    await backend.startup()
"""

from __future__ import annotations

from .backends import (
    InMemoryBackend,
    ObjectMetadata,
    StorageBackend,
    UploadResult,
    create_storage_backend,
)
from .exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageNotConfiguredError,
    StoragePermissionError,
    StorageQuotaExceededError,
    StorageTimeoutError,
    StorageUploadError,
    StorageValidationError,
    map_boto_error,
)
from .keys import PackageKeyFactory, public_url, sanitize_filename

__all__ = [
    "InMemoryBackend",
    "ObjectMetadata",
    "PackageKeyFactory",
    "StorageBackend",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageNotConfiguredError",
    "StoragePermissionError",
    "StorageQuotaExceededError",
    "StorageTimeoutError",
    "StorageUploadError",
    "StorageValidationError",
    "UploadResult",
    "create_storage_backend",
    "map_boto_error",
    "public_url",
    "sanitize_filename",
]
