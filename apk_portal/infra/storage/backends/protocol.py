"""Storage backend protocol and normalized data structures.

This module defines:
- Protocol interface that all storage backends must implement
- Normalized data structures shared by the S3 and in-memory backends
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime


# ============================================================================
# Normalized Data Structures
# ============================================================================


@dataclass(frozen=True)
class ObjectMetadata:
    """Normalized object metadata across storage backends.

    Attributes:
        key: Object key, including the prefix
        size_bytes: Object size in bytes
        last_modified: Last modification timestamp (timezone-aware)
        content_type: MIME type, when the backend reports it
        etag: Entity tag for version identification
        storage_class: Storage tier (e.g. STANDARD), when the backend reports it
    """

    key: str
    size_bytes: int
    last_modified: datetime
    content_type: str | None = None
    etag: str | None = None
    storage_class: str | None = None


@dataclass(frozen=True)
class UploadResult:
    """Result of an upload operation.

    Attributes:
        key: Object key where the body was written
        bucket: Bucket name
        etag: Entity tag of the written object
        size_bytes: Size of the written object in bytes
        checksum_sha256: SHA256 checksum of the body
        version_id: Object version, on buckets with versioning enabled
    """

    key: str
    bucket: str
    etag: str | None
    size_bytes: int
    checksum_sha256: str | None
    version_id: str | None = None


# ============================================================================
# Storage Backend Protocol
# ============================================================================


class StorageBackend(Protocol):
    """Protocol interface for storage backends.

    Uses structural typing (Protocol) rather than inheritance, so the portal
    depends only on these operations and never on a concrete client.

    Example:
        class S3Backend:
            @property
            def backend_name(self) -> str:
                return "s3"

            async def upload_object(self, key: str, data: bytes, ...) -> UploadResult:
                ...
    """

    @property
    def backend_name(self) -> str:
        """Name of the backend (e.g., 's3', 'memory')."""
        ...

    @property
    def is_ready(self) -> bool:
        """Check if backend is initialized and ready for operations."""
        ...

    async def startup(self) -> None:
        """Initialize backend (create clients, connection pools, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Gracefully shutdown backend (close connections, cleanup resources)."""
        ...

    async def health_check(self) -> bool:
        """Check backend health and connectivity.

        Returns:
            True if healthy, False otherwise
        """
        ...

    async def list_objects(self, prefix: str = "") -> list[ObjectMetadata]:
        """List every object whose key starts with ``prefix``.

        The full set is returned in backend order; paging is handled inside
        the backend.

        Raises:
            StorageError: If listing fails
        """
        ...

    async def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> UploadResult:
        """Create or overwrite the object at ``key``.

        Raises:
            StorageError: If the write fails
        """
        ...

    async def delete_object(self, key: str) -> bool:
        """Delete the object at ``key``.

        Deleting an absent key is not an error.

        Raises:
            StorageError: If deletion fails
        """
        ...
