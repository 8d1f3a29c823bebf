"""In-process storage backend.

Keeps objects in a dict for local development (``STORAGE_BACKEND=memory``)
and for tests. Nothing survives a restart.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from apk_portal.infra.storage.exceptions import StorageNotConfiguredError

from .protocol import ObjectMetadata, UploadResult

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _StoredObject:
    data: bytes
    content_type: str | None
    last_modified: datetime
    etag: str


class InMemoryBackend:
    """Dict-backed implementation of the StorageBackend protocol.

    Keys are listed in insertion order. Overwriting a key keeps its original
    position, like an S3 listing that is sorted by key.

    Example:
        backend = InMemoryBackend(bucket="test-bucket")
        await backend.startup()
        await backend.upload_object("apks/1-app.apk", b"...")
    """

    def __init__(
        self,
        bucket: str = "memory",
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.bucket = bucket
        self._now = now or (lambda: datetime.now(UTC))
        self._objects: dict[str, _StoredObject] = {}
        self._ready = False

    @property
    def backend_name(self) -> str:
        return "memory"

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def startup(self) -> None:
        self._ready = True
        logger.info("In-memory storage backend started", extra={"bucket": self.bucket})

    async def shutdown(self) -> None:
        self._ready = False
        logger.info("In-memory storage backend stopped", extra={"objects": len(self._objects)})

    async def health_check(self) -> bool:
        return self._ready

    def _ensure_ready(self) -> None:
        if not self._ready:
            msg = "Memory backend not initialized. Call startup() first."
            raise StorageNotConfiguredError(msg)

    async def list_objects(self, prefix: str = "") -> list[ObjectMetadata]:
        self._ensure_ready()
        return [
            ObjectMetadata(
                key=key,
                size_bytes=len(obj.data),
                last_modified=obj.last_modified,
                content_type=obj.content_type,
                etag=obj.etag,
            )
            for key, obj in self._objects.items()
            if key.startswith(prefix)
        ]

    async def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> UploadResult:
        self._ensure_ready()
        etag = hashlib.md5(data, usedforsecurity=False).hexdigest()
        self._objects[key] = _StoredObject(
            data=data,
            content_type=content_type,
            last_modified=self._now(),
            etag=etag,
        )
        logger.debug("Object stored in memory", extra={"key": key, "size_bytes": len(data)})
        return UploadResult(
            key=key,
            bucket=self.bucket,
            etag=etag,
            size_bytes=len(data),
            checksum_sha256=hashlib.sha256(data).hexdigest(),
        )

    async def delete_object(self, key: str) -> bool:
        self._ensure_ready()
        self._objects.pop(key, None)
        return True

    def get_object(self, key: str) -> bytes | None:
        """Return the stored body for ``key`` (test and debugging helper)."""
        obj = self._objects.get(key)
        return obj.data if obj else None
