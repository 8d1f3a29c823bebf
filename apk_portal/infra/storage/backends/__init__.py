"""Storage backends implementing the StorageBackend protocol."""

from .factory import create_storage_backend
from .memory import InMemoryBackend
from .protocol import ObjectMetadata, StorageBackend, UploadResult

__all__ = [
    "InMemoryBackend",
    "ObjectMetadata",
    "StorageBackend",
    "UploadResult",
    "create_storage_backend",
]
