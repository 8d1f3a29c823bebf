"""Unit tests for storage backend factory."""

from apk_portal.core.settings.storage import StorageBackendType, StorageSettings
from apk_portal.infra.storage.backends import InMemoryBackend, create_storage_backend
from apk_portal.infra.storage.backends.s3.backend import S3Backend


class TestBackendFactory:
    """Test backend factory creation logic."""

    def test_create_s3_backend(self):
        settings = StorageSettings(
            backend=StorageBackendType.S3,
            bucket="test-bucket",
            access_key="test-key",
            secret_key="test-secret",
        )

        backend = create_storage_backend(settings)

        assert isinstance(backend, S3Backend)
        assert backend.backend_name == "s3"
        assert backend.is_ready is False

    def test_create_minio_backend(self):
        """MinIO uses the same S3-compatible backend."""
        settings = StorageSettings(
            backend=StorageBackendType.MINIO,
            bucket="test-bucket",
            endpoint="http://localhost:9000",
            access_key="minioadmin",
            secret_key="minioadmin",
        )

        backend = create_storage_backend(settings)

        assert isinstance(backend, S3Backend)
        assert backend.backend_name == "minio"

    def test_create_memory_backend(self):
        settings = StorageSettings(backend=StorageBackendType.MEMORY, bucket="local-bucket")

        backend = create_storage_backend(settings)

        assert isinstance(backend, InMemoryBackend)
        assert backend.bucket == "local-bucket"

    def test_backend_type_from_string(self):
        settings = StorageSettings(backend="memory")

        assert isinstance(create_storage_backend(settings), InMemoryBackend)
