"""S3-compatible storage backend implementation.

Implements the StorageBackend protocol for AWS S3, MinIO, and other
S3-compatible services using aioboto3.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from apk_portal.infra.storage.exceptions import (
    StorageError,
    StorageNotConfiguredError,
    StorageUploadError,
    map_boto_error,
)

from ..protocol import ObjectMetadata, UploadResult

if TYPE_CHECKING:
    from apk_portal.core.settings.storage import StorageSettings

logger = logging.getLogger(__name__)


class S3Backend:
    """S3-compatible storage backend.

    Attributes:
        settings: Storage configuration settings
        backend_name: Name identifier for this backend ("s3" or "minio")
        is_ready: Whether the client has been created

    Example:
        backend = S3Backend(settings)
        await backend.startup()
        objects = await backend.list_objects("apks/")
        await backend.shutdown()
    """

    def __init__(self, settings: StorageSettings, session: Any | None = None) -> None:
        """Initialize S3 backend.

        Args:
            settings: Storage settings with S3 configuration
            session: Optional aioboto3 session (a new one is created if None)
        """
        self.settings = settings
        self._session = session or aioboto3.Session()
        self._client: Any = None
        self._client_context: Any = None

    @property
    def backend_name(self) -> str:
        return self.settings.backend.value

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    # ========================================================================
    # Lifecycle Management
    # ========================================================================

    async def startup(self) -> None:
        """Create the S3 client and its connection pool."""
        if self._client is not None:
            logger.debug("S3 backend already initialized")
            return

        logger.info(
            "Initializing S3 backend",
            extra={
                "bucket": self.settings.bucket,
                "endpoint": self.settings.endpoint,
                "region": self.settings.region,
            },
        )

        boto_config = Config(
            retries={
                "max_attempts": self.settings.max_retries,
                "mode": self.settings.retry_mode,
            },
            connect_timeout=self.settings.timeout,
            read_timeout=self.settings.timeout,
            max_pool_connections=self.settings.max_pool_connections,
        )

        try:
            self._client_context = self._session.client(
                "s3",
                **self.settings.get_boto3_config(),
                config=boto_config,
            )
            self._client = await self._client_context.__aenter__()
        except (BotoCoreError, ClientError, ValueError) as e:
            self._client_context = None
            logger.exception("Failed to initialize S3 backend", extra={"error": str(e)})
            raise StorageError(
                f"Failed to initialize S3 backend: {e}",
                code="STORAGE_INITIALIZATION_ERROR",
            ) from e

        logger.info("S3 backend initialized successfully")

    async def shutdown(self) -> None:
        """Close the S3 client."""
        if self._client_context is None:
            logger.debug("S3 backend not initialized, nothing to shutdown")
            return

        logger.info("Shutting down S3 backend")
        try:
            await self._client_context.__aexit__(None, None, None)
        except (BotoCoreError, ClientError, OSError) as e:
            logger.warning("Error closing S3 client", extra={"error": str(e)})
        finally:
            self._client = None
            self._client_context = None

    async def health_check(self) -> bool:
        """HEAD the configured bucket.

        Returns:
            True if the bucket is reachable with the current credentials
        """
        if self._client is None:
            return False

        try:
            await self._client.head_bucket(Bucket=self.settings.bucket)
        except (BotoCoreError, ClientError) as e:
            logger.warning(
                "S3 health check failed",
                extra={"error": str(e), "bucket": self.settings.bucket},
            )
            return False
        return True

    def _ensure_client(self) -> Any:
        """Return the initialized client.

        Raises:
            StorageNotConfiguredError: If startup() has not run
        """
        if self._client is None:
            msg = "S3 backend not initialized. Call startup() first."
            raise StorageNotConfiguredError(msg)
        return self._client

    # ========================================================================
    # Object Operations
    # ========================================================================

    async def list_objects(self, prefix: str = "") -> list[ObjectMetadata]:
        """List all objects under ``prefix``, following continuation tokens.

        Raises:
            StorageError: If any page request fails
        """
        client = self._ensure_client()
        bucket = self.settings.bucket

        objects: list[ObjectMetadata] = []
        kwargs: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
        pages = 0
        try:
            while True:
                response = await client.list_objects_v2(**kwargs)
                pages += 1
                for item in response.get("Contents", []):
                    objects.append(
                        ObjectMetadata(
                            key=item["Key"],
                            size_bytes=item["Size"],
                            last_modified=item["LastModified"],
                            etag=item.get("ETag", "").strip('"') or None,
                            storage_class=item.get("StorageClass"),
                        )
                    )
                token = response.get("NextContinuationToken")
                if not response.get("IsTruncated") or not token:
                    break
                kwargs["ContinuationToken"] = token
        except ClientError as e:
            logger.exception("Failed to list objects in S3", extra={"error": str(e)})
            raise map_boto_error(e, operation="list", key=prefix) from e
        except BotoCoreError as e:
            logger.exception("Unexpected error during S3 list", extra={"error": str(e)})
            raise StorageError(
                str(e),
                code="STORAGE_LIST_ERROR",
                metadata={"prefix": prefix, "bucket": bucket},
            ) from e

        logger.info(
            "Listed objects from S3",
            extra={"bucket": bucket, "prefix": prefix, "count": len(objects), "pages": pages},
        )
        return objects

    async def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> UploadResult:
        """Write ``data`` to ``key`` with a single PutObject (create or overwrite).

        Raises:
            StorageError: If the upload fails
        """
        client = self._ensure_client()
        bucket = self.settings.bucket

        extra_args: dict[str, Any] = {}
        if content_type:
            extra_args["ContentType"] = content_type

        try:
            response = await client.put_object(Bucket=bucket, Key=key, Body=data, **extra_args)
        except ClientError as e:
            logger.exception("Failed to upload object to S3", extra={"error": str(e)})
            raise map_boto_error(e, operation="upload", key=key) from e
        except BotoCoreError as e:
            logger.exception("Unexpected error during S3 upload", extra={"error": str(e)})
            raise StorageUploadError(str(e), metadata={"key": key, "bucket": bucket}) from e

        logger.info(
            "Object uploaded to S3",
            extra={
                "key": key,
                "bucket": bucket,
                "size_bytes": len(data),
                "content_type": content_type,
            },
        )
        return UploadResult(
            key=key,
            bucket=bucket,
            etag=response.get("ETag", "").strip('"') or None,
            size_bytes=len(data),
            checksum_sha256=hashlib.sha256(data).hexdigest(),
            version_id=response.get("VersionId"),
        )

    async def delete_object(self, key: str) -> bool:
        """Delete ``key``; S3 reports success for absent keys too.

        Raises:
            StorageError: If deletion fails
        """
        client = self._ensure_client()
        bucket = self.settings.bucket

        try:
            await client.delete_object(Bucket=bucket, Key=key)
        except ClientError as e:
            logger.exception("Failed to delete object from S3", extra={"error": str(e)})
            raise map_boto_error(e, operation="delete", key=key) from e
        except BotoCoreError as e:
            logger.exception("Unexpected error during S3 deletion", extra={"error": str(e)})
            raise StorageError(
                str(e),
                code="STORAGE_DELETE_ERROR",
                metadata={"key": key, "bucket": bucket},
            ) from e

        logger.info("Object deleted from S3", extra={"key": key, "bucket": bucket})
        return True
