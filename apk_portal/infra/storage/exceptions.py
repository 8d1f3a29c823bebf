"""Storage-specific exceptions for S3/MinIO operations.

Every storage failure is raised as a ``StorageError`` subclass carrying an
error code, an HTTP status and metadata, so portal routes can catch a single
``AppException`` type at their boundary.

Example:
    ```python
    from apk_portal.infra.storage.exceptions import map_boto_error

    try:
        await client.put_object(Bucket=bucket, Key=key, Body=body)
    except ClientError as e:
        raise map_boto_error(e, operation="upload", key=key) from e
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from apk_portal.core.exceptions import AppException

if TYPE_CHECKING:
    from botocore.exceptions import ClientError


class StorageError(AppException):
    """Base exception for all storage-related errors.

    Attributes:
        code: Error code identifier for programmatic error handling.
        message: Human-readable error message (same as ``detail``).
        status_code: HTTP status code for the error.
        extra: Additional context (operation, key, bucket, AWS error code).
    """

    def __init__(
        self,
        message: str,
        code: str = "STORAGE_ERROR",
        status_code: int = 500,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        super().__init__(
            status_code=status_code,
            detail=message,
            type=code.lower().replace("_", "-"),
            extra=metadata or {},
        )


class StorageNotConfiguredError(StorageError):
    """Raised when the backend is missing, unknown or not started."""

    def __init__(
        self,
        message: str = "Storage is not configured",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_CONFIGURED",
            status_code=503,
            metadata=metadata,
        )


class StorageFileNotFoundError(StorageError):
    """Raised when the bucket or a requested object does not exist."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_FOUND",
            status_code=404,
            metadata=metadata,
        )


class StorageUploadError(StorageError):
    """Raised when writing an object fails for a reason other than a ClientError."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            metadata=metadata,
        )


class StoragePermissionError(StorageError):
    """Raised when credentials are rejected or lack access to the bucket.

    Example:
        ```python
        raise StoragePermissionError(
            "Access Denied",
            metadata={"bucket": bucket, "operation": "upload"},
        )
        ```
    """

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_PERMISSION_DENIED",
            status_code=403,
            metadata=metadata,
        )


class StorageQuotaExceededError(StorageError):
    """Raised when the account or bucket hits a storage limit."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_QUOTA_EXCEEDED",
            status_code=507,
            metadata=metadata,
        )


class StorageValidationError(StorageError):
    """Raised when a key, file name or request parameter is rejected.

    Example:
        ```python
        raise StorageValidationError(
            "Invalid file name",
            metadata={"filename": ".."},
        )
        ```
    """

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_VALIDATION_ERROR",
            status_code=400,
            metadata=metadata,
        )


class StorageTimeoutError(StorageError):
    """Raised when the object store times out or throttles the request."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_TIMEOUT",
            status_code=504,
            metadata=metadata,
        )


_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket"})
_PERMISSION_CODES = frozenset(
    {
        "AccessDenied",
        "ExpiredToken",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "InvalidToken",
        "TokenRefreshRequired",
    }
)
_TIMEOUT_CODES = frozenset({"RequestTimeout", "RequestTimeTooSkewed", "SlowDown"})
_QUOTA_CODES = frozenset({"QuotaExceeded", "TooManyBuckets", "AccountProblem"})
_VALIDATION_CODES = frozenset(
    {
        "InvalidRequest",
        "InvalidArgument",
        "MalformedXML",
        "InvalidBucketName",
        "InvalidObjectState",
        "KeyTooLongError",
        "MetadataTooLarge",
    }
)


def map_boto_error(
    error: ClientError,
    operation: str,
    key: str | None = None,
) -> StorageError:
    """Map a botocore ClientError to a domain-specific StorageError.

    The AWS error message becomes the exception message unchanged; the
    operation, AWS error code and request id go into the metadata.

    Args:
        error: The botocore ClientError to map.
        operation: The storage operation being performed ("list", "upload", "delete").
        key: Optional object key or prefix being operated on.

    Returns:
        The matching StorageError subclass instance.

    Error Code Mappings:
        - NoSuchKey, NoSuchBucket -> StorageFileNotFoundError (404)
        - AccessDenied, ExpiredToken, InvalidAccessKeyId -> StoragePermissionError (403)
        - RequestTimeout, RequestTimeTooSkewed, SlowDown -> StorageTimeoutError (504)
        - QuotaExceeded, TooManyBuckets -> StorageQuotaExceededError (507)
        - InvalidRequest, InvalidArgument, MalformedXML -> StorageValidationError (400)
        - Others -> StorageError (500)
    """
    error_info = error.response.get("Error", {})
    error_code = error_info.get("Code", "Unknown")
    error_message = error_info.get("Message") or str(error)

    metadata: dict[str, Any] = {
        "operation": operation,
        "aws_error_code": error_code,
        "aws_error_message": error_message,
        "request_id": error.response.get("ResponseMetadata", {}).get("RequestId"),
    }
    if key:
        metadata["key"] = key
    if "BucketName" in error_info:
        metadata["bucket"] = error_info["BucketName"]  # type: ignore[typeddict-item]

    if error_code in _NOT_FOUND_CODES:
        return StorageFileNotFoundError(error_message, metadata=metadata)
    if error_code in _PERMISSION_CODES:
        return StoragePermissionError(error_message, metadata=metadata)
    if error_code in _TIMEOUT_CODES:
        return StorageTimeoutError(error_message, metadata=metadata)
    if error_code in _QUOTA_CODES:
        return StorageQuotaExceededError(error_message, metadata=metadata)
    if error_code in _VALIDATION_CODES:
        return StorageValidationError(error_message, metadata=metadata)

    return StorageError(error_message, metadata=metadata)
