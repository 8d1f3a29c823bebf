"""S3-compatible object storage configuration settings.

Environment variables use the STORAGE_ prefix. The variable names of the
existing deployments (AWS_S3_BUCKET, AWS_REGION, AWS_ACCESS_KEY_ID,
AWS_SECRET_ACCESS_KEY) are accepted as aliases.

Example:
    STORAGE_BUCKET="apk-releases"
    STORAGE_REGION="eu-west-1"

Supports:
- AWS S3 (default, no endpoint needed)
- MinIO / LocalStack (set STORAGE_ENDPOINT)
- An in-memory backend for local development (STORAGE_BACKEND=memory)
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, Field, SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APK_CONTENT_TYPE = "application/vnd.android.package-archive"


class StorageBackendType(str, Enum):
    """Supported storage backends."""

    S3 = "s3"
    MINIO = "minio"
    MEMORY = "memory"


class StorageSettings(BaseSettings):
    """Object storage settings for the APK bucket."""

    # ──────────────────────────────────────────────────────────────
    # Backend selection
    # ──────────────────────────────────────────────────────────────

    backend: StorageBackendType = Field(
        default=StorageBackendType.S3,
        description="Storage backend: s3, minio or memory",
    )

    # ──────────────────────────────────────────────────────────────
    # S3 Connection Configuration
    # ──────────────────────────────────────────────────────────────

    endpoint: str | None = Field(
        default=None,
        description="S3-compatible endpoint URL (for MinIO/LocalStack). None for AWS S3.",
    )

    bucket: str = Field(
        default="apk-portal",
        min_length=3,
        max_length=63,
        validation_alias=AliasChoices("STORAGE_BUCKET", "AWS_S3_BUCKET"),
        description="Bucket holding the APK objects",
    )

    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("STORAGE_REGION", "AWS_REGION"),
        description="AWS region (used for request signing and public URLs)",
    )

    access_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("STORAGE_ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
        description="S3 access key ID",
    )

    secret_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "STORAGE_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"
        ),
        description="S3 secret access key",
    )

    use_ssl: bool = Field(
        default=True,
        description="Use SSL/TLS for S3 connections (set False for local MinIO without TLS)",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates",
    )

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum number of retry attempts performed by botocore",
    )

    retry_mode: str = Field(
        default="standard",
        description="botocore retry mode: standard, adaptive, or legacy",
    )

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Connect and read timeout in seconds",
    )

    max_pool_connections: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Maximum number of connections in the connection pool",
    )

    # ──────────────────────────────────────────────────────────────
    # Package layout
    # ──────────────────────────────────────────────────────────────

    key_prefix: str = Field(
        default="apks/",
        min_length=1,
        description="Key prefix under which all managed packages live",
    )

    content_type: str = Field(
        default=APK_CONTENT_TYPE,
        description="Content type stored with every uploaded package",
    )

    public_base_url: str | None = Field(
        default=None,
        description="Override for public links, e.g. a CDN. Defaults to the virtual-hosted S3 URL.",
    )

    # ──────────────────────────────────────────────────────────────
    # Service Lifecycle Configuration
    # ──────────────────────────────────────────────────────────────

    startup_require_storage: bool = Field(
        default=False,
        description="Fail application startup if the storage client cannot be created",
    )

    # ──────────────────────────────────────────────────────────────
    # Validators
    # ──────────────────────────────────────────────────────────────

    @field_validator("retry_mode")
    @classmethod
    def _validate_retry_mode(cls, value: str) -> str:
        """Validate retry_mode is one of the allowed values."""
        allowed_modes = {"standard", "adaptive", "legacy"}
        if value not in allowed_modes:
            raise ValueError(f"retry_mode must be one of {allowed_modes}, got {value}")
        return value

    @field_validator("key_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        """Ensure the prefix is a single folder-like segment ending in '/'."""
        value = value.strip("/")
        if not value:
            raise ValueError("key_prefix must not be empty")
        return f"{value}/"

    @field_validator("public_base_url")
    @classmethod
    def _strip_base_url(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else value

    @model_validator(mode="after")
    def _validate_credential_consistency(self) -> StorageSettings:
        """Both credentials are provided together, or neither (IAM role auth)."""
        if (self.access_key is None) != (self.secret_key is None):
            raise ValueError(
                "Both access_key and secret_key must be provided together when using "
                "static credentials. Provide both or neither (for IAM role authentication)."
            )
        return self

    # ──────────────────────────────────────────────────────────────
    # Computed Properties
    # ──────────────────────────────────────────────────────────────

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_static_credentials(self) -> bool:
        """Whether static credentials were supplied."""
        return self.access_key is not None

    def get_boto3_config(self) -> dict[str, object]:
        """Keyword arguments for creating an aioboto3 S3 client.

        Credentials are only included when provided; otherwise boto3 falls
        back to its default credential chain.
        """
        config: dict[str, object] = {
            "region_name": self.region,
            "use_ssl": self.use_ssl,
            "verify": self.verify_ssl,
        }
        if self.access_key is not None and self.secret_key is not None:
            config["aws_access_key_id"] = self.access_key.get_secret_value()
            config["aws_secret_access_key"] = self.secret_key.get_secret_value()
        if self.endpoint:
            config["endpoint_url"] = self.endpoint
        return config

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )
