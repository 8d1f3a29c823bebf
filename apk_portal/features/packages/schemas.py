"""Schemas for stored packages."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

BYTES_PER_MB = 1024 * 1024


class StoredPackage(BaseModel):
    """An uploaded package as shown in the portal listing."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Object key, e.g. apks/1735689600123-app.apk")
    size_bytes: int = Field(ge=0)
    last_modified: datetime
    url: str = Field(description="Public download URL")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size_mb(self) -> str:
        """Size in mebibytes with two decimals, e.g. ``"0.00"`` for 1 KiB."""
        return f"{self.size_bytes / BYTES_PER_MB:.2f}"
