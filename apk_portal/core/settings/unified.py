"""Unified settings composition.

The application factory takes one ``Settings`` object, built once at
startup, instead of reading ambient configuration at request time.

Usage:
    from apk_portal.core.settings import get_settings

    settings = get_settings()
    print(settings.app.port)
    print(settings.storage.bucket)

Note:
    Each nested settings class still loads from its own environment
    prefix (APP_, STORAGE_, LOG_).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from .app import AppSettings
from .logs import LoggingSettings
from .storage import StorageSettings


class Settings(BaseModel):
    """Unified settings composing all domain settings.

    Example:
        settings = Settings(storage=StorageSettings(backend="memory"))
        assert settings.app.port == 8090
    """

    model_config = ConfigDict(frozen=True)

    app: AppSettings = Field(default_factory=AppSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached).

    Returns:
        Settings: Unified settings with all domain configurations.
    """
    return Settings()
