"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app, storage, logging), read from environment
variables and an optional ``.env`` file, validated once and frozen.

Import settings via cached loaders:
    from apk_portal.core.settings import get_storage_settings

Or use the unified settings object that the app factory consumes:
    from apk_portal.core.settings import get_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .loader import get_app_settings, get_logging_settings, get_storage_settings
from .logs import LoggingSettings
from .storage import APK_CONTENT_TYPE, StorageBackendType, StorageSettings
from .unified import Settings, get_settings

__all__ = [
    "APK_CONTENT_TYPE",
    "AppSettings",
    "LoggingSettings",
    "Settings",
    "StorageBackendType",
    "StorageSettings",
    "get_app_settings",
    "get_logging_settings",
    "get_settings",
    "get_storage_settings",
]
