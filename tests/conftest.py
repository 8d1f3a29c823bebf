"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: explicit settings objects for the app factory
    - Storage Fixtures: a started in-memory backend with a fixed clock
    - Application Fixtures: FastAPI app and HTTP client
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
import os

import pytest
from httpx import ASGITransport, AsyncClient

from apk_portal.core.settings import (
    AppSettings,
    LoggingSettings,
    Settings,
    StorageBackendType,
    StorageSettings,
)
from apk_portal.infra.storage.backends.memory import InMemoryBackend
from apk_portal.infra.storage.keys import PackageKeyFactory

# Ensure tests run without external infrastructure
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

TEST_BUCKET = "test-bucket"
TEST_REGION = "eu-west-1"
FIXED_MILLIS = 1_700_000_000_000
FIXED_NOW = datetime(2024, 1, 15, 12, 30, 0, tzinfo=UTC)


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings(
        backend=StorageBackendType.MEMORY,
        bucket=TEST_BUCKET,
        region=TEST_REGION,
    )


@pytest.fixture
def settings(storage_settings: StorageSettings) -> Settings:
    """Settings for an app wired to the in-memory backend."""
    return Settings(
        app=AppSettings(environment="test"),
        storage=storage_settings,
        logging=LoggingSettings(console_enabled=False, file_enabled=False),
    )


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
async def memory_backend() -> AsyncGenerator[InMemoryBackend]:
    """Started in-memory backend whose objects are all stamped FIXED_NOW."""
    backend = InMemoryBackend(bucket=TEST_BUCKET, now=lambda: FIXED_NOW)
    await backend.startup()
    yield backend
    await backend.shutdown()


@pytest.fixture
def key_factory() -> PackageKeyFactory:
    """Key factory whose clock is frozen at FIXED_MILLIS."""
    return PackageKeyFactory("apks/", clock=lambda: FIXED_MILLIS)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(settings: Settings, memory_backend: InMemoryBackend, key_factory: PackageKeyFactory):
    """Portal app over the started in-memory backend.

    ASGITransport does not run the lifespan, so the backend fixture starts
    the backend itself.
    """
    from apk_portal.app.main import create_app

    application = create_app(settings=settings, backend=memory_backend)
    application.state.package_service.key_factory = key_factory
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the portal; redirects are not followed."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
