"""Unit tests for the in-memory storage backend."""
from __future__ import annotations

from datetime import UTC, datetime

import pytest

from apk_portal.infra.storage.backends.memory import InMemoryBackend
from apk_portal.infra.storage.exceptions import StorageNotConfiguredError

NOW = datetime(2024, 5, 1, 8, 0, tzinfo=UTC)


@pytest.fixture
async def backend() -> InMemoryBackend:
    backend = InMemoryBackend(bucket="unit-bucket", now=lambda: NOW)
    await backend.startup()
    return backend


async def test_lifecycle_and_health():
    backend = InMemoryBackend()

    assert backend.backend_name == "memory"
    assert backend.is_ready is False
    assert await backend.health_check() is False

    await backend.startup()
    assert backend.is_ready is True
    assert await backend.health_check() is True

    await backend.shutdown()
    assert backend.is_ready is False


async def test_operations_require_startup():
    backend = InMemoryBackend()

    with pytest.raises(StorageNotConfiguredError):
        await backend.list_objects("apks/")


async def test_upload_then_list(backend: InMemoryBackend):
    result = await backend.upload_object("apks/1-app.apk", b"x" * 1024, content_type="application/vnd.android.package-archive")

    objects = await backend.list_objects("apks/")

    assert result.key == "apks/1-app.apk"
    assert result.bucket == "unit-bucket"
    assert result.size_bytes == 1024
    assert [o.key for o in objects] == ["apks/1-app.apk"]
    assert objects[0].size_bytes == 1024
    assert objects[0].last_modified == NOW
    assert objects[0].content_type == "application/vnd.android.package-archive"


async def test_list_filters_by_prefix_and_keeps_insertion_order(backend: InMemoryBackend):
    await backend.upload_object("apks/2-b.apk", b"b")
    await backend.upload_object("other/1-x.bin", b"x")
    await backend.upload_object("apks/1-a.apk", b"a")

    objects = await backend.list_objects("apks/")

    assert [o.key for o in objects] == ["apks/2-b.apk", "apks/1-a.apk"]


async def test_overwrite_replaces_body_in_place(backend: InMemoryBackend):
    await backend.upload_object("apks/1-a.apk", b"old")
    await backend.upload_object("apks/2-b.apk", b"b")

    await backend.upload_object("apks/1-a.apk", b"new body")

    objects = await backend.list_objects("apks/")
    assert [o.key for o in objects] == ["apks/1-a.apk", "apks/2-b.apk"]
    assert backend.get_object("apks/1-a.apk") == b"new body"


async def test_delete_is_idempotent(backend: InMemoryBackend):
    await backend.upload_object("apks/1-a.apk", b"a")

    assert await backend.delete_object("apks/1-a.apk") is True
    assert await backend.delete_object("apks/1-a.apk") is True
    assert await backend.list_objects("apks/") == []
