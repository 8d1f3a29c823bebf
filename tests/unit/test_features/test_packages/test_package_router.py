"""Tests for the portal page and form endpoints."""
from __future__ import annotations

from unittest.mock import AsyncMock

from fastapi import status
from httpx import AsyncClient
import pytest

from apk_portal.infra.storage.backends.memory import InMemoryBackend
from apk_portal.infra.storage.exceptions import StorageError, StoragePermissionError

APK = "application/vnd.android.package-archive"
FIRST_KEY = "apks/1700000000000-app.apk"
FIRST_URL = f"https://test-bucket.s3.eu-west-1.amazonaws.com/{FIRST_KEY}"


async def _upload(client: AsyncClient, filename: str = "app.apk", body: bytes = b"\x00" * 1024):
    return await client.post("/upload", files={"file": (filename, body, APK)})


class TestListing:
    async def test_empty_listing(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/html")
        assert "APK Management Portal" in response.text
        assert "No APKs uploaded yet." in response.text
        assert "<table" not in response.text

    async def test_unexpected_list_error_keeps_action_prefix(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(memory_backend, "list_objects", AsyncMock(side_effect=OSError("conn reset")))

        response = await client.get("/")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Failed to load APKs: conn reset"

    async def test_upload_then_list_scenario(self, client: AsyncClient):
        await _upload(client)

        response = await client.get("/")

        assert response.status_code == status.HTTP_200_OK
        html = response.text
        assert "No APKs uploaded yet." not in html
        assert f">{FIRST_KEY}</td>" in html
        assert "0.00 MB" in html
        assert f'href="{FIRST_URL}"' in html
        assert f'copyLink("{FIRST_URL}")' in html
        assert f'<input type="hidden" name="key" value="{FIRST_KEY}" />' in html
        assert html.count('<tr class="bg-white') == 1

    async def test_rows_numbered_in_backend_order(self, client: AsyncClient, memory_backend):
        await memory_backend.upload_object("apks/3-c.apk", b"c" * (3 * 1024 * 1024))
        await memory_backend.upload_object("apks/1-a.apk", b"a")

        html = (await client.get("/")).text

        assert html.index("apks/3-c.apk") < html.index("apks/1-a.apk")
        assert '<td class="px-6 py-4">1</td>' in html
        assert '<td class="px-6 py-4">2</td>' in html
        assert "3.00 MB" in html

    async def test_objects_outside_prefix_hidden(self, client: AsyncClient, memory_backend):
        await memory_backend.upload_object("other/1-x.apk", b"x")

        assert "No APKs uploaded yet." in (await client.get("/")).text

    async def test_keys_are_html_escaped(self, client: AsyncClient):
        await _upload(client, filename="<i>x.apk")

        html = (await client.get("/")).text

        assert "<i>x.apk" not in html
        assert "apks/1700000000000-&lt;i&gt;x.apk" in html

    async def test_list_failure_renders_plain_text_error(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(
            memory_backend,
            "list_objects",
            AsyncMock(side_effect=StoragePermissionError("Access Denied")),
        )

        response = await client.get("/")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Failed to load APKs: Access Denied"
        assert "<table" not in response.text


class TestUpload:
    async def test_upload_redirects_and_stores(self, client: AsyncClient, memory_backend: InMemoryBackend):
        response = await _upload(client)

        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == "/"
        assert memory_backend.get_object(FIRST_KEY) == b"\x00" * 1024
        objects = await memory_backend.list_objects("apks/")
        assert objects[0].content_type == APK

    async def test_upload_strips_client_directories(self, client: AsyncClient, memory_backend):
        await _upload(client, filename="../../evil.apk")

        keys = [o.key for o in await memory_backend.list_objects("")]
        assert keys == ["apks/1700000000000-evil.apk"]

    async def test_same_millisecond_uploads_get_distinct_keys(self, client: AsyncClient, memory_backend):
        await _upload(client)
        await _upload(client)

        keys = [o.key for o in await memory_backend.list_objects("apks/")]
        assert keys == [FIRST_KEY, "apks/1700000000001-app.apk"]

    async def test_missing_file(self, client: AsyncClient, memory_backend):
        response = await client.post("/upload")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Upload failed: No file uploaded"
        assert await memory_backend.list_objects("") == []

    async def test_text_field_instead_of_file(self, client: AsyncClient, memory_backend):
        response = await client.post("/upload", data={"file": "notafile"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Upload failed: No file uploaded"
        assert await memory_backend.list_objects("") == []

    async def test_storage_failure(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(
            memory_backend,
            "upload_object",
            AsyncMock(side_effect=StorageError("Bucket is read-only")),
        )

        response = await _upload(client)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Upload failed: Bucket is read-only"

    async def test_unexpected_error_keeps_action_prefix(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(memory_backend, "upload_object", AsyncMock(side_effect=OSError("conn reset")))

        response = await _upload(client)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Upload failed: conn reset"


class TestDelete:
    async def test_delete_removes_key(self, client: AsyncClient):
        await _upload(client)

        response = await client.post("/delete", data={"key": FIRST_KEY})

        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == "/"
        assert "No APKs uploaded yet." in (await client.get("/")).text

    async def test_delete_absent_key_still_redirects(self, client: AsyncClient):
        response = await client.post("/delete", data={"key": "apks/404-missing.apk"})

        assert response.status_code == status.HTTP_302_FOUND

    async def test_delete_accepts_multipart(self, client: AsyncClient, memory_backend):
        await _upload(client)

        response = await client.post(
            "/delete",
            data={"key": FIRST_KEY},
            files={"unused": ("note.txt", b"", "text/plain")},
        )

        assert response.status_code == status.HTTP_302_FOUND
        assert await memory_backend.list_objects("apks/") == []

    @pytest.mark.parametrize("form", [{}, {"key": ""}])
    async def test_missing_key(self, client: AsyncClient, form: dict[str, str]):
        response = await client.post("/delete", data=form)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Delete failed: Invalid file key"

    async def test_storage_failure(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(
            memory_backend,
            "delete_object",
            AsyncMock(side_effect=StoragePermissionError("Access Denied")),
        )

        response = await client.post("/delete", data={"key": FIRST_KEY})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Delete failed: Access Denied"

    async def test_unexpected_error_keeps_action_prefix(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(memory_backend, "delete_object", AsyncMock(side_effect=RuntimeError("boom")))

        response = await client.post("/delete", data={"key": FIRST_KEY})

        assert response.text == "Delete failed: boom"


class TestUpdate:
    async def test_replace_keeps_key_and_count(self, client: AsyncClient, memory_backend: InMemoryBackend):
        await _upload(client)

        response = await client.post(
            "/update",
            data={"key": FIRST_KEY},
            files={"file": ("app-v2.apk", b"\x01" * 2048, APK)},
        )

        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == "/"
        objects = await memory_backend.list_objects("apks/")
        assert [o.key for o in objects] == [FIRST_KEY]
        assert memory_backend.get_object(FIRST_KEY) == b"\x01" * 2048

    async def test_update_absent_key_creates_it(self, client: AsyncClient, memory_backend):
        response = await client.post(
            "/update",
            data={"key": "apks/42-new.apk"},
            files={"file": ("new.apk", b"new", APK)},
        )

        assert response.status_code == status.HTTP_302_FOUND
        assert memory_backend.get_object("apks/42-new.apk") == b"new"

    async def test_missing_key_checked_before_file(self, client: AsyncClient):
        response = await client.post("/update")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Update failed: Invalid file key"

    async def test_missing_key_with_file(self, client: AsyncClient):
        response = await client.post("/update", files={"file": ("new.apk", b"new", APK)})

        assert response.text == "Update failed: Invalid file key"

    async def test_missing_file(self, client: AsyncClient, memory_backend):
        response = await client.post("/update", data={"key": FIRST_KEY})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Update failed: No file uploaded for update"
        assert memory_backend.get_object(FIRST_KEY) is None

    async def test_text_field_instead_of_file(self, client: AsyncClient, memory_backend):
        response = await client.post("/update", data={"key": FIRST_KEY, "file": "x"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.text == "Update failed: No file uploaded for update"
        assert memory_backend.get_object(FIRST_KEY) is None

    async def test_unexpected_error_keeps_action_prefix(self, client: AsyncClient, memory_backend, monkeypatch):
        monkeypatch.setattr(memory_backend, "upload_object", AsyncMock(side_effect=OSError("conn reset")))

        response = await client.post(
            "/update",
            data={"key": FIRST_KEY},
            files={"file": ("app.apk", b"v2", APK)},
        )

        assert response.text == "Update failed: conn reset"


async def test_responses_carry_request_id(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "req-abc"})

    assert response.headers["x-request-id"] == "req-abc"
