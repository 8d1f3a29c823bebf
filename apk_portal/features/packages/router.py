"""Portal page and form endpoints.

Every mutation answers with a redirect back to the listing. Any failure,
validation, storage or otherwise, aborts the request with a plain-text 500
whose body names the action, e.g. ``Upload failed: No file uploaded``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse

from apk_portal.core.exceptions import PortalOperationError, ValidationException

from .dependencies import PackageServiceDep, PortalRendererDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["packages"])


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


def _require_key(key: str | None) -> str:
    if not key:
        raise ValidationException("Invalid file key", extra={"field": "key"})
    return key


def _require_file(file: UploadFile | str | None, message: str) -> UploadFile:
    # A plain text "file" field counts as no file
    if file is None or isinstance(file, str) or not file.filename:
        raise ValidationException(message, extra={"field": "file"})
    return file


@router.get("/", response_class=HTMLResponse, summary="List uploaded packages")
async def index(service: PackageServiceDep, renderer: PortalRendererDep) -> HTMLResponse:
    try:
        packages = await service.list_packages()
    except Exception as e:
        logger.exception("Failed to load package listing", extra={"error": str(e)})
        raise PortalOperationError("Failed to load APKs", e) from e

    return HTMLResponse(renderer.render_index(packages))


@router.post("/upload", summary="Upload a new package")
async def upload_package(
    service: PackageServiceDep,
    file: Annotated[UploadFile | str | None, File()] = None,
) -> RedirectResponse:
    try:
        upload = _require_file(file, "No file uploaded")
        data = await upload.read()
        await service.upload_package(upload.filename or "", data)
    except Exception as e:
        logger.exception("Upload failed", extra={"error": str(e)})
        raise PortalOperationError("Upload failed", e) from e

    return _redirect_home()


@router.post("/delete", summary="Delete a package")
async def delete_package(
    service: PackageServiceDep,
    key: Annotated[str | None, Form()] = None,
) -> RedirectResponse:
    try:
        await service.delete_package(_require_key(key))
    except Exception as e:
        logger.exception("Delete failed", extra={"error": str(e), "key": key})
        raise PortalOperationError("Delete failed", e) from e

    return _redirect_home()


@router.post("/update", summary="Replace the body of a package")
async def update_package(
    service: PackageServiceDep,
    key: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | str | None, File()] = None,
) -> RedirectResponse:
    try:
        target = _require_key(key)
        upload = _require_file(file, "No file uploaded for update")
        data = await upload.read()
        await service.replace_package(target, data)
    except Exception as e:
        logger.exception("Update failed", extra={"error": str(e), "key": key})
        raise PortalOperationError("Update failed", e) from e

    return _redirect_home()
