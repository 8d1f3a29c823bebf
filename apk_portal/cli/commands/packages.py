"""Package management commands.

Talk to the configured object storage directly, using the same key scheme
and public URL template as the web portal.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
import sys

import click

from apk_portal.cli.utils import coro, error, header, info, success
from apk_portal.core.exceptions import AppException
from apk_portal.core.settings import get_storage_settings
from apk_portal.features.packages.rendering import format_localtime
from apk_portal.features.packages.service import PackageService
from apk_portal.infra.storage.backends.factory import create_storage_backend


@asynccontextmanager
async def _package_service() -> AsyncIterator[PackageService]:
    settings = get_storage_settings()
    backend = create_storage_backend(settings)
    await backend.startup()
    try:
        yield PackageService(backend, settings)
    finally:
        await backend.shutdown()


@click.group(name="packages")
def packages() -> None:
    """List, upload, replace and delete stored packages."""


@packages.command(name="list")
@coro
async def list_cmd() -> None:
    """List packages under the key prefix."""
    try:
        async with _package_service() as service:
            items = await service.list_packages()
    except AppException as e:
        error(f"Failed to load APKs: {e.detail}")
        sys.exit(1)

    if not items:
        info("No APKs uploaded yet.")
        return

    header(f"{len(items)} package(s) under {service.prefix}")
    for idx, package in enumerate(items, start=1):
        click.echo(
            f"{idx:>3}  {package.key}  {package.size_mb} MB  "
            f"{format_localtime(package.last_modified)}  {package.url}"
        )


@packages.command(name="upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@coro
async def upload_cmd(path: Path) -> None:
    """Upload a local APK under a new key."""
    data = path.read_bytes()
    try:
        async with _package_service() as service:
            result = await service.upload_package(path.name, data)
            url = service.public_url(result.key)
    except AppException as e:
        error(f"Upload failed: {e.detail}")
        sys.exit(1)

    success(f"Uploaded {result.key} ({result.size_bytes} bytes)")
    click.echo(url)


@packages.command(name="replace")
@click.argument("key")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@coro
async def replace_cmd(key: str, path: Path) -> None:
    """Overwrite the body stored at KEY with a local file."""
    data = path.read_bytes()
    try:
        async with _package_service() as service:
            result = await service.replace_package(key, data)
    except AppException as e:
        error(f"Update failed: {e.detail}")
        sys.exit(1)

    success(f"Replaced {result.key} ({result.size_bytes} bytes)")


@packages.command(name="delete")
@click.argument("key")
@coro
async def delete_cmd(key: str) -> None:
    """Delete the package stored at KEY (absent keys are ignored)."""
    try:
        async with _package_service() as service:
            await service.delete_package(key)
    except AppException as e:
        error(f"Delete failed: {e.detail}")
        sys.exit(1)

    success(f"Deleted {key}")
