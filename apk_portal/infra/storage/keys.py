"""Object key and public URL scheme for uploaded packages.

Keys look like ``apks/1735689600123-app.apk``: the configured prefix, the
upload time in epoch milliseconds, a dash and the client file name with any
directory components removed.
"""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING

from apk_portal.infra.storage.exceptions import StorageValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

_SEPARATORS = re.compile(r"[\\/]")


def sanitize_filename(name: str) -> str:
    """Return the last path component of a client-supplied file name.

    Both ``/`` and ``\\`` count as separators, so ``../../evil.apk`` and
    ``C:\\builds\\app.apk`` reduce to ``evil.apk`` and ``app.apk``.

    Raises:
        StorageValidationError: If nothing usable remains.
    """
    basename = _SEPARATORS.split(name)[-1]
    if basename in {"", ".", ".."}:
        raise StorageValidationError("Invalid file name", metadata={"filename": name})
    return basename


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class PackageKeyFactory:
    """Mints object keys for new uploads.

    The millisecond component never repeats within a process: when the clock
    has not advanced past the last issued value, the last value plus one is
    used instead.

    Example:
        >>> factory = PackageKeyFactory("apks/", clock=lambda: 1000)
        >>> factory.mint("app.apk"), factory.mint("app.apk")
        ('apks/1000-app.apk', 'apks/1001-app.apk')
    """

    def __init__(self, prefix: str, clock: Callable[[], int] | None = None) -> None:
        self.prefix = prefix
        self._clock = clock or _epoch_millis
        self._last_millis: int | None = None

    def next_millis(self) -> int:
        now = self._clock()
        if self._last_millis is not None and now <= self._last_millis:
            now = self._last_millis + 1
        self._last_millis = now
        return now

    def mint(self, filename: str) -> str:
        """Build the key for a new upload of ``filename``."""
        basename = sanitize_filename(filename)
        return f"{self.prefix}{self.next_millis()}-{basename}"


def public_url(bucket: str, region: str, key: str, base_url: str | None = None) -> str:
    """Unauthenticated URL of an object.

    Uses the virtual-hosted S3 form unless ``base_url`` (a CDN or MinIO
    address) is configured.
    """
    if base_url:
        return f"{base_url.rstrip('/')}/{key}"
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"
