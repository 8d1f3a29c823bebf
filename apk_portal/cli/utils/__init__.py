"""CLI utilities for running async operations and formatting output."""

from apk_portal.cli.utils.async_runner import coro
from apk_portal.cli.utils.formatters import error, header, info, success, warning

__all__ = [
    "coro",
    "error",
    "header",
    "info",
    "success",
    "warning",
]
