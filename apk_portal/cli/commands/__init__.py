"""CLI command modules."""

from apk_portal.cli.commands import config, packages, server

__all__ = ["config", "packages", "server"]
