"""Configuration management commands."""

import json
import sys

import click
from pydantic import ValidationError

from apk_portal.cli.utils import error, info, success, warning
from apk_portal.core.settings import get_settings


@click.group(name="config")
def config() -> None:
    """Configuration management commands."""


@config.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option(
    "--show-secrets/--hide-secrets",
    default=False,
    help="Show sensitive values (storage credentials)",
)
def show(output_format: str, show_secrets: bool) -> None:
    """Display current configuration settings."""
    info("Loading configuration...")

    try:
        settings = get_settings()
    except ValidationError as e:
        error(f"Failed to load configuration: {e}")
        sys.exit(1)

    if not show_secrets:
        warning("Secrets are hidden. Use --show-secrets to display them.")

    storage = settings.storage

    def _secret(value: object) -> object:
        if value is None:
            return None
        return value.get_secret_value() if show_secrets else "***"  # type: ignore[attr-defined]

    config_dict: dict[str, dict[str, object]] = {
        "app": {
            "name": settings.app.service_name,
            "title": settings.app.title,
            "environment": settings.app.environment,
            "debug": settings.app.debug,
            "host": settings.app.host,
            "port": settings.app.port,
        },
        "storage": {
            "backend": storage.backend.value,
            "bucket": storage.bucket,
            "region": storage.region,
            "endpoint": storage.endpoint,
            "access_key": _secret(storage.access_key),
            "secret_key": _secret(storage.secret_key),
            "key_prefix": storage.key_prefix,
            "content_type": storage.content_type,
            "public_base_url": storage.public_base_url,
        },
        "logging": {
            "level": settings.logging.level,
            "json_logs": settings.logging.json_logs,
            "file": settings.logging.effective_file_path,
        },
    }

    if output_format == "json":
        click.echo(json.dumps(config_dict, indent=2, default=str))
    else:
        click.echo("\n" + "=" * 80)
        click.echo("CONFIGURATION SETTINGS")
        click.echo("=" * 80)
        for section, values in config_dict.items():
            click.echo(f"\n[{section.upper()}]")
            for key, value in values.items():
                click.echo(f"  {key:30} = {value}")
        click.echo("\n" + "=" * 80)

    success("Configuration loaded successfully!")
