"""Main CLI entry point for apk-portal management commands."""

import click

from apk_portal.cli.commands import config, packages, server
from apk_portal.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="1.0.0", prog_name="apk-portal")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """APK Portal CLI - run the portal and manage stored packages.

    \b
    Command Groups:
      serve      Run the web portal
      packages   List, upload, replace and delete packages
      config     Configuration management

    \b
    Quick Start:
      apk-portal serve --port 8090
      apk-portal packages upload ./app-release.apk
      apk-portal packages list
    """
    ctx.ensure_object(dict)


cli.add_command(server.serve)
cli.add_command(packages.packages)
cli.add_command(config.config)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
