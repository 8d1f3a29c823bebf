"""HTML rendering of the portal page with Jinja2."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape

if TYPE_CHECKING:
    from .schemas import StoredPackage

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
LAST_MODIFIED_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_localtime(value: datetime) -> str:
    """Render a timestamp in the server's local timezone."""
    return value.astimezone().strftime(LAST_MODIFIED_FORMAT)


class PortalRenderer:
    """Renders the package listing page.

    Autoescaping is on, so keys and URLs are HTML-escaped wherever they
    appear in the page.

    Example:
        renderer = PortalRenderer(title="APK Management Portal")
        html = renderer.render_index(packages)
    """

    def __init__(self, title: str, template_dir: Path = TEMPLATE_DIR) -> None:
        self.title = title
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["localtime"] = format_localtime
        logger.debug("Portal renderer initialized", extra={"template_dir": str(template_dir)})

    def render_index(self, packages: list[StoredPackage]) -> str:
        template = self.env.get_template("index.html")
        return template.render(title=self.title, packages=packages)


@lru_cache(maxsize=4)
def get_renderer(title: str) -> PortalRenderer:
    """Get a cached renderer for the given page title."""
    return PortalRenderer(title=title)
