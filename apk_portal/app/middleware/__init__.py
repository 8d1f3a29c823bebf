"""Middleware configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .request_id import RequestIDMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI


def configure_middleware(app: FastAPI) -> None:
    """Register middleware on the application."""
    app.add_middleware(RequestIDMiddleware)


__all__ = ["RequestIDMiddleware", "configure_middleware"]
