"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All portal exceptions inherit from this class so routes can catch a
    single type at their boundary.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier.
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=404,
            detail="Object not found",
            type="object-not-found",
            extra={"key": "apks/1700000000000-app.apk"},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            403: "Forbidden",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
            504: "Gateway Timeout",
            507: "Insufficient Storage",
        }
        return titles.get(status_code, "Error")


class ValidationException(AppException):
    """Exception raised when a required form field is missing or unusable.

    Example:
        raise ValidationException(
            detail="Invalid file key",
            extra={"field": "key"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=422,
            detail=detail,
            type=type,
            title="Validation Error",
            extra=extra,
        )


class PortalOperationError(AppException):
    """A portal route failed; rendered to the browser as a plain-text 500.

    The detail is ``"<action> failed: <cause>"``, where the cause is the
    message of the validation or storage error that aborted the request.
    """

    def __init__(
        self,
        action: str,
        cause: Exception,
        extra: dict[str, Any] | None = None,
    ) -> None:
        message = cause.detail if isinstance(cause, AppException) else str(cause)
        self.action = action
        self.cause = cause
        super().__init__(
            status_code=500,
            detail=f"{action}: {message}",
            type="portal-operation-failed",
            extra=extra,
        )
