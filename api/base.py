"""Unified API response envelope and error codes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class APIResponse(BaseModel):
    """
    Envelope for every API response: ``{success, message, ...payload}``.

    Payload keys (``token``, ``user``, ``task``, ``tasks``, ``count``...)
    sit next to ``success`` and ``message`` at the top level.
    """

    model_config = ConfigDict(extra="allow")

    success: bool
    message: str = Field(..., description="Human-readable outcome")


def success_response(message: str, **payload: Any) -> dict[str, Any]:
    """Create a success response body."""
    return APIResponse(success=True, message=message, **payload).model_dump(mode="json")


def error_response(
    code: str,
    message: str,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create an error response body."""
    payload: dict[str, Any] = {"code": code}
    if errors is not None:
        payload["errors"] = errors
    return APIResponse(success=False, message=message, **payload).model_dump(mode="json")


class ErrorCodes:
    """Standard error codes for consistent error handling."""

    # Authentication & Authorization
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    INVALID_TOKEN = "INVALID_TOKEN"
    RATE_LIMITED = "RATE_LIMITED"

    # Resource Errors
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Infrastructure
    INTERNAL_ERROR = "INTERNAL_ERROR"
