"""Typed service errors shared by the auth and task flows.

Flows raise these and stay free of HTTP concerns. The single mapping from
error kind to status code lives in api/errors.py.
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Category of a service failure."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INVALID_TOKEN = "invalid_token"
    INTERNAL = "internal"


class ServiceError(Exception):
    """Base class for every error a flow operation can return."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.message = message
        self.errors = errors
        super().__init__(message)


class ValidationError(ServiceError):
    """Malformed or missing input. Carries field-level messages."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[dict[str, Any]], message: str = "Validation error"):
        super().__init__(message, errors)

    @classmethod
    def from_pydantic(cls, raw_errors: list[dict[str, Any]]) -> "ValidationError":
        """Build from pydantic's ``errors()`` list.

        Location prefixes added by FastAPI ("body", "query") are dropped so
        the field path matches the request payload.
        """
        errors = []
        for err in raw_errors:
            loc = [str(part) for part in err.get("loc", ())]
            if loc and loc[0] in ("body", "query", "path", "header"):
                loc = loc[1:]
            message = err.get("msg", "Invalid value")
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.append({"field": ".".join(loc), "message": message})
        return cls(errors)


class ConflictError(ServiceError):
    """Uniqueness violation (e.g. email already registered)."""

    kind = ErrorKind.CONFLICT


class UnauthorizedError(ServiceError):
    """Bad credentials or unusable bearer token."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(ServiceError):
    """Resource missing, or owned by someone else."""

    kind = ErrorKind.NOT_FOUND


class InternalError(ServiceError):
    """Unexpected failure. Message shown to clients is always generic."""

    kind = ErrorKind.INTERNAL
