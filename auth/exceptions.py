"""Typed exceptions for token and secret failures."""

from core.exceptions import ErrorKind, ServiceError


class InvalidTokenError(ServiceError):
    """
    Token is malformed, badly signed, expired, of the wrong kind, or no
    longer matches what is stored.

    Callers surface a single generic message whatever the cause.
    """

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InsecureSecretError(RuntimeError):
    """Token signing secret is missing or unsafe for this environment. Fatal at startup."""
