"""Access guard for protected routes.

Turns an ``Authorization: Bearer <token>`` header into an Identity, or fails
with UnauthorizedError. The identity is handed to route handlers as a FastAPI
dependency value; nothing is stored on the request.
"""

import logging
from typing import Callable

from fastapi import Header

from auth.database import AccountStore
from auth.exceptions import InvalidTokenError
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.tokens import TokenService
from auth.types import Identity
from core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Authorization required. No token provided"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from a Bearer header. None if absent or malformed."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    if not token or " " in token:
        return None
    return token


class AccessGuard:
    """Authenticates bearer tokens against the token service and credential store.

    A token is accepted only if it verifies as a session token and the
    account it names still exists.
    """

    def __init__(
        self,
        token_service: TokenService,
        account_store: AccountStore,
        security_logger: SecurityLogger,
    ):
        self._tokens = token_service
        self._accounts = account_store
        self._security_logger = security_logger

    def authenticate(self, authorization: str | None) -> Identity:
        """Validate the Authorization header value.

        Raises:
            UnauthorizedError: Missing/malformed header, bad token, or vanished account.
        """
        token = parse_bearer(authorization)
        if token is None:
            raise UnauthorizedError(MISSING_TOKEN_MESSAGE)

        try:
            claims = self._tokens.verify_session(token)
        except InvalidTokenError:
            self._security_logger.log(
                SecurityEvent.TOKEN_REJECTED,
                details={"reason": "token_unverifiable"},
            )
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

        account = self._accounts.get_by_id(claims.account_id)
        if account is None:
            self._security_logger.log(
                SecurityEvent.TOKEN_REJECTED,
                account_id=claims.account_id,
                details={"reason": "account_not_found"},
            )
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

        return Identity(account_id=account.id, email=account.email)

    def dependency(self) -> Callable[..., Identity]:
        """FastAPI dependency yielding the caller's Identity."""

        def require_identity(authorization: str | None = Header(None)) -> Identity:
            return self.authenticate(authorization)

        return require_identity
