"""Signed, time-bound bearer tokens (HS256 JWT).

Two token kinds share one signing secret:

- session: ``{sub, email, kind="session"}``, lifetime from AuthConfig (24h)
- reset:   ``{sub, kind="reset"}``, lifetime from AuthConfig (1h)

Every verify call names the kind it expects and rejects the other, so a
reset token can never be presented as a session token or vice versa.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any
from uuid import UUID

import jwt

from auth.config import AuthConfig
from auth.exceptions import InsecureSecretError, InvalidTokenError
from utils.timezone import from_timestamp, now_utc

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Only accepted outside production
DEVELOPMENT_SECRET = "development-secret-not-for-production"

MIN_PRODUCTION_SECRET_LENGTH = 32


class TokenKind(Enum):
    SESSION = "session"
    RESET = "reset"


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a token."""

    account_id: UUID
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    email: str | None = None


def resolve_secret(secret: str | None, production: bool) -> str:
    """Pick the signing secret, refusing unsafe ones in production.

    Raises:
        InsecureSecretError: Production with an empty, default, or short secret.
    """
    if production:
        if not secret or secret == DEVELOPMENT_SECRET:
            raise InsecureSecretError("A token signing secret must be configured in production")
        if len(secret) < MIN_PRODUCTION_SECRET_LENGTH:
            raise InsecureSecretError(
                f"Token signing secret must be at least {MIN_PRODUCTION_SECRET_LENGTH} characters"
            )
        return secret

    if not secret:
        logger.warning("No token signing secret configured; using development secret")
        return DEVELOPMENT_SECRET
    return secret


class TokenService:
    """Issues and verifies session and password-reset tokens."""

    def __init__(self, secret: str | None, config: AuthConfig):
        """Raises InsecureSecretError for an unsafe secret in production."""
        self._secret = resolve_secret(secret, config.is_production)
        self._config = config

    def issue(self, account_id: UUID, kind: TokenKind, ttl: timedelta, **extra_claims: Any) -> IssuedToken:
        """Sign a token for ``account_id`` valid for ``ttl``."""
        now = now_utc().replace(microsecond=0)
        expires_at = now + ttl
        payload = {
            **extra_claims,
            "sub": str(account_id),
            "kind": kind.value,
            "iat": now,
            "exp": expires_at,
            "jti": secrets.token_urlsafe(12),
        }
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str, kind: TokenKind) -> TokenClaims:
        """Verify signature, expiry and kind.

        Raises:
            InvalidTokenError: Malformed, bad signature, expired, or wrong kind.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "kind", "iat", "exp"]},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise InvalidTokenError()

        if payload.get("kind") != kind.value:
            logger.debug(f"Token rejected: expected {kind.value}, got {payload.get('kind')}")
            raise InvalidTokenError()

        try:
            account_id = UUID(payload["sub"])
        except (TypeError, ValueError):
            raise InvalidTokenError()

        email = payload.get("email")
        if kind is TokenKind.SESSION and not isinstance(email, str):
            raise InvalidTokenError()

        return TokenClaims(
            account_id=account_id,
            kind=kind,
            issued_at=from_timestamp(payload["iat"]),
            expires_at=from_timestamp(payload["exp"]),
            email=email,
        )

    def issue_session(self, account_id: UUID, email: str) -> IssuedToken:
        return self.issue(
            account_id,
            TokenKind.SESSION,
            timedelta(hours=self._config.session_expiry_hours),
            email=email,
        )

    def verify_session(self, token: str) -> TokenClaims:
        return self.verify(token, TokenKind.SESSION)

    def issue_reset(self, account_id: UUID) -> IssuedToken:
        return self.issue(
            account_id,
            TokenKind.RESET,
            timedelta(minutes=self._config.reset_token_expiry_minutes),
        )

    def verify_reset(self, token: str) -> TokenClaims:
        return self.verify(token, TokenKind.RESET)
