"""Security event logging for the auth audit trail.

Append-only log to the security_events table. This is where the real reason
behind a generic client-facing failure is recorded (unknown email, bad
signature, token mismatch); responses never carry it.
"""

import logging
from enum import Enum
from typing import Any
from uuid import UUID

import psycopg2
from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class SecurityEvent(Enum):
    """Auth security event types."""

    SIGNUP = "signup"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"
    PASSWORD_RESET_FAILED = "password_reset_failed"
    PASSWORD_CHANGED = "password_changed"
    PROFILE_UPDATED = "profile_updated"
    TOKEN_REJECTED = "token_rejected"


class SecurityLogger:
    """Append-only security event logger."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        account_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Log security event to database.

        A failed write is logged and dropped; it never fails the operation
        being audited, which has usually already committed.
        """
        logger.debug(f"Security event {event.value} account={account_id} details={details}")
        try:
            self._db.execute_returning(
                """INSERT INTO security_events
                   (event_type, email, account_id, ip_address, user_agent, details, created_at)
                   VALUES (%s, %s, %s, %s, %s, %s, %s)
                   RETURNING id""",
                (
                    event.value,
                    email,
                    str(account_id) if account_id else None,
                    ip_address,
                    user_agent,
                    Json(details) if details else None,
                    now_utc(),
                ),
            )
        except (psycopg2.Error, RuntimeError):
            # RuntimeError: pool not connected or exhausted
            logger.exception(f"Failed to record security event {event.value} account={account_id}")
