"""Credential store: account records in the accounts table.

Emails are stored lower-cased; the unique index on email is the final word
on uniqueness, and violations surface as ConflictError.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import psycopg2.errors

from auth.types import AccountRecord, normalize_email
from clients.postgres_client import PostgresClient
from core.exceptions import ConflictError, InternalError
from utils.timezone import now_utc

ACCOUNT_COLUMNS = """id, name, email, password_hash, reset_token,
                     reset_token_expires_at, created_at, updated_at"""

EMAIL_TAKEN_MESSAGE = "User already exists with this email"
EMAIL_IN_USE_MESSAGE = "Email is already in use by another account"


class AccountStore:
    """Database operations for accounts."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def _to_record(self, row: dict[str, Any] | None) -> AccountRecord | None:
        if row is None:
            return None
        return AccountRecord.model_validate(row)

    def get_by_email(self, email: str) -> AccountRecord | None:
        """Find account by email (case-insensitive)."""
        row = self._db.execute_single(
            f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE email = %s",
            (normalize_email(email),),
        )
        return self._to_record(row)

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        """Find account by ID."""
        row = self._db.execute_single(
            f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE id = %s",
            (account_id,),
        )
        return self._to_record(row)

    def email_taken_by_other(self, email: str, account_id: UUID) -> bool:
        """True if some account other than ``account_id`` owns ``email``."""
        row = self._db.execute_single(
            "SELECT id FROM accounts WHERE email = %s AND id <> %s",
            (normalize_email(email), account_id),
        )
        return row is not None

    def create(self, name: str, email: str, password_hash: str) -> AccountRecord:
        """Insert a new account.

        Raises:
            ConflictError: Email already registered.
            InternalError: The insert returned no row.
        """
        now = now_utc()
        try:
            rows = self._db.execute_returning(
                f"""INSERT INTO accounts (id, name, email, password_hash, created_at, updated_at)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING {ACCOUNT_COLUMNS}""",
                (uuid4(), name, normalize_email(email), password_hash, now, now),
            )
        except psycopg2.errors.UniqueViolation:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)
        if not rows:
            raise InternalError("Account insert returned no row")
        return self._to_record(rows[0])

    def update_profile(
        self,
        account_id: UUID,
        name: str | None = None,
        email: str | None = None,
    ) -> AccountRecord | None:
        """Apply a partial name/email update. None if the account is gone.

        Raises:
            ConflictError: New email belongs to another account.
        """
        assignments = []
        params: list[Any] = []
        if name is not None:
            assignments.append("name = %s")
            params.append(name)
        if email is not None:
            assignments.append("email = %s")
            params.append(normalize_email(email))
        if not assignments:
            return self.get_by_id(account_id)

        assignments.append("updated_at = %s")
        params.extend([now_utc(), account_id])

        try:
            rows = self._db.execute_returning(
                f"""UPDATE accounts SET {', '.join(assignments)}
                    WHERE id = %s
                    RETURNING {ACCOUNT_COLUMNS}""",
                tuple(params),
            )
        except psycopg2.errors.UniqueViolation:
            raise ConflictError(EMAIL_IN_USE_MESSAGE)
        return self._to_record(rows[0]) if rows else None

    def set_password_hash(self, account_id: UUID, password_hash: str) -> bool:
        """Replace the password hash. False if the account is gone."""
        rows = self._db.execute_returning(
            "UPDATE accounts SET password_hash = %s, updated_at = %s WHERE id = %s RETURNING id",
            (password_hash, now_utc(), account_id),
        )
        return len(rows) > 0

    def store_reset_token(self, account_id: UUID, token: str, expires_at: datetime) -> bool:
        """Record the outstanding reset token, replacing any earlier one."""
        rows = self._db.execute_returning(
            """UPDATE accounts
               SET reset_token = %s, reset_token_expires_at = %s
               WHERE id = %s
               RETURNING id""",
            (token, expires_at, account_id),
        )
        return len(rows) > 0

    def find_by_reset_token(self, account_id: UUID, token: str, now: datetime) -> AccountRecord | None:
        """Account whose stored reset token equals ``token`` and has not expired."""
        row = self._db.execute_single(
            f"""SELECT {ACCOUNT_COLUMNS} FROM accounts
                WHERE id = %s AND reset_token = %s AND reset_token_expires_at > %s""",
            (account_id, token, now),
        )
        return self._to_record(row)

    def consume_reset_token(
        self,
        account_id: UUID,
        token: str,
        password_hash: str,
        now: datetime,
    ) -> bool:
        """Set the new password and clear the reset fields in one statement.

        Matches only while the stored token equals ``token`` and is unexpired,
        so of two racing resets with the same token exactly one succeeds.
        """
        rows = self._db.execute_returning(
            """UPDATE accounts
               SET password_hash = %s,
                   reset_token = NULL,
                   reset_token_expires_at = NULL,
                   updated_at = %s
               WHERE id = %s AND reset_token = %s AND reset_token_expires_at > %s
               RETURNING id""",
            (password_hash, now, account_id, token, now),
        )
        return len(rows) > 0
