"""Pydantic models for auth domain."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from auth.passwords import MAX_PASSWORD_BYTES

PASSWORD_MIN_LENGTH = 6


def normalize_email(email: str) -> str:
    """Emails are compared and stored trimmed and lower-cased."""
    return email.strip().lower()


class Account(BaseModel):
    """A registered account as exposed to clients. Never carries secrets."""

    id: UUID
    name: str
    email: EmailStr
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountRecord(Account):
    """Account as stored, including credential and reset-token fields."""

    password_hash: str
    reset_token: str | None = None
    reset_token_expires_at: datetime | None = None

    def public(self) -> Account:
        """Copy without password hash or reset-token fields."""
        return Account(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, produced by the access guard for one request."""

    account_id: UUID
    email: str


class AuthenticatedAccount(BaseModel):
    """Session token plus the account it was issued for."""

    token: str
    user: Account


# =============================================================================
# REQUEST PAYLOADS
# =============================================================================


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Passwords are deliberately left untouched.
    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value

    @field_validator("password", "new_password", mode="after", check_fields=False)
    @classmethod
    def _fits_hasher(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class SignupRequest(_Request):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)


class LoginRequest(_Request):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(_Request):
    email: EmailStr


class ResetPasswordRequest(_Request):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=PASSWORD_MIN_LENGTH)


class UpdateProfileRequest(_Request):
    name: str | None = Field(None, min_length=2, max_length=50)
    email: EmailStr | None = None

    @model_validator(mode="after")
    def require_one_field(self) -> "UpdateProfileRequest":
        """At least one of name or email must be supplied."""
        if self.name is None and self.email is None:
            raise ValueError("At least one field (name or email) is required")
        return self


class ChangePasswordRequest(_Request):
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=PASSWORD_MIN_LENGTH)
