"""Authentication service - orchestrates the password auth flow.

Signup, login, forgot/reset password, profile read/update and password
change. Every failure is a typed ServiceError; nothing here knows about HTTP.
"""

import logging
from uuid import UUID

from auth.config import AuthConfig
from auth.database import AccountStore, EMAIL_IN_USE_MESSAGE, EMAIL_TAKEN_MESSAGE
from auth.exceptions import InvalidTokenError
from auth.notifier import Notifier
from auth.passwords import PasswordHasher
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.tokens import TokenService
from auth.types import (
    Account,
    AuthenticatedAccount,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UpdateProfileRequest,
)
from core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = (
    "If your email is registered with us, you will receive a password reset link shortly."
)
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset token. Please request a new one."
ACCOUNT_NOT_FOUND_MESSAGE = "User not found"


class AuthService:
    """Orchestrates password authentication.

    Handles:
    - Signup and login (session token issuance)
    - Forgot/reset password (single-use reset tokens, enumeration protection)
    - Profile read/update and password change for an authenticated account
    """

    def __init__(
        self,
        config: AuthConfig,
        account_store: AccountStore,
        hasher: PasswordHasher,
        token_service: TokenService,
        notifier: Notifier,
        security_logger: SecurityLogger,
    ):
        self._config = config
        self._accounts = account_store
        self._hasher = hasher
        self._tokens = token_service
        self._notifier = notifier
        self._security_logger = security_logger

    def signup(
        self,
        data: SignupRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthenticatedAccount:
        """Register a new account and log it in.

        Raises:
            ConflictError: Email already registered.
        """
        if self._accounts.get_by_email(data.email) is not None:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        account = self._accounts.create(
            name=data.name,
            email=data.email,
            password_hash=self._hasher.hash(data.password),
        )
        token = self._tokens.issue_session(account.id, account.email)

        self._security_logger.log(
            SecurityEvent.SIGNUP,
            email=account.email,
            account_id=account.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        # Account exists regardless of whether the welcome mail goes out
        self._notifier.send_welcome(account.email, account.name)

        return AuthenticatedAccount(token=token.token, user=account.public())

    def login(
        self,
        data: LoginRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthenticatedAccount:
        """Exchange email and password for a session token.

        Raises:
            NotFoundError: No account with that email.
            UnauthorizedError: Wrong password.
        """
        account = self._accounts.get_by_email(data.email)
        if account is None:
            self._security_logger.log(
                SecurityEvent.LOGIN_FAILED,
                email=data.email,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "account_not_found"},
            )
            raise NotFoundError(ACCOUNT_NOT_FOUND_MESSAGE)

        if not self._hasher.verify(data.password, account.password_hash):
            self._security_logger.log(
                SecurityEvent.LOGIN_FAILED,
                email=account.email,
                account_id=account.id,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "bad_password"},
            )
            raise UnauthorizedError("Invalid credentials")

        token = self._tokens.issue_session(account.id, account.email)

        self._security_logger.log(
            SecurityEvent.LOGIN_SUCCEEDED,
            email=account.email,
            account_id=account.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        return AuthenticatedAccount(token=token.token, user=account.public())

    def forgot_password(
        self,
        data: ForgotPasswordRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        """Start a password reset.

        Returns the same message whether or not the email is registered.
        Only a registered email gets a reset token stored and mailed.
        """
        account = self._accounts.get_by_email(data.email)

        if account is None:
            self._security_logger.log(
                SecurityEvent.PASSWORD_RESET_REQUESTED,
                email=data.email,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "account_not_found"},
            )
            return FORGOT_PASSWORD_MESSAGE

        reset = self._tokens.issue_reset(account.id)
        self._accounts.store_reset_token(account.id, reset.token, reset.expires_at)

        self._security_logger.log(
            SecurityEvent.PASSWORD_RESET_REQUESTED,
            email=account.email,
            account_id=account.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        self._notifier.send_password_reset(
            account.email,
            account.name,
            self._config.reset_url(reset.token),
        )

        return FORGOT_PASSWORD_MESSAGE

    def reset_password(
        self,
        data: ResetPasswordRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Complete a password reset with a token from forgot_password.

        The token must verify, equal the one stored on the account, and the
        stored expiry must be in the future. Success clears the stored token,
        so the same token never works twice.

        Raises:
            InvalidTokenError: Any of the above fails. One message for all causes.
        """
        try:
            claims = self._tokens.verify_reset(data.token)
        except InvalidTokenError:
            self._reset_failed("token_unverifiable", None, ip_address, user_agent)
            raise InvalidTokenError(INVALID_RESET_TOKEN_MESSAGE)

        now = now_utc()
        account = self._accounts.find_by_reset_token(claims.account_id, data.token, now)
        if account is None:
            self._reset_failed("token_not_current", claims.account_id, ip_address, user_agent)
            raise InvalidTokenError(INVALID_RESET_TOKEN_MESSAGE)

        consumed = self._accounts.consume_reset_token(
            account.id,
            data.token,
            self._hasher.hash(data.new_password),
            now,
        )
        if not consumed:
            # Lost a race with another reset using the same token
            self._reset_failed("token_already_consumed", account.id, ip_address, user_agent)
            raise InvalidTokenError(INVALID_RESET_TOKEN_MESSAGE)

        self._security_logger.log(
            SecurityEvent.PASSWORD_RESET_COMPLETED,
            email=account.email,
            account_id=account.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        self._notifier.send_password_reset_success(account.email, account.name)

    def _reset_failed(
        self,
        reason: str,
        account_id: UUID | None,
        ip_address: str | None,
        user_agent: str | None,
    ) -> None:
        self._security_logger.log(
            SecurityEvent.PASSWORD_RESET_FAILED,
            account_id=account_id,
            ip_address=ip_address,
            user_agent=user_agent,
            details={"reason": reason},
        )

    def get_profile(self, account_id: UUID) -> Account:
        """
        Raises:
            NotFoundError: Account no longer exists.
        """
        account = self._accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError(ACCOUNT_NOT_FOUND_MESSAGE)
        return account.public()

    def update_profile(self, account_id: UUID, data: UpdateProfileRequest) -> Account:
        """Apply a partial name/email update.

        Raises:
            ConflictError: Email belongs to another account.
            NotFoundError: Account no longer exists.
        """
        if data.email is not None and self._accounts.email_taken_by_other(data.email, account_id):
            raise ConflictError(EMAIL_IN_USE_MESSAGE)

        account = self._accounts.update_profile(account_id, name=data.name, email=data.email)
        if account is None:
            raise NotFoundError(ACCOUNT_NOT_FOUND_MESSAGE)

        self._security_logger.log(
            SecurityEvent.PROFILE_UPDATED,
            email=account.email,
            account_id=account.id,
            details={"fields": sorted(data.model_dump(exclude_none=True).keys())},
        )

        return account.public()

    def change_password(
        self,
        account_id: UUID,
        data: ChangePasswordRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Replace the password after checking the current one.

        Raises:
            NotFoundError: Account no longer exists.
            UnauthorizedError: Current password is wrong.
        """
        account = self._accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError(ACCOUNT_NOT_FOUND_MESSAGE)

        if not self._hasher.verify(data.current_password, account.password_hash):
            raise UnauthorizedError("Current password is incorrect")

        if not self._accounts.set_password_hash(account.id, self._hasher.hash(data.new_password)):
            raise NotFoundError(ACCOUNT_NOT_FOUND_MESSAGE)

        self._security_logger.log(
            SecurityEvent.PASSWORD_CHANGED,
            email=account.email,
            account_id=account.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        self._notifier.send_password_changed(account.email, account.name)
