"""Authentication and authorization modules."""

from auth.exceptions import (
    InsecureSecretError,
    InvalidTokenError,
)
from auth.types import (
    Account,
    AccountRecord,
    AuthenticatedAccount,
    Identity,
    SignupRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    ChangePasswordRequest,
)
from auth.config import AuthConfig
from auth.database import AccountStore
from auth.passwords import PasswordHasher
from auth.tokens import TokenService, TokenKind
from auth.notifier import Notifier
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.service import AuthService
from auth.guard import AccessGuard
from auth.api import create_auth_router
