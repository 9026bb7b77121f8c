"""Authentication configuration."""

import os

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    All durations are in their natural units (minutes for short durations,
    hours for longer ones) to make configuration intuitive.
    """

    # Session token settings
    session_expiry_hours: int = Field(
        default=24,
        description="Session token lifetime in hours",
        ge=1,
        le=168,
    )

    # Password reset settings
    reset_token_expiry_minutes: int = Field(
        default=60,
        description="How long password reset links remain valid",
        ge=5,
        le=1440,
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt cost factor",
        ge=10,
        le=15,
    )

    # Application
    app_base_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL of the client, used to build reset links",
    )
    app_name: str = Field(
        default="Task Manager",
        description="Application name for emails",
    )
    environment: str = Field(
        default="development",
        description="Deployment environment name",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def reset_url(self, token: str) -> str:
        """Link the client opens to complete a password reset."""
        return f"{self.app_base_url.rstrip('/')}/reset-password?token={token}"

    @classmethod
    def from_env(cls) -> "AuthConfig":
        """Build from environment variables, falling back to defaults."""
        values = {}
        env_map = {
            "session_expiry_hours": "SESSION_EXPIRY_HOURS",
            "reset_token_expiry_minutes": "RESET_TOKEN_EXPIRY_MINUTES",
            "bcrypt_rounds": "BCRYPT_ROUNDS",
            "app_base_url": "APP_BASE_URL",
            "app_name": "APP_NAME",
            "environment": "APP_ENV",
        }
        for field, var in env_map.items():
            if os.getenv(var):
                values[field] = os.environ[var]
        return cls(**values)
