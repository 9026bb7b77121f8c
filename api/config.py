"""HTTP server configuration."""

import os

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Listen port, environment, CORS and rate-limit settings."""

    port: int = Field(default=4545, ge=1, le=65535)
    environment: str = Field(default="development", description="Deployment environment name")
    log_level: str | None = Field(
        default=None,
        description="Root log level; derived from environment when unset",
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    rate_limit: str = Field(
        default="10/10 seconds",
        description="Fixed-window limit applied to public auth routes",
    )
    rate_limit_storage_uri: str = Field(
        default="memory://",
        description="limits storage URI; redis:// URIs share counters across instances",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def effective_log_level(self) -> str:
        """DEBUG in development, WARNING elsewhere, unless LOG_LEVEL overrides."""
        if self.log_level:
            return self.log_level.upper()
        return "DEBUG" if self.environment.lower() == "development" else "WARNING"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        values = {}
        env_map = {
            "port": "PORT",
            "environment": "APP_ENV",
            "log_level": "LOG_LEVEL",
            "rate_limit": "RATE_LIMIT",
            "rate_limit_storage_uri": "RATE_LIMIT_STORAGE_URI",
        }
        for field, var in env_map.items():
            if os.getenv(var):
                values[field] = os.environ[var]

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            values["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

        return cls(**values)
