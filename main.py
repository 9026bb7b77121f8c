"""
Process entry point.

Loads configuration, builds every client, store and service explicitly,
and owns the database pool lifecycle through the app lifespan.

Run with: python main.py
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from api.app import create_app
from api.config import ServerConfig
from api.rate_limiting import create_limiter
from auth.config import AuthConfig
from auth.database import AccountStore
from auth.guard import AccessGuard
from auth.notifier import Notifier
from auth.passwords import PasswordHasher
from auth.security_logger import SecurityLogger
from auth.service import AuthService
from auth.tokens import TokenService
from clients import (
    EmailGatewayClient,
    PostgresClient,
    get_database_url,
    get_email_config,
    get_token_secret,
    get_valkey_url,
)
from core.database import TaskStore
from core.services.task_service import TaskService

logger = logging.getLogger(__name__)


def configure_logging(server_config: ServerConfig) -> None:
    logging.basicConfig(
        level=server_config.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_token_secret() -> str | None:
    """Signing secret from Vault; None when the field is absent."""
    try:
        return get_token_secret()
    except KeyError:
        logger.warning("No token_secret field under tasks/auth in Vault")
        return None


def build_app(server_config: ServerConfig, auth_config: AuthConfig) -> FastAPI:
    """Construct clients and services and wire them into the app."""
    postgres = PostgresClient(get_database_url())
    email_client = EmailGatewayClient(**get_email_config())

    account_store = AccountStore(postgres)
    security_logger = SecurityLogger(postgres)
    token_service = TokenService(_load_token_secret(), auth_config)

    auth_service = AuthService(
        config=auth_config,
        account_store=account_store,
        hasher=PasswordHasher(rounds=auth_config.bcrypt_rounds),
        token_service=token_service,
        notifier=Notifier(email_client, auth_config),
        security_logger=security_logger,
    )
    task_service = TaskService(TaskStore(postgres))
    guard = AccessGuard(token_service, account_store, security_logger)

    if server_config.is_production:
        storage_uri = get_valkey_url()
    else:
        storage_uri = server_config.rate_limit_storage_uri
    limiter = create_limiter(storage_uri)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        postgres.connect()
        logger.info("Database connected")
        try:
            yield
        finally:
            postgres.close()
            logger.info("Database connection closed")

    return create_app(
        auth_service=auth_service,
        task_service=task_service,
        guard=guard,
        limiter=limiter,
        server_config=server_config,
        lifespan=lifespan,
    )


def main() -> None:
    load_dotenv()
    server_config = ServerConfig.from_env()
    configure_logging(server_config)
    app = build_app(server_config, AuthConfig.from_env())
    logger.info(f"Server starting on port {server_config.port}")
    uvicorn.run(app, host="0.0.0.0", port=server_config.port)


if __name__ == "__main__":
    main()
