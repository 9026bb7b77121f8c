"""Shared test fixtures for the task manager test suite.

Flow and HTTP tests run against in-memory stores that expose the same
methods as the SQL-backed AccountStore and TaskStore, so no database is
needed. SQL stores have their own tests against a mocked PostgresClient.
"""

from datetime import datetime
from typing import Any
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

import clients.vault_client as vault_module
from api.app import create_app
from api.config import ServerConfig
from api.rate_limiting import create_limiter
from auth.config import AuthConfig
from auth.database import EMAIL_IN_USE_MESSAGE, EMAIL_TAKEN_MESSAGE
from auth.guard import AccessGuard
from auth.notifier import Notifier
from auth.passwords import PasswordHasher
from auth.security_logger import SecurityLogger
from auth.service import AuthService
from auth.tokens import TokenService
from auth.types import AccountRecord, normalize_email
from clients.email_client import EmailGatewayClient
from core.exceptions import ConflictError
from core.models import Task
from core.services.task_service import TaskService
from utils.timezone import now_utc


TEST_SECRET = "test-signing-secret-that-is-long-enough-for-prod"
TEST_BASE_URL = "https://app.example.com"


# =============================================================================
# IN-MEMORY STORES
# =============================================================================


class InMemoryAccountStore:
    """Dict-backed stand-in for AccountStore."""

    def __init__(self):
        self.accounts: dict[UUID, AccountRecord] = {}

    def get_by_email(self, email: str) -> AccountRecord | None:
        email = normalize_email(email)
        for account in self.accounts.values():
            if account.email == email:
                return account
        return None

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        return self.accounts.get(account_id)

    def email_taken_by_other(self, email: str, account_id: UUID) -> bool:
        existing = self.get_by_email(email)
        return existing is not None and existing.id != account_id

    def create(self, name: str, email: str, password_hash: str) -> AccountRecord:
        if self.get_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)
        now = now_utc()
        account = AccountRecord(
            id=uuid4(),
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.accounts[account.id] = account
        return account

    def _replace(self, account_id: UUID, **changes: Any) -> AccountRecord | None:
        account = self.accounts.get(account_id)
        if account is None:
            return None
        updated = account.model_copy(update={**changes, "updated_at": now_utc()})
        self.accounts[account_id] = updated
        return updated

    def update_profile(
        self,
        account_id: UUID,
        name: str | None = None,
        email: str | None = None,
    ) -> AccountRecord | None:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if email is not None:
            if self.email_taken_by_other(email, account_id):
                raise ConflictError(EMAIL_IN_USE_MESSAGE)
            changes["email"] = normalize_email(email)
        return self._replace(account_id, **changes)

    def set_password_hash(self, account_id: UUID, password_hash: str) -> bool:
        return self._replace(account_id, password_hash=password_hash) is not None

    def store_reset_token(self, account_id: UUID, token: str, expires_at: datetime) -> bool:
        return self._replace(
            account_id, reset_token=token, reset_token_expires_at=expires_at
        ) is not None

    def find_by_reset_token(self, account_id: UUID, token: str, now: datetime) -> AccountRecord | None:
        account = self.accounts.get(account_id)
        if account is None or account.reset_token != token:
            return None
        if account.reset_token_expires_at is None or account.reset_token_expires_at <= now:
            return None
        return account

    def consume_reset_token(
        self,
        account_id: UUID,
        token: str,
        password_hash: str,
        now: datetime,
    ) -> bool:
        if self.find_by_reset_token(account_id, token, now) is None:
            return False
        self._replace(
            account_id,
            password_hash=password_hash,
            reset_token=None,
            reset_token_expires_at=None,
        )
        return True


class InMemoryTaskStore:
    """Dict-backed stand-in for TaskStore."""

    def __init__(self):
        self.tasks: dict[UUID, Task] = {}

    def _owned(self, account_id: UUID, task_id: UUID) -> Task | None:
        task = self.tasks.get(task_id)
        if task is None or task.account_id != account_id:
            return None
        return task

    def create(self, account_id: UUID, title: str, description: str) -> Task:
        now = now_utc()
        task = Task(
            id=uuid4(),
            account_id=account_id,
            title=title,
            description=description,
            status=False,
            created_at=now,
            updated_at=now,
        )
        self.tasks[task.id] = task
        return task

    def list_for_account(self, account_id: UUID) -> list[Task]:
        owned = [t for t in self.tasks.values() if t.account_id == account_id]
        return sorted(owned, key=lambda t: t.created_at, reverse=True)

    def get(self, account_id: UUID, task_id: UUID) -> Task | None:
        return self._owned(account_id, task_id)

    def update(self, account_id: UUID, task_id: UUID, fields: dict[str, Any]) -> Task | None:
        task = self._owned(account_id, task_id)
        if task is None:
            return None
        changes = {k: v for k, v in fields.items() if k in ("title", "description", "status")}
        updated = task.model_copy(update={**changes, "updated_at": now_utc()})
        self.tasks[task_id] = updated
        return updated

    def delete(self, account_id: UUID, task_id: UUID) -> bool:
        if self._owned(account_id, task_id) is None:
            return False
        del self.tasks[task_id]
        return True

    def toggle_status(self, account_id: UUID, task_id: UUID) -> Task | None:
        task = self._owned(account_id, task_id)
        if task is None:
            return None
        return self.update(account_id, task_id, {"status": not task.status})


# =============================================================================
# VAULT
# =============================================================================


@pytest.fixture(autouse=True)
def reset_vault_cache():
    """Each test starts without a cached Vault client or secrets."""
    vault_module.reset_cache()
    yield
    vault_module.reset_cache()


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(bcrypt_rounds=10, app_base_url=TEST_BASE_URL)


@pytest.fixture
def hasher() -> PasswordHasher:
    """Minimum-cost hasher to keep tests fast."""
    return PasswordHasher(rounds=10)


@pytest.fixture
def token_service(auth_config) -> TokenService:
    return TokenService(TEST_SECRET, auth_config)


@pytest.fixture
def account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def email_client():
    """Mock gateway - the only outbound dependency."""
    return Mock(spec=EmailGatewayClient)


@pytest.fixture
def notifier(email_client, auth_config) -> Notifier:
    return Notifier(email_client, auth_config)


@pytest.fixture
def security_logger():
    return Mock(spec=SecurityLogger)


@pytest.fixture
def auth_service(auth_config, account_store, hasher, token_service, notifier, security_logger):
    return AuthService(
        config=auth_config,
        account_store=account_store,
        hasher=hasher,
        token_service=token_service,
        notifier=notifier,
        security_logger=security_logger,
    )


@pytest.fixture
def guard(token_service, account_store, security_logger) -> AccessGuard:
    return AccessGuard(token_service, account_store, security_logger)


# =============================================================================
# TASK FIXTURES
# =============================================================================


@pytest.fixture
def task_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def task_service(task_store) -> TaskService:
    return TaskService(task_store)


# =============================================================================
# HTTP FIXTURES
# =============================================================================


@pytest.fixture
def server_config() -> ServerConfig:
    """Generous limit so flow tests never trip the limiter."""
    return ServerConfig(rate_limit="1000/minute")


@pytest.fixture
def app(auth_service, task_service, guard, server_config):
    return create_app(
        auth_service=auth_service,
        task_service=task_service,
        guard=guard,
        limiter=create_limiter(server_config.rate_limit_storage_uri),
        server_config=server_config,
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Sign up through the API; returns {'token', 'user', 'headers'}."""

    def _register(name: str = "Ann", email: str = "ann@x.com", password: str = "secret1") -> dict:
        response = client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {"token": body["token"], "user": body["user"], "headers": bearer(body["token"])}

    return _register


@pytest.fixture
def ann(register) -> dict:
    return register()


@pytest.fixture
def bob(register) -> dict:
    return register(name="Bob", email="bob@x.com", password="hunter22")
