"""Tests for main.py - service wiring from configuration and Vault secrets."""

import logging
from unittest.mock import patch

import pytest

import main
from api.config import ServerConfig
from auth.config import AuthConfig
from auth.exceptions import InsecureSecretError

EMAIL_CONFIG = {
    "gateway_url": "https://gateway.example.com/send",
    "api_key": "key",
    "hmac_secret": "hmac",
}


@pytest.fixture
def vault_secrets():
    with patch.object(main, "get_database_url", return_value="postgresql://localhost/tasks"), \
            patch.object(main, "get_email_config", return_value=EMAIL_CONFIG), \
            patch.object(main, "get_valkey_url", return_value="memory://") as valkey, \
            patch.object(main, "get_token_secret", return_value="s" * 40) as token_secret:
        yield {"valkey": valkey, "token_secret": token_secret}


def test_build_app_registers_routes(vault_secrets):
    app = main.build_app(ServerConfig(), AuthConfig())

    paths = set(app.openapi()["paths"])
    assert {"/auth/signup", "/auth/login", "/auth/profile", "/todo", "/todo/{task_id}",
            "/todo/{task_id}/toggle", "/health", "/"} <= paths


def test_development_secret_fallback_warns_once(vault_secrets, caplog):
    vault_secrets["token_secret"].return_value = None

    with caplog.at_level(logging.WARNING, logger="auth.tokens"):
        main.build_app(ServerConfig(), AuthConfig())

    warnings = [r for r in caplog.records if r.name == "auth.tokens"]
    assert len(warnings) == 1


def test_development_uses_configured_limit_storage(vault_secrets):
    main.build_app(ServerConfig(environment="development"), AuthConfig())
    vault_secrets["valkey"].assert_not_called()


def test_production_uses_valkey_for_limits(vault_secrets):
    main.build_app(ServerConfig(environment="production"), AuthConfig(environment="production"))
    vault_secrets["valkey"].assert_called_once()


def test_production_without_secret_refuses_to_start(vault_secrets):
    vault_secrets["token_secret"].side_effect = KeyError("token_secret")

    with pytest.raises(InsecureSecretError):
        main.build_app(ServerConfig(environment="production"), AuthConfig(environment="production"))


def test_development_without_secret_starts(vault_secrets):
    vault_secrets["token_secret"].side_effect = KeyError("token_secret")
    assert main.build_app(ServerConfig(), AuthConfig()) is not None
