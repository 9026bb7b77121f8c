"""Transactional email for account events.

Delivery is awaited so failures are visible, but a failed send never undoes
the state change that triggered it: errors are logged and reported as False.
"""

import logging

from auth.config import AuthConfig
from auth.email_templates import EmailType, render
from clients.email_client import EmailGatewayClient, EmailGatewayError

logger = logging.getLogger(__name__)


class Notifier:
    """Renders account emails and hands them to the email gateway."""

    def __init__(self, email_client: EmailGatewayClient, config: AuthConfig):
        self._email_client = email_client
        self._config = config

    def _send(self, email_type: EmailType, to: str, payload: dict) -> bool:
        message = render(email_type, self._config.app_name, payload)
        try:
            self._email_client.send_email(
                to=to,
                subject=message.subject,
                body=message.text,
                html=message.html,
                sender="auth",
            )
        except EmailGatewayError as e:
            logger.error(f"Failed to send {email_type.value} email to {to}: {e}")
            return False
        return True

    def send_welcome(self, to: str, name: str) -> bool:
        return self._send(EmailType.WELCOME, to, {"name": name})

    def send_password_reset(self, to: str, name: str, reset_url: str) -> bool:
        return self._send(
            EmailType.RESET_PASSWORD,
            to,
            {
                "name": name,
                "reset_url": reset_url,
                "expires_in_minutes": self._config.reset_token_expiry_minutes,
            },
        )

    def send_password_reset_success(self, to: str, name: str) -> bool:
        return self._send(EmailType.PASSWORD_RESET_SUCCESS, to, {"name": name})

    def send_password_changed(self, to: str, name: str) -> bool:
        return self._send(EmailType.PASSWORD_CHANGED, to, {"name": name})
