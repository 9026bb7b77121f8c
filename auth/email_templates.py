"""Transactional email templates (subject, plain text, HTML).

Bodies live in ``auth/templates/email`` as ``<type>.txt`` / ``<type>.html``
pairs. HTML output is autoescaped; plain text is not.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


TEMPLATE_DIR = Path(__file__).parent / "templates" / "email"


class EmailType(Enum):
    WELCOME = "welcome"
    RESET_PASSWORD = "reset_password"
    PASSWORD_RESET_SUCCESS = "password_reset_success"
    PASSWORD_CHANGED = "password_changed"


SUBJECTS = {
    EmailType.WELCOME: "Welcome to {{ app_name }}!",
    EmailType.RESET_PASSWORD: "Reset Your Password",
    EmailType.PASSWORD_RESET_SUCCESS: "Your Password Has Been Reset",
    EmailType.PASSWORD_CHANGED: "Your Password Was Changed",
}


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text: str
    html: str


_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
    undefined=StrictUndefined,  # a missing payload field fails loudly
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(email_type: EmailType, app_name: str, payload: dict) -> RenderedEmail:
    """Render a template.

    Raises:
        jinja2.UndefinedError: A field the template needs is missing from ``payload``.
    """
    context = {**payload, "app_name": app_name}
    name = email_type.value
    return RenderedEmail(
        subject=_env.from_string(SUBJECTS[email_type]).render(context),
        text=_env.get_template(f"{name}.txt").render(context),
        html=_env.get_template(f"{name}.html").render(context),
    )
