"""
Email notifications for Natours

Welcome and password-reset emails sent over SMTP. Bodies are rendered from
small Jinja2 templates with an HTML part and a plain-text fallback.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol, TYPE_CHECKING

from jinja2 import DictLoader, Environment, select_autoescape

from natours_core.config import NatoursSettings

if TYPE_CHECKING:
    from natours_core.db.models import User

log = logging.getLogger(__name__)


class NotificationError(Exception):
    """A notification could not be delivered."""


class NotificationSender(Protocol):
    def send_welcome(self, user: "User", url: str) -> None: ...

    def send_password_reset(self, user: "User", url: str) -> None: ...


TEMPLATES = {
    "welcome.html": (
        "<p>Hi {{ first_name }},</p>"
        "<p>Welcome to Natours, we're glad to have you!</p>"
        "<p>Upload a photo and complete your profile here: "
        "<a href=\"{{ url }}\">{{ url }}</a></p>"
    ),
    "welcome.txt": (
        "Hi {{ first_name }},\n\n"
        "Welcome to Natours, we're glad to have you!\n"
        "Complete your profile here: {{ url }}\n"
    ),
    "password_reset.html": (
        "<p>Hi {{ first_name }},</p>"
        "<p>Forgot your password? Submit a PATCH request with your new password "
        "and password confirmation to: <a href=\"{{ url }}\">{{ url }}</a></p>"
        "<p>The link is valid for {{ minutes }} minutes. "
        "If you didn't forget your password, please ignore this email.</p>"
    ),
    "password_reset.txt": (
        "Hi {{ first_name }},\n\n"
        "Forgot your password? Submit a PATCH request with your new password "
        "and password confirmation to: {{ url }}\n"
        "The link is valid for {{ minutes }} minutes. "
        "If you didn't forget your password, please ignore this email.\n"
    ),
}


class EmailSender:
    """
    SMTP notification sender.

    Usage:
        sender = EmailSender(get_settings())
        sender.send_welcome(user, "https://natours.io/me")
    """

    def __init__(self, settings: NatoursSettings):
        self.settings = settings
        self.env = Environment(
            loader=DictLoader(TEMPLATES),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        )

    def render(self, template: str, user: "User", url: str) -> tuple:
        context = {
            "first_name": (user.name or "").split(" ")[0],
            "url": url,
            "minutes": self.settings.PASSWORD_RESET_EXPIRES_MINUTES,
        }
        html = self.env.get_template(f"{template}.html").render(**context)
        text = self.env.get_template(f"{template}.txt").render(**context)
        return html, text

    def send(self, user: "User", template: str, subject: str, url: str) -> None:
        """
        Render and send one email.

        Raises:
            NotificationError: The SMTP exchange failed
        """
        html, text = self.render(template, user, url)

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.EMAIL_FROM
        msg["To"] = user.email
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(
                self.settings.SMTP_HOST,
                self.settings.SMTP_PORT,
                timeout=self.settings.SMTP_TIMEOUT,
            ) as server:
                if self.settings.SMTP_USE_TLS:
                    server.starttls()
                if self.settings.SMTP_USERNAME and self.settings.SMTP_PASSWORD:
                    server.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            log.error(f"Failed to send '{template}' email to user {user.id}: {e}")
            raise NotificationError(str(e)) from e

        log.info(f"Sent '{template}' email to user {user.id}")

    def send_welcome(self, user: "User", url: str) -> None:
        self.send(user, "welcome", "Welcome to the Natours Family!", url)

    def send_password_reset(self, user: "User", url: str) -> None:
        minutes = self.settings.PASSWORD_RESET_EXPIRES_MINUTES
        self.send(
            user,
            "password_reset",
            f"Your password reset token (valid for only {minutes} minutes)",
            url,
        )
