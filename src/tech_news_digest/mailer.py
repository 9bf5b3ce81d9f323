"""SMTP delivery for digest emails."""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid, parseaddr

from .config import Settings
from .email_formatter import to_html

logger = logging.getLogger(__name__)


class MailerConfigError(RuntimeError):
    """Raised before any network attempt when SMTP credentials are missing."""


@dataclass(frozen=True)
class SmtpConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    secure: bool = False
    user: str | None = None
    password: str | None = None
    sender: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpConfig":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            secure=settings.smtp_secure,
            user=settings.smtp_user or None,
            password=settings.smtp_password or settings.smtp_app_password or None,
            sender=settings.smtp_from or None,
        )


def _require_credentials(config: SmtpConfig) -> tuple[str, str]:
    if not config.user:
        raise MailerConfigError(
            "SMTP_USER is required. Set it in the environment or .env file."
        )
    if not config.password:
        raise MailerConfigError(
            "SMTP_PASSWORD or SMTP_APP_PASSWORD is required. "
            "Set it in the environment or .env file."
        )
    return config.user, config.password


def build_message(to: str, subject: str, body: str, sender: str) -> EmailMessage:
    """Plain-text message with a line-break HTML alternative."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = to
    message["Subject"] = subject
    domain = parseaddr(sender)[1].rpartition("@")[2] or None
    message["Message-ID"] = make_msgid(domain=domain)
    message.set_content(body)
    message.add_alternative(to_html(body), subtype="html")
    return message


def _deliver(config: SmtpConfig, user: str, password: str, message: EmailMessage) -> None:
    context = ssl.create_default_context()
    if config.secure:
        with smtplib.SMTP_SSL(config.host, config.port, context=context) as server:
            server.login(user, password)
            server.send_message(message)
        return
    with smtplib.SMTP(config.host, config.port) as server:
        server.ehlo()
        # Never send credentials over an unencrypted connection.
        if not server.has_extn("starttls"):
            raise smtplib.SMTPNotSupportedError(
                f"{config.host}:{config.port} does not offer STARTTLS; set SMTP_SECURE=true "
                "for implicit TLS."
            )
        server.starttls(context=context)
        server.ehlo()
        server.login(user, password)
        server.send_message(message)


async def send_email(to: str, subject: str, body: str, config: SmtpConfig) -> str:
    """
    Send one email and return its Message-ID.

    Missing credentials raise MailerConfigError before connecting; transport
    errors (auth rejected, refused recipient, network) propagate to the caller.
    """
    user, password = _require_credentials(config)
    message = build_message(to, subject, body, sender=config.sender or user)
    await asyncio.to_thread(_deliver, config, user, password, message)
    message_id = message["Message-ID"]
    logger.info("Email sent successfully. Message ID: %s", message_id)
    return message_id
