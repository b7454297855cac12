"""Outbound mail - SMTP dispatcher and verification email content"""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from app.config import settings
from app.core.exceptions import DependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    to: str
    subject: str
    text: str
    html: str


def redact_email(email: str) -> str:
    """Redact an email address for logging"""
    if not email or "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def build_verification_email(to: str, verification_url: str) -> MailMessage:
    """Compose the message asking a new user to confirm their address."""
    minutes = settings.VERIFY_TOKEN_EXPIRE_MINUTES
    window = "1 hour" if minutes == 60 else f"{minutes} minutes"
    safe_url = escape(verification_url, quote=True)
    return MailMessage(
        to=to,
        subject="Please Verify Your Email",
        text=f"Click this link to verify your email: {verification_url}",
        html=(
            "<h1>Email Verification</h1>"
            "<p>Please click the link below to verify your email address:</p>"
            f'<a href="{safe_url}">Verify Email</a>'
            f"<p>This link will expire in {window}.</p>"
        ),
    )


class MailDispatcher:
    """
    Send transactional email over SMTP.

    When SMTP_HOST or the sender address is not configured the message is
    logged instead of sent (development mode).
    """

    @property
    def is_configured(self) -> bool:
        return bool(settings.SMTP_HOST and self._sender_address)

    @property
    def _sender_address(self) -> Optional[str]:
        return settings.MAIL_FROM or settings.SMTP_USER

    def send(self, message: MailMessage) -> None:
        """
        Deliver a message.

        Raises:
            DependencyError: If the SMTP exchange fails
        """
        if not self.is_configured:
            logger.info(
                "Mail dev mode, not sending to=%s subject=%r body=%r",
                redact_email(message.to),
                message.subject,
                message.text[:200],
            )
            return

        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = f"{settings.MAIL_FROM_NAME} <{self._sender_address}>"
        msg["To"] = message.to
        msg.attach(MIMEText(message.text, "plain"))
        msg.attach(MIMEText(message.html, "html"))

        context = ssl.create_default_context()
        try:
            if settings.SMTP_USE_TLS:
                with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
                    server.starttls(context=context)
                    self._login(server)
                    server.sendmail(self._sender_address, message.to, msg.as_string())
            else:
                with smtplib.SMTP_SSL(
                    settings.SMTP_HOST, settings.SMTP_PORT, context=context, timeout=30
                ) as server:
                    self._login(server)
                    server.sendmail(self._sender_address, message.to, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send mail to=%s: %s", redact_email(message.to), e)
            raise DependencyError("Failed to send email")

        logger.info("Mail sent to=%s subject=%r", redact_email(message.to), message.subject)

    @staticmethod
    def _login(server: smtplib.SMTP) -> None:
        if settings.SMTP_USER and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)


mail_dispatcher = MailDispatcher()
