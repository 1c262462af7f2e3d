"""Verification code emails."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional
from urllib.parse import urlencode

from jinja2 import Template

from auth_api import config
from auth_api.domain import Verification

_LOGGER = logging.getLogger(__name__)

SUBJECT_VERIFY_USER = "Activate your profile."

VERIFICATION_EMAIL_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
  <body>
    <h2>Activate your profile</h2>
    <p>Your verification code is <strong>{{ code }}</strong>.</p>
    <p>Enter it on <a href="{{ url }}">the verification page</a> to activate your account.</p>
  </body>
</html>
""",
    autoescape=True,
)


class EmailService:
    """Renders and sends the verification code email over SMTP."""

    def __init__(
        self,
        enabled: bool = config.EMAIL_ENABLED,
        host: str = config.SMTP_HOST,
        port: int = config.SMTP_PORT,
        username: str = config.SMTP_USERNAME,
        password: str = config.SMTP_PASSWORD,
        sender: str = config.SENDER_EMAIL,
        frontend_url: str = config.FRONTEND_URL,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.enabled = enabled
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.frontend_url = frontend_url.rstrip("/")
        self.timeout = timeout

    def verification_url(self, receiver_email: str, verification: Verification) -> str:
        query = urlencode({"email": receiver_email, "userId": verification.user_id})
        return f"{self.frontend_url}/verify/{verification.id}?{query}"

    def verification_email_body(self, receiver_email: str, verification: Verification) -> str:
        return VERIFICATION_EMAIL_TEMPLATE.render(
            code=verification.code,
            url=self.verification_url(receiver_email, verification),
        )

    def send_verification_code(self, receiver_email: str, verification: Verification) -> bool:
        """
        Email the current code for ``verification``.

        Returns:
            True if the message was handed to the SMTP server, False if
            sending is disabled or failed
        """
        if not self.enabled:
            _LOGGER.debug("Email disabled, not sending verification %s", verification.id)
            return False
        body = self.verification_email_body(receiver_email, verification)
        return self.send_email(receiver_email, SUBJECT_VERIFY_USER, body)

    def send_email(self, receiver_email: str, subject: str, body: str) -> bool:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = receiver_email
        message["Subject"] = subject
        message.set_content(body, subtype="html")

        connection: Optional[smtplib.SMTP] = None
        try:
            connection = smtplib.SMTP(host=self.host, port=self.port, timeout=self.timeout)
            connection.starttls()
            if self.username:
                connection.login(self.username, self.password)
            connection.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            _LOGGER.error("Sending %r to %s failed: %s", subject, receiver_email, e)
            return False
        finally:
            if connection is not None:
                try:
                    connection.quit()
                except (smtplib.SMTPException, OSError):
                    _LOGGER.debug("SMTP connection already closed")
        return True
