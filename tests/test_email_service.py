"""Tests for the verification email."""

from __future__ import annotations

import smtplib
from unittest import mock

from auth_api.domain import Verification
from auth_api.services.email_service import EmailService


def _verification() -> Verification:
    return Verification(
        id="64b7f0c2a1b2c3d4e5f60718", user_id="u1", first_name="A", last_name="B", address="Addr", code=4321
    )


def _service(**kwargs) -> EmailService:
    defaults = dict(
        enabled=True,
        host="smtp.test",
        port=587,
        username="sender@test",
        password="secret",
        sender="sender@test",
        frontend_url="http://front/auth/",
    )
    defaults.update(kwargs)
    return EmailService(**defaults)


def test_body_contains_code_and_link():
    body = _service().verification_email_body("a@x.com", _verification())

    assert "4321" in body
    assert "http://front/auth/verify/64b7f0c2a1b2c3d4e5f60718?email=a%40x.com&amp;userId=u1" in body


def test_disabled_service_sends_nothing():
    with mock.patch("auth_api.services.email_service.smtplib.SMTP") as smtp:
        assert _service(enabled=False).send_verification_code("a@x.com", _verification()) is False
    smtp.assert_not_called()


def test_sends_over_starttls():
    with mock.patch("auth_api.services.email_service.smtplib.SMTP") as smtp:
        assert _service().send_verification_code("a@x.com", _verification()) is True

    connection = smtp.return_value
    connection.starttls.assert_called_once()
    connection.login.assert_called_once_with("sender@test", "secret")
    message = connection.send_message.call_args.args[0]
    assert message["To"] == "a@x.com"
    assert message["Subject"] == "Activate your profile."
    connection.quit.assert_called_once()


def test_smtp_failure_is_reported_not_raised():
    with mock.patch("auth_api.services.email_service.smtplib.SMTP") as smtp:
        smtp.return_value.send_message.side_effect = smtplib.SMTPException("rejected")
        assert _service().send_verification_code("a@x.com", _verification()) is False
