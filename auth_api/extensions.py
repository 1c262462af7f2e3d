"""Access to the collaborators attached to the running Flask app."""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from auth_api.services.account_service import AccountOrchestrator
from auth_api.services.attempt_limiter import VerificationAttemptLimiter
from auth_api.services.email_service import EmailService

EXTENSION_KEY = "account_services"


@dataclass
class AccountServices:
    """Collaborators shared by the blueprints for the lifetime of the app."""

    orchestrator: AccountOrchestrator
    attempt_limiter: VerificationAttemptLimiter
    email_service: EmailService


def get_services() -> AccountServices:
    return current_app.extensions[EXTENSION_KEY]
