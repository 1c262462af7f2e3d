"""Service layer modules for the account lifecycle API."""

from . import (
    account_service,
    admin_session,
    attempt_limiter,
    booking,
    email_service,
    identity_provider,
    notifications,
    verification_store,
)

__all__ = [
    "account_service",
    "admin_session",
    "attempt_limiter",
    "booking",
    "email_service",
    "identity_provider",
    "notifications",
    "verification_store",
]
