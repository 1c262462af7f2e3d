"""Environment-driven settings for the account service."""

from __future__ import annotations

import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


IDENTITY_PROVIDER_URL = os.getenv("IDENTITY_PROVIDER_URL", "http://keycloak.backend.svc.cluster.local")
IDENTITY_PROVIDER_REALM = os.getenv("IDENTITY_PROVIDER_REALM", "Istio")
IDENTITY_PROVIDER_CLIENT_ID = os.getenv("IDENTITY_PROVIDER_CLIENT_ID", "Istio")

# Credentials used to obtain the elevated admin session.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin@test.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "test")
ADMIN_TOKEN_CACHE = _env_flag("ADMIN_TOKEN_CACHE")

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/")
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "auth")

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DATABASE = int(os.getenv("REDIS_DATABASE", "0"))
USER_CREATED_TOPIC = os.getenv("USER_CREATED_TOPIC", "user.created")

BOOKING_SERVICE_URL = os.getenv("BOOKING_SERVICE_URL", "http://booking.backend.svc.cluster.local")

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
MAX_VERIFICATION_ATTEMPTS = int(os.getenv("MAX_VERIFICATION_ATTEMPTS", "5"))

EMAIL_ENABLED = _env_flag("EMAIL_ENABLED")
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SENDER_EMAIL = os.getenv("SENDER_EMAIL", "no-reply@example.com")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost/app/booking/auth")
