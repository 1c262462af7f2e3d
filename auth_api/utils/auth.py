"""Helpers for reading caller credentials off the current request."""

from __future__ import annotations

from typing import Optional

from flask import request

from auth_api.domain import BEARER_SCHEMA
from auth_api.errors import MissingAuthorization


def bearer_token(header: Optional[str]) -> str:
    """Return the raw token from an ``Authorization: Bearer ...`` header value."""
    header = header or ""
    if not header.startswith(BEARER_SCHEMA):
        return ""
    return header[len(BEARER_SCHEMA):].strip()


def require_bearer_token() -> str:
    """Return the caller's bearer token or raise when it is absent."""
    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        raise MissingAuthorization()
    return token
