"""Acquisition of the elevated identity provider session."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from auth_api import config
from auth_api.domain import AdminSession
from auth_api.errors import AdminAuthFailed, AuthenticationFailed, ProviderRejected
from auth_api.services.identity_provider import IdentityProviderClient

_LOGGER = logging.getLogger(__name__)

# Tokens are renewed this many seconds before the provider expires them.
EXPIRY_MARGIN_SECONDS = 10


class AdminCredentialProvider:
    """
    Hands out an admin bearer token for privileged provider calls.

    By default every call performs a fresh admin login. With ``cache=True``
    the token is reused until shortly before its ``expires_in`` elapses.
    """

    def __init__(
        self,
        identity_provider: IdentityProviderClient,
        username: str = config.ADMIN_USERNAME,
        password: str = config.ADMIN_PASSWORD,
        cache: bool = config.ADMIN_TOKEN_CACHE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.identity_provider = identity_provider
        self.username = username
        self.password = password
        self.cache = cache
        self.clock = clock
        self._session: Optional[AdminSession] = None
        self._valid_until = 0.0
        self._lock = threading.Lock()

    def _login(self) -> AdminSession:
        try:
            payload = self.identity_provider.login(self.username, self.password)
        except AuthenticationFailed as e:
            _LOGGER.error("Cannot log in as identity provider admin")
            raise AdminAuthFailed() from e
        except ProviderRejected as e:
            raise AdminAuthFailed("can't decode admin login payload") from e

        token = payload.get("access_token")
        if not token:
            raise AdminAuthFailed("can't decode admin login payload")
        return AdminSession(access_token=token, expires_in=int(payload.get("expires_in", 0) or 0))

    def get_session(self) -> AdminSession:
        if not self.cache:
            return self._login()

        with self._lock:
            if self._session is None or self.clock() >= self._valid_until:
                self._session = self._login()
                self._valid_until = self.clock() + max(self._session.expires_in - EXPIRY_MARGIN_SECONDS, 0)
            return self._session

    def invalidate(self) -> None:
        with self._lock:
            self._session = None
            self._valid_until = 0.0

    def access_token(self) -> str:
        return self.get_session().access_token
