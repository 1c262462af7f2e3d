"""Deletion eligibility checks answered by the booking service."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from auth_api import config
from auth_api.errors import EligibilityCheckFailed

_LOGGER = logging.getLogger(__name__)


class DeletionEligibilityGuard:
    """Asks the booking service whether a host or guest has no outstanding reservations."""

    def __init__(
        self,
        base_url: str = config.BOOKING_SERVICE_URL,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _check(self, kind: str, user_id: str) -> bool:
        url = f"{self.base_url}/booking/check-delete/{kind}/{user_id}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            _LOGGER.error("Checking if %s %s can be deleted failed: %s", kind, user_id, e)
            raise EligibilityCheckFailed(f"booking service unavailable: {e}") from e

        if response.status_code != 200:
            raise EligibilityCheckFailed(f"booking service answered {response.status_code}")
        try:
            success = response.json()["success"]
        except (ValueError, KeyError, TypeError) as e:
            raise EligibilityCheckFailed("can't decode deletion check payload") from e
        if not isinstance(success, bool):
            raise EligibilityCheckFailed(f"deletion check answered non-boolean success {success!r}")
        return success

    def check_host_deletable(self, user_id: str) -> bool:
        return self._check("host", user_id)

    def check_guest_deletable(self, user_id: str) -> bool:
        return self._check("guest", user_id)
