"""Lockout of repeated failed verification attempts."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from auth_api import config, database
from auth_api.errors import CodeIncorrect, PersistenceFailure, TooManyAttempts, UserMismatch
from auth_api.services.account_service import AccountOrchestrator

_LOGGER = logging.getLogger(__name__)


class VerificationAttemptLimiter:
    """
    Wraps :meth:`AccountOrchestrator.verify_user` with a failed-attempt counter.

    Once ``max_attempts`` wrong codes (or wrong users) were submitted for a
    verification id, further attempts are refused without reaching the
    orchestrator. Sending the code again does not reset the counter, so the
    number of guesses per verification id stays bounded.
    """

    def __init__(
        self,
        orchestrator: AccountOrchestrator,
        max_attempts: int = config.MAX_VERIFICATION_ATTEMPTS,
        collection: Optional[Collection] = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.max_attempts = max_attempts
        self._collection = collection

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            return database.get_database()[database.ATTEMPTS_COLLECTION]
        return self._collection

    def failed_attempts(self, verification_id: str) -> int:
        try:
            document = self.collection.find_one({"verification_id": verification_id})
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot read verification attempts: {e}") from e
        return document["failed"] if document else 0

    def _record_failure(self, verification_id: str) -> None:
        try:
            self.collection.update_one(
                {"verification_id": verification_id},
                {"$inc": {"failed": 1}, "$set": {"last_failed_at": datetime.now(timezone.utc)}},
                upsert=True,
            )
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot record verification attempt: {e}") from e

    def reset(self, verification_id: str) -> None:
        try:
            self.collection.delete_one({"verification_id": verification_id})
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot reset verification attempts: {e}") from e

    def verify_user(self, verification_id: str, user_id: str, security_code: int) -> None:
        if self.max_attempts > 0 and self.failed_attempts(verification_id) >= self.max_attempts:
            _LOGGER.warning("Verification %s locked after %d failed attempts", verification_id, self.max_attempts)
            raise TooManyAttempts()

        try:
            self.orchestrator.verify_user(verification_id, user_id, security_code)
        except (CodeIncorrect, UserMismatch):
            self._record_failure(verification_id)
            raise

        self.reset(verification_id)
