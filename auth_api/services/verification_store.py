"""MongoDB repository for pending verification records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from auth_api import database
from auth_api.domain import Verification
from auth_api.errors import PersistenceFailure, VerificationNotFound

_LOGGER = logging.getLogger(__name__)


def _object_id(verification_id: str) -> ObjectId:
    try:
        return ObjectId(verification_id)
    except (InvalidId, TypeError) as e:
        raise VerificationNotFound(f"verification {verification_id} not found") from e


def _to_verification(document: Dict[str, Any]) -> Verification:
    return Verification(
        id=str(document["_id"]),
        user_id=document["user_id"],
        first_name=document.get("first_name", ""),
        last_name=document.get("last_name", ""),
        address=document.get("address", ""),
        code=int(document["code"]),
    )


class VerificationStore:
    """
    Keyed repository of :class:`.Verification` records.

    Update and delete accept the code the caller last observed and only touch
    the document while it still carries that code, so two requests racing on
    the same record cannot both act on it.
    """

    def __init__(self, collection: Optional[Collection] = None) -> None:
        self._collection = collection

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            return database.get_database()[database.VERIFICATIONS_COLLECTION]
        return self._collection

    def insert(self, verification: Verification) -> str:
        """
        Save a new verification record.

        Returns:
            The store-assigned id, also written back onto ``verification``
        """
        document = {
            "user_id": verification.user_id,
            "first_name": verification.first_name,
            "last_name": verification.last_name,
            "address": verification.address,
            "code": verification.code,
            "created_at": datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot save verification code: {e}") from e

        verification.id = str(result.inserted_id)
        return verification.id

    def get(self, verification_id: str) -> Verification:
        try:
            document = self.collection.find_one({"_id": _object_id(verification_id)})
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot read verification: {e}") from e

        if document is None:
            raise VerificationNotFound(f"verification {verification_id} not found")
        return _to_verification(document)

    def update(self, verification_id: str, verification: Verification, expected_code: Optional[int] = None) -> None:
        """
        Persist the mutable fields of ``verification``.

        Args:
            verification_id: Id of the record to update
            verification: The record carrying the new values
            expected_code: When given, the update only applies while the
                stored code still equals it
        """
        query: Dict[str, Any] = {"_id": _object_id(verification_id)}
        if expected_code is not None:
            query["code"] = expected_code

        try:
            result = self.collection.update_one(
                query,
                {
                    "$set": {
                        "code": verification.code,
                        "first_name": verification.first_name,
                        "last_name": verification.last_name,
                        "address": verification.address,
                        "updated_at": datetime.now(timezone.utc),
                    }
                },
            )
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot update verification: {e}") from e

        if result.matched_count == 0:
            raise VerificationNotFound(f"verification {verification_id} not found")

    def delete(self, verification_id: str, expected_code: Optional[int] = None) -> None:
        query: Dict[str, Any] = {"_id": _object_id(verification_id)}
        if expected_code is not None:
            query["code"] = expected_code

        try:
            result = self.collection.delete_one(query)
        except PyMongoError as e:
            raise PersistenceFailure(f"cannot delete verification: {e}") from e

        if result.deleted_count == 0:
            _LOGGER.info("Verification %s was already consumed", verification_id)
            raise VerificationNotFound(f"verification {verification_id} not found")
