"""Shared pytest fixtures: an in-memory MongoDB and recording collaborators."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import mongomock
import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from auth_api import database  # noqa: E402
from auth_api.services.account_service import AccountOrchestrator  # noqa: E402
from auth_api.services.verification_store import VerificationStore  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Provide an isolated in-memory MongoDB database for each test."""
    test_db_name = "test_auth"

    client = mongomock.MongoClient()
    db = client[test_db_name]

    monkeypatch.setattr(database, "get_mongo_client", lambda: client)
    monkeypatch.setattr(database, "get_database", lambda: db)

    yield db

    client.drop_database(test_db_name)


class StubIdentityProvider:
    """Identity provider double recording every call in order."""

    def __init__(self, user_id: str = "u1", email_verified: bool = True) -> None:
        self.user_id = user_id
        self.email_verified = email_verified
        self.calls: List[Tuple[str, tuple]] = []
        self.fail: Dict[str, Exception] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail:
            raise self.fail[name]

    def calls_to(self, name: str) -> List[tuple]:
        return [args for called, args in self.calls if called == name]

    def login(self, username: str, password: str) -> Dict[str, Any]:
        self._record("login", username, password)
        return {"access_token": f"token-{username}", "expires_in": 300, "token_type": "Bearer"}

    def create_user(self, representation: Dict[str, Any], admin_token: str) -> str:
        self._record("create_user", representation, admin_token)
        return self.user_id

    def get_user(self, token: str) -> Dict[str, Any]:
        self._record("get_user", token)
        return {
            "sub": self.user_id,
            "given_name": "A",
            "family_name": "B",
            "email": "a@x.com",
            "email_verified": self.email_verified,
            "group": ["/host"],
        }

    def get_user_by_id(self, admin_token: str, user_id: str) -> Dict[str, Any]:
        self._record("get_user_by_id", admin_token, user_id)
        return {
            "id": user_id,
            "firstName": "A",
            "lastName": "B",
            "email": "a@x.com",
            "emailVerified": True,
            "attributes": {"address": ["Addr"]},
        }

    def update_user(self, admin_token: str, user_id: str, representation: Dict[str, Any]) -> None:
        self._record("update_user", admin_token, user_id, representation)

    def delete_user(self, admin_token: str, user_id: str) -> None:
        self._record("delete_user", admin_token, user_id)

    def reset_password(self, admin_token: str, user_id: str, new_password: str) -> None:
        self._record("reset_password", admin_token, user_id, new_password)


class StubAdminCredentials:
    def __init__(self, token: str = "admin-token", error: Optional[Exception] = None) -> None:
        self.token = token
        self.error = error
        self.acquired = 0

    def access_token(self) -> str:
        self.acquired += 1
        if self.error is not None:
            raise self.error
        return self.token


class RecordingPublisher:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.published: List[Tuple[str, Dict[str, Any]]] = []
        self.error = error

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        self.published.append((topic, payload))
        if self.error is not None:
            raise self.error


class StubEligibilityGuard:
    def __init__(self, deletable: bool = True, error: Optional[Exception] = None) -> None:
        self.deletable = deletable
        self.error = error
        self.checked: List[Tuple[str, str]] = []

    def _check(self, kind: str, user_id: str) -> bool:
        self.checked.append((kind, user_id))
        if self.error is not None:
            raise self.error
        return self.deletable

    def check_host_deletable(self, user_id: str) -> bool:
        return self._check("host", user_id)

    def check_guest_deletable(self, user_id: str) -> bool:
        return self._check("guest", user_id)


class RecordingStore(VerificationStore):
    """Mongo-backed store that also counts the calls made to it."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[str] = []

    def insert(self, verification):
        self.calls.append("insert")
        return super().insert(verification)

    def get(self, verification_id):
        self.calls.append("get")
        return super().get(verification_id)

    def update(self, verification_id, verification, expected_code=None):
        self.calls.append("update")
        return super().update(verification_id, verification, expected_code)

    def delete(self, verification_id, expected_code=None):
        self.calls.append("delete")
        return super().delete(verification_id, expected_code)


@pytest.fixture
def identity_provider() -> StubIdentityProvider:
    return StubIdentityProvider()


@pytest.fixture
def admin_credentials() -> StubAdminCredentials:
    return StubAdminCredentials()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def guard() -> StubEligibilityGuard:
    return StubEligibilityGuard()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def orchestrator(identity_provider, admin_credentials, store, publisher, guard) -> AccountOrchestrator:
    return AccountOrchestrator(
        identity_provider=identity_provider,
        admin_credentials=admin_credentials,
        store=store,
        publisher=publisher,
        eligibility_guard=guard,
    )

