"""Account lifecycle operations coordinating the identity provider and its collaborators.

Each operation is a short sequence of calls to independent systems with no
shared transaction. Steps commit on their own and are ordered so that a late
failure leaves the least to clean up; nothing is retried or rolled back here.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from auth_api import config
from auth_api.domain import HOST_ROLE, LoginResult, UserProfile, Verification
from auth_api.errors import (
    AccountNotVerified,
    ActivationFailed,
    CodeIncorrect,
    IdentityProviderUnavailable,
    PersistenceFailure,
    ProviderRejected,
    UserCouldNotBeDeleted,
    UserMismatch,
)
from auth_api.services.admin_session import AdminCredentialProvider
from auth_api.services.booking import DeletionEligibilityGuard
from auth_api.services.identity_provider import (
    IdentityProviderClient,
    build_profile_update,
    build_user_representation,
)
from auth_api.services.notifications import NotificationPublishFailed
from auth_api.services.verification_store import VerificationStore
from auth_api.utils.codes import generate_verification_code, regenerate_verification_code

_LOGGER = logging.getLogger(__name__)


class AccountOrchestrator:
    """Runs the signup, verification, login and deletion sagas."""

    def __init__(
        self,
        identity_provider: IdentityProviderClient,
        admin_credentials: AdminCredentialProvider,
        store: VerificationStore,
        publisher: Any,
        eligibility_guard: DeletionEligibilityGuard,
        user_created_topic: str = config.USER_CREATED_TOPIC,
        code_generator: Callable[[], int] = generate_verification_code,
        code_regenerator: Callable[[Optional[int]], int] = regenerate_verification_code,
    ) -> None:
        self.identity_provider = identity_provider
        self.admin_credentials = admin_credentials
        self.store = store
        self.publisher = publisher
        self.eligibility_guard = eligibility_guard
        self.user_created_topic = user_created_topic
        self.code_generator = code_generator
        self.code_regenerator = code_regenerator

    def sign_up(
        self,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        address: str,
        group: str,
    ) -> Verification:
        """
        Create the provider account, then the pending verification.

        A store failure after the provider account exists is surfaced as is;
        the provider account stays behind unverified.
        """
        admin_token = self.admin_credentials.access_token()

        representation = build_user_representation(email, first_name, last_name, password, address, group)
        user_id = self.identity_provider.create_user(representation, admin_token)
        _LOGGER.info("Created identity provider user %s", user_id)

        verification = Verification(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            address=address,
            code=self.code_generator(),
        )
        try:
            self.store.insert(verification)
        except PersistenceFailure:
            _LOGGER.error("Saving verification failed; provider user %s left unverified", user_id)
            raise

        self._notify_user_created(user_id, group)
        return verification

    def _notify_user_created(self, user_id: str, role: str) -> None:
        try:
            self.publisher.publish(self.user_created_topic, {"userId": user_id, "role": role})
        except NotificationPublishFailed as e:
            _LOGGER.error("User created notification for %s not delivered: %s", user_id, e)

    def verify_user(self, verification_id: str, user_id: str, security_code: int) -> None:
        """Activate the account once the user and code match the stored record."""
        verification = self.store.get(verification_id)
        check_can_verify(verification, user_id, security_code)

        admin_token = self.admin_credentials.access_token()
        try:
            self.identity_provider.update_user(
                admin_token,
                user_id,
                build_profile_update(user_id, verification.first_name, verification.last_name, verification.address),
            )
        except (ProviderRejected, IdentityProviderUnavailable) as e:
            raise ActivationFailed(f"activating user failed: {e}") from e

        # Only after the provider update succeeded.
        self.store.delete(verification_id, expected_code=verification.code)
        _LOGGER.info("Verified user %s", user_id)

    def update_verification_code(self, verification_id: str) -> Verification:
        verification = self.store.get(verification_id)

        previous_code = verification.code
        verification.code = self.code_regenerator(previous_code)
        self.store.update(verification_id, verification, expected_code=previous_code)
        return verification

    def login(self, email: str, password: str) -> LoginResult:
        """Authenticate, refusing to hand out a token for an unverified account."""
        result = LoginResult.from_token_response(self.identity_provider.login(email, password))

        try:
            profile = UserProfile.from_userinfo(self.identity_provider.get_user(result.access_token))
        except ProviderRejected as e:
            _LOGGER.warning("Could not read profile for %s during login: %s", email, e)
            raise AccountNotVerified() from e

        if not profile.email_verified:
            raise AccountNotVerified()
        return result

    def delete_user(self, auth_token: str, user_id: str, group: str) -> None:
        if group == HOST_ROLE:
            deletable = self.eligibility_guard.check_host_deletable(user_id)
        else:
            deletable = self.eligibility_guard.check_guest_deletable(user_id)

        if not deletable:
            raise UserCouldNotBeDeleted()

        self.identity_provider.delete_user(auth_token, user_id)
        _LOGGER.info("Deleted user %s", user_id)

    def get_user(self, auth_token: str) -> UserProfile:
        return UserProfile.from_userinfo(self.identity_provider.get_user(auth_token))

    def get_user_by_id(self, auth_token: str, user_id: str) -> UserProfile:
        return UserProfile.from_admin_representation(user_id, self.identity_provider.get_user_by_id(auth_token, user_id))

    def update_profile(self, auth_token: str, user_id: str, first_name: str, last_name: str, address: str) -> None:
        self.identity_provider.update_user(auth_token, user_id, build_profile_update(user_id, first_name, last_name, address))

    def reset_password(self, auth_token: str, user_id: str, password: str) -> None:
        self.identity_provider.reset_password(auth_token, user_id, password)


def check_can_verify(verification: Verification, user_id: str, security_code: int) -> None:
    """Raise unless the record belongs to ``user_id`` and carries ``security_code``."""
    if verification.user_id != user_id:
        raise UserMismatch()
    if verification.code != security_code:
        raise CodeIncorrect()

