"""Client for the identity provider's OpenID Connect and admin REST surface."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from auth_api import config
from auth_api.domain import BEARER_SCHEMA
from auth_api.errors import (
    AuthenticationFailed,
    DuplicateUser,
    IdentityProviderUnavailable,
    ProviderDeleteFailed,
    ProviderRejected,
)

_LOGGER = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_user_representation(
    email: str,
    first_name: str,
    last_name: str,
    password: str,
    address: str,
    group: str,
) -> Dict[str, Any]:
    """Return the admin API payload for creating a user."""
    return {
        "username": email,
        "email": email,
        "firstName": first_name,
        "lastName": last_name,
        "enabled": True,
        "credentials": [{"type": "password", "value": password, "temporary": False}],
        "attributes": {"address": [address]},
        "groups": [group],
    }


def build_profile_update(user_id: str, first_name: str, last_name: str, address: str) -> Dict[str, Any]:
    return {
        "id": user_id,
        "firstName": first_name,
        "lastName": last_name,
        "attributes": {"address": [address]},
    }


def build_credentials(password: str) -> Dict[str, Any]:
    return {"type": "password", "value": password, "temporary": False}


class IdentityProviderClient:
    """
    Thin HTTP client over a Keycloak realm.

    Every call is stateless: privileged calls take the bearer token to act
    with, and every request carries an explicit timeout.
    """

    def __init__(
        self,
        base_url: str = config.IDENTITY_PROVIDER_URL,
        realm: str = config.IDENTITY_PROVIDER_REALM,
        client_id: str = config.IDENTITY_PROVIDER_CLIENT_ID,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.realm = realm
        self.client_id = client_id
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/token"

    @property
    def userinfo_url(self) -> str:
        return f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/userinfo"

    @property
    def admin_users_url(self) -> str:
        return f"{self.base_url}/admin/realms/{self.realm}/users"

    def _request(self, method: str, url: str, token: Optional[str] = None, **kwargs: Any) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = BEARER_SCHEMA + token
        try:
            return self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            _LOGGER.error("Identity provider request %s %s failed: %s", method, url, e)
            raise IdentityProviderUnavailable(f"identity provider unavailable: {e}") from e

    @staticmethod
    def _json(response: requests.Response, what: str) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            raise ProviderRejected(f"can't decode {what} payload") from e

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Exchange a credential pair for a token payload (password grant)."""
        response = self._request(
            "POST",
            self.token_url,
            data={
                "client_id": self.client_id,
                "username": username,
                "password": password,
                "grant_type": "password",
                "scope": "openid",
            },
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        if response.status_code != 200:
            raise AuthenticationFailed("login failed")
        return self._json(response, "login")

    def create_user(self, representation: Dict[str, Any], admin_token: str) -> str:
        """
        Create a user and return the provider-issued id.

        The id is the last segment of the ``Location`` header of the 201
        response.
        """
        response = self._request(
            "POST",
            self.admin_users_url,
            token=admin_token,
            json=representation,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
        if response.status_code == 409:
            raise DuplicateUser("user exists with same email")
        if response.status_code != 201:
            raise ProviderRejected("registration failed")

        location = response.headers.get("Location", "")
        user_id = location.rstrip("/").split("/")[-1] if location else ""
        if not user_id:
            raise ProviderRejected("user not created")
        return user_id

    def get_user(self, token: str) -> Dict[str, Any]:
        """Return the userinfo claims of the token's owner."""
        response = self._request("GET", self.userinfo_url, token=token)
        if response.status_code != 200:
            raise ProviderRejected("getting user failed")
        return self._json(response, "user")

    def get_user_by_id(self, admin_token: str, user_id: str) -> Dict[str, Any]:
        response = self._request("GET", f"{self.admin_users_url}/{user_id}", token=admin_token)
        if response.status_code != 200:
            raise ProviderRejected("getting user failed")
        return self._json(response, "keycloak user")

    def update_user(self, admin_token: str, user_id: str, representation: Dict[str, Any]) -> None:
        response = self._request(
            "PUT",
            f"{self.admin_users_url}/{user_id}",
            token=admin_token,
            json=representation,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
        if response.status_code != 204:
            raise ProviderRejected("updating user failed")

    def delete_user(self, admin_token: str, user_id: str) -> None:
        response = self._request("DELETE", f"{self.admin_users_url}/{user_id}", token=admin_token)
        if response.status_code != 204:
            raise ProviderDeleteFailed("deleting user failed")

    def reset_password(self, admin_token: str, user_id: str, new_password: str) -> None:
        response = self._request(
            "PUT",
            f"{self.admin_users_url}/{user_id}/reset-password",
            token=admin_token,
            json=build_credentials(new_password),
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
        if response.status_code != 204:
            raise ProviderRejected("resetting user password failed")
