"""Core data structures shared by the account lifecycle services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

HOST_ROLE = "host"
GUEST_ROLE = "guest"
ROLES = (HOST_ROLE, GUEST_ROLE)

BEARER_SCHEMA = "Bearer "


@dataclass
class Verification:
    """A pending activation binding a provider user id to a one-time code."""

    user_id: str
    first_name: str
    last_name: str
    address: str
    code: int
    id: Optional[str] = None

    def to_public_dict(self) -> Dict[str, Any]:
        """Only the id pair ever leaves the service."""
        return {"id": self.id, "userId": self.user_id}


@dataclass(frozen=True)
class AdminSession:
    access_token: str
    expires_in: int = 0


@dataclass
class UserProfile:
    """Profile projected from identity provider responses."""

    id: str = ""
    given_name: str = ""
    family_name: str = ""
    email: str = ""
    address: str = ""
    email_verified: bool = False
    group: str = ""

    @classmethod
    def from_userinfo(cls, payload: Dict[str, Any]) -> "UserProfile":
        """Build a profile from the OpenID Connect userinfo payload."""
        groups = payload.get("group") or payload.get("groups") or []
        if isinstance(groups, str):
            groups = [groups]
        return cls(
            id=payload.get("sub", ""),
            given_name=payload.get("given_name", ""),
            family_name=payload.get("family_name", ""),
            email=payload.get("email", ""),
            address=payload.get("address", "") if isinstance(payload.get("address"), str) else "",
            email_verified=bool(payload.get("email_verified", False)),
            group=_strip_group_path(groups[0]) if groups else "",
        )

    @classmethod
    def from_admin_representation(cls, user_id: str, payload: Dict[str, Any]) -> "UserProfile":
        """Build a profile from the admin API user representation."""
        attributes = payload.get("attributes") or {}
        addresses = attributes.get("address") or [""]
        return cls(
            id=user_id,
            given_name=payload.get("firstName", ""),
            family_name=payload.get("lastName", ""),
            email=payload.get("email", ""),
            address=addresses[0],
            email_verified=bool(payload.get("emailVerified", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "given_name": self.given_name,
            "family_name": self.family_name,
            "email": self.email,
            "address": self.address,
            "email_verified": self.email_verified,
            "group": self.group,
        }


@dataclass
class LoginResult:
    """Token payload returned by the identity provider on login."""

    access_token: str
    expires_in: int = 0
    refresh_expires_in: int = 0
    refresh_token: str = ""
    token_type: str = ""
    id_token: str = ""
    session_state: str = ""
    scope: str = ""

    @classmethod
    def from_token_response(cls, payload: Dict[str, Any]) -> "LoginResult":
        return cls(
            access_token=payload.get("access_token", ""),
            expires_in=int(payload.get("expires_in", 0) or 0),
            refresh_expires_in=int(payload.get("refresh_expires_in", 0) or 0),
            refresh_token=payload.get("refresh_token", ""),
            token_type=payload.get("token_type", ""),
            id_token=payload.get("id_token", ""),
            session_state=payload.get("session_state", ""),
            scope=payload.get("scope", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "expires_in": self.expires_in,
            "refresh_expires_in": self.refresh_expires_in,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
            "id_token": self.id_token,
            "session_state": self.session_state,
            "scope": self.scope,
        }


def _strip_group_path(group: str) -> str:
    # Keycloak renders group membership as a path, e.g. "/host".
    return group.lstrip("/")
