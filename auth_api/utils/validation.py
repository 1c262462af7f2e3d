"""Request payload validation for the blueprints."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable

from bson import ObjectId

from auth_api.domain import ROLES
from auth_api.errors import ValidationError
from auth_api.utils.codes import CODE_MAX, CODE_MIN, is_valid_code

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_fields(payload: Dict[str, Any], fields: Iterable[str]) -> Dict[str, str]:
    """Return the named fields stripped, raising when any is missing or blank."""
    values: Dict[str, str] = {}
    missing = []
    for field in fields:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            missing.append(field)
            continue
        values[field] = value.strip()
    if missing:
        raise ValidationError(f"missing required field(s): {', '.join(missing)}")
    return values


def validate_email(email: str) -> str:
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("invalid email address")
    return email.lower()


def validate_passwords_match(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise ValidationError("password did not match")


def validate_group(group: str) -> str:
    if group not in ROLES:
        raise ValidationError("Invalid group")
    return group


def validate_object_id(value: str, field: str = "verificationId") -> str:
    if not ObjectId.is_valid(value):
        raise ValidationError(f"invalid {field}")
    return value


def validate_security_code(value: Any) -> int:
    """Accept ints or digit strings within the four digit range."""
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not is_valid_code(value):
        raise ValidationError(f"securityCode must be a number between {CODE_MIN} and {CODE_MAX}")
    return value


def registration_payload(payload: Dict[str, Any]) -> Dict[str, str]:
    values = require_fields(
        payload,
        ("email", "firstName", "lastName", "password", "confirmPassword", "address", "group"),
    )
    values["email"] = validate_email(values["email"])
    validate_passwords_match(payload["password"], payload["confirmPassword"])
    validate_group(values["group"])
    values["password"] = payload["password"]
    return values


def login_payload(payload: Dict[str, Any]) -> Dict[str, str]:
    values = require_fields(payload, ("email", "password"))
    values["email"] = validate_email(values["email"])
    values["password"] = payload["password"]
    return values


def verification_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = require_fields(payload, ("verificationId", "userId"))
    validate_object_id(values["verificationId"])
    values["securityCode"] = validate_security_code(payload.get("securityCode"))
    return values


def send_code_again_payload(payload: Dict[str, Any]) -> Dict[str, str]:
    values = require_fields(payload, ("verificationId", "userEmail"))
    validate_object_id(values["verificationId"])
    values["userEmail"] = validate_email(values["userEmail"])
    return values


def updating_user_payload(payload: Dict[str, Any]) -> Dict[str, str]:
    return require_fields(payload, ("firstName", "lastName", "address"))


def update_password_payload(payload: Dict[str, Any]) -> Dict[str, str]:
    require_fields(payload, ("password", "confirmPassword"))
    validate_passwords_match(payload["password"], payload["confirmPassword"])
    return {"password": payload["password"]}
