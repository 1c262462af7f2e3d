"""/user routes forwarding profile operations with the caller's bearer token."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from auth_api.extensions import get_services
from auth_api.utils import validation
from auth_api.utils.auth import require_bearer_token

bp = Blueprint("users", __name__, url_prefix="/user")


@bp.get("")
def get_user():
    """Return the profile of the token's owner."""
    profile = get_services().orchestrator.get_user(require_bearer_token())
    return jsonify(profile.to_dict()), 200


@bp.get("/<user_id>")
def get_user_by_id(user_id: str):
    profile = get_services().orchestrator.get_user_by_id(require_bearer_token(), user_id)
    return jsonify(profile.to_dict()), 200


@bp.put("/<user_id>")
def update_user(user_id: str):
    token = require_bearer_token()
    data = validation.updating_user_payload(request.get_json(silent=True) or {})
    get_services().orchestrator.update_profile(
        token,
        user_id,
        data["firstName"],
        data["lastName"],
        data["address"],
    )
    return "", 200


@bp.put("/<user_id>/reset-password")
def reset_password(user_id: str):
    token = require_bearer_token()
    data = validation.update_password_payload(request.get_json(silent=True) or {})
    get_services().orchestrator.reset_password(token, user_id, data["password"])
    return "", 200


@bp.delete("/<user_id>/<group>")
def delete_user(user_id: str, group: str):
    """Delete the account unless the booking service reports outstanding reservations."""
    token = require_bearer_token()
    validation.validate_group(group)
    get_services().orchestrator.delete_user(token, user_id, group)
    return "", 200
