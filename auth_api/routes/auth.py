"""/auth routes handling signup, login and email-code verification."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from auth_api.extensions import get_services
from auth_api.utils import validation

HEALTH_CHECK_MESSAGE = "AUTH SERVICE IS HEALTH"

bp = Blueprint("auth", __name__, url_prefix="/auth")


def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


@bp.post("/login")
def login():
    """Exchange credentials for a token, for verified accounts only."""
    data = validation.login_payload(_payload())
    result = get_services().orchestrator.login(data["email"], data["password"])
    return jsonify(result.to_dict()), 200


@bp.post("/signup")
def sign_up():
    """Create the account and email the verification code."""
    data = validation.registration_payload(_payload())
    services = get_services()

    verification = services.orchestrator.sign_up(
        data["email"],
        data["firstName"],
        data["lastName"],
        data["password"],
        data["address"],
        data["group"],
    )

    if not services.email_service.send_verification_code(data["email"], verification):
        current_app.logger.warning("Verification email for %s was not sent", verification.id)

    return jsonify(verification.to_public_dict()), 201


@bp.put("/verify")
def verify_user():
    data = validation.verification_payload(_payload())
    get_services().attempt_limiter.verify_user(
        data["verificationId"],
        data["userId"],
        data["securityCode"],
    )
    return "", 200


@bp.post("/send-code-again")
def send_verification_code_again():
    """Regenerate the code of a pending verification and email it again."""
    data = validation.send_code_again_payload(_payload())
    services = get_services()

    verification = services.orchestrator.update_verification_code(data["verificationId"])

    if not services.email_service.send_verification_code(data["userEmail"], verification):
        current_app.logger.warning("Verification email for %s was not sent", verification.id)

    return jsonify(verification.to_public_dict()), 200


@bp.get("/health")
def health_check():
    return jsonify(HEALTH_CHECK_MESSAGE), 200
