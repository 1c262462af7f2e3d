"""Flask application setup and blueprint wiring."""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from auth_api.errors import AccountServiceError
from auth_api.extensions import EXTENSION_KEY, AccountServices
from auth_api.routes import register_routes
from auth_api.services.account_service import AccountOrchestrator
from auth_api.services.admin_session import AdminCredentialProvider
from auth_api.services.attempt_limiter import VerificationAttemptLimiter
from auth_api.services.booking import DeletionEligibilityGuard
from auth_api.services.email_service import EmailService
from auth_api.services.identity_provider import IdentityProviderClient
from auth_api.services.notifications import BackgroundNotificationDispatcher, RedisNotificationPublisher
from auth_api.services.verification_store import VerificationStore


def build_services() -> AccountServices:
    """Wire the production collaborators from configuration."""
    identity_provider = IdentityProviderClient()
    orchestrator = AccountOrchestrator(
        identity_provider=identity_provider,
        admin_credentials=AdminCredentialProvider(identity_provider),
        store=VerificationStore(),
        publisher=BackgroundNotificationDispatcher(RedisNotificationPublisher()),
        eligibility_guard=DeletionEligibilityGuard(),
    )
    return AccountServices(
        orchestrator=orchestrator,
        attempt_limiter=VerificationAttemptLimiter(orchestrator),
        email_service=EmailService(),
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AccountServiceError)
    def _handle_account_error(error: AccountServiceError):
        if error.status_code >= 500:
            app.logger.error("%s: %s", type(error).__name__, error.message)
        else:
            app.logger.info("%s: %s", type(error).__name__, error.message)
        return jsonify(error=error.message), error.status_code


def create_app(services: Optional[AccountServices] = None) -> Flask:
    """Configure and return the Flask application instance."""
    app = Flask(__name__)
    CORS(app, resources={r"/*": {"origins": "*"}})

    app.extensions[EXTENSION_KEY] = services or build_services()

    register_error_handlers(app)
    register_routes(app)

    return app
