"""Error kinds raised by the account lifecycle operations.

Every error carries the HTTP status the blueprints answer with; the message
is passed through to the caller verbatim.
"""

from __future__ import annotations


class AccountServiceError(RuntimeError):
    """Base class for all account lifecycle failures."""

    status_code = 500
    default_message = "account service error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(AccountServiceError):
    """Caller input is malformed."""

    status_code = 400
    default_message = "invalid request payload"


class MissingAuthorization(AccountServiceError):
    """The request carries no bearer token."""

    status_code = 401
    default_message = "missing authorization token"


class AuthenticationFailed(AccountServiceError):
    """The identity provider refused the credential pair."""

    status_code = 401
    default_message = "login failed"


class AccountNotVerified(AccountServiceError):
    """The credentials are valid but the email was never verified."""

    status_code = 403
    default_message = "user account is disabled. check email for verification"


class AdminAuthFailed(AccountServiceError):
    """The admin session could not be obtained."""

    status_code = 503
    default_message = "cannot log in as identity provider admin"


class IdentityProviderUnavailable(AccountServiceError):
    """The identity provider could not be reached."""

    status_code = 503
    default_message = "identity provider unavailable"


class DuplicateUser(AccountServiceError):
    status_code = 409
    default_message = "user exists with same email"


class ProviderRejected(AccountServiceError):
    """Generic non-success answer from the identity provider."""

    status_code = 502
    default_message = "identity provider rejected the request"


class ProviderDeleteFailed(ProviderRejected):
    default_message = "deleting user failed"


class ActivationFailed(ProviderRejected):
    """Applying the captured profile during verification failed."""

    default_message = "activating user failed"


class PersistenceFailure(AccountServiceError):
    status_code = 500
    default_message = "verification store failure"


class VerificationNotFound(AccountServiceError):
    status_code = 404
    default_message = "verification not found"


class UserMismatch(AccountServiceError):
    status_code = 400
    default_message = "incorrect user for chosen verification"


class CodeIncorrect(AccountServiceError):
    status_code = 400
    default_message = "verification code incorrect"


class TooManyAttempts(AccountServiceError):
    """Verification attempts for a record are locked out."""

    status_code = 429
    default_message = "too many verification attempts"


class EligibilityCheckFailed(AccountServiceError):
    """The booking service could not answer the deletion check."""

    status_code = 503
    default_message = "deletion eligibility check failed"


class UserCouldNotBeDeleted(AccountServiceError):
    """The user still has outstanding bookings."""

    status_code = 412
    default_message = "user could not be deleted"
