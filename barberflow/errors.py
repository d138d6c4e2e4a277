"""Error taxonomy shared by the repositories and the HTTP layer."""
from __future__ import annotations

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class ApiError(Exception):
    status_code = 500
    error = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


class ValidationError(ApiError):
    status_code = 400
    error = "invalid_payload"
    default_message = "Invalid request payload"


class InvalidTransition(ValidationError):
    error = "invalid_transition"
    default_message = "Status transition is not allowed"


class AuthenticationError(ApiError):
    status_code = 401
    error = "unauthorized"
    default_message = "Authentication required"


class InvalidCredentials(AuthenticationError):
    default_message = "invalid email or password"


class Unauthenticated(AuthenticationError):
    default_message = "Missing bearer token"


class AuthorizationError(ApiError):
    status_code = 403
    error = "forbidden"
    default_message = "Forbidden"


class AccountSuspended(AuthorizationError):
    error = "account_suspended"
    default_message = "Organization is suspended"


class InvalidToken(AuthorizationError):
    error = "invalid_token"
    default_message = "Invalid or expired token"


class NotFoundError(ApiError):
    status_code = 404
    error = "not_found"
    default_message = "Resource not found"


class PersistenceError(ApiError):
    status_code = 500
    error = "database_error"
    default_message = "Database operation failed"


class ServiceUnavailable(ApiError):
    status_code = 503
    error = "service_unavailable"
    default_message = "Database connections exhausted, try again later"


class RequestTimeout(ApiError):
    status_code = 504
    error = "timeout"
    default_message = "Request deadline exceeded"


def translate_db_error(exc: SQLAlchemyError, message: str | None = None) -> ApiError:
    """Map a SQLAlchemy failure onto the API error taxonomy."""
    if isinstance(exc, PoolTimeoutError):
        return ServiceUnavailable()
    if isinstance(exc, OperationalError) and "statement timeout" in str(exc.orig):
        return RequestTimeout()
    return PersistenceError(message)
