"""Service-layer exceptions mapped to HTTP responses.

Every error carries an HTTP ``status_code`` and a stable ``error_code``.
Handlers never catch these individually; they propagate to the handlers
installed by ``blogapi.middleware.errors``.
"""
from typing import Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 400
    error_code: str = "validation_error"
    default_message: str = "Bad request"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        detail: Optional[dict] = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail or {}


class ValidationError(ServiceError):
    """Missing or malformed input (400)."""
    status_code = 400
    error_code = "validation_error"
    default_message = "Invalid request data"


class AttendanceDisabledError(ValidationError):
    error_code = "attendance_disabled"
    default_message = "This event does not accept attendance confirmations"


class AuthenticationError(ServiceError):
    """Missing, malformed, expired or revoked credentials (401)."""
    status_code = 401
    error_code = "unauthorized"
    default_message = "Not authorized"


class MissingTokenError(AuthenticationError):
    error_code = "missing_token"
    default_message = "Not authorized, no token"


class InvalidTokenError(AuthenticationError):
    error_code = "invalid_token"
    default_message = "Not authorized, token failed"


class UserNotFoundError(AuthenticationError):
    error_code = "user_not_found"
    default_message = "Not authorized, user not found"


class TokenRevokedError(AuthenticationError):
    error_code = "token_revoked"
    default_message = "Not authorized, token has been revoked"


class TokenNotActiveError(AuthenticationError):
    error_code = "token_not_active"
    default_message = "The provided token is already inactive for this session"


class InvalidCredentialsError(AuthenticationError):
    error_code = "invalid_credentials"
    default_message = "Invalid credentials (wrong email or password)"


class AuthorizationError(ServiceError):
    """Authenticated but not allowed (403)."""
    status_code = 403
    error_code = "forbidden"
    default_message = "Forbidden"


class ForbiddenError(AuthorizationError):
    default_message = "Not authorized, admins only"


class AccountBlockedError(AuthorizationError):
    error_code = "account_blocked"
    default_message = "Your account has been blocked. Contact the administrator."


class NotFoundError(ServiceError):
    """Referenced entity is absent (404)."""
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found"


class ConflictError(ServiceError):
    """Unique field collision (409)."""
    status_code = 409
    error_code = "conflict"
    default_message = "Resource already exists"


class DependencyError(ServiceError):
    """Blob storage or hashing failure (500)."""
    status_code = 500
    error_code = "dependency_error"
    default_message = "An external dependency failed"


__all__ = [
    "ServiceError",
    "ValidationError",
    "AttendanceDisabledError",
    "AuthenticationError",
    "MissingTokenError",
    "InvalidTokenError",
    "UserNotFoundError",
    "TokenRevokedError",
    "TokenNotActiveError",
    "InvalidCredentialsError",
    "AuthorizationError",
    "ForbiddenError",
    "AccountBlockedError",
    "NotFoundError",
    "ConflictError",
    "DependencyError",
]
