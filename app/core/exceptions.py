"""Custom exceptions for the application."""

from enum import Enum
from typing import Any


class AppException(Exception):
    """Base exception for all application exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class PasswordViolation(str, Enum):
    """First password policy rule a candidate password breaks."""

    TOO_SHORT = "too_short"
    TOO_COMMON = "too_common"
    NO_UPPER = "no_upper"
    NO_LOWER = "no_lower"
    NO_NUMBER = "no_number"
    NO_SPECIAL = "no_special"


PASSWORD_VIOLATION_MESSAGES = {
    PasswordViolation.TOO_SHORT: "Password must be at least 8 characters long",
    PasswordViolation.TOO_COMMON: "Password is too common or easily guessable",
    PasswordViolation.NO_UPPER: "Password must contain at least one uppercase letter",
    PasswordViolation.NO_LOWER: "Password must contain at least one lowercase letter",
    PasswordViolation.NO_NUMBER: "Password must contain at least one number",
    PasswordViolation.NO_SPECIAL: "Password must contain at least one special character",
}


# Authentication Exceptions
class AuthenticationError(AppException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed", details: dict | None = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when credentials are invalid.

    Unknown email and wrong password deliberately share this error.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message)
        self.error_code = "INVALID_CREDENTIALS"


class TokenExpiredError(AuthenticationError):
    """Raised when token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message=message, details={"reason": "expired"})
        self.error_code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed, badly signed or otherwise invalid."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, details={"reason": "invalid"})
        self.error_code = "INVALID_TOKEN"


class TokenRevokedError(InvalidTokenError):
    """Raised when a token was revoked by logout."""

    def __init__(self, message: str = "Token has been revoked"):
        super().__init__(message=message)
        self.error_code = "TOKEN_REVOKED"


# Authorization Exceptions
class AuthorizationError(AppException):
    """Raised when authorization fails."""

    def __init__(self, message: str = "Access denied", details: dict | None = None):
        super().__init__(
            message=message,
            status_code=403,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user doesn't have required permissions."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message=message)
        self.error_code = "INSUFFICIENT_PERMISSIONS"


# Resource Exceptions
class NotFoundError(AppException):
    """Raised when resource is not found."""

    def __init__(
        self, resource: str = "Resource", identifier: str | None = None
    ):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier},
        )


class ConflictError(AppException):
    """Raised when resource conflicts."""

    def __init__(self, message: str = "Resource already exists", details: dict | None = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details,
        )


# Validation Exceptions
class PasswordPolicyError(AppException):
    """Raised when a password does not satisfy the password policy."""

    def __init__(self, violation: PasswordViolation):
        self.violation = violation
        super().__init__(
            message=PASSWORD_VIOLATION_MESSAGES[violation],
            status_code=400,
            error_code="WEAK_PASSWORD",
            details={"violation": violation.value},
        )


class VerificationTokenNotFoundError(AppException):
    """Raised when a verification token was never issued, already used or expired."""

    def __init__(self):
        super().__init__(
            message="Verification token is invalid or has expired",
            status_code=400,
            error_code="VERIFICATION_TOKEN_INVALID",
            details={"reason": "invalid"},
        )


class EmailAlreadyVerifiedError(AppException):
    """Raised when verification is requested for an already verified email."""

    def __init__(self):
        super().__init__(
            message="Email already verified",
            status_code=400,
            error_code="EMAIL_ALREADY_VERIFIED",
        )


# Rate Limiting
class RateLimitExceededError(AppException):
    """Raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            message="Too many requests. Please try again later.",
            status_code=429,
            error_code="RATE_LIMIT_EXCEEDED",
            details={"retry_after": retry_after},
        )


# Infrastructure Exceptions
class TokenSigningError(AppException):
    """Raised when a token pair could not be signed."""

    def __init__(self, message: str = "Failed to generate tokens"):
        super().__init__(
            message=message,
            status_code=500,
            error_code="TOKEN_SIGNING_ERROR",
        )


class StoreUnavailableError(AppException):
    """Raised when a backing store cannot be reached."""

    def __init__(self, message: str = "Backing store is unavailable"):
        super().__init__(
            message=message,
            status_code=500,
            error_code="STORE_UNAVAILABLE",
        )
