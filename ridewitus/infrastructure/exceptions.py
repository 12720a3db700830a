"""
Custom Exceptions for RideWitUS

Hierarchical exception classes for proper error handling across layers.
Each class carries the HTTP status it maps to and a stable error code
that API clients can branch on.
"""

from typing import Optional, Dict, Any


class ErrorCode:
    """Stable error codes returned in API responses."""

    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_NAME = "INVALID_NAME"
    USER_EXISTS = "USER_EXISTS"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    INVALID_TOKEN = "INVALID_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EMAIL_IN_USE = "EMAIL_IN_USE"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    UNAUTHORIZED = "UNAUTHORIZED"
    CANNOT_DELETE_SELF = "CANNOT_DELETE_SELF"
    PREMIUM_REQUIRED = "PREMIUM_REQUIRED"
    ACTIVITY_NOT_FOUND = "ACTIVITY_NOT_FOUND"
    ACTIVITY_EXISTS = "ACTIVITY_EXISTS"
    PRICING_TIER_NOT_FOUND = "PRICING_TIER_NOT_FOUND"
    MISSING_PRICE_REFERENCE = "MISSING_PRICE_REFERENCE"
    INVALID_CSV = "INVALID_CSV"
    INVALID_INPUT = "INVALID_INPUT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    HASHING_ERROR = "HASHING_ERROR"
    DB_ERROR = "DB_ERROR"
    BILLING_ERROR = "BILLING_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class RideWitUsError(Exception):
    """Base exception for all RideWitUS errors."""

    status_code: int = 500
    default_code: str = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self, include_details: bool = False) -> Dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Internal detail (driver errors, original exception text) is only
        included when ``include_details`` is set, i.e. in debug mode.
        """
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "errorCode": self.error_code,
        }
        if include_details:
            details = dict(self.details)
            if self.original_error is not None:
                details["original_error"] = repr(self.original_error)
            body["details"] = details
        return body


class ValidationError(RideWitUsError):
    """Raised when input validation fails before any persistence access."""

    status_code = 400
    default_code = ErrorCode.INVALID_INPUT


class AuthenticationError(RideWitUsError):
    """Raised for missing/invalid credentials or tokens."""

    status_code = 401
    default_code = ErrorCode.NOT_AUTHENTICATED


class InvalidTokenError(AuthenticationError):
    """Raised for any malformed, forged, expired or unverifiable token."""

    default_code = ErrorCode.INVALID_TOKEN


class AuthorizationError(RideWitUsError):
    """Raised when an authenticated caller lacks the role for an action."""

    status_code = 403
    default_code = ErrorCode.UNAUTHORIZED


class ConflictError(RideWitUsError):
    """Raised on uniqueness violations."""

    status_code = 409
    default_code = ErrorCode.USER_EXISTS


class NotFoundError(RideWitUsError):
    """Raised when a requested resource is not found."""

    status_code = 404
    default_code = ErrorCode.USER_NOT_FOUND


class ConfigurationError(RideWitUsError):
    """Raised when configuration is missing or invalid."""

    default_code = ErrorCode.CONFIGURATION_ERROR

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details=details, original_error=original_error)


class UpstreamError(RideWitUsError):
    """Raised when a collaborator (database, billing, crypto) fails."""

    default_code = ErrorCode.UNKNOWN_ERROR


class HashingError(UpstreamError):
    """Raised when the password hashing primitive fails."""

    default_code = ErrorCode.HASHING_ERROR


class DatabaseError(UpstreamError):
    """Raised when database operations fail."""

    default_code = ErrorCode.DB_ERROR

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details=details, original_error=original_error)


class BillingError(UpstreamError):
    """Raised when the billing provider rejects or fails a request."""

    default_code = ErrorCode.BILLING_ERROR
