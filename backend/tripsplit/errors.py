"""
Custom exceptions for TripSplit.

Services raise these; the application factory registers a single handler
that turns them into ``{"error": message}`` JSON responses.

Usage:
    from tripsplit.errors import NotFoundError, ErrorCode

    raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes returned alongside error messages."""

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    INVALID_EXPENSE = "INVALID_EXPENSE"
    INVALID_DATE = "INVALID_DATE"

    # Lookup errors
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"

    # Access errors
    AUTH_FAILED = "AUTH_FAILED"
    FORBIDDEN = "FORBIDDEN"

    # State errors
    ALREADY_EXISTS = "ALREADY_EXISTS"
    ALREADY_INVITED = "ALREADY_INVITED"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TripSplitError(Exception):
    """Base exception for all TripSplit errors."""

    status = 500

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code.value}


class ValidationError(TripSplitError):
    """Malformed input. Surfaced to the caller, never retried."""

    status = 400

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, code)


class NotFoundError(TripSplitError):
    """An identifier did not resolve to a record."""

    status = 404

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NOT_FOUND):
        super().__init__(message, code)


class ComputationError(TripSplitError):
    """An upstream data-integrity invariant was violated during a computation."""

    status = 500

    def to_dict(self) -> dict:
        # Internal detail stays in the logs
        return {"error": "Something went wrong !!", "code": ErrorCode.INTERNAL_ERROR.value}


class AuthenticationError(TripSplitError):
    status = 401

    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUTH_FAILED):
        super().__init__(message, code)


class PermissionDeniedError(TripSplitError):
    status = 403

    def __init__(self, message: str, code: ErrorCode = ErrorCode.FORBIDDEN):
        super().__init__(message, code)


class ConflictError(TripSplitError):
    status = 409

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ALREADY_EXISTS):
        super().__init__(message, code)
