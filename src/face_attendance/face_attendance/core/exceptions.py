from __future__ import annotations

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``kind`` (the error family callers branch
    on) and ``code`` (the specific rejection).
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "domain_error"
    default_message: str = "Domain rule violated"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.VALIDATION
    code = "validation_error"
    default_message = "Invalid input"


class Unauthenticated(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    code = "unauthenticated"
    default_message = "Unauthorized: user not identified"


class AuthorizationError(DomainError):
    """Raised when an identified user lacks permission for an action."""

    kind = ErrorKind.FORBIDDEN
    code = "forbidden"
    default_message = "Insufficient permissions"


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND
    code = "not_found"
    default_message = "Record not found"


class IdentityNotFound(NotFound):
    code = "identity_not_found"
    default_message = "Employee record not found"


class BiometricNotEnrolled(NotFound):
    code = "biometric_not_enrolled"
    default_message = "Face not registered. Please contact admin."


class NoOpenSession(NotFound):
    code = "no_open_session"
    default_message = "No active check-in found. Please check in first."


class BiometricRejection(DomainError):
    """A security decision about the presented face, not a client bug."""

    kind = ErrorKind.BIOMETRIC_REJECTION
    code = "biometric_rejection"
    default_message = "Face verification rejected"


class NoFaceDetected(BiometricRejection):
    code = "no_face_detected"
    default_message = "No face detected in camera feed"


class BiometricMismatch(BiometricRejection):
    code = "biometric_mismatch"
    default_message = "Face verification failed: not your face"


class Conflict(DomainError):
    kind = ErrorKind.CONFLICT
    code = "conflict"
    default_message = "Conflict: record already exists"


class AlreadyCheckedIn(Conflict):
    code = "already_checked_in"
    default_message = "You are already checked in"


class DuplicateEmployeeCode(Conflict):
    code = "duplicate_employee_code"
    default_message = "Employee ID already exists"


class Unavailable(DomainError):
    kind = ErrorKind.UNAVAILABLE
    code = "unavailable"
    default_message = "Service temporarily unavailable"


class ExtractionUnavailable(Unavailable):
    code = "extraction_unavailable"
    default_message = "Face verification unavailable: model not loaded"


class InternalError(DomainError):
    kind = ErrorKind.INTERNAL
    code = "internal_error"
    default_message = "Internal Server Error"


class StoreError(Exception):
    """Data-access failure raised by the MySQL repositories."""


class DuplicateRecordError(StoreError):
    """Unique constraint violated on insert/update."""
