from __future__ import annotations

from enum import Enum


class Punctuality(str, Enum):
    """Check-in classification against the facility start/late thresholds."""

    EARLY = "EARLY"
    ON_TIME = "ON_TIME"
    LATE = "LATE"


class AttendanceAction(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class CloseReason(str, Enum):
    """Who closed a session."""

    CHECKOUT = "CHECKOUT"
    RECONCILIATION = "RECONCILIATION"


class ReconcileCloseMode(str, Enum):
    """Which instant the reconciliation job stamps on abandoned sessions."""

    RUN_TIME = "run_time"
    CLOSING_TIME = "closing_time"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    BIOMETRIC_REJECTION = "biometric_rejection"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"
