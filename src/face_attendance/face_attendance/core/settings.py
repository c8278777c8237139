from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Any, FrozenSet, Iterable, Optional

from ..common.datetime_utils import parse_clock
from .constants import (
    DEFAULT_CLOSING_TIME,
    DEFAULT_LATE_CUTOFF,
    DEFAULT_MATCH_THRESHOLD,
    DEFAULT_NON_WORKING_WEEKDAYS,
    DEFAULT_NOTIFY_TIMEOUT_SECONDS,
    DEFAULT_RECONCILE_AT,
    DEFAULT_VERIFICATION_WORKERS,
    DEFAULT_WORKDAY_START,
)
from .enums import ReconcileCloseMode
from .exceptions import ValidationError


def parse_weekdays(value: Any) -> FrozenSet[int]:
    """Accept "5,6", [5, 6] or an empty value (every day is a working day)."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: Iterable[Any] = [v for v in value.split(",") if v.strip()]
    else:
        items = value

    days = set()
    for item in items:
        try:
            day = int(str(item).strip())
        except ValueError:
            raise ValidationError(f"Invalid weekday: {item!r}")
        if not 0 <= day <= 6:
            raise ValidationError(f"Weekday out of range (0-6): {day}")
        days.add(day)
    return frozenset(days)


@dataclass(frozen=True)
class FacilitySettings:
    """Facility policy parsed once from the settings module."""

    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    workday_start: time = DEFAULT_WORKDAY_START
    late_cutoff: time = DEFAULT_LATE_CUTOFF
    non_working_weekdays: FrozenSet[int] = field(default_factory=lambda: DEFAULT_NON_WORKING_WEEKDAYS)
    reconcile_at: time = DEFAULT_RECONCILE_AT
    reconcile_close_mode: ReconcileCloseMode = ReconcileCloseMode.RUN_TIME
    closing_time: time = DEFAULT_CLOSING_TIME
    scheduler_enabled: bool = True
    verification_workers: int = DEFAULT_VERIFICATION_WORKERS
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    notify_timeout_seconds: float = DEFAULT_NOTIFY_TIMEOUT_SECONDS

    def __post_init__(self):
        if self.match_threshold <= 0:
            raise ValidationError("FACE_MATCH_THRESHOLD must be positive")
        if self.late_cutoff < self.workday_start:
            raise ValidationError("LATE_CUTOFF must not be earlier than WORKDAY_START")
        if self.verification_workers < 1:
            raise ValidationError("VERIFICATION_WORKERS must be at least 1")

    @classmethod
    def from_module(cls, settings: Any) -> "FacilitySettings":
        def opt(name: str, default: Any = None) -> Any:
            value = getattr(settings, name, default)
            return default if value in (None, "") else value

        mode = str(opt("RECONCILE_CLOSE_MODE", ReconcileCloseMode.RUN_TIME.value)).lower()
        try:
            close_mode = ReconcileCloseMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown RECONCILE_CLOSE_MODE: {mode!r}")

        return cls(
            match_threshold=float(opt("FACE_MATCH_THRESHOLD", DEFAULT_MATCH_THRESHOLD)),
            workday_start=parse_clock(opt("WORKDAY_START", DEFAULT_WORKDAY_START)),
            late_cutoff=parse_clock(opt("LATE_CUTOFF", DEFAULT_LATE_CUTOFF)),
            non_working_weekdays=parse_weekdays(getattr(settings, "NON_WORKING_WEEKDAYS", DEFAULT_NON_WORKING_WEEKDAYS)),
            reconcile_at=parse_clock(opt("RECONCILE_AT", DEFAULT_RECONCILE_AT)),
            reconcile_close_mode=close_mode,
            closing_time=parse_clock(opt("FACILITY_CLOSING_TIME", DEFAULT_CLOSING_TIME)),
            scheduler_enabled=bool(opt("SCHEDULER_ENABLED", True)),
            verification_workers=int(opt("VERIFICATION_WORKERS", DEFAULT_VERIFICATION_WORKERS)),
            telegram_bot_token=opt("TELEGRAM_BOT_TOKEN"),
            telegram_chat_id=opt("TELEGRAM_CHAT_ID"),
            notify_timeout_seconds=float(opt("NOTIFY_TIMEOUT_SECONDS", DEFAULT_NOTIFY_TIMEOUT_SECONDS)),
        )
