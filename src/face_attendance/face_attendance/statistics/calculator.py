"""Pure attendance statistics.

Everything here is recomputed from the full session list on every call;
nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Sequence

from ..attendance.model import AttendanceSession, SessionReportRow
from ..common.datetime_utils import month_start
from ..core.constants import STANDARD_WORKDAY_HOURS, TOP_PERFORMERS_LIMIT
from ..core.enums import Punctuality
from .calendar.base import WorkingCalendar


@dataclass(frozen=True)
class AttendanceStats:
    working_days: int
    present_days: int
    absent: int

    def to_dict(self) -> dict:
        return {
            "absent": self.absent,
            "working_days": self.working_days,
            "present": self.present_days,
        }


@dataclass
class PerformerStats:
    employee_id: int
    name: str
    late_count: int = 0
    early_count: int = 0
    attendance_count: int = 0
    overtime_hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "late_count": self.late_count,
            "early_count": self.early_count,
            "attendance_count": self.attendance_count,
            "overtime_hours": round(self.overtime_hours, 2),
        }


@dataclass(frozen=True)
class TopPerformers:
    top_late: List[PerformerStats]
    top_early: List[PerformerStats]
    top_attendance: List[PerformerStats]
    top_overtime: List[PerformerStats]

    def to_dict(self) -> dict:
        return {
            "top_late": [p.to_dict() for p in self.top_late],
            "top_early": [p.to_dict() for p in self.top_early],
            "top_attendance": [p.to_dict() for p in self.top_attendance],
            "top_overtime": [p.to_dict() for p in self.top_overtime],
        }


def count_working_days(start: date, end: date, calendar: WorkingCalendar) -> int:
    """Working days in [start, end], both inclusive."""
    days = 0
    day = start
    while day <= end:
        if calendar.is_working_day(day):
            days += 1
        day += timedelta(days=1)
    return days


def count_present_days(sessions: Iterable[AttendanceSession], start: datetime, end: datetime) -> int:
    """Distinct (employee, calendar date) pairs among sessions opened in [start, end]."""
    present = {(s.employee_id, s.opened_at.date()) for s in sessions if start <= s.opened_at <= end}
    return len(present)


def compute_attendance_stats(
    sessions: Iterable[AttendanceSession],
    now: datetime,
    calendar: WorkingCalendar,
    *,
    identity_count: int = 1,
) -> AttendanceStats:
    """Month-to-date stats; identity_count > 1 gives the organization-wide view."""
    start = month_start(now)
    working_days = count_working_days(start.date(), now.date(), calendar)
    present_days = count_present_days(sessions, start, now)
    expected = working_days * max(int(identity_count), 0)
    return AttendanceStats(
        working_days=working_days,
        present_days=present_days,
        absent=max(0, expected - present_days),
    )


def rank_top_performers(
    rows: Iterable[SessionReportRow],
    *,
    limit: int = TOP_PERFORMERS_LIMIT,
    standard_hours: float = STANDARD_WORKDAY_HOURS,
) -> TopPerformers:
    stats: Dict[int, PerformerStats] = {}

    for row in rows:
        s = row.session
        p = stats.get(s.employee_id)
        if p is None:
            p = PerformerStats(employee_id=s.employee_id, name=row.full_name)
            stats[s.employee_id] = p

        p.attendance_count += 1
        if s.punctuality == Punctuality.LATE:
            p.late_count += 1
        elif s.punctuality == Punctuality.EARLY:
            p.early_count += 1

        if s.closed_at is not None:
            hours = (s.closed_at - s.opened_at).total_seconds() / 3600
            if hours > standard_hours:
                p.overtime_hours += hours - standard_hours

    everyone: Sequence[PerformerStats] = list(stats.values())

    def top(key: str) -> List[PerformerStats]:
        return sorted(everyone, key=lambda p: getattr(p, key), reverse=True)[:limit]

    return TopPerformers(
        top_late=top("late_count"),
        top_early=top("early_count"),
        top_attendance=top("attendance_count"),
        top_overtime=top("overtime_hours"),
    )
