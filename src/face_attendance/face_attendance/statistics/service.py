from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

from ..attendance.model import AttendanceSession, SessionReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds, month_start, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import IdentityNotFound, InternalError, StoreError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator import AttendanceStats, TopPerformers, compute_attendance_stats, rank_top_performers
from .calendar.base import WorkingCalendar


@dataclass(frozen=True)
class EmployeeOverview:
    employee: Employee
    sessions: List[AttendanceSession]
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {
            "data": [s.to_dict() for s in self.sessions],
            "employee": {"first_name": self.employee.first_name, "last_name": self.employee.last_name},
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class OrganizationOverview:
    rows: List[SessionReportRow]
    employee_count: int
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {
            "data": [r.to_dict() for r in self.rows],
            "employee_count": self.employee_count,
            "stats": self.stats.to_dict(),
        }


class StatisticsService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        calendar: WorkingCalendar,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calendar = calendar
        self._history_limit = int(history_limit)

    def employee_overview(self, employee_id: int, *, now: datetime | None = None) -> EmployeeOverview:
        now = now or now_local()
        try:
            employee = self._employees.get_by_id(employee_id)
            if employee is None:
                raise IdentityNotFound()
            history = self._attendance.get_recent_for_employee(employee_id, self._history_limit)
            month = self._attendance.list_sessions_in_range(
                start=month_start(now), end=day_bounds(now.date())[1], employee_id=employee_id
            )
        except StoreError as e:
            raise InternalError("Failed to load attendance history") from e

        stats = compute_attendance_stats(month, now, self._calendar)
        return EmployeeOverview(employee=employee, sessions=list(history), stats=stats)

    def organization_overview(self, *, now: datetime | None = None) -> OrganizationOverview:
        now = now or now_local()
        try:
            rows = self._attendance.get_report_rows(start=month_start(now), end=day_bounds(now.date())[1])
            employee_count = self._employees.count_employees()
        except StoreError as e:
            raise InternalError("Failed to load attendance") from e

        stats = compute_attendance_stats(
            [r.session for r in rows], now, self._calendar, identity_count=employee_count
        )
        return OrganizationOverview(rows=list(rows), employee_count=employee_count, stats=stats)

    def top_performers(self) -> TopPerformers:
        try:
            rows: Sequence[SessionReportRow] = self._attendance.get_report_rows()
        except StoreError as e:
            raise InternalError("Failed to load attendance") from e
        return rank_top_performers(rows)
