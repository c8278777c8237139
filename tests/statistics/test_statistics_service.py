from datetime import datetime

import pytest

from src.face_attendance.face_attendance.core.exceptions import IdentityNotFound, InternalError, StoreError
from src.face_attendance.face_attendance.statistics.calendar.weekday_calendar import WeekdayCalendar
from src.face_attendance.face_attendance.statistics.service import StatisticsService

NOW = datetime(2025, 3, 28, 18, 0)


@pytest.fixture
def stats_service(attendance, employees):
    return StatisticsService(attendance, employees, WeekdayCalendar({5, 6}), history_limit=2)


def test_employee_overview(stats_service, employees, attendance):
    emp = employees.add("Ada", "Lovelace")
    for day in (3, 4, 5):
        attendance.add(emp.employee_id, datetime(2025, 3, day, 8, 0), closed_at=datetime(2025, 3, day, 17, 0))
    attendance.add(emp.employee_id, datetime(2025, 2, 27, 8, 0))

    overview = stats_service.employee_overview(emp.employee_id, now=NOW)
    out = overview.to_dict()

    assert out["employee"] == {"first_name": "Ada", "last_name": "Lovelace"}
    assert out["stats"] == {"absent": 17, "working_days": 20, "present": 3}
    assert [s["opened_at"] for s in out["data"]] == ["2025-03-05T08:00:00", "2025-03-04T08:00:00"]


def test_employee_overview_unknown_identity(stats_service):
    with pytest.raises(IdentityNotFound):
        stats_service.employee_overview(42, now=NOW)


def test_organization_overview(stats_service, employees, attendance):
    a = employees.add("A", "One")
    b = employees.add("B", "Two")
    attendance.add(a.employee_id, datetime(2025, 3, 3, 8, 0))
    attendance.add(b.employee_id, datetime(2025, 3, 3, 8, 5))

    overview = stats_service.organization_overview(now=NOW)

    assert overview.employee_count == 2
    assert overview.stats.present_days == 2
    assert overview.stats.absent == 38
    assert {r["employee_name"] for r in overview.to_dict()["data"]} == {"A One", "B Two"}


def test_store_failure_is_internal(stats_service, employees):
    def broken():
        raise StoreError("down")

    employees.count_employees = broken
    with pytest.raises(InternalError):
        stats_service.organization_overview(now=NOW)


def test_top_performers_over_all_sessions(stats_service, employees, attendance):
    a = employees.add("A", "One")
    attendance.add(a.employee_id, datetime(2024, 12, 2, 8, 0))
    attendance.add(a.employee_id, datetime(2025, 3, 3, 8, 0))

    top = stats_service.top_performers()
    assert top.top_attendance[0].attendance_count == 2
