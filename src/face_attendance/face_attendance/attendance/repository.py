from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CloseReason, Punctuality
from .model import AttendanceSession, SessionReportRow


class AttendanceRepository(Protocol):
    def find_open_session(self, employee_id: int) -> Optional[AttendanceSession]:
        """Most recent (by opened_at) session with closed_at NULL."""

        raise NotImplementedError

    def create_session(
        self,
        *,
        employee_id: int,
        opened_at: datetime,
        punctuality: Punctuality,
        check_in_image_ref: Optional[str] = None,
    ) -> AttendanceSession:
        """Raises DuplicateRecordError if the employee already has an open session."""

        raise NotImplementedError

    def close_session(self, *, session_id: int, closed_at: datetime, closed_by: CloseReason) -> bool:
        """Close exactly this row if it is still open. False when nothing was updated."""

        raise NotImplementedError

    def list_open_sessions_opened_within(self, *, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def close_open_sessions_opened_within(self, *, start: datetime, end: datetime, closed_at: datetime) -> int:
        """Bulk reconciliation close; closed_at is clamped to each row's opened_at.

        Returns the number of rows closed.
        """

        raise NotImplementedError

    def list_sessions_in_range(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceSession]:
        """Sessions with start <= opened_at < end."""

        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[SessionReportRow]:
        raise NotImplementedError
