from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import CloseReason, Punctuality
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession, SessionReportRow
from .repository import AttendanceRepository

_COLUMNS = "session_id, employee_id, opened_at, closed_at, punctuality, check_in_image_ref, closed_by"


def _to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["session_id"]),
        employee_id=int(r["employee_id"]),
        opened_at=r["opened_at"],
        closed_at=r.get("closed_at"),
        punctuality=Punctuality(r["punctuality"]) if r.get("punctuality") else None,
        check_in_image_ref=r.get("check_in_image_ref"),
        closed_by=CloseReason(r["closed_by"]) if r.get("closed_by") else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open_session(self, employee_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE employee_id=%s AND closed_at IS NULL
                ORDER BY opened_at DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_session(
        self,
        *,
        employee_id: int,
        opened_at: datetime,
        punctuality: Punctuality,
        check_in_image_ref: Optional[str] = None,
    ) -> AttendanceSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(employee_id, opened_at, punctuality, check_in_image_ref)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), opened_at, punctuality.value, check_in_image_ref),
            )
            session_id = int(cur.lastrowid)

        return AttendanceSession(
            session_id=session_id,
            employee_id=int(employee_id),
            opened_at=opened_at,
            closed_at=None,
            punctuality=punctuality,
            check_in_image_ref=check_in_image_ref,
        )

    def close_session(self, *, session_id: int, closed_at: datetime, closed_by: CloseReason) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET closed_at=%s, closed_by=%s
                WHERE session_id=%s AND closed_at IS NULL
                """,
                (closed_at, closed_by.value, int(session_id)),
            )
            return cur.rowcount > 0

    def list_open_sessions_opened_within(self, *, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE opened_at >= %s AND opened_at < %s AND closed_at IS NULL
                ORDER BY opened_at ASC
                """,
                (start, end),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def close_open_sessions_opened_within(self, *, start: datetime, end: datetime, closed_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET closed_at=GREATEST(%s, opened_at), closed_by=%s
                WHERE opened_at >= %s AND opened_at < %s AND closed_at IS NULL
                """,
                (closed_at, CloseReason.RECONCILIATION.value, start, end),
            )
            return int(cur.rowcount)

    def list_sessions_in_range(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceSession]:
        clauses = ["opened_at >= %s", "opened_at < %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE {where} ORDER BY opened_at DESC",
                tuple(params),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE employee_id=%s
                ORDER BY opened_at DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[SessionReportRow]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("s.opened_at >= %s")
            params.append(start)
        if end is not None:
            clauses.append("s.opened_at < %s")
            params.append(end)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.session_id, s.employee_id, s.opened_at, s.closed_at, s.punctuality,
                    s.check_in_image_ref, s.closed_by,
                    e.first_name, e.last_name, e.employee_code
                FROM attendance_sessions s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE {where}
                ORDER BY s.opened_at DESC
                """,
                tuple(params),
            )
            return [
                SessionReportRow(
                    session=_to_session(r),
                    first_name=r.get("first_name") or "",
                    last_name=r.get("last_name") or "",
                    employee_code=r["employee_code"],
                )
                for r in fetchall(cur)
            ]
