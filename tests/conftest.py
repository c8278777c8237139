from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pytest

from src.face_attendance.face_attendance.attendance.model import AttendanceSession, SessionReportRow
from src.face_attendance.face_attendance.biometrics.extractor import NO_FACE
from src.face_attendance.face_attendance.core.enums import CloseReason, Punctuality
from src.face_attendance.face_attendance.core.exceptions import DuplicateRecordError, StoreError
from src.face_attendance.face_attendance.employees.model import Employee


KNOWN_FACE = tuple(float(i) / 1000.0 for i in range(128))
STRANGER_FACE = tuple(1.0 for _ in range(128))


class InMemoryEmployees:
    def __init__(self):
        self._rows: Dict[int, Employee] = {}
        self._embeddings: Dict[int, Optional[tuple]] = {}
        self._id = 0
        self.fail_create: Optional[Exception] = None
        self.fail_delete: Optional[Exception] = None
        self.deleted: List[int] = []

    def add(self, first_name="Ada", last_name="Lovelace", *, face=KNOWN_FACE, employee_code=None) -> Employee:
        self._id += 1
        emp = Employee(
            employee_id=self._id,
            auth_uid=f"uid-{self._id}",
            first_name=first_name,
            last_name=last_name,
            email=f"e{self._id}@example.com",
            employee_code=employee_code or f"EMP{self._id:03d}",
            is_registered=face is not None,
        )
        self._rows[emp.employee_id] = emp
        self._embeddings[emp.employee_id] = face
        return emp

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(employee_id)

    def get_embedding(self, employee_id: int):
        return self._embeddings.get(employee_id)

    def get_by_employee_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self._rows.values() if e.employee_code == employee_code), None)

    def create_employee(self, *, auth_uid, first_name, last_name, email, employee_code, is_admin, is_registered, face_encoding):
        if self.fail_create is not None:
            raise self.fail_create
        if self.get_by_employee_code(employee_code) is not None:
            raise DuplicateRecordError("duplicate employee_code")
        self._id += 1
        emp = Employee(
            employee_id=self._id,
            auth_uid=auth_uid,
            first_name=first_name,
            last_name=last_name,
            email=email,
            employee_code=employee_code,
            is_admin=is_admin,
            is_registered=is_registered,
        )
        self._rows[emp.employee_id] = emp
        self._embeddings[emp.employee_id] = face_encoding
        return emp

    def delete_by_id(self, employee_id: int) -> bool:
        self.deleted.append(employee_id)
        if self.fail_delete is not None:
            raise self.fail_delete
        self._embeddings.pop(employee_id, None)
        return self._rows.pop(employee_id, None) is not None

    def count_employees(self) -> int:
        return len(self._rows)

    def list_all(self) -> Sequence[Employee]:
        return sorted(self._rows.values(), key=lambda e: e.employee_id)


class InMemoryCredentials:
    def __init__(self, calls: Optional[List[str]] = None):
        self.rows: Dict[str, dict] = {}
        self.calls = calls if calls is not None else []
        self.fail_attach: Optional[Exception] = None
        self._n = 0

    def create_credential(self, *, email, password, metadata=None) -> str:
        if any(r["email"] == email for r in self.rows.values()):
            raise DuplicateRecordError("duplicate email")
        self._n += 1
        uid = f"cred-{self._n}"
        self.rows[uid] = {"email": email, "metadata": metadata, "employee_id": None}
        return uid

    def attach_employee(self, *, credential_uid, employee_id) -> bool:
        if self.fail_attach is not None:
            raise self.fail_attach
        if credential_uid not in self.rows:
            return False
        self.rows[credential_uid]["employee_id"] = employee_id
        return True

    def delete_credential(self, credential_uid: str) -> bool:
        self.calls.append(f"delete credential {credential_uid}")
        return self.rows.pop(credential_uid, None) is not None


class InMemoryAttendance:
    """Mirrors the store guarantees: one open session per employee, conditional close."""

    def __init__(self, employees: Optional[InMemoryEmployees] = None):
        self._employees = employees
        self._rows: Dict[int, AttendanceSession] = {}
        self._id = 0
        self._guard = threading.Lock()
        self.fail_bulk: Optional[Exception] = None
        self.fail_list: Optional[Exception] = None
        self.fail_close_for: set = set()
        self.fail_find: Optional[Exception] = None

    @property
    def sessions(self) -> List[AttendanceSession]:
        return sorted(self._rows.values(), key=lambda s: s.session_id)

    def add(self, employee_id: int, opened_at: datetime, *, closed_at=None, punctuality=Punctuality.ON_TIME):
        with self._guard:
            self._id += 1
            row = AttendanceSession(
                session_id=self._id,
                employee_id=employee_id,
                opened_at=opened_at,
                closed_at=closed_at,
                punctuality=punctuality,
                closed_by=CloseReason.CHECKOUT if closed_at else None,
            )
            self._rows[row.session_id] = row
            return row

    def find_open_session(self, employee_id: int):
        if self.fail_find is not None:
            raise self.fail_find
        open_rows = [s for s in self._rows.values() if s.employee_id == employee_id and s.is_open]
        return max(open_rows, key=lambda s: s.opened_at, default=None)

    def create_session(self, *, employee_id, opened_at, punctuality, check_in_image_ref=None):
        with self._guard:
            if any(s.employee_id == employee_id and s.is_open for s in self._rows.values()):
                raise DuplicateRecordError("uq_sessions_one_open")
            self._id += 1
            row = AttendanceSession(
                session_id=self._id,
                employee_id=employee_id,
                opened_at=opened_at,
                closed_at=None,
                punctuality=punctuality,
                check_in_image_ref=check_in_image_ref,
            )
            self._rows[row.session_id] = row
            return row

    def close_session(self, *, session_id, closed_at, closed_by) -> bool:
        if session_id in self.fail_close_for:
            raise StoreError(f"cannot close {session_id}")
        with self._guard:
            row = self._rows.get(session_id)
            if row is None or not row.is_open:
                return False
            self._rows[session_id] = replace(row, closed_at=closed_at, closed_by=closed_by)
            return True

    def list_open_sessions_opened_within(self, *, start, end):
        if self.fail_list is not None:
            raise self.fail_list
        return [s for s in self.sessions if s.is_open and start <= s.opened_at < end]

    def close_open_sessions_opened_within(self, *, start, end, closed_at) -> int:
        if self.fail_bulk is not None:
            raise self.fail_bulk
        count = 0
        for s in self.list_open_sessions_opened_within(start=start, end=end):
            self._rows[s.session_id] = replace(
                s, closed_at=max(closed_at, s.opened_at), closed_by=CloseReason.RECONCILIATION
            )
            count += 1
        return count

    def list_sessions_in_range(self, *, start, end, employee_id=None):
        return [
            s
            for s in self.sessions
            if start <= s.opened_at < end and (employee_id is None or s.employee_id == employee_id)
        ]

    def get_recent_for_employee(self, employee_id, limit):
        rows = [s for s in self._rows.values() if s.employee_id == employee_id]
        rows.sort(key=lambda s: s.opened_at, reverse=True)
        return rows[:limit]

    def get_report_rows(self, *, start=None, end=None):
        out = []
        for s in sorted(self._rows.values(), key=lambda s: s.opened_at, reverse=True):
            if start is not None and s.opened_at < start:
                continue
            if end is not None and s.opened_at >= end:
                continue
            emp = self._employees.get_by_id(s.employee_id) if self._employees else None
            out.append(
                SessionReportRow(
                    session=s,
                    first_name=emp.first_name if emp else "",
                    last_name=emp.last_name if emp else "",
                    employee_code=emp.employee_code if emp else "",
                )
            )
        return out


class FakeExtractor:
    """Maps image bytes to a canned extraction outcome."""

    def __init__(self, outcomes: Optional[Dict[bytes, object]] = None, default=KNOWN_FACE):
        self.outcomes = outcomes or {}
        self.default = default
        self.calls: List[bytes] = []
        self.loaded = False

    def ensure_loaded(self) -> None:
        self.loaded = True

    def extract(self, image: bytes):
        self.calls.append(image)
        outcome = self.outcomes.get(image, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is NO_FACE:
            return NO_FACE
        return np.asarray(outcome, dtype=np.float64)


class SyncExecutor:
    """Runs submitted callables inline; exceptions are captured on the Future."""

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class RecordingNotifier:
    def __init__(self, fail: Optional[Exception] = None):
        self.events = []
        self.fail = fail

    def publish(self, event) -> None:
        if self.fail is not None:
            raise self.fail
        self.events.append(event)


@pytest.fixture
def fixed_now() -> datetime:
    # A Wednesday.
    return datetime(2025, 3, 12, 8, 10, 0)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def credentials() -> InMemoryCredentials:
    return InMemoryCredentials()


@pytest.fixture
def attendance(employees) -> InMemoryAttendance:
    return InMemoryAttendance(employees)


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sync_executor() -> SyncExecutor:
    return SyncExecutor()


@pytest.fixture
def thread_executor():
    pool = ThreadPoolExecutor(max_workers=6)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def known_face():
    return KNOWN_FACE


@pytest.fixture
def stranger_face():
    return STRANGER_FACE
