from __future__ import annotations

import logging
from concurrent.futures import ALL_COMPLETED, Executor, Future, wait
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from ..biometrics.comparator import euclidean_distance
from ..biometrics.extractor import FaceExtractor, NoFaceFound
from ..core.constants import DEFAULT_MATCH_THRESHOLD
from ..core.enums import AttendanceAction
from ..core.exceptions import (
    BiometricMismatch,
    BiometricNotEnrolled,
    DomainError,
    IdentityNotFound,
    InternalError,
    NoFaceDetected,
    NoOpenSession,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedPresence:
    employee: Employee
    action: AttendanceAction
    distance: float
    open_session: Optional[AttendanceSession] = None


def _settle(future: Future) -> Tuple[Any, Optional[BaseException]]:
    exc = future.exception()
    if exc is not None:
        return None, exc
    return future.result(), None


def _as_domain_error(exc: BaseException, message: str) -> DomainError:
    if isinstance(exc, DomainError):
        return exc
    wrapped = InternalError(message)
    wrapped.__cause__ = exc
    return wrapped


class VerificationOrchestrator:
    """Authenticate a presence event before any session is touched.

    The identity lookup, the face extraction and (for check-out) the open
    session lookup run concurrently and are all awaited; none is cancelled
    when a sibling fails, because the decision below needs every outcome to
    report the most specific rejection. Verification performs no writes.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        extractor: FaceExtractor,
        executor: Executor,
        *,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    ):
        self._employees = employees
        self._attendance = attendance
        self._extractor = extractor
        self._executor = executor
        self._threshold = float(match_threshold)

    def verify(self, employee_id: int, image: bytes, action: AttendanceAction) -> VerifiedPresence:
        identity_task = self._executor.submit(self._load_identity, employee_id)
        capture_task = self._executor.submit(self._extractor.extract, image)
        open_task = None
        if action == AttendanceAction.CHECK_OUT:
            open_task = self._executor.submit(self._attendance.find_open_session, employee_id)

        wait([f for f in (identity_task, capture_task, open_task) if f is not None], return_when=ALL_COMPLETED)

        try:
            return self._decide(employee_id, action, identity_task, capture_task, open_task)
        except DomainError as e:
            logger.info("Verification rejected for employee %s (%s): %s", employee_id, action.value, e.code)
            raise

    def _load_identity(self, employee_id: int) -> Tuple[Optional[Employee], Optional[Sequence[float]]]:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            return None, None
        return employee, self._employees.get_embedding(employee_id)

    def _decide(
        self,
        employee_id: int,
        action: AttendanceAction,
        identity_task: Future,
        capture_task: Future,
        open_task: Optional[Future],
    ) -> VerifiedPresence:
        identity, identity_error = _settle(identity_task)
        if identity_error:
            raise _as_domain_error(identity_error, "Failed to load employee record")
        employee, stored = identity
        if employee is None:
            raise IdentityNotFound()
        if stored is None:
            raise BiometricNotEnrolled()

        captured, capture_error = _settle(capture_task)
        if capture_error:
            raise _as_domain_error(capture_error, "Face extraction failed")
        if isinstance(captured, NoFaceFound):
            raise NoFaceDetected()

        distance = euclidean_distance(stored, captured)
        if not distance <= self._threshold:
            raise BiometricMismatch()

        open_session = None
        if open_task is not None:
            open_session, open_error = _settle(open_task)
            if open_error:
                raise _as_domain_error(open_error, "Failed to look up open session")
            if open_session is None:
                raise NoOpenSession()

        return VerifiedPresence(employee=employee, action=action, distance=distance, open_session=open_session)
