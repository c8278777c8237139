from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..common.validators import require_image
from ..core.constants import DEFAULT_LATE_CUTOFF, DEFAULT_WORKDAY_START
from ..core.enums import AttendanceAction, CloseReason
from ..core.exceptions import AlreadyCheckedIn, DuplicateRecordError, InternalError, NoOpenSession, StoreError
from ..employees.model import Employee
from ..notifications.notifier import AttendanceEvent, Notifier, NullNotifier
from .factory import PunctualityStrategyFactory
from .model import AttendanceSession
from .repository import AttendanceRepository
from .strategies.base import PunctualityDecision
from .verification import VerificationOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceOutcome:
    session: AttendanceSession
    employee: Employee
    note: Optional[str] = None

    def to_dict(self) -> dict:
        out = self.session.to_dict()
        out.update({"employee_name": self.employee.full_name, "note": self.note})
        return out


class AttendanceService:
    """Session state machine: no session -> Open (check-in) -> Closed (check-out).

    Each call captures ``now`` once and uses it for both the punctuality
    decision and the stored timestamp. Transitions for one employee are
    serialized in-process; across processes the unique open-session index
    is the backstop.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        verifier: VerificationOrchestrator,
        notifier: Notifier | None = None,
        *,
        strategy_factory: PunctualityStrategyFactory | None = None,
        workday_start: time = DEFAULT_WORKDAY_START,
        late_cutoff: time = DEFAULT_LATE_CUTOFF,
        locks: KeyedLock | None = None,
    ):
        self._attendance = attendance
        self._verifier = verifier
        self._notifier = notifier or NullNotifier()
        self._factory = strategy_factory or PunctualityStrategyFactory()
        self._workday_start = workday_start
        self._late_cutoff = late_cutoff
        self._locks = locks or KeyedLock()

    def classify(self, now: datetime) -> PunctualityDecision:
        strategy = self._factory.for_checkin(now=now, workday_start=self._workday_start, late_cutoff=self._late_cutoff)
        return strategy.decide_checkin(now=now, workday_start=self._workday_start, late_cutoff=self._late_cutoff)

    def check_in(
        self,
        employee_id: int,
        image: Optional[bytes],
        *,
        image_ref: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceOutcome:
        image = require_image(image, "check-in")
        now = now or now_local()

        verified = self._verifier.verify(employee_id, image, AttendanceAction.CHECK_IN)
        decision = self.classify(now)

        with self._locks.hold(employee_id):
            try:
                if self._attendance.find_open_session(employee_id) is not None:
                    raise AlreadyCheckedIn()
                session = self._attendance.create_session(
                    employee_id=employee_id,
                    opened_at=now,
                    punctuality=decision.punctuality,
                    check_in_image_ref=image_ref,
                )
            except DuplicateRecordError as e:
                raise AlreadyCheckedIn() from e
            except StoreError as e:
                raise InternalError("Failed to record check-in") from e

        logger.info(
            "Employee %s checked in (session=%s, %s)", employee_id, session.session_id, decision.punctuality.value
        )
        self._publish(
            AttendanceEvent(
                kind=AttendanceAction.CHECK_IN,
                employee_name=verified.employee.full_name,
                occurred_at=now,
                punctuality=decision.punctuality,
            )
        )
        return AttendanceOutcome(session=session, employee=verified.employee, note=decision.note)

    def check_out(self, employee_id: int, image: Optional[bytes], *, now: datetime | None = None) -> AttendanceOutcome:
        image = require_image(image, "check-out")
        now = now or now_local()

        verified = self._verifier.verify(employee_id, image, AttendanceAction.CHECK_OUT)
        open_session = verified.open_session
        closed_at = max(now, open_session.opened_at)

        with self._locks.hold(employee_id):
            try:
                closed = self._attendance.close_session(
                    session_id=open_session.session_id,
                    closed_at=closed_at,
                    closed_by=CloseReason.CHECKOUT,
                )
            except StoreError as e:
                raise InternalError("Failed to record check-out") from e

        # Lost the race against another check-out or the reconciliation job.
        if not closed:
            raise NoOpenSession()

        session = replace(open_session, closed_at=closed_at, closed_by=CloseReason.CHECKOUT)
        logger.info("Employee %s checked out (session=%s)", employee_id, session.session_id)
        self._publish(
            AttendanceEvent(
                kind=AttendanceAction.CHECK_OUT,
                employee_name=verified.employee.full_name,
                occurred_at=closed_at,
            )
        )
        return AttendanceOutcome(session=session, employee=verified.employee)

    def _publish(self, event: AttendanceEvent) -> None:
        try:
            self._notifier.publish(event)
        except Exception:
            logger.exception("Failed to publish %s event", event.kind.value)
