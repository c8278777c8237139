from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds, now_local
from ..core.constants import DEFAULT_CLOSING_TIME
from ..core.enums import CloseReason, ReconcileCloseMode
from ..core.exceptions import InternalError, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationReport:
    run_at: datetime
    close_time: datetime
    mode: ReconcileCloseMode
    scanned: int
    closed: int
    failed: int
    bulk: bool

    def to_dict(self) -> dict:
        return {
            "run_at": self.run_at.isoformat(),
            "close_time": self.close_time.isoformat(),
            "mode": self.mode.value,
            "scanned": self.scanned,
            "closed": self.closed,
            "failed": self.failed,
            "bulk": self.bulk,
        }


class ReconciliationJob:
    """Close every session opened today that is still open.

    Safe to re-run: only rows with closed_at NULL are touched, so a second run
    closes nothing new. Tries one bulk UPDATE first; if that statement fails
    it falls back to closing rows one by one so a single bad row cannot sink
    the batch. If even the open sessions cannot be listed the run is aborted.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        close_mode: ReconcileCloseMode = ReconcileCloseMode.RUN_TIME,
        closing_time: time = DEFAULT_CLOSING_TIME,
    ):
        self._attendance = attendance
        self._close_mode = close_mode
        self._closing_time = closing_time

    def close_time_for(self, now: datetime) -> datetime:
        if self._close_mode == ReconcileCloseMode.CLOSING_TIME:
            return datetime.combine(now.date(), self._closing_time)
        return now

    def run(self, *, now: datetime | None = None) -> ReconciliationReport:
        now = now or now_local()
        start, end = day_bounds(now.date())
        close_time = self.close_time_for(now)

        try:
            closed = self._attendance.close_open_sessions_opened_within(start=start, end=end, closed_at=close_time)
        except StoreError as e:
            logger.warning("Bulk reconciliation failed (%s); closing sessions one by one", e)
        else:
            return self._report(now, close_time, scanned=closed, closed=closed, failed=0, bulk=True)

        try:
            open_sessions = self._attendance.list_open_sessions_opened_within(start=start, end=end)
        except StoreError as e:
            logger.error("Reconciliation aborted: %s", e)
            raise InternalError("Reconciliation aborted: data store unavailable") from e

        closed = failed = 0
        for session in open_sessions:
            try:
                if self._attendance.close_session(
                    session_id=session.session_id,
                    closed_at=max(close_time, session.opened_at),
                    closed_by=CloseReason.RECONCILIATION,
                ):
                    closed += 1
            except StoreError:
                failed += 1
                logger.exception("Failed to close session %s", session.session_id)

        return self._report(now, close_time, scanned=len(open_sessions), closed=closed, failed=failed, bulk=False)

    def _report(self, now: datetime, close_time: datetime, *, scanned: int, closed: int, failed: int, bulk: bool):
        report = ReconciliationReport(
            run_at=now,
            close_time=close_time,
            mode=self._close_mode,
            scanned=scanned,
            closed=closed,
            failed=failed,
            bulk=bulk,
        )
        logger.info(
            "Reconciliation closed %d session(s) (scanned=%d, failed=%d, mode=%s)",
            closed,
            scanned,
            failed,
            self._close_mode.value,
        )
        return report
