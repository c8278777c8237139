from __future__ import annotations

import logging
from datetime import time
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.exceptions import DomainError
from .service import ReconciliationJob

logger = logging.getLogger(__name__)

JOB_ID = "daily-reconciliation"


class ReconciliationScheduler:
    """Runs the reconciliation job once a day at a fixed local time.

    Failed runs are logged and not retried; the next daily run (or a manual
    trigger) picks up whatever is still open.
    """

    def __init__(self, job: ReconciliationJob, *, run_at: time, scheduler: Optional[BackgroundScheduler] = None):
        self._job = job
        self._run_at = run_at
        self._scheduler = scheduler or BackgroundScheduler()

    def start(self) -> None:
        self._scheduler.add_job(
            self.run_once,
            "cron",
            hour=self._run_at.hour,
            minute=self._run_at.minute,
            second=self._run_at.second,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        self._scheduler.start()
        logger.info("Reconciliation scheduled daily at %s", self._run_at.strftime("%H:%M"))

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def run_once(self) -> None:
        try:
            self._job.run()
        except DomainError as e:
            logger.error("Scheduled reconciliation failed: %s", e)
