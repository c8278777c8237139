from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .attendance.factory import PunctualityStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.verification import VerificationOrchestrator
from .biometrics.extractor import FaceExtractor, FaceRecognitionExtractor
from .core.settings import FacilitySettings
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_credential_repository import MySQLCredentialRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService, EnrollmentService
from .notifications.notifier import Notifier, build_notifier
from .reconciliation.service import ReconciliationJob
from .statistics.calendar.weekday_calendar import WeekdayCalendar
from .statistics.service import StatisticsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: FacilitySettings

    verification_executor: ThreadPoolExecutor
    notification_executor: ThreadPoolExecutor

    employees_repo: MySQLEmployeeRepository
    credentials_repo: MySQLCredentialRepository
    attendance_repo: MySQLAttendanceRepository

    extractor: FaceExtractor
    notifier: Notifier
    verifier: VerificationOrchestrator

    attendance_service: AttendanceService
    enrollment_service: EnrollmentService
    employee_service: EmployeeService
    statistics_service: StatisticsService
    reconciliation_job: ReconciliationJob


def build_container(
    *,
    db_config: dict,
    settings: FacilitySettings,
    extractor: Optional[FaceExtractor] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    credentials_repo = MySQLCredentialRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    # Each verification submits up to three tasks.
    verification_executor = ThreadPoolExecutor(
        max_workers=settings.verification_workers * 3, thread_name_prefix="verify"
    )
    notification_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notify")

    extractor = extractor or FaceRecognitionExtractor()
    notifier = build_notifier(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        executor=notification_executor,
        timeout=settings.notify_timeout_seconds,
    )
    verifier = VerificationOrchestrator(
        employees_repo,
        attendance_repo,
        extractor,
        verification_executor,
        match_threshold=settings.match_threshold,
    )

    attendance_service = AttendanceService(
        attendance_repo,
        verifier,
        notifier,
        strategy_factory=PunctualityStrategyFactory(),
        workday_start=settings.workday_start,
        late_cutoff=settings.late_cutoff,
    )
    enrollment_service = EnrollmentService(employees_repo, credentials_repo, extractor)
    employee_service = EmployeeService(employees_repo)
    statistics_service = StatisticsService(
        attendance_repo,
        employees_repo,
        WeekdayCalendar(settings.non_working_weekdays),
    )
    reconciliation_job = ReconciliationJob(
        attendance_repo,
        close_mode=settings.reconcile_close_mode,
        closing_time=settings.closing_time,
    )

    return Container(
        conn=conn,
        settings=settings,
        verification_executor=verification_executor,
        notification_executor=notification_executor,
        employees_repo=employees_repo,
        credentials_repo=credentials_repo,
        attendance_repo=attendance_repo,
        extractor=extractor,
        notifier=notifier,
        verifier=verifier,
        attendance_service=attendance_service,
        enrollment_service=enrollment_service,
        employee_service=employee_service,
        statistics_service=statistics_service,
        reconciliation_job=reconciliation_job,
    )
