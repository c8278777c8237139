"""Run the end-of-day reconciliation once, outside the scheduler.

Usage: APP_ENV=production python scripts/reconcile.py
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.face_attendance.face_attendance.common.logging_utils import configure_logging
from src.face_attendance.face_attendance.container import build_container
from src.face_attendance.face_attendance.core.exceptions import DomainError
from src.face_attendance.face_attendance.core.settings import FacilitySettings


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        settings=FacilitySettings.from_module(settings),
    )
    try:
        report = container.reconciliation_job.run()
    except DomainError as e:
        print(f"FAILED: {e.message}", file=sys.stderr)
        return 1
    finally:
        container.verification_executor.shutdown(wait=False)
        container.notification_executor.shutdown(wait=True)

    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
