from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CloseReason, Punctuality


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one open-to-close presence interval of an employee."""

    session_id: int
    employee_id: int
    opened_at: datetime
    closed_at: Optional[datetime]
    punctuality: Optional[Punctuality]
    check_in_image_ref: Optional[str] = None
    closed_by: Optional[CloseReason] = None

    @property
    def is_open(self) -> bool:
        return self.closed_at is None

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "employee_id": self.employee_id,
            "opened_at": _iso(self.opened_at),
            "closed_at": _iso(self.closed_at),
            "punctuality": self.punctuality.value if self.punctuality else None,
            "closed_by": self.closed_by.value if self.closed_by else None,
        }


@dataclass(frozen=True)
class SessionReportRow:
    """Read-model for admin listings (session joined with employee names)."""

    session: AttendanceSession
    first_name: str
    last_name: str
    employee_code: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        out = self.session.to_dict()
        out.update(
            {
                "employee_name": self.full_name,
                "employee_code": self.employee_code,
            }
        )
        return out
