from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: an enrolled identity.

    The face template is deliberately not part of this object; it is read
    through ``EmployeeRepository.get_embedding`` only when verifying.
    """

    employee_id: int
    auth_uid: str
    first_name: str
    last_name: str
    email: str
    employee_code: str
    is_admin: bool = False
    is_registered: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "auth_uid": self.auth_uid,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "employee_code": self.employee_code,
            "is_admin": self.is_admin,
            "is_registered": self.is_registered,
        }
