from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Store gateway for identities.

    Note (DIP): services depend on this interface, not on MySQL directly.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_embedding(self, employee_id: int) -> Optional[Sequence[float]]:
        raise NotImplementedError

    def get_by_employee_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def create_employee(
        self,
        *,
        auth_uid: str,
        first_name: str,
        last_name: str,
        email: str,
        employee_code: str,
        is_admin: bool,
        is_registered: bool,
        face_encoding: Optional[Sequence[float]],
    ) -> Employee:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def count_employees(self) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError
