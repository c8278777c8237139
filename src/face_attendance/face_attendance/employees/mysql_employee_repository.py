from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_vector, fetchall, fetchone, load_vector
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, auth_uid, first_name, last_name, email, employee_code, is_admin, is_registered"


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        auth_uid=row["auth_uid"],
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        email=row["email"],
        employee_code=row["employee_code"],
        is_admin=bool(row.get("is_admin", False)),
        is_registered=bool(row.get("is_registered", False)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_embedding(self, employee_id: int) -> Optional[Sequence[float]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT face_encoding FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            if not row:
                return None
            return load_vector(row.get("face_encoding"))

    def get_by_employee_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s", (employee_code,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(auth_uid, first_name, last_name, email, employee_code,
                                      is_admin, is_registered, face_encoding)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    auth_uid,
                    first_name,
                    last_name,
                    email,
                    employee_code,
                    int(bool(is_admin)),
                    int(bool(is_registered)),
                    dump_vector(face_encoding),
                ),
            )
            employee_id = int(cur.lastrowid)

        return Employee(
            employee_id=employee_id,
            auth_uid=auth_uid,
            first_name=first_name,
            last_name=last_name,
            email=email,
            employee_code=employee_code,
            is_admin=bool(is_admin),
            is_registered=bool(is_registered),
        )

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def count_employees(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY employee_id DESC")
            return [_to_employee(r) for r in fetchall(cur)]
