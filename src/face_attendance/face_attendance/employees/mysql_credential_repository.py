from __future__ import annotations

import json
import uuid
from typing import Optional

from werkzeug.security import generate_password_hash

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .credential_repository import CredentialRepository


class MySQLCredentialRepository(CredentialRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_credential(self, *, email: str, password: str, metadata: Optional[dict] = None) -> str:
        credential_uid = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO auth_credentials(credential_uid, email, password_hash, metadata)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    credential_uid,
                    email,
                    generate_password_hash(password),
                    json.dumps(metadata or {}),
                ),
            )
        return credential_uid

    def attach_employee(self, *, credential_uid: str, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE auth_credentials SET employee_id=%s WHERE credential_uid=%s",
                (int(employee_id), credential_uid),
            )
            return cur.rowcount > 0

    def delete_credential(self, credential_uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_credentials WHERE credential_uid=%s", (credential_uid,))
            return cur.rowcount > 0
