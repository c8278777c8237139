from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateRecordError, StoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Connection + cursor for one unit of work; commits on success.

    mysql-connector errors leave as StoreError (DuplicateRecordError for
    unique key violations).
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StoreError(f"Database unavailable: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError(str(e)) from e
        raise StoreError(str(e)) from e
    except mysql.connector.Error as e:
        conn.rollback()
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_vector(values: Optional[Sequence[float]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps([float(v) for v in values])


def load_vector(value: Any) -> Optional[tuple[float, ...]]:
    """Decode a JSON column holding a float vector.

    mysql-connector returns JSON columns as str (or bytes with some drivers).
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    if not value:
        return None
    return tuple(float(v) for v in value)
