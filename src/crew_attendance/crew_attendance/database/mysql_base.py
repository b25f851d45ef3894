from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import TransportError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back on any error.

    Driver failures surface as TransportError with the original error chained.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise TransportError(f"store error: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise TransportError(f"store error: {e}") from e
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


def dump_names(names) -> str:
    return json.dumps(list(names), ensure_ascii=False)


def load_names(value: Any) -> list[str]:
    """Decode a JSON member-name column (str/bytes/list depending on connector)."""
    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value) if value else []
    return [str(n) for n in value]
