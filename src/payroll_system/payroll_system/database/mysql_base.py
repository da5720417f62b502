from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from mysql.connector import errors

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

# MySQL ER_DUP_ENTRY
DUPLICATE_KEY_ERRNO = 1062


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    pinned = conn_factory.active()
    if pinned is not None:
        cur = pinned.cursor(dictionary=dictionary)
        try:
            yield pinned, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def translate_duplicate(message: str):
    """Turn a unique-constraint violation into ConflictError."""
    try:
        yield
    except errors.IntegrityError as exc:
        if getattr(exc, "errno", None) == DUPLICATE_KEY_ERRNO:
            raise ConflictError(message) from exc
        raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta or "HH:MM[:SS]" depending on the connector."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)
    if isinstance(value, str):
        return time(*(int(p) for p in value.strip().split(":")[:3]))
    raise TypeError(f"Unsupported MySQL TIME value: {value!r}")
