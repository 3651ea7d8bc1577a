from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateRecordError, StoreError
from .connection import DatabaseConnection


def translate_error(e: mysql.connector.Error) -> StoreError:
    """Map a driver error to the store errors the services understand."""

    if isinstance(e, mysql.connector.IntegrityError) and e.errno == errorcode.ER_DUP_ENTRY:
        return DuplicateRecordError(e.msg)
    return StoreError(e.msg or str(e))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Yield (conn, cursor) inside one transaction.

    Commits when the block exits cleanly and rolls back otherwise. Driver
    errors surface as StoreError (DuplicateRecordError for unique keys).
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StoreError(f"Database unavailable: {e.msg}") from e

    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        raise translate_error(e) from e
    except BaseException:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def to_float(value: Any) -> Optional[float]:
    """DECIMAL columns come back as Decimal; the domain works in float."""

    if value is None:
        return None
    return float(value)
