from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import mysql.connector

from ..common.logging import get_logger
from ..core.exceptions import StorageError, ValidationError
from .connection import DatabaseConnection

logger = get_logger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction.

    Everything executed inside the block commits together; any exception
    rolls back every statement of the block.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("db_connect_failed", error=str(e))
        raise StorageError("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        raise ValidationError("Referenced row does not exist or value is duplicated") from e
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("db_query_failed", error=str(e), errno=getattr(e, "errno", None))
        raise StorageError("Database error") from e
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


def as_decimal(value: Any) -> Decimal:
    """DECIMAL columns come back as Decimal; aggregates may come back as str/float."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else as_decimal(value)


def db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def build_insert(table: str, columns: Dict[str, Any]) -> tuple[str, tuple]:
    cols = list(columns)
    sql = f"INSERT INTO {table}({', '.join(cols)}) VALUES({', '.join(['%s'] * len(cols))})"
    return sql, tuple(db_value(v) for v in columns.values())


def build_update(columns: Dict[str, Any]) -> tuple[str, list[Any]]:
    """SET clause for a partial update; updated_at always refreshes."""
    parts = [f"{col}=%s" for col in columns]
    parts.append("updated_at=UTC_TIMESTAMP()")
    return ", ".join(parts), [db_value(v) for v in columns.values()]
