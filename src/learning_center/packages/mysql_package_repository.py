from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_insert, build_update, db_cursor, fetchall, fetchone, optional_decimal
from .model import Package
from .repository import PackageRepository

PACKAGE_COLUMNS = "id, name, hours, price, description, is_active, created_at, updated_at"
_WRITABLE = ("name", "hours", "price", "description", "is_active")


def package_select(alias: str, prefix: str) -> str:
    cols = [c.strip() for c in PACKAGE_COLUMNS.split(",")]
    return ", ".join(f"{alias}.{c} AS {prefix}{c}" for c in cols)


def package_from_row(row: Mapping[str, Any], prefix: str = "") -> Optional[Package]:
    if row.get(f"{prefix}id") is None:
        return None
    return Package(
        id=int(row[f"{prefix}id"]),
        name=row[f"{prefix}name"],
        hours=int(row[f"{prefix}hours"]),
        price=optional_decimal(row.get(f"{prefix}price")),
        description=row.get(f"{prefix}description"),
        is_active=bool(row.get(f"{prefix}is_active", True)),
        created_at=row.get(f"{prefix}created_at"),
        updated_at=row.get(f"{prefix}updated_at"),
    )


class MySQLPackageRepository(PackageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Package]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {PACKAGE_COLUMNS} FROM packages WHERE is_active=1 ORDER BY hours ASC, id ASC")
            return [package_from_row(r) for r in fetchall(cur)]

    def get_by_id(self, package_id: int) -> Optional[Package]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._get(cur, package_id)

    def create(self, fields: dict) -> Package:
        sql, params = build_insert("packages", {c: fields[c] for c in _WRITABLE if c in fields})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return self._get(cur, int(cur.lastrowid))

    def update(self, package_id: int, changes: dict) -> Optional[Package]:
        set_clause, params = build_update({c: changes[c] for c in _WRITABLE if c in changes})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE packages SET {set_clause} WHERE id=%s", tuple(params + [int(package_id)]))
            return self._get(cur, package_id)

    def deactivate(self, package_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE packages SET is_active=0, updated_at=UTC_TIMESTAMP() WHERE id=%s",
                (int(package_id),),
            )
            return cur.rowcount > 0

    @staticmethod
    def _get(cur, package_id: int) -> Optional[Package]:
        cur.execute(f"SELECT {PACKAGE_COLUMNS} FROM packages WHERE id=%s", (int(package_id),))
        row = fetchone(cur)
        return package_from_row(row) if row else None
