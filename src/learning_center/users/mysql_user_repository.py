from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import IdentityClaims, User
from .repository import UserRepository

USER_COLUMNS = "id, email, first_name, last_name, profile_image_url, role, created_at, updated_at"


def user_select(alias: str, prefix: str) -> str:
    """Aliased column list for joining users into another entity's query."""
    cols = [c.strip() for c in USER_COLUMNS.split(",")]
    return ", ".join(f"{alias}.{c} AS {prefix}{c}" for c in cols)


def user_from_row(row: Mapping[str, Any], prefix: str = "") -> Optional[User]:
    if row.get(f"{prefix}id") is None:
        return None
    return User(
        id=str(row[f"{prefix}id"]),
        email=row.get(f"{prefix}email"),
        first_name=row.get(f"{prefix}first_name"),
        last_name=row.get(f"{prefix}last_name"),
        profile_image_url=row.get(f"{prefix}profile_image_url"),
        role=Role(row[f"{prefix}role"]),
        created_at=row.get(f"{prefix}created_at"),
        updated_at=row.get(f"{prefix}updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id=%s", (str(user_id),))
            row = fetchone(cur)
            return user_from_row(row) if row else None

    def upsert(self, claims: IdentityClaims) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(id, email, first_name, last_name, profile_image_url)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    email=VALUES(email),
                    first_name=VALUES(first_name),
                    last_name=VALUES(last_name),
                    profile_image_url=VALUES(profile_image_url),
                    updated_at=UTC_TIMESTAMP()
                """,
                (claims.sub, claims.email, claims.first_name, claims.last_name, claims.profile_image_url),
            )
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id=%s", (claims.sub,))
            return user_from_row(fetchone(cur))

    def list_teachers(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE role=%s ORDER BY first_name",
                (Role.TEACHER.value,),
            )
            return [user_from_row(r) for r in fetchall(cur)]

    def count_teachers(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE role=%s", (Role.TEACHER.value,))
            return int(fetchone(cur)["n"])
