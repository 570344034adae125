from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.enums import StudentLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_insert, build_update, db_cursor, fetchall, fetchone
from ..packages.mysql_package_repository import package_from_row, package_select
from ..users.mysql_user_repository import user_from_row, user_select
from .model import Student, StudentWithRelations
from .repository import StudentRepository

STUDENT_COLUMNS = (
    "id, name, email, age, level, package_id, assigned_teacher_id, "
    "total_hours, remaining_hours, is_active, created_at, updated_at"
)
_WRITABLE = (
    "name",
    "email",
    "age",
    "level",
    "package_id",
    "assigned_teacher_id",
    "total_hours",
    "remaining_hours",
    "is_active",
)


def student_select(alias: str, prefix: str) -> str:
    cols = [c.strip() for c in STUDENT_COLUMNS.split(",")]
    return ", ".join(f"{alias}.{c} AS {prefix}{c}" for c in cols)


def _student_kwargs(row: Mapping[str, Any], prefix: str) -> dict:
    return dict(
        id=int(row[f"{prefix}id"]),
        name=row[f"{prefix}name"],
        email=row.get(f"{prefix}email"),
        age=row.get(f"{prefix}age"),
        level=StudentLevel(row.get(f"{prefix}level") or StudentLevel.BEGINNER.value),
        package_id=row.get(f"{prefix}package_id"),
        assigned_teacher_id=row.get(f"{prefix}assigned_teacher_id"),
        total_hours=as_decimal(row.get(f"{prefix}total_hours")),
        remaining_hours=as_decimal(row.get(f"{prefix}remaining_hours")),
        is_active=bool(row.get(f"{prefix}is_active", True)),
        created_at=row.get(f"{prefix}created_at"),
        updated_at=row.get(f"{prefix}updated_at"),
    )


def student_from_row(row: Mapping[str, Any], prefix: str = "") -> Optional[Student]:
    if row.get(f"{prefix}id") is None:
        return None
    return Student(**_student_kwargs(row, prefix))


_WITH_RELATIONS = f"""
    SELECT {student_select("s", "")},
           {package_select("p", "p__")},
           {user_select("t", "t__")}
    FROM students s
    LEFT JOIN packages p ON p.id = s.package_id
    LEFT JOIN users t ON t.id = s.assigned_teacher_id
"""


def _with_relations(row: Mapping[str, Any]) -> StudentWithRelations:
    return StudentWithRelations(
        **_student_kwargs(row, ""),
        package=package_from_row(row, "p__"),
        assigned_teacher=user_from_row(row, "t__"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[StudentWithRelations]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_WITH_RELATIONS} WHERE s.is_active=1 ORDER BY s.created_at DESC, s.id DESC")
            return [_with_relations(r) for r in fetchall(cur)]

    def get_with_relations(self, student_id: int) -> Optional[StudentWithRelations]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_WITH_RELATIONS} WHERE s.id=%s", (int(student_id),))
            row = fetchone(cur)
            return _with_relations(row) if row else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._get(cur, student_id)

    def create(self, fields: dict) -> Student:
        sql, params = build_insert("students", {c: fields[c] for c in _WRITABLE if c in fields})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return self._get(cur, int(cur.lastrowid))

    def update_locked(self, student_id: int, plan: Callable[[Student], dict]) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            existing = self._get(cur, student_id, for_update=True)
            if not existing:
                return None

            changes = plan(existing)
            if not changes:
                return existing
            set_clause, params = build_update({c: changes[c] for c in _WRITABLE if c in changes})
            cur.execute(f"UPDATE students SET {set_clause} WHERE id=%s", tuple(params + [int(student_id)]))
            return self._get(cur, student_id)

    def deactivate(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET is_active=0, updated_at=UTC_TIMESTAMP() WHERE id=%s",
                (int(student_id),),
            )
            return cur.rowcount > 0

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE is_active=1")
            return int(fetchone(cur)["n"])

    @staticmethod
    def _get(cur, student_id: int, *, for_update: bool = False) -> Optional[Student]:
        lock = " FOR UPDATE" if for_update else ""
        cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students WHERE id=%s{lock}", (int(student_id),))
        row = fetchone(cur)
        return student_from_row(row) if row else None
