from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.enums import ClassStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_insert, build_update, db_cursor, fetchall, fetchone
from ..ledger.mysql_ledger import apply_delta
from ..students.mysql_student_repository import student_from_row, student_select
from ..users.mysql_user_repository import user_from_row, user_select
from .model import ClassUpdatePlan, ClassWithRelations, ScheduledClass
from .repository import ClassRepository

CLASS_COLUMNS = (
    "id, student_id, teacher_id, subject, start_time, end_time, duration, "
    "meeting_link, status, notes, created_at, updated_at"
)
_WRITABLE = (
    "student_id",
    "teacher_id",
    "subject",
    "start_time",
    "end_time",
    "duration",
    "meeting_link",
    "status",
    "notes",
)


def class_select(alias: str, prefix: str) -> str:
    cols = [c.strip() for c in CLASS_COLUMNS.split(",")]
    return ", ".join(f"{alias}.{c} AS {prefix}{c}" for c in cols)


def _class_kwargs(row: Mapping[str, Any], prefix: str) -> dict:
    return dict(
        id=int(row[f"{prefix}id"]),
        student_id=int(row[f"{prefix}student_id"]),
        teacher_id=str(row[f"{prefix}teacher_id"]),
        subject=row.get(f"{prefix}subject"),
        start_time=row[f"{prefix}start_time"],
        end_time=row[f"{prefix}end_time"],
        duration=as_decimal(row.get(f"{prefix}duration")),
        meeting_link=row.get(f"{prefix}meeting_link"),
        status=ClassStatus(row[f"{prefix}status"]),
        notes=row.get(f"{prefix}notes"),
        created_at=row.get(f"{prefix}created_at"),
        updated_at=row.get(f"{prefix}updated_at"),
    )


def class_from_row(row: Mapping[str, Any], prefix: str = "") -> Optional[ScheduledClass]:
    if row.get(f"{prefix}id") is None:
        return None
    return ScheduledClass(**_class_kwargs(row, prefix))


_WITH_RELATIONS = f"""
    SELECT {class_select("c", "")},
           {student_select("s", "s__")},
           {user_select("u", "u__")}
    FROM classes c
    LEFT JOIN students s ON s.id = c.student_id
    LEFT JOIN users u ON u.id = c.teacher_id
"""


def _with_relations(row: Mapping[str, Any]) -> ClassWithRelations:
    return ClassWithRelations(
        **_class_kwargs(row, ""),
        student=student_from_row(row, "s__"),
        teacher=user_from_row(row, "u__"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_with_relations(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[ClassWithRelations]:
        clauses = ["1=1"]
        params: list[object] = []

        if teacher_id is not None:
            clauses.append("c.teacher_id=%s")
            params.append(str(teacher_id))
        if start is not None:
            clauses.append("c.start_time >= %s")
            params.append(start)
        if end is not None:
            clauses.append("c.start_time <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_WITH_RELATIONS} WHERE {where} ORDER BY c.start_time DESC, c.id DESC", tuple(params))
            return [_with_relations(r) for r in fetchall(cur)]

    def get_with_relations(self, class_id: int) -> Optional[ClassWithRelations]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_WITH_RELATIONS} WHERE c.id=%s", (int(class_id),))
            row = fetchone(cur)
            return _with_relations(row) if row else None

    def get_by_id(self, class_id: int) -> Optional[ScheduledClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._get(cur, class_id)

    def create_with_debit(self, fields: dict, *, debit: Decimal) -> ScheduledClass:
        sql, params = build_insert("classes", {c: fields[c] for c in _WRITABLE if c in fields})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            class_id = int(cur.lastrowid)
            apply_delta(cur, student_id=int(fields["student_id"]), delta=debit)
            return self._get(cur, class_id)

    def update_locked(
        self,
        class_id: int,
        plan: Callable[[ScheduledClass], ClassUpdatePlan],
    ) -> Optional[ScheduledClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            existing = self._get(cur, class_id, for_update=True)
            if not existing:
                return None

            decided = plan(existing)
            changes = {c: decided.changes[c] for c in _WRITABLE if c in decided.changes}
            if changes:
                set_clause, params = build_update(changes)
                cur.execute(f"UPDATE classes SET {set_clause} WHERE id=%s", tuple(params + [int(class_id)]))
            apply_delta(cur, student_id=existing.student_id, delta=decided.ledger_delta)
            return self._get(cur, class_id)

    def delete_locked(self, class_id: int, plan: Callable[[ScheduledClass], Decimal]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            existing = self._get(cur, class_id, for_update=True)
            if not existing:
                return False

            apply_delta(cur, student_id=existing.student_id, delta=plan(existing))
            cur.execute("DELETE FROM classes WHERE id=%s", (int(class_id),))
            return cur.rowcount > 0

    def count_starting_between(self, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM classes WHERE start_time >= %s AND start_time < %s",
                (start, end),
            )
            return int(fetchone(cur)["n"])

    def count_by_status(self, status: ClassStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM classes WHERE status=%s", (status.value,))
            return int(fetchone(cur)["n"])

    @staticmethod
    def _get(cur, class_id: int, *, for_update: bool = False) -> Optional[ScheduledClass]:
        lock = " FOR UPDATE" if for_update else ""
        cur.execute(f"SELECT {CLASS_COLUMNS} FROM classes WHERE id=%s{lock}", (int(class_id),))
        row = fetchone(cur)
        return class_from_row(row) if row else None
