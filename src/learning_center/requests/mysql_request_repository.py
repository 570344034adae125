from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..classes.transitions import CLOSED_STATUSES
from ..common.logging import get_logger
from ..core.enums import ClassStatus, RequestStatus
from ..core.exceptions import StateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_insert, db_cursor, fetchall, fetchone
from .model import ScheduleChangeRequest
from .repository import RequestRepository

logger = get_logger(__name__)

REQUEST_COLUMNS = (
    "id, class_id, requested_by, old_start_time, old_end_time, new_start_time, new_end_time, "
    "reason, status, teacher_response, created_at, updated_at"
)
_WRITABLE = (
    "class_id",
    "requested_by",
    "old_start_time",
    "old_end_time",
    "new_start_time",
    "new_end_time",
    "reason",
)


def _select(alias: str) -> str:
    return ", ".join(f"{alias}.{c.strip()}" for c in REQUEST_COLUMNS.split(","))


def request_from_row(r: Mapping[str, Any]) -> ScheduleChangeRequest:
    return ScheduleChangeRequest(
        id=int(r["id"]),
        class_id=int(r["class_id"]),
        requested_by=str(r["requested_by"]),
        old_start_time=r["old_start_time"],
        old_end_time=r["old_end_time"],
        new_start_time=r["new_start_time"],
        new_end_time=r["new_end_time"],
        reason=r.get("reason"),
        status=RequestStatus(r["status"]),
        teacher_response=r.get("teacher_response"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        teacher_id: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[ScheduleChangeRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if teacher_id is not None:
            clauses.append("c.teacher_id=%s")
            params.append(str(teacher_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_select("r")}
                FROM schedule_change_requests r
                JOIN classes c ON c.id = r.class_id
                WHERE {where}
                ORDER BY r.created_at DESC, r.id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [request_from_row(r) for r in fetchall(cur)]

    def get_by_id(self, request_id: int) -> Optional[ScheduleChangeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._get(cur, request_id)

    def create(self, fields: dict) -> ScheduleChangeRequest:
        sql, params = build_insert("schedule_change_requests", {c: fields[c] for c in _WRITABLE if c in fields})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return self._get(cur, int(cur.lastrowid))

    def resolve(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        teacher_response: Optional[str] = None,
    ) -> Optional[ScheduleChangeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            req = self._get(cur, request_id, for_update=True)
            if not req:
                return None
            if req.status != RequestStatus.PENDING:
                raise StateError("Request has already been resolved")

            if status == RequestStatus.APPROVED:
                # The class must still be open while it is moved.
                cur.execute("SELECT status FROM classes WHERE id=%s FOR UPDATE", (req.class_id,))
                klass = fetchone(cur)
                if klass and ClassStatus(klass["status"]) in CLOSED_STATUSES:
                    raise StateError(f"Cannot reschedule a {klass['status']} class")
                cur.execute(
                    """
                    UPDATE classes
                    SET start_time=%s, end_time=%s, updated_at=UTC_TIMESTAMP()
                    WHERE id=%s
                    """,
                    (req.new_start_time, req.new_end_time, req.class_id),
                )
                logger.info("class_rescheduled", class_id=req.class_id, request_id=req.id)

            cur.execute(
                """
                UPDATE schedule_change_requests
                SET status=%s, teacher_response=%s, updated_at=UTC_TIMESTAMP()
                WHERE id=%s
                """,
                (status.value, teacher_response, int(request_id)),
            )
            return self._get(cur, request_id)

    @staticmethod
    def _get(cur, request_id: int, *, for_update: bool = False) -> Optional[ScheduleChangeRequest]:
        lock = " FOR UPDATE" if for_update else ""
        cur.execute(
            f"SELECT {REQUEST_COLUMNS} FROM schedule_change_requests WHERE id=%s{lock}",
            (int(request_id),),
        )
        row = fetchone(cur)
        return request_from_row(row) if row else None
