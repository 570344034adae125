from __future__ import annotations

from decimal import Decimal

from ..common.logging import get_logger
from ..core.exceptions import ValidationError

logger = get_logger(__name__)


class InsufficientHoursError(ValidationError):
    def __init__(self, student_id: int, amount: Decimal):
        super().__init__(
            "Insufficient remaining hours",
            errors={"duration": f"student {student_id} has fewer than {amount} hours left"},
        )


def apply_delta(cur, *, student_id: int, delta: Decimal) -> None:
    """Move a student's balance on the caller's cursor (same transaction).

    Both directions are relative updates so concurrent writers never lose an
    update. Debits are refused below zero; credits are clamped at total_hours.
    """
    if delta == 0:
        return

    if delta > 0:
        cur.execute(
            """
            UPDATE students
            SET remaining_hours = remaining_hours - %s, updated_at=UTC_TIMESTAMP()
            WHERE id=%s AND remaining_hours >= %s
            """,
            (delta, int(student_id), delta),
        )
        if cur.rowcount == 0:
            raise InsufficientHoursError(int(student_id), delta)
        logger.info("hours_debited", student_id=int(student_id), hours=str(delta))
        return

    credit = -delta
    cur.execute(
        """
        UPDATE students
        SET remaining_hours = LEAST(remaining_hours + %s, total_hours), updated_at=UTC_TIMESTAMP()
        WHERE id=%s
        """,
        (credit, int(student_id)),
    )
    logger.info("hours_credited", student_id=int(student_id), hours=str(credit))
