from decimal import Decimal

import pytest

from learning_center.ledger.mysql_ledger import InsufficientHoursError, apply_delta


class FakeCursor:
    def __init__(self, rowcount: int = 1):
        self.rowcount = rowcount
        self.executed: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))


def test_zero_delta_issues_no_sql():
    cur = FakeCursor()
    apply_delta(cur, student_id=1, delta=Decimal("0"))
    assert cur.executed == []


def test_debit_is_guarded_relative_update():
    cur = FakeCursor()
    apply_delta(cur, student_id=3, delta=Decimal("1.5"))

    sql, params = cur.executed[0]
    assert "remaining_hours = remaining_hours - %s" in sql
    assert "remaining_hours >= %s" in sql
    assert params == (Decimal("1.5"), 3, Decimal("1.5"))


def test_debit_without_matching_row_raises():
    with pytest.raises(InsufficientHoursError) as exc:
        apply_delta(FakeCursor(rowcount=0), student_id=3, delta=Decimal("2"))
    assert "duration" in exc.value.errors


def test_credit_is_clamped_at_total():
    cur = FakeCursor()
    apply_delta(cur, student_id=3, delta=Decimal("-2"))

    sql, params = cur.executed[0]
    assert "LEAST(remaining_hours + %s, total_hours)" in sql
    assert params == (Decimal("2"), 3)
