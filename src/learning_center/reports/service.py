from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..auth.gate import require_admin
from ..classes.repository import ClassRepository
from ..common.datetime_utils import day_bounds, month_bounds, now_utc
from ..core.enums import ClassStatus
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from ..users.model import User
from ..users.repository import UserRepository


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    total_teachers: int
    today_classes: int
    ongoing_classes: int


@dataclass
class HoursRow:
    id: Union[int, str]
    name: str
    total_classes: int = 0
    completed_classes: int = 0
    completed_hours: Decimal = Decimal("0")


@dataclass
class StudentHoursRow(HoursRow):
    remaining_hours: Decimal = Decimal("0")


@dataclass(frozen=True)
class ReportSummary:
    total_classes: int
    completed_classes: int
    completed_hours: Decimal
    completion_rate: int


@dataclass(frozen=True)
class MonthlyReport:
    month: str
    summary: ReportSummary
    teachers: list[HoursRow] = field(default_factory=list)
    students: list[StudentHoursRow] = field(default_factory=list)


class ReportService:
    """Dashboard counters and the monthly teacher/student hours report.

    Nothing is cached: every call re-reads the store.
    """

    def __init__(self, classes: ClassRepository, students: StudentRepository, users: UserRepository):
        self._classes = classes
        self._students = students
        self._users = users

    def get_dashboard_stats(self, *, now: Optional[datetime] = None) -> DashboardStats:
        today_start, tomorrow_start = day_bounds((now or now_utc()).date())
        return DashboardStats(
            total_students=self._students.count_active(),
            total_teachers=self._users.count_teachers(),
            today_classes=self._classes.count_starting_between(today_start, tomorrow_start),
            ongoing_classes=self._classes.count_by_status(ClassStatus.ONGOING),
        )

    def build_monthly_report(self, *, current_user: User, month: Optional[str] = None) -> MonthlyReport:
        require_admin(current_user)
        month = month or now_utc().strftime("%Y-%m")
        try:
            first, next_first = month_bounds(month)
        except ValueError:
            raise ValidationError("month: must be YYYY-MM", errors={"month": "must be YYYY-MM"})

        classes = self._classes.list_with_relations(start=first, end=next_first - timedelta(microseconds=1))

        teacher_map: dict[str, HoursRow] = {
            t.id: HoursRow(id=t.id, name=t.display_name) for t in self._users.list_teachers()
        }
        student_map: dict[int, StudentHoursRow] = {
            s.id: StudentHoursRow(id=s.id, name=s.name, remaining_hours=s.remaining_hours)
            for s in self._students.list_active()
        }

        completed = 0
        completed_hours = Decimal("0")
        for c in classes:
            done = c.status == ClassStatus.COMPLETED
            if done:
                completed += 1
                completed_hours += c.duration

            for row in (teacher_map.get(c.teacher_id), student_map.get(c.student_id)):
                if row is None:
                    continue
                row.total_classes += 1
                if done:
                    row.completed_classes += 1
                    row.completed_hours += c.duration

        total = len(classes)
        rate = int((Decimal(completed) * 100 / total).quantize(Decimal(1), rounding=ROUND_HALF_UP)) if total else 0

        return MonthlyReport(
            month=month,
            summary=ReportSummary(
                total_classes=total,
                completed_classes=completed,
                completed_hours=completed_hours,
                completion_rate=rate,
            ),
            teachers=list(teacher_map.values()),
            students=list(student_map.values()),
        )
