from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ClassStatus
from ..students.model import Student
from ..users.model import User


@dataclass(frozen=True)
class ScheduledClass:
    """Domain entity: one teaching session between a student and a teacher."""

    id: int
    student_id: int
    teacher_id: str
    subject: Optional[str]
    start_time: datetime
    end_time: datetime
    duration: Decimal
    meeting_link: Optional[str]
    status: ClassStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ClassWithRelations(ScheduledClass):
    """Class joined with its student and teacher (None when absent)."""

    student: Optional[Student] = None
    teacher: Optional[User] = None


@dataclass(frozen=True)
class ClassUpdatePlan:
    """Column changes plus the ledger delta, decided under the row lock."""

    changes: dict = field(default_factory=dict)
    ledger_delta: Decimal = Decimal("0")
