from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import StudentLevel
from ..packages.model import Package
from ..users.model import User


@dataclass(frozen=True)
class Student:
    """Domain entity: a learner and their hour balance."""

    id: int
    name: str
    email: Optional[str]
    age: Optional[int]
    level: StudentLevel
    package_id: Optional[int]
    assigned_teacher_id: Optional[str]
    total_hours: Decimal
    remaining_hours: Decimal
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentWithRelations(Student):
    """Student joined with its package and assigned teacher (None when absent)."""

    package: Optional[Package] = None
    assigned_teacher: Optional[User] = None
