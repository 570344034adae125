from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import ClassStatus
from .model import ClassUpdatePlan, ClassWithRelations, ScheduledClass


class ClassRepository(Protocol):
    def list_with_relations(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[ClassWithRelations]:
        """Classes newest start first; ``start``/``end`` bound start_time inclusively."""

        raise NotImplementedError

    def get_with_relations(self, class_id: int) -> Optional[ClassWithRelations]:
        raise NotImplementedError

    def get_by_id(self, class_id: int) -> Optional[ScheduledClass]:
        raise NotImplementedError

    def create_with_debit(self, fields: dict, *, debit: Decimal) -> ScheduledClass:
        """Insert the class and debit the student in one transaction."""

        raise NotImplementedError

    def update_locked(
        self,
        class_id: int,
        plan: Callable[[ScheduledClass], ClassUpdatePlan],
    ) -> Optional[ScheduledClass]:
        """Lock the row, let ``plan`` decide changes + ledger delta, apply both atomically.

        Returns None when the class does not exist.
        """

        raise NotImplementedError

    def delete_locked(self, class_id: int, plan: Callable[[ScheduledClass], Decimal]) -> bool:
        """Lock the row, apply the ledger delta from ``plan``, hard delete."""

        raise NotImplementedError

    def count_starting_between(self, start: datetime, end: datetime) -> int:
        """Classes with start_time in [start, end)."""

        raise NotImplementedError

    def count_by_status(self, status: ClassStatus) -> int:
        raise NotImplementedError
