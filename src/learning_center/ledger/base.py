from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from ..core.enums import ClassStatus


class LedgerPolicy(ABC):
    """How class lifecycle events move a student's remaining hours (Strategy Pattern).

    Every method returns a *delta*: positive amounts are debited from the
    student, negative amounts are credited back.
    """

    @abstractmethod
    def default_duration(self, start: datetime, end: datetime) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def on_create(self, duration: Decimal) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def on_update(
        self,
        *,
        old_status: ClassStatus,
        new_status: ClassStatus,
        old_duration: Decimal,
        new_duration: Decimal,
    ) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def on_delete(self, *, status: ClassStatus, duration: Decimal) -> Decimal:
        raise NotImplementedError
