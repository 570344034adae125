from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import HOURS_QUANT
from ..core.enums import ClassStatus
from .base import LedgerPolicy

ZERO = Decimal("0")


class StandardLedgerPolicy(LedgerPolicy):
    """Standard rule: a class holds its duration unless cancelled.

    - creating a class debits its duration
    - cancelling credits it back; changing the duration moves the difference
    - deleting a class that was never completed or cancelled credits it back
    """

    @staticmethod
    def holds_hours(status: ClassStatus) -> bool:
        return status != ClassStatus.CANCELLED

    def default_duration(self, start: datetime, end: datetime) -> Decimal:
        seconds = Decimal(int((end - start).total_seconds()))
        return (seconds / Decimal(3600)).quantize(HOURS_QUANT, rounding=ROUND_HALF_UP)

    def on_create(self, duration: Decimal) -> Decimal:
        return duration

    def on_update(
        self,
        *,
        old_status: ClassStatus,
        new_status: ClassStatus,
        old_duration: Decimal,
        new_duration: Decimal,
    ) -> Decimal:
        held_before = old_duration if self.holds_hours(old_status) else ZERO
        held_after = new_duration if self.holds_hours(new_status) else ZERO
        return held_after - held_before

    def on_delete(self, *, status: ClassStatus, duration: Decimal) -> Decimal:
        if status in {ClassStatus.CANCELLED, ClassStatus.COMPLETED}:
            return ZERO
        return -duration
