from __future__ import annotations

from ..core.enums import ClassStatus
from ..core.exceptions import StateError

ALLOWED_TRANSITIONS: dict[ClassStatus, frozenset[ClassStatus]] = {
    ClassStatus.SCHEDULED: frozenset({ClassStatus.ONGOING, ClassStatus.CANCELLED, ClassStatus.RESCHEDULED}),
    ClassStatus.ONGOING: frozenset({ClassStatus.COMPLETED, ClassStatus.CANCELLED}),
    ClassStatus.RESCHEDULED: frozenset({ClassStatus.SCHEDULED}),
    ClassStatus.COMPLETED: frozenset(),
    ClassStatus.CANCELLED: frozenset(),
}


def can_transition(current: ClassStatus, target: ClassStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: ClassStatus, target: ClassStatus) -> None:
    if not can_transition(current, target):
        raise StateError(f"Cannot change class status from {current.value} to {target.value}")

# Terminal states; such a class can no longer be rescheduled.
CLOSED_STATUSES = frozenset({ClassStatus.COMPLETED, ClassStatus.CANCELLED})
