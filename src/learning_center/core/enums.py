from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used by the access gate."""

    ADMIN = "admin"
    TEACHER = "teacher"


class StudentLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ClassStatus(str, Enum):
    """Lifecycle of a scheduled class (see classes.transitions)."""

    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class RequestStatus(str, Enum):
    """Approval state of a schedule change request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
