from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..auth.gate import is_admin, require_admin
from ..common.logging import get_logger
from ..common.validators import require_time_window
from ..core.constants import MAX_CLASS_DURATION
from ..core.enums import ClassStatus, Role
from ..core.exceptions import NotFoundError, StateError, ValidationError
from ..ledger.base import LedgerPolicy
from ..ledger.mysql_ledger import InsufficientHoursError
from ..ledger.standard_policy import StandardLedgerPolicy
from ..students.repository import StudentRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import ClassUpdatePlan, ClassWithRelations, ScheduledClass
from .repository import ClassRepository
from .schema import parse_class_input
from .transitions import ensure_transition

logger = get_logger(__name__)


class ClassService:
    """Use cases for scheduled classes, including the hours ledger."""

    def __init__(
        self,
        classes: ClassRepository,
        students: StudentRepository,
        users: UserRepository,
        *,
        ledger: Optional[LedgerPolicy] = None,
    ):
        self._classes = classes
        self._students = students
        self._users = users
        self._ledger = ledger or StandardLedgerPolicy()

    def _require_teacher(self, teacher_id: str) -> User:
        teacher = self._users.get_by_id(teacher_id)
        if not teacher or teacher.role != Role.TEACHER:
            raise ValidationError("teacherId: teacher does not exist", errors={"teacherId": "teacher does not exist"})
        return teacher

    def list_classes(
        self,
        *,
        current_user: User,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ClassWithRelations]:
        """Admins see every class; teachers only their own.

        The range applies only when both bounds are given.
        """
        if start is None or end is None:
            start = end = None
        teacher_id = None if is_admin(current_user) else current_user.id
        return self._classes.list_with_relations(start=start, end=end, teacher_id=teacher_id)

    def get_class(self, *, current_user: User, class_id: int) -> ClassWithRelations:
        klass = self._classes.get_with_relations(int(class_id))
        # Another teacher's class is reported as missing, not forbidden.
        if not klass or (not is_admin(current_user) and klass.teacher_id != current_user.id):
            raise NotFoundError("Class not found")
        return klass

    def create_class(self, *, current_user: User, payload: Any) -> ScheduledClass:
        require_admin(current_user)
        fields = parse_class_input(payload)

        status = fields.pop("status", ClassStatus.SCHEDULED)
        if status != ClassStatus.SCHEDULED:
            raise StateError("New classes start as scheduled")
        fields["status"] = status

        require_time_window(fields["start_time"], fields["end_time"])

        student = self._students.get_by_id(fields["student_id"])
        if not student or not student.is_active:
            raise ValidationError("studentId: student does not exist", errors={"studentId": "student does not exist"})
        self._require_teacher(fields["teacher_id"])

        if fields.get("duration") is None:
            fields["duration"] = self._ledger.default_duration(fields["start_time"], fields["end_time"])
            if fields["duration"] > MAX_CLASS_DURATION:
                raise ValidationError(
                    f"duration: must be <= {MAX_CLASS_DURATION}",
                    errors={"duration": f"must be <= {MAX_CLASS_DURATION}"},
                )
        debit = self._ledger.on_create(fields["duration"])

        # The repository re-checks atomically; this gives the common case a clear error.
        if student.remaining_hours < debit:
            raise InsufficientHoursError(student.id, debit)

        klass = self._classes.create_with_debit(fields, debit=debit)
        logger.info(
            "class_created",
            class_id=klass.id,
            student_id=klass.student_id,
            teacher_id=klass.teacher_id,
            duration=str(klass.duration),
            by=current_user.id,
        )
        return klass

    def update_class(self, *, current_user: User, class_id: int, payload: Any) -> ScheduledClass:
        require_admin(current_user)
        changes = parse_class_input(payload, partial=True)

        if changes.get("teacher_id") is not None:
            self._require_teacher(changes["teacher_id"])

        def plan(existing: ScheduledClass) -> ClassUpdatePlan:
            if "student_id" in changes and changes["student_id"] != existing.student_id:
                raise ValidationError(
                    "studentId: a class cannot move to another student",
                    errors={"studentId": "cannot be changed"},
                )

            new_status = changes.get("status", existing.status)
            ensure_transition(existing.status, new_status)

            require_time_window(
                changes.get("start_time", existing.start_time),
                changes.get("end_time", existing.end_time),
            )

            delta = self._ledger.on_update(
                old_status=existing.status,
                new_status=new_status,
                old_duration=existing.duration,
                new_duration=changes.get("duration", existing.duration),
            )
            return ClassUpdatePlan(changes=changes, ledger_delta=delta)

        klass = self._classes.update_locked(int(class_id), plan)
        if not klass:
            raise NotFoundError("Class not found")
        logger.info("class_updated", class_id=klass.id, status=klass.status.value, by=current_user.id)
        return klass

    def delete_class(self, *, current_user: User, class_id: int) -> None:
        """Hard delete; hours the class still held go back to the student."""
        require_admin(current_user)

        def plan(existing: ScheduledClass) -> Decimal:
            return self._ledger.on_delete(status=existing.status, duration=existing.duration)

        if not self._classes.delete_locked(int(class_id), plan):
            raise NotFoundError("Class not found")
        logger.info("class_deleted", class_id=int(class_id), by=current_user.id)
