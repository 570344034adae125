from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..auth.gate import require_admin
from ..common.logging import get_logger
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..packages.repository import PackageRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import Student, StudentWithRelations
from .repository import StudentRepository
from .schema import parse_student_input

logger = get_logger(__name__)


class StudentService:
    def __init__(self, students: StudentRepository, packages: PackageRepository, users: UserRepository):
        self._students = students
        self._packages = packages
        self._users = users

    def list_students(self) -> Sequence[StudentWithRelations]:
        return self._students.list_active()

    def get_student(self, student_id: int) -> StudentWithRelations:
        student = self._students.get_with_relations(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def _require_active_package(self, package_id: int):
        pkg = self._packages.get_by_id(package_id)
        if not pkg or not pkg.is_active:
            raise ValidationError("packageId: package does not exist", errors={"packageId": "package does not exist"})
        return pkg

    def _require_teacher(self, teacher_id: str) -> User:
        teacher = self._users.get_by_id(teacher_id)
        if not teacher or teacher.role != Role.TEACHER:
            raise ValidationError(
                "assignedTeacherId: teacher does not exist",
                errors={"assignedTeacherId": "teacher does not exist"},
            )
        return teacher

    def create_student(self, *, current_user: User, payload: Any) -> Student:
        """Enroll a student; the hour balance starts full.

        With a package the total comes from the package's hours, otherwise
        from ``totalHours`` (default 0).
        """
        require_admin(current_user)
        fields = parse_student_input(payload)

        total: Optional[Decimal] = fields.pop("total_hours", None)
        if fields.get("package_id") is not None:
            pkg = self._require_active_package(fields["package_id"])
            total = Decimal(pkg.hours)
        if fields.get("assigned_teacher_id") is not None:
            self._require_teacher(fields["assigned_teacher_id"])

        total = total if total is not None else Decimal("0")
        fields["total_hours"] = total
        fields["remaining_hours"] = total

        student = self._students.create(fields)
        logger.info("student_created", student_id=student.id, total_hours=str(total), by=current_user.id)
        return student

    def update_student(self, *, current_user: User, student_id: int, payload: Any) -> Student:
        require_admin(current_user)
        changes = parse_student_input(payload, partial=True)

        if changes.get("assigned_teacher_id") is not None:
            self._require_teacher(changes["assigned_teacher_id"])
        if "total_hours" in changes and changes["total_hours"] is None:
            changes["total_hours"] = Decimal("0")

        def plan(existing: Student) -> dict:
            # Keeping an already-assigned (possibly deactivated) package is fine.
            new_package = changes.get("package_id")
            if new_package is not None and new_package != existing.package_id:
                self._require_active_package(new_package)

            # Checked against the locked row; class debits may have moved the balance.
            total = changes.get("total_hours", existing.total_hours)
            remaining = changes.get("remaining_hours", existing.remaining_hours)
            if remaining > total:
                raise ValidationError(
                    "remainingHours: cannot exceed totalHours",
                    errors={"remainingHours": "cannot exceed totalHours"},
                )
            return changes

        student = self._students.update_locked(int(student_id), plan)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def delete_student(self, *, current_user: User, student_id: int) -> None:
        """Soft delete; classes keep resolving the student."""
        require_admin(current_user)
        if not self._students.deactivate(int(student_id)):
            raise NotFoundError("Student not found")
        logger.info("student_deactivated", student_id=int(student_id), by=current_user.id)
