from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from .model import Student, StudentWithRelations


class StudentRepository(Protocol):
    def list_active(self) -> Sequence[StudentWithRelations]:
        """Active students with package/teacher, newest first."""

        raise NotImplementedError

    def get_with_relations(self, student_id: int) -> Optional[StudentWithRelations]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create(self, fields: dict) -> Student:
        raise NotImplementedError

    def update_locked(self, student_id: int, plan: Callable[[Student], dict]) -> Optional[Student]:
        """Lock the row, let ``plan`` validate against it and return the changes, apply them.

        Returns None when the student does not exist.
        """

        raise NotImplementedError

    def deactivate(self, student_id: int) -> bool:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
