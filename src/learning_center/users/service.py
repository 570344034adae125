from __future__ import annotations

from typing import Sequence

from .model import User
from .repository import UserRepository


class UserService:
    """Use case: read-side of users (teacher roster)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_teachers(self) -> Sequence[User]:
        return self._users.list_teachers()
