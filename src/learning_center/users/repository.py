from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import IdentityClaims, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def upsert(self, claims: IdentityClaims) -> User:
        """Insert on first sign-in, refresh profile fields afterwards.

        The role column is never touched by an upsert.
        """

        raise NotImplementedError

    def list_teachers(self) -> Sequence[User]:
        raise NotImplementedError

    def count_teachers(self) -> int:
        raise NotImplementedError
