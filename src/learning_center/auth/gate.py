"""Access gate: two roles, flat checks.

Admins may mutate packages, students and classes; teachers only read, and
only their own classes.
"""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, session

from ..common.logging import bind_context
from ..core.constants import SESSION_USER_KEY
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.model import User
from ..users.repository import UserRepository


def require_admin(user: Optional[User]) -> User:
    if user is None or user.role != Role.ADMIN:
        raise AuthorizationError("Admin access required")
    return user


def is_admin(user: User) -> bool:
    return user.role == Role.ADMIN


def current_user() -> User:
    """The user resolved by ``login_required`` for this request."""
    user = g.get("current_user")
    if user is None:
        raise AuthenticationError("Unauthorized")
    return user


def make_gates(users: UserRepository) -> tuple[Callable, Callable]:
    """Build the ``login_required`` / ``admin_required`` decorators for controllers."""

    def _resolve() -> User:
        user_id = session.get(SESSION_USER_KEY)
        if not user_id:
            raise AuthenticationError("Unauthorized")
        user = users.get_by_id(str(user_id))
        if not user:
            session.clear()
            raise AuthenticationError("Unauthorized")
        g.current_user = user
        bind_context(user_id=user.id, role=user.role.value)
        return user

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            _resolve()
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            require_admin(_resolve())
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required
