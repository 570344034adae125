from __future__ import annotations

from typing import Any, Sequence

from ..auth.gate import require_admin
from ..common.logging import get_logger
from ..core.exceptions import NotFoundError
from ..users.model import User
from .model import Package
from .repository import PackageRepository
from .schema import parse_package_input

logger = get_logger(__name__)


class PackageService:
    def __init__(self, packages: PackageRepository):
        self._packages = packages

    def list_packages(self) -> Sequence[Package]:
        return self._packages.list_active()

    def get_package(self, package_id: int) -> Package:
        pkg = self._packages.get_by_id(int(package_id))
        if not pkg:
            raise NotFoundError("Package not found")
        return pkg

    def create_package(self, *, current_user: User, payload: Any) -> Package:
        require_admin(current_user)
        fields = parse_package_input(payload)
        pkg = self._packages.create(fields)
        logger.info("package_created", package_id=pkg.id, hours=pkg.hours, by=current_user.id)
        return pkg

    def update_package(self, *, current_user: User, package_id: int, payload: Any) -> Package:
        require_admin(current_user)
        changes = parse_package_input(payload, partial=True)
        if not changes:
            return self.get_package(package_id)
        pkg = self._packages.update(int(package_id), changes)
        if not pkg:
            raise NotFoundError("Package not found")
        return pkg

    def delete_package(self, *, current_user: User, package_id: int) -> None:
        """Soft delete; students already on the package keep it."""
        require_admin(current_user)
        if not self._packages.deactivate(int(package_id)):
            raise NotFoundError("Package not found")
        logger.info("package_deactivated", package_id=int(package_id), by=current_user.id)
