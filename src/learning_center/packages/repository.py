from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Package


class PackageRepository(Protocol):
    def list_active(self) -> Sequence[Package]:
        """Active packages, fewest hours first."""

        raise NotImplementedError

    def get_by_id(self, package_id: int) -> Optional[Package]:
        """Any package, active or not (students keep resolving it)."""

        raise NotImplementedError

    def create(self, fields: dict) -> Package:
        raise NotImplementedError

    def update(self, package_id: int, changes: dict) -> Optional[Package]:
        raise NotImplementedError

    def deactivate(self, package_id: int) -> bool:
        raise NotImplementedError
