from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import ScheduleChangeRequest


class RequestRepository(Protocol):
    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        teacher_id: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[ScheduleChangeRequest]:
        """Newest first; ``teacher_id`` keeps requests for that teacher's classes."""

        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[ScheduleChangeRequest]:
        raise NotImplementedError

    def create(self, fields: dict) -> ScheduleChangeRequest:
        raise NotImplementedError

    def resolve(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        teacher_response: Optional[str] = None,
    ) -> Optional[ScheduleChangeRequest]:
        """Decide a pending request in one transaction.

        Approval also moves the class to the requested window, under a lock
        on the class row. Raises StateError if the request is no longer
        pending or the class is completed/cancelled; returns None if the
        request does not exist.
        """

        raise NotImplementedError
