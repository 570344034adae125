from __future__ import annotations

from typing import Any, Optional, Sequence

from ..auth.gate import is_admin
from ..classes.repository import ClassRepository
from ..classes.transitions import CLOSED_STATUSES
from ..common.logging import get_logger
from ..common.validators import (
    optional_str,
    require_body,
    require_choice,
    require_datetime,
    require_id,
    require_time_window,
)
from ..core.constants import DEFAULT_REQUEST_LIST_LIMIT
from ..core.enums import RequestStatus
from ..core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from ..users.model import User
from .model import ScheduleChangeRequest
from .repository import RequestRepository

logger = get_logger(__name__)


class RequestService:
    """Schedule change requests: anyone proposes, admin or the class's teacher decides."""

    def __init__(self, requests: RequestRepository, classes: ClassRepository):
        self._requests = requests
        self._classes = classes

    def list_requests(
        self,
        *,
        current_user: User,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[ScheduleChangeRequest]:
        teacher_id = None if is_admin(current_user) else current_user.id
        return self._requests.list_requests(status=status, teacher_id=teacher_id, limit=DEFAULT_REQUEST_LIST_LIMIT)

    def create_request(self, *, current_user: User, payload: Any) -> ScheduleChangeRequest:
        body = require_body(payload)
        class_id = require_id(body.get("classId"), "classId")
        new_start = require_datetime(body.get("newStartTime"), "newStartTime")
        new_end = require_datetime(body.get("newEndTime"), "newEndTime")
        require_time_window(new_start, new_end, field_name="newEndTime")
        reason = optional_str(body.get("reason"), "reason")

        klass = self._classes.get_by_id(class_id)
        if not klass:
            raise ValidationError("classId: class does not exist", errors={"classId": "class does not exist"})
        if not is_admin(current_user) and klass.teacher_id != current_user.id:
            raise AuthorizationError("You can only request changes to your own classes")
        if klass.status in CLOSED_STATUSES:
            raise StateError(f"Cannot reschedule a {klass.status.value} class")

        req = self._requests.create(
            {
                "class_id": klass.id,
                "requested_by": current_user.id,
                "old_start_time": klass.start_time,
                "old_end_time": klass.end_time,
                "new_start_time": new_start,
                "new_end_time": new_end,
                "reason": reason,
            }
        )
        logger.info("schedule_change_requested", request_id=req.id, class_id=klass.id, by=current_user.id)
        return req

    def resolve_request(self, *, current_user: User, request_id: int, payload: Any) -> ScheduleChangeRequest:
        body = require_body(payload)
        status = require_choice(body.get("status"), "status", RequestStatus)
        if status == RequestStatus.PENDING:
            raise ValidationError("status: must be approved or rejected", errors={"status": "must be approved or rejected"})
        response = optional_str(body.get("teacherResponse"), "teacherResponse")

        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Request not found")

        klass = self._classes.get_by_id(req.class_id)
        if not is_admin(current_user) and (not klass or klass.teacher_id != current_user.id):
            raise AuthorizationError("Only an admin or the class's teacher can resolve this request")
        if status == RequestStatus.APPROVED and klass and klass.status in CLOSED_STATUSES:
            raise StateError(f"Cannot reschedule a {klass.status.value} class")

        resolved = self._requests.resolve(request_id=req.id, status=status, teacher_response=response)
        if not resolved:
            raise NotFoundError("Request not found")
        logger.info("schedule_change_resolved", request_id=req.id, status=status.value, by=current_user.id)
        return resolved
