from datetime import datetime

import pytest

from learning_center.core.enums import RequestStatus
from learning_center.core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError


@pytest.fixture
def klass(container, admin, teacher):
    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana", "totalHours": 10})
    return container.class_service.create_class(
        current_user=admin,
        payload={
            "studentId": student.id,
            "teacherId": teacher.id,
            "startTime": "2026-03-02T09:00:00Z",
            "endTime": "2026-03-02T10:00:00Z",
        },
    )


def _move_payload(klass, **overrides):
    payload = {
        "classId": klass.id,
        "newStartTime": "2026-03-03T14:00:00Z",
        "newEndTime": "2026-03-03T15:00:00Z",
        "reason": "Student is travelling",
    }
    payload.update(overrides)
    return payload


def test_teacher_requests_change_for_own_class(container, teacher, klass):
    req = container.request_service.create_request(current_user=teacher, payload=_move_payload(klass))

    assert req.status == RequestStatus.PENDING
    assert req.requested_by == teacher.id
    assert req.old_start_time == datetime(2026, 3, 2, 9, 0)
    assert req.new_start_time == datetime(2026, 3, 3, 14, 0)


def test_teacher_cannot_request_for_someone_elses_class(container, other_teacher, klass):
    with pytest.raises(AuthorizationError):
        container.request_service.create_request(current_user=other_teacher, payload=_move_payload(klass))


def test_request_window_is_validated(container, teacher, klass):
    with pytest.raises(ValidationError) as exc:
        container.request_service.create_request(
            current_user=teacher,
            payload=_move_payload(klass, newEndTime="2026-03-03T13:00:00Z"),
        )
    assert "newEndTime" in exc.value.errors


def test_approval_moves_the_class(container, admin, teacher, klass):
    svc = container.request_service
    req = svc.create_request(current_user=admin, payload=_move_payload(klass))

    resolved = svc.resolve_request(
        current_user=teacher, request_id=req.id, payload={"status": "approved", "teacherResponse": "OK"}
    )

    assert resolved.status == RequestStatus.APPROVED
    assert resolved.teacher_response == "OK"
    moved = container.classes_repo.get_by_id(klass.id)
    assert moved.start_time == datetime(2026, 3, 3, 14, 0)
    assert moved.end_time == datetime(2026, 3, 3, 15, 0)


def test_rejection_leaves_the_class_alone(container, admin, klass):
    svc = container.request_service
    req = svc.create_request(current_user=admin, payload=_move_payload(klass))

    svc.resolve_request(current_user=admin, request_id=req.id, payload={"status": "rejected"})

    assert container.classes_repo.get_by_id(klass.id).start_time == datetime(2026, 3, 2, 9, 0)


def test_request_resolves_only_once(container, admin, klass):
    svc = container.request_service
    req = svc.create_request(current_user=admin, payload=_move_payload(klass))
    svc.resolve_request(current_user=admin, request_id=req.id, payload={"status": "rejected"})

    with pytest.raises(StateError):
        svc.resolve_request(current_user=admin, request_id=req.id, payload={"status": "approved"})


def test_other_teacher_cannot_resolve(container, admin, other_teacher, klass):
    svc = container.request_service
    req = svc.create_request(current_user=admin, payload=_move_payload(klass))

    with pytest.raises(AuthorizationError):
        svc.resolve_request(current_user=other_teacher, request_id=req.id, payload={"status": "approved"})


def test_pending_is_not_a_resolution(container, admin, klass):
    svc = container.request_service
    req = svc.create_request(current_user=admin, payload=_move_payload(klass))

    with pytest.raises(ValidationError):
        svc.resolve_request(current_user=admin, request_id=req.id, payload={"status": "pending"})
    with pytest.raises(NotFoundError):
        svc.resolve_request(current_user=admin, request_id=999, payload={"status": "approved"})


def test_closed_class_cannot_be_rescheduled(container, admin, klass):
    container.class_service.update_class(current_user=admin, class_id=klass.id, payload={"status": "cancelled"})

    with pytest.raises(StateError):
        container.request_service.create_request(current_user=admin, payload=_move_payload(klass))


def test_listing_is_scoped_to_teacher(container, admin, teacher, other_teacher, klass):
    svc = container.request_service
    svc.create_request(current_user=admin, payload=_move_payload(klass))

    assert len(svc.list_requests(current_user=admin)) == 1
    assert len(svc.list_requests(current_user=teacher)) == 1
    assert svc.list_requests(current_user=other_teacher) == []
    assert svc.list_requests(current_user=admin, status=RequestStatus.APPROVED) == []


def test_class_cancelled_after_request_cannot_be_approved(container, admin, teacher, klass):
    svc = container.request_service
    req = svc.create_request(current_user=teacher, payload=_move_payload(klass))
    container.class_service.update_class(current_user=admin, class_id=klass.id, payload={"status": "cancelled"})

    with pytest.raises(StateError):
        svc.resolve_request(current_user=admin, request_id=req.id, payload={"status": "approved"})
    assert container.classes_repo.get_by_id(klass.id).start_time == datetime(2026, 3, 2, 9, 0)
