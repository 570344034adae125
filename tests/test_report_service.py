from datetime import datetime
from decimal import Decimal

import pytest

from learning_center.core.exceptions import AuthorizationError, ValidationError


def _make_class(container, admin, student, teacher, start, hours="1"):
    end = start.replace(hour=start.hour + 1)
    return container.class_service.create_class(
        current_user=admin,
        payload={
            "studentId": student.id,
            "teacherId": teacher.id,
            "startTime": start.isoformat(),
            "endTime": end.isoformat(),
            "duration": hours,
        },
    )


def _complete(container, admin, klass):
    container.class_service.update_class(current_user=admin, class_id=klass.id, payload={"status": "ongoing"})
    container.class_service.update_class(current_user=admin, class_id=klass.id, payload={"status": "completed"})


def test_dashboard_counts(container, admin, teacher):
    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana", "totalHours": 10})
    today = _make_class(container, admin, student, teacher, datetime(2026, 3, 2, 9, 0))
    _make_class(container, admin, student, teacher, datetime(2026, 3, 3, 9, 0))
    container.class_service.update_class(current_user=admin, class_id=today.id, payload={"status": "ongoing"})

    stats = container.report_service.get_dashboard_stats(now=datetime(2026, 3, 2, 12, 0))

    assert stats.total_students == 1
    assert stats.total_teachers == 2
    assert stats.today_classes == 1
    assert stats.ongoing_classes == 1


def test_monthly_report_totals(container, admin, teacher, other_teacher):
    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana", "totalHours": 10})
    a = _make_class(container, admin, student, teacher, datetime(2026, 3, 2, 9, 0), hours="1.5")
    _make_class(container, admin, student, teacher, datetime(2026, 3, 4, 9, 0))
    b = _make_class(container, admin, student, other_teacher, datetime(2026, 3, 5, 9, 0), hours="2")
    _make_class(container, admin, student, teacher, datetime(2026, 4, 1, 9, 0))
    _complete(container, admin, a)
    _complete(container, admin, b)

    report = container.report_service.build_monthly_report(current_user=admin, month="2026-03")

    assert report.summary.total_classes == 3
    assert report.summary.completed_classes == 2
    assert report.summary.completed_hours == Decimal("3.5")
    assert report.summary.completion_rate == 67

    by_teacher = {row.id: row for row in report.teachers}
    assert by_teacher[teacher.id].total_classes == 2
    assert by_teacher[teacher.id].completed_hours == Decimal("1.5")
    assert by_teacher[other_teacher.id].completed_classes == 1
    assert report.students[0].completed_hours == Decimal("3.5")
    assert report.students[0].remaining_hours == Decimal("4.5")


def test_empty_month_has_zero_rate(container, admin):
    report = container.report_service.build_monthly_report(current_user=admin, month="2025-01")
    assert report.summary.total_classes == 0
    assert report.summary.completion_rate == 0


def test_report_is_admin_only(container, teacher):
    with pytest.raises(AuthorizationError):
        container.report_service.build_monthly_report(current_user=teacher, month="2026-03")


def test_bad_month_is_rejected(container, admin):
    with pytest.raises(ValidationError):
        container.report_service.build_monthly_report(current_user=admin, month="March")
