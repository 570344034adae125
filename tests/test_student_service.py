from decimal import Decimal

import pytest

from learning_center.core.enums import StudentLevel
from learning_center.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def _package(container, admin, hours=8):
    return container.package_service.create_package(
        current_user=admin, payload={"name": f"Pack {hours}", "hours": hours}
    )


def test_new_student_takes_hours_from_package(container, admin, teacher):
    pkg = _package(container, admin, hours=8)

    student = container.student_service.create_student(
        current_user=admin,
        payload={"name": "Ana", "packageId": pkg.id, "assignedTeacherId": teacher.id},
    )

    assert student.total_hours == Decimal("8")
    assert student.remaining_hours == student.total_hours
    assert student.level == StudentLevel.BEGINNER

    loaded = container.student_service.get_student(student.id)
    assert loaded.package.name == "Pack 8"
    assert loaded.assigned_teacher.id == teacher.id


def test_new_student_without_package_uses_total_hours(container, admin):
    student = container.student_service.create_student(
        current_user=admin, payload={"name": "Bo", "totalHours": "5.5", "remainingHours": "1"}
    )
    assert student.total_hours == Decimal("5.5")
    assert student.remaining_hours == Decimal("5.5")


def test_unknown_package_is_rejected(container, admin):
    with pytest.raises(ValidationError) as exc:
        container.student_service.create_student(current_user=admin, payload={"name": "Ana", "packageId": 42})
    assert "packageId" in exc.value.errors


def test_assigned_teacher_must_be_a_teacher(container, admin):
    with pytest.raises(ValidationError):
        container.student_service.create_student(
            current_user=admin, payload={"name": "Ana", "assignedTeacherId": admin.id}
        )


def test_remaining_cannot_exceed_total(container, admin):
    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana", "totalHours": 4})
    with pytest.raises(ValidationError):
        container.student_service.update_student(
            current_user=admin, student_id=student.id, payload={"remainingHours": 5}
        )

    updated = container.student_service.update_student(
        current_user=admin, student_id=student.id, payload={"remainingHours": "2.5", "level": "advanced"}
    )
    assert updated.remaining_hours == Decimal("2.5")
    assert updated.level == StudentLevel.ADVANCED


def test_teacher_cannot_mutate_students(container, admin, teacher):
    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana"})
    with pytest.raises(AuthorizationError):
        container.student_service.update_student(current_user=teacher, student_id=student.id, payload={"name": "X"})
    with pytest.raises(AuthorizationError):
        container.student_service.delete_student(current_user=teacher, student_id=student.id)
    assert container.student_service.get_student(student.id).name == "Ana"


def test_delete_hides_student_from_list(container, admin):
    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana"})
    container.student_service.delete_student(current_user=admin, student_id=student.id)

    assert container.student_service.list_students() == []
    assert container.student_service.get_student(student.id).is_active is False
    with pytest.raises(NotFoundError):
        container.student_service.delete_student(current_user=admin, student_id=999)


def test_hours_beyond_column_range_or_precision_are_rejected(container, admin):
    with pytest.raises(ValidationError) as exc:
        container.student_service.create_student(
            current_user=admin, payload={"name": "Ana", "totalHours": "123456.789"}
        )
    assert "totalHours" in exc.value.errors

    student = container.student_service.create_student(current_user=admin, payload={"name": "Ana", "totalHours": 4})
    with pytest.raises(ValidationError):
        container.student_service.update_student(
            current_user=admin, student_id=student.id, payload={"remainingHours": "1.005"}
        )
    assert container.student_service.get_student(student.id).remaining_hours == Decimal("4")


def test_deactivated_package_still_resolves_on_student(container, admin):
    pkg = _package(container, admin, hours=8)
    student = container.student_service.create_student(
        current_user=admin, payload={"name": "Ana", "packageId": pkg.id}
    )

    container.package_service.delete_package(current_user=admin, package_id=pkg.id)

    loaded = container.student_service.get_student(student.id)
    assert loaded.package is not None
    assert loaded.package.id == pkg.id
    assert loaded.package.is_active is False
    assert loaded.total_hours == Decimal("8")
    assert loaded.remaining_hours == Decimal("8")

    # Keeping the deactivated package on update is allowed.
    kept = container.student_service.update_student(
        current_user=admin, student_id=student.id, payload={"packageId": pkg.id, "age": 12}
    )
    assert kept.package_id == pkg.id
