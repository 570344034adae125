from __future__ import annotations

import pytest

from learning_center.container import build_services
from learning_center.core.enums import Role
from learning_center.main import create_app

from fakes import (
    FakeClassesRepo,
    FakePackagesRepo,
    FakeRequestsRepo,
    FakeStudentsRepo,
    FakeUsersRepo,
    make_user,
    sign_in,
)


@pytest.fixture
def admin():
    return make_user("admin-1", Role.ADMIN, first_name="Alice", last_name="Admin")


@pytest.fixture
def teacher():
    return make_user("teacher-1", Role.TEACHER, first_name="Tom", last_name="Tran")


@pytest.fixture
def other_teacher():
    return make_user("teacher-2", Role.TEACHER, first_name="Uma", last_name="Ueda")


@pytest.fixture
def container(admin, teacher, other_teacher):
    users = FakeUsersRepo(admin, teacher, other_teacher)
    packages = FakePackagesRepo()
    students = FakeStudentsRepo(packages, users)
    classes = FakeClassesRepo(students, users)
    requests = FakeRequestsRepo(classes)
    return build_services(
        users_repo=users,
        packages_repo=packages,
        students_repo=students,
        classes_repo=classes,
        requests_repo=requests,
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="learning_center.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client, admin):
    sign_in(client, admin.id)
    return client


@pytest.fixture
def teacher_client(client, teacher):
    sign_in(client, teacher.id)
    return client
