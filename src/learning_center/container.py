from __future__ import annotations

from dataclasses import dataclass

from .auth.service import AuthService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DatabaseConnection, DBConfig
from .ledger.base import LedgerPolicy
from .ledger.standard_policy import StandardLedgerPolicy
from .packages.mysql_package_repository import MySQLPackageRepository
from .packages.repository import PackageRepository
from .packages.service import PackageService
from .reports.service import ReportService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    packages_repo: PackageRepository
    students_repo: StudentRepository
    classes_repo: ClassRepository
    requests_repo: RequestRepository

    auth_service: AuthService
    user_service: UserService
    package_service: PackageService
    student_service: StudentService
    class_service: ClassService
    request_service: RequestService
    report_service: ReportService


def build_services(
    *,
    users_repo: UserRepository,
    packages_repo: PackageRepository,
    students_repo: StudentRepository,
    classes_repo: ClassRepository,
    requests_repo: RequestRepository,
    ledger: LedgerPolicy | None = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    return Container(
        users_repo=users_repo,
        packages_repo=packages_repo,
        students_repo=students_repo,
        classes_repo=classes_repo,
        requests_repo=requests_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        package_service=PackageService(packages_repo),
        student_service=StudentService(students_repo, packages_repo, users_repo),
        class_service=ClassService(
            classes_repo,
            students_repo,
            users_repo,
            ledger=ledger or StandardLedgerPolicy(),
        ),
        request_service=RequestService(requests_repo, classes_repo),
        report_service=ReportService(classes_repo, students_repo, users_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        packages_repo=MySQLPackageRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
    )
