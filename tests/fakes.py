"""In-memory repositories that behave like the MySQL ones (ledger rules included)."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from learning_center.classes.model import ClassWithRelations, ScheduledClass
from learning_center.classes.transitions import CLOSED_STATUSES
from learning_center.core.enums import ClassStatus, RequestStatus, Role, StudentLevel
from learning_center.core.exceptions import StateError
from learning_center.ledger.mysql_ledger import InsufficientHoursError
from learning_center.packages.model import Package
from learning_center.requests.model import ScheduleChangeRequest
from learning_center.students.model import Student, StudentWithRelations
from learning_center.users.model import IdentityClaims, User

FIXED_NOW = datetime(2026, 3, 1, 10, 0, 0)


def make_user(user_id: str, role: Role = Role.TEACHER, *, first_name: str = "", last_name: str = "") -> User:
    return User(
        id=user_id,
        email=f"{user_id}@example.com",
        first_name=first_name or user_id.capitalize(),
        last_name=last_name or None,
        profile_image_url=None,
        role=role,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


class FakeUsersRepo:
    def __init__(self, *users: User):
        self._users: dict[str, User] = {u.id: u for u in users}

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def get_by_id(self, user_id):
        return self._users.get(str(user_id))

    def upsert(self, claims: IdentityClaims) -> User:
        existing = self._users.get(claims.sub)
        user = User(
            id=claims.sub,
            email=claims.email,
            first_name=claims.first_name,
            last_name=claims.last_name,
            profile_image_url=claims.profile_image_url,
            role=existing.role if existing else Role.TEACHER,
            created_at=existing.created_at if existing else FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self._users[user.id] = user
        return user

    def list_teachers(self):
        return sorted((u for u in self._users.values() if u.role == Role.TEACHER), key=lambda u: u.display_name)

    def count_teachers(self):
        return len(self.list_teachers())


class FakePackagesRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, Package] = {}

    def list_active(self):
        return sorted((p for p in self._rows.values() if p.is_active), key=lambda p: (p.hours, p.id))

    def get_by_id(self, package_id):
        return self._rows.get(int(package_id))

    def create(self, fields: dict) -> Package:
        pid = self._next_id
        self._next_id += 1
        pkg = Package(
            id=pid,
            name=fields["name"],
            hours=fields["hours"],
            price=fields.get("price"),
            description=fields.get("description"),
            is_active=fields.get("is_active", True),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self._rows[pid] = pkg
        return pkg

    def update(self, package_id, changes: dict):
        pkg = self._rows.get(int(package_id))
        if not pkg:
            return None
        pkg = replace(pkg, **changes)
        self._rows[pkg.id] = pkg
        return pkg

    def deactivate(self, package_id):
        pkg = self._rows.get(int(package_id))
        if not pkg:
            return False
        self._rows[pkg.id] = replace(pkg, is_active=False)
        return True


class FakeStudentsRepo:
    def __init__(self, packages: FakePackagesRepo, users: FakeUsersRepo):
        self._packages = packages
        self._users = users
        self._next_id = 1
        self._rows: dict[int, Student] = {}

    def _with_relations(self, s: Student) -> StudentWithRelations:
        return StudentWithRelations(
            **{f: getattr(s, f) for f in Student.__dataclass_fields__},
            package=self._packages.get_by_id(s.package_id) if s.package_id else None,
            assigned_teacher=self._users.get_by_id(s.assigned_teacher_id) if s.assigned_teacher_id else None,
        )

    def list_active(self):
        active = [s for s in self._rows.values() if s.is_active]
        return [self._with_relations(s) for s in sorted(active, key=lambda s: s.id, reverse=True)]

    def get_with_relations(self, student_id):
        s = self._rows.get(int(student_id))
        return self._with_relations(s) if s else None

    def get_by_id(self, student_id):
        return self._rows.get(int(student_id))

    def create(self, fields: dict) -> Student:
        sid = self._next_id
        self._next_id += 1
        student = Student(
            id=sid,
            name=fields["name"],
            email=fields.get("email"),
            age=fields.get("age"),
            level=fields.get("level", StudentLevel.BEGINNER),
            package_id=fields.get("package_id"),
            assigned_teacher_id=fields.get("assigned_teacher_id"),
            total_hours=fields["total_hours"],
            remaining_hours=fields["remaining_hours"],
            is_active=fields.get("is_active", True),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self._rows[sid] = student
        return student

    def update_locked(self, student_id, plan):
        s = self._rows.get(int(student_id))
        if not s:
            return None
        s = replace(s, **plan(s))
        self._rows[s.id] = s
        return s

    def deactivate(self, student_id):
        s = self._rows.get(int(student_id))
        if not s:
            return False
        self._rows[s.id] = replace(s, is_active=False)
        return True

    def count_active(self):
        return sum(1 for s in self._rows.values() if s.is_active)

    def apply_delta(self, student_id: int, delta: Decimal) -> None:
        """Same rules as the SQL ledger: guarded debit, credit clamped at total."""
        if delta == 0:
            return
        s = self._rows[int(student_id)]
        if delta > 0:
            if s.remaining_hours < delta:
                raise InsufficientHoursError(s.id, delta)
            remaining = s.remaining_hours - delta
        else:
            remaining = min(s.remaining_hours - delta, s.total_hours)
        self._rows[s.id] = replace(s, remaining_hours=remaining)


class FakeClassesRepo:
    def __init__(self, students: FakeStudentsRepo, users: FakeUsersRepo):
        self._students = students
        self._users = users
        self._next_id = 1
        self._rows: dict[int, ScheduledClass] = {}

    def _with_relations(self, c: ScheduledClass) -> ClassWithRelations:
        return ClassWithRelations(
            **{f: getattr(c, f) for f in ScheduledClass.__dataclass_fields__},
            student=self._students.get_by_id(c.student_id),
            teacher=self._users.get_by_id(c.teacher_id),
        )

    def list_with_relations(self, *, start=None, end=None, teacher_id=None):
        rows = list(self._rows.values())
        if teacher_id is not None:
            rows = [c for c in rows if c.teacher_id == teacher_id]
        if start is not None:
            rows = [c for c in rows if c.start_time >= start]
        if end is not None:
            rows = [c for c in rows if c.start_time <= end]
        rows.sort(key=lambda c: (c.start_time, c.id), reverse=True)
        return [self._with_relations(c) for c in rows]

    def get_with_relations(self, class_id):
        c = self._rows.get(int(class_id))
        return self._with_relations(c) if c else None

    def get_by_id(self, class_id):
        return self._rows.get(int(class_id))

    def create_with_debit(self, fields: dict, *, debit: Decimal) -> ScheduledClass:
        self._students.apply_delta(fields["student_id"], debit)
        cid = self._next_id
        self._next_id += 1
        klass = ScheduledClass(
            id=cid,
            student_id=fields["student_id"],
            teacher_id=fields["teacher_id"],
            subject=fields.get("subject"),
            start_time=fields["start_time"],
            end_time=fields["end_time"],
            duration=fields["duration"],
            meeting_link=fields.get("meeting_link"),
            status=fields.get("status", ClassStatus.SCHEDULED),
            notes=fields.get("notes"),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self._rows[cid] = klass
        return klass

    def update_locked(self, class_id, plan):
        existing = self._rows.get(int(class_id))
        if not existing:
            return None
        decided = plan(existing)
        self._students.apply_delta(existing.student_id, decided.ledger_delta)
        updated = replace(existing, **decided.changes)
        self._rows[updated.id] = updated
        return updated

    def delete_locked(self, class_id, plan):
        existing = self._rows.get(int(class_id))
        if not existing:
            return False
        self._students.apply_delta(existing.student_id, plan(existing))
        del self._rows[existing.id]
        return True

    def count_starting_between(self, start, end):
        return sum(1 for c in self._rows.values() if start <= c.start_time < end)

    def count_by_status(self, status):
        return sum(1 for c in self._rows.values() if c.status == status)

    def move(self, class_id: int, start: datetime, end: datetime) -> None:
        c = self._rows[int(class_id)]
        self._rows[c.id] = replace(c, start_time=start, end_time=end)


class FakeRequestsRepo:
    def __init__(self, classes: FakeClassesRepo):
        self._classes = classes
        self._next_id = 1
        self._rows: dict[int, ScheduleChangeRequest] = {}

    def list_requests(self, *, status=None, teacher_id=None, limit=500):
        rows = sorted(self._rows.values(), key=lambda r: r.id, reverse=True)
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if teacher_id is not None:
            own = {c.id for c in self._classes.list_with_relations(teacher_id=teacher_id)}
            rows = [r for r in rows if r.class_id in own]
        return rows[:limit]

    def get_by_id(self, request_id):
        return self._rows.get(int(request_id))

    def create(self, fields: dict) -> ScheduleChangeRequest:
        rid = self._next_id
        self._next_id += 1
        req = ScheduleChangeRequest(
            id=rid,
            status=RequestStatus.PENDING,
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
            **fields,
        )
        self._rows[rid] = req
        return req

    def resolve(self, *, request_id, status, teacher_response=None):
        req = self._rows.get(int(request_id))
        if not req:
            return None
        if req.status != RequestStatus.PENDING:
            raise StateError("Request already resolved")
        if status == RequestStatus.APPROVED:
            if self._classes.get_by_id(req.class_id).status in CLOSED_STATUSES:
                raise StateError("Cannot reschedule a closed class")
            self._classes.move(req.class_id, req.new_start_time, req.new_end_time)
        req = replace(req, status=status, teacher_response=teacher_response)
        self._rows[req.id] = req
        return req


def sign_in(client, user_id: str) -> None:
    """Put ``user_id`` into the Flask session, as the identity callback would."""
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
