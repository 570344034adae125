from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..common.validators import (
    optional_decimal,
    optional_id,
    optional_int,
    optional_str,
    require_body,
    require_bool,
    require_choice,
    require_decimal,
    require_non_empty,
)
from ..core.constants import HOURS_QUANT, MAX_AGE, MAX_NAME_LENGTH, MAX_STUDENT_HOURS
from ..core.enums import StudentLevel
from ..core.exceptions import ValidationError


# DECIMAL(6,2)
_HOURS = dict(min_value=Decimal("0"), max_value=MAX_STUDENT_HOURS, quant=HOURS_QUANT)


def _email(value: Any):
    email = optional_str(value, "email", max_len=255)
    if email is not None and ("@" not in email or email.startswith("@") or email.endswith("@")):
        raise ValidationError("email: must be a valid email address", errors={"email": "must be a valid email address"})
    return email


def parse_student_input(payload: Any, *, partial: bool = False) -> dict:
    """Validate a student body; returns column -> value for supplied fields.

    ``remainingHours`` is only accepted on update; on create the balance
    always starts equal to the total.
    """
    body = require_body(payload)
    out: dict = {}

    if not partial or "name" in body:
        out["name"] = require_non_empty(body.get("name"), "name", max_len=MAX_NAME_LENGTH)
    if "email" in body:
        out["email"] = _email(body.get("email"))
    if "age" in body:
        out["age"] = optional_int(body.get("age"), "age", min_value=0, max_value=MAX_AGE)
    if "level" in body:
        out["level"] = require_choice(body.get("level"), "level", StudentLevel)
    elif not partial:
        out["level"] = StudentLevel.BEGINNER
    if "packageId" in body:
        out["package_id"] = optional_id(body.get("packageId"), "packageId")
    if "assignedTeacherId" in body:
        out["assigned_teacher_id"] = optional_str(body.get("assignedTeacherId"), "assignedTeacherId", max_len=64)
    if "totalHours" in body:
        out["total_hours"] = optional_decimal(body.get("totalHours"), "totalHours", **_HOURS)
    if partial and "remainingHours" in body:
        out["remaining_hours"] = require_decimal(body.get("remainingHours"), "remainingHours", **_HOURS)
    if "isActive" in body:
        out["is_active"] = require_bool(body.get("isActive"), "isActive")

    return out
