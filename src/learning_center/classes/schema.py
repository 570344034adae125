from __future__ import annotations

from typing import Any

from ..common.validators import (
    optional_decimal,
    optional_str,
    require_body,
    require_choice,
    require_datetime,
    require_id,
    require_non_empty,
)
from ..core.constants import HOURS_QUANT, MAX_CLASS_DURATION, MAX_NAME_LENGTH
from ..core.enums import ClassStatus


def _duration(value: Any):
    # DECIMAL(5,2)
    return optional_decimal(value, "duration", positive=True, max_value=MAX_CLASS_DURATION, quant=HOURS_QUANT)


def parse_class_input(payload: Any, *, partial: bool = False) -> dict:
    """Validate a class body; returns column -> value for supplied fields."""
    body = require_body(payload)
    out: dict = {}

    if not partial or "studentId" in body:
        out["student_id"] = require_id(body.get("studentId"), "studentId")
    if not partial or "teacherId" in body:
        out["teacher_id"] = require_non_empty(body.get("teacherId"), "teacherId", max_len=64)
    if "subject" in body:
        out["subject"] = optional_str(body.get("subject"), "subject", max_len=MAX_NAME_LENGTH)
    if not partial or "startTime" in body:
        out["start_time"] = require_datetime(body.get("startTime"), "startTime")
    if not partial or "endTime" in body:
        out["end_time"] = require_datetime(body.get("endTime"), "endTime")
    if "duration" in body and body.get("duration") is not None:
        out["duration"] = _duration(body.get("duration"))
    # zoomLink is the name older clients send
    for key in ("meetingLink", "zoomLink"):
        if key in body:
            out["meeting_link"] = optional_str(body.get(key), key)
    if "status" in body:
        out["status"] = require_choice(body.get("status"), "status", ClassStatus)
    if "notes" in body:
        out["notes"] = optional_str(body.get("notes"), "notes")

    return out
