from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..common.validators import (
    optional_decimal,
    optional_str,
    require_body,
    require_bool,
    require_int,
    require_non_empty,
)
from ..core.constants import HOURS_QUANT, MAX_NAME_LENGTH, MAX_PACKAGE_HOURS, MAX_PRICE


def parse_package_input(payload: Any, *, partial: bool = False) -> dict:
    """Validate a package body; returns column -> value for supplied fields."""
    body = require_body(payload)
    out: dict = {}

    if not partial or "name" in body:
        out["name"] = require_non_empty(body.get("name"), "name", max_len=MAX_NAME_LENGTH)
    if not partial or "hours" in body:
        out["hours"] = require_int(body.get("hours"), "hours", min_value=1, max_value=MAX_PACKAGE_HOURS)
    if "price" in body:
        out["price"] = optional_decimal(
            body.get("price"), "price", min_value=Decimal("0"), max_value=MAX_PRICE, quant=HOURS_QUANT
        )
    if "description" in body:
        out["description"] = optional_str(body.get("description"), "description")
    if "isActive" in body:
        out["is_active"] = require_bool(body.get("isActive"), "isActive")

    return out
