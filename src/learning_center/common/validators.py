from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from ..core.constants import MAX_ROW_ID
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_datetime

E = TypeVar("E", bound=Enum)


def _fail(field_name: str, message: str) -> ValidationError:
    return ValidationError(f"{field_name}: {message}", errors={field_name: message})


def require_body(payload: Any) -> dict:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return dict(payload)


def require_non_empty(value: Any, field_name: str, *, max_len: Optional[int] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _fail(field_name, "is required")
    value = value.strip()
    if max_len is not None and len(value) > max_len:
        raise _fail(field_name, f"must be at most {max_len} characters")
    return value


def optional_str(value: Any, field_name: str, *, max_len: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _fail(field_name, "must be a string")
    value = value.strip()
    if not value:
        return None
    if max_len is not None and len(value) > max_len:
        raise _fail(field_name, f"must be at most {max_len} characters")
    return value


def require_int(
    value: Any,
    field_name: str,
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> int:
    # bool is an int subclass; "true" is never a valid count.
    if isinstance(value, bool):
        raise _fail(field_name, "must be an integer")
    try:
        out = int(value)
    except (TypeError, ValueError, OverflowError):
        raise _fail(field_name, "must be an integer")
    if isinstance(value, float) and value != out:
        raise _fail(field_name, "must be an integer")
    if min_value is not None and out < min_value:
        raise _fail(field_name, f"must be >= {min_value}")
    if max_value is not None and out > max_value:
        raise _fail(field_name, f"must be <= {max_value}")
    return out


def optional_int(
    value: Any,
    field_name: str,
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name, min_value=min_value, max_value=max_value)


def require_decimal(
    value: Any,
    field_name: str,
    *,
    min_value: Optional[Decimal] = None,
    max_value: Optional[Decimal] = None,
    positive: bool = False,
    quant: Optional[Decimal] = None,
) -> Decimal:
    """Parse a number; ``quant`` rejects finer precision than the column stores."""
    if isinstance(value, bool) or value is None:
        raise _fail(field_name, "must be a number")
    try:
        out = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise _fail(field_name, "must be a number")
    if not out.is_finite():
        raise _fail(field_name, "must be a number")
    if positive and out <= 0:
        raise _fail(field_name, "must be greater than 0")
    if min_value is not None and out < min_value:
        raise _fail(field_name, f"must be >= {min_value}")
    if max_value is not None and out > max_value:
        raise _fail(field_name, f"must be <= {max_value}")
    if quant is not None:
        try:
            exact = out == out.quantize(quant)
        except InvalidOperation:
            exact = False
        if not exact:
            raise _fail(field_name, f"must have at most {-quant.as_tuple().exponent} decimal places")
    return out


def optional_decimal(
    value: Any,
    field_name: str,
    *,
    min_value: Optional[Decimal] = None,
    max_value: Optional[Decimal] = None,
    positive: bool = False,
    quant: Optional[Decimal] = None,
) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return require_decimal(
        value,
        field_name,
        min_value=min_value,
        max_value=max_value,
        positive=positive,
        quant=quant,
    )


def require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise _fail(field_name, "must be true or false")
    return value


def require_choice(value: Any, field_name: str, enum_cls: Type[E]) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise _fail(field_name, f"must be one of: {allowed}")


def require_id(value: Any, field_name: str) -> int:
    return require_int(value, field_name, min_value=1, max_value=MAX_ROW_ID)


def optional_id(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_id(value, field_name)


def require_datetime(value: Any, field_name: str) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise _fail(field_name, "is required")
    try:
        return parse_iso_datetime(value)
    except ValueError:
        raise _fail(field_name, "must be an ISO 8601 datetime")


def require_time_window(start: datetime, end: datetime, *, field_name: str = "endTime") -> None:
    if end <= start:
        raise _fail(field_name, "must be after the start time")
