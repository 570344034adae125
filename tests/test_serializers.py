from datetime import datetime
from decimal import Decimal

from learning_center.common.serializers import camel_case, format_decimal, to_json
from learning_center.core.enums import Role
from learning_center.users.model import User


def test_format_decimal_drops_trailing_zeros():
    assert format_decimal(Decimal("8.00")) == "8"
    assert format_decimal(Decimal("6.50")) == "6.5"
    assert format_decimal(Decimal("0.25")) == "0.25"
    assert format_decimal(Decimal("100.00")) == "100"


def test_camel_case():
    assert camel_case("remaining_hours") == "remainingHours"
    assert camel_case("id") == "id"
    assert camel_case("profile_image_url") == "profileImageUrl"


def test_to_json_converts_dataclasses():
    user = User(
        id="u1",
        email="u1@example.com",
        first_name="Ana",
        last_name=None,
        profile_image_url=None,
        role=Role.TEACHER,
        created_at=datetime(2026, 1, 2, 3, 4, 5),
    )
    data = to_json(user)

    assert data["id"] == "u1"
    assert data["firstName"] == "Ana"
    assert data["role"] == "teacher"
    assert data["createdAt"] == "2026-01-02T03:04:05"
    assert data["updatedAt"] is None
