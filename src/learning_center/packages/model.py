from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Package:
    """Domain entity: a purchasable bundle of learning hours."""

    id: int
    name: str
    hours: int
    price: Optional[Decimal]
    description: Optional[str]
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
