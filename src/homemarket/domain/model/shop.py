"""Shop and Category.

A seller owns exactly one Shop. Categories belong to a Shop and are
only meaningful inside it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from homemarket.domain.exceptions import ValidationError
from homemarket.domain.model.value_objects import new_id


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Shop:
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    address: str
    description: str = ""
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def open(user_id: uuid.UUID, name: str, address: str, description: str = "") -> Shop:
        if not name or not name.strip():
            raise ValidationError("Shop name is required")
        if not address or not address.strip():
            raise ValidationError("Shop address is required")
        return Shop(
            id=new_id(),
            user_id=user_id,
            name=name.strip(),
            address=address.strip(),
            description=description.strip(),
        )


@dataclass
class Category:
    id: uuid.UUID
    shop_id: uuid.UUID
    name: str
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def create(shop_id: uuid.UUID, name: str) -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        return Category(id=new_id(), shop_id=shop_id, name=name.strip())
