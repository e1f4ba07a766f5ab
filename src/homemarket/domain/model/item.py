"""Item aggregate.

Items live in a Shop's catalogue independently of orders. Their price
may change at any time; orders keep their own snapshot.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from homemarket.domain.exceptions import ConflictError, ErrorCode, ValidationError
from homemarket.domain.model.value_objects import Money, new_id


class ItemStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"
    DELETED = "deleted"


@dataclass
class Item:
    """A listing in a shop.

    Invariants:
    - ``stock`` is never negative
    - only ACTIVE items can be ordered
    """

    id: uuid.UUID
    shop_id: uuid.UUID
    name: str
    price: Money
    stock: int
    category_id: uuid.UUID | None = None
    description: str = ""
    condition: str = ""
    status: ItemStatus = ItemStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def list_new(
        shop_id: uuid.UUID,
        category_id: uuid.UUID,
        name: str,
        price: Money,
        stock: int,
        description: str = "",
        condition: str = "",
    ) -> Item:
        """Create an active listing, enforcing all invariants."""
        if not name or not name.strip():
            raise ValidationError("Item name is required")
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise ValidationError("Stock must be >= 0")
        return Item(
            id=new_id(),
            shop_id=shop_id,
            category_id=category_id,
            name=name.strip(),
            description=description,
            price=price,
            stock=stock,
            condition=condition,
            status=ItemStatus.ACTIVE,
        )

    @staticmethod
    def draft(
        shop_id: uuid.UUID,
        name: str,
        description: str,
        price: Money,
        condition: str = "",
    ) -> Item:
        """A single-unit draft awaiting the seller's listing details."""
        return Item(
            id=new_id(),
            shop_id=shop_id,
            category_id=None,
            name=name,
            description=description,
            price=price,
            stock=1,
            condition=condition,
            status=ItemStatus.DRAFT,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_orderable(self) -> bool:
        return self.status == ItemStatus.ACTIVE

    def can_supply(self, quantity: int) -> bool:
        return self.is_orderable and quantity <= self.stock

    # --- Mutations ------------------------------------------------------------

    def publish(self, category_id: uuid.UUID) -> None:
        """Transition DRAFT -> ACTIVE once a category has been chosen."""
        if self.status != ItemStatus.DRAFT:
            raise ConflictError(
                f"Cannot publish item — current status is {self.status.value}, "
                f"expected draft",
                ErrorCode.ITEM_STATUS,
            )
        self.category_id = category_id
        self.status = ItemStatus.ACTIVE
        self.updated_at = datetime.now(timezone.utc)

    def edit(
        self,
        name: str,
        description: str,
        price: Money,
        stock: int,
        condition: str = "",
    ) -> None:
        """Replace the seller-editable listing details."""
        if self.status == ItemStatus.DELETED:
            raise ConflictError("Cannot edit a deleted item", ErrorCode.ITEM_STATUS)
        if not name or not name.strip():
            raise ValidationError("Item name is required")
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise ValidationError("Stock must be >= 0")
        self.name = name.strip()
        self.description = description
        self.price = price
        self.stock = stock
        self.condition = condition
        self.updated_at = datetime.now(timezone.utc)

    def transition_to(self, new_status: ItemStatus) -> ItemStatus:
        """Move between listing states. Returns the previous status.

        Drafts only become active through ``publish()``; deleted is final.
        """
        old_status = self.status
        if new_status not in _ITEM_TRANSITIONS[old_status]:
            raise ConflictError(
                f"Cannot move item from {old_status.value} to {new_status.value}",
                ErrorCode.ITEM_STATUS,
            )
        if new_status == ItemStatus.ACTIVE and self.category_id is None:
            raise ConflictError(
                "Item needs a category before it can be active", ErrorCode.ITEM_STATUS
            )
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)
        return old_status


_ITEM_TRANSITIONS = {
    ItemStatus.ACTIVE: frozenset({ItemStatus.INACTIVE, ItemStatus.DELETED}),
    ItemStatus.INACTIVE: frozenset({ItemStatus.ACTIVE, ItemStatus.DELETED}),
    ItemStatus.DRAFT: frozenset({ItemStatus.INACTIVE, ItemStatus.DELETED}),
    ItemStatus.DELETED: frozenset(),
}
