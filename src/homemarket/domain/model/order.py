"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from homemarket.domain.exceptions import ConflictError, ErrorCode, ValidationError
from homemarket.domain.model.value_objects import Money, Quantity, new_id


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Forward order of the fulfilment chain; CANCELLED sits outside it.
_CHAIN = (
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.COMPLETED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

MAX_LINE_ITEMS = 50


@dataclass
class OrderLineItem:
    """Captures the price of an item at order-creation time.

    The unit price is decoupled from the live Item price so later
    catalogue changes never touch existing orders.
    """

    item_id: uuid.UUID
    item_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    id: uuid.UUID = field(default_factory=new_id)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for buyer orders.

    Use the ``Order.place()`` factory for new orders — it enforces all
    business rules and snapshots the total. The ``__init__`` is kept
    plain so the repository can reconstitute persisted orders without
    re-validating.
    """

    id: uuid.UUID
    number: str
    buyer_id: uuid.UUID
    shop_id: uuid.UUID
    items: list[OrderLineItem]
    total_price: Money
    shipping_address: str
    shipping_courier: str = ""
    shipping_receipt: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        buyer_id: uuid.UUID,
        shop_id: uuid.UUID,
        items: list[OrderLineItem],
        shipping_address: str,
        shipping_courier: str = "",
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not shipping_address or not shipping_address.strip():
            raise ValidationError("Shipping address is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        total = Money.zero()
        for item in items:
            total = total + item.line_total

        order_id = new_id()
        now = datetime.now(timezone.utc)
        return Order(
            id=order_id,
            number=generate_order_number(order_id, now),
            buyer_id=buyer_id,
            shop_id=shop_id,
            items=list(items),
            total_price=total,
            shipping_address=shipping_address.strip(),
            shipping_courier=shipping_courier.strip(),
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus) -> OrderStatus:
        """Move along the fulfilment chain, or cancel.

        Returns the previous status. Entering SHIPPED is reserved for
        ``ship()`` because it must carry a receipt.
        """
        old_status = self.status
        if new_status == OrderStatus.SHIPPED:
            raise ConflictError(
                "Orders enter shipped only when a shipping receipt is recorded",
                ErrorCode.INVALID_TRANSITION,
            )
        if not can_transition(old_status, new_status):
            raise ConflictError(
                f"Cannot move order from {old_status.value} to {new_status.value}",
                ErrorCode.INVALID_TRANSITION,
            )
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)
        return old_status

    def ship(self, courier: str, receipt: str) -> OrderStatus:
        """Record courier + receipt and force the status to SHIPPED.

        The receipt can be set exactly once, and never on a completed or
        cancelled order. Returns the previous status.
        """
        if self.is_terminal:
            raise ConflictError(
                f"Cannot ship order {self.number}: it is already {self.status.value}",
                ErrorCode.INVALID_TRANSITION,
            )
        if not receipt or not receipt.strip():
            raise ValidationError("Shipping receipt is required")
        if self.shipping_receipt:
            raise ConflictError(
                f"Order {self.number} already has shipping receipt "
                f"{self.shipping_receipt}",
                ErrorCode.RECEIPT_ALREADY_SET,
            )
        old_status = self.status
        if courier and courier.strip():
            self.shipping_courier = courier.strip()
        self.shipping_receipt = receipt.strip()
        self.status = OrderStatus.SHIPPED
        self.updated_at = datetime.now(timezone.utc)
        return old_status

    # --- Computed properties --------------------------------------------------

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity.value for item in self.items)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


def can_transition(old: OrderStatus, new: OrderStatus) -> bool:
    """Forward moves along the chain (skipping allowed) or cancellation."""
    if old in TERMINAL_STATUSES or old == new:
        return False
    if new == OrderStatus.CANCELLED:
        return True
    return _CHAIN.index(new) > _CHAIN.index(old)


def generate_order_number(order_id: uuid.UUID, when: datetime) -> str:
    return f"ORD-{when:%Y%m%d}-{order_id.hex[:8].upper()}"
