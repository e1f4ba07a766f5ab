"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the transport (CLI/HTTP) and application layers
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from homemarket.domain.model.audit import HistoryStatus, Notification
from homemarket.domain.model.item import Item
from homemarket.domain.model.offer import Offer
from homemarket.domain.model.order import Order

# --- Inputs ------------------------------------------------------------------


@dataclass(frozen=True)
class CreateOfferInput:
    """Input: what a giver proposes. ``seller_id`` is raw text from the request."""

    item_name: str
    expected_price: str
    description: str = ""
    condition: str = ""
    location: str = ""
    seller_id: str = ""


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line (item id + quantity)."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class CreateOrderInput:
    items: list[OrderItemSpec]
    shipping_address: str
    shipping_courier: str = ""


@dataclass(frozen=True)
class CreateShopInput:
    name: str
    address: str
    description: str = ""


@dataclass(frozen=True)
class CreateItemInput:
    name: str
    price: str
    stock: int
    category_id: str
    description: str = ""
    condition: str = ""


@dataclass(frozen=True)
class UpdateItemInput:
    """Input: the full replacement listing. An empty ``status`` keeps the current one."""

    name: str
    price: str
    stock: int
    description: str = ""
    condition: str = ""
    status: str = ""


# --- Outputs -----------------------------------------------------------------


@dataclass(frozen=True)
class AcceptedOffer:
    """Output of a successful acceptance: the offer and its draft listing."""

    offer: Offer
    draft_item: Item


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    item_id: str
    item_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "IDR 10.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    number: str
    buyer_id: str
    shop_id: str
    status: str
    items: list[OrderLineItemDTO]
    total: str
    shipping_address: str
    shipping_courier: str
    shipping_receipt: str | None
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=str(order.id),
            number=order.number,
            buyer_id=str(order.buyer_id),
            shop_id=str(order.shop_id),
            status=order.status.value,
            items=[
                OrderLineItemDTO(
                    item_id=str(item.item_id),
                    item_name=item.item_name,
                    quantity=item.quantity.value,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                )
                for item in order.items
            ],
            total=str(order.total_price),
            shipping_address=order.shipping_address,
            shipping_courier=order.shipping_courier,
            shipping_receipt=order.shipping_receipt,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class HistoryEntryDTO:
    old_status: str | None
    new_status: str
    actor_id: str
    note: str
    timestamp: str

    @staticmethod
    def from_record(record: HistoryStatus) -> HistoryEntryDTO:
        return HistoryEntryDTO(
            old_status=record.old_status,
            new_status=record.new_status,
            actor_id=str(record.actor_id),
            note=record.note,
            timestamp=record.timestamp.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class OrderTrackingDTO:
    """Output: an order, its lines and its status trail."""

    order: OrderDTO
    history: list[HistoryEntryDTO] = field(default_factory=list)


@dataclass(frozen=True)
class NotificationDTO:
    id: str
    type: str
    title: str
    message: str
    related_id: str
    is_read: bool
    created_at: str

    @staticmethod
    def from_notification(notification: Notification) -> NotificationDTO:
        return NotificationDTO(
            id=str(notification.id),
            type=notification.type,
            title=notification.title,
            message=notification.message,
            related_id=str(notification.related_id),
            is_read=notification.is_read,
            created_at=notification.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
