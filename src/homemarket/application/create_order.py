"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model:

1. Coalesce requested lines and validate each against live stock/status.
2. Partition by owning shop (exactly one shop per order).
3. Build OrderLineItems with *current* prices (snapshot).
4. Hand the order to the repository's atomic transaction, which
   re-checks stock with conditional decrements.
5. Notify the shop owner and record history (best-effort).
"""

from __future__ import annotations

import logging
import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import CreateOrderInput, OrderDTO, OrderItemSpec
from homemarket.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from homemarket.domain.model.item import Item
from homemarket.domain.model.order import Order, OrderLineItem, OrderStatus
from homemarket.domain.model.value_objects import EntityType, Quantity, parse_id
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.repository.order_repository import OrderRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
    ) -> None:
        self._order_repo = order_repo
        self._item_repo = item_repo
        self._resolver = resolver
        self._audit = audit

    def handle(self, buyer_id: uuid.UUID, order_input: CreateOrderInput) -> OrderDTO:
        """Place an order against a single shop and decrement stock atomically."""
        if not order_input.items:
            raise ValidationError("Order must contain at least one item")
        if not order_input.shipping_address or not order_input.shipping_address.strip():
            raise ValidationError("Shipping address is required")

        requested = self._coalesce(order_input.items)

        shop_lines: dict[uuid.UUID, list[OrderLineItem]] = {}
        for item_id, quantity in requested.items():
            item = self._load_orderable(item_id, quantity)
            shop_lines.setdefault(item.shop_id, []).append(
                OrderLineItem(
                    item_id=item.id,
                    item_name=item.name,
                    quantity=quantity,
                    unit_price=item.price,  # <-- price snapshot
                )
            )

        if len(shop_lines) != 1:
            raise ConflictError(
                "Multi-shop orders are not supported in a single transaction",
                ErrorCode.MULTI_SHOP_UNSUPPORTED,
            )
        ((shop_id, lines),) = shop_lines.items()

        order = Order.place(
            buyer_id=buyer_id,
            shop_id=shop_id,
            items=lines,
            shipping_address=order_input.shipping_address,
            shipping_courier=order_input.shipping_courier,
        )
        self._order_repo.run_order_transaction(order)
        logger.info(
            "Order %s placed by buyer %s (total %s)",
            order.number,
            buyer_id,
            order.total_price,
            extra={"order_id": str(order.id)},
        )

        self._audit.record_history(
            order.id, EntityType.ORDER, None, OrderStatus.PENDING.value, buyer_id,
            note="Order placed",
        )
        owner_id = self._resolver.resolve_shop_owner(shop_id)
        if owner_id is None:
            logger.warning("Shop %s has no owner; skipping new-order notification", shop_id)
        else:
            self._audit.notify(
                owner_id,
                "new_order",
                "New order received",
                f"You received new order {order.number} with total {order.total_price}.",
                order.id,
            )

        return OrderDTO.from_order(order)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _coalesce(specs: list[OrderItemSpec]) -> dict[uuid.UUID, Quantity]:
        """Merge repeated lines for the same item, preserving first-seen order."""
        merged: dict[uuid.UUID, int] = {}
        for spec in specs:
            item_id = parse_id(spec.item_id, "item_id")
            Quantity(spec.quantity)
            merged[item_id] = merged.get(item_id, 0) + spec.quantity
        return {item_id: Quantity(qty) for item_id, qty in merged.items()}

    def _load_orderable(self, item_id: uuid.UUID, quantity: Quantity) -> Item:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            raise EntityNotFoundError(
                f"Item {item_id} not found", ErrorCode.INVALID_ORDER_ITEM
            )
        if not item.is_orderable:
            raise ConflictError(
                f"Item '{item.name}' is not available (status {item.status.value})",
                ErrorCode.INVALID_ORDER_ITEM,
            )
        if quantity.value > item.stock:
            raise ConflictError(
                f"Insufficient stock for '{item.name}' "
                f"(need {quantity.value}, have {item.stock})",
                ErrorCode.INVALID_ORDER_ITEM,
            )
        return item
