"""SQLAlchemy-backed implementation of OrderRepository.

``run_order_transaction`` is the only multi-statement write in the
engine. Stock is decremented with a conditional UPDATE so that two
concurrent orders for the same item cannot both succeed when together
they exceed the stock: the database serializes the row updates and the
loser sees zero affected rows.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import update

from homemarket.domain.exceptions import ConflictError, ErrorCode
from homemarket.domain.model.item import ItemStatus
from homemarket.domain.model.order import Order, OrderLineItem, OrderStatus
from homemarket.domain.model.value_objects import Money, Quantity
from homemarket.domain.repository.order_repository import OrderRepository
from homemarket.infrastructure.database import DatabaseSessionManager
from homemarket.infrastructure.persistence.orm import ItemRow, OrderItemRow, OrderRow

logger = logging.getLogger(__name__)


class SqlOrderRepository(OrderRepository):

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: uuid.UUID) -> Order | None:
        with self._db.transaction() as session:
            row = session.get(OrderRow, order_id)
            return self._to_domain(row) if row is not None else None

    def run_order_transaction(self, order: Order) -> None:
        now = datetime.now(timezone.utc)
        with self._db.transaction() as session:
            # 1. Insert order and its line items
            session.add(self._to_row(order))
            session.flush()

            # 2. Conditional stock decrement per line
            for line in order.items:
                qty = line.quantity.value
                result = session.execute(
                    update(ItemRow)
                    .where(
                        ItemRow.id == line.item_id,
                        ItemRow.status == ItemStatus.ACTIVE.value,
                        ItemRow.stock >= qty,
                    )
                    .values(stock=ItemRow.stock - qty, updated_at=now)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    logger.info(
                        "Stock conflict on item %s for order %s; rolling back",
                        line.item_id,
                        order.number,
                        extra={"order_id": str(order.id)},
                    )
                    raise ConflictError(
                        f"Insufficient stock for '{line.item_name}' "
                        f"(need {qty}); the item changed while ordering",
                        ErrorCode.INVALID_ORDER_ITEM,
                    )

    def save_transition(self, order: Order, expected_status: OrderStatus) -> bool:
        with self._db.transaction() as session:
            result = session.execute(
                update(OrderRow)
                .where(
                    OrderRow.id == order.id,
                    OrderRow.status == expected_status.value,
                )
                .values(
                    status=order.status.value,
                    shipping_courier=order.shipping_courier,
                    shipping_receipt=order.shipping_receipt,
                    updated_at=order.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(order: Order) -> OrderRow:
        return OrderRow(
            id=order.id,
            number=order.number,
            buyer_id=order.buyer_id,
            shop_id=order.shop_id,
            total_price=order.total_price.amount,
            status=order.status.value,
            shipping_address=order.shipping_address,
            shipping_courier=order.shipping_courier,
            shipping_receipt=order.shipping_receipt,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRow(
                    id=line.id,
                    item_id=line.item_id,
                    item_name=line.item_name,
                    position=position,
                    quantity=line.quantity.value,
                    price=line.unit_price.amount,
                    created_at=order.created_at,
                )
                for position, line in enumerate(order.items)
            ],
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        items = [
            OrderLineItem(
                id=i.id,
                item_id=i.item_id,
                item_name=i.item_name,
                quantity=Quantity(i.quantity),
                unit_price=Money.of(i.price),
            )
            for i in row.items
        ]
        return Order(
            id=row.id,
            number=row.number,
            buyer_id=row.buyer_id,
            shop_id=row.shop_id,
            items=items,
            total_price=Money.of(row.total_price),
            status=OrderStatus(row.status),
            shipping_address=row.shipping_address,
            shipping_courier=row.shipping_courier,
            shipping_receipt=row.shipping_receipt,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
