"""Abstract repository for the Order aggregate."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from homemarket.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: uuid.UUID) -> Order | None:
        """Return an order with its line items, or None if not found."""

    @abstractmethod
    def run_order_transaction(self, order: Order) -> None:
        """Insert the order, its line items and decrement stock, all-or-nothing.

        Each decrement is conditional on the item still being active with
        ``stock >= quantity``. If any line fails the condition nothing is
        written and ``ConflictError(INVALID_ORDER_ITEM)`` is raised.
        """

    @abstractmethod
    def save_transition(self, order: Order, expected_status: OrderStatus) -> bool:
        """Persist status and shipping fields if the stored status still
        equals ``expected_status``. Returns False when it does not.
        """
