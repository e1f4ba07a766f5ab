"""Application service: Update Order Status use case (shop side).

Only the owner of the order's shop or an admin may move an order. The
write is a compare-and-swap on the status read at the start of the
request, so two concurrent updates cannot both apply.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import OrderDTO
from homemarket.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from homemarket.domain.model.order import Order, OrderStatus
from homemarket.domain.model.value_objects import EntityType, Role
from homemarket.domain.repository.order_repository import OrderRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)

DEFAULT_STATUS_WHITELIST = frozenset(status.value for status in OrderStatus)


def load_order(order_repo: OrderRepository, order_id: uuid.UUID) -> Order:
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order {order_id} not found", ErrorCode.ORDER_NOT_FOUND)
    return order


def authorize_shop_staff(
    resolver: OwnershipResolver, user_id: uuid.UUID, role: str, order: Order
) -> None:
    """The order's shop owner or an admin; anyone else is refused."""
    if role == Role.ADMIN:
        return
    if not resolver.owns_shop(user_id, order.shop_id):
        raise AuthorizationError(
            "Unauthorized: you are not the shop owner or admin",
            ErrorCode.UNAUTHORIZED,
        )


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
        allowed_statuses: Iterable[str] = DEFAULT_STATUS_WHITELIST,
    ) -> None:
        self._order_repo = order_repo
        self._resolver = resolver
        self._audit = audit
        self._allowed = frozenset(allowed_statuses)

    def handle(
        self,
        user_id: uuid.UUID,
        role: str,
        order_id: uuid.UUID,
        new_status: str,
    ) -> OrderDTO:
        status = self._parse_status(new_status)
        order = load_order(self._order_repo, order_id)
        authorize_shop_staff(self._resolver, user_id, role, order)

        old_status = order.transition_to(status)
        if not self._order_repo.save_transition(order, old_status):
            raise ConflictError(
                f"Order {order.number} changed while updating; reload and retry",
                ErrorCode.INVALID_TRANSITION,
            )
        logger.info(
            "Order %s moved %s -> %s by %s",
            order.number,
            old_status.value,
            status.value,
            user_id,
            extra={"order_id": str(order.id)},
        )

        self._audit.record_history(
            order.id, EntityType.ORDER, old_status.value, status.value, user_id
        )
        self._audit.notify(
            order.buyer_id,
            "order_status",
            "Order status changed",
            f"Your order {order.number} is now {status.value}.",
            order.id,
        )
        return OrderDTO.from_order(order)

    def _parse_status(self, raw: str) -> OrderStatus:
        value = (raw or "").strip().lower()
        if value not in self._allowed:
            raise ValidationError(f"Invalid status value: {raw!r}", ErrorCode.INVALID_STATUS)
        try:
            return OrderStatus(value)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid status value: {raw!r}", ErrorCode.INVALID_STATUS
            ) from exc
