"""Application service: Input Shipping Receipt use case.

A dedicated transition into ``shipped`` that records courier and
receipt together. It is not gated by the status whitelist.
"""

from __future__ import annotations

import logging
import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import OrderDTO
from homemarket.application.update_order_status import authorize_shop_staff, load_order
from homemarket.domain.exceptions import ConflictError, ErrorCode
from homemarket.domain.model.order import OrderStatus
from homemarket.domain.model.value_objects import EntityType
from homemarket.domain.repository.order_repository import OrderRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class InputShippingReceiptHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
    ) -> None:
        self._order_repo = order_repo
        self._resolver = resolver
        self._audit = audit

    def handle(
        self,
        user_id: uuid.UUID,
        role: str,
        order_id: uuid.UUID,
        courier: str,
        receipt: str,
    ) -> OrderDTO:
        order = load_order(self._order_repo, order_id)
        authorize_shop_staff(self._resolver, user_id, role, order)

        old_status = order.ship(courier, receipt)
        if not self._order_repo.save_transition(order, old_status):
            raise ConflictError(
                f"Order {order.number} changed while shipping; reload and retry",
                ErrorCode.INVALID_TRANSITION,
            )
        logger.info(
            "Order %s shipped via %s (receipt %s)",
            order.number,
            order.shipping_courier,
            order.shipping_receipt,
            extra={"order_id": str(order.id)},
        )

        self._audit.record_history(
            order.id,
            EntityType.ORDER,
            old_status.value,
            OrderStatus.SHIPPED.value,
            user_id,
            note=f"{order.shipping_courier} {order.shipping_receipt}".strip(),
        )
        self._audit.notify(
            order.buyer_id,
            "order_status",
            "Your order has shipped",
            f"Order {order.number} was shipped with receipt {order.shipping_receipt}.",
            order.id,
        )
        return OrderDTO.from_order(order)
