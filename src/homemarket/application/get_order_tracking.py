"""Application service: Order Tracking use case (query, buyer side)."""

from __future__ import annotations

import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import HistoryEntryDTO, OrderDTO, OrderTrackingDTO
from homemarket.application.update_order_status import load_order
from homemarket.domain.exceptions import AuthorizationError, ErrorCode
from homemarket.domain.model.value_objects import Role
from homemarket.domain.repository.order_repository import OrderRepository


class GetOrderTrackingHandler:

    def __init__(self, order_repo: OrderRepository, audit: AuditSink) -> None:
        self._order_repo = order_repo
        self._audit = audit

    def handle(self, user_id: uuid.UUID, role: str, order_id: uuid.UUID) -> OrderTrackingDTO:
        """Only the buyer who placed the order, or an admin, may track it."""
        order = load_order(self._order_repo, order_id)
        if order.buyer_id != user_id and role != Role.ADMIN:
            raise AuthorizationError("Unauthorized: access denied", ErrorCode.UNAUTHORIZED)

        history = self._audit.history_for(order.id)
        return OrderTrackingDTO(
            order=OrderDTO.from_order(order),
            history=[HistoryEntryDTO.from_record(record) for record in history],
        )
