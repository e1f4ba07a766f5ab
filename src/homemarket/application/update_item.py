"""Application service: Update Item use case (seller side).

Replaces a listing's details in place. Orders already placed keep the
price they were created with; only new orders see the change.
"""

from __future__ import annotations

import logging
import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import UpdateItemInput
from homemarket.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from homemarket.domain.model.item import Item, ItemStatus
from homemarket.domain.model.value_objects import EntityType, Money, Role
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


def load_owned_item(
    item_repo: ItemRepository,
    resolver: OwnershipResolver,
    user_id: uuid.UUID,
    role: str,
    item_id: uuid.UUID,
) -> Item:
    """Fetch an item the calling seller's shop owns, or raise."""
    if role != Role.SELLER:
        raise AuthorizationError(
            "Only seller role can manage shop/items", ErrorCode.NOT_SELLER
        )
    shop = resolver.require_shop(user_id)

    item = item_repo.get_by_id(item_id)
    if item is None:
        raise EntityNotFoundError(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)
    if item.shop_id != shop.id:
        raise AuthorizationError(
            "Unauthorized: this item does not belong to your shop",
            ErrorCode.UNAUTHORIZED,
        )
    return item


class UpdateItemHandler:

    def __init__(
        self,
        item_repo: ItemRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
    ) -> None:
        self._item_repo = item_repo
        self._resolver = resolver
        self._audit = audit

    def handle(
        self,
        user_id: uuid.UUID,
        role: str,
        item_id: uuid.UUID,
        item_input: UpdateItemInput,
    ) -> Item:
        item = load_owned_item(self._item_repo, self._resolver, user_id, role, item_id)

        try:
            price = Money.of(item_input.price)
        except ValidationError as exc:
            raise ValidationError(f"Price must be >= 0: {exc.message}") from exc
        new_status = self._parse_status(item_input.status)

        old_status = item.status
        item.edit(
            name=item_input.name,
            description=item_input.description,
            price=price,
            stock=item_input.stock,
            condition=item_input.condition,
        )
        if new_status is not None and new_status != old_status:
            item.transition_to(new_status)

        if not self._item_repo.save_listing(item, old_status):
            raise ConflictError(
                f"Item {item.id} was changed concurrently; reload and retry",
                ErrorCode.ITEM_STATUS,
            )
        logger.info("Item %s updated in shop %s", item.id, item.shop_id)

        if item.status != old_status:
            self._audit.record_history(
                item.id,
                EntityType.ITEM,
                old_status.value,
                item.status.value,
                user_id,
            )
        return item

    @staticmethod
    def _parse_status(raw: str) -> ItemStatus | None:
        value = (raw or "").strip().lower()
        if not value:
            return None
        try:
            return ItemStatus(value)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid status value: {raw!r}", ErrorCode.INVALID_STATUS
            ) from exc
