"""Application service: Publish Draft Item use case.

Completes a draft synthesized from an accepted offer by assigning one of
the shop's categories and making it orderable.
"""

from __future__ import annotations

import logging
import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
)
from homemarket.domain.model.item import Item, ItemStatus
from homemarket.domain.model.value_objects import EntityType, Role
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class PublishDraftItemHandler:

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
        category_id: uuid.UUID,
    ) -> Item:
        if role != Role.SELLER:
            raise AuthorizationError(
                "Only seller role can manage shop/items", ErrorCode.NOT_SELLER
            )
        shop = self._resolver.require_shop(user_id)

        if not self._resolver.is_item_owned_by_shop(item_id, shop.id):
            raise EntityNotFoundError(
                f"Item {item_id} not found in your shop", ErrorCode.ITEM_NOT_FOUND
            )
        if not self._resolver.is_category_owned_by_shop(category_id, shop.id):
            raise AuthorizationError(
                "Category does not belong to seller's shop",
                ErrorCode.CATEGORY_NOT_OWNED,
            )

        item = self._item_repo.get_by_id(item_id)
        if item is None:
            raise EntityNotFoundError(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)
        item.publish(category_id)
        if not self._item_repo.save_transition(item, ItemStatus.DRAFT):
            raise ConflictError(
                f"Item {item.id} was changed concurrently; it is no longer a draft",
                ErrorCode.ITEM_STATUS,
            )
        logger.info("Draft item %s published in shop %s", item.id, shop.id)

        self._audit.record_history(
            item.id,
            EntityType.ITEM,
            ItemStatus.DRAFT.value,
            ItemStatus.ACTIVE.value,
            user_id,
        )
        return item
