"""Application service: Archive Item use case.

Soft delete. The row stays so existing orders can still point at it, but
the item leaves the marketplace.
"""

from __future__ import annotations

import logging
import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.application.update_item import load_owned_item
from homemarket.domain.exceptions import ConflictError, ErrorCode
from homemarket.domain.model.item import Item, ItemStatus
from homemarket.domain.model.value_objects import EntityType
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class ArchiveItemHandler:

    def __init__(
        self,
        item_repo: ItemRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
    ) -> None:
        self._item_repo = item_repo
        self._resolver = resolver
        self._audit = audit

    def handle(self, user_id: uuid.UUID, role: str, item_id: uuid.UUID) -> Item:
        item = load_owned_item(self._item_repo, self._resolver, user_id, role, item_id)

        old_status = item.transition_to(ItemStatus.INACTIVE)
        if not self._item_repo.save_transition(item, old_status):
            raise ConflictError(
                f"Item {item.id} was changed concurrently; reload and retry",
                ErrorCode.ITEM_STATUS,
            )
        logger.info("Item %s archived (was %s)", item.id, old_status.value)

        self._audit.record_history(
            item.id,
            EntityType.ITEM,
            old_status.value,
            ItemStatus.INACTIVE.value,
            user_id,
        )
        return item
