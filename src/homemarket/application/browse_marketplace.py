"""Application service: marketplace browsing (queries, buyer side)."""

from __future__ import annotations

import uuid

from homemarket.domain.exceptions import EntityNotFoundError, ErrorCode, ValidationError
from homemarket.domain.model.item import Item
from homemarket.domain.repository.item_repository import ItemFilter, ItemRepository

MAX_PAGE_SIZE = 100


class BrowseMarketplaceHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, item_filter: ItemFilter) -> list[Item]:
        if item_filter.limit <= 0 or item_filter.limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if item_filter.offset < 0:
            raise ValidationError("Offset cannot be negative")
        if (
            item_filter.min_price is not None
            and item_filter.max_price is not None
            and item_filter.min_price > item_filter.max_price
        ):
            raise ValidationError("Minimum price cannot exceed maximum price")
        return self._item_repo.list_market(item_filter)


class ShowItemHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, item_id: uuid.UUID) -> Item:
        item = self._item_repo.get_by_id(item_id)
        if item is None or not item.is_orderable:
            raise EntityNotFoundError(
                "Item not found or inactive", ErrorCode.ITEM_NOT_FOUND
            )
        return item
