"""Abstract repository for the Item aggregate."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from homemarket.domain.model.item import Item, ItemStatus


@dataclass(frozen=True)
class ItemFilter:
    """Structured marketplace query. Every field is optional."""

    keyword: str = ""
    category_id: uuid.UUID | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    limit: int = 20
    offset: int = 0


class ItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: uuid.UUID) -> Item | None:
        """Return an item by its ID, or None if not found."""

    @abstractmethod
    def add(self, item: Item) -> None:
        """Persist a new item."""

    @abstractmethod
    def save_listing(self, item: Item, expected_status: ItemStatus) -> bool:
        """Persist every seller-editable field, stock included, if the stored
        status still equals ``expected_status``. Returns False otherwise.
        """

    @abstractmethod
    def save_transition(self, item: Item, expected_status: ItemStatus) -> bool:
        """Persist status and category only, if the stored status still
        equals ``expected_status``. Stock is left to order transactions.
        """

    @abstractmethod
    def list_market(self, item_filter: ItemFilter) -> list[Item]:
        """Return active, in-stock items matching the filter, newest first."""
