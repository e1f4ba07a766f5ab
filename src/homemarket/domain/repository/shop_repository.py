"""Abstract repositories for Shop and Category.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from homemarket.domain.model.shop import Category, Shop


class ShopRepository(ABC):

    @abstractmethod
    def get_by_id(self, shop_id: uuid.UUID) -> Shop | None:
        """Return a shop by its ID, or None if not found."""

    @abstractmethod
    def get_by_user_id(self, user_id: uuid.UUID) -> Shop | None:
        """Return the shop owned by a user, or None."""

    @abstractmethod
    def add(self, shop: Shop) -> None:
        """Persist a new shop."""


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: uuid.UUID) -> Category | None:
        """Return a category by its ID, or None if not found."""

    @abstractmethod
    def exists_by_name(self, shop_id: uuid.UUID, name: str) -> bool:
        """True if the shop already has a category with this name (case-insensitive)."""

    @abstractmethod
    def is_owned_by_shop(self, category_id: uuid.UUID, shop_id: uuid.UUID) -> bool:
        """True if the category exists and belongs to the shop."""

    @abstractmethod
    def add(self, category: Category) -> None:
        """Persist a new category."""
