"""Domain service: Ownership Resolver.

Answers "who owns what" questions for every mutating use case. It only
reads; authorization decisions are taken by the caller.
"""

from __future__ import annotations

import uuid

from homemarket.domain.exceptions import AuthorizationError, ErrorCode
from homemarket.domain.model.shop import Shop
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.repository.shop_repository import (
    CategoryRepository,
    ShopRepository,
)


class OwnershipResolver:

    def __init__(
        self,
        shop_repo: ShopRepository,
        category_repo: CategoryRepository,
        item_repo: ItemRepository | None = None,
    ) -> None:
        self._shop_repo = shop_repo
        self._category_repo = category_repo
        self._item_repo = item_repo

    def resolve_shop_for_user(self, user_id: uuid.UUID) -> Shop | None:
        """Return the user's shop. Not owning one is not an error."""
        return self._shop_repo.get_by_user_id(user_id)

    def require_shop(self, user_id: uuid.UUID) -> Shop:
        shop = self.resolve_shop_for_user(user_id)
        if shop is None:
            raise AuthorizationError(
                "Seller does not own a shop", ErrorCode.NO_SHOP_OWNED
            )
        return shop

    def resolve_shop_owner(self, shop_id: uuid.UUID) -> uuid.UUID | None:
        shop = self._shop_repo.get_by_id(shop_id)
        return shop.user_id if shop is not None else None

    def is_category_owned_by_shop(
        self, category_id: uuid.UUID, shop_id: uuid.UUID
    ) -> bool:
        return self._category_repo.is_owned_by_shop(category_id, shop_id)

    def is_item_owned_by_shop(self, item_id: uuid.UUID, shop_id: uuid.UUID) -> bool:
        if self._item_repo is None:
            raise RuntimeError("OwnershipResolver was built without an item repository")
        item = self._item_repo.get_by_id(item_id)
        return item is not None and item.shop_id == shop_id

    def owns_shop(self, user_id: uuid.UUID, shop_id: uuid.UUID) -> bool:
        shop = self.resolve_shop_for_user(user_id)
        return shop is not None and shop.id == shop_id
