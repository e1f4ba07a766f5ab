"""Application service: Create Category use case."""

from __future__ import annotations

import uuid

from homemarket.domain.exceptions import AuthorizationError, ConflictError, ErrorCode
from homemarket.domain.model.shop import Category
from homemarket.domain.model.value_objects import Role
from homemarket.domain.repository.shop_repository import CategoryRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver


class CreateCategoryHandler:

    def __init__(self, category_repo: CategoryRepository, resolver: OwnershipResolver) -> None:
        self._category_repo = category_repo
        self._resolver = resolver

    def handle(self, user_id: uuid.UUID, role: str, name: str) -> Category:
        if role != Role.SELLER:
            raise AuthorizationError(
                "Only seller role can manage shop/items", ErrorCode.NOT_SELLER
            )
        shop = self._resolver.require_shop(user_id)

        category = Category.create(shop.id, name)
        if self._category_repo.exists_by_name(shop.id, category.name):
            raise ConflictError(
                f"Category '{category.name}' already exists in this shop",
                ErrorCode.CATEGORY_EXISTS,
            )
        self._category_repo.add(category)
        return category
