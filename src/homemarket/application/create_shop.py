"""Application service: Open Shop use case."""

from __future__ import annotations

import uuid

from homemarket.application.dto import CreateShopInput
from homemarket.domain.exceptions import AuthorizationError, ConflictError, ErrorCode
from homemarket.domain.model.shop import Shop
from homemarket.domain.model.value_objects import Role
from homemarket.domain.repository.shop_repository import ShopRepository


class CreateShopHandler:

    def __init__(self, shop_repo: ShopRepository) -> None:
        self._shop_repo = shop_repo

    def handle(self, user_id: uuid.UUID, role: str, shop_input: CreateShopInput) -> Shop:
        """A seller may own exactly one shop."""
        if role != Role.SELLER:
            raise AuthorizationError(
                "Only seller role can manage shop/items", ErrorCode.NOT_SELLER
            )
        if self._shop_repo.get_by_user_id(user_id) is not None:
            raise ConflictError("User already has a shop", ErrorCode.SHOP_EXISTS)

        shop = Shop.open(
            user_id=user_id,
            name=shop_input.name,
            address=shop_input.address,
            description=shop_input.description,
        )
        self._shop_repo.add(shop)
        return shop
