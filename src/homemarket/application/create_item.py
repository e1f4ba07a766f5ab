"""Application service: List Item use case (seller side)."""

from __future__ import annotations

import logging
import uuid

from homemarket.application.dto import CreateItemInput
from homemarket.domain.exceptions import AuthorizationError, ErrorCode, ValidationError
from homemarket.domain.model.item import Item
from homemarket.domain.model.value_objects import Money, Role, parse_id
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class CreateItemHandler:

    def __init__(self, item_repo: ItemRepository, resolver: OwnershipResolver) -> None:
        self._item_repo = item_repo
        self._resolver = resolver

    def handle(self, user_id: uuid.UUID, role: str, item_input: CreateItemInput) -> Item:
        if role != Role.SELLER:
            raise AuthorizationError(
                "Only seller role can manage shop/items", ErrorCode.NOT_SELLER
            )
        shop = self._resolver.require_shop(user_id)

        category_id = parse_id(item_input.category_id, "category_id")
        try:
            price = Money.of(item_input.price)
        except ValidationError as exc:
            raise ValidationError(f"Price must be >= 0: {exc.message}") from exc

        if not self._resolver.is_category_owned_by_shop(category_id, shop.id):
            raise AuthorizationError(
                "Category does not belong to seller's shop",
                ErrorCode.CATEGORY_NOT_OWNED,
            )

        item = Item.list_new(
            shop_id=shop.id,
            category_id=category_id,
            name=item_input.name,
            price=price,
            stock=item_input.stock,
            description=item_input.description,
            condition=item_input.condition,
        )
        self._item_repo.add(item)
        logger.info("Item %s listed in shop %s", item.id, shop.id)
        return item
