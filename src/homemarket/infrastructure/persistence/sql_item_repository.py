"""SQLAlchemy-backed implementation of ItemRepository."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import or_, select, update

from homemarket.domain.model.item import Item, ItemStatus
from homemarket.domain.model.value_objects import Money
from homemarket.domain.repository.item_repository import ItemFilter, ItemRepository
from homemarket.infrastructure.database import DatabaseSessionManager
from homemarket.infrastructure.persistence.orm import ItemRow


def _like_pattern(keyword: str) -> str:
    """Wrap a keyword for LIKE, escaping its own wildcards."""
    escaped = (
        keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


class SqlItemRepository(ItemRepository):

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db

    # --- ItemRepository interface ---------------------------------------------

    def get_by_id(self, item_id: uuid.UUID) -> Item | None:
        with self._db.transaction() as session:
            row = session.get(ItemRow, item_id)
            return self._to_domain(row) if row is not None else None

    def add(self, item: Item) -> None:
        with self._db.transaction() as session:
            session.add(self._to_row(item))

    def save_listing(self, item: Item, expected_status: ItemStatus) -> bool:
        return self._compare_and_set(
            item,
            expected_status,
            category_id=item.category_id,
            name=item.name,
            description=item.description,
            price=item.price.amount,
            stock=item.stock,
            condition=item.condition,
            status=item.status.value,
        )

    def save_transition(self, item: Item, expected_status: ItemStatus) -> bool:
        return self._compare_and_set(
            item,
            expected_status,
            category_id=item.category_id,
            status=item.status.value,
        )

    def _compare_and_set(
        self, item: Item, expected_status: ItemStatus, **values
    ) -> bool:
        with self._db.transaction() as session:
            result = session.execute(
                update(ItemRow)
                .where(
                    ItemRow.id == item.id,
                    ItemRow.status == expected_status.value,
                )
                .values(updated_at=datetime.now(timezone.utc), **values)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def list_market(self, item_filter: ItemFilter) -> list[Item]:
        stmt = select(ItemRow).where(
            ItemRow.status == ItemStatus.ACTIVE.value, ItemRow.stock > 0
        )
        keyword = item_filter.keyword.strip()
        if keyword:
            pattern = _like_pattern(keyword)
            stmt = stmt.where(
                or_(
                    ItemRow.name.ilike(pattern, escape="\\"),
                    ItemRow.description.ilike(pattern, escape="\\"),
                )
            )
        if item_filter.category_id is not None:
            stmt = stmt.where(ItemRow.category_id == item_filter.category_id)
        if item_filter.min_price is not None:
            stmt = stmt.where(ItemRow.price >= item_filter.min_price)
        if item_filter.max_price is not None:
            stmt = stmt.where(ItemRow.price <= item_filter.max_price)
        stmt = (
            stmt.order_by(ItemRow.created_at.desc(), ItemRow.id)
            .limit(item_filter.limit)
            .offset(item_filter.offset)
        )

        with self._db.transaction() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(item: Item) -> ItemRow:
        return ItemRow(
            id=item.id,
            shop_id=item.shop_id,
            category_id=item.category_id,
            name=item.name,
            description=item.description,
            price=item.price.amount,
            stock=item.stock,
            condition=item.condition,
            status=item.status.value,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @staticmethod
    def _to_domain(row: ItemRow) -> Item:
        return Item(
            id=row.id,
            shop_id=row.shop_id,
            category_id=row.category_id,
            name=row.name,
            description=row.description,
            price=Money.of(row.price),
            stock=row.stock,
            condition=row.condition,
            status=ItemStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
