"""SQLAlchemy-backed implementations of ShopRepository and CategoryRepository."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from homemarket.domain.exceptions import ConflictError, ErrorCode
from homemarket.domain.model.shop import Category, Shop
from homemarket.domain.repository.shop_repository import (
    CategoryRepository,
    ShopRepository,
)
from homemarket.infrastructure.database import DatabaseSessionManager
from homemarket.infrastructure.persistence.orm import CategoryRow, ShopRow


class SqlShopRepository(ShopRepository):

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db

    # --- ShopRepository interface ---------------------------------------------

    def get_by_id(self, shop_id: uuid.UUID) -> Shop | None:
        with self._db.transaction() as session:
            row = session.get(ShopRow, shop_id)
            return self._to_domain(row) if row is not None else None

    def get_by_user_id(self, user_id: uuid.UUID) -> Shop | None:
        with self._db.transaction() as session:
            row = session.scalars(
                select(ShopRow).where(ShopRow.user_id == user_id)
            ).first()
            return self._to_domain(row) if row is not None else None

    def add(self, shop: Shop) -> None:
        with self._db.transaction() as session:
            session.add(
                ShopRow(
                    id=shop.id,
                    user_id=shop.user_id,
                    name=shop.name,
                    description=shop.description,
                    address=shop.address,
                    created_at=shop.created_at,
                    updated_at=shop.updated_at,
                )
            )
            try:
                session.flush()
            except IntegrityError as exc:
                # Lost the race against a concurrent create for the same user.
                raise ConflictError(
                    "User already has a shop", ErrorCode.SHOP_EXISTS
                ) from exc

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: ShopRow) -> Shop:
        return Shop(
            id=row.id,
            user_id=row.user_id,
            name=row.name,
            description=row.description,
            address=row.address,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class SqlCategoryRepository(CategoryRepository):

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db

    # --- CategoryRepository interface -----------------------------------------

    def get_by_id(self, category_id: uuid.UUID) -> Category | None:
        with self._db.transaction() as session:
            row = session.get(CategoryRow, category_id)
            return self._to_domain(row) if row is not None else None

    def exists_by_name(self, shop_id: uuid.UUID, name: str) -> bool:
        with self._db.transaction() as session:
            found = session.scalar(
                select(CategoryRow.id).where(
                    CategoryRow.shop_id == shop_id,
                    func.lower(CategoryRow.name) == name.strip().lower(),
                )
            )
            return found is not None

    def is_owned_by_shop(self, category_id: uuid.UUID, shop_id: uuid.UUID) -> bool:
        with self._db.transaction() as session:
            found = session.scalar(
                select(CategoryRow.id).where(
                    CategoryRow.id == category_id, CategoryRow.shop_id == shop_id
                )
            )
            return found is not None

    def add(self, category: Category) -> None:
        with self._db.transaction() as session:
            session.add(
                CategoryRow(
                    id=category.id,
                    shop_id=category.shop_id,
                    name=category.name,
                    created_at=category.created_at,
                    updated_at=category.updated_at,
                )
            )
            try:
                session.flush()
            except IntegrityError as exc:
                raise ConflictError(
                    f"Category '{category.name}' already exists in this shop",
                    ErrorCode.CATEGORY_EXISTS,
                ) from exc

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: CategoryRow) -> Category:
        return Category(
            id=row.id,
            shop_id=row.shop_id,
            name=row.name,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
