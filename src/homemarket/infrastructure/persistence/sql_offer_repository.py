"""SQLAlchemy-backed implementation of OfferRepository."""

from __future__ import annotations

import uuid

from sqlalchemy import and_, or_, select, update

from homemarket.domain.model.offer import Offer, OfferStatus
from homemarket.domain.model.value_objects import Money
from homemarket.domain.repository.offer_repository import OfferRepository
from homemarket.infrastructure.database import DatabaseSessionManager
from homemarket.infrastructure.persistence.orm import OfferRow


class SqlOfferRepository(OfferRepository):

    def __init__(self, db: DatabaseSessionManager) -> None:
        self._db = db

    # --- OfferRepository interface --------------------------------------------

    def get_by_id(self, offer_id: uuid.UUID) -> Offer | None:
        with self._db.transaction() as session:
            row = session.get(OfferRow, offer_id)
            return self._to_domain(row) if row is not None else None

    def add(self, offer: Offer) -> None:
        with self._db.transaction() as session:
            session.add(self._to_row(offer))

    def list_by_giver(self, giver_id: uuid.UUID) -> list[Offer]:
        stmt = (
            select(OfferRow)
            .where(OfferRow.giver_id == giver_id)
            .order_by(OfferRow.created_at.desc())
        )
        with self._db.transaction() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def list_for_seller(self, seller_id: uuid.UUID) -> list[Offer]:
        stmt = (
            select(OfferRow)
            .where(
                or_(
                    OfferRow.seller_id == seller_id,
                    and_(
                        OfferRow.seller_id.is_(None),
                        OfferRow.status == OfferStatus.PENDING.value,
                    ),
                )
            )
            .order_by(OfferRow.created_at.desc())
        )
        with self._db.transaction() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def save_transition(self, offer: Offer, expected_status: OfferStatus) -> bool:
        with self._db.transaction() as session:
            result = session.execute(
                update(OfferRow)
                .where(
                    OfferRow.id == offer.id,
                    OfferRow.status == expected_status.value,
                )
                .values(
                    status=offer.status.value,
                    seller_id=offer.seller_id,
                    agreed_price=(
                        offer.agreed_price.amount if offer.agreed_price is not None else None
                    ),
                    updated_at=offer.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(offer: Offer) -> OfferRow:
        return OfferRow(
            id=offer.id,
            giver_id=offer.giver_id,
            seller_id=offer.seller_id,
            item_name=offer.item_name,
            description=offer.description,
            image_url=offer.image_url,
            expected_price=offer.expected_price.amount,
            agreed_price=(
                offer.agreed_price.amount if offer.agreed_price is not None else None
            ),
            condition=offer.condition,
            location=offer.location,
            status=offer.status.value,
            created_at=offer.created_at,
            updated_at=offer.updated_at,
        )

    @staticmethod
    def _to_domain(row: OfferRow) -> Offer:
        return Offer(
            id=row.id,
            giver_id=row.giver_id,
            seller_id=row.seller_id,
            item_name=row.item_name,
            description=row.description,
            image_url=row.image_url,
            expected_price=Money.of(row.expected_price),
            agreed_price=Money.of(row.agreed_price) if row.agreed_price is not None else None,
            condition=row.condition,
            location=row.location,
            status=OfferStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
