"""Offer aggregate — a giver proposing a secondhand item to sellers.

State machine::

    pending ──accept──> accepted   (terminal)
       └────reject───> rejected   (terminal)

``agreed_price`` is set if and only if the offer is accepted.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from homemarket.domain.exceptions import ConflictError, ErrorCode, ValidationError
from homemarket.domain.model.item import Item
from homemarket.domain.model.value_objects import Money, new_id


class OfferStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class Offer:
    """Aggregate root for giver offers.

    Use ``Offer.submit()`` for new offers. The ``__init__`` is kept plain
    so repositories can reconstitute persisted offers without
    re-validating.
    """

    id: uuid.UUID
    giver_id: uuid.UUID
    item_name: str
    expected_price: Money
    seller_id: uuid.UUID | None = None
    description: str = ""
    image_url: str = ""
    condition: str = ""
    location: str = ""
    agreed_price: Money | None = None
    status: OfferStatus = OfferStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW offers only) -----------------------------------

    @staticmethod
    def submit(
        giver_id: uuid.UUID,
        item_name: str,
        expected_price: Money,
        seller_id: uuid.UUID | None = None,
        description: str = "",
        image_url: str = "",
        condition: str = "",
        location: str = "",
    ) -> Offer:
        if not item_name or not item_name.strip():
            raise ValidationError("Item name is required")
        return Offer(
            id=new_id(),
            giver_id=giver_id,
            seller_id=seller_id,
            item_name=item_name.strip(),
            description=description,
            image_url=image_url,
            expected_price=expected_price,
            condition=condition,
            location=location,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        """True when no seller is bound — any seller may respond."""
        return self.seller_id is None

    def is_addressable_by(self, seller_id: uuid.UUID) -> bool:
        return self.is_open or self.seller_id == seller_id

    # --- State transitions ----------------------------------------------------

    def accept(self, seller_id: uuid.UUID, agreed_price: Money) -> None:
        """Transition PENDING -> ACCEPTED, binding an open offer to the seller."""
        self._assert_pending("accept")
        self.seller_id = seller_id
        self.agreed_price = agreed_price
        self.status = OfferStatus.ACCEPTED
        self.updated_at = datetime.now(timezone.utc)

    def reject(self, seller_id: uuid.UUID) -> None:
        """Transition PENDING -> REJECTED."""
        self._assert_pending("reject")
        self.seller_id = seller_id
        self.status = OfferStatus.REJECTED
        self.updated_at = datetime.now(timezone.utc)

    def to_draft_item(self, shop_id: uuid.UUID) -> Item:
        """Synthesize the draft listing for an accepted offer."""
        if self.status != OfferStatus.ACCEPTED or self.agreed_price is None:
            raise ConflictError(
                "Only accepted offers can produce a draft item",
                ErrorCode.INVALID_OFFER_STATE,
            )
        details = [self.description] if self.description else []
        if self.condition:
            details.append(f"Condition: {self.condition}")
        if self.location:
            details.append(f"Pickup location: {self.location}")
        return Item.draft(
            shop_id=shop_id,
            name=self.item_name,
            description=". ".join(details),
            price=self.agreed_price,
            condition=self.condition,
        )

    # --- Internal helpers -----------------------------------------------------

    def _assert_pending(self, action: str) -> None:
        if self.status != OfferStatus.PENDING:
            raise ConflictError(
                f"Cannot {action} offer — current status is {self.status.value}, "
                f"expected pending",
                ErrorCode.INVALID_OFFER_STATE,
            )
