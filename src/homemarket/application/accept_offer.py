"""Application service: Accept Offer use case.

Accepting is a two-entity operation: the offer transition commits first
(guarded by a compare-and-swap on its status), then a draft Item is
synthesized in the seller's shop. The draft is not rolled into the same
unit of work; if it fails the acceptance stands and the caller receives
a PartialFailureError carrying the accepted offer.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import AcceptedOffer
from homemarket.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    PartialFailureError,
)
from homemarket.domain.model.offer import Offer, OfferStatus
from homemarket.domain.model.value_objects import EntityType, Money
from homemarket.domain.repository.item_repository import ItemRepository
from homemarket.domain.repository.offer_repository import OfferRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


def load_pending_offer(
    offer_repo: OfferRepository, offer_id: uuid.UUID, seller_id: uuid.UUID
) -> Offer:
    """Shared precondition for accept/reject: exists, addressable, pending."""
    offer = offer_repo.get_by_id(offer_id)
    if offer is None:
        raise EntityNotFoundError(
            f"Offer {offer_id} not found", ErrorCode.OFFER_NOT_FOUND
        )
    if not offer.is_addressable_by(seller_id):
        raise AuthorizationError(
            "Unauthorized: you are not the seller this offer was made to",
            ErrorCode.NOT_SELLER_OR_OWNER,
        )
    if offer.status != OfferStatus.PENDING:
        raise ConflictError(
            f"Offer is not in pending status (current: {offer.status.value})",
            ErrorCode.OFFER_STATUS,
        )
    return offer


class AcceptOfferHandler:

    def __init__(
        self,
        offer_repo: OfferRepository,
        item_repo: ItemRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
    ) -> None:
        self._offer_repo = offer_repo
        self._item_repo = item_repo
        self._resolver = resolver
        self._audit = audit

    def handle(
        self,
        seller_id: uuid.UUID,
        offer_id: uuid.UUID,
        agreed_price: str | Decimal,
    ) -> AcceptedOffer:
        shop = self._resolver.require_shop(seller_id)
        price = Money.of(agreed_price)

        offer = load_pending_offer(self._offer_repo, offer_id, seller_id)
        offer.accept(seller_id, price)
        if not self._offer_repo.save_transition(offer, OfferStatus.PENDING):
            raise ConflictError(
                "Offer is not in pending status (already handled by another request)",
                ErrorCode.OFFER_STATUS,
            )
        logger.info("Offer %s accepted by seller %s at %s", offer.id, seller_id, price)

        draft_error: Exception | None = None
        draft = offer.to_draft_item(shop.id)
        try:
            self._item_repo.add(draft)
        except Exception as exc:
            draft_error = exc
            logger.error(
                "Offer %s accepted but draft item creation failed",
                offer.id,
                exc_info=True,
                extra={"related_id": str(offer.id), "error_code": ErrorCode.DRAFT_ITEM_FAILED.value},
            )

        self._audit.record_history(
            offer.id,
            EntityType.OFFER,
            OfferStatus.PENDING.value,
            OfferStatus.ACCEPTED.value,
            seller_id,
            note=f"Agreed price {price}",
        )
        self._audit.notify(
            offer.giver_id,
            "offer",
            "Offer accepted",
            f"Your offer for '{offer.item_name}' was accepted at {price}.",
            offer.id,
        )

        if draft_error is not None:
            raise PartialFailureError(
                "Offer accepted, but failed to create draft item",
                committed=offer,
            ) from draft_error
        return AcceptedOffer(offer=offer, draft_item=draft)
