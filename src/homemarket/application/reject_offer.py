"""Application service: Reject Offer use case."""

from __future__ import annotations

import logging
import uuid

from homemarket.application.accept_offer import load_pending_offer
from homemarket.application.audit_sink import AuditSink
from homemarket.domain.exceptions import ConflictError, ErrorCode
from homemarket.domain.model.offer import Offer, OfferStatus
from homemarket.domain.model.value_objects import EntityType
from homemarket.domain.repository.offer_repository import OfferRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver

logger = logging.getLogger(__name__)


class RejectOfferHandler:

    def __init__(
        self,
        offer_repo: OfferRepository,
        resolver: OwnershipResolver,
        audit: AuditSink,
    ) -> None:
        self._offer_repo = offer_repo
        self._resolver = resolver
        self._audit = audit

    def handle(self, seller_id: uuid.UUID, offer_id: uuid.UUID) -> Offer:
        self._resolver.require_shop(seller_id)

        offer = load_pending_offer(self._offer_repo, offer_id, seller_id)
        offer.reject(seller_id)
        if not self._offer_repo.save_transition(offer, OfferStatus.PENDING):
            raise ConflictError(
                "Offer is not in pending status (already handled by another request)",
                ErrorCode.OFFER_STATUS,
            )
        logger.info("Offer %s rejected by seller %s", offer.id, seller_id)

        self._audit.record_history(
            offer.id,
            EntityType.OFFER,
            OfferStatus.PENDING.value,
            OfferStatus.REJECTED.value,
            seller_id,
        )
        self._audit.notify(
            offer.giver_id,
            "offer",
            "Offer rejected",
            f"Your offer for '{offer.item_name}' was declined.",
            offer.id,
        )
        return offer
