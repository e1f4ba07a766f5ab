"""Application service: Create Offer use case (giver side)."""

from __future__ import annotations

import logging
import uuid

from homemarket.application.audit_sink import AuditSink
from homemarket.application.dto import CreateOfferInput
from homemarket.domain.exceptions import AuthorizationError, ErrorCode, ValidationError
from homemarket.domain.model.offer import Offer
from homemarket.domain.model.value_objects import Money, Role, parse_id
from homemarket.domain.repository.offer_repository import OfferRepository

logger = logging.getLogger(__name__)


class CreateOfferHandler:

    def __init__(self, offer_repo: OfferRepository, audit: AuditSink) -> None:
        self._offer_repo = offer_repo
        self._audit = audit

    def handle(
        self,
        giver_id: uuid.UUID,
        role: str,
        offer_input: CreateOfferInput,
        image_url: str = "",
    ) -> Offer:
        """Submit a pending offer, optionally addressed to one seller."""
        if role != Role.GIVER:
            raise AuthorizationError(
                "Access denied: only giver role is allowed", ErrorCode.NOT_GIVER
            )

        seller_id = None
        if offer_input.seller_id and offer_input.seller_id.strip():
            seller_id = parse_id(offer_input.seller_id, "seller_id")

        try:
            expected_price = Money.of(offer_input.expected_price)
        except ValidationError as exc:
            raise ValidationError(
                f"Invalid expected price: {exc.message}", ErrorCode.INVALID_INPUT
            ) from exc

        offer = Offer.submit(
            giver_id=giver_id,
            seller_id=seller_id,
            item_name=offer_input.item_name,
            description=offer_input.description,
            image_url=image_url,
            expected_price=expected_price,
            condition=offer_input.condition,
            location=offer_input.location,
        )
        self._offer_repo.add(offer)
        logger.info("Offer %s submitted by giver %s", offer.id, giver_id)

        if offer.seller_id is not None:
            self._audit.notify(
                offer.seller_id,
                "offer",
                "New offer received",
                f"You received an offer from a giver for '{offer.item_name}'.",
                offer.id,
            )

        return offer
