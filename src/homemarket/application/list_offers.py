"""Application service: offer listings for givers and sellers (queries)."""

from __future__ import annotations

import uuid

from homemarket.domain.exceptions import AuthorizationError, ErrorCode
from homemarket.domain.model.offer import Offer
from homemarket.domain.model.value_objects import Role
from homemarket.domain.repository.offer_repository import OfferRepository
from homemarket.domain.service.ownership_resolver import OwnershipResolver


class ListGiverOffersHandler:

    def __init__(self, offer_repo: OfferRepository) -> None:
        self._offer_repo = offer_repo

    def handle(self, giver_id: uuid.UUID, role: str) -> list[Offer]:
        if role != Role.GIVER:
            raise AuthorizationError(
                "Access denied: only giver role is allowed", ErrorCode.NOT_GIVER
            )
        return self._offer_repo.list_by_giver(giver_id)


class ListSellerOffersHandler:

    def __init__(self, offer_repo: OfferRepository, resolver: OwnershipResolver) -> None:
        self._offer_repo = offer_repo
        self._resolver = resolver

    def handle(self, seller_id: uuid.UUID, role: str) -> list[Offer]:
        """Offers addressed to this seller plus every open pending offer."""
        if role != Role.SELLER:
            raise AuthorizationError(
                "Access denied: only seller can view offers", ErrorCode.NOT_SELLER
            )
        self._resolver.require_shop(seller_id)
        return self._offer_repo.list_for_seller(seller_id)
