"""Abstract repository for the Offer aggregate."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from homemarket.domain.model.offer import Offer, OfferStatus


class OfferRepository(ABC):

    @abstractmethod
    def get_by_id(self, offer_id: uuid.UUID) -> Offer | None:
        """Return an offer by its ID, or None if not found."""

    @abstractmethod
    def add(self, offer: Offer) -> None:
        """Persist a new offer."""

    @abstractmethod
    def list_by_giver(self, giver_id: uuid.UUID) -> list[Offer]:
        """Return every offer submitted by a giver, newest first."""

    @abstractmethod
    def list_for_seller(self, seller_id: uuid.UUID) -> list[Offer]:
        """Return offers bound to the seller plus open pending offers."""

    @abstractmethod
    def save_transition(self, offer: Offer, expected_status: OfferStatus) -> bool:
        """Persist status, seller and agreed price if the stored status
        still equals ``expected_status``.

        Returns False (and writes nothing) when another caller moved the
        offer first.
        """
