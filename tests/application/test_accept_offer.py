"""Tests for the AcceptOffer and RejectOffer use cases."""

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from homemarket.application.accept_offer import AcceptOfferHandler
from homemarket.application.audit_sink import AuditSink
from homemarket.application.reject_offer import RejectOfferHandler
from homemarket.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    PartialFailureError,
    ValidationError,
)
from homemarket.domain.model.item import ItemStatus
from homemarket.domain.model.offer import Offer, OfferStatus
from homemarket.domain.model.value_objects import EntityType, Money
from tests.fakes import FailingAuditLogRepository, Marketplace


def _setup(seller_id: uuid.UUID | None = None) -> tuple[Marketplace, Offer, AcceptOfferHandler]:
    market = Marketplace()
    offer = Offer.submit(
        giver_id=uuid.uuid4(),
        item_name="Oak chair",
        expected_price=Money.of("50"),
        seller_id=seller_id,
        description="Sturdy",
        condition="used",
        location="Jakarta",
    )
    market.offers.add(offer)
    handler = AcceptOfferHandler(market.offers, market.items, market.resolver, market.audit)
    return market, offer, handler


class TestAcceptOfferHappyPath:

    def test_accept_creates_draft_at_agreed_price(self):
        market, offer, handler = _setup()

        result = handler.handle(market.seller_id, offer.id, "45")

        assert result.offer.status == OfferStatus.ACCEPTED
        assert result.offer.agreed_price == Money.of("45")
        draft = market.items.get_by_id(result.draft_item.id)
        assert draft.price == Money.of("45")
        assert draft.stock == 1
        assert draft.status == ItemStatus.DRAFT
        assert draft.shop_id == market.shop.id
        assert draft.description == "Sturdy. Condition: used. Pickup location: Jakarta"

    def test_open_offer_is_bound_to_accepting_seller(self):
        market, offer, handler = _setup()
        handler.handle(market.seller_id, offer.id, "45")
        stored = market.offers.get_by_id(offer.id)
        assert stored.seller_id == market.seller_id
        assert stored.status == OfferStatus.ACCEPTED

    def test_history_and_giver_notification_recorded(self):
        market, offer, handler = _setup()
        handler.handle(market.seller_id, offer.id, "45")

        (record,) = market.logs.list_history(offer.id)
        assert record.related_type == EntityType.OFFER
        assert record.old_status == "pending"
        assert record.new_status == "accepted"
        assert record.actor_id == market.seller_id

        (note,) = market.logs.list_notifications(offer.giver_id)
        assert note.title == "Offer accepted"
        assert note.related_id == offer.id

    def test_log_store_outage_does_not_undo_acceptance(self):
        market, offer, _ = _setup()
        handler = AcceptOfferHandler(
            market.offers, market.items, market.resolver,
            AuditSink(FailingAuditLogRepository()),
        )
        result = handler.handle(market.seller_id, offer.id, "45")
        assert market.offers.get_by_id(offer.id).status == OfferStatus.ACCEPTED
        assert market.items.get_by_id(result.draft_item.id) is not None


class TestAcceptOfferRejections:

    def test_seller_without_shop_rejected(self):
        market, offer, handler = _setup()
        with pytest.raises(AuthorizationError) as exc_info:
            handler.handle(uuid.uuid4(), offer.id, "45")
        assert exc_info.value.code == ErrorCode.NO_SHOP_OWNED

    def test_unknown_offer(self):
        market, _, handler = _setup()
        with pytest.raises(EntityNotFoundError) as exc_info:
            handler.handle(market.seller_id, uuid.uuid4(), "45")
        assert exc_info.value.code == ErrorCode.OFFER_NOT_FOUND

    def test_offer_targeted_at_other_seller(self):
        market, offer, handler = _setup(seller_id=uuid.uuid4())
        with pytest.raises(AuthorizationError) as exc_info:
            handler.handle(market.seller_id, offer.id, "45")
        assert exc_info.value.code == ErrorCode.NOT_SELLER_OR_OWNER

    def test_invalid_agreed_price(self):
        market, offer, handler = _setup()
        with pytest.raises(ValidationError):
            handler.handle(market.seller_id, offer.id, "-5")
        assert market.offers.get_by_id(offer.id).status == OfferStatus.PENDING

    def test_second_accept_conflicts(self):
        market, offer, handler = _setup()
        handler.handle(market.seller_id, offer.id, "45")
        with pytest.raises(ConflictError) as exc_info:
            handler.handle(market.seller_id, offer.id, "40")
        assert exc_info.value.code == ErrorCode.OFFER_STATUS
        assert market.offers.get_by_id(offer.id).agreed_price == Money.of("45")
        assert len(market.items.all()) == 1


class TestAcceptOfferPartialFailure:

    def test_draft_failure_keeps_offer_accepted(self):
        market, offer, handler = _setup()
        market.items.fail_on_add = True

        with pytest.raises(PartialFailureError) as exc_info:
            handler.handle(market.seller_id, offer.id, "45")

        assert exc_info.value.code == ErrorCode.DRAFT_ITEM_FAILED
        assert exc_info.value.committed.id == offer.id
        assert exc_info.value.committed.status == OfferStatus.ACCEPTED
        assert market.offers.get_by_id(offer.id).status == OfferStatus.ACCEPTED
        assert market.items.all() == []
        # The transition still leaves a trail.
        assert len(market.logs.list_history(offer.id)) == 1


class TestAcceptOfferConcurrency:

    def test_concurrent_accepts_have_exactly_one_winner(self):
        market, offer, _ = _setup()
        rival_id = uuid.uuid4()
        market.open_shop(rival_id, "Rival")
        barrier = threading.Barrier(2)

        def accept(seller_id, price):
            handler = AcceptOfferHandler(
                market.offers, market.items, market.resolver, market.audit
            )
            barrier.wait()
            try:
                return handler.handle(seller_id, offer.id, price)
            except DomainException as exc:
                return exc

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(accept, [market.seller_id, rival_id], ["45", "40"]))

        winners = [r for r in results if not isinstance(r, DomainException)]
        losers = [r for r in results if isinstance(r, DomainException)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], ConflictError)
        assert len(market.items.all()) == 1
        stored = market.offers.get_by_id(offer.id)
        assert stored.agreed_price == winners[0].offer.agreed_price


class TestRejectOffer:

    def test_reject_pending_offer(self):
        market, offer, _ = _setup(seller_id=None)
        handler = RejectOfferHandler(market.offers, market.resolver, market.audit)

        rejected = handler.handle(market.seller_id, offer.id)

        assert rejected.status == OfferStatus.REJECTED
        stored = market.offers.get_by_id(offer.id)
        assert stored.status == OfferStatus.REJECTED
        assert stored.agreed_price is None
        (record,) = market.logs.list_history(offer.id)
        assert (record.old_status, record.new_status) == ("pending", "rejected")
        (note,) = market.logs.list_notifications(offer.giver_id)
        assert note.title == "Offer rejected"

    def test_rejected_offer_cannot_be_accepted(self):
        market, offer, accept = _setup()
        RejectOfferHandler(market.offers, market.resolver, market.audit).handle(
            market.seller_id, offer.id
        )
        with pytest.raises(ConflictError):
            accept.handle(market.seller_id, offer.id, "45")
        assert market.items.all() == []

    def test_rejected_offer_disappears_from_open_listing(self):
        market, offer, _ = _setup()
        rival_id = uuid.uuid4()
        RejectOfferHandler(market.offers, market.resolver, market.audit).handle(
            market.seller_id, offer.id
        )
        assert market.offers.list_for_seller(rival_id) == []
