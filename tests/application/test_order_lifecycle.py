"""Tests for order status updates, shipping receipts and tracking."""

import uuid

import pytest

from homemarket.application.create_order import CreateOrderHandler
from homemarket.application.dto import CreateOrderInput, OrderItemSpec
from homemarket.application.get_order_tracking import GetOrderTrackingHandler
from homemarket.application.input_shipping_receipt import InputShippingReceiptHandler
from homemarket.application.update_order_status import UpdateOrderStatusHandler
from homemarket.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from homemarket.domain.model.order import OrderStatus
from tests.fakes import Marketplace


class _World:
    """A marketplace with one placed order."""

    def __init__(self, allowed_statuses=None) -> None:
        self.market = Marketplace()
        self.buyer_id = uuid.uuid4()
        lamp = self.market.add_item(stock=5)
        dto = CreateOrderHandler(
            self.market.orders, self.market.items, self.market.resolver, self.market.audit
        ).handle(
            self.buyer_id,
            CreateOrderInput(
                items=[OrderItemSpec(str(lamp.id), 1)], shipping_address="Jl. Sudirman 5"
            ),
        )
        self.order_id = uuid.UUID(dto.id)

        kwargs = {} if allowed_statuses is None else {"allowed_statuses": allowed_statuses}
        self.update = UpdateOrderStatusHandler(
            self.market.orders, self.market.resolver, self.market.audit, **kwargs
        )
        self.ship = InputShippingReceiptHandler(
            self.market.orders, self.market.resolver, self.market.audit
        )
        self.track = GetOrderTrackingHandler(self.market.orders, self.market.audit)

    @property
    def seller_id(self) -> uuid.UUID:
        return self.market.seller_id

    def stored_status(self) -> OrderStatus:
        return self.market.orders.get_by_id(self.order_id).status


@pytest.fixture
def world() -> _World:
    return _World()


class TestUpdateOrderStatus:

    def test_owner_moves_order_forward(self, world):
        dto = world.update.handle(world.seller_id, "seller", world.order_id, "paid")
        assert dto.status == "paid"
        assert world.stored_status() == OrderStatus.PAID

    def test_status_is_case_insensitive(self, world):
        world.update.handle(world.seller_id, "seller", world.order_id, " PAID ")
        assert world.stored_status() == OrderStatus.PAID

    def test_admin_may_update(self, world):
        world.update.handle(uuid.uuid4(), "admin", world.order_id, "processing")
        assert world.stored_status() == OrderStatus.PROCESSING

    def test_records_history_and_notifies_buyer(self, world):
        world.update.handle(world.seller_id, "seller", world.order_id, "paid")

        history = world.market.logs.list_history(world.order_id)
        assert [(h.old_status, h.new_status) for h in history] == [
            (None, "pending"),
            ("pending", "paid"),
        ]
        notes = world.market.logs.list_notifications(world.buyer_id)
        assert notes[0].type == "order_status"
        assert "paid" in notes[0].message

    def test_other_seller_rejected(self, world):
        intruder = uuid.uuid4()
        world.market.open_shop(intruder, "Intruder")
        with pytest.raises(AuthorizationError) as exc_info:
            world.update.handle(intruder, "seller", world.order_id, "paid")
        assert exc_info.value.code == ErrorCode.UNAUTHORIZED
        assert world.stored_status() == OrderStatus.PENDING

    def test_buyer_cannot_update(self, world):
        with pytest.raises(AuthorizationError):
            world.update.handle(world.buyer_id, "buyer", world.order_id, "completed")

    def test_unknown_status_rejected(self, world):
        with pytest.raises(ValidationError) as exc_info:
            world.update.handle(world.seller_id, "seller", world.order_id, "refunded")
        assert exc_info.value.code == ErrorCode.INVALID_STATUS

    def test_status_outside_whitelist_rejected(self):
        world = _World(allowed_statuses=["paid", "processing", "completed"])
        with pytest.raises(ValidationError) as exc_info:
            world.update.handle(world.seller_id, "seller", world.order_id, "cancelled")
        assert exc_info.value.code == ErrorCode.INVALID_STATUS

    def test_unknown_order(self, world):
        with pytest.raises(EntityNotFoundError) as exc_info:
            world.update.handle(world.seller_id, "seller", uuid.uuid4(), "paid")
        assert exc_info.value.code == ErrorCode.ORDER_NOT_FOUND

    def test_backward_transition_rejected(self, world):
        world.update.handle(world.seller_id, "seller", world.order_id, "processing")
        with pytest.raises(ConflictError) as exc_info:
            world.update.handle(world.seller_id, "seller", world.order_id, "paid")
        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION

    def test_shipped_must_go_through_receipt(self, world):
        with pytest.raises(ConflictError):
            world.update.handle(world.seller_id, "seller", world.order_id, "shipped")
        assert world.stored_status() == OrderStatus.PENDING

    def test_terminal_order_cannot_move(self, world):
        world.update.handle(world.seller_id, "seller", world.order_id, "cancelled")
        with pytest.raises(ConflictError):
            world.update.handle(world.seller_id, "seller", world.order_id, "paid")

    def test_stale_write_loses(self, world):
        original_get = world.market.orders.get_by_id

        def stale_get(order_id):
            order = original_get(order_id)
            # A concurrent update lands after our read.
            world.market.orders.force_status(order_id, OrderStatus.CANCELLED)
            return order

        world.market.orders.get_by_id = stale_get
        with pytest.raises(ConflictError):
            world.update.handle(world.seller_id, "seller", world.order_id, "paid")
        world.market.orders.get_by_id = original_get
        assert world.stored_status() == OrderStatus.CANCELLED


class TestShippingReceipt:

    def test_receipt_forces_shipped(self, world):
        dto = world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", "RESI-001")
        assert dto.status == "shipped"
        assert dto.shipping_receipt == "RESI-001"
        assert dto.shipping_courier == "JNE"
        stored = world.market.orders.get_by_id(world.order_id)
        assert stored.shipping_receipt == "RESI-001"

    def test_blank_receipt_rejected(self, world):
        with pytest.raises(ValidationError):
            world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", " ")
        assert world.stored_status() == OrderStatus.PENDING

    def test_receipt_cannot_be_overwritten(self, world):
        world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", "RESI-001")
        with pytest.raises(ConflictError) as exc_info:
            world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", "RESI-002")
        assert exc_info.value.code == ErrorCode.RECEIPT_ALREADY_SET

    def test_non_owner_rejected(self, world):
        with pytest.raises(AuthorizationError):
            world.ship.handle(uuid.uuid4(), "seller", world.order_id, "JNE", "RESI-001")

    def test_cancelled_order_cannot_be_shipped(self, world):
        world.update.handle(world.seller_id, "seller", world.order_id, "cancelled")

        with pytest.raises(ConflictError) as exc_info:
            world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", "RESI-001")

        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION
        stored = world.market.orders.get_by_id(world.order_id)
        assert stored.status == OrderStatus.CANCELLED
        assert stored.shipping_receipt is None
        history = world.market.logs.list_history(world.order_id)
        assert [h.new_status for h in history] == ["pending", "cancelled"]

    def test_completed_after_shipping(self, world):
        world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", "RESI-001")
        world.update.handle(world.seller_id, "seller", world.order_id, "completed")
        assert world.stored_status() == OrderStatus.COMPLETED


class TestOrderTracking:

    def test_buyer_sees_receipt_status_and_history(self, world):
        world.ship.handle(world.seller_id, "seller", world.order_id, "JNE", "RESI-001")

        tracking = world.track.handle(world.buyer_id, "buyer", world.order_id)

        assert tracking.order.status == "shipped"
        assert tracking.order.shipping_receipt == "RESI-001"
        assert [h.new_status for h in tracking.history] == ["pending", "shipped"]
        assert tracking.history[-1].note == "JNE RESI-001"

    def test_admin_may_track(self, world):
        tracking = world.track.handle(uuid.uuid4(), "admin", world.order_id)
        assert tracking.order.id == str(world.order_id)

    def test_unrelated_buyer_rejected(self, world):
        with pytest.raises(AuthorizationError) as exc_info:
            world.track.handle(uuid.uuid4(), "buyer", world.order_id)
        assert exc_info.value.code == ErrorCode.UNAUTHORIZED

    def test_shop_owner_cannot_track_as_buyer(self, world):
        with pytest.raises(AuthorizationError):
            world.track.handle(world.seller_id, "seller", world.order_id)
