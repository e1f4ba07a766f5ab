"""Unit tests for the Order aggregate and its business rules."""

import uuid
from datetime import datetime, timezone

import pytest

from homemarket.domain.exceptions import ConflictError, ErrorCode, ValidationError
from homemarket.domain.model.order import (
    MAX_LINE_ITEMS,
    Order,
    OrderLineItem,
    OrderStatus,
    can_transition,
    generate_order_number,
)
from homemarket.domain.model.value_objects import Money, Quantity


def _make_line(name: str = "Lamp", qty: int = 1, price: str = "10.00") -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        item_id=uuid.uuid4(),
        item_name=name,
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _place(*lines: OrderLineItem) -> Order:
    return Order.place(
        buyer_id=uuid.uuid4(),
        shop_id=uuid.uuid4(),
        items=list(lines) or [_make_line()],
        shipping_address="Jl. Merdeka 1",
    )


class TestOrderPlacement:

    def test_happy_path(self):
        order = _place(_make_line(qty=3, price="10.00"))
        assert order.status == OrderStatus.PENDING
        assert order.total_price == Money.of("30.00")
        assert str(order.total_price) == "IDR 30.00"
        assert order.shipping_receipt is None

    def test_total_is_sum_of_line_items(self):
        order = _place(_make_line("Lamp", 3, "15.00"), _make_line("Rug", 5, "25.00"))
        assert order.total_price == Money.of("170.00")
        assert order.total_quantity == 8

    def test_number_format(self):
        order = _place()
        assert order.number.startswith(f"ORD-{order.created_at:%Y%m%d}-")
        assert len(order.number.split("-")[2]) == 8

    def test_blank_address_rejected(self):
        with pytest.raises(ValidationError, match="Shipping address is required"):
            Order.place(uuid.uuid4(), uuid.uuid4(), [_make_line()], "  ")

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.place(uuid.uuid4(), uuid.uuid4(), [], "Jl. Merdeka 1")

    def test_too_many_lines_rejected(self):
        lines = [_make_line() for _ in range(MAX_LINE_ITEMS + 1)]
        with pytest.raises(ValidationError, match="Maximum"):
            Order.place(uuid.uuid4(), uuid.uuid4(), lines, "Jl. Merdeka 1")


class TestOrderTransitions:

    def test_forward_moves(self):
        order = _place()
        assert order.transition_to(OrderStatus.PAID) == OrderStatus.PENDING
        assert order.transition_to(OrderStatus.PROCESSING) == OrderStatus.PAID
        assert order.status == OrderStatus.PROCESSING

    def test_skipping_forward_allowed(self):
        order = _place()
        order.transition_to(OrderStatus.PROCESSING)
        assert order.status == OrderStatus.PROCESSING

    def test_backward_move_rejected(self):
        order = _place()
        order.transition_to(OrderStatus.PROCESSING)
        with pytest.raises(ConflictError) as exc_info:
            order.transition_to(OrderStatus.PAID)
        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION

    def test_shipped_requires_receipt_path(self):
        order = _place()
        with pytest.raises(ConflictError, match="shipping receipt"):
            order.transition_to(OrderStatus.SHIPPED)

    def test_cancel_from_non_terminal(self):
        order = _place()
        order.transition_to(OrderStatus.PAID)
        order.transition_to(OrderStatus.CANCELLED)
        assert order.is_terminal

    @pytest.mark.parametrize("terminal", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_terminal_states_are_final(self, terminal):
        order = _place()
        order.transition_to(terminal)
        with pytest.raises(ConflictError):
            order.transition_to(OrderStatus.CANCELLED)

    def test_same_status_rejected(self):
        assert not can_transition(OrderStatus.PAID, OrderStatus.PAID)


class TestShip:

    def test_ship_records_receipt_and_forces_status(self):
        order = _place()
        old = order.ship(" JNE ", " RESI-001 ")
        assert old == OrderStatus.PENDING
        assert order.status == OrderStatus.SHIPPED
        assert order.shipping_courier == "JNE"
        assert order.shipping_receipt == "RESI-001"

    def test_blank_receipt_rejected(self):
        with pytest.raises(ValidationError, match="receipt is required"):
            _place().ship("JNE", "   ")

    def test_receipt_can_only_be_set_once(self):
        order = _place()
        order.ship("JNE", "RESI-001")
        with pytest.raises(ConflictError) as exc_info:
            order.ship("JNE", "RESI-002")
        assert exc_info.value.code == ErrorCode.RECEIPT_ALREADY_SET

    @pytest.mark.parametrize("final", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_terminal_order_cannot_be_shipped(self, final):
        order = _place()
        order.transition_to(final)
        with pytest.raises(ConflictError) as exc_info:
            order.ship("JNE", "RESI-001")
        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION
        assert order.status == final
        assert order.shipping_receipt is None

    def test_completed_after_shipped(self):
        order = _place()
        order.ship("JNE", "RESI-001")
        order.transition_to(OrderStatus.COMPLETED)
        assert order.status == OrderStatus.COMPLETED


def test_generate_order_number():
    order_id = uuid.UUID("12345678-9abc-def0-1234-56789abcdef0")
    when = datetime(2024, 3, 5, tzinfo=timezone.utc)
    assert generate_order_number(order_id, when) == "ORD-20240305-12345678"
