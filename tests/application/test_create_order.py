"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories — no database.
"""

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from homemarket.application.create_order import CreateOrderHandler
from homemarket.application.dto import CreateOrderInput, OrderItemSpec, UpdateItemInput
from homemarket.application.update_item import UpdateItemHandler
from homemarket.domain.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from homemarket.domain.model.item import ItemStatus
from homemarket.domain.model.value_objects import EntityType, Money
from tests.fakes import Marketplace


def _setup() -> tuple[Marketplace, CreateOrderHandler]:
    market = Marketplace()
    handler = CreateOrderHandler(market.orders, market.items, market.resolver, market.audit)
    return market, handler


def _order(*lines: tuple, address: str = "Jl. Sudirman 5") -> CreateOrderInput:
    return CreateOrderInput(
        items=[OrderItemSpec(str(item_id), qty) for item_id, qty in lines],
        shipping_address=address,
    )


class TestCreateOrderHappyPath:

    def test_creates_order_and_decrements_stock(self):
        market, handler = _setup()
        lamp = market.add_item("Lamp", price="10", stock=5)
        buyer = uuid.uuid4()

        dto = handler.handle(buyer, _order((lamp.id, 3)))

        assert dto.total == "IDR 30.00"
        assert dto.status == "pending"
        assert dto.buyer_id == str(buyer)
        assert dto.shop_id == str(market.shop.id)
        assert dto.number.startswith("ORD-")
        assert market.items.stock_of(lamp.id) == 2

    def test_line_items_snapshot_name_and_price(self):
        market, handler = _setup()
        lamp = market.add_item("Lamp", price="10", stock=5)
        rug = market.add_item("Rug", price="25", stock=5)

        dto = handler.handle(uuid.uuid4(), _order((lamp.id, 1), (rug.id, 2)))

        assert [(i.item_name, i.quantity, i.unit_price) for i in dto.items] == [
            ("Lamp", 1, "IDR 10.00"),
            ("Rug", 2, "IDR 25.00"),
        ]
        assert dto.total == "IDR 60.00"

    def test_duplicate_lines_are_coalesced(self):
        market, handler = _setup()
        lamp = market.add_item(stock=5)

        dto = handler.handle(uuid.uuid4(), _order((lamp.id, 2), (lamp.id, 1)))

        assert len(dto.items) == 1
        assert dto.items[0].quantity == 3
        assert market.items.stock_of(lamp.id) == 2

    def test_history_and_owner_notification(self):
        market, handler = _setup()
        lamp = market.add_item(stock=5)
        buyer = uuid.uuid4()

        dto = handler.handle(buyer, _order((lamp.id, 1)))

        order_id = uuid.UUID(dto.id)
        (record,) = market.logs.list_history(order_id)
        assert record.related_type == EntityType.ORDER
        assert record.old_status is None
        assert record.new_status == "pending"
        assert record.actor_id == buyer
        (note,) = market.logs.list_notifications(market.seller_id)
        assert note.type == "new_order"
        assert dto.number in note.message


class TestCreateOrderPriceLock:

    def test_price_snapshot_at_creation(self):
        market, handler = _setup()
        lamp = market.add_item(price="10", stock=5)

        dto = handler.handle(uuid.uuid4(), _order((lamp.id, 1)))
        UpdateItemHandler(market.items, market.resolver, market.audit).handle(
            market.seller_id,
            "seller",
            lamp.id,
            UpdateItemInput(name="Lamp", price="99.99", stock=4),
        )

        saved = market.orders.get_by_id(uuid.UUID(dto.id))
        assert str(saved.total_price) == "IDR 10.00"
        assert saved.items[0].unit_price == Money.of("10")
        later = handler.handle(uuid.uuid4(), _order((lamp.id, 1)))
        assert later.total == "IDR 99.99"


class TestCreateOrderStock:

    def test_second_order_exceeding_remaining_stock_fails(self):
        market, handler = _setup()
        lamp = market.add_item(stock=5)
        handler.handle(uuid.uuid4(), _order((lamp.id, 3)))

        with pytest.raises(ConflictError) as exc_info:
            handler.handle(uuid.uuid4(), _order((lamp.id, 3)))

        assert exc_info.value.code == ErrorCode.INVALID_ORDER_ITEM
        assert market.items.stock_of(lamp.id) == 2
        assert len(market.orders.all()) == 1

    def test_one_bad_line_fails_whole_order(self):
        market, handler = _setup()
        lamp = market.add_item("Lamp", stock=5)
        rug = market.add_item("Rug", stock=1)

        with pytest.raises(ConflictError):
            handler.handle(uuid.uuid4(), _order((lamp.id, 2), (rug.id, 2)))

        assert market.items.stock_of(lamp.id) == 5
        assert market.items.stock_of(rug.id) == 1
        assert market.orders.all() == []

    def test_stock_drop_between_check_and_commit_rolls_back(self):
        market, handler = _setup()
        lamp = market.add_item(stock=5)
        rug = market.add_item("Rug", stock=5)
        original = market.orders.run_order_transaction

        def sneaky(order):
            # Another buyer takes the rugs after validation.
            market.items.set_stock(rug.id, 0)
            original(order)

        market.orders.run_order_transaction = sneaky

        with pytest.raises(ConflictError) as exc_info:
            handler.handle(uuid.uuid4(), _order((lamp.id, 1), (rug.id, 1)))

        assert exc_info.value.code == ErrorCode.INVALID_ORDER_ITEM
        assert market.items.stock_of(lamp.id) == 5
        assert market.orders.all() == []
        assert market.logs.history == []

    @pytest.mark.parametrize("status", [ItemStatus.INACTIVE, ItemStatus.DRAFT])
    def test_non_active_item_rejected(self, status):
        market, handler = _setup()
        lamp = market.add_item(stock=5, status=status)
        with pytest.raises(ConflictError) as exc_info:
            handler.handle(uuid.uuid4(), _order((lamp.id, 1)))
        assert exc_info.value.code == ErrorCode.INVALID_ORDER_ITEM

    def test_unknown_item_rejected(self):
        _, handler = _setup()
        with pytest.raises(EntityNotFoundError) as exc_info:
            handler.handle(uuid.uuid4(), _order((uuid.uuid4(), 1)))
        assert exc_info.value.code == ErrorCode.INVALID_ORDER_ITEM

    def test_concurrent_orders_never_oversell(self):
        market, handler = _setup()
        lamp = market.add_item(stock=5)
        barrier = threading.Barrier(4)

        def buy(_):
            barrier.wait()
            try:
                return handler.handle(uuid.uuid4(), _order((lamp.id, 2)))
            except DomainException as exc:
                return exc

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(buy, range(4)))

        succeeded = [r for r in results if not isinstance(r, DomainException)]
        assert len(succeeded) == 2
        assert all(
            isinstance(r, ConflictError) for r in results if isinstance(r, DomainException)
        )
        assert market.items.stock_of(lamp.id) == 1


class TestCreateOrderValidation:

    def test_empty_items_rejected(self):
        _, handler = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            handler.handle(uuid.uuid4(), CreateOrderInput(items=[], shipping_address="x"))

    def test_blank_address_rejected(self):
        market, handler = _setup()
        lamp = market.add_item()
        with pytest.raises(ValidationError, match="Shipping address"):
            handler.handle(uuid.uuid4(), _order((lamp.id, 1), address="  "))

    @pytest.mark.parametrize("qty", [0, -2])
    def test_non_positive_quantity_rejected(self, qty):
        market, handler = _setup()
        lamp = market.add_item()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(uuid.uuid4(), _order((lamp.id, qty)))

    def test_malformed_item_id_rejected(self):
        _, handler = _setup()
        with pytest.raises(ValidationError, match="item_id"):
            handler.handle(uuid.uuid4(), _order(("nope", 1)))

    def test_multi_shop_order_rejected_without_mutation(self):
        market, handler = _setup()
        other_shop = market.open_shop(uuid.uuid4(), "Other")
        lamp = market.add_item(stock=5)
        vase = market.add_item("Vase", stock=5, shop=other_shop)

        with pytest.raises(ConflictError) as exc_info:
            handler.handle(uuid.uuid4(), _order((lamp.id, 1), (vase.id, 1)))

        assert exc_info.value.code == ErrorCode.MULTI_SHOP_UNSUPPORTED
        assert market.items.stock_of(lamp.id) == 5
        assert market.items.stock_of(vase.id) == 5
        assert market.orders.all() == []
