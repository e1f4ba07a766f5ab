"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from homemarket.application.create_order import CreateOrderHandler
from homemarket.application.dto import CreateOrderInput, OrderItemSpec
from homemarket.application.get_order_tracking import GetOrderTrackingHandler
from homemarket.application.input_shipping_receipt import InputShippingReceiptHandler
from homemarket.application.update_order_status import UpdateOrderStatusHandler
from homemarket.domain.exceptions import DomainException
from homemarket.domain.model.value_objects import parse_id
from homemarket.infrastructure.bootstrap import (
    audit_sink,
    item_repository,
    order_repository,
    order_status_whitelist,
    ownership_resolver,
)
from homemarket.infrastructure.cli.options import (
    display_order,
    domain_error,
    role_option,
    user_option,
)


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '<item-id>:3,<item-id>:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemID:Quantity'."
            )
        item_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{item_id}'."
            )
        specs.append(OrderItemSpec(item_id=item_id.strip(), quantity=qty))
    return specs


@click.command("create")
@user_option
@click.option("--items", required=True, help="Items as 'ItemID:Qty,ItemID:Qty'.")
@click.option("--address", required=True, help="Shipping address.")
@click.option("--courier", default="", help="Preferred courier.")
def order_create(user_raw: str, items: str, address: str, courier: str) -> None:
    """Place an order (all items must come from one shop)."""
    specs = _parse_items(items)
    handler = CreateOrderHandler(
        order_repository(), item_repository(), ownership_resolver(), audit_sink()
    )
    try:
        dto = handler.handle(
            parse_id(user_raw, "user"),
            CreateOrderInput(items=specs, shipping_address=address, shipping_courier=courier),
        )
    except DomainException as exc:
        raise domain_error(exc)

    display_order(dto)


@click.command("status")
@user_option
@role_option
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--to", "new_status", required=True, help="New status.")
def order_status(user_raw: str, role: str, order_id: str, new_status: str) -> None:
    """Move an order to a new status (shop owner or admin)."""
    handler = UpdateOrderStatusHandler(
        order_repository(), ownership_resolver(), audit_sink(), order_status_whitelist()
    )
    try:
        dto = handler.handle(
            parse_id(user_raw, "user"), role, parse_id(order_id, "order_id"), new_status
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order {dto.number} is now {dto.status}.")


@click.command("ship")
@user_option
@role_option
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--courier", required=True, help="Courier name.")
@click.option("--receipt", required=True, help="Shipping receipt / tracking number.")
def order_ship(user_raw: str, role: str, order_id: str, courier: str, receipt: str) -> None:
    """Record the shipping receipt and mark the order shipped."""
    handler = InputShippingReceiptHandler(order_repository(), ownership_resolver(), audit_sink())
    try:
        dto = handler.handle(
            parse_id(user_raw, "user"), role, parse_id(order_id, "order_id"), courier, receipt
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order {dto.number} shipped via {dto.shipping_courier} ({dto.shipping_receipt}).")


@click.command("track")
@user_option
@role_option
@click.option("--id", "order_id", required=True, help="Order ID.")
def order_track(user_raw: str, role: str, order_id: str) -> None:
    """Show an order with its status history (buyer or admin)."""
    handler = GetOrderTrackingHandler(order_repository(), audit_sink())
    try:
        tracking = handler.handle(
            parse_id(user_raw, "user"), role, parse_id(order_id, "order_id")
        )
    except DomainException as exc:
        raise domain_error(exc)

    display_order(tracking.order)
    if tracking.history:
        click.echo()
        click.echo("History:")
        for entry in tracking.history:
            note = f"  ({entry.note})" if entry.note else ""
            click.echo(
                f"  {entry.timestamp}  {entry.old_status or '-'} -> {entry.new_status}{note}"
            )
