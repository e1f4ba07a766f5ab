"""Shared click options and output helpers for the CLI commands."""

from __future__ import annotations

import click

from homemarket.application.dto import OrderDTO
from homemarket.domain.exceptions import DomainException
from homemarket.domain.model.value_objects import Role

ROLE_CHOICE = click.Choice([role.value for role in Role], case_sensitive=False)

user_option = click.option(
    "--user", "user_raw", required=True, help="Acting user ID (UUID) from the auth layer."
)
role_option = click.option(
    "--role", required=True, type=ROLE_CHOICE, help="Acting user's role."
)


def domain_error(exc: DomainException) -> click.ClickException:
    """Render a domain failure as '[CODE] message (category)'."""
    return click.ClickException(f"{exc} ({exc.category.value})")


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.number}  (status={dto.status})")
    click.echo(f"ID:       {dto.id}")
    click.echo(f"Buyer:    {dto.buyer_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    if dto.shipping_courier or dto.shipping_receipt:
        click.echo(f"Courier:  {dto.shipping_courier}  receipt={dto.shipping_receipt or '-'}")
    click.echo()
    click.echo(f"  {'Item':<30} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*66}")
    for item in dto.items:
        click.echo(
            f"  {item.item_name:<30} {item.quantity:>5} {item.unit_price:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*66}")
    click.echo(f"  {'Order Total':<36} {dto.total:>30}")
