"""CLI commands for browsing the marketplace."""

from __future__ import annotations

from decimal import Decimal

import click

from homemarket.application.browse_marketplace import BrowseMarketplaceHandler, ShowItemHandler
from homemarket.domain.exceptions import DomainException
from homemarket.domain.model.value_objects import parse_id
from homemarket.domain.repository.item_repository import ItemFilter
from homemarket.infrastructure.bootstrap import item_repository
from homemarket.infrastructure.cli.options import domain_error


@click.command("browse")
@click.option("--keyword", default="", help="Match against name or description.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--min-price", default=None, help="Minimum price.")
@click.option("--max-price", default=None, help="Maximum price.")
@click.option("--limit", default=20, type=int, show_default=True)
@click.option("--offset", default=0, type=int, show_default=True)
def market_browse(
    keyword: str,
    category_id: str | None,
    min_price: str | None,
    max_price: str | None,
    limit: int,
    offset: int,
) -> None:
    """List active items that are in stock."""
    handler = BrowseMarketplaceHandler(item_repository())
    try:
        items = handler.handle(
            ItemFilter(
                keyword=keyword,
                category_id=parse_id(category_id, "category_id") if category_id else None,
                min_price=Decimal(min_price) if min_price else None,
                max_price=Decimal(max_price) if max_price else None,
                limit=limit,
                offset=offset,
            )
        )
    except ArithmeticError:
        raise click.BadParameter("Prices must be decimal numbers.")
    except DomainException as exc:
        raise domain_error(exc)

    if not items:
        click.echo("No items found.")
        return

    click.echo(f"{'ID':<36}  {'Name':<28} {'Price':>14} {'Stock':>6}")
    click.echo("-" * 88)
    for item in items:
        click.echo(f"{str(item.id):<36}  {item.name:<28} {str(item.price):>14} {item.stock:>6}")


@click.command("show")
@click.option("--id", "item_id", required=True, help="Item ID.")
def market_show(item_id: str) -> None:
    """Show an active item's details."""
    handler = ShowItemHandler(item_repository())
    try:
        item = handler.handle(parse_id(item_id, "item_id"))
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"{item.name}  ({item.condition or 'n/a'})")
    click.echo(f"Price: {item.price}   Stock: {item.stock}")
    if item.description:
        click.echo(item.description)
