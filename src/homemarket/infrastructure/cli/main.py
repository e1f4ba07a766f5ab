import click

from homemarket.infrastructure.bootstrap import database
from homemarket.infrastructure.cli.market_commands import market_browse, market_show
from homemarket.infrastructure.cli.notification_commands import notification_list
from homemarket.infrastructure.cli.offer_commands import (
    offer_accept,
    offer_create,
    offer_list,
    offer_reject,
)
from homemarket.infrastructure.cli.order_commands import (
    order_create,
    order_ship,
    order_status,
    order_track,
)
from homemarket.infrastructure.cli.shop_commands import (
    category_add,
    item_add,
    item_archive,
    item_publish,
    item_update,
    shop_create,
)
from homemarket.infrastructure.config import get_settings
from homemarket.infrastructure.observability import setup_logging


@click.group()
def cli() -> None:
    """Home Market — offers, shops and orders"""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)


@cli.group()
def db() -> None:
    """Manage the database."""


@db.command("init")
def db_init() -> None:
    """Create all tables."""
    database().create_schema()
    click.echo("Database schema created.")


@cli.group()
def shop() -> None:
    """Manage your shop."""


@cli.group()
def item() -> None:
    """Manage item listings."""


@cli.group()
def offer() -> None:
    """Manage offers."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def market() -> None:
    """Browse the marketplace."""


@cli.group()
def notification() -> None:
    """Read your notifications."""


# Register subcommands
shop.add_command(shop_create)
shop.add_command(category_add)
item.add_command(item_add)
item.add_command(item_publish)
item.add_command(item_update)
item.add_command(item_archive)
offer.add_command(offer_accept)
offer.add_command(offer_create)
offer.add_command(offer_list)
offer.add_command(offer_reject)
order.add_command(order_create)
order.add_command(order_ship)
order.add_command(order_status)
order.add_command(order_track)
market.add_command(market_browse)
market.add_command(market_show)
notification.add_command(notification_list)
