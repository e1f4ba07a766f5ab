"""CLI commands for shops, categories and item listings."""

from __future__ import annotations

import click

from homemarket.application.archive_item import ArchiveItemHandler
from homemarket.application.create_category import CreateCategoryHandler
from homemarket.application.create_item import CreateItemHandler
from homemarket.application.create_shop import CreateShopHandler
from homemarket.application.dto import CreateItemInput, CreateShopInput, UpdateItemInput
from homemarket.application.publish_draft_item import PublishDraftItemHandler
from homemarket.application.update_item import UpdateItemHandler
from homemarket.domain.exceptions import DomainException
from homemarket.domain.model.value_objects import parse_id
from homemarket.infrastructure.bootstrap import (
    audit_sink,
    category_repository,
    item_repository,
    ownership_resolver,
    shop_repository,
)
from homemarket.infrastructure.cli.options import domain_error, role_option, user_option


@click.command("create")
@user_option
@role_option
@click.option("--name", required=True, help="Shop name.")
@click.option("--address", required=True, help="Shop address.")
@click.option("--description", default="", help="Shop description.")
def shop_create(user_raw: str, role: str, name: str, address: str, description: str) -> None:
    """Open your shop (sellers only, one per user)."""
    handler = CreateShopHandler(shop_repository())
    try:
        shop = handler.handle(
            parse_id(user_raw, "user"),
            role,
            CreateShopInput(name=name, address=address, description=description),
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Shop {shop.id} '{shop.name}' opened.")


@click.command("add-category")
@user_option
@role_option
@click.option("--name", required=True, help="Category name.")
def category_add(user_raw: str, role: str, name: str) -> None:
    """Add a category to your shop."""
    handler = CreateCategoryHandler(category_repository(), ownership_resolver())
    try:
        category = handler.handle(parse_id(user_raw, "user"), role, name)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Category {category.id} '{category.name}' added.")


@click.command("add")
@user_option
@role_option
@click.option("--name", required=True, help="Item name.")
@click.option("--price", required=True, help="Price (e.g. 10.00).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--category", "category_id", required=True, help="Category ID owned by your shop.")
@click.option("--description", default="", help="Item description.")
@click.option("--condition", default="", help="Condition tag.")
def item_add(
    user_raw: str,
    role: str,
    name: str,
    price: str,
    stock: int,
    category_id: str,
    description: str,
    condition: str,
) -> None:
    """List a new active item in your shop."""
    handler = CreateItemHandler(item_repository(), ownership_resolver())
    try:
        item = handler.handle(
            parse_id(user_raw, "user"),
            role,
            CreateItemInput(
                name=name,
                price=price,
                stock=stock,
                category_id=category_id,
                description=description,
                condition=condition,
            ),
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Item {item.id} '{item.name}' listed at {item.price} (stock {item.stock}).")


@click.command("publish")
@user_option
@role_option
@click.option("--id", "item_id", required=True, help="Draft item ID.")
@click.option("--category", "category_id", required=True, help="Category ID owned by your shop.")
def item_publish(user_raw: str, role: str, item_id: str, category_id: str) -> None:
    """Publish a draft item created from an accepted offer."""
    handler = PublishDraftItemHandler(item_repository(), ownership_resolver(), audit_sink())
    try:
        item = handler.handle(
            parse_id(user_raw, "user"),
            role,
            parse_id(item_id, "item_id"),
            parse_id(category_id, "category_id"),
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Item {item.id} '{item.name}' is now {item.status.value}.")


@click.command("update")
@user_option
@role_option
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--name", required=True, help="Item name.")
@click.option("--price", required=True, help="Price (e.g. 10.00).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--description", default="", help="Item description.")
@click.option("--condition", default="", help="Condition tag.")
@click.option("--status", default="", help="active, inactive or deleted. Empty keeps the current status.")
def item_update(
    user_raw: str,
    role: str,
    item_id: str,
    name: str,
    price: str,
    stock: int,
    description: str,
    condition: str,
    status: str,
) -> None:
    """Replace the details of one of your listings."""
    handler = UpdateItemHandler(item_repository(), ownership_resolver(), audit_sink())
    try:
        item = handler.handle(
            parse_id(user_raw, "user"),
            role,
            parse_id(item_id, "item_id"),
            UpdateItemInput(
                name=name,
                price=price,
                stock=stock,
                description=description,
                condition=condition,
                status=status,
            ),
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Item {item.id} '{item.name}' now {item.price} "
        f"(stock {item.stock}, {item.status.value})."
    )


@click.command("archive")
@user_option
@role_option
@click.option("--id", "item_id", required=True, help="Item ID.")
def item_archive(user_raw: str, role: str, item_id: str) -> None:
    """Take one of your listings off the marketplace."""
    handler = ArchiveItemHandler(item_repository(), ownership_resolver(), audit_sink())
    try:
        item = handler.handle(parse_id(user_raw, "user"), role, parse_id(item_id, "item_id"))
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Item {item.id} '{item.name}' is now {item.status.value}.")
