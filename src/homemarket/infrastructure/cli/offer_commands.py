"""CLI commands for the Offer aggregate."""

from __future__ import annotations

import click

from homemarket.application.accept_offer import AcceptOfferHandler
from homemarket.application.create_offer import CreateOfferHandler
from homemarket.application.dto import CreateOfferInput
from homemarket.application.list_offers import ListGiverOffersHandler, ListSellerOffersHandler
from homemarket.application.reject_offer import RejectOfferHandler
from homemarket.domain.exceptions import DomainException, PartialFailureError
from homemarket.domain.model.offer import Offer
from homemarket.domain.model.value_objects import Role, parse_id
from homemarket.infrastructure.bootstrap import (
    audit_sink,
    item_repository,
    offer_repository,
    ownership_resolver,
)
from homemarket.infrastructure.cli.options import domain_error, role_option, user_option


def _display_offers(offers: list[Offer]) -> None:
    if not offers:
        click.echo("No offers found.")
        return
    click.echo(f"{'ID':<36}  {'Item':<24} {'Expected':>14} {'Agreed':>14}  Status")
    click.echo("-" * 100)
    for o in offers:
        agreed = str(o.agreed_price) if o.agreed_price is not None else "-"
        click.echo(
            f"{str(o.id):<36}  {o.item_name:<24} {str(o.expected_price):>14} {agreed:>14}  {o.status.value}"
        )


@click.command("create")
@user_option
@role_option
@click.option("--item-name", required=True, help="Name of the offered item.")
@click.option("--price", "expected_price", required=True, help="Expected price (e.g. 50.00).")
@click.option("--description", default="", help="Free-text description.")
@click.option("--condition", default="", help="Condition tag (e.g. used, like-new).")
@click.option("--location", default="", help="Pickup location.")
@click.option("--seller", "seller_id", default="", help="Target seller ID; omit for an open offer.")
@click.option("--image-url", default="", help="URL of an already-uploaded image.")
def offer_create(
    user_raw: str,
    role: str,
    item_name: str,
    expected_price: str,
    description: str,
    condition: str,
    location: str,
    seller_id: str,
    image_url: str,
) -> None:
    """Submit an offer as a giver."""
    handler = CreateOfferHandler(offer_repository(), audit_sink())
    try:
        offer = handler.handle(
            parse_id(user_raw, "user"),
            role,
            CreateOfferInput(
                item_name=item_name,
                expected_price=expected_price,
                description=description,
                condition=condition,
                location=location,
                seller_id=seller_id,
            ),
            image_url=image_url,
        )
    except DomainException as exc:
        raise domain_error(exc)

    target = f"seller {offer.seller_id}" if offer.seller_id else "all sellers (open offer)"
    click.echo(f"Offer {offer.id} submitted to {target}  (status={offer.status.value})")


@click.command("list")
@user_option
@role_option
def offer_list(user_raw: str, role: str) -> None:
    """List your offers (giver) or offers you can answer (seller)."""
    try:
        user_id = parse_id(user_raw, "user")
        if role == Role.SELLER:
            offers = ListSellerOffersHandler(offer_repository(), ownership_resolver()).handle(
                user_id, role
            )
        else:
            offers = ListGiverOffersHandler(offer_repository()).handle(user_id, role)
    except DomainException as exc:
        raise domain_error(exc)

    _display_offers(offers)


@click.command("accept")
@user_option
@click.option("--id", "offer_id", required=True, help="Offer ID to accept.")
@click.option("--price", "agreed_price", required=True, help="Agreed price.")
def offer_accept(user_raw: str, offer_id: str, agreed_price: str) -> None:
    """Accept a pending offer and create a draft item in your shop."""
    handler = AcceptOfferHandler(
        offer_repository(), item_repository(), ownership_resolver(), audit_sink()
    )
    try:
        accepted = handler.handle(
            parse_id(user_raw, "user"), parse_id(offer_id, "offer_id"), agreed_price
        )
    except PartialFailureError as exc:
        click.echo(f"Offer {exc.committed.id} accepted.", err=True)
        raise domain_error(exc)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Offer {accepted.offer.id} accepted at {accepted.offer.agreed_price}.")
    click.echo(f"Draft item {accepted.draft_item.id} created — publish it to start selling.")


@click.command("reject")
@user_option
@click.option("--id", "offer_id", required=True, help="Offer ID to reject.")
def offer_reject(user_raw: str, offer_id: str) -> None:
    """Reject a pending offer."""
    handler = RejectOfferHandler(offer_repository(), ownership_resolver(), audit_sink())
    try:
        offer = handler.handle(parse_id(user_raw, "user"), parse_id(offer_id, "offer_id"))
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Offer {offer.id} rejected.")
