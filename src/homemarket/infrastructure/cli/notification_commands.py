"""CLI commands for a user's notification inbox."""

from __future__ import annotations

import click

from homemarket.application.list_notifications import ListNotificationsHandler
from homemarket.domain.exceptions import DomainException
from homemarket.domain.model.value_objects import parse_id
from homemarket.infrastructure.bootstrap import log_repository
from homemarket.infrastructure.cli.options import domain_error, user_option


@click.command("list")
@user_option
@click.option("--limit", default=20, type=int, show_default=True)
def notification_list(user_raw: str, limit: int) -> None:
    """Show your notifications, newest first."""
    handler = ListNotificationsHandler(log_repository())
    try:
        notifications = handler.handle(parse_id(user_raw, "user"), limit)
    except DomainException as exc:
        raise domain_error(exc)

    if not notifications:
        click.echo("No notifications.")
        return
    for n in notifications:
        click.echo(f"{n.created_at}  [{n.type}] {n.title}: {n.message}  ({n.related_id})")
