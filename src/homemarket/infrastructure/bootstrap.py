"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from homemarket.application.audit_sink import AuditSink
from homemarket.domain.service.ownership_resolver import OwnershipResolver
from homemarket.infrastructure.config import get_settings
from homemarket.infrastructure.database import DatabaseSessionManager
from homemarket.infrastructure.persistence.json_log_repository import JsonLogRepository
from homemarket.infrastructure.persistence.sql_item_repository import SqlItemRepository
from homemarket.infrastructure.persistence.sql_offer_repository import SqlOfferRepository
from homemarket.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from homemarket.infrastructure.persistence.sql_shop_repository import (
    SqlCategoryRepository,
    SqlShopRepository,
)


@lru_cache
def database() -> DatabaseSessionManager:
    settings = get_settings()
    if settings.database_url.startswith("sqlite:///") and ":memory:" not in settings.database_url:
        Path(settings.database_url.removeprefix("sqlite:///")).parent.mkdir(
            parents=True, exist_ok=True
        )
    return DatabaseSessionManager(settings.database_url, echo=settings.database_echo)


def shop_repository() -> SqlShopRepository:
    return SqlShopRepository(database())


def category_repository() -> SqlCategoryRepository:
    return SqlCategoryRepository(database())


def item_repository() -> SqlItemRepository:
    return SqlItemRepository(database())


def offer_repository() -> SqlOfferRepository:
    return SqlOfferRepository(database())


def order_repository() -> SqlOrderRepository:
    return SqlOrderRepository(database())


def log_repository() -> JsonLogRepository:
    return JsonLogRepository(get_settings().log_dir)


def audit_sink() -> AuditSink:
    return AuditSink(log_repository())


def ownership_resolver() -> OwnershipResolver:
    return OwnershipResolver(shop_repository(), category_repository(), item_repository())


def order_status_whitelist() -> list[str]:
    return get_settings().order_status_whitelist
