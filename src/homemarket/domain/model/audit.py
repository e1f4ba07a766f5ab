"""Audit records: status history and notifications.

Both are append-only documents with a lifecycle independent from the
transactional entities they describe.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from homemarket.domain.model.value_objects import EntityType, new_id


@dataclass(frozen=True)
class HistoryStatus:
    """One status transition of an offer, order or item. Never mutated."""

    related_id: uuid.UUID
    related_type: EntityType
    old_status: str | None
    new_status: str
    actor_id: uuid.UUID
    note: str = ""
    id: uuid.UUID = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class Notification:
    user_id: uuid.UUID
    type: str
    title: str
    message: str
    related_id: uuid.UUID
    is_read: bool = False
    id: uuid.UUID = field(default_factory=new_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
