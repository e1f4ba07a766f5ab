"""Application service: a user's notification inbox (query)."""

from __future__ import annotations

import uuid

from homemarket.application.browse_marketplace import MAX_PAGE_SIZE
from homemarket.application.dto import NotificationDTO
from homemarket.domain.exceptions import ValidationError
from homemarket.domain.repository.audit_log_repository import AuditLogRepository


class ListNotificationsHandler:
    """Newest first. Users only ever see their own inbox.

    Unlike the writes in AuditSink, a failing log store is reported to
    the caller here: an empty inbox would be indistinguishable from an
    outage.
    """

    def __init__(self, log_repo: AuditLogRepository) -> None:
        self._log_repo = log_repo

    def handle(self, user_id: uuid.UUID, limit: int = 20) -> list[NotificationDTO]:
        if limit <= 0 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        notifications = self._log_repo.list_notifications(user_id)
        return [NotificationDTO.from_notification(n) for n in notifications[:limit]]
