"""Audit & Notification Sink.

Every state transition appends a HistoryStatus record and usually a
notification for the counterparty. Both are best-effort: the business
transition has already committed and is the source of truth, so a
failing log store is logged and never propagated.
"""

from __future__ import annotations

import logging
import uuid

from homemarket.domain.model.audit import HistoryStatus, Notification
from homemarket.domain.model.value_objects import EntityType
from homemarket.domain.repository.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditSink:

    def __init__(self, log_repo: AuditLogRepository) -> None:
        self._log_repo = log_repo

    def record_history(
        self,
        related_id: uuid.UUID,
        related_type: EntityType,
        old_status: str | None,
        new_status: str,
        actor_id: uuid.UUID,
        note: str = "",
    ) -> HistoryStatus | None:
        """Append a history record. Returns None if the store failed."""
        record = HistoryStatus(
            related_id=related_id,
            related_type=related_type,
            old_status=old_status,
            new_status=new_status,
            actor_id=actor_id,
            note=note,
        )
        try:
            self._log_repo.save_history(record)
        except Exception:
            logger.warning(
                "Failed to save history status for %s %s",
                related_type.value,
                related_id,
                exc_info=True,
                extra={"related_id": str(related_id)},
            )
            return None
        return record

    def notify(
        self,
        user_id: uuid.UUID,
        type: str,
        title: str,
        message: str,
        related_id: uuid.UUID,
    ) -> Notification | None:
        """Append a notification for ``user_id``. Returns None if the store failed."""
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            related_id=related_id,
        )
        try:
            self._log_repo.save_notification(notification)
        except Exception:
            logger.warning(
                "Failed to save notification for user %s",
                user_id,
                exc_info=True,
                extra={"user_id": str(user_id), "related_id": str(related_id)},
            )
            return None
        return notification

    def history_for(self, related_id: uuid.UUID) -> list[HistoryStatus]:
        """Read an entity's trail; an unavailable store yields an empty trail."""
        try:
            return self._log_repo.list_history(related_id)
        except Exception:
            logger.warning(
                "Failed to load history for %s",
                related_id,
                exc_info=True,
                extra={"related_id": str(related_id)},
            )
            return []
