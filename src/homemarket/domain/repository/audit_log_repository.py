"""Abstract append-only store for HistoryStatus and Notification documents."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from homemarket.domain.model.audit import HistoryStatus, Notification


class AuditLogRepository(ABC):

    @abstractmethod
    def save_history(self, record: HistoryStatus) -> None:
        """Append a status-history record."""

    @abstractmethod
    def save_notification(self, notification: Notification) -> None:
        """Append a notification."""

    @abstractmethod
    def list_history(self, related_id: uuid.UUID) -> list[HistoryStatus]:
        """Return the history of one entity, oldest first."""

    @abstractmethod
    def list_notifications(self, user_id: uuid.UUID) -> list[Notification]:
        """Return a user's notifications, newest first."""
