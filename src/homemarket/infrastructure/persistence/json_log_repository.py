"""JSON-lines-file-backed implementation of AuditLogRepository.

History and notifications are append-only documents, so each lives in
its own ``.jsonl`` file: one JSON object per line, never rewritten.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime
from pathlib import Path

from homemarket.domain.exceptions import ErrorCode, InfrastructureError
from homemarket.domain.model.audit import HistoryStatus, Notification
from homemarket.domain.model.value_objects import EntityType
from homemarket.domain.repository.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class JsonLogRepository(AuditLogRepository):

    def __init__(self, log_dir: Path) -> None:
        self._history_path = log_dir / "history_status.jsonl"
        self._notification_path = log_dir / "notifications.jsonl"
        self._lock = threading.Lock()
        for path in (self._history_path, self._notification_path):
            self._ensure_file(path)

    # --- AuditLogRepository interface -----------------------------------------

    def save_history(self, record: HistoryStatus) -> None:
        self._append(self._history_path, self._history_to_raw(record))

    def save_notification(self, notification: Notification) -> None:
        self._append(self._notification_path, self._notification_to_raw(notification))

    def list_history(self, related_id: uuid.UUID) -> list[HistoryStatus]:
        wanted = str(related_id)
        records = [
            self._history_to_domain(raw)
            for raw in self._load_raw(self._history_path)
            if raw["related_id"] == wanted
        ]
        return sorted(records, key=lambda r: r.timestamp)

    def list_notifications(self, user_id: uuid.UUID) -> list[Notification]:
        wanted = str(user_id)
        notifications = [
            self._notification_to_domain(raw)
            for raw in self._load_raw(self._notification_path)
            if raw["user_id"] == wanted
        ]
        return sorted(notifications, key=lambda n: n.created_at, reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _history_to_raw(record: HistoryStatus) -> dict:
        return {
            "id": str(record.id),
            "related_id": str(record.related_id),
            "related_type": record.related_type.value,
            "old_status": record.old_status,
            "new_status": record.new_status,
            "updated_by": str(record.actor_id),
            "note": record.note,
            "timestamp": record.timestamp.isoformat(),
        }

    @staticmethod
    def _history_to_domain(raw: dict) -> HistoryStatus:
        return HistoryStatus(
            id=uuid.UUID(raw["id"]),
            related_id=uuid.UUID(raw["related_id"]),
            related_type=EntityType(raw["related_type"]),
            old_status=raw.get("old_status"),
            new_status=raw["new_status"],
            actor_id=uuid.UUID(raw["updated_by"]),
            note=raw.get("note", ""),
            timestamp=datetime.fromisoformat(raw["timestamp"]),
        )

    @staticmethod
    def _notification_to_raw(notification: Notification) -> dict:
        return {
            "id": str(notification.id),
            "user_id": str(notification.user_id),
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "related_id": str(notification.related_id),
            "is_read": notification.is_read,
            "created_at": notification.created_at.isoformat(),
        }

    @staticmethod
    def _notification_to_domain(raw: dict) -> Notification:
        return Notification(
            id=uuid.UUID(raw["id"]),
            user_id=uuid.UUID(raw["user_id"]),
            type=raw["type"],
            title=raw["title"],
            message=raw["message"],
            related_id=uuid.UUID(raw["related_id"]),
            is_read=raw.get("is_read", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _append(self, path: Path, raw: dict) -> None:
        line = json.dumps(raw, ensure_ascii=False) + "\n"
        try:
            with self._lock, path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as exc:
            raise InfrastructureError(
                f"Could not append to {path.name}", ErrorCode.LOG_STORE
            ) from exc

    def _load_raw(self, path: Path) -> list[dict]:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InfrastructureError(
                f"Could not read {path.name}", ErrorCode.LOG_STORE
            ) from exc
        records = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                # Partial line from an interrupted append.
                logger.warning("Skipping undecodable line %d in %s", lineno, path.name)
        return records

    @staticmethod
    def _ensure_file(path: Path) -> None:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
