"""Application configuration — environment-driven settings via pydantic-settings.

Every setting can be overridden with a ``HOMEMARKET_``-prefixed
environment variable or a ``.env`` file. ``get_settings()`` is cached so
one instance exists per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from homemarket.domain.model.order import OrderStatus


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="HOMEMARKET_", env_file=".env", case_sensitive=False
    )

    # Database
    database_url: str = "sqlite:///data/homemarket.db"
    database_echo: bool = False

    # Append-only history/notification store
    log_dir: Path = Path("data/logs")

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    # Statuses a shop may set through the generic status update
    order_status_whitelist: list[str] = [status.value for status in OrderStatus]

    @field_validator("order_status_whitelist")
    @classmethod
    def known_statuses_only(cls, value: list[str]) -> list[str]:
        known = {status.value for status in OrderStatus}
        normalized = [v.strip().lower() for v in value]
        unknown = sorted(set(normalized) - known)
        if unknown:
            raise ValueError(f"Unknown order statuses in whitelist: {', '.join(unknown)}")
        return normalized

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, value: str) -> str:
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
