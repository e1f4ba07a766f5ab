"""Database session manager — engine, unit-of-work scope and error mapping.

Invariants:
    - Every unit of work rolls back on any exception (no partial commits leak)
    - SQLAlchemy exceptions surface as InfrastructureError, never raw
    - Domain exceptions raised inside a unit of work pass through unchanged
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from homemarket.domain.exceptions import InfrastructureError
from homemarket.infrastructure.persistence.orm import Base

logger = logging.getLogger(__name__)


def _build_engine(database_url: str, echo: bool) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


class DatabaseSessionManager:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.engine = _build_engine(database_url, echo)
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """One atomic unit of work: commit on success, roll back on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.error("DB integrity error: %s", e)
            raise InfrastructureError("Integrity constraint violated") from e
        except OperationalError as e:
            session.rollback()
            logger.error("DB operational error: %s", e)
            raise InfrastructureError("Connection or operational error") from e
        except DBAPIError as e:
            session.rollback()
            logger.error("DB driver error: %s", e)
            raise InfrastructureError("Database driver error") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("SQLAlchemy error: %s", e)
            raise InfrastructureError("Database operation failed") from e
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        try:
            with self.transaction() as session:
                session.execute(text("SELECT 1"))
            return True
        except InfrastructureError:
            return False

    def dispose(self) -> None:
        self.engine.dispose()
