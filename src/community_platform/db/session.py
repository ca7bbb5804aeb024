"""Database session configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from community_platform.core.errors import ConflictError, EngineError, TransientStoreError
from community_platform.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import community_platform.models  # noqa: E402,F401

engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Run a read-modify-write sequence as one transaction.

    Commits when the block exits cleanly and rolls back on any error. Store
    failures are translated into engine errors: uniqueness violations become
    ``ConflictError`` and everything else becomes ``TransientStoreError``.
    """
    try:
        yield db
        db.commit()
    except EngineError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Uniqueness violation during unit of work: %s", exc.orig)
        raise ConflictError("The resource was modified concurrently; retry the request.") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure during unit of work")
        raise TransientStoreError() from exc


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
