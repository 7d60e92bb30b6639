"""Database engine, session factory and transaction helpers.

The engine and session factory are built once at process start by
``configure_database``; the lifecycle manager receives sessions through
dependency injection instead of importing a global.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine with connection pooling.

    Pool settings only apply to PostgreSQL (not SQLite).
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": echo,
    }

    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    return create_engine(database_url, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def configure_database(settings: Optional[Settings] = None) -> sessionmaker:
    """Build the session factory for a process from settings."""
    settings = settings or get_settings()
    engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    factory = build_session_factory(engine)
    logger.info("Database configured", extra={"dialect": engine.dialect.name})
    return factory


@contextmanager
def transaction(session: Session) -> Generator[Session, None, None]:
    """Run a unit of work atomically on an existing session.

    Everything flushed inside the block is committed together when the block
    exits normally; any exception rolls the whole unit back and is re-raised.
    The transaction is always released before control returns to the caller.

    Usage:
        with transaction(db):
            db.add(finalized)
            db.flush()
            db.delete(review)
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
