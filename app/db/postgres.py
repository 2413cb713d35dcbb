"""
Relational database connection utility.

PostgreSQL in production; any SQLAlchemy URL works (tests use in-memory SQLite).
One Database instance is built at startup and handed to the stores.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Render a database URL with the password hidden."""
    return make_url(url).render_as_string(hide_password=True)


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the driver reports a unique/duplicate key violation."""
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


def _build_engine(url: str, echo: bool) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite lives inside one connection, share it across sessions
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=echo,
    )


class Database:
    """Owns the engine and session factory."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = _build_engine(url, echo)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Context manager for database sessions.
        Usage:
            with database.session() as db:
                db.add(obj)
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create tables that do not exist yet."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready at %s", mask_url(self.url))

    def ping(self) -> bool:
        """
        Test if the database is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            with self.session() as db:
                return db.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.warning("Database connection failed: %s", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()
