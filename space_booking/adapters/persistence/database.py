"""Engine and session management for the relational store."""

from __future__ import annotations

import logging
import time
from typing import Any

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from space_booking.adapters.persistence.models import DEFAULT_DESTINATIONS, Base, Destination

logger = logging.getLogger(__name__)


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine, adapting SQLite to multi-threaded use.

    Repository calls run in executor threads, so SQLite connections must be
    shareable across threads; an in-memory database additionally needs a
    single static connection or every thread would see an empty database.
    """
    kwargs: dict[str, Any] = {"echo": echo}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


class Database:
    """Owns the engine and hands out sessions.

    Attributes:
        engine: SQLAlchemy engine bound to the configured URL.
        session_factory: Factory producing short-lived sessions.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.engine = build_engine(url, echo=echo)
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def session(self) -> Session:
        return self.session_factory()

    def create_schema(self) -> None:
        """Create missing tables (idempotent)."""
        Base.metadata.create_all(self.engine)

    def seed_destinations(self, names: tuple[str, ...] = DEFAULT_DESTINATIONS) -> int:
        """Insert the default destinations when none exist.

        Returns:
            Number of destinations inserted (0 when already seeded).
        """
        with self.session() as session, session.begin():
            existing = session.scalar(select(func.count()).select_from(Destination))
            if existing:
                return 0
            session.add_all([Destination(name=name) for name in names])

        logger.info("db.destinations_seeded", extra={"count": len(names)})
        return len(names)

    def pool_stats(self) -> dict[str, str]:
        """Connection pool figures, when the pool keeps any.

        Only a ``QueuePool`` tracks connections; other pools (such as the
        static pool used for in-memory SQLite) report just their class name.
        """
        pool = self.engine.pool
        stats = {"pool": type(pool).__name__}
        if not isinstance(pool, QueuePool):
            return stats

        in_use = pool.checkedout()
        idle = pool.checkedin()
        stats.update(
            {
                "pool_size": str(pool.size()),
                "open_connections": str(in_use + idle),
                "in_use": str(in_use),
                "idle": str(idle),
                "overflow": str(max(pool.overflow(), 0)),
            }
        )
        return stats

    def health(self) -> dict[str, str]:
        """Ping the database and report its status with pool statistics.

        The message flags heavy load once connections overflow the pool size.
        """
        start = time.perf_counter()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error(
                "db.health_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            return {"status": "down", "error": type(exc).__name__}

        latency_ms = (time.perf_counter() - start) * 1000
        health = {
            "status": "up",
            "message": "It's healthy",
            "latency_ms": f"{latency_ms:.2f}",
            **self.pool_stats(),
        }
        if int(health.get("overflow", 0)) > 0:
            health["message"] = "The database is experiencing heavy load."
        return health

    def dispose(self) -> None:
        self.engine.dispose()
