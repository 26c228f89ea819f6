# planner/storage/db.py
from __future__ import annotations

from sqlmodel import SQLModel, Session, create_engine

from core.settings import DB_PATH, STORE

# Ensure SQLModel metadata is populated
import models.task  # noqa: F401
from storage import migrations


_engine = None


def get_engine():
    """Return (and lazily create) the engine for ``STORE.database_url``."""

    global _engine
    if _engine is None:
        if STORE.database_url.startswith("sqlite"):
            DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(STORE.database_url, echo=STORE.echo_sql, pool_pre_ping=True)
    return _engine


def init_db(engine=None) -> None:
    actual_engine = engine or get_engine()
    SQLModel.metadata.create_all(actual_engine)
    migrations.run_all(actual_engine)


def get_session() -> Session:
    return Session(get_engine())


__all__ = ["get_engine", "get_session", "init_db"]
