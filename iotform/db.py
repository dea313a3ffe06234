"""Database engine, session factory, and base model for the local state store."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .config import settings

_db_url = settings.effective_database_url
_is_sqlite = _db_url.startswith("sqlite")

_engine_kwargs: dict = {"echo": settings.debug}
if _is_sqlite:
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs["pool_pre_ping"] = True

engine = create_engine(_db_url, **_engine_kwargs)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all iotform models."""
    pass


def init_db():
    """Create all tables, and the state directory for the default SQLite file."""
    from . import models  # noqa: F401  register tables on Base.metadata

    if _is_sqlite and not settings.database_url:
        settings.home.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)
