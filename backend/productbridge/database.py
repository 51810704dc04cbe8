"""
ProductBridge Backend — Database Engine & Session Factory
==========================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   The engine is created at import from `settings.database_url`; the
       datastore adapter (services/datastore.py) opens one session per
       statement from `async_session_factory`.
When:  Engine lives for the whole process and is disposed in the app lifespan.

Connection pooling is left entirely to SQLAlchemy. Pool sizing options are
only forwarded for server databases; SQLite drivers reject them.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from productbridge.config import settings


def engine_options() -> Dict[str, Any]:
    """Keyword arguments for create_async_engine derived from settings."""
    options: Dict[str, Any] = {
        # Echo SQL only when debugging; it is very noisy otherwise
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: result rows stay readable after the transaction ends
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The models are only used for schema management (Alembic, test setup);
    request handling goes through the SQL templates in `statements.py`.
    """
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called on application shutdown."""
    await engine.dispose()
