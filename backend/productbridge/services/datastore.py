"""
ProductBridge Backend — Datastore Adapter
===========================================

What:  Executes built SQL statements against the relational database.
How:   Every call opens its own AsyncSession from the session factory. Writes
       run inside that session's transaction and are then committed or rolled
       back as the caller asks. The session is closed on every exit path.
Who:   Used by PersistService (writes) and ProductService (reads). Injected
       into routes through `get_datastore` so tests can swap the factory.

Transaction scope per write:
    open session → execute → commit | rollback → close
                      └── error → rollback → close → re-raise
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from productbridge.database import async_session_factory
from productbridge.statements import SqlStatement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a write statement."""
    rows_affected: int
    inserted_id: Optional[int]
    committed: bool


class Datastore:
    """
    Thin wrapper around an async session factory.

    Raises sqlalchemy.exc.SQLAlchemyError unchanged; translating it into an
    application error is the service layer's job.
    """

    def __init__(self, session_factory: async_sessionmaker = async_session_factory):
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Session scope that rolls back on any exception.

        Commit is left to the caller. A session closed without commit
        discards its transaction, so reads need nothing further.
        """
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def execute(self, statement: SqlStatement, commit: bool) -> ExecutionResult:
        """
        Run a write statement, then commit (commit=True) or roll back.

        The statement executes identically on both paths; only the
        transaction outcome differs.
        """
        async with self.transaction() as session:
            result = await session.execute(statement.clause, statement.params)

            if statement.returns_id:
                inserted_id = result.scalar_one()
                rows_affected = 1
            else:
                inserted_id = None
                rows_affected = max(result.rowcount, 0)

            if commit:
                await session.commit()
            else:
                await session.rollback()

        logger.debug(
            "%s %s: %d row(s)",
            statement.operation,
            "committed" if commit else "rolled back",
            rows_affected,
        )
        return ExecutionResult(
            rows_affected=rows_affected,
            inserted_id=inserted_id,
            committed=commit,
        )

    async def fetch_all(self, statement: SqlStatement) -> List[Dict[str, Any]]:
        """Run a select and return every row as a dict."""
        async with self.transaction() as session:
            result = await session.execute(statement.clause, statement.params)
            return [dict(row) for row in result.mappings().all()]

    async def fetch_one(self, statement: SqlStatement) -> Optional[Dict[str, Any]]:
        """Run a select expected to match at most one row."""
        async with self.transaction() as session:
            result = await session.execute(statement.clause, statement.params)
            row = result.mappings().one_or_none()
            return dict(row) if row is not None else None

    async def ping(self) -> None:
        """Lightweight connectivity check used by GET /health."""
        async with self.transaction() as session:
            await session.execute(text("SELECT 1"))


datastore = Datastore()


def get_datastore() -> Datastore:
    """FastAPI dependency returning the process-wide datastore."""
    return datastore
