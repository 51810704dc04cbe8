"""
ProductBridge Backend — Persist Step (commit/rollback gate)
=============================================================

What:  The single step every write passes through. It decides whether the
       statement's transaction is committed or rolled back.
How:
    fail flag == "true"  → execute, then roll back   → status "rollback"
    otherwise            → execute, then commit      → status "executed"
    execution error      → roll back, raise DatabaseError (HTTP 500)

The flag is a test seam for exercising transactional behaviour, not an
error-recovery policy. With HONOR_FAIL_FLAG=false it is ignored and only a
real execution error rolls a write back.

State machine (per write request):
    BUILT → PERSIST_DECIDE ─┬─ COMMIT_EXEC ───→ DONE (executed)
                            ├─ ROLLBACK_EXEC ─→ DONE (rollback)
                            └─ error ─────────→ rolled back, DatabaseError
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from productbridge.config import settings
from productbridge.exceptions import DatabaseError
from productbridge.schemas.product import WriteAcknowledgement
from productbridge.services.datastore import Datastore
from productbridge.statements import SqlStatement

logger = logging.getLogger(__name__)

FAIL_FLAG_VALUE = "true"
FORCED_ROLLBACK_MESSAGE = "forced to rollback"


def is_fail_flag_set(value: Optional[str]) -> bool:
    """
    True only for the exact string "true".

    "TRUE", "1" or "yes" do not trigger a rollback.
    """
    return value == FAIL_FLAG_VALUE


class PersistService:
    """
    Commit/rollback gate shared by insert, update and delete.

    Stateless; `honor_fail_flag` defaults to the live setting so it can be
    flipped per process through configuration.
    """

    def __init__(self, honor_fail_flag: Optional[bool] = None):
        self._honor_fail_flag = honor_fail_flag

    @property
    def honor_fail_flag(self) -> bool:
        if self._honor_fail_flag is None:
            return settings.honor_fail_flag
        return self._honor_fail_flag

    async def persist(
        self,
        datastore: Datastore,
        statement: SqlStatement,
        fail: bool = False,
        target_id: Optional[int] = None,
    ) -> WriteAcknowledgement:
        """
        Execute a write statement and commit or force a rollback.

        Args:
            datastore:  adapter that owns the transaction scope
            statement:  fully built insert/update/delete
            fail:       whether the request asked for a forced rollback
            target_id:  id from the request path, echoed in the acknowledgement

        Returns:
            WriteAcknowledgement with status "executed" or "rollback".

        Raises:
            DatabaseError: the statement failed; its transaction was rolled back.
        """
        logger.info("Executing SQL query: %s", statement.sql)
        logger.debug("Bound parameters: %s", statement.params)

        forced_rollback = fail and self.honor_fail_flag
        if fail and not forced_rollback:
            logger.info("Ignoring fail flag on %s; forced rollback is disabled", statement.operation)

        try:
            result = await datastore.execute(statement, commit=not forced_rollback)
        except SQLAlchemyError as e:
            logger.error(
                "SQL %s failed, transaction rolled back: %s",
                statement.operation,
                type(e).__name__,
            )
            raise DatabaseError(
                message="The write could not be completed. No changes were saved.",
                context={
                    "operation": statement.operation,
                    "sql": statement.sql,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            ) from e

        ack_id = result.inserted_id if result.inserted_id is not None else target_id

        if forced_rollback:
            logger.warning(
                "Forced rollback of %s (%d row(s) discarded)",
                statement.operation,
                result.rows_affected,
            )
            return WriteAcknowledgement(
                status="rollback",
                operation=statement.operation,
                message=FORCED_ROLLBACK_MESSAGE,
                rows_affected=result.rows_affected,
                id=ack_id,
            )

        return WriteAcknowledgement(
            status="executed",
            operation=statement.operation,
            message="executed",
            rows_affected=result.rows_affected,
            id=ack_id,
        )


persist_service = PersistService()
