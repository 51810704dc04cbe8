"""
ProductBridge Backend — Product Service
=========================================

What:  One method per route. Each builds its SQL statement from the request
       values and either runs it (reads) or hands it to the persist step
       (writes).
Who:   Called by routes/products.py.

Flow (writes):
    request values → statements.<builder>() → PersistService.persist()
                                                 → commit | forced rollback
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from productbridge import statements
from productbridge.exceptions import DatabaseError, NotFoundError, ValidationError
from productbridge.schemas.product import (
    ProductPayload,
    ProductResponse,
    WriteAcknowledgement,
)
from productbridge.services.datastore import Datastore
from productbridge.services.persist import PersistService, persist_service

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Clock used for created_at/updated_at."""
    return datetime.now(timezone.utc)


class ProductService:
    """
    Stateless; the datastore is passed per call so routes can inject it.
    """

    def __init__(self, persist: Optional[PersistService] = None):
        self.persist = persist or persist_service

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_products(self, datastore: Datastore) -> List[ProductResponse]:
        """All rows of the products table, in whatever order the store returns."""
        statement = statements.select_all()
        try:
            rows = await datastore.fetch_all(statement)
        except SQLAlchemyError as e:
            logger.error("Database error listing products: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve products. Please try again.",
                context={"sql": statement.sql, "error_type": type(e).__name__},
            ) from e
        return [ProductResponse(**row) for row in rows]

    async def get_product(self, datastore: Datastore, product_id: int) -> ProductResponse:
        statement = statements.select_one(product_id)
        try:
            row = await datastore.fetch_one(statement)
        except SQLAlchemyError as e:
            logger.error("Database error fetching product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the product. Please try again.",
                context={"product_id": product_id, "error_type": type(e).__name__},
            ) from e

        if row is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return ProductResponse(**row)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_product(
        self,
        datastore: Datastore,
        payload: ProductPayload,
        fail: bool = False,
    ) -> WriteAcknowledgement:
        self._validate(payload)
        logger.info(
            "Received message to insert with header: %s & %s",
            payload.name,
            payload.category,
        )
        statement = statements.insert(payload.name, payload.category, utcnow())
        return await self.persist.persist(datastore, statement, fail=fail)

    async def update_product(
        self,
        datastore: Datastore,
        product_id: int,
        payload: ProductPayload,
        fail: bool = False,
    ) -> WriteAcknowledgement:
        self._validate(payload)
        logger.info(
            "Received message to update with header: %s & %s",
            payload.name,
            payload.category,
        )
        statement = statements.update(product_id, payload.name, payload.category, utcnow())
        ack = await self.persist.persist(datastore, statement, fail=fail, target_id=product_id)
        self._require_match(ack, product_id)
        return ack

    async def delete_product(
        self,
        datastore: Datastore,
        product_id: int,
        fail: bool = False,
    ) -> WriteAcknowledgement:
        logger.info("Received message to delete with header: %s", product_id)
        statement = statements.delete(product_id)
        ack = await self.persist.persist(datastore, statement, fail=fail, target_id=product_id)
        self._require_match(ack, product_id)
        return ack

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _validate(payload: ProductPayload) -> None:
        """Rejects whitespace-only values, which the schema lets through."""
        for field in ("name", "category"):
            if not getattr(payload, field).strip():
                raise ValidationError(
                    message=f"'{field}' must not be blank",
                    field=field,
                )

    @staticmethod
    def _require_match(ack: WriteAcknowledgement, product_id: int) -> None:
        """
        A committed update/delete that touched no rows means the id does not
        exist. Rollback acknowledgements are returned as-is.
        """
        if ack.status == "executed" and ack.rows_affected == 0:
            raise NotFoundError(resource="product", resource_id=str(product_id))


product_service = ProductService()
