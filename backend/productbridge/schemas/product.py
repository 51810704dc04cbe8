"""
ProductBridge Backend — Pydantic Request/Response Schemas
==========================================================

What:  The JSON contract of the products API.
How:   FastAPI validates request bodies against these models (422 on schema
       failure) and serializes responses through them.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductPayload(BaseModel):
    """
    What:  Body of POST /products and PUT /products/{id}.
    Why:   Both writes carry the same two user-supplied columns; id and
           timestamps are never accepted from the client.
    """
    name: str = Field(min_length=1, max_length=255, description="Product name")
    category: str = Field(min_length=1, max_length=255, description="Product category")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """One row of the products table."""
    id: int = Field(description="Database-assigned identifier")
    name: str
    category: str
    created_at: datetime = Field(description="Insert timestamp (UTC)")
    updated_at: datetime = Field(description="Last write timestamp (UTC)")

    model_config = {"from_attributes": True}


class WriteAcknowledgement(BaseModel):
    """
    What:  Result of a write routed through the persist step.

    status:
        executed  → the statement ran and the transaction was committed
        rollback  → the statement ran and the transaction was forced to roll
                    back because the request carried fail=true; nothing landed
    """
    status: Literal["executed", "rollback"] = Field(description="Transaction outcome")
    operation: Literal["insert", "update", "delete"] = Field(description="Kind of write")
    message: str = Field(description="Human-readable outcome")
    rows_affected: int = Field(default=0, description="Rows touched before commit/rollback")
    id: Optional[int] = Field(
        default=None,
        description="New id for inserts, target id for updates/deletes",
    )


class ErrorResponse(BaseModel):
    """
    Standardized error body returned by the global exception handlers.

    Example:
        {
            "error": "not_found",
            "message": "product with ID '42' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
