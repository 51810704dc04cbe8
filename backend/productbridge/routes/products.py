"""
ProductBridge Backend — Products Route Handlers
=================================================

What:  The products REST surface: list, read one, insert, update, delete.
How:   Each handler extracts path/body/flag and delegates to ProductService.
       Writes return a WriteAcknowledgement from the persist step.

The fail flag:
    Read from the `fail` request header, or from a `fail` query parameter
    when no header is sent. Only the exact value "true" forces the write's
    transaction to roll back. A forced rollback is a normal outcome and
    answers HTTP 200 with status "rollback".
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response

from productbridge.schemas.product import (
    ErrorResponse,
    ProductPayload,
    ProductResponse,
    WriteAcknowledgement,
)
from productbridge.services.datastore import Datastore, get_datastore
from productbridge.services.persist import is_fail_flag_set
from productbridge.services.product_service import product_service

logger = logging.getLogger(__name__)

# Mounted under settings.base_path by main.create_app()
router = APIRouter(tags=["Products"])


def resolve_fail_flag(
    fail_header: Optional[str] = Header(
        default=None,
        alias="fail",
        description='Set to "true" to execute the write and then roll it back',
    ),
    fail_query: Optional[str] = Query(
        default=None,
        alias="fail",
        description="Query-string form of the fail header; the header wins",
    ),
) -> bool:
    """Dependency yielding whether the request asked for a forced rollback."""
    value = fail_header if fail_header is not None else fail_query
    return is_fail_flag_set(value)


def _rollback_status(ack: WriteAcknowledgement, response: Response) -> WriteAcknowledgement:
    # Forced rollbacks always answer 200, even on routes that default to 201
    if ack.status == "rollback":
        response.status_code = 200
    return ack


@router.get(
    "/products",
    response_model=List[ProductResponse],
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List all products",
)
async def list_products(
    datastore: Datastore = Depends(get_datastore),
) -> List[ProductResponse]:
    """Runs `select * from products` and returns every row."""
    return await product_service.list_products(datastore)


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Get a single product",
)
async def get_product(
    product_id: int,
    datastore: Datastore = Depends(get_datastore),
) -> ProductResponse:
    return await product_service.get_product(datastore, product_id)


@router.post(
    "/products",
    status_code=201,
    response_model=WriteAcknowledgement,
    responses={
        201: {"description": "Inserted and committed", "model": WriteAcknowledgement},
        200: {"description": "Inserted and forced to roll back", "model": WriteAcknowledgement},
        400: {"description": "Blank name or category", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Insert a product",
)
async def create_product(
    payload: ProductPayload,
    response: Response,
    fail: bool = Depends(resolve_fail_flag),
    datastore: Datastore = Depends(get_datastore),
) -> WriteAcknowledgement:
    """created_at and updated_at are both set to the current time."""
    ack = await product_service.create_product(datastore, payload, fail=fail)
    return _rollback_status(ack, response)


@router.put(
    "/products/{product_id}",
    response_model=WriteAcknowledgement,
    responses={
        400: {"description": "Blank name or category", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Update a product",
)
async def update_product(
    product_id: int,
    payload: ProductPayload,
    response: Response,
    fail: bool = Depends(resolve_fail_flag),
    datastore: Datastore = Depends(get_datastore),
) -> WriteAcknowledgement:
    """Sets name, category and updated_at on the row with this id."""
    ack = await product_service.update_product(datastore, product_id, payload, fail=fail)
    return _rollback_status(ack, response)


@router.delete(
    "/products/{product_id}",
    response_model=WriteAcknowledgement,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Delete a product",
)
async def delete_product(
    product_id: int,
    response: Response,
    fail: bool = Depends(resolve_fail_flag),
    datastore: Datastore = Depends(get_datastore),
) -> WriteAcknowledgement:
    ack = await product_service.delete_product(datastore, product_id, fail=fail)
    return _rollback_status(ack, response)
