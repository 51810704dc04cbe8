"""
ProductBridge Backend — Custom Exception Hierarchy
====================================================

What:  Application-specific exceptions mapped to HTTP status codes.
How:   Each exception carries a client-safe message and a context dict.
       Global handlers in main.py turn them into JSON error responses;
       the context is logged server-side only.
Who:   Raised by the service layer; caught by the handlers in main.py.

Exception Hierarchy:
    ProductBridgeError (base)   → 500
    ├── ValidationError         → 400 Bad Request
    ├── NotFoundError           → 404 Not Found
    └── DatabaseError           → 500 Internal Server Error

A forced rollback (fail=true) is NOT an exception. It is a normal outcome
of the persist step and is reported as a rollback acknowledgement.
"""

from typing import Any, Dict, Optional


class ProductBridgeError(Exception):
    """
    Base exception for all ProductBridge application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProductBridgeError):
    """
    Raised when client input passes schema validation but is still unusable,
    e.g. a product name that is only whitespace.

    HTTP: 400 Bad Request. Schema-level failures (missing fields, non-integer
    ids) are rejected earlier by FastAPI with 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ProductBridgeError):
    """
    Raised when a product id matches no row.

    When: GET /products/{id} on a missing id, or a committed update/delete
          that affected zero rows.
    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ProductBridgeError):
    """
    Raised when executing a statement fails.

    The transaction has already been rolled back by the datastore adapter
    when this is raised. The SQL text and driver error go into `context`
    and are never returned to the client.

    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
