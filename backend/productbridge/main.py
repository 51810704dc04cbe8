"""
ProductBridge Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       `app` is the module-level instance uvicorn serves
       (uvicorn productbridge.main:app), and run() is the console entry point.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: Request ID → Logging → CORS                 │
    │                                                          │
    │  Routes ({base} = settings.base_path):                   │
    │    GET    {base}/products        GET /health             │
    │    GET    {base}/products/{id}                           │
    │    POST   {base}/products                                │
    │    PUT    {base}/products/{id}                           │
    │    DELETE {base}/products/{id}                           │
    │                                                          │
    │  Exception Handlers:                                     │
    │    ValidationError→400  NotFound→404  Database→500       │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the effective base path
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from productbridge import __version__
from productbridge.config import settings
from productbridge.database import dispose_engine
from productbridge.exceptions import (
    DatabaseError,
    NotFoundError,
    ProductBridgeError,
    ValidationError,
)
from productbridge.middleware.logging import RequestLoggingMiddleware
from productbridge.middleware.request_id import RequestIDMiddleware, request_id_var
from productbridge.routes import health, products

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2026-01-15T12:00:00 [INFO] productbridge.services.persist: message
    Output goes to stdout so container runtimes collect it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("ProductBridge %s starting up", __version__)
    logger.info("Products API mounted at %s/products", settings.base_path)
    if not settings.honor_fail_flag:
        logger.info("Forced rollback via the fail flag is disabled")

    yield

    logger.info("ProductBridge shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error responses.

        ValidationError     → 400
        NotFoundError       → 404
        DatabaseError       → 500 (generic message, context logged)
        ProductBridgeError  → 500
        Exception           → 500

    SQL text and driver messages only ever appear in the server log.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "database_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ProductBridgeError)
    async def handle_app_error(request: Request, exc: ProductBridgeError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Assemble the application.

    The OpenAPI document is served at {base}/api-doc, next to the API it
    describes.
    """
    base_path = settings.base_path

    app = FastAPI(
        title="Products API",
        description="REST access to the products table. Writes can be forced to roll back with fail=true.",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url=f"{base_path}/api-doc",
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of addition:
    # RequestID → Logging → CORS → route
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers refuse credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(products.router, prefix=base_path)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    uvicorn.run(
        "productbridge.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
