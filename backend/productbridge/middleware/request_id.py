"""
ProductBridge Backend — Request ID Middleware
===============================================

What:  Tags every request with a short correlation id.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates one. The id is stored in a ContextVar (read by the access
       logger and the exception handlers) and echoed in the response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var and request.state.request_id for each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars is plenty for correlating log lines
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
