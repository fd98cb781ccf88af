"""
Campus Roster Backend — Request ID Middleware
==============================================

What:  Assigns each request a short correlation ID and echoes it back.
How:   Reuses a client-sent X-Request-ID or generates one, stores it in a
       ContextVar for loggers and error handlers, returns it as a header.
When:  Outermost middleware, before access logging.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate an 8-character ID
        3. Store it in request_id_var for the access log and error handlers
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # An empty header counts as absent; every response carries a usable ID.
        # 8 hex characters are enough to tell apart requests in one log window.
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        # Set before call_next: the inner app runs in a task that copies this
        # context, so handlers further down read the same value.
        request_id_var.set(rid)

        response = await call_next(request)
        # Error responses built by the exception handlers pass through here
        # too, so a 500 body's request_id always matches this header.
        response.headers["X-Request-ID"] = rid

        return response
