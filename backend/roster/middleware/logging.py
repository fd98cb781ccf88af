"""
Campus Roster Backend — Request Logging Middleware
===================================================

What:  One access-log line per HTTP request.
How:   Times the request and logs method, path, status, duration, request ID
       and client IP once the response is ready.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Log line example:
    2024-01-15T12:00:00 [INFO] roster.access: DELETE /api/student/2 200 4.1ms [a1b2c3d4] from 10.0.0.7

Request bodies are never logged; they carry personal data (names, roll numbers).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roster.middleware.request_id import request_id_var

logger = logging.getLogger("roster.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with a level chosen by status:
        5xx → ERROR, 4xx → WARNING, otherwise INFO.

    Probe endpoints are skipped; orchestrators hit them every few seconds.
    """

    EXCLUDED_PATHS = {"/healthz", "/readyz"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            # Reaches here only when no exception handler produced a response
            logger.error(
                "%s %s failed after %.1fms [%s] from %s",
                request.method, path, _elapsed_ms(started), rid, client_ip,
            )
            raise

        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method, path, status, _elapsed_ms(started), rid, client_ip,
            extra={"request_id": rid, "status": status, "client_ip": client_ip},
        )
        return response


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, anything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
