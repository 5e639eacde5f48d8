"""
CatTrack Backend — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request.
How:   Times the request, then logs method, path, status, duration, request
       id and client IP. Level follows the status: 5xx ERROR, 4xx WARNING,
       everything else INFO.

Example line:
    2026-01-15T12:00:00 [WARNING] cattrack.access: DELETE /api/v1/cats/65a1... 403 4.2ms [a1b2c3d4] from 10.0.0.7

Request bodies and the Authorization header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cattrack.middleware.request_id import request_id_var

logger = logging.getLogger("cattrack.access")

# Polled every few seconds by orchestrators
QUIET_PATHS = {"/health"}


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log for every request except health checks."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
