"""
Wallit Users — Request Logging Middleware
==========================================

What:  One access log line per HTTP request with status and duration.
How:   Measures time around the downstream call and picks the log level from
       the status class (5xx → ERROR, 4xx → WARNING, else INFO).

Logged: method, path, query parameter names, status, duration, client IP,
        request ID, and an `auth_failed` flag for rejected logins.
Never logged: request bodies (they carry passwords), headers, or query
        values (GET /users?email=... carries an address); values are
        replaced with `***`.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from wallit.middleware.request_id import request_id_var

logger = logging.getLogger("wallit.access")

REDACTED = "***"
AUTHENTICATE_PATH = "/users/authenticate"


def redacted_target(request: Request) -> str:
    """Path plus query string with every value masked, e.g. /users?email=***."""
    path = request.url.path
    if not request.query_params:
        return path
    query = "&".join(f"{name}={REDACTED}" for name in request.query_params.keys())
    return f"{path}?{query}"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request without leaking credentials or addresses.

    Health checks are skipped; orchestrators poll them every few seconds.
    """

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        target = redacted_target(request)
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        # Repeated failures from one IP are what an operator watches for
        auth_failed = path == AUTHENTICATE_PATH and status == 401

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s%s",
            method,
            target,
            status,
            duration_ms,
            rid,
            client_ip,
            " auth_failed" if auth_failed else "",
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "auth_failed": auth_failed,
            },
        )

        return response
