"""
Daymare Backend: Request Logging Middleware
============================================

What:  One access log line per request: method, path, status, duration,
       request id and client address.
Why:   The router renders its own errors, so this line is the only place a
       request outcome (including redacted 503s) is recorded with its id.
How:   Times the downstream call and logs on the ``daymare.access`` logger,
       choosing the level from the status class (5xx ERROR, 4xx WARNING,
       otherwise INFO). Request bodies are never logged.
When:  Inside RequestIDMiddleware, so the request id is already set.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from daymare.middleware.request_id import request_id_var

logger = logging.getLogger("daymare.access")

# Why: load balancers poll /health every few seconds; one line per poll
# would bury the API traffic.
QUIET_PATHS = frozenset({"/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured access logging with request id correlation.

    Logged: method, path, status, duration, request id, client IP.
    Not logged: request bodies (article text) and headers.

    Duration runs from middleware entry to response return, so it covers
    body decoding, the MongoDB round-trip and serialization.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        # Why perf_counter: monotonic, unaffected by wall-clock adjustments.
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
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

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
