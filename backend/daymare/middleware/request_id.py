"""
Daymare Backend: Request ID Middleware
=======================================

What:  Tags every request with a short correlation id.
Why:   Store failures reach clients as a bare "store unavailable"; the id
       echoed in the response is what ties that reply to the logged
       driver error.
How:   Reuses the client's ``X-Request-ID`` header when present, otherwise
       generates one; stores it in a ContextVar for loggers and echoes it in
       the response headers.
When:  Outermost of the application's own middleware, so every later log
       line of the request can carry the id.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns ``request.state.request_id`` and the ``X-Request-ID`` header.

    Behavior:
        1. Reuse the client's X-Request-ID when it sent one
        2. Otherwise generate a new id
        3. Store it in the ContextVar read by loggers and the router
        4. Echo it in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Why short: 8 hex chars are enough to correlate log lines and stay
        # readable; a full UUID is 36.
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
