"""
Leisure Catalog API — Request ID Middleware
=============================================

What:  Tags each request with a short correlation id.
Why:   Error logs written by the exception handlers carry the same id that
       the client sees in the X-Request-ID response header.
How:   Reuses the caller's X-Request-ID header when present, otherwise
       generates one; stored in a ContextVar for loggers and in
       request.state for handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests share one thread, so a threading.local
# would leak ids between them. Each request task gets its own copy.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns X-Request-ID to every request and echoes it on the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Why reuse the caller's id: a proxy or the frontend can then match
        # its own logs to ours. Eight hex chars are enough to tell concurrent
        # requests apart in one log stream.
        # Alternative considered: a full UUID. Rejected as noise in every
        # error line for no practical gain at this traffic level.
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
