"""
Leisure Catalog API — Access Log Middleware
=============================================

What:  One access-log line per HTTP request in Apache "combined" format.
Why:   The format every log shipper and analyzer already parses.
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware, so the request id is available in `extra`.

Line Format:
    %h %l %u %t "%r" %>s %b "%{Referer}i" "%{User-agent}i"

    127.0.0.1 - - [18/Oct/2026:09:15:02 +0000] "GET /api/genres HTTP/1.1" 200 19 "-" "curl/8.5.0"

Fields that are unknown are written as "-". Identity and user are always
"-" since the API has no authentication.
"""

import logging
import time
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from leisure.middleware.request_id import request_id_var

logger = logging.getLogger("leisure.access")

# Health checks run every few seconds and would drown the log
SKIP_PATHS = frozenset({"/health"})


def format_combined(
    request: Request, status: int, content_length: str, now: datetime
) -> str:
    """Render one combined-log-format line for `request`."""
    client_ip = request.client.host if request.client else "-"
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    http_version = request.scope.get("http_version", "1.1")
    timestamp = now.strftime("%d/%b/%Y:%H:%M:%S %z")
    referer = request.headers.get("referer", "-")
    user_agent = request.headers.get("user-agent", "-")
    return (
        f'{client_ip} - - [{timestamp}] "{request.method} {target} HTTP/{http_version}" '
        f'{status} {content_length or "-"} "{referer}" "{user_agent}"'
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request in combined format.

    Log level follows the status code:
        5xx → ERROR, 4xx → WARNING, 2xx/3xx → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
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
            "%s",
            format_combined(
                request,
                status,
                response.headers.get("content-length", "-"),
                datetime.now(timezone.utc),
            ),
            extra={
                "request_id": request_id_var.get(""),
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
