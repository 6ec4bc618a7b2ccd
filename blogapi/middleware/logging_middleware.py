"""Request/response logging middleware."""
import time
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from blogapi.utils import generate_id

logger = logging.getLogger("blogapi.requests")

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its outcome and tag the response with a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_id()
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "unknown"

        logger.info("-> %s %s [%s] id=%s", method, path, client, request_id)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "xx %s %s FAILED after %.0fms id=%s: %s",
                method,
                path,
                duration_ms,
                request_id,
                str(e),
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "<- %s %s %d (%.0fms) id=%s",
            method,
            path,
            response.status_code,
            duration_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
