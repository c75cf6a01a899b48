import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("coursetrack.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access-log line per request: method, path, status and duration."""

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()
        client = request.client.host if request.client else "-"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s from %s failed after %.3fs",
                request.method,
                request.url.path,
                client,
                time.monotonic() - start,
            )
            raise

        logger.info(
            "%s %s from %s -> %s (%.3fs)",
            request.method,
            request.url.path,
            client,
            response.status_code,
            time.monotonic() - start,
        )
        return response
