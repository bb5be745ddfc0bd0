import logging
import time
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

request_context: ContextVar[Optional[Request]] = ContextVar("request_context", default=None)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Expose the current request through `request_context` and log each request."""

    async def dispatch(self, request: Request, call_next):
        token = request_context.set(request)
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.exception("%s %s failed (%.1f ms)", request.method, request.url.path, latency_ms)
            raise
        finally:
            request_context.reset(token)

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.url.path, response.status_code, latency_ms
        )
        return response


class RequestContextFilter(logging.Filter):
    """Tag log records with the path of the request being served"""

    def filter(self, record: logging.LogRecord) -> bool:
        request = request_context.get()
        record.request_path = request.url.path if request is not None else "-"
        return True
