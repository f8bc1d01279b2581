"""
Middleware for collecting HTTP request metrics
"""
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from carstatus.core.metrics import (http_errors_total,
                                    http_request_duration_seconds,
                                    http_requests_total)

# Not counted
SKIPPED_PATHS = frozenset({"/metrics"})


def normalize_endpoint(path: str) -> str:
    """Collapse car ids in API paths so metrics aggregate per route"""
    if not path.startswith("/api/"):
        return path
    parts = path.split("/")
    for i, part in enumerate(parts):
        if i > 0 and parts[i - 1] == "cars" and part:
            parts[i] = "{id}"
    return "/".join(parts)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records count, latency and errors per method, route and status"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status_code = 500
        error_type = "http_error"
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            labels = {
                "method": request.method,
                "endpoint": normalize_endpoint(request.url.path),
                "status_code": str(status_code),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(time.perf_counter() - started)
            if status_code >= 400:
                http_errors_total.labels(error_type=error_type, **labels).inc()
