"""
Request context middleware

Every log line written while a request is in flight carries its request id,
method and normalized route, plus the car id for ``/api/v1/cars/{id}/...``.
"""
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from carstatus.core.logging_config import LoggingConfig
from carstatus.core.middleware_metrics import normalize_endpoint

logger = LoggingConfig.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def car_id_from_path(path: str) -> Optional[str]:
    """Raw car id segment of a cars API path, if any"""
    parts = path.strip("/").split("/")
    if "cars" in parts:
        index = parts.index("cars") + 1
        if index < len(parts) and parts[index]:
            return parts[index]
    return None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Binds request context for logging and echoes the request id"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        context = {
            "request_id": request_id,
            "method": request.method,
            "route": normalize_endpoint(request.url.path),
        }
        car_id = car_id_from_path(request.url.path)
        if car_id is not None:
            context["car_id"] = car_id
        LoggingConfig.set_context(**context)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                },
            )
            raise
        else:
            level = "warning" if response.status_code >= 400 else "info"
            getattr(logger, level)(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                },
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            LoggingConfig.clear_context()
