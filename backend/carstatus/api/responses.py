"""
Success and error envelopes for API responses
"""
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from carstatus.core.config import get_settings
from carstatus.core.logging_config import LoggingConfig
from carstatus.schemas.car_status import ErrorEnvelope

logger = LoggingConfig.get_logger(__name__)


def success_response(endpoint: str, payload: BaseModel) -> JSONResponse:
    """Wrap a payload as {"data": ...}"""
    logger.debug(f"{endpoint} - success")
    return JSONResponse(status_code=200, content={"data": payload.model_dump(mode="json")})


def error_response(endpoint: str, message: str, detail: Any) -> JSONResponse:
    """
    Wrap a failure as {"error": message, "detail": detail}

    The HTTP status is the configured ERROR_STATUS_CODE for every kind of
    failure; callers only see the message and the detail text.
    """
    logger.error(
        f"{endpoint} - {message}; {detail}",
        extra={"endpoint": endpoint},
    )
    body = ErrorEnvelope(error=message, detail=str(detail))
    return JSONResponse(status_code=get_settings().error_status_code, content=body.model_dump())
