"""
Car status endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from carstatus.api.responses import error_response, success_response
from carstatus.core.config import get_display_timezone, get_settings
from carstatus.core.database import get_db
from carstatus.core.exceptions import CarStatusError
from carstatus.core.logging_config import LoggingConfig
from carstatus.schemas.car_status import ErrorEnvelope, StatusEnvelope
from carstatus.services.car_status_service import CarStatusService
from carstatus.utils.convert import parse_car_id

router = APIRouter(prefix="/api/v1/cars", tags=["cars"])
logger = LoggingConfig.get_logger(__name__)


def get_car_status_service(db: Session = Depends(get_db)) -> CarStatusService:
    """Dependency building the status pipeline for one request"""
    return CarStatusService(db, get_display_timezone())


@router.get(
    "/{car_id}/status",
    response_model=StatusEnvelope,
    responses={get_settings().error_status_code: {"model": ErrorEnvelope}},
)
def get_car_status(
    car_id: str,
    service: CarStatusService = Depends(get_car_status_service),
):
    """
    Current status of one car

    The path segment is parsed leniently: anything that is not an integer is
    treated as car 0, which does not exist.
    """
    parsed_id = parse_car_id(car_id)
    try:
        status = service.get_status(parsed_id)
    except CarStatusError as e:
        return error_response("get_car_status", e.message, e.detail)

    return success_response("get_car_status", status)
