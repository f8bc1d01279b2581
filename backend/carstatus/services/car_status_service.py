"""
Car status pipeline
"""
from datetime import datetime, tzinfo
from typing import Callable

from sqlalchemy.orm import Session

from carstatus.core.exceptions import (CarNotFoundError, CarStatusError,
                                       DataAccessError, NoStatusDataError)
from carstatus.core.logging_config import LoggingConfig
from carstatus.core.metrics import (car_status_lookup_duration_seconds,
                                    car_status_requests_total,
                                    car_status_resolved_state_total)
from carstatus.schemas.car_status import StatusResponse
from carstatus.services.car_status_repository import CarStatusRepository
from carstatus.services.state_resolver import (has_recorded_state,
                                               resolve_vehicle_state)
from carstatus.services.status_mapper import StatusMapper
from carstatus.services.unit_converter import apply_unit_preferences
from carstatus.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)

_OUTCOMES = {
    CarNotFoundError: "not_found",
    NoStatusDataError: "no_data",
    DataAccessError: "data_access_error",
}


class CarStatusService:
    """
    Answers "what is car X's status right now" from stored TeslaMate data

    Pipeline: existence check -> composite read -> state resolution ->
    mapping -> unit conversion. Only the two reads can fail.
    """

    def __init__(
        self,
        db: Session,
        display_timezone: tzinfo,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = CarStatusRepository(db)
        self.mapper = StatusMapper(display_timezone, clock=clock)
        self.clock = clock

    def get_status(self, car_id: int) -> StatusResponse:
        """
        Build the complete status response for a car

        Args:
            car_id: Car id (0 for unparseable path input)

        Returns:
            StatusResponse in the user's preferred units

        Raises:
            CarNotFoundError: No car with this id
            NoStatusDataError: Car exists but has no status row
            DataAccessError: Database failure
        """
        with car_status_lookup_duration_seconds.time():
            try:
                record = self.repository.get_status_record(car_id)
            except CarStatusError as e:
                car_status_requests_total.labels(outcome=_OUTCOMES.get(type(e), "error")).inc()
                raise

            vehicle_state = resolve_vehicle_state(record, now=self.clock())
            response = self.mapper.map_to_response(record, vehicle_state)
            response = apply_unit_preferences(response)

        car_status_requests_total.labels(outcome="success").inc()
        car_status_resolved_state_total.labels(
            state=vehicle_state,
            source="recorded" if has_recorded_state(record) else "inferred",
        ).inc()

        logger.debug(
            f"Car {car_id}: state={vehicle_state}, "
            f"charging_state={response.status.charging_details.charging_state}, "
            f"plugged_in={response.status.charging_details.plugged_in}",
            extra={"car_id": car_id, "is_charging_from_db": bool(record.is_charging)},
        )
        return response
