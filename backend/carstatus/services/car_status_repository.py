"""
Data access for car status lookups
"""
from sqlalchemy import Select, and_, case, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from carstatus.core.exceptions import (CarNotFoundError, DataAccessError,
                                       NoStatusDataError)
from carstatus.core.logging_config import LoggingConfig
from carstatus.models.teslamate import (Car, Charge, ChargingProcess,
                                        GlobalSettings, Position, State)
from carstatus.schemas.car_status import RawStatusRecord

logger = LoggingConfig.get_logger(__name__)


def _latest_position_id():
    """Id of the car's newest position; ties on date go to the highest id"""
    p = aliased(Position)
    return (
        select(p.id)
        .where(p.car_id == Car.id)
        .order_by(p.date.desc(), p.id.desc())
        .limit(1)
        .correlate(Car)
        .scalar_subquery()
    )


def _latest_state_id():
    s = aliased(State)
    return (
        select(s.id)
        .where(s.car_id == Car.id)
        .order_by(s.start_date.desc(), s.id.desc())
        .limit(1)
        .correlate(Car)
        .scalar_subquery()
    )


def _open_charging_process_id():
    """Newest charging process without an end date"""
    cp = aliased(ChargingProcess)
    return (
        select(cp.id)
        .where(cp.car_id == Car.id, cp.end_date.is_(None))
        .order_by(cp.start_date.desc(), cp.id.desc())
        .limit(1)
        .correlate(Car)
        .scalar_subquery()
    )


def _latest_charge_id():
    ch = aliased(Charge)
    return (
        select(ch.id)
        .where(ch.charging_process_id == ChargingProcess.id)
        .order_by(ch.date.desc(), ch.id.desc())
        .limit(1)
        .correlate(ChargingProcess)
        .scalar_subquery()
    )


def _setting(column):
    return (
        select(column)
        .order_by(GlobalSettings.id)
        .limit(1)
        .scalar_subquery()
    )


def build_status_query(car_id: int) -> Select:
    """
    Composite status query for one car

    Joins the car with its latest position, latest state, open charging
    process and that process's latest charge sample, and attaches the unit
    preferences from the settings row. Every join is outer, so an existing car
    always yields exactly one row.
    """
    charging_open = ChargingProcess.id.is_not(None)

    return (
        select(
            Car.id.label("car_id"),
            Car.name,
            Car.model,
            Car.trim_badging,
            Car.exterior_color,
            Car.wheel_type,
            Car.spoiler_type,
            Car.vin,
            # Latest position
            Position.date.label("position_date"),
            Position.latitude,
            Position.longitude,
            Position.speed,
            Position.power,
            Position.odometer,
            Position.elevation,
            Position.battery_level,
            Position.usable_battery_level,
            Position.ideal_battery_range_km,
            Position.est_battery_range_km,
            Position.rated_battery_range_km,
            Position.outside_temp,
            Position.inside_temp,
            Position.is_climate_on,
            Position.is_preconditioning,
            Position.tpms_pressure_fl,
            Position.tpms_pressure_fr,
            Position.tpms_pressure_rl,
            Position.tpms_pressure_rr,
            # Latest state
            State.state,
            State.start_date.label("state_since"),
            # Active charging
            charging_open.label("is_charging"),
            case((charging_open, "charging"), else_="disconnected").label("charging_state"),
            Charge.charger_power,
            Charge.charger_voltage,
            Charge.charger_phases,
            Charge.charger_actual_current,
            Charge.charge_energy_added,
            # Settings
            _setting(GlobalSettings.unit_of_length).label("unit_of_length"),
            _setting(GlobalSettings.unit_of_pressure).label("unit_of_pressure"),
            _setting(GlobalSettings.unit_of_temperature).label("unit_of_temperature"),
        )
        .select_from(Car)
        .outerjoin(Position, and_(Position.car_id == Car.id, Position.id == _latest_position_id()))
        .outerjoin(State, and_(State.car_id == Car.id, State.id == _latest_state_id()))
        .outerjoin(
            ChargingProcess,
            and_(ChargingProcess.car_id == Car.id, ChargingProcess.id == _open_charging_process_id()),
        )
        .outerjoin(
            Charge,
            and_(Charge.charging_process_id == ChargingProcess.id, Charge.id == _latest_charge_id()),
        )
        .where(Car.id == car_id)
    )


class CarStatusRepository:
    """Reads status data for a single car; never writes"""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, car_id: int) -> bool:
        """
        Check whether a car with this id exists

        Raises:
            DataAccessError: Query failed
        """
        try:
            return bool(self.db.execute(select(exists().where(Car.id == car_id))).scalar())
        except SQLAlchemyError as e:
            logger.error(
                "Car existence check failed",
                extra={"car_id": car_id, "error": str(e), "error_type": type(e).__name__},
            )
            raise DataAccessError(f"database error: {e}", car_id=car_id) from e

    def fetch(self, car_id: int) -> RawStatusRecord:
        """
        Run the composite status query

        Raises:
            NoStatusDataError: Query returned no row
            DataAccessError: Query failed
        """
        try:
            row = self.db.execute(build_status_query(car_id)).first()
        except SQLAlchemyError as e:
            logger.error(
                "Car status query failed",
                extra={"car_id": car_id, "error": str(e), "error_type": type(e).__name__},
            )
            raise DataAccessError(f"query failed: {e}", car_id=car_id) from e

        if row is None:
            raise NoStatusDataError(f"no data available for car ID {car_id}", car_id=car_id)

        return RawStatusRecord.model_validate(dict(row._mapping))

    def get_status_record(self, car_id: int) -> RawStatusRecord:
        """
        Existence check followed by the composite query

        Raises:
            CarNotFoundError: No car with this id
            NoStatusDataError: Car exists but the query returned no row
            DataAccessError: Query failed
        """
        if not self.exists(car_id):
            raise CarNotFoundError(f"car with ID {car_id} does not exist", car_id=car_id)
        return self.fetch(car_id)
