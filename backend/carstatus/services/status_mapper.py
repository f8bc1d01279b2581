"""
Mapping of raw status rows to the complete response schema
"""
from datetime import datetime, tzinfo
from typing import Callable, Optional, TypeVar

from carstatus.schemas.car_status import (DEFAULT_UNIT_OF_LENGTH,
                                          DEFAULT_UNIT_OF_PRESSURE,
                                          DEFAULT_UNIT_OF_TEMPERATURE,
                                          UNSOURCED_FIELD_DEFAULTS,
                                          BatteryDetails, CarDetails,
                                          CarExterior, CarGeodata, CarIdentity,
                                          CarPhysicalStatus, CarStatus,
                                          CarVersions, ChargingDetails,
                                          ClimateDetails, DrivingDetails,
                                          GeoLocation, RawStatusRecord,
                                          StatusResponse, TpmsDetails, Units)
from carstatus.utils.datetime_utils import format_in_timezone, utc_now

T = TypeVar("T")

DISCONNECTED = "disconnected"


def _or(value: Optional[T], default: T) -> T:
    return default if value is None else value


def _str(value: Optional[str]) -> str:
    return _or(value, "")


def _int(value: Optional[int]) -> int:
    return int(_or(value, 0))


def _float(value: Optional[float]) -> float:
    return float(_or(value, 0.0))


def _bool(value: Optional[bool]) -> bool:
    return bool(_or(value, False))


def display_name(record: RawStatusRecord) -> str:
    """Car name, else model, else "Car <id>" """
    if record.name:
        return record.name
    if record.model is not None:
        return record.model
    return f"Car {record.car_id}"


def charging_state(record: RawStatusRecord) -> str:
    return record.charging_state or DISCONNECTED


class StatusMapper:
    """
    Builds a StatusResponse from a RawStatusRecord

    Every missing value is replaced by its type default (0, 0.0, False, "")
    and fields TeslaMate has no column for come from UNSOURCED_FIELD_DEFAULTS,
    so the result never contains a null.
    """

    def __init__(self, display_timezone: tzinfo, clock: Callable[[], datetime] = utc_now):
        self.display_timezone = display_timezone
        self.clock = clock

    def map_to_response(self, record: RawStatusRecord, vehicle_state: str) -> StatusResponse:
        """
        Map a raw status row and its resolved state to the response schema

        Args:
            record: Raw status row
            vehicle_state: Output of the state resolver

        Returns:
            StatusResponse in stored units (km, C, bar)
        """
        return StatusResponse(
            car=CarIdentity(car_id=record.car_id, car_name=_str(record.name)),
            status=CarStatus(
                display_name=display_name(record),
                state=vehicle_state,
                state_since=self._format_time(record.state_since),
                odometer=_float(record.odometer),
                car_status=CarPhysicalStatus(**UNSOURCED_FIELD_DEFAULTS["car_status"]),
                car_details=self._car_details(record),
                car_exterior=self._car_exterior(record),
                car_geodata=self._car_geodata(record),
                car_versions=CarVersions(**UNSOURCED_FIELD_DEFAULTS["car_versions"]),
                driving_details=self._driving_details(record),
                climate_details=self._climate_details(record),
                battery_details=self._battery_details(record),
                charging_details=self._charging_details(record),
                tpms_details=self._tpms_details(record),
            ),
            units=self._units(record),
        )

    def _format_time(self, value: Optional[datetime]) -> str:
        """Render in the display timezone; a missing timestamp means "now" """
        if value is None:
            value = self.clock()
        return format_in_timezone(value, self.display_timezone)

    def _car_details(self, record: RawStatusRecord) -> CarDetails:
        return CarDetails(
            model=_str(record.model),
            trim_badging=_str(record.trim_badging),
        )

    def _car_exterior(self, record: RawStatusRecord) -> CarExterior:
        return CarExterior(
            exterior_color=_str(record.exterior_color),
            spoiler_type=_str(record.spoiler_type),
            wheel_type=_str(record.wheel_type),
        )

    def _car_geodata(self, record: RawStatusRecord) -> CarGeodata:
        return CarGeodata(
            location=GeoLocation(
                latitude=_float(record.latitude),
                longitude=_float(record.longitude),
            ),
            **UNSOURCED_FIELD_DEFAULTS["car_geodata"],
        )

    def _driving_details(self, record: RawStatusRecord) -> DrivingDetails:
        return DrivingDetails(
            power=_int(record.power),
            speed=_int(record.speed),
            elevation=_int(record.elevation),
            **UNSOURCED_FIELD_DEFAULTS["driving_details"],
        )

    def _climate_details(self, record: RawStatusRecord) -> ClimateDetails:
        return ClimateDetails(
            is_climate_on=_bool(record.is_climate_on),
            inside_temp=_float(record.inside_temp),
            outside_temp=_float(record.outside_temp),
            is_preconditioning=_bool(record.is_preconditioning),
        )

    def _battery_details(self, record: RawStatusRecord) -> BatteryDetails:
        return BatteryDetails(
            est_battery_range=_float(record.est_battery_range_km),
            rated_battery_range=_float(record.rated_battery_range_km),
            ideal_battery_range=_float(record.ideal_battery_range_km),
            battery_level=_int(record.battery_level),
            usable_battery_level=_int(record.usable_battery_level),
        )

    def _charging_details(self, record: RawStatusRecord) -> ChargingDetails:
        plugged_in = _bool(record.is_charging)
        return ChargingDetails(
            plugged_in=plugged_in,
            charging_state=charging_state(record),
            charge_energy_added=_float(record.charge_energy_added),
            # No door sensor in TeslaMate; an open session implies an open port
            charge_port_door_open=plugged_in,
            charger_actual_current=_float(record.charger_actual_current),
            charger_phases=_int(record.charger_phases),
            charger_power=_float(record.charger_power),
            charger_voltage=_int(record.charger_voltage),
            **UNSOURCED_FIELD_DEFAULTS["charging_details"],
        )

    def _tpms_details(self, record: RawStatusRecord) -> TpmsDetails:
        return TpmsDetails(
            tpms_pressure_fl=_float(record.tpms_pressure_fl),
            tpms_pressure_fr=_float(record.tpms_pressure_fr),
            tpms_pressure_rl=_float(record.tpms_pressure_rl),
            tpms_pressure_rr=_float(record.tpms_pressure_rr),
        )

    def _units(self, record: RawStatusRecord) -> Units:
        return Units(
            unit_of_length=_or(record.unit_of_length, DEFAULT_UNIT_OF_LENGTH),
            unit_of_pressure=_or(record.unit_of_pressure, DEFAULT_UNIT_OF_PRESSURE),
            unit_of_temperature=_or(record.unit_of_temperature, DEFAULT_UNIT_OF_TEMPERATURE),
        )
