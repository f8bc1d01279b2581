"""
Car status schemas

``RawStatusRecord`` is the nullable row produced by the composite status query.
``StatusResponse`` is the always-complete contract served to clients: every
field has a value, nothing is ever ``null``.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawStatusRecord(BaseModel):
    """One car's latest known data; ``None`` means the value is unknown"""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    # Identity
    car_id: int
    name: Optional[str] = None
    model: Optional[str] = None
    trim_badging: Optional[str] = None
    exterior_color: Optional[str] = None
    wheel_type: Optional[str] = None
    spoiler_type: Optional[str] = None
    vin: Optional[str] = None

    # Latest position
    position_date: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    speed: Optional[int] = None
    power: Optional[int] = None
    odometer: Optional[float] = None
    elevation: Optional[int] = None
    battery_level: Optional[int] = None
    usable_battery_level: Optional[int] = None
    ideal_battery_range_km: Optional[float] = None
    est_battery_range_km: Optional[float] = None
    rated_battery_range_km: Optional[float] = None
    outside_temp: Optional[float] = None
    inside_temp: Optional[float] = None
    is_climate_on: Optional[bool] = None
    is_preconditioning: Optional[bool] = None
    tpms_pressure_fl: Optional[float] = None
    tpms_pressure_fr: Optional[float] = None
    tpms_pressure_rl: Optional[float] = None
    tpms_pressure_rr: Optional[float] = None

    # Latest lifecycle state
    state: Optional[str] = None
    state_since: Optional[datetime] = None

    # Active charging
    is_charging: Optional[bool] = None
    charging_state: Optional[str] = None
    charger_power: Optional[int] = None
    charger_voltage: Optional[int] = None
    charger_phases: Optional[int] = None
    charger_actual_current: Optional[int] = None
    charge_energy_added: Optional[float] = None

    # Site-wide unit preferences
    unit_of_length: Optional[str] = None
    unit_of_pressure: Optional[str] = None
    unit_of_temperature: Optional[str] = None


# ============================================================================
# Response schema
# ============================================================================

class CarIdentity(BaseModel):
    car_id: int = 0
    car_name: str = ""


class CarPhysicalStatus(BaseModel):
    healthy: bool = False
    locked: bool = False
    sentry_mode: bool = False
    windows_open: bool = False
    doors_open: bool = False
    trunk_open: bool = False
    frunk_open: bool = False
    is_user_present: bool = False


class CarDetails(BaseModel):
    model: str = ""
    trim_badging: str = ""


class CarExterior(BaseModel):
    exterior_color: str = ""
    spoiler_type: str = ""
    wheel_type: str = ""


class GeoLocation(BaseModel):
    latitude: float = 0.0
    longitude: float = 0.0


class CarGeodata(BaseModel):
    geofence: str = ""
    location: GeoLocation = Field(default_factory=GeoLocation)


class CarVersions(BaseModel):
    version: str = ""
    update_available: bool = False
    update_version: str = ""


class DrivingDetails(BaseModel):
    shift_state: str = ""
    power: int = 0
    speed: int = 0
    heading: int = 0
    elevation: int = 0


class ClimateDetails(BaseModel):
    is_climate_on: bool = False
    inside_temp: float = 0.0
    outside_temp: float = 0.0
    is_preconditioning: bool = False


class BatteryDetails(BaseModel):
    est_battery_range: float = 0.0
    rated_battery_range: float = 0.0
    ideal_battery_range: float = 0.0
    battery_level: int = 0
    usable_battery_level: int = 0


class ChargingDetails(BaseModel):
    plugged_in: bool = False
    charging_state: str = "disconnected"
    charge_energy_added: float = 0.0
    charge_limit_soc: int = 0
    charge_port_door_open: bool = False
    charger_actual_current: float = 0.0
    charger_phases: int = 0
    charger_power: float = 0.0
    charger_voltage: int = 0
    charge_current_request: int = 0
    charge_current_request_max: int = 0
    scheduled_charging_start_time: str = ""
    time_to_full_charge: float = 0.0


class TpmsDetails(BaseModel):
    tpms_pressure_fl: float = 0.0
    tpms_pressure_fr: float = 0.0
    tpms_pressure_rl: float = 0.0
    tpms_pressure_rr: float = 0.0


class CarStatus(BaseModel):
    display_name: str = ""
    state: str = ""
    state_since: str = ""
    odometer: float = 0.0
    car_status: CarPhysicalStatus = Field(default_factory=CarPhysicalStatus)
    car_details: CarDetails = Field(default_factory=CarDetails)
    car_exterior: CarExterior = Field(default_factory=CarExterior)
    car_geodata: CarGeodata = Field(default_factory=CarGeodata)
    car_versions: CarVersions = Field(default_factory=CarVersions)
    driving_details: DrivingDetails = Field(default_factory=DrivingDetails)
    climate_details: ClimateDetails = Field(default_factory=ClimateDetails)
    battery_details: BatteryDetails = Field(default_factory=BatteryDetails)
    charging_details: ChargingDetails = Field(default_factory=ChargingDetails)
    tpms_details: TpmsDetails = Field(default_factory=TpmsDetails)


class Units(BaseModel):
    unit_of_length: str = "km"
    unit_of_pressure: str = "bar"
    unit_of_temperature: str = "C"


class StatusResponse(BaseModel):
    """Complete status of one car"""
    car: CarIdentity = Field(default_factory=CarIdentity)
    status: CarStatus = Field(default_factory=CarStatus)
    units: Units = Field(default_factory=Units)


class StatusEnvelope(BaseModel):
    """Success body of the status endpoint"""
    data: StatusResponse


class ErrorEnvelope(BaseModel):
    """Error body shared by every failed status lookup"""
    error: str
    detail: str = ""


# Fields the TeslaMate schema has no column for. The mapper applies these
# unconditionally, keyed by CarStatus section and then field name.
UNSOURCED_FIELD_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "car_status": {
        "healthy": True,  # a car with a stored row is reported healthy
        "locked": False,
        "sentry_mode": False,
        "windows_open": False,
        "doors_open": False,
        "trunk_open": False,
        "frunk_open": False,
        "is_user_present": False,
    },
    "car_versions": {
        "version": "",
        "update_available": False,
        "update_version": "",
    },
    "car_geodata": {
        "geofence": "",
    },
    "driving_details": {
        "shift_state": "",
        "heading": 0,
    },
    "charging_details": {
        "charge_limit_soc": 0,
        "charge_current_request": 0,
        "charge_current_request_max": 0,
        "scheduled_charging_start_time": "",
        "time_to_full_charge": 0.0,
    },
}

# Stored TeslaMate units, also used when the settings row is missing a value
DEFAULT_UNIT_OF_LENGTH = "km"
DEFAULT_UNIT_OF_PRESSURE = "bar"
DEFAULT_UNIT_OF_TEMPERATURE = "C"
