"""
Unit conversion for status responses

TeslaMate stores distances in kilometers, temperatures in Celsius and tire
pressures in bar. The site-wide settings row carries the units the user wants
to see; conversion runs on the finished response.
"""
from carstatus.schemas.car_status import StatusResponse

KM_TO_MILES = 0.621371192237334
BAR_TO_PSI = 14.503773773


def km_to_miles(km: float) -> float:
    return km * KM_TO_MILES


def km_to_miles_int(km: int) -> int:
    """Integer speeds (km/h -> mph), rounded half away from zero"""
    miles = km * KM_TO_MILES
    return int(miles + 0.5) if miles >= 0 else -int(-miles + 0.5)


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def bar_to_psi(bar: float) -> float:
    return bar * BAR_TO_PSI


def needs_conversion(response: StatusResponse) -> bool:
    """True when any preferred unit differs from the stored one"""
    units = response.units
    return (
        units.unit_of_length == "mi"
        or units.unit_of_temperature == "F"
        or units.unit_of_pressure == "psi"
    )


def apply_unit_preferences(response: StatusResponse) -> StatusResponse:
    """
    Convert distance, speed, temperature and pressure fields to the preferred units

    Args:
        response: Fully mapped response in stored units (km, C, bar)

    Returns:
        The same object when nothing needs converting, otherwise a converted deep copy
    """
    if not needs_conversion(response):
        return response

    converted = response.model_copy(deep=True)
    status = converted.status
    units = converted.units

    if units.unit_of_length == "mi":
        status.odometer = km_to_miles(status.odometer)
        battery = status.battery_details
        battery.est_battery_range = km_to_miles(battery.est_battery_range)
        battery.rated_battery_range = km_to_miles(battery.rated_battery_range)
        battery.ideal_battery_range = km_to_miles(battery.ideal_battery_range)
        status.driving_details.speed = km_to_miles_int(status.driving_details.speed)

    if units.unit_of_temperature == "F":
        climate = status.climate_details
        climate.inside_temp = celsius_to_fahrenheit(climate.inside_temp)
        climate.outside_temp = celsius_to_fahrenheit(climate.outside_temp)

    if units.unit_of_pressure == "psi":
        tpms = status.tpms_details
        tpms.tpms_pressure_fl = bar_to_psi(tpms.tpms_pressure_fl)
        tpms.tpms_pressure_fr = bar_to_psi(tpms.tpms_pressure_fr)
        tpms.tpms_pressure_rl = bar_to_psi(tpms.tpms_pressure_rl)
        tpms.tpms_pressure_rr = bar_to_psi(tpms.tpms_pressure_rr)

    return converted
