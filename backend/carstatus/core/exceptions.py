"""
Car status lookup errors
"""
from typing import Optional


class CarStatusError(Exception):
    """Base error for a failed status lookup.

    ``message`` is the short, caller-facing text; ``detail`` carries the
    underlying reason (driver message, missing id) for logs and the error body.
    """

    message = "Failed to retrieve car status"

    def __init__(self, detail: str, car_id: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.car_id = car_id


class CarNotFoundError(CarStatusError):
    """No row in the cars table for the requested id"""
    pass


class NoStatusDataError(CarStatusError):
    """Car exists but the composite status query returned nothing"""
    pass


class DataAccessError(CarStatusError):
    """Connection, syntax or timeout failure while reading status data"""
    pass
