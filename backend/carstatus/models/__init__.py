"""
SQLAlchemy models
"""
from carstatus.core.database import Base
from carstatus.models.teslamate import (Car, Charge,  # noqa: F401
                                        ChargingProcess, GlobalSettings,
                                        Position, State)

__all__ = [
    "Base",
    "Car",
    "Charge",
    "ChargingProcess",
    "GlobalSettings",
    "Position",
    "State",
]
