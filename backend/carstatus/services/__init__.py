"""
Car status services
"""
from .car_status_repository import CarStatusRepository, build_status_query
from .car_status_service import CarStatusService
from .state_resolver import InferredState, resolve_vehicle_state
from .status_mapper import StatusMapper
from .unit_converter import apply_unit_preferences

__all__ = [
    "CarStatusRepository",
    "CarStatusService",
    "InferredState",
    "StatusMapper",
    "apply_unit_preferences",
    "build_status_query",
    "resolve_vehicle_state",
]
