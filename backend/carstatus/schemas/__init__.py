"""
Pydantic schemas
"""
from .car_status import (UNSOURCED_FIELD_DEFAULTS, ErrorEnvelope,
                         RawStatusRecord, StatusEnvelope, StatusResponse)

__all__ = [
    "UNSOURCED_FIELD_DEFAULTS",
    "ErrorEnvelope",
    "RawStatusRecord",
    "StatusEnvelope",
    "StatusResponse",
]
