"""
Vehicle state resolution
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from carstatus.schemas.car_status import RawStatusRecord
from carstatus.utils.datetime_utils import ensure_utc, utc_now

ONLINE_WINDOW = timedelta(minutes=5)
ASLEEP_WINDOW = timedelta(minutes=30)


class InferredState(str, Enum):
    """States derived from position recency when no state row exists"""
    ONLINE = "online"
    ASLEEP = "asleep"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


def has_recorded_state(record: RawStatusRecord) -> bool:
    return bool(record.state)


def resolve_vehicle_state(record: RawStatusRecord, now: Optional[datetime] = None) -> str:
    """
    Determine the vehicle state for a status record

    A recorded lifecycle state wins. Otherwise the age of the last position
    decides: under 5 minutes is online, under 30 minutes asleep, anything older
    offline. Without either the state is unknown.

    Args:
        record: Raw status row
        now: Reference time (defaults to current UTC time)

    Returns:
        State label, never empty
    """
    if has_recorded_state(record):
        return record.state

    if record.position_date is None:
        return InferredState.UNKNOWN.value

    reference = ensure_utc(now) if now is not None else utc_now()
    elapsed = reference - ensure_utc(record.position_date)

    if elapsed < ONLINE_WINDOW:
        return InferredState.ONLINE.value
    if elapsed < ASLEEP_WINDOW:
        return InferredState.ASLEEP.value
    return InferredState.OFFLINE.value
