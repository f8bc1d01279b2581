"""
Path parameter helpers
"""
import re
from typing import Optional

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def parse_car_id(raw: Optional[str]) -> int:
    """Parse a car id path segment; anything that is not a plain integer becomes 0.

    Only ASCII digits with an optional sign are accepted, and the value must fit
    a signed 64-bit integer. Id 0 never exists in TeslaMate, so a malformed id
    ends up as an ordinary "car not found" lookup instead of a separate
    validation error.
    """
    if raw is None or not _INT_PATTERN.fullmatch(raw):
        return 0
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return 0
    return value
