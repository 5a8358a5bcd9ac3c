# timesheets/services/hours.py
"""
Packs a week of hours (Saturday..Friday) into a single integer.

Every day is clamped to [0, 24], rounded to the nearest tenth of an hour and
stored as a one-byte count of tenths; day 0 (Saturday) lives in the
least-significant byte.
"""
import math
from typing import Iterable, List, Optional

from timesheets.schemas.timesheet import DAYS_IN_WEEK

MAX_DAY_HOURS = 24.0
MAX_WEEK_HOURS = MAX_DAY_HOURS * DAYS_IN_WEEK
_BYTE_MASK = 0xFF


def round_tenths(value: float) -> int:
    """Half-up rounding to an integer count of tenths."""
    return int(math.floor(value * 10 + 0.5))


def clamp_hours(value: Optional[float]) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return max(0.0, min(MAX_DAY_HOURS, float(value)))


def to_tenths(value: Optional[float]) -> int:
    return min(round_tenths(clamp_hours(value)), _BYTE_MASK)


def pack(hours: Optional[Iterable[float]]) -> int:
    values = list(hours or [])[:DAYS_IN_WEEK]
    packed = 0
    for day in range(DAYS_IN_WEEK):
        tenths = to_tenths(values[day]) if day < len(values) else 0
        packed |= (tenths & _BYTE_MASK) << (day * 8)
    return packed


def unpack(packed: int) -> List[float]:
    return [((packed >> (day * 8)) & _BYTE_MASK) / 10 for day in range(DAYS_IN_WEEK)]


def parse_number(text: Optional[str]) -> float:
    """Parse a grid cell. Blank, unparseable, NaN or negative input counts as zero."""
    if text is None or not str(text).strip():
        return 0.0
    try:
        value = float(str(text).strip())
    except ValueError:
        return 0.0
    if math.isnan(value):
        return 0.0
    return max(0.0, value)


def parse_hour(text: Optional[str]) -> float:
    return clamp_hours(parse_number(text))


def format_hour(value: float) -> str:
    return "" if value == 0 else str(value)
