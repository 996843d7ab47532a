# barbershop/core.py

from datetime import time
from typing import Union


class SchedulingError(Exception):
    """Base class for errors raised while computing availability."""


class ParseError(SchedulingError, ValueError):
    """A stored or submitted time value is not a valid HH:MM[:SS] string."""


class ConfigError(SchedulingError):
    """Schedule or settings values that cannot produce a valid slot grid."""


class EmptySelectionError(SchedulingError):
    """Availability was requested without any service selected."""


MINUTES_PER_DAY = 24 * 60


def to_minutes(value: Union[str, time]) -> int:
    """Convert "HH:MM" / "HH:MM:SS" (seconds ignored) or a time to minutes since midnight.

    "24:00" is accepted as the end of the day so a shop can close at midnight.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise ParseError(f"Expected a time string, got {type(value).__name__}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ParseError(f"Malformed time value: {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if len(parts) == 3 and int(parts[2]) > 59:
        raise ParseError(f"Seconds out of range: {value!r}")
    if minute > 59:
        raise ParseError(f"Minute out of range: {value!r}")
    if hour == 24 and minute == 0:
        return MINUTES_PER_DAY
    if hour > 23:
        raise ParseError(f"Hour out of range: {value!r}")
    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Minute of day out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # touching endpoints are not an overlap, so back-to-back bookings are allowed
    return start_a < end_b and start_b < end_a
