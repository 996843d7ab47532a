# barbershop/availability.py
"""Slot availability for a single day.

Everything here is pure: callers load the day's rows once, convert them to the
value objects below and pass the current time in explicitly. The result is a
snapshot, not a reservation; the booking route re-checks on write and the
database index rejects duplicate starts.
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from barbershop.core import (
    MINUTES_PER_DAY,
    ConfigError,
    EmptySelectionError,
    format_minutes,
    intervals_overlap,
    to_minutes,
)
from barbershop.schemas import AppointmentStatus

DEFAULT_SLOT_INTERVAL = 30

TimeValue = Union[str, time]

OCCUPYING_STATUSES = frozenset(
    {AppointmentStatus.pending, AppointmentStatus.confirmed, AppointmentStatus.finished}
)


class BlockReason(str, Enum):
    full_day = "full_day"
    blocked = "blocked"
    past = "past"
    lunch_break = "break"
    booked = "booked"
    closing = "closing"


class ServiceSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration_minutes: int = Field(gt=0)
    buffer_minutes: int = Field(default=0, ge=0)


class DaySchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_open: bool = True
    open_time: TimeValue
    close_time: TimeValue
    break_start: Optional[TimeValue] = None
    break_end: Optional[TimeValue] = None


class BookedAppointment(BaseModel):
    model_config = ConfigDict(frozen=True)

    appointment_time: TimeValue
    duration_minutes: int = Field(ge=0)
    buffer_minutes: int = Field(default=0, ge=0)
    status: AppointmentStatus = AppointmentStatus.confirmed
    actual_end_time: Optional[TimeValue] = None


class BlockedTime(BaseModel):
    model_config = ConfigDict(frozen=True)

    blocked_time: Optional[TimeValue] = None
    full_day: bool = False


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: str
    available: bool
    reason: Optional[BlockReason] = None


def effective_duration(services: Iterable[ServiceSpec]) -> int:
    return sum(s.duration_minutes for s in services)


def effective_buffer(services: Iterable[ServiceSpec]) -> int:
    # the longest clean-up wins; buffers are not additive
    return max((s.buffer_minutes for s in services), default=0)


def generate_slots(open_minute: int, close_minute: int, interval_minutes: int = DEFAULT_SLOT_INTERVAL) -> List[int]:
    """Candidate start minutes from opening, one every interval, all before closing."""
    if interval_minutes <= 0:
        raise ConfigError(f"Slot interval must be positive, got {interval_minutes}")
    return list(range(open_minute, close_minute, interval_minutes))


def occupied_window(appt: BookedAppointment) -> tuple:
    start = to_minutes(appt.appointment_time)
    if appt.actual_end_time is not None:
        return start, to_minutes(appt.actual_end_time)
    return start, start + appt.duration_minutes + appt.buffer_minutes


def duration_fits_day(schedule: Optional[DaySchedule], duration_minutes: int) -> bool:
    if schedule is None or not schedule.is_open:
        return False
    return to_minutes(schedule.open_time) + duration_minutes <= to_minutes(schedule.close_time)


def _break_window(schedule: DaySchedule) -> Optional[tuple]:
    if schedule.break_start is None or schedule.break_end is None:
        return None
    start, end = to_minutes(schedule.break_start), to_minutes(schedule.break_end)
    if start >= end:
        raise ConfigError(
            f"Break must end after it starts ({schedule.break_start} - {schedule.break_end})"
        )
    return start, end


def _past_cutoff(day: date, now: datetime) -> Optional[int]:
    """Last minute of ``day`` that is already gone, or None when nothing is."""
    today = now.date()
    if day < today:
        return MINUTES_PER_DAY
    if day == today:
        return now.hour * 60 + now.minute
    return None


def resolve(
    day: date,
    services: Sequence[ServiceSpec],
    schedule: Optional[DaySchedule],
    appointments: Iterable[BookedAppointment],
    blocks: Iterable[BlockedTime],
    interval_minutes: int,
    now: datetime,
    break_includes_buffer: bool = False,
) -> List[Slot]:
    """Return every grid slot of ``day`` flagged available or blocked.

    A slot carries the first matching reason, checked in this order:
    full-day block, blocked start time, already past, break, existing
    booking, not finishing before close.
    """
    if not services:
        raise EmptySelectionError("At least one service must be selected")
    if schedule is None or not schedule.is_open:
        return []

    duration = effective_duration(services)
    buffer = effective_buffer(services)

    open_minute = to_minutes(schedule.open_time)
    close_minute = to_minutes(schedule.close_time)
    candidates = generate_slots(open_minute, close_minute, interval_minutes)

    blocks = list(blocks)
    full_day = any(b.full_day or b.blocked_time is None for b in blocks)
    blocked_starts = {to_minutes(b.blocked_time) for b in blocks if not b.full_day and b.blocked_time is not None}

    break_window = _break_window(schedule)
    break_extent = duration + buffer if break_includes_buffer else duration

    occupied = [
        occupied_window(a) for a in appointments
        if AppointmentStatus(a.status) in OCCUPYING_STATUSES
    ]
    past_cutoff = _past_cutoff(day, now)

    slots = []
    for start in candidates:
        reason = None
        if full_day:
            reason = BlockReason.full_day
        elif start in blocked_starts:
            reason = BlockReason.blocked
        elif past_cutoff is not None and start <= past_cutoff:
            reason = BlockReason.past
        elif break_window and intervals_overlap(start, start + break_extent, *break_window):
            reason = BlockReason.lunch_break
        elif any(intervals_overlap(start, start + duration + buffer, a_start, a_end) for a_start, a_end in occupied):
            reason = BlockReason.booked
        elif start + duration > close_minute:
            reason = BlockReason.closing

        slots.append(Slot(time=format_minutes(start), available=reason is None, reason=reason))

    return slots


def available_times(slots: Iterable[Slot]) -> List[str]:
    return [s.time for s in slots if s.available]
