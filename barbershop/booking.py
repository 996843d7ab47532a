# barbershop/booking.py
# Loads one day of rows and feeds them to the availability resolver.

from contextlib import contextmanager
from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlmodel import Session, select

from barbershop.availability import (
    BlockedTime,
    BookedAppointment,
    DaySchedule,
    ServiceSpec,
    Slot,
    effective_buffer,
    effective_duration,
    occupied_window,
    resolve,
)
from barbershop.config import settings
from barbershop.core import ConfigError, EmptySelectionError, ParseError, to_minutes
from barbershop.data import SETTING_BUSINESS_NAME, SETTING_SLOT_INTERVAL
from barbershop.logging_config import setup_logger
from barbershop.models import Appointment, BlockedSlot, BusinessSetting, ScheduleConfig, Service
from barbershop.schemas import AppointmentStatus

logger = setup_logger(__name__)


def shop_now() -> datetime:
    """Current wall-clock time at the shop, without tzinfo (rows store naive times)."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


@contextmanager
def scheduling_errors():
    try:
        yield
    except EmptySelectionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (ParseError, ConfigError) as e:
        logger.error("Schedule configuration is invalid: %s", e)
        raise HTTPException(status_code=500, detail="Schedule configuration is invalid")


def get_slot_interval(session: Session) -> int:
    row = session.get(BusinessSetting, SETTING_SLOT_INTERVAL)
    if row is None:
        return settings.DEFAULT_SLOT_INTERVAL
    try:
        return int(row.value)
    except ValueError:
        raise ConfigError(f"{SETTING_SLOT_INTERVAL} is not an integer: {row.value!r}")


def get_business_name(session: Session) -> str:
    row = session.get(BusinessSetting, SETTING_BUSINESS_NAME)
    return row.value if row is not None else settings.BUSINESS_NAME


def load_services(session: Session, service_ids: Sequence[int], active_only: bool = True) -> List[Service]:
    """Fetch services in the order requested; 422 if any id is unknown (or inactive)."""
    if not service_ids:
        raise HTTPException(status_code=422, detail="Select at least one service")
    if len(set(service_ids)) != len(service_ids):
        raise HTTPException(status_code=422, detail="service_ids cannot contain duplicates")

    rows = session.exec(select(Service).where(Service.id.in_(service_ids))).all()
    by_id = {s.id: s for s in rows}
    missing = [i for i in service_ids if i not in by_id or (active_only and not by_id[i].active)]
    if missing:
        raise HTTPException(status_code=422, detail=f"Service not available: {missing}")
    return [by_id[i] for i in service_ids]


def to_spec(service: Service) -> ServiceSpec:
    return ServiceSpec(duration_minutes=service.duration_minutes, buffer_minutes=service.buffer_minutes)


def total_price(services: Sequence[Service]) -> Decimal:
    return sum((Decimal(s.price) for s in services), Decimal("0.00"))


def _booked(appt: Appointment, catalog: Dict[int, Service]) -> BookedAppointment:
    specs = [to_spec(catalog[i]) for i in appt.service_ids or [] if i in catalog]
    if specs:
        duration, buffer = effective_duration(specs), effective_buffer(specs)
    else:
        # only custom items, or services that no longer exist
        duration, buffer = settings.DEFAULT_SERVICE_DURATION, settings.DEFAULT_SERVICE_BUFFER
    return BookedAppointment(
        appointment_time=appt.appointment_time,
        duration_minutes=duration,
        buffer_minutes=buffer,
        status=appt.status,
        actual_end_time=appt.actual_end_time,
    )


def early_finish_time(session: Session, appt: Appointment, now: datetime) -> Optional[time]:
    """Minute the service actually ended, when that cuts its booked window short.

    Only a finish on the appointment's own day, after it started and before
    its scheduled end, shortens occupancy. Anything else keeps the full window.
    """
    if now.date() != appt.appointment_date:
        return None
    catalog = {s.id: s for s in session.exec(select(Service)).all()}
    start, end = occupied_window(_booked(appt, catalog))
    finished = now.time().replace(second=0, microsecond=0)
    if start < to_minutes(finished) < end:
        return finished
    return None


def load_schedule(session: Session, day: date) -> Optional[DaySchedule]:
    row = session.get(ScheduleConfig, day.weekday())
    if row is None:
        return None
    return DaySchedule(
        is_open=row.is_open,
        open_time=row.open_time,
        close_time=row.close_time,
        break_start=row.break_start,
        break_end=row.break_end,
    )


def load_day(session: Session, day: date):
    """Return (schedule, booked appointments, blocks) for ``day``."""
    schedule = load_schedule(session, day)

    appts = session.exec(
        select(Appointment)
        .where(Appointment.appointment_date == day)
        .where(Appointment.status != AppointmentStatus.cancelled.value)
    ).all()
    catalog = {s.id: s for s in session.exec(select(Service)).all()}
    booked = [_booked(a, catalog) for a in appts]

    blocks = [
        BlockedTime(blocked_time=b.blocked_time, full_day=b.full_day)
        for b in session.exec(select(BlockedSlot).where(BlockedSlot.blocked_date == day)).all()
    ]
    return schedule, booked, blocks


def compute_slots(
    session: Session,
    day: date,
    services: Sequence[Service],
    now: Optional[datetime] = None,
) -> List[Slot]:
    schedule, booked, blocks = load_day(session, day)
    return resolve(
        day,
        [to_spec(s) for s in services],
        schedule,
        booked,
        blocks,
        interval_minutes=get_slot_interval(session),
        now=now or shop_now(),
        break_includes_buffer=settings.BREAK_INCLUDES_BUFFER,
    )
