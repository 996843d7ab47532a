# barbershop/routers/appointments_routes.py

from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.booking import (
    compute_slots,
    early_finish_time,
    get_business_name,
    load_services,
    scheduling_errors,
    shop_now,
    total_price,
)
from barbershop.config import settings
from barbershop.db import get_session
from barbershop.deps import get_admin_user
from barbershop.logging_config import setup_logger
from barbershop.messaging import booking_confirmation_url, reminder_url
from barbershop.models import Appointment, utcnow
from barbershop.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentServicesUpdate,
    AppointmentStatus,
    BookingConfirmation,
    DashboardSummary,
    PaymentMethod,
    ReminderLink,
    StatusUpdate,
)

logger = setup_logger(__name__)

router = APIRouter(
    tags=["appointments"],
)

# cancelled is terminal; finished can be reopened
STATUS_TRANSITIONS = {
    AppointmentStatus.pending: {AppointmentStatus.confirmed, AppointmentStatus.finished, AppointmentStatus.cancelled},
    AppointmentStatus.confirmed: {AppointmentStatus.pending, AppointmentStatus.finished, AppointmentStatus.cancelled},
    AppointmentStatus.finished: {AppointmentStatus.confirmed},
    AppointmentStatus.cancelled: set(),
}


def _get_appointment(session: Session, appt_id: int) -> Appointment:
    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return target


@router.post("/appointments", response_model=BookingConfirmation, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
):
    # 1) Validate services
    services = load_services(session, appt.service_ids)

    # 2) Prevent booking in the past (shop local time)
    now = shop_now()
    if appt.appointment_date < now.date():
        raise HTTPException(status_code=422, detail="Cannot book an appointment in the past")

    # 3) Re-check the slot against a fresh snapshot of the day
    with scheduling_errors():
        slots = compute_slots(session, appt.appointment_date, services, now=now)

    start = appt.appointment_time.replace(second=0, microsecond=0)
    requested = start.strftime("%H:%M")
    slot = next((s for s in slots if s.time == requested), None)
    if slot is None:
        raise HTTPException(status_code=422, detail="Requested time is not a bookable slot for that day")
    if not slot.available:
        logger.info("Rejected booking for %s %s: %s", appt.appointment_date, requested, slot.reason.value)
        raise HTTPException(status_code=409, detail=f"Time slot is not available ({slot.reason.value})")

    # 4) Create and save appointment
    db_appt = Appointment(
        client_name=appt.client_name.strip(),
        client_phone=appt.client_phone.strip(),
        service_ids=[s.id for s in services],
        service_description=" + ".join(s.name for s in services),
        price=total_price(services),
        payment_method=appt.payment_method.value,
        appointment_date=appt.appointment_date,
        appointment_time=start,
        status=AppointmentStatus.pending.value,
    )

    session.add(db_appt)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Appointment already exists for that start time")

    session.refresh(db_appt)  # fills db_appt.id
    logger.info("Booked appointment %s on %s at %s", db_appt.id, db_appt.appointment_date, requested)

    url = booking_confirmation_url(
        settings.SHOP_WHATSAPP_NUMBER,
        get_business_name(session),
        db_appt.client_name,
        db_appt.service_description,
        db_appt.appointment_date,
        db_appt.appointment_time,
        db_appt.payment_method,
        db_appt.price,
    )
    confirmation = {"appointment": AppointmentPublic.model_validate(db_appt), "whatsapp_url": url}
    if db_appt.payment_method == PaymentMethod.pix.value:
        confirmation["pix_key"] = settings.PIX_KEY
        confirmation["pix_copy_paste"] = settings.PIX_COPY_PASTE
    return confirmation


@router.get("/admin/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    status: Optional[str] = "all",
    on_date: Optional[date] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    statuses = [s.value for s in AppointmentStatus]
    if status != "all" and status not in statuses:
        raise HTTPException(status_code=422, detail=f"status must be one of {statuses} or 'all'")

    stmt = select(Appointment)

    if on_date is not None:
        stmt = stmt.where(Appointment.appointment_date == on_date)

    if status != "all":
        stmt = stmt.where(Appointment.status == status)

    stmt = stmt.order_by(Appointment.appointment_date.desc(), Appointment.appointment_time)

    return session.exec(stmt).all()


@router.patch("/admin/appointments/{appt_id}/status", response_model=AppointmentPublic)
def update_status(
    appt_id: int,
    update: StatusUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    target = _get_appointment(session, appt_id)
    current = AppointmentStatus(target.status)

    if update.status == current:
        raise HTTPException(status_code=409, detail=f"Appointment already {current.value}")
    if update.status not in STATUS_TRANSITIONS[current]:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot change status from {current.value} to {update.status.value}",
        )

    # Early finish frees the rest of the booked window
    if update.status == AppointmentStatus.finished:
        target.actual_end_time = early_finish_time(session, target, shop_now())
    else:
        target.actual_end_time = None

    target.status = update.status.value
    target.updated_at = utcnow()
    session.add(target)
    session.commit()
    session.refresh(target)

    logger.info("%s moved appointment %s from %s to %s", current_user["email"], appt_id, current.value, target.status)
    return target


@router.patch("/admin/appointments/{appt_id}/services", response_model=AppointmentPublic)
def update_services(
    appt_id: int,
    update: AppointmentServicesUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    target = _get_appointment(session, appt_id)
    if not update.service_ids and not update.custom_items:
        raise HTTPException(status_code=422, detail="An appointment needs at least one service or item")

    services = load_services(session, update.service_ids, active_only=False) if update.service_ids else []

    names = [s.name for s in services] + [c.name.strip() for c in update.custom_items]
    price = total_price(services) + sum((c.price for c in update.custom_items), Decimal("0.00"))

    target.service_ids = [s.id for s in services]
    target.service_description = " + ".join(names)
    target.price = price
    target.updated_at = utcnow()
    session.add(target)
    session.commit()
    session.refresh(target)

    logger.info("%s edited services of appointment %s", current_user["email"], appt_id)
    return target


@router.delete("/admin/appointments/{appt_id}", status_code=204)
def delete_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    target = _get_appointment(session, appt_id)
    session.delete(target)
    session.commit()
    logger.info("%s deleted appointment %s", current_user["email"], appt_id)


@router.get("/admin/appointments/{appt_id}/reminder", response_model=ReminderLink)
def appointment_reminder(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    target = _get_appointment(session, appt_id)
    try:
        url = reminder_url(target.client_phone, target.client_name)
    except ValueError:
        raise HTTPException(status_code=422, detail="Client phone number is invalid")
    return {"appointment_id": target.id, "whatsapp_url": url}


@router.get("/admin/dashboard", response_model=DashboardSummary)
def dashboard(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    today = shop_now().date()
    active = session.exec(
        select(Appointment).where(Appointment.status != AppointmentStatus.cancelled.value)
    ).all()

    zero = Decimal("0.00")
    todays = [a for a in active if a.appointment_date == today]
    this_month = [a for a in active if (a.appointment_date.year, a.appointment_date.month) == (today.year, today.month)]

    return {
        "today_total": sum((Decimal(a.price) for a in todays), zero),
        "today_count": len(todays),
        "month_total": sum((Decimal(a.price) for a in this_month), zero),
        "overall_total": sum((Decimal(a.price) for a in active), zero),
    }
