# barbershop/routers/schedule_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from barbershop.availability import duration_fits_day, effective_duration
from barbershop.booking import (
    compute_slots,
    get_slot_interval,
    load_schedule,
    load_services,
    scheduling_errors,
    shop_now,
    to_spec,
    total_price,
)
from barbershop.db import get_session
from barbershop.deps import get_admin_user
from barbershop.logging_config import setup_logger
from barbershop.models import BlockedSlot, ScheduleConfig
from barbershop.schemas import (
    AvailabilityResponse,
    BlockCreate,
    BlockPublic,
    ScheduleDay,
    ScheduleDayUpdate,
)

logger = setup_logger(__name__)

router = APIRouter(
    tags=["schedule"],
)


@router.get("/schedule", response_model=List[ScheduleDay])
def get_schedule(session: Session = Depends(get_session)):
    return session.exec(select(ScheduleConfig).order_by(ScheduleConfig.day_of_week)).all()


@router.put("/admin/schedule/{day_of_week}", response_model=ScheduleDay)
def update_schedule_day(
    day_of_week: int,
    updates: ScheduleDayUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    if not (0 <= day_of_week <= 6):
        raise HTTPException(status_code=422, detail="day_of_week must be an integer between 0 and 6")

    day = session.get(ScheduleConfig, day_of_week)
    if day is None:
        day = ScheduleConfig(day_of_week=day_of_week)

    changes = updates.model_dump(exclude_unset=True)
    for field in ("is_open", "open_time", "close_time"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be cleared")

    # validate the merged row before touching the stored one
    merged = ScheduleDay.model_validate(day).model_copy(update=changes)
    if merged.open_time >= merged.close_time:
        raise HTTPException(status_code=422, detail="open_time must be before close_time")
    if (merged.break_start is None) != (merged.break_end is None):
        raise HTTPException(status_code=422, detail="break_start and break_end must be set together")
    if merged.break_start is not None:
        if merged.break_start >= merged.break_end:
            raise HTTPException(status_code=422, detail="break_start must be before break_end")
        if merged.break_start < merged.open_time or merged.break_end > merged.close_time:
            raise HTTPException(status_code=422, detail="Break must be within working hours")

    for field, value in changes.items():
        setattr(day, field, value)

    session.add(day)
    session.commit()
    session.refresh(day)

    logger.info("%s updated schedule for weekday %s: %s", current_user["email"], day_of_week, sorted(changes))
    return day


@router.get("/admin/blocks", response_model=List[BlockPublic])
def list_blocks(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    today = shop_now().date()
    return session.exec(
        select(BlockedSlot)
        .where(BlockedSlot.blocked_date >= today)
        .order_by(BlockedSlot.blocked_date, BlockedSlot.blocked_time)
    ).all()


@router.post("/admin/blocks", response_model=BlockPublic, status_code=201)
def create_block(
    block: BlockCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    if block.blocked_date < shop_now().date():
        raise HTTPException(status_code=422, detail="Cannot block a date in the past")
    full_day = block.blocked_time is None if block.full_day is None else block.full_day
    if full_day and block.blocked_time is not None:
        raise HTTPException(status_code=422, detail="A full-day block cannot have a blocked_time")
    if not full_day and block.blocked_time is None:
        raise HTTPException(status_code=422, detail="blocked_time is required unless full_day is set")

    blocked_time = None if full_day else block.blocked_time.replace(second=0, microsecond=0)

    existing_blocks = session.exec(
        select(BlockedSlot).where(BlockedSlot.blocked_date == block.blocked_date)
    ).all()
    for existing in existing_blocks:
        if existing.full_day or existing.blocked_time is None:
            raise HTTPException(status_code=409, detail="Date is already blocked")
        if existing.blocked_time == blocked_time:
            raise HTTPException(status_code=409, detail="Time is already blocked")

    db_block = BlockedSlot(
        blocked_date=block.blocked_date,
        blocked_time=blocked_time,
        full_day=full_day,
        reason=block.reason or None,
    )
    session.add(db_block)
    session.commit()
    session.refresh(db_block)

    logger.info("%s blocked %s %s", current_user["email"], db_block.blocked_date,
                "all day" if db_block.full_day else db_block.blocked_time)
    return db_block


@router.delete("/admin/blocks/{block_id}", status_code=204)
def delete_block(
    block_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    block = session.get(BlockedSlot, block_id)
    if block is None:
        raise HTTPException(status_code=404, detail="Block not found")
    session.delete(block)
    session.commit()
    logger.info("%s removed block %s", current_user["email"], block_id)


@router.get("/availability", response_model=AvailabilityResponse)
def availability(
    date: date,
    service_ids: List[int] = Query(default=[]),
    session: Session = Depends(get_session),
):
    services = load_services(session, service_ids)

    with scheduling_errors():
        interval = get_slot_interval(session)
        duration = effective_duration(to_spec(s) for s in services)
        fits = duration_fits_day(load_schedule(session, date), duration)
        slots = compute_slots(session, date, services)

    return {
        "date": date,
        "slot_interval_minutes": interval,
        "total_duration_minutes": duration,
        "total_price": total_price(services),
        "fits_day": fits,
        "slots": [s.model_dump(mode="json") for s in slots],
    }
