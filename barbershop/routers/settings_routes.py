# barbershop/routers/settings_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.booking import get_business_name, get_slot_interval, scheduling_errors
from barbershop.config import settings
from barbershop.data import (
    EDITABLE_SETTINGS,
    SETTING_BUSINESS_NAME,
    SETTING_SLOT_INTERVAL,
    SLOT_INTERVAL_RANGE,
)
from barbershop.db import get_session
from barbershop.deps import get_super_admin_user
from barbershop.logging_config import setup_logger
from barbershop.models import BusinessSetting, utcnow
from barbershop.schemas import PublicSettings, SettingUpdate

logger = setup_logger(__name__)

router = APIRouter(
    tags=["settings"],
)


@router.get("/settings", response_model=PublicSettings)
def public_settings(session: Session = Depends(get_session)):
    with scheduling_errors():
        interval = get_slot_interval(session)
    return {
        "business_name": get_business_name(session),
        "slot_interval_minutes": interval,
        "pix_key": settings.PIX_KEY,
        "pix_copy_paste": settings.PIX_COPY_PASTE,
    }


@router.put("/admin/settings/{key}", response_model=PublicSettings)
def update_setting(
    key: str,
    update: SettingUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_super_admin_user),
):
    if key not in EDITABLE_SETTINGS:
        raise HTTPException(status_code=404, detail="Unknown setting")

    value = update.value.strip()
    if key == SETTING_BUSINESS_NAME and not value:
        raise HTTPException(status_code=422, detail="Business name cannot be empty")
    if key == SETTING_SLOT_INTERVAL:
        low, high = SLOT_INTERVAL_RANGE
        if not value.isdigit() or not (low <= int(value) <= high):
            raise HTTPException(
                status_code=422,
                detail=f"slot_interval_minutes must be an integer between {low} and {high}",
            )
        value = str(int(value))

    row = session.get(BusinessSetting, key)
    if row is None:
        row = BusinessSetting(key=key, value=value)
    else:
        row.value = value
        row.updated_at = utcnow()
    session.add(row)
    session.commit()

    logger.info("%s set %s to %r", current_user["email"], key, value)
    return public_settings(session)
