# barbershop/schemas.py

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    admin = "admin"
    super_admin = "super_admin"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    finished = "finished"
    cancelled = "cancelled"


class PaymentMethod(str, Enum):
    pix = "pix"
    cash = "cash"


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    duration_minutes: int
    buffer_minutes: int
    active: bool
    sort_order: int


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    duration_minutes: Optional[int] = Field(default=None, gt=0, le=480)
    buffer_minutes: Optional[int] = Field(default=None, ge=0, le=120)
    active: Optional[bool] = None
    sort_order: Optional[int] = None


class ScheduleDay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day_of_week: int    # 0=Mon, 1=Tues....
    is_open: bool
    open_time: time
    close_time: time
    break_start: Optional[time] = None
    break_end: Optional[time] = None


class ScheduleDayUpdate(BaseModel):
    is_open: Optional[bool] = None
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None


class BlockCreate(BaseModel):
    blocked_date: date
    blocked_time: Optional[time] = None
    # left out: whole day when no time is given
    full_day: Optional[bool] = None
    reason: Optional[str] = Field(default=None, max_length=200)


class BlockPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    blocked_date: date
    blocked_time: Optional[time]
    full_day: bool
    reason: Optional[str]


class AppointmentCreate(BaseModel):
    """Everything the booking flow collects, submitted in one request."""
    model_config = ConfigDict(frozen=True)

    client_name: str = Field(min_length=1, max_length=120)
    client_phone: str = Field(min_length=8, max_length=30)
    service_ids: List[int] = Field(min_length=1)
    appointment_date: date
    appointment_time: time
    payment_method: PaymentMethod = PaymentMethod.cash


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_name: str
    client_phone: str
    service_ids: List[int]
    service_description: str
    price: Decimal
    payment_method: PaymentMethod
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus
    actual_end_time: Optional[time]
    created_at: datetime


class BookingConfirmation(BaseModel):
    appointment: AppointmentPublic
    whatsapp_url: str
    # set when the client chose to pay by Pix
    pix_key: Optional[str] = None
    pix_copy_paste: Optional[str] = None


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class CustomItem(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class AppointmentServicesUpdate(BaseModel):
    service_ids: List[int] = Field(default_factory=list)
    custom_items: List[CustomItem] = Field(default_factory=list)


class ReminderLink(BaseModel):
    appointment_id: int
    whatsapp_url: str


class DashboardSummary(BaseModel):
    today_total: Decimal
    today_count: int
    month_total: Decimal
    overall_total: Decimal


class SlotPublic(BaseModel):
    time: str
    available: bool
    reason: Optional[str] = None


class AvailabilityResponse(BaseModel):
    date: date
    slot_interval_minutes: int
    total_duration_minutes: int
    total_price: Decimal
    fits_day: bool
    slots: List[SlotPublic]


class PublicSettings(BaseModel):
    business_name: str
    slot_interval_minutes: int
    pix_key: Optional[str] = None
    pix_copy_paste: Optional[str] = None


class SettingUpdate(BaseModel):
    value: str = Field(min_length=1, max_length=200)
