# barbershop/models.py

from datetime import date as Date, datetime, time, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    price: Decimal = Field(default=0, max_digits=10, decimal_places=2)
    duration_minutes: int = 30
    buffer_minutes: int = 5
    active: bool = True
    sort_order: int = Field(default=0, index=True)
    created_at: datetime = Field(default_factory=utcnow)


class ScheduleConfig(SQLModel, table=True):
    __tablename__ = "schedule_config"

    day_of_week: int = Field(primary_key=True)  # 0=Mon ... 6=Sun
    is_open: bool = True
    open_time: time = time(8, 0)
    close_time: time = time(21, 0)
    break_start: Optional[time] = None
    break_end: Optional[time] = None


class BlockedSlot(SQLModel, table=True):
    __tablename__ = "blocked_slots"

    id: Optional[int] = Field(default=None, primary_key=True)
    blocked_date: Date = Field(index=True)
    blocked_time: Optional[time] = None  # None = whole day
    full_day: bool = False
    reason: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Appointment(SQLModel, table=True):
    # one live booking per start time; cancelled rows stay for history
    __table_args__ = (
        Index(
            "uq_active_appointment_start",
            "appointment_date",
            "appointment_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    client_name: str
    client_phone: str
    service_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    service_description: str = ""
    price: Decimal = Field(default=0, max_digits=10, decimal_places=2)
    payment_method: str = "cash"  # "pix" or "cash"

    appointment_date: Date = Field(index=True)
    appointment_time: time
    status: str = "pending"
    actual_end_time: Optional[time] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BusinessSetting(SQLModel, table=True):
    __tablename__ = "business_settings"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=utcnow)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # admin or super_admin
