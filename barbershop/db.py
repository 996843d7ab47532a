# barbershop/db.py

from sqlmodel import SQLModel, Session, create_engine, select

from barbershop.config import settings
from barbershop.data import (
    SERVICES,
    SETTING_BUSINESS_NAME,
    SETTING_SLOT_INTERVAL,
    WEEKLY_SCHEDULE,
)
from barbershop.logging_config import setup_logger
from barbershop.models import BusinessSetting, ScheduleConfig, Service

logger = setup_logger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # required for SQLite + FastAPI

# Engine = connection to the database
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,          # set to True to see SQL
    connect_args=connect_args,
)


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)


def seed_defaults(session: Session) -> None:
    """Insert the default catalog, weekly schedule and settings where missing."""
    if session.exec(select(Service)).first() is None:
        for order, (name, (price, duration, buffer)) in enumerate(SERVICES.items()):
            session.add(Service(
                name=name,
                price=price,
                duration_minutes=duration,
                buffer_minutes=buffer,
                sort_order=order,
            ))
        logger.info("Seeded %d services", len(SERVICES))

    for day, hours in WEEKLY_SCHEDULE.items():
        if session.get(ScheduleConfig, day) is not None:
            continue
        if hours is None:
            session.add(ScheduleConfig(day_of_week=day, is_open=False))
        else:
            session.add(ScheduleConfig(day_of_week=day, open_time=hours[0], close_time=hours[1]))

    defaults = {
        SETTING_BUSINESS_NAME: settings.BUSINESS_NAME,
        SETTING_SLOT_INTERVAL: str(settings.DEFAULT_SLOT_INTERVAL),
    }
    for key, value in defaults.items():
        if session.get(BusinessSetting, key) is None:
            session.add(BusinessSetting(key=key, value=value))

    session.commit()


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
