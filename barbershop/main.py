# barbershop/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlmodel import Session

from barbershop.auth import ensure_super_admin
from barbershop.config import settings
from barbershop.db import create_db_and_tables, engine, seed_defaults
from barbershop.logging_config import setup_logger
from barbershop.routers import (
    appointments_routes,
    auth_routes,
    schedule_routes,
    services_routes,
    settings_routes,
    users_routes,
)

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    with Session(engine) as session:
        if settings.SEED_DEFAULTS:
            seed_defaults(session)
        ensure_super_admin(session)
    logger.info("Barbershop API ready")
    yield


app = FastAPI(title="Barbershop booking API", lifespan=lifespan)

app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(services_routes.router)
app.include_router(schedule_routes.router)
app.include_router(appointments_routes.router)
app.include_router(settings_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
