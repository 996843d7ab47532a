"""Shared test fixtures."""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barbershop import booking
from barbershop.auth import hash_password
from barbershop.db import get_session, seed_defaults
from barbershop.main import app
from barbershop.models import User
from barbershop.routers import appointments_routes, schedule_routes

# A Monday; the default schedule is open 08:00-21:00 Monday to Saturday
NOW = datetime(2030, 3, 4, 9, 10)
TOMORROW = "2030-03-05"
PASSWORD = "barber-pass-123"


def freeze_now(monkeypatch, moment: datetime):
    for module in (booking, appointments_routes, schedule_routes):
        monkeypatch.setattr(module, "shop_now", lambda: moment)


@pytest.fixture(autouse=True)
def frozen_now(monkeypatch):
    freeze_now(monkeypatch, NOW)
    return NOW


@pytest.fixture
def set_now(monkeypatch):
    """Move the shop clock for the rest of the test."""
    return lambda moment: freeze_now(monkeypatch, moment)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        seed_defaults(session)
        yield session


@pytest.fixture
def client(session):
    """FastAPI test client bound to the in-memory database."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, session, email: str, role: str) -> dict:
    session.add(User(email=email, password_hash=hash_password(PASSWORD), role=role))
    session.commit()
    resp = client.post("/auth/login", data={"username": email, "password": PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, session):
    return _login(client, session, "barber@example.com", "admin")


@pytest.fixture
def super_admin_headers(client, session):
    return _login(client, session, "owner@example.com", "super_admin")


@pytest.fixture
def book(client):
    """Book through the public endpoint and return the response."""
    def _book(time: str, service_ids=(1,), day: str = TOMORROW, **extra):
        payload = {
            "client_name": "João Silva",
            "client_phone": "(71) 98833-5001",
            "service_ids": list(service_ids),
            "appointment_date": day,
            "appointment_time": time,
        }
        payload.update(extra)
        return client.post("/appointments", json=payload)
    return _book
