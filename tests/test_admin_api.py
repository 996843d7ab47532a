"""Tests for the admin endpoints."""
from datetime import datetime
from decimal import Decimal

from sqlmodel import select

from barbershop.auth import ensure_super_admin
from barbershop.config import settings
from barbershop.models import User

TOMORROW = "2030-03-05"  # a Tuesday


def availability(client, day=TOMORROW, service_ids=(1,)):
    resp = client.get("/availability", params={"date": day, "service_ids": list(service_ids)})
    assert resp.status_code == 200, resp.text
    return {s["time"]: s for s in resp.json()["slots"]}


# --- auth ---

def test_me_requires_token(client):
    resp = client.get("/me")
    assert resp.status_code == 401


def test_me_with_token(client, admin_headers):
    resp = client.get("/me", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "barber@example.com"
    assert resp.json()["role"] == "admin"


def test_login_with_wrong_password(client, admin_headers):
    resp = client.post("/auth/login", data={"username": "barber@example.com", "password": "nope"})
    assert resp.status_code == 401


def test_garbage_token_is_rejected(client):
    resp = client.get("/admin/appointments", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_ensure_super_admin_creates_account_once(session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "owner@shop.com")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "owner-pass-123")

    ensure_super_admin(session)
    ensure_super_admin(session)

    users = session.exec(select(User).where(User.email == "owner@shop.com")).all()
    assert len(users) == 1
    assert users[0].role == "super_admin"


# --- appointments ---

def test_list_appointments(client, admin_headers, book):
    book("11:00")
    book("09:00", day="2030-03-06")
    resp = client.get("/admin/appointments", headers=admin_headers)
    assert resp.status_code == 200
    assert [a["appointment_date"] for a in resp.json()] == ["2030-03-06", TOMORROW]

    filtered = client.get("/admin/appointments", params={"on_date": TOMORROW}, headers=admin_headers).json()
    assert len(filtered) == 1


def test_list_appointments_rejects_unknown_status(client, admin_headers):
    resp = client.get("/admin/appointments", params={"status": "done"}, headers=admin_headers)
    assert resp.status_code == 422


def test_status_flow_records_early_finish(client, admin_headers, book, set_now):
    appt_id = book("10:00", service_ids=[3]).json()["appointment"]["id"]
    url = f"/admin/appointments/{appt_id}/status"

    assert client.patch(url, json={"status": "confirmed"}, headers=admin_headers).status_code == 200
    assert availability(client)["10:30"]["reason"] == "booked"

    set_now(datetime(2030, 3, 5, 10, 20))
    resp = client.patch(url, json={"status": "finished"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["actual_end_time"] == "10:20:00"
    assert availability(client)["10:30"]["available"]

    reopened = client.patch(url, json={"status": "confirmed"}, headers=admin_headers).json()
    assert reopened["actual_end_time"] is None
    assert availability(client)["10:30"]["reason"] == "booked"


def test_finishing_before_the_appointment_day_keeps_full_window(client, admin_headers, book, set_now):
    appt_id = book("10:00").json()["appointment"]["id"]

    set_now(datetime(2030, 3, 4, 18, 0))
    resp = client.patch(f"/admin/appointments/{appt_id}/status", json={"status": "finished"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["actual_end_time"] is None

    slots = availability(client)
    assert slots["09:00"]["available"]
    assert slots["10:00"]["reason"] == "booked"
    assert slots["11:00"]["available"]


def test_finishing_after_scheduled_end_keeps_full_window(client, admin_headers, book, set_now):
    appt_id = book("10:00").json()["appointment"]["id"]

    set_now(datetime(2030, 3, 5, 15, 0))
    resp = client.patch(f"/admin/appointments/{appt_id}/status", json={"status": "finished"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["actual_end_time"] is None


def test_cancelled_is_terminal(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    url = f"/admin/appointments/{appt_id}/status"

    assert client.patch(url, json={"status": "cancelled"}, headers=admin_headers).status_code == 200
    assert client.patch(url, json={"status": "confirmed"}, headers=admin_headers).status_code == 409


def test_cancelling_frees_the_slot(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    client.patch(f"/admin/appointments/{appt_id}/status", json={"status": "cancelled"}, headers=admin_headers)

    assert availability(client)["10:00"]["available"]
    assert book("10:00").status_code == 201


def test_same_status_is_a_conflict(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    resp = client.patch(f"/admin/appointments/{appt_id}/status", json={"status": "pending"}, headers=admin_headers)
    assert resp.status_code == 409


def test_status_of_missing_appointment(client, admin_headers):
    resp = client.patch("/admin/appointments/999/status", json={"status": "confirmed"}, headers=admin_headers)
    assert resp.status_code == 404


def test_edit_services_recomputes_price_and_description(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    resp = client.patch(
        f"/admin/appointments/{appt_id}/services",
        json={"service_ids": [1, 4], "custom_items": [{"name": "Hidratação", "price": "15.00"}]},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["service_description"] == "Corte + Pezinho + Hidratação"
    assert Decimal(str(data["price"])) == Decimal("60")
    assert data["service_ids"] == [1, 4]


def test_edit_services_needs_something(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    resp = client.patch(f"/admin/appointments/{appt_id}/services", json={}, headers=admin_headers)
    assert resp.status_code == 422


def test_custom_only_appointment_uses_default_duration(client, admin_headers, book):
    appt_id = book("10:00", service_ids=[7]).json()["appointment"]["id"]
    client.patch(
        f"/admin/appointments/{appt_id}/services",
        json={"custom_items": [{"name": "Corte infantil", "price": "25"}]},
        headers=admin_headers,
    )
    slots = availability(client)
    assert slots["10:00"]["reason"] == "booked"
    assert slots["11:00"]["available"]


def test_delete_appointment(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    assert client.delete(f"/admin/appointments/{appt_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/admin/appointments/{appt_id}", headers=admin_headers).status_code == 404


def test_reminder_link(client, admin_headers, book):
    appt_id = book("10:00").json()["appointment"]["id"]
    resp = client.get(f"/admin/appointments/{appt_id}/reminder", headers=admin_headers)
    assert resp.status_code == 200
    assert "phone=557188335001" in resp.json()["whatsapp_url"]


def test_dashboard_totals_skip_cancelled(client, admin_headers, book):
    first = book("10:00", day="2030-03-04", service_ids=[1]).json()["appointment"]["id"]
    book("11:00", day="2030-03-04", service_ids=[2])
    book("10:00", day=TOMORROW, service_ids=[3])
    client.patch(f"/admin/appointments/{first}/status", json={"status": "cancelled"}, headers=admin_headers)

    data = client.get("/admin/dashboard", headers=admin_headers).json()
    assert data["today_count"] == 1
    assert Decimal(str(data["today_total"])) == Decimal("25")
    assert Decimal(str(data["month_total"])) == Decimal("80")
    assert Decimal(str(data["overall_total"])) == Decimal("80")


# --- schedule and blocks ---

def test_break_window_blocks_slots(client, admin_headers):
    resp = client.put("/admin/schedule/1", json={"break_start": "12:00", "break_end": "13:00"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text

    slots = availability(client)
    assert slots["12:00"]["reason"] == "break"
    assert slots["11:30"]["available"]


def test_break_check_can_include_buffer(client, admin_headers, monkeypatch):
    client.put("/admin/schedule/1", json={"break_start": "12:00", "break_end": "13:00"}, headers=admin_headers)
    assert availability(client)["11:30"]["available"]

    monkeypatch.setattr(settings, "BREAK_INCLUDES_BUFFER", True)
    assert availability(client)["11:30"]["reason"] == "break"


def test_closing_a_weekday(client, admin_headers):
    client.put("/admin/schedule/1", json={"is_open": False}, headers=admin_headers)
    assert availability(client) == {}


def test_schedule_validation(client, admin_headers):
    assert client.put("/admin/schedule/1", json={"open_time": "22:00"}, headers=admin_headers).status_code == 422
    assert client.put("/admin/schedule/1", json={"break_start": "12:00"}, headers=admin_headers).status_code == 422
    assert client.put(
        "/admin/schedule/1", json={"break_start": "07:00", "break_end": "08:30"}, headers=admin_headers
    ).status_code == 422
    assert client.put("/admin/schedule/7", json={"is_open": True}, headers=admin_headers).status_code == 422


def test_schedule_requires_admin(client):
    assert client.put("/admin/schedule/1", json={"is_open": False}).status_code == 401


def test_full_day_block(client, admin_headers):
    resp = client.post("/admin/blocks", json={"blocked_date": TOMORROW, "reason": "Feriado"}, headers=admin_headers)
    assert resp.status_code == 201
    block_id = resp.json()["id"]

    assert {s["reason"] for s in availability(client).values()} == {"full_day"}
    assert client.post("/admin/blocks", json={"blocked_date": TOMORROW}, headers=admin_headers).status_code == 409

    listed = client.get("/admin/blocks", headers=admin_headers).json()
    assert [b["id"] for b in listed] == [block_id]

    assert client.delete(f"/admin/blocks/{block_id}", headers=admin_headers).status_code == 204
    assert all(s["available"] for s in availability(client).values())


def test_single_time_block(client, admin_headers):
    resp = client.post(
        "/admin/blocks",
        json={"blocked_date": TOMORROW, "blocked_time": "14:00", "full_day": False},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    slots = availability(client)
    assert slots["14:00"]["reason"] == "blocked"
    assert slots["14:30"]["available"]


def test_time_without_full_day_blocks_only_that_slot(client, admin_headers):
    resp = client.post("/admin/blocks", json={"blocked_date": TOMORROW, "blocked_time": "14:00"}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["full_day"] is False
    assert resp.json()["blocked_time"] == "14:00:00"

    slots = availability(client)
    assert slots["14:00"]["reason"] == "blocked"
    assert slots["10:00"]["available"]


def test_full_day_block_cannot_carry_a_time(client, admin_headers):
    resp = client.post(
        "/admin/blocks",
        json={"blocked_date": TOMORROW, "blocked_time": "14:00", "full_day": True},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_block_validation(client, admin_headers):
    assert client.post("/admin/blocks", json={"blocked_date": "2030-03-01"}, headers=admin_headers).status_code == 422
    assert client.post(
        "/admin/blocks", json={"blocked_date": TOMORROW, "full_day": False}, headers=admin_headers
    ).status_code == 422


# --- services ---

def test_update_service_duration_changes_availability(client, admin_headers):
    resp = client.patch("/admin/services/1", json={"duration_minutes": 90, "buffer_minutes": 0}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["duration_minutes"] == 90

    slots = availability(client)
    assert slots["19:30"]["available"]
    assert slots["20:00"]["reason"] == "closing"


def test_update_missing_service(client, admin_headers):
    assert client.patch("/admin/services/99", json={"active": False}, headers=admin_headers).status_code == 404


def test_update_service_rejects_bad_duration(client, admin_headers):
    assert client.patch("/admin/services/1", json={"duration_minutes": 0}, headers=admin_headers).status_code == 422


# --- settings ---

def test_slot_interval_needs_super_admin(client, admin_headers):
    resp = client.put("/admin/settings/slot_interval_minutes", json={"value": "20"}, headers=admin_headers)
    assert resp.status_code == 403


def test_slot_interval_changes_grid(client, super_admin_headers):
    resp = client.put("/admin/settings/slot_interval_minutes", json={"value": "20"}, headers=super_admin_headers)
    assert resp.status_code == 200
    assert resp.json()["slot_interval_minutes"] == 20
    assert len(availability(client)) == 39


def test_setting_validation(client, super_admin_headers):
    url = "/admin/settings/slot_interval_minutes"
    assert client.put(url, json={"value": "0"}, headers=super_admin_headers).status_code == 422
    assert client.put(url, json={"value": "abc"}, headers=super_admin_headers).status_code == 422
    assert client.put("/admin/settings/primary_color", json={"value": "red"}, headers=super_admin_headers).status_code == 404
    assert client.put("/admin/settings/business_name", json={"value": "   "}, headers=super_admin_headers).status_code == 422


def test_pix_details_come_from_config(client, monkeypatch):
    monkeypatch.setattr(settings, "PIX_KEY", "shop@example.com")
    monkeypatch.setattr(settings, "PIX_COPY_PASTE", "00020126360014br.gov.bcb.pix")
    data = client.get("/settings").json()
    assert data["pix_key"] == "shop@example.com"
    assert data["pix_copy_paste"] == "00020126360014br.gov.bcb.pix"


def test_rename_business(client, super_admin_headers):
    resp = client.put("/admin/settings/business_name", json={"value": "Barbearia do Fal"}, headers=super_admin_headers)
    assert resp.json()["business_name"] == "Barbearia do Fal"
    assert client.get("/settings").json()["business_name"] == "Barbearia do Fal"
