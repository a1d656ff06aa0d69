from __future__ import annotations

import csv
import importlib
import io
import sys

import pytest

from whistle.container import wire_services
from whistle.main import create_app

from conftest import FakeClock, InMemoryTimeEntries, InMemoryUsers, utc


@pytest.fixture
def api(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    entries = InMemoryTimeEntries()
    clock = FakeClock(utc(2024, 6, 3, 9, 0))
    container = wire_services(
        users_repo=InMemoryUsers(on_delete=entries.delete_for_user),
        entries_repo=entries,
        clock=clock,
    )
    app = create_app(container)
    return app.test_client(), clock, entries


def register(client, email="alice@example.com", password="correct horse"):
    return client.post("/api/auth/register", json={"email": email, "password": password})


def test_health(api):
    client, _, _ = api

    assert client.get("/health").get_json() == {"ok": True}


@pytest.mark.parametrize(
    "method,path",
    [
        ("post", "/api/time/clock-in"),
        ("post", "/api/time/clock-out"),
        ("get", "/api/time/status"),
        ("get", "/api/time/heatmap"),
        ("get", "/api/time/entries"),
        ("get", "/api/time/entries.csv"),
        ("delete", "/api/account/delete"),
    ],
)
def test_protected_routes_need_login(api, method, path):
    client, _, _ = api

    resp = getattr(client, method)(path)

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Unauthenticated"


def test_me_without_session(api):
    client, _, _ = api

    assert client.get("/api/auth/me").get_json() == {"user": None}


def test_register_sets_session(api):
    client, _, _ = api

    resp = register(client)

    assert resp.status_code == 201
    assert resp.get_json()["user"]["email"] == "alice@example.com"
    assert client.get("/api/auth/me").get_json()["user"]["email"] == "alice@example.com"


def test_register_invalid_input(api):
    client, _, _ = api

    resp = register(client, email="nope")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidInput"


def test_full_day_flow(api):
    client, clock, _ = api
    register(client)

    resp = client.post("/api/time/clock-in", json={"timezone": "Europe/Berlin"})
    assert resp.status_code == 201
    assert resp.get_json()["entry"]["start_time"] == "2024-06-03T09:00:00Z"

    again = client.post("/api/time/clock-in", json={"timezone": "Europe/Berlin"})
    assert again.status_code == 400
    assert again.get_json()["error"] == "AlreadyClockedIn"

    clock.advance(hours=1)
    status = client.get("/api/time/status").get_json()
    assert status["is_working"] is True
    assert status["current_session"]["elapsed_seconds"] == 3600

    clock.advance(hours=7, minutes=30)
    out = client.post("/api/time/clock-out", json={})
    assert out.status_code == 200
    assert out.get_json()["entry"]["duration_hours"] == 8.5

    status = client.get("/api/time/status").get_json()
    assert status == {"is_working": False, "current_session": None, "year_total_hours": 8.5}

    assert client.get("/api/time/heatmap").get_json() == {"year": 2024, "days": {"2024-06-03": 8.5}}

    rows = client.get("/api/time/entries").get_json()["entries"]
    assert rows[0]["start_time"] == "09:00"
    assert rows[0]["end_time"] == "17:30"


def test_clock_out_when_not_working(api):
    client, _, _ = api
    register(client)

    resp = client.post("/api/time/clock-out")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "NotClockedIn"


def test_clock_in_requires_timezone(api):
    client, _, _ = api
    register(client)

    resp = client.post("/api/time/clock-in", json={})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidInput"


def test_forgotten_session_is_capped_on_status(api):
    client, clock, _ = api
    register(client)
    client.post("/api/time/clock-in", json={"timezone": "UTC"})

    clock.advance(hours=16)
    status = client.get("/api/time/status").get_json()

    assert status["is_working"] is False
    assert status["year_total_hours"] == 15.0


def test_clock_in_blocked_on_sunday(api):
    client, clock, entries = api
    register(client)
    clock.now = utc(2024, 6, 2, 12, 0)

    resp = client.post("/api/time/clock-in", json={"timezone": "UTC"})

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "ClockInBlocked"
    assert entries.entries == {}


def test_clock_out_blocked_saturday_evening_unless_auto(api):
    client, clock, _ = api
    register(client)
    clock.now = utc(2024, 6, 1, 12, 0)
    client.post("/api/time/clock-in", json={"timezone": "UTC"})
    clock.now = utc(2024, 6, 1, 19, 0)

    blocked = client.post("/api/time/clock-out", json={})
    assert blocked.status_code == 403
    assert blocked.get_json()["error"] == "ClockOutBlocked"

    # only a literal true counts as automatic
    assert client.post("/api/time/clock-out", json={"auto": "yes"}).status_code == 403

    auto = client.post("/api/time/clock-out", json={"auto": True})
    assert auto.status_code == 200
    assert auto.get_json()["entry"]["duration_hours"] == 7.0


def test_entries_csv_export(api):
    client, clock, _ = api
    register(client)
    client.post("/api/time/clock-in", json={"timezone": "UTC"})
    clock.advance(hours=2, minutes=15)
    client.post("/api/time/clock-out")

    resp = client.get("/api/time/entries.csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "whistle-entries.csv" in resp.headers["Content-Disposition"]
    reader = csv.DictReader(io.StringIO(resp.data.decode("utf-8-sig")))
    assert list(reader) == [
        {
            "date": "2024-06-03",
            "day_of_week": "Monday",
            "start_time": "09:00",
            "end_time": "11:15",
            "duration_hours": "2.25",
        }
    ]


def test_login_elsewhere_invalidates_old_session(api):
    client, _, _ = api
    register(client)
    other = client.application.test_client()

    resp = other.post("/api/auth/login", json={"email": "alice@example.com", "password": "correct horse"})

    assert resp.status_code == 200
    assert other.get("/api/auth/me").get_json()["user"] is not None
    assert client.get("/api/auth/me").get_json() == {"user": None}


def test_login_wrong_password(api):
    client, _, _ = api
    register(client)
    client.post("/api/auth/logout")

    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong horse"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid email or password."


def test_logout(api):
    client, _, _ = api
    register(client)

    assert client.post("/api/auth/logout").get_json() == {"success": True}
    assert client.get("/api/time/status").status_code == 401


def test_delete_account_removes_everything(api):
    client, clock, entries = api
    register(client)
    client.post("/api/time/clock-in", json={"timezone": "UTC"})
    clock.advance(hours=1)
    client.post("/api/time/clock-out")

    resp = client.delete("/api/account/delete")

    assert resp.status_code == 200
    assert entries.entries == {}
    assert client.get("/api/auth/me").get_json() == {"user": None}
    relogin = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "correct horse"})
    assert relogin.status_code == 401


@pytest.mark.parametrize("body", [["UTC"], "UTC", [True], 42])
def test_non_object_bodies_are_invalid_input(api, body):
    client, _, entries = api
    register(client)

    for path in ("/api/time/clock-in", "/api/time/clock-out", "/api/auth/login"):
        resp = client.post(path, json=body)
        assert resp.status_code == 400, path
        assert resp.get_json()["error"] == "InvalidInput"
        assert resp.get_json()["message"] == "Request body must be a JSON object."

    assert entries.entries == {}


def test_register_rejects_list_body(api):
    client, _, _ = api

    resp = client.post("/api/auth/register", json=["alice@example.com", "correct horse"])

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidInput"


def test_production_settings_require_secret_key(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.delitem(sys.modules, "config.production", raising=False)

    with pytest.raises(RuntimeError):
        importlib.import_module("config.production")
