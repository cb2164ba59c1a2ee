from __future__ import annotations

import csv
import io

import pytest
from fastapi.testclient import TestClient

from runclub.app import create_app
from runclub.core.config import get_settings
from runclub.domain.errors import StorageUnavailableError
from runclub.repositories.json_storage import JsonFileStore

ADMIN = {"X-Admin-Password": "letmein"}

ROUTE = {
    "name": "Campus Loop",
    "description": "Around the Diag",
    "distance": "3.0 miles",
    "difficulty": "Easy",
    "estimatedTime": "25-30 minutes",
    "points": [{"lat": 42.2808, "lng": -83.743, "name": "Start: Diag"}],
}

EVENT = {
    "badge": "WEEKLY",
    "title": "Wednesday Group Run",
    "description": "Our signature 5-mile group run.",
    "date": "Every Wednesday, 6:00 PM",
    "location": "Ann Arbor",
    "sortOrder": 1,
}

REGISTRATION = {
    "firstName": " Alex ",
    "lastName": "Runner",
    "email": "Alex@umich.edu",
    "phone": "734-555-0100",
    "isUMUndergrad": True,
    "grade": "junior",
    "emergencyContact": "Sam Runner",
    "emergencyPhone": "734-555-0199",
    "availability": ["Wednesday"],
}


@pytest.fixture()
def client(clean_env, tmp_path, database):
    clean_env.setenv("ADMIN_PASSWORD", "letmein")
    clean_env.setenv("LOGIN_RATE_LIMIT", "3")
    app = create_app(get_settings(), record_store=JsonFileStore(tmp_path / "data"), database=database)
    with TestClient(app) as test_client:
        yield test_client


def test_route_admin_flow(client):
    assert client.get("/api/routes").json() == []

    created = client.post("/api/routes", json=ROUTE, headers=ADMIN)
    assert created.status_code == 200
    assert created.json()["id"] == 1
    legacy = client.post("/api/routes", json={"action": "add", **ROUTE, "name": "River Run"}, headers=ADMIN)
    assert legacy.json()["id"] == 2

    resp = client.put("/api/routes", params={"id": 2, "action": "set-upcoming"}, headers=ADMIN)
    assert resp.status_code == 200
    upcoming = client.get("/api/upcoming-route").json()
    assert upcoming["id"] == 2
    assert upcoming["isUpcoming"] is True

    resp = client.put("/api/routes", params={"id": 1}, json={"distance": "3.1 miles"}, headers=ADMIN)
    assert resp.json()["route"]["distance"] == "3.1 miles"

    resp = client.post("/api/routes", json={"action": "setUpcoming", "id": 1}, headers=ADMIN)
    assert resp.status_code == 200
    routes = client.get("/api/routes").json()
    assert [r["id"] for r in routes if r["isUpcoming"]] == [1]

    assert client.delete("/api/routes", params={"id": 2}, headers=ADMIN).status_code == 200
    assert [r["id"] for r in client.get("/api/routes").json()] == [1]


def test_route_errors_map_to_status_codes(client):
    assert client.post("/api/routes", json=ROUTE).status_code == 401
    assert client.post("/api/routes", json=ROUTE, headers={"X-Admin-Password": "nope"}).status_code == 401

    missing = client.put("/api/routes", params={"id": 9, "action": "set-upcoming"}, headers=ADMIN)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Route with id 9 not found"
    assert client.delete("/api/routes", headers=ADMIN).status_code == 400
    assert client.post("/api/routes", json={"action": "explode"}, headers=ADMIN).status_code == 400

    invalid = client.post("/api/routes", json={**ROUTE, "difficulty": "Brutal"}, headers=ADMIN)
    assert invalid.status_code == 400
    assert invalid.json()["errors"]


def test_upcoming_route_falls_back_when_unset(client):
    resp = client.get("/api/upcoming-route")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Campus Loop"
    assert resp.json()["isUpcoming"] is True


def test_upcoming_route_falls_back_when_storage_fails(client, monkeypatch):
    repo = client.app.state.route_repository

    def _boom():
        raise StorageUnavailableError("disk gone")

    monkeypatch.setattr(repo, "get_upcoming_route", _boom)
    assert client.get("/api/upcoming-route").json()["name"] == "Campus Loop"


def test_storage_failure_is_reported_as_500(client, monkeypatch):
    repo = client.app.state.route_repository

    def _boom(*args, **kwargs):
        raise StorageUnavailableError("disk full")

    monkeypatch.setattr(repo, "add_route", _boom)
    resp = client.post("/api/routes", json=ROUTE, headers=ADMIN)
    assert resp.status_code == 500
    assert resp.json()["error"] == "Storage unavailable"


def test_events_flow(client):
    created = client.post("/api/events", json=EVENT, headers=ADMIN)
    assert created.status_code == 201
    assert created.json()["id"] == 1
    assert created.json()["isActive"] is True
    client.post("/api/events", json={**EVENT, "title": "Saturday Long Run", "sortOrder": 0}, headers=ADMIN)

    titles = [e["title"] for e in client.get("/api/events").json()]
    assert titles == ["Saturday Long Run", "Wednesday Group Run"]

    resp = client.put("/api/events", params={"id": 2}, json={"isActive": False}, headers=ADMIN)
    assert resp.json()["isActive"] is False
    assert [e["id"] for e in client.get("/api/events").json()] == [1]
    assert [e["id"] for e in client.get("/api/events/all", headers=ADMIN).json()] == [2, 1]

    assert client.put("/api/events", params={"id": 7}, json={"title": "x"}, headers=ADMIN).status_code == 404
    assert client.delete("/api/events", params={"id": 7}, headers=ADMIN).status_code == 404
    assert client.delete("/api/events", params={"id": 1}, headers=ADMIN).status_code == 200

    incomplete = client.post("/api/events", json={"badge": "WEEKLY"}, headers=ADMIN)
    assert incomplete.status_code == 400
    assert incomplete.json()["message"] == "All fields are required"


def test_register_then_duplicate(client):
    resp = client.post("/api/register", json=REGISTRATION, headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    dup = client.post("/api/register", json={**REGISTRATION, "email": "alex@umich.edu"})
    assert dup.status_code == 409
    assert dup.json()["errors"] == ["Email address already registered"]

    stored = client.get("/api/registrations", headers=ADMIN).json()
    assert len(stored) == 1
    assert stored[0]["email"] == "alex@umich.edu"
    assert stored[0]["firstName"] == "Alex"
    assert stored[0]["ipAddress"] == "203.0.113.9"


def test_register_validation(client):
    bad = {**REGISTRATION, "email": "alex@gmail.com", "grade": "postdoc", "isUMUndergrad": False}
    resp = client.post("/api/register", json=bad)
    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert "Invalid class year" in errors
    assert any("@umich.edu" in e for e in errors)
    assert any("undergraduate" in e for e in errors)
    assert client.get("/api/register").json()["message"] == "Registration API is running"


def test_export_csv_and_json(client):
    client.post("/api/register", json=REGISTRATION)
    assert client.get("/api/export").status_code == 401

    resp = client.get("/api/export", headers=ADMIN)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0][:3] == ["ID", "Submitted At", "First Name"]
    assert rows[1][4] == "alex@umich.edu"

    data = client.get("/api/export", params={"format": "json"}, headers=ADMIN).json()
    assert data["count"] == 1
    assert client.get("/api/export", params={"format": "xml"}, headers=ADMIN).status_code == 400


def test_admin_login_and_rate_limit(client):
    assert client.post("/api/auth", json={"password": "letmein"}).json()["success"] is True
    assert client.post("/api/auth", json={"password": "wrong"}).status_code == 401
    assert client.post("/api/auth", json={"password": "wrong"}).status_code == 401
    blocked = client.post("/api/auth", json={"password": "letmein"})
    assert blocked.status_code == 429
    assert int(blocked.headers["retry-after"]) >= 1


def test_admin_login_without_configured_password(clean_env, tmp_path, database):
    app = create_app(get_settings(), record_store=JsonFileStore(tmp_path / "data"), database=database)
    with TestClient(app) as test_client:
        assert test_client.post("/api/auth", json={"password": "x"}).status_code == 500
        assert test_client.post("/api/routes", json=ROUTE).status_code == 500


def test_security_headers_present(client):
    resp = client.get("/api/routes")
    assert resp.headers["x-frame-options"] == "DENY"
    assert resp.headers["x-content-type-options"] == "nosniff"


def test_routes_with_unusable_stored_points_still_serve(client, tmp_path):
    JsonFileStore(tmp_path / "data").save_collection(
        "routes",
        [{"id": 1, "name": "A", "isUpcoming": True, "points": [{"lat": None, "lng": 1}]}],
    )
    routes = client.get("/api/routes")
    assert routes.status_code == 200
    assert routes.json()[0]["points"] == []
    upcoming = client.get("/api/upcoming-route")
    assert upcoming.status_code == 200
    assert upcoming.json()["name"] == "A"
