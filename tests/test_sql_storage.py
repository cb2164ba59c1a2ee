"""
Relational record store against a temporary SQLite database.
"""
from __future__ import annotations

import pytest
from sqlalchemy import update

from runclub.db.models import RouteRow
from runclub.repositories.sql_storage import SqlRecordStore

ROUTES = [
    {
        "id": 1,
        "name": "Campus Loop",
        "description": "Around the Diag",
        "distance": "3.0 miles",
        "difficulty": "Easy",
        "estimatedTime": "25-30 minutes",
        "points": [{"lat": 42.2808, "lng": -83.743, "name": "Start: Diag"}, {"lat": 42.2776, "lng": -83.7382}],
        "isUpcoming": True,
        "createdAt": "2025-08-10T00:00:00.000Z",
        "updatedAt": "2025-08-11T12:30:45.123Z",
    },
    {
        "id": 4,
        "name": "Arb Hills",
        "description": "",
        "distance": "6 miles",
        "difficulty": "Hard",
        "estimatedTime": "",
        "points": [],
        "isUpcoming": False,
        "createdAt": "2025-09-01T07:00:00.000Z",
        "updatedAt": "2025-09-01T07:00:00.000Z",
    },
]

EVENTS = [
    {
        "id": 2,
        "badge": "WEEKLY",
        "title": "Wednesday Group Run",
        "description": "5 miles",
        "date": "Every Wednesday, 6:00 PM",
        "location": "Ann Arbor",
        "isActive": False,
        "sortOrder": 3,
        "createdAt": "2025-08-10T00:00:00.000Z",
        "updatedAt": "2025-08-10T00:00:00.000Z",
    }
]


def test_round_trip_routes_and_events(database):
    store = SqlRecordStore(database)
    store.save_collection("routes", ROUTES)
    store.save_collection("events", EVENTS)
    assert store.load_collection("routes") == ROUTES
    assert store.load_collection("events") == EVENTS


def test_save_replaces_previous_contents(database):
    store = SqlRecordStore(database)
    store.save_collection("routes", ROUTES)
    store.save_collection("routes", ROUTES[1:])
    assert [r["id"] for r in store.load_collection("routes")] == [4]
    store.save_collection("routes", [])
    assert store.load_collection("routes") == []


def test_malformed_points_column_reads_as_empty(database):
    store = SqlRecordStore(database)
    store.save_collection("routes", ROUTES[:1])
    with database.session() as session:
        session.execute(update(RouteRow).where(RouteRow.id == 1).values(points="{oops"))
        session.commit()
    assert store.load_collection("routes")[0]["points"] == []


def test_unknown_collection_is_rejected(database):
    store = SqlRecordStore(database)
    with pytest.raises(ValueError):
        store.load_collection("registrations")
