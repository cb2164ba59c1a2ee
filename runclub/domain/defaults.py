"""Built-in content shown when nothing has been configured yet."""

from __future__ import annotations

FALLBACK_UPCOMING_ROUTE = {
    "id": 1,
    "name": "Campus Loop",
    "description": (
        "A scenic 3-mile loop around the University of Michigan campus, perfect for "
        "beginners and a great way to see the beautiful campus."
    ),
    "distance": "3.0 miles",
    "difficulty": "Easy",
    "estimatedTime": "25-30 minutes",
    "points": [
        {"lat": 42.2808, "lng": -83.743, "name": "Start: Diag"},
        {"lat": 42.2776, "lng": -83.7382, "name": "Michigan Union"},
        {"lat": 42.2737, "lng": -83.7347, "name": "Law School"},
        {"lat": 42.2769, "lng": -83.7321, "name": "Medical Campus"},
        {"lat": 42.2808, "lng": -83.743, "name": "End: Diag"},
    ],
    "isUpcoming": True,
    "createdAt": "2025-08-10T00:00:00.000Z",
    "updatedAt": "2025-08-10T00:00:00.000Z",
}

DEFAULT_EVENTS = (
    {
        "badge": "WEEKLY",
        "title": "Wednesday Group Run",
        "description": "Our signature 5-mile group run with multiple pace groups for all fitness levels.",
        "date": "Every Wednesday, 6:00 PM",
        "location": "Ann Arbor - Meet at TBD",
        "sortOrder": 1,
    },
    {
        "badge": "WEEKEND",
        "title": "Saturday Long Run",
        "description": "Build endurance with our weekend long runs, perfect for marathon training.",
        "date": "Every Saturday, 7:00 AM",
        "location": "Ann Arbor - Meet at TBD",
        "sortOrder": 2,
    },
    {
        "badge": "MONTHLY",
        "title": "Social Run & Coffee",
        "description": "Easy-paced social run followed by coffee. Great for newcomers to meet the group.",
        "date": "First Sunday of each month",
        "location": "Ann Arbor - Meet at TBD",
        "sortOrder": 3,
    },
)


def fallback_upcoming_route() -> dict:
    route = dict(FALLBACK_UPCOMING_ROUTE)
    route["points"] = [dict(p) for p in FALLBACK_UPCOMING_ROUTE["points"]]
    return route
