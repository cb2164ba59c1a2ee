"""
Entity dataclasses and their collection-document representation.

Collection documents (JSON file, KV value) use camelCase keys; the
dataclasses use Python attribute names and convert with from_dict/to_dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import math
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

DIFFICULTIES = ("Easy", "Moderate", "Hard")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Serialize as ISO-8601 UTC with milliseconds and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def now_timestamp() -> str:
    return format_timestamp(utcnow())


def stored_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Integer from a stored field; None when the value cannot be read as one."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class RoutePoint:
    latitude: float
    longitude: float
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["RoutePoint"]:
        """Stored {lat, lng, name?}; None unless both coordinates are finite numbers."""
        try:
            latitude = float(data.get("lat"))
            longitude = float(data.get("lng"))
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            return None
        label = data.get("name")
        return cls(latitude=latitude, longitude=longitude, label=str(label) if label else None)

    def to_dict(self) -> dict:
        out: dict = {"lat": self.latitude, "lng": self.longitude}
        if self.label:
            out["name"] = self.label
        return out


def _stored_points(value: Any, route_id: Any) -> list[RoutePoint]:
    if not isinstance(value, (list, tuple)):
        if value:
            logger.warning("Route %s has non-list points; reading as empty", route_id)
        return []
    points = []
    for index, raw in enumerate(value):
        point = RoutePoint.from_dict(raw) if isinstance(raw, Mapping) else None
        if point is None:
            logger.warning("Skipping malformed point %d of route %s", index, route_id)
            continue
        points.append(point)
    return points


@dataclass
class Route:
    id: int
    name: str
    description: str = ""
    distance: str = ""
    difficulty: str = "Easy"
    estimated_time: str = ""
    points: list[RoutePoint] = field(default_factory=list)
    is_upcoming: bool = False
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Route":
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            description=data.get("description") or "",
            distance=data.get("distance") or "",
            difficulty=data.get("difficulty") or "Easy",
            estimated_time=data.get("estimatedTime") or "",
            points=_stored_points(data.get("points"), data.get("id")),
            is_upcoming=bool(data.get("isUpcoming")),
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "distance": self.distance,
            "difficulty": self.difficulty,
            "estimatedTime": self.estimated_time,
            "points": [p.to_dict() for p in self.points],
            "isUpcoming": self.is_upcoming,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Event:
    id: int
    badge: str
    title: str
    description: str = ""
    date: str = ""
    location: str = ""
    is_active: bool = True
    sort_order: int = 0
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Event":
        is_active = data.get("isActive")
        sort_order = stored_int(data.get("sortOrder"))
        if sort_order is None:
            logger.warning("Event %s has unreadable sortOrder %r; using 0", data.get("id"), data.get("sortOrder"))
            sort_order = 0
        return cls(
            id=int(data["id"]),
            badge=data.get("badge") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            date=data.get("date") or "",
            location=data.get("location") or "",
            is_active=True if is_active is None else bool(is_active),
            sort_order=sort_order,
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "badge": self.badge,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "location": self.location,
            "isActive": self.is_active,
            "sortOrder": self.sort_order,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Registration:
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    is_um_undergrad: bool = False
    grade: str = ""
    major: str = ""
    running_experience: str = ""
    fitness_level: str = ""
    goals: str = ""
    emergency_contact: str = ""
    emergency_phone: str = ""
    medical_conditions: str = ""
    availability: list[str] = field(default_factory=list)
    hear_about_us: str = ""
    additional_info: str = ""
    submitted_at: str = ""
    ip_address: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "isUMUndergrad": self.is_um_undergrad,
            "grade": self.grade,
            "major": self.major,
            "runningExperience": self.running_experience,
            "fitnessLevel": self.fitness_level,
            "goals": self.goals,
            "emergencyContact": self.emergency_contact,
            "emergencyPhone": self.emergency_phone,
            "medicalConditions": self.medical_conditions,
            "availability": list(self.availability),
            "hearAboutUs": self.hear_about_us,
            "additionalInfo": self.additional_info,
            "submittedAt": self.submitted_at,
            "ipAddress": self.ip_address,
        }
