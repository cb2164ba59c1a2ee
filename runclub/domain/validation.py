"""Field normalization for route and event payloads (camelCase keys)."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from .errors import ValidationError
from .models import DIFFICULTIES

ROUTE_FIELDS = ("name", "description", "distance", "difficulty", "estimatedTime", "points", "isUpcoming")
EVENT_FIELDS = ("badge", "title", "description", "date", "location", "isActive", "sortOrder")
EVENT_REQUIRED = ("badge", "title", "description", "date", "location")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _whole_number(value: Any) -> Optional[int]:
    """int for integral input ("3", 3, 3.0, empty as 0); None for booleans, fractions and text."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_points(value: Any) -> list[dict]:
    """Validate an ordered list of {lat, lng, name?} points."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Invalid route points", ["points must be a list"])
    points = []
    for index, raw in enumerate(value):
        if not isinstance(raw, Mapping):
            raise ValidationError("Invalid route points", [f"point {index} must be an object"])
        try:
            lat = float(raw.get("lat"))
            lng = float(raw.get("lng"))
        except (TypeError, ValueError):
            raise ValidationError("Invalid route points", [f"point {index} needs numeric lat/lng"]) from None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValidationError("Invalid route points", [f"point {index} has non-finite coordinates"])
        point: dict = {"lat": lat, "lng": lng}
        name = _text(raw.get("name"))
        if name:
            point["name"] = name
        points.append(point)
    return points


def clean_route_fields(data: Mapping[str, Any], *, partial: bool) -> dict:
    """
    Keep only the known route fields, normalized.

    With partial=False the result carries every field (defaults filled in)
    and requires a name; with partial=True only the provided keys survive.
    """
    cleaned: dict = {}
    for key in ROUTE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "points":
            cleaned[key] = normalize_points(value)
        elif key == "isUpcoming":
            cleaned[key] = _flag(value)
        else:
            cleaned[key] = _text(value)

    errors = []
    if "difficulty" in cleaned and cleaned["difficulty"] not in DIFFICULTIES:
        errors.append(f"difficulty must be one of {', '.join(DIFFICULTIES)}")
    if "name" in cleaned and not cleaned["name"]:
        errors.append("name is required")
    if not partial:
        if "name" not in cleaned:
            errors.append("name is required")
        cleaned.setdefault("description", "")
        cleaned.setdefault("distance", "")
        cleaned.setdefault("difficulty", "Easy")
        cleaned.setdefault("estimatedTime", "")
        cleaned.setdefault("points", [])
        cleaned.setdefault("isUpcoming", False)
    if errors:
        raise ValidationError("Invalid route", errors)
    return cleaned


def clean_event_fields(data: Mapping[str, Any], *, partial: bool) -> dict:
    cleaned: dict = {}
    errors = []
    for key in EVENT_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "isActive":
            cleaned[key] = _flag(value)
        elif key == "sortOrder":
            sort_order = _whole_number(value)
            if sort_order is None:
                errors.append("sortOrder must be an integer")
            else:
                cleaned[key] = sort_order
        else:
            cleaned[key] = _text(value)

    for key in EVENT_REQUIRED:
        if key in cleaned and not cleaned[key]:
            errors.append(f"{key} is required")
        elif not partial and key not in cleaned:
            errors.append(f"{key} is required")
    if not partial:
        cleaned.setdefault("isActive", True)
        cleaned.setdefault("sortOrder", 0)
    if errors:
        raise ValidationError("All fields are required" if not partial else "Invalid event", errors)
    return cleaned
