"""CSV/JSON export of stored registrations for the admin dashboard."""

from __future__ import annotations

import csv
import io
from typing import Iterable

from runclub.domain.models import Registration

CSV_COLUMNS = (
    ("id", "ID"),
    ("submittedAt", "Submitted At"),
    ("firstName", "First Name"),
    ("lastName", "Last Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("isUMUndergrad", "UM Undergrad"),
    ("grade", "Class Year"),
    ("major", "Major"),
    ("runningExperience", "Running Experience"),
    ("fitnessLevel", "Fitness Level"),
    ("goals", "Goals"),
    ("emergencyContact", "Emergency Contact"),
    ("emergencyPhone", "Emergency Phone"),
    ("medicalConditions", "Medical Conditions"),
    ("availability", "Availability"),
    ("hearAboutUs", "Heard About Us"),
    ("additionalInfo", "Additional Info"),
    ("ipAddress", "IP Address"),
)


def _cell(value) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list):
        return "; ".join(str(v) for v in value)
    return "" if value is None else str(value)


def registrations_to_csv(registrations: Iterable[Registration]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([label for _, label in CSV_COLUMNS])
    for registration in registrations:
        record = registration.to_dict()
        writer.writerow([_cell(record.get(key)) for key, _ in CSV_COLUMNS])
    return buffer.getvalue()


def registrations_to_json(registrations: Iterable[Registration]) -> dict:
    data = [r.to_dict() for r in registrations]
    return {"success": True, "data": data, "count": len(data)}
