"""Validation rules for membership registrations."""

from __future__ import annotations

import re
from typing import Any, Mapping

VALID_GRADES = ("freshman", "sophomore", "junior", "senior")


def _required_text(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    return isinstance(value, str) and bool(value.strip())


def validate_registration(data: Mapping[str, Any], email_domain: str = "umich.edu") -> list[str]:
    """Return a list of human-readable problems; empty means valid."""
    errors: list[str] = []

    if not _required_text(data, "firstName"):
        errors.append("First name is required")
    if not _required_text(data, "lastName"):
        errors.append("Last name is required")

    email = data.get("email")
    if not _required_text(data, "email"):
        errors.append("Email address is required")
    else:
        domain = (email_domain or "").lstrip("@").lower()
        pattern = re.compile(r"[^\s@]+@" + re.escape(domain)) if domain else re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
        if not pattern.fullmatch(email.strip().lower()):
            errors.append(f"Email must be a valid address ending in @{domain}" if domain else "Invalid email format")

    if not _required_text(data, "phone"):
        errors.append("Phone number is required")
    if data.get("isUMUndergrad") is not True:
        errors.append("Must confirm current undergraduate student status")

    grade = data.get("grade")
    if not _required_text(data, "grade"):
        errors.append("Class year is required")
    elif grade not in VALID_GRADES:
        errors.append("Invalid class year")

    if not _required_text(data, "emergencyContact"):
        errors.append("Emergency contact name is required")
    if not _required_text(data, "emergencyPhone"):
        errors.append("Emergency contact phone is required")

    availability = data.get("availability")
    if availability is not None and not isinstance(availability, list):
        errors.append("Availability must be a list of weekdays")
    return errors


def normalize_registration(data: Mapping[str, Any], ip_address: str = "") -> dict:
    """Trim text fields and lower-case the email, as stored."""

    def text(key: str) -> str:
        value = data.get(key)
        return value.strip() if isinstance(value, str) else ""

    availability = data.get("availability")
    return {
        "firstName": text("firstName"),
        "lastName": text("lastName"),
        "email": text("email").lower(),
        "phone": text("phone"),
        "isUMUndergrad": data.get("isUMUndergrad") is True,
        "grade": text("grade"),
        "major": text("major"),
        "runningExperience": text("runningExperience"),
        "fitnessLevel": text("fitnessLevel"),
        "goals": text("goals"),
        "emergencyContact": text("emergencyContact"),
        "emergencyPhone": text("emergencyPhone"),
        "medicalConditions": text("medicalConditions"),
        "availability": [str(day) for day in availability] if isinstance(availability, list) else [],
        "hearAboutUs": text("hearAboutUs"),
        "additionalInfo": text("additionalInfo"),
        "ipAddress": ip_address or "",
    }
