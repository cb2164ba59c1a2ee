"""
Registration use case: validate, de-duplicate, store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from runclub.core.config import Settings
from runclub.domain.errors import DuplicateEmailError, ValidationError
from runclub.domain.registration import normalize_registration, validate_registration
from runclub.repositories.registration_repository import RegistrationRepository


@dataclass
class RegistrationService:
    repository: RegistrationRepository
    settings: Settings

    def submit(self, data: Mapping[str, Any], ip_address: str = "") -> int:
        """Store a new registration and return its id."""
        errors = validate_registration(data, self.settings.registration_email_domain)
        if errors:
            raise ValidationError("Validation failed", errors)
        fields = normalize_registration(data, ip_address=ip_address)
        if self.repository.email_exists(fields["email"]):
            raise DuplicateEmailError(fields["email"])
        return self.repository.insert_registration(fields)
