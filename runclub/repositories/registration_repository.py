"""Append-only registration storage backed by SQLAlchemy."""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from runclub.db import Database
from runclub.db.models import RegistrationRow
from runclub.domain.errors import DuplicateEmailError, StorageUnavailableError
from runclub.domain.models import Registration, format_timestamp, utcnow

from .sql_storage import load_json_list

logger = logging.getLogger(__name__)


def _to_registration(row: RegistrationRow) -> Registration:
    return Registration(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone or "",
        is_um_undergrad=bool(row.is_um_undergrad),
        grade=row.grade or "",
        major=row.major or "",
        running_experience=row.running_experience or "",
        fitness_level=row.fitness_level or "",
        goals=row.goals or "",
        emergency_contact=row.emergency_contact or "",
        emergency_phone=row.emergency_phone or "",
        medical_conditions=row.medical_conditions or "",
        availability=[str(day) for day in load_json_list(row.availability, column="registrations.availability")],
        hear_about_us=row.hear_about_us or "",
        additional_info=row.additional_info or "",
        submitted_at=format_timestamp(row.submitted_at) if row.submitted_at else "",
        ip_address=row.ip_address or "",
    )


class RegistrationRepository:
    """
    Inserts and reads registrations. There is no update or delete.

    The duplicate-email pre-check and the insert are separate statements;
    the UNIQUE constraint on email catches the race between them.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def email_exists(self, email: str) -> bool:
        value = (email or "").strip().lower()
        if not value:
            return False
        try:
            with self.database.session() as session:
                stmt = select(RegistrationRow.id).where(func.lower(RegistrationRow.email) == value).limit(1)
                return session.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot query registrations: {exc}") from exc

    def insert_registration(self, fields: Mapping[str, Any]) -> int:
        email = (fields.get("email") or "").strip().lower()
        if not email:
            raise ValueError("email is required")
        if self.email_exists(email):
            raise DuplicateEmailError(email)

        entity = RegistrationRow(
            first_name=fields.get("firstName") or "",
            last_name=fields.get("lastName") or "",
            email=email,
            phone=fields.get("phone") or "",
            is_um_undergrad=bool(fields.get("isUMUndergrad")),
            grade=fields.get("grade") or "",
            major=fields.get("major") or "",
            running_experience=fields.get("runningExperience") or "",
            fitness_level=fields.get("fitnessLevel") or "",
            goals=fields.get("goals") or "",
            emergency_contact=fields.get("emergencyContact") or "",
            emergency_phone=fields.get("emergencyPhone") or "",
            medical_conditions=fields.get("medicalConditions") or "",
            availability=json.dumps(list(fields.get("availability") or [])),
            hear_about_us=fields.get("hearAboutUs") or "",
            additional_info=fields.get("additionalInfo") or "",
            submitted_at=utcnow(),
            ip_address=fields.get("ipAddress") or "",
        )
        try:
            with self.database.session() as session:
                session.add(entity)
                session.commit()
                new_id = entity.id
        except IntegrityError as exc:
            raise DuplicateEmailError(email) from exc
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot insert registration: {exc}") from exc
        logger.info("Stored registration %s", new_id)
        return new_id

    def get_registration(self, registration_id: int) -> Optional[Registration]:
        try:
            with self.database.session() as session:
                row = session.get(RegistrationRow, registration_id)
                return _to_registration(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot load registration: {exc}") from exc

    def list_all_registrations(self) -> list[Registration]:
        """Newest submissions first."""
        try:
            with self.database.session() as session:
                stmt = select(RegistrationRow).order_by(RegistrationRow.submitted_at.desc(), RegistrationRow.id.desc())
                return [_to_registration(row) for row in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot list registrations: {exc}") from exc

    def count(self) -> int:
        try:
            with self.database.session() as session:
                return int(session.execute(select(func.count(RegistrationRow.id))).scalar_one())
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot count registrations: {exc}") from exc
