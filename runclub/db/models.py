"""SQLAlchemy models mirroring the JSON collection documents."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    func,
)

from .session import Base


class RouteRow(Base):
    __tablename__ = "routes"
    __table_args__ = (
        CheckConstraint("difficulty IN ('Easy', 'Moderate', 'Hard')", name="ck_routes_difficulty"),
    )

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    distance = Column(String(64), nullable=False, default="")
    difficulty = Column(String(16), nullable=False, default="Easy")
    estimated_time = Column(String(64), nullable=False, default="")
    points = Column(Text, nullable=False, default="[]")  # JSON text of RoutePoint list
    is_upcoming = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class EventRow(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=False)
    badge = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(String(255), nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class RegistrationRow(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(64), nullable=False, default="")
    is_um_undergrad = Column(Boolean, nullable=False, default=False)
    grade = Column(String(32), nullable=False, default="")
    major = Column(String(255), nullable=False, default="")
    running_experience = Column(Text, nullable=False, default="")
    fitness_level = Column(String(64), nullable=False, default="")
    goals = Column(Text, nullable=False, default="")
    emergency_contact = Column(String(255), nullable=False, default="")
    emergency_phone = Column(String(64), nullable=False, default="")
    medical_conditions = Column(Text, nullable=False, default="")
    availability = Column(Text, nullable=False, default="[]")  # JSON text of weekday list
    hear_about_us = Column(Text, nullable=False, default="")
    additional_info = Column(Text, nullable=False, default="")
    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ip_address = Column(String(64), nullable=False, default="")
