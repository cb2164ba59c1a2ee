"""
Accessors for the handles the app factory stores on app.state.

Routers depend on these instead of constructing repositories themselves.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from runclub.core.config import Settings
from runclub.core.security import check_admin_password
from runclub.repositories.event_repository import EventRepository
from runclub.repositories.registration_repository import RegistrationRepository
from runclub.repositories.route_repository import RouteRepository
from runclub.services.registration_service import RegistrationService

ADMIN_HEADER = "X-Admin-Password"


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured on app.state")
    return value


def get_app_settings(request: Request) -> Settings:
    return _state(request, "settings")


def get_route_repository(request: Request) -> RouteRepository:
    return _state(request, "route_repository")


def get_event_repository(request: Request) -> EventRepository:
    return _state(request, "event_repository")


def get_registration_repository(request: Request) -> RegistrationRepository:
    return _state(request, "registration_repository")


def get_registration_service(request: Request) -> RegistrationService:
    return _state(request, "registration_service")


def require_admin(request: Request) -> None:
    settings = get_app_settings(request)
    if not settings.admin_configured:
        raise HTTPException(500, "Server configuration error - admin password not configured")
    if not check_admin_password(request.headers.get(ADMIN_HEADER), settings):
        raise HTTPException(401, "Invalid password")
