from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from runclub.dependencies import get_route_repository, require_admin
from runclub.domain.defaults import fallback_upcoming_route
from runclub.domain.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["routes"])


def _required_id(value) -> int:
    if value in (None, ""):
        raise HTTPException(400, "Route ID is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(400, "Route ID must be an integer") from None


@router.get("/routes")
def list_routes(request: Request):
    repo = get_route_repository(request)
    return [route.to_dict() for route in repo.list_routes()]


@router.post("/routes", dependencies=[Depends(require_admin)])
def manage_routes(request: Request, payload: dict = Body(...)):
    """Direct create, or the legacy {"action": ...} form used by the old dashboard."""
    repo = get_route_repository(request)
    data = dict(payload)
    action = data.pop("action", None)
    if action is None:
        route_id = repo.add_route(data)
        return {"id": route_id, "message": "Route created successfully"}
    if action == "add":
        route_id = repo.add_route(data)
        return {"id": route_id, "message": "Route added successfully"}
    if action == "update":
        route_id = _required_id(data.pop("id", None))
        repo.update_route(route_id, data)
        return {"message": "Route updated successfully"}
    if action == "delete":
        repo.delete_route(_required_id(data.get("id")))
        return {"message": "Route deleted successfully"}
    if action == "setUpcoming":
        repo.set_upcoming_route(_required_id(data.get("id")))
        return {"message": "Upcoming route set successfully"}
    raise HTTPException(400, "Invalid action")


@router.put("/routes", dependencies=[Depends(require_admin)])
def update_route(
    request: Request,
    id: Optional[str] = None,
    action: Optional[str] = None,
    payload: Optional[dict] = Body(None),
):
    repo = get_route_repository(request)
    route_id = _required_id(id)
    if action == "set-upcoming":
        repo.set_upcoming_route(route_id)
        return {"message": "Upcoming route set successfully"}
    route = repo.update_route(route_id, payload or {})
    return {"message": "Route updated successfully", "route": route.to_dict()}


@router.delete("/routes", dependencies=[Depends(require_admin)])
def delete_route(request: Request, id: Optional[str] = None):
    repo = get_route_repository(request)
    repo.delete_route(_required_id(id))
    return {"message": "Route deleted successfully"}


@router.get("/upcoming-route")
def upcoming_route(request: Request):
    repo = get_route_repository(request)
    try:
        route = repo.get_upcoming_route()
    except StorageUnavailableError as exc:
        logger.warning("Serving fallback upcoming route: %s", exc)
        return fallback_upcoming_route()
    if route is None:
        return fallback_upcoming_route()
    return route.to_dict()
