from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from runclub.dependencies import get_event_repository, require_admin

router = APIRouter(prefix="/api", tags=["events"])


def _required_id(value) -> int:
    if value in (None, ""):
        raise HTTPException(400, "Event ID is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(400, "Event ID must be an integer") from None


@router.get("/events")
def list_active_events(request: Request):
    repo = get_event_repository(request)
    return [event.to_dict() for event in repo.list_active_events()]


@router.get("/events/all", dependencies=[Depends(require_admin)])
def list_all_events(request: Request):
    repo = get_event_repository(request)
    return [event.to_dict() for event in repo.list_all_events()]


@router.post("/events", status_code=201, dependencies=[Depends(require_admin)])
def create_event(request: Request, payload: dict = Body(...)):
    repo = get_event_repository(request)
    event_id = repo.add_event(payload)
    return repo.get_event(event_id).to_dict()


@router.put("/events", dependencies=[Depends(require_admin)])
def update_event(request: Request, id: Optional[str] = None, payload: dict = Body(...)):
    repo = get_event_repository(request)
    return repo.update_event(_required_id(id), payload).to_dict()


@router.delete("/events", dependencies=[Depends(require_admin)])
def delete_event(request: Request, id: Optional[str] = None):
    repo = get_event_repository(request)
    repo.delete_event(_required_id(id))
    return {"message": "Event deleted successfully"}
