from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import Response

from runclub.core.rate_limiter import client_ip
from runclub.dependencies import (
    get_registration_repository,
    get_registration_service,
    require_admin,
)
from runclub.domain.models import now_timestamp
from runclub.services.export_service import registrations_to_csv, registrations_to_json

router = APIRouter(prefix="/api", tags=["registrations"])


@router.post("/register")
def register(request: Request, payload: dict = Body(...)):
    svc = get_registration_service(request)
    registration_id = svc.submit(payload, ip_address=client_ip(request))
    return {
        "success": True,
        "message": "Registration submitted successfully",
        "registrationId": registration_id,
    }


@router.get("/register")
def register_status():
    return {"message": "Registration API is running", "timestamp": now_timestamp()}


@router.get("/registrations", dependencies=[Depends(require_admin)])
def list_registrations(request: Request):
    repo = get_registration_repository(request)
    return [r.to_dict() for r in repo.list_all_registrations()]


@router.get("/export", dependencies=[Depends(require_admin)])
def export_registrations(request: Request, format: str = "csv"):
    repo = get_registration_repository(request)
    registrations = repo.list_all_registrations()
    if format == "json":
        return registrations_to_json(registrations)
    if format != "csv":
        raise HTTPException(400, "format must be csv or json")
    filename = f"registrations-{date.today().isoformat()}.csv"
    return Response(
        registrations_to_csv(registrations),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
