from __future__ import annotations

import logging

from fastapi import APIRouter, Body, HTTPException, Request

from runclub.core.rate_limiter import enforce_login_limit
from runclub.core.security import check_admin_password
from runclub.dependencies import get_app_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth")
def admin_login(request: Request, payload: dict = Body(...)):
    settings = get_app_settings(request)
    enforce_login_limit(request, settings)
    if not settings.admin_configured:
        logger.error("ADMIN_PASSWORD is not set; refusing admin login")
        raise HTTPException(500, "Server configuration error - admin password not configured")
    password = payload.get("password")
    if not isinstance(password, str) or not check_admin_password(password, settings):
        raise HTTPException(401, "Invalid password")
    return {"success": True, "message": "Authentication successful"}
