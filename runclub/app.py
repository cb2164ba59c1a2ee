from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from runclub.core.config import Settings, get_settings
from runclub.core.logging import configure_logging
from runclub.db import Database
from runclub.domain.errors import (
    DuplicateEmailError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from runclub.repositories.event_repository import EventRepository
from runclub.repositories.registration_repository import RegistrationRepository
from runclub.repositories.route_repository import RouteRepository
from runclub.repositories.store import RecordStore, build_record_store
from runclub.routers import auth as auth_router
from runclub.routers import events as events_router
from runclub.routers import registrations as registrations_router
from runclub.routers import routes as routes_router
from runclub.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(DuplicateEmailError)
    async def _duplicate(request: Request, exc: DuplicateEmailError):
        return JSONResponse(
            {
                "success": False,
                "error": str(exc),
                "message": str(exc),
                "errors": ["Email address already registered"],
            },
            status_code=409,
        )

    @app.exception_handler(ValidationError)
    async def _invalid(request: Request, exc: ValidationError):
        return JSONResponse(
            {"success": False, "error": exc.message, "message": exc.message, "errors": exc.errors},
            status_code=400,
        )

    @app.exception_handler(StorageUnavailableError)
    async def _storage(request: Request, exc: StorageUnavailableError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": "Storage unavailable", "details": str(exc)}, status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    *,
    record_store: Optional[RecordStore] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the application and the storage handles it owns.

    Tests pass their own record_store/database; in production both come from
    Settings. Handles are disposed when the app shuts down.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    owns_database = database is None
    if database is None:
        database = Database(settings.database_url)
    database.create_all()
    if record_store is None:
        record_store = build_record_store(settings, database=database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(title="Run Club API", lifespan=lifespan)

    allowed_cors = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8000"})
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    registration_repository = RegistrationRepository(database)
    app.state.settings = settings
    app.state.database = database
    app.state.record_store = record_store
    app.state.route_repository = RouteRepository(record_store)
    app.state.event_repository = EventRepository(record_store)
    app.state.registration_repository = registration_repository
    app.state.registration_service = RegistrationService(registration_repository, settings)

    _register_error_handlers(app)
    app.include_router(auth_router.router)
    app.include_router(routes_router.router)
    app.include_router(events_router.router)
    app.include_router(registrations_router.router)
    return app


def main() -> None:
    import uvicorn

    uvicorn.run("runclub.app:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
