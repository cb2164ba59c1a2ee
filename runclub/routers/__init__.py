"""
FastAPI routers grouped by resource (routes, events, registrations, auth).

Each module exposes an APIRouter that the app factory includes; handlers
translate request bodies into repository calls and leave error-to-status
mapping to the handlers registered in runclub.app.
"""
