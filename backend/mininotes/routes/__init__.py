# Routes package init
"""
Mini Notes Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:    POST /api/auth/register, /api/auth/login, /api/auth/logout
    - notes.py:   GET|POST /api/notes, GET|PUT|DELETE /api/notes/:id
    - static.py:  GET / and /index.html (front-end shell)
    - health.py:  GET /health (FastAPI route, outside the notes router)

Design Principle:
    Handlers are THIN: parse the body, resolve the caller, call a service,
    serialize. They never catch service exceptions; the router maps them to
    status codes in one place.
"""

from mininotes.router import Router
from mininotes.routes.auth import register_auth_routes
from mininotes.routes.notes import register_note_routes
from mininotes.routes.static import register_static_routes
from mininotes.services.auth_service import AuthService
from mininotes.services.note_service import NoteService


def build_router(
    auth_service: AuthService,
    note_service: NoteService,
    allow_origin: str = "*",
) -> Router:
    """Register every application route in its matching order."""
    router = Router(allow_origin=allow_origin)
    register_auth_routes(router, auth_service)
    register_note_routes(router, auth_service, note_service)
    register_static_routes(router)
    return router
