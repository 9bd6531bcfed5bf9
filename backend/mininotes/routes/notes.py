"""
Mini Notes Backend — Notes Route Handlers
===========================================

What:  CRUD endpoints for the authenticated user's notes.
How:   Every handler first resolves the bearer token (401 if it does not
       resolve), then delegates to NoteService with the caller's user id.

Route Inventory:
    GET    /api/notes       → 200 {"notes": [...]}  newest updatedAt first
    POST   /api/notes       → 201 {"note": {...}}
    GET    /api/notes/:id   → 200 {"note": {...}}
    PUT    /api/notes/:id   → 200 {"note": {...}}   merged with stored values
    DELETE /api/notes/:id   → 200 {"message": "Note deleted successfully"}

Caching:
    Note responses are user-specific and mutable, so they are sent with
    Cache-Control: no-store.
"""

from starlette.requests import Request
from starlette.responses import Response

from mininotes.router import Router
from mininotes.routes.body import read_json_body
from mininotes.schemas.note import Note, NoteCreate, NoteUpdate
from mininotes.services.auth_service import AuthService
from mininotes.services.note_service import NoteService


def _dump(note: Note) -> dict:
    return note.model_dump(mode="json", by_alias=True)


def register_note_routes(
    router: Router,
    auth_service: AuthService,
    note_service: NoteService,
) -> None:

    def respond(content: dict, status_code: int = 200) -> Response:
        response = router.json(content, status_code=status_code)
        response.headers["Cache-Control"] = "no-store"
        return response

    async def list_notes(request: Request) -> Response:
        user_id = await auth_service.require_user(request)
        notes = await note_service.list_notes(user_id)
        return respond({"notes": [_dump(n) for n in notes]})

    async def create_note(request: Request) -> Response:
        user_id = await auth_service.require_user(request)
        body = await read_json_body(request, NoteCreate)
        note = await note_service.create_note(user_id, body.title, body.content)
        return respond({"note": _dump(note)}, status_code=201)

    async def get_note(request: Request) -> Response:
        user_id = await auth_service.require_user(request)
        note = await note_service.get_note(user_id, request.path_params["id"])
        return respond({"note": _dump(note)})

    async def update_note(request: Request) -> Response:
        user_id = await auth_service.require_user(request)
        body = await read_json_body(request, NoteUpdate)
        note = await note_service.update_note(
            user_id,
            request.path_params["id"],
            title=body.title,
            content=body.content,
        )
        return respond({"note": _dump(note)})

    async def delete_note(request: Request) -> Response:
        user_id = await auth_service.require_user(request)
        await note_service.delete_note(user_id, request.path_params["id"])
        return respond({"message": "Note deleted successfully"})

    router.get("/api/notes", list_notes)
    router.post("/api/notes", create_note)
    router.get("/api/notes/:id", get_note)
    router.put("/api/notes/:id", update_note)
    router.delete("/api/notes/:id", delete_note)
