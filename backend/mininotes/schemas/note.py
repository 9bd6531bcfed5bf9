"""
Mini Notes Backend — Note Schemas
===================================

What:  Pydantic models for the stored note record and the note request bodies.
Why:   One model is both the storage document and the API representation,
       so the JSON in the notes namespace and the JSON clients receive can
       never drift apart.
How:   Field names are snake_case in Python and camelCase on the wire
       (alias_generator=to_camel). Always dump with by_alias=True.

Stored document (notes namespace, key user:<userId>:notes:<noteId>):
    {
        "id": "6f1c...",
        "userId": "a2b4...",
        "title": "Groceries",
        "content": "- milk\\n- eggs",
        "createdAt": "2026-10-19T09:12:44.120311Z",
        "updatedAt": "2026-10-19T09:12:44.120311Z"
    }
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

CAMEL_CASE = {"alias_generator": to_camel, "populate_by_name": True}


class Note(BaseModel):
    """A markdown note owned by exactly one user."""

    id: str = Field(description="Note identifier (uuid4)")
    user_id: str = Field(description="Owning user's id")
    title: str
    content: str = Field(description="Raw markdown; rendering is the client's job")
    created_at: datetime
    updated_at: datetime

    model_config = CAMEL_CASE


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    Both fields are optional at the schema level so that a missing field is
    reported by NoteService with the API's own message, not pydantic's.
    """

    title: Optional[str] = None
    content: Optional[str] = None


class NoteUpdate(BaseModel):
    """Body of PUT /api/notes/:id. Omitted fields keep their stored value."""

    title: Optional[str] = None
    content: Optional[str] = None
