"""
Mini Notes Backend — Note Service
===================================

What:  Create, list, read, update and delete a user's notes.
Why:   Encapsulates note rules independent of HTTP concerns.
How:   Each note is one JSON document in the notes namespace under
       user:<userId>:notes:<noteId>.

Ownership:
    Every lookup builds its key from the caller's user id. A note id that
    belongs to someone else simply is not under the caller's prefix, so it
    is reported as NotFoundError (404), the same as a note that never
    existed. The service never loads another user's record to compare
    owners, which means there is no 403 path that could confirm a note id.

Design Decision:
    NoteService holds only its store and clock; no per-request state.
    Concurrent updates to one note race and the last put wins.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from mininotes.exceptions import NotFoundError, StorageError, ValidationError
from mininotes.schemas.note import Note
from mininotes.services.session_store import utc_now
from mininotes.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Args:
        store: the notes namespace
        clock: returns the current UTC time (replaced in tests)
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    async def list_notes(self, user_id: str) -> List[Note]:
        """
        All of the user's notes, most recently updated first.

        A key deleted between the prefix listing and its get is skipped.
        """
        keys = await self._store.list_keys(_user_prefix(user_id))
        notes = []
        for key in keys:
            raw = await self._store.get(key)
            if raw is not None:
                notes.append(_decode(raw))

        notes.sort(key=lambda n: n.updated_at, reverse=True)
        return notes

    async def get_note(self, user_id: str, note_id: str) -> Note:
        raw = await self._store.get(_note_key(user_id, note_id))
        if raw is None:
            raise NotFoundError(resource="Note", resource_id=note_id)
        return _decode(raw)

    async def create_note(
        self,
        user_id: str,
        title: Optional[str],
        content: Optional[str],
    ) -> Note:
        """
        Raises:
            ValidationError: title or content missing or empty
        """
        if not title or not content:
            raise ValidationError(message="Title and content are required")

        now = self._clock()
        note = Note(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        await self._save(note)
        logger.info("Note %s created for user %s", note.id, user_id)
        return note

    async def update_note(
        self,
        user_id: str,
        note_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        """
        Merge the supplied fields into the stored note.

        Empty strings count as not supplied, matching create_note().
        updatedAt never moves backwards, even if the wall clock does.

        Raises:
            ValidationError: neither title nor content supplied
            NotFoundError:   no such note under this user
        """
        if not title and not content:
            raise ValidationError(message="At least title or content must be provided")

        existing = await self.get_note(user_id, note_id)
        updated = existing.model_copy(
            update={
                "title": title or existing.title,
                "content": content or existing.content,
                "updated_at": max(self._clock(), existing.updated_at),
            }
        )
        await self._save(updated)
        logger.info("Note %s updated", note_id)
        return updated

    async def delete_note(self, user_id: str, note_id: str) -> None:
        key = _note_key(user_id, note_id)
        if await self._store.get(key) is None:
            raise NotFoundError(resource="Note", resource_id=note_id)
        await self._store.delete(key)
        logger.info("Note %s deleted", note_id)

    async def _save(self, note: Note) -> None:
        await self._store.put(
            _note_key(note.user_id, note.id),
            note.model_dump_json(by_alias=True),
        )


def _user_prefix(user_id: str) -> str:
    return f"user:{user_id}:notes:"


def _note_key(user_id: str, note_id: str) -> str:
    return f"{_user_prefix(user_id)}{note_id}"


def _decode(raw: str) -> Note:
    try:
        return Note.model_validate_json(raw)
    except PydanticValidationError as e:
        raise StorageError(
            message="Corrupt note record",
            context={"error_type": type(e).__name__},
        ) from e
