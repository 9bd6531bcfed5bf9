"""
Mini Notes Backend — Note Service Unit Tests
===============================================

What:  Tests for NoteService business logic (create, list, get, update, delete).
Why:   Ownership scoping and timestamp rules live here, not in the handlers.
How:   Runs over MemoryKeyValueStore with a FakeClock (no HTTP, no database).

What we test:
    ✅ Created notes carry equal createdAt/updatedAt and the owner's id
    ✅ Listing is per-user and newest-updated first
    ✅ Partial updates keep the other field; updatedAt never goes backwards
    ✅ Another user's note id behaves exactly like a missing one
    ✅ Corrupt stored documents surface as StorageError
"""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from mininotes.exceptions import NotFoundError, StorageError, ValidationError

ALICE = "user-alice"
BOB = "user-bob"


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_note(self, note_service, clock):
        note = await note_service.create_note(ALICE, "Groceries", "- milk\n- eggs")

        assert note.id
        assert note.user_id == ALICE
        assert note.title == "Groceries"
        assert note.content == "- milk\n- eggs"
        assert note.created_at == note.updated_at == clock.now

    @pytest.mark.asyncio
    async def test_create_note_is_stored_under_owner_prefix(self, note_service, storage):
        note = await note_service.create_note(ALICE, "t", "c")

        assert await storage.notes.list_keys() == [f"user:{ALICE}:notes:{note.id}"]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, note_service):
        first = await note_service.create_note(ALICE, "t", "c")
        second = await note_service.create_note(ALICE, "t", "c")
        assert first.id != second.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "title, content",
        [(None, "c"), ("t", None), ("", "c"), ("t", ""), (None, None)],
    )
    async def test_missing_fields_rejected(self, note_service, storage, title, content):
        with pytest.raises(ValidationError) as exc_info:
            await note_service.create_note(ALICE, title, content)

        assert exc_info.value.message == "Title and content are required"
        assert len(storage.notes) == 0


class TestListNotes:

    @pytest.mark.asyncio
    async def test_empty(self, note_service):
        assert await note_service.list_notes(ALICE) == []

    @pytest.mark.asyncio
    async def test_most_recently_updated_first(self, note_service, clock):
        first = await note_service.create_note(ALICE, "first", "c")
        clock.advance(minutes=1)
        second = await note_service.create_note(ALICE, "second", "c")
        clock.advance(minutes=1)
        await note_service.update_note(ALICE, first.id, title="first, edited")

        notes = await note_service.list_notes(ALICE)

        assert [n.id for n in notes] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_only_own_notes(self, note_service):
        mine = await note_service.create_note(ALICE, "mine", "c")
        await note_service.create_note(BOB, "theirs", "c")

        notes = await note_service.list_notes(ALICE)

        assert [n.id for n in notes] == [mine.id]

    @pytest.mark.asyncio
    async def test_prefix_does_not_leak_between_similar_ids(self, note_service):
        """user-1 must not see user-10's notes."""
        await note_service.create_note("user-10", "theirs", "c")

        assert await note_service.list_notes("user-1") == []

    @pytest.mark.asyncio
    async def test_note_deleted_during_listing_is_skipped(self, note_service, storage):
        note = await note_service.create_note(ALICE, "t", "c")
        key = f"user:{ALICE}:notes:{note.id}"

        with patch.object(storage.notes, "list_keys", AsyncMock(return_value=[key, key + "-gone"])):
            notes = await note_service.list_notes(ALICE)

        assert [n.id for n in notes] == [note.id]

    @pytest.mark.asyncio
    async def test_corrupt_document_raises_storage_error(self, note_service, storage):
        await storage.notes.put(f"user:{ALICE}:notes:broken", '{"id": "broken"}')

        with pytest.raises(StorageError):
            await note_service.list_notes(ALICE)


class TestGetNote:

    @pytest.mark.asyncio
    async def test_get_note(self, note_service):
        created = await note_service.create_note(ALICE, "t", "c")

        fetched = await note_service.get_note(ALICE, created.id)

        assert fetched == created

    @pytest.mark.asyncio
    async def test_missing_note(self, note_service):
        with pytest.raises(NotFoundError) as exc_info:
            await note_service.get_note(ALICE, "nope")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Note not found"

    @pytest.mark.asyncio
    async def test_other_users_note_is_not_found(self, note_service):
        theirs = await note_service.create_note(BOB, "t", "c")

        with pytest.raises(NotFoundError):
            await note_service.get_note(ALICE, theirs.id)


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_title_keeps_content(self, note_service, clock):
        note = await note_service.create_note(ALICE, "old", "body")
        clock.advance(seconds=5)

        updated = await note_service.update_note(ALICE, note.id, title="new")

        assert updated.title == "new"
        assert updated.content == "body"
        assert updated.created_at == note.created_at
        assert updated.updated_at == note.updated_at + timedelta(seconds=5)

    @pytest.mark.asyncio
    async def test_update_content_keeps_title(self, note_service):
        note = await note_service.create_note(ALICE, "title", "old")

        updated = await note_service.update_note(ALICE, note.id, content="new")

        assert (updated.title, updated.content) == ("title", "new")

    @pytest.mark.asyncio
    async def test_update_is_persisted(self, note_service):
        note = await note_service.create_note(ALICE, "old", "body")
        await note_service.update_note(ALICE, note.id, title="new", content="text")

        stored = await note_service.get_note(ALICE, note.id)

        assert (stored.title, stored.content) == ("new", "text")

    @pytest.mark.asyncio
    async def test_empty_string_counts_as_missing(self, note_service):
        note = await note_service.create_note(ALICE, "title", "body")

        updated = await note_service.update_note(ALICE, note.id, title="", content="new")

        assert updated.title == "title"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title, content", [(None, None), ("", ""), ("", None)])
    async def test_no_fields_rejected(self, note_service, title, content):
        note = await note_service.create_note(ALICE, "t", "c")

        with pytest.raises(ValidationError) as exc_info:
            await note_service.update_note(ALICE, note.id, title=title, content=content)

        assert exc_info.value.message == "At least title or content must be provided"

    @pytest.mark.asyncio
    async def test_updated_at_never_moves_backwards(self, note_service, clock):
        note = await note_service.create_note(ALICE, "t", "c")
        clock.advance(hours=-1)

        updated = await note_service.update_note(ALICE, note.id, title="x")

        assert updated.updated_at == note.updated_at
        assert updated.updated_at >= updated.created_at

    @pytest.mark.asyncio
    async def test_other_users_note_is_untouched(self, note_service):
        theirs = await note_service.create_note(BOB, "t", "c")

        with pytest.raises(NotFoundError):
            await note_service.update_note(ALICE, theirs.id, title="hijacked")

        assert (await note_service.get_note(BOB, theirs.id)).title == "t"

    @pytest.mark.asyncio
    async def test_missing_note(self, note_service):
        with pytest.raises(NotFoundError):
            await note_service.update_note(ALICE, "nope", title="x")


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_note(self, note_service):
        note = await note_service.create_note(ALICE, "t", "c")

        await note_service.delete_note(ALICE, note.id)

        assert await note_service.list_notes(ALICE) == []

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, note_service):
        note = await note_service.create_note(ALICE, "t", "c")
        await note_service.delete_note(ALICE, note.id)

        with pytest.raises(NotFoundError):
            await note_service.delete_note(ALICE, note.id)

    @pytest.mark.asyncio
    async def test_other_users_note_survives(self, note_service):
        theirs = await note_service.create_note(BOB, "t", "c")

        with pytest.raises(NotFoundError):
            await note_service.delete_note(ALICE, theirs.id)

        assert await note_service.get_note(BOB, theirs.id) == theirs
