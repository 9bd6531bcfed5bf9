"""
Mini Notes Backend — Session Store
====================================

What:  Issues opaque bearer tokens and resolves them back to a user id.
Why:   A token must be unguessable and carry no information a client could
       decode or forge; all meaning lives server-side.
How:   token = secrets.token_urlsafe(32) (256 bits of entropy). The token is
       stored in the users namespace as session:<token> → SessionRecord.

Expiry:
    expires_at = issued_at + ttl, or None when ttl is 0. Expiry is checked
    only when a token is resolved; an expired record found at that moment is
    deleted. Tokens that are never presented again stay in storage.

Lifecycle:
    issue()  → on register and on every login (a user may hold many tokens)
    resolve()→ on every authenticated request
    revoke() → on logout
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from mininotes.exceptions import StorageError
from mininotes.schemas.auth import SessionRecord
from mininotes.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"
TOKEN_BYTES = 32


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Args:
        store:       the users namespace
        ttl_seconds: session lifetime; 0 disables expiry
        clock:       returns the current UTC time (replaced in tests)
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: int = 86_400,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    async def issue(self, user_id: str) -> str:
        issued_at = self._clock()
        expires_at = None
        if self.ttl_seconds:
            expires_at = issued_at + timedelta(seconds=self.ttl_seconds)

        token = secrets.token_urlsafe(TOKEN_BYTES)
        record = SessionRecord(user_id=user_id, issued_at=issued_at, expires_at=expires_at)
        await self._store.put(_key(token), record.model_dump_json(by_alias=True))
        return token

    async def resolve(self, token: str) -> Optional[str]:
        """
        Return the user id behind `token`, or None if it is unknown or expired.

        Raises:
            StorageError: the users namespace failed or holds a corrupt record
        """
        if not token:
            return None

        raw = await self._store.get(_key(token))
        if raw is None:
            return None

        try:
            record = SessionRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            raise StorageError(
                message="Corrupt session record",
                context={"error_type": type(e).__name__},
            ) from e

        if record.expires_at is not None and record.expires_at <= self._clock():
            await self._store.delete(_key(token))
            logger.info("Expired session removed for user %s", record.user_id)
            return None

        return record.user_id

    async def revoke(self, token: str) -> None:
        await self._store.delete(_key(token))


def _key(token: str) -> str:
    return f"{SESSION_PREFIX}{token}"
