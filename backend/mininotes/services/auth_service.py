"""
Mini Notes Backend — Auth Service
===================================

What:  Registration, login and bearer-token authentication.
Why:   Keeps credential rules (validation, hashing, uniqueness, uniform
       login failure) out of the HTTP handlers.
How:   Composes PasswordHasher (bcrypt) and SessionStore (opaque tokens)
       over the users namespace.

Credential lifecycle:
    Unregistered ──register──▶ Registered ──login──▶ token issued
                                    ▲                    │
                                    └── token expired ◀──┘ (checked on use)

Failure mapping:
    missing field / short password → ValidationError (400)
    username taken                 → ConflictError   (409)
    unknown user / wrong password  → AuthError       (401, same message)
    storage failure                → StorageError    (500)

bcrypt work runs in Starlette's threadpool so a 250ms hash does not stall
the event loop for every other request.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from mininotes.exceptions import AuthError, ConflictError, StorageError, ValidationError
from mininotes.schemas.auth import AuthResponse, UserRecord
from mininotes.services.password_hasher import PasswordHasher
from mininotes.services.session_store import SessionStore
from mininotes.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

USER_PREFIX = "user:"
BEARER_PREFIX = "Bearer "
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """
    Args:
        users:               the users namespace (user and session records)
        sessions:            token issuer/resolver over the same namespace
        hasher:              bcrypt wrapper with the configured cost factor
        password_min_length: shortest password register() accepts
        username_max_length: longest username register() accepts; the
                             stored key user:<username> must fit the
                             512-character key column
    """

    def __init__(
        self,
        users: KeyValueStore,
        sessions: SessionStore,
        hasher: PasswordHasher,
        password_min_length: int = 6,
        username_max_length: int = 255,
    ) -> None:
        self._users = users
        self.sessions = sessions
        self._hasher = hasher
        self.password_min_length = password_min_length
        self.username_max_length = username_max_length

    async def register(self, username: Optional[str], password: Optional[str]) -> AuthResponse:
        """
        Create a user and return a token for it.

        Raises:
            ValidationError: username or password missing, username too long,
                             password too short
            ConflictError:   a user with this username already exists
            StorageError:    the users namespace failed
        """
        if not username or not password:
            raise ValidationError(message="Username and password are required")
        if len(username) > self.username_max_length:
            raise ValidationError(
                message=f"Username must be at most {self.username_max_length} characters",
                field="username",
            )
        if len(password) < self.password_min_length:
            raise ValidationError(
                message=f"Password must be at least {self.password_min_length} characters",
                field="password",
            )

        # Cheap early answer for the common case; put_if_absent below decides races
        if await self._users.get(_user_key(username)) is not None:
            raise _username_taken(username)

        password_hash = await run_in_threadpool(self._hasher.hash, password)
        user = UserRecord(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        if not await self._users.put_if_absent(_user_key(username), user.model_dump_json(by_alias=True)):
            raise _username_taken(username)
        logger.info("Registered user %s (%s)", user.username, user.id)

        token = await self.sessions.issue(user.id)
        return AuthResponse(token=token, user=user.public())

    async def login(self, username: Optional[str], password: Optional[str]) -> AuthResponse:
        """
        Verify credentials and issue a fresh token.

        Unknown usernames and wrong passwords raise the same AuthError so
        the response cannot be used to discover which usernames exist.
        """
        if not username or not password:
            raise ValidationError(message="Username and password are required")

        user = await self._load_user(username)
        if user is None:
            raise AuthError(message=INVALID_CREDENTIALS)

        if not await run_in_threadpool(self._hasher.verify, password, user.password_hash):
            logger.info("Failed login for user %s", user.id)
            raise AuthError(message=INVALID_CREDENTIALS)

        token = await self.sessions.issue(user.id)
        return AuthResponse(token=token, user=user.public())

    async def authenticate(self, request: Request) -> Optional[str]:
        """
        Resolve the request's bearer token to a user id.

        Returns None for a missing header, a header that is not
        `Bearer <token>`, an unknown token or an expired token. Callers
        treat every None the same way (401).
        """
        token = parse_bearer(request.headers.get("Authorization"))
        if token is None:
            return None
        return await self.sessions.resolve(token)

    async def require_user(self, request: Request) -> str:
        """authenticate() for handlers: the user id, or AuthError (401)."""
        user_id = await self.authenticate(request)
        if user_id is None:
            raise AuthError(message="Unauthorized")
        return user_id

    async def logout(self, request: Request) -> None:
        """Revoke the presented token. Raises AuthError if it is not valid."""
        await self.require_user(request)
        await self.sessions.revoke(parse_bearer(request.headers.get("Authorization")))

    async def _load_user(self, username: str) -> Optional[UserRecord]:
        raw = await self._users.get(_user_key(username))
        if raw is None:
            return None
        try:
            return UserRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            raise StorageError(
                message="Corrupt user record",
                context={"error_type": type(e).__name__},
            ) from e


def parse_bearer(header: Optional[str]) -> Optional[str]:
    """Extract the token from `Bearer <token>`; None if absent or malformed."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def _user_key(username: str) -> str:
    return f"{USER_PREFIX}{username}"


def _username_taken(username: str) -> ConflictError:
    return ConflictError(message="Username already exists", context={"username": username})
