"""
Mini Notes Backend — Auth Schemas
===================================

What:  Pydantic models for users, sessions and the auth request/response bodies.
Why:   The stored user record holds the password hash; the public view is a
       separate model so the hash cannot be serialized into a response by
       accident.

Storage layout (users namespace):
    user:<username>   → UserRecord
    session:<token>   → SessionRecord
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from mininotes.schemas.note import CAMEL_CASE


class Credentials(BaseModel):
    """Body of POST /api/auth/register and /api/auth/login."""

    username: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    """What clients are allowed to see about a user."""

    id: str
    username: str
    created_at: datetime

    model_config = CAMEL_CASE


class UserRecord(PublicUser):
    """Stored user document. Never returned by the API."""

    password_hash: str

    def public(self) -> PublicUser:
        return PublicUser(id=self.id, username=self.username, created_at=self.created_at)


class SessionRecord(BaseModel):
    """
    Server-side state behind a bearer token.

    expires_at is None when TOKEN_TTL_SECONDS=0 (tokens never expire).
    """

    user_id: str
    issued_at: datetime
    expires_at: Optional[datetime] = None

    model_config = CAMEL_CASE


class AuthResponse(BaseModel):
    """Returned by register (201) and login (200)."""

    token: str
    user: PublicUser
