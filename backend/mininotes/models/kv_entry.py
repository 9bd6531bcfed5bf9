"""
Mini Notes Backend — Key-Value Entry SQLAlchemy Model
=======================================================

What:  ORM model for the `kv_entries` table backing SQLKeyValueStore.
Why:   The services only need get/put/delete/prefix-list; one generic table
       gives them that on any SQL database.
Who:   Used by SQLKeyValueStore and by alembic migration 001.

Table Design Rationale:
    - (namespace, key) composite primary key: "notes" and "users" share the
      table without colliding, and point lookups use the PK index.
    - key is VARCHAR(512): the longest key is
      user:<uuid>:notes:<uuid> (~90 chars); usernames are user-supplied so
      headroom is generous.
    - value is TEXT holding a JSON document written by the services.
    - updated_at: informational, useful when inspecting the table by hand.

    Prefix listing is `WHERE namespace = :ns AND key LIKE :prefix%`, which
    PostgreSQL serves from the PK index when the collation allows it.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mininotes.database import Base


class KVEntry(Base):
    """One key in one namespace."""

    __tablename__ = "kv_entries"

    namespace: Mapped[str] = mapped_column(String(64), primary_key=True)
    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<KVEntry(namespace='{self.namespace}', key='{self.key}')>"
