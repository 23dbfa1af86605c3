"""AccessEntry model: one ACL entry (user, path, level).

Levels are ``read``, ``write`` or ``own``.  A user holds at most one
entry per path; changing a level removes the old entry first.
"""

from __future__ import annotations

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class AccessEntryBase(SQLModel):
    """Base fields for an ACL entry. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    path: str = Field(index=True)
    username: str = Field(index=True)
    level: str = Field(default="read")


class AccessEntry(AccessEntryBase, table=True):
    """Default ACL table: ``donkey_access``."""

    __tablename__ = "donkey_access"
    __table_args__ = (UniqueConstraint("path", "username"),)
