"""StoreObject model: one row per file or directory in the path store.

Provides ``StoreObjectBase`` (non-table) and ``StoreObject`` (concrete
table).  Subclass ``StoreObjectBase`` with ``table=True`` and a custom
``__tablename__`` to use a different table name.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class StoreObjectBase(SQLModel):
    """Base fields for a stored object. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    path: str = Field(index=True, unique=True)
    parent_path: str = Field(default="", index=True)
    name: str = Field(default="")
    is_directory: bool = Field(default=False)
    creator: str = Field(default="")
    inherit: bool = Field(default=False)
    size_bytes: int = Field(default=0)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )


class StoreObject(StoreObjectBase, table=True):
    """Default object table: ``donkey_objects``."""

    __tablename__ = "donkey_objects"
