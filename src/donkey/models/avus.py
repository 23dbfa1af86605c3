"""ObjectAttribute model: attribute/value/unit triples attached to a path."""

from __future__ import annotations

import uuid

from sqlmodel import Field, SQLModel


class ObjectAttributeBase(SQLModel):
    """Base fields for an AVU. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    path: str = Field(index=True)
    attr: str = Field(index=True)
    value: str = Field(default="", index=True)
    unit: str = Field(default="")


class ObjectAttribute(ObjectAttributeBase, table=True):
    """Default AVU table: ``donkey_avus``."""

    __tablename__ = "donkey_avus"
