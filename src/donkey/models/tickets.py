"""Ticket model: bearer tokens bound to a single path."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class TicketBase(SQLModel):
    """Base fields for a ticket. Subclass with ``table=True`` for a concrete table."""

    ticket_id: str = Field(primary_key=True)
    path: str = Field(index=True)
    owner: str = Field(default="", index=True)
    public: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )
    expires_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
    )


class Ticket(TicketBase, table=True):
    """Default ticket table: ``donkey_tickets``."""

    __tablename__ = "donkey_tickets"
