"""Tests for TicketService: add, remove, list and revoke."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from donkey.fs.exceptions import (
    NameGenerationError,
    NotReadableError,
    NotWriteableError,
    PathNotFoundError,
    TicketNotFoundError,
)

if TYPE_CHECKING:
    from donkey import Donkey
    from donkey.fs.database import DatabasePathStore
    from donkey.fs.tickets import TicketService

REPORT = "/alice/docs/report.txt"


@pytest.fixture
def tickets(donkey: Donkey) -> TicketService:
    return donkey.tickets


class TestAddTickets:
    def test_one_ticket_per_path(self, tickets: TicketService, seeded: DatabasePathStore):
        result = tickets.add_tickets(seeded, "alice", [REPORT, "/alice/proj"], public=True)

        assert result.user == "alice"
        assert [t.path for t in result.tickets] == [REPORT, "/alice/proj"]
        assert all(t.public for t in result.tickets)
        assert all(t.ticket_id == t.ticket_id.upper() for t in result.tickets)
        assert len({t.ticket_id for t in result.tickets}) == 2

    def test_requires_write_access(self, tickets: TicketService, seeded: DatabasePathStore):
        seeded.set_permission("bob", REPORT, "read")
        with pytest.raises(NotWriteableError):
            tickets.add_tickets(seeded, "bob", [REPORT])

    def test_missing_path(self, tickets: TicketService, seeded: DatabasePathStore):
        with pytest.raises(PathNotFoundError):
            tickets.add_tickets(seeded, "alice", ["/alice/nope"])

    def test_id_generation_is_bounded(
        self,
        monkeypatch: pytest.MonkeyPatch,
        donkey: Donkey,
        tickets: TicketService,
        seeded: DatabasePathStore,
    ):
        fixed = uuid.UUID("12345678-1234-5678-1234-567812345678")
        seeded.create_ticket(str(fixed).upper(), REPORT, "alice")
        monkeypatch.setattr("donkey.fs.tickets.uuid.uuid4", lambda: fixed)
        donkey.config.max_name_attempts = 3

        with pytest.raises(NameGenerationError):
            tickets.add_tickets(seeded, "alice", ["/alice/proj"])


class TestRemoveTickets:
    def test_remove(self, tickets: TicketService, seeded: DatabasePathStore):
        added = tickets.add_tickets(seeded, "alice", [REPORT])
        ticket_id = added.tickets[0].ticket_id

        result = tickets.remove_tickets(seeded, "alice", [ticket_id])

        assert [t.ticket_id for t in result.tickets] == [ticket_id]
        assert seeded.get_ticket(ticket_id) is None

    def test_unknown_ticket(self, tickets: TicketService, seeded: DatabasePathStore):
        with pytest.raises(TicketNotFoundError) as exc_info:
            tickets.remove_tickets(seeded, "alice", ["NOPE"])
        assert exc_info.value.status_code == 404

    def test_requires_write_access(self, tickets: TicketService, seeded: DatabasePathStore):
        added = tickets.add_tickets(seeded, "alice", [REPORT])
        with pytest.raises(NotWriteableError):
            tickets.remove_tickets(seeded, "bob", [added.tickets[0].ticket_id])


class TestListAndRevoke:
    def test_list_tickets_for_paths(self, tickets: TicketService, seeded: DatabasePathStore):
        seeded.create_ticket("T-DIR", "/alice/proj", "alice")
        seeded.create_ticket("T-CHILD", "/alice/proj/a.txt", "alice")

        listing = tickets.list_tickets_for_paths(seeded, "alice", ["/alice/proj", REPORT])

        assert listing == {"/alice/proj": ["T-DIR"], REPORT: []}

    def test_list_requires_read(self, tickets: TicketService, seeded: DatabasePathStore):
        with pytest.raises(NotReadableError):
            tickets.list_tickets_for_paths(seeded, "bob", [REPORT])

    def test_revoke_covers_subtree(self, tickets: TicketService, seeded: DatabasePathStore):
        seeded.create_ticket("T1", "/alice/proj", "alice")
        seeded.create_ticket("T2", "/alice/proj/sub/b.txt", "alice")
        seeded.create_ticket("T3", REPORT, "alice")

        assert tickets.revoke_tickets(seeded, "/alice/proj") == ["T1", "T2"]
        assert seeded.get_ticket("T3") is not None
