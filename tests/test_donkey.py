"""End-to-end tests through the Donkey facade (one store session per call)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from donkey import Permissions

if TYPE_CHECKING:
    from donkey import Donkey

REPORT = "/alice/docs/report.txt"


def _seed(donkey: Donkey) -> None:
    donkey.create_directory("alice", "/alice/docs")
    with donkey.session() as store:
        store.create_file(REPORT, owner="alice")


class TestFacade:
    def test_alice_scenario(self, donkey: Donkey):
        _seed(donkey)

        donkey.delete("alice", [REPORT])
        [trashed] = donkey.list_trash("alice").paths
        assert trashed.startswith("/trash/alice/report.txt.")

        restored = donkey.restore("alice", [trashed]).restored[trashed]
        assert restored.restored_path == REPORT
        assert not restored.partial_restore

        donkey.delete("alice", [REPORT])
        [trashed] = donkey.list_trash("alice").paths
        with donkey.session() as store:
            store.create_file(REPORT, owner="alice")

        restored = donkey.restore("alice", [trashed]).restored[trashed]
        assert restored.restored_path == f"{REPORT}.0"
        assert not restored.partial_restore

    def test_share_is_visible_to_grantee(self, donkey: Donkey):
        _seed(donkey)
        donkey.share("alice", ["bob"], [REPORT], Permissions(read=True))

        assert donkey.shared_with_me("bob") == ["/alice"]
        assert donkey.stat("bob", [REPORT])[REPORT].name == "report.txt"
        assert donkey.exists("carol", [REPORT]) == {REPORT: True}

        donkey.unshare("alice", ["bob"], [REPORT])
        assert donkey.shared_with_me("bob") == []

    def test_purge(self, donkey: Donkey):
        _seed(donkey)
        donkey.delete("alice", [REPORT])
        purged = donkey.delete_trash("alice")
        assert len(purged.paths) == 1
        assert donkey.list_trash("alice").paths == []

    def test_tickets_and_copy(self, donkey: Donkey):
        _seed(donkey)
        added = donkey.add_tickets("alice", [REPORT])
        ticket_id = added.tickets[0].ticket_id
        assert donkey.list_tickets("alice", [REPORT]) == {REPORT: [ticket_id]}

        donkey.copy("alice", [REPORT], "/alice")
        donkey.rename("alice", "/alice/report.txt", "/alice/copy.txt")
        assert donkey.exists("alice", ["/alice/report.txt", "/alice/copy.txt"]) == {
            "/alice/report.txt": False,
            "/alice/copy.txt": True,
        }

        donkey.remove_tickets("alice", [ticket_id])
        assert donkey.list_tickets("alice", [REPORT]) == {REPORT: []}
