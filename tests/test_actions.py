"""Tests for fs/actions.py: create, move, rename, copy, exists, stat."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from donkey.fs import actions
from donkey.fs.exceptions import (
    InvalidCopyError,
    NotAFolderError,
    NotAuthorizedError,
    NotReadableError,
    NotWriteableError,
    PathExistsError,
    PathNotFoundError,
)
from donkey.fs.types import Permissions

if TYPE_CHECKING:
    from donkey import Donkey, DonkeyConfig
    from donkey.fs.database import DatabasePathStore

REPORT = "/alice/docs/report.txt"


class TestCreateDirectory:
    def test_create(self, config: DonkeyConfig, seeded: DatabasePathStore):
        result = actions.create_directory(config, seeded, "alice", "/alice/new/")
        assert result.path == "/alice/new"
        assert result.permissions == Permissions(read=True, write=True, own=True)
        assert seeded.owns("alice", "/alice/new")

    def test_parent_must_be_writeable(self, config: DonkeyConfig, seeded: DatabasePathStore):
        with pytest.raises(NotWriteableError):
            actions.create_directory(config, seeded, "bob", "/alice/new")

    def test_parent_must_exist(self, config: DonkeyConfig, seeded: DatabasePathStore):
        with pytest.raises(PathNotFoundError):
            actions.create_directory(config, seeded, "alice", "/alice/a/b")

    def test_parent_must_be_directory(self, config: DonkeyConfig, seeded: DatabasePathStore):
        with pytest.raises(NotAFolderError):
            actions.create_directory(config, seeded, "alice", f"{REPORT}/x")

    def test_existing(self, config: DonkeyConfig, seeded: DatabasePathStore):
        with pytest.raises(PathExistsError):
            actions.create_directory(config, seeded, "alice", "/alice/docs")

    def test_superuser_is_rejected(self, config: DonkeyConfig, seeded: DatabasePathStore):
        with pytest.raises(NotAuthorizedError):
            actions.create_directory(config, seeded, "rods", "/alice/new")

    def test_inherits_shared_parent(
        self, config: DonkeyConfig, donkey: Donkey, seeded: DatabasePathStore
    ):
        donkey.sharing.share(seeded, "alice", ["bob"], ["/alice/proj"], Permissions(read=True))
        actions.create_directory(config, seeded, "alice", "/alice/proj/later")
        assert seeded.permission_level("bob", "/alice/proj/later") == "read"


class TestMove:
    def test_move_into_directory(self, donkey: Donkey, seeded: DatabasePathStore):
        result = actions.move_paths(
            donkey.config, seeded, donkey.tickets, "alice", [REPORT, "/alice/proj/a.txt"], "/alice"
        )
        assert result.dest == "/alice"
        assert seeded.is_file("/alice/report.txt")
        assert seeded.is_file("/alice/a.txt")
        assert not seeded.exists(REPORT)

    def test_duplicate_sources_move_once(self, donkey: Donkey, seeded: DatabasePathStore):
        result = actions.move_paths(
            donkey.config, seeded, donkey.tickets, "alice", [REPORT, f"{REPORT}/"], "/alice"
        )
        assert result.sources == [REPORT]
        assert seeded.is_file("/alice/report.txt")

    def test_target_collision(self, donkey: Donkey, seeded: DatabasePathStore):
        seeded.create_file("/alice/report.txt", owner="alice")
        with pytest.raises(PathExistsError) as exc_info:
            actions.move_paths(donkey.config, seeded, donkey.tickets, "alice", [REPORT], "/alice")
        assert exc_info.value.detail["paths"] == ["/alice/report.txt"]
        assert seeded.exists(REPORT)

    def test_destination_must_be_directory(self, donkey: Donkey, seeded: DatabasePathStore):
        with pytest.raises(NotAFolderError):
            actions.move_paths(
                donkey.config, seeded, donkey.tickets, "alice", ["/alice/proj/a.txt"], REPORT
            )

    def test_home_directory_cannot_move(self, donkey: Donkey, seeded: DatabasePathStore):
        with pytest.raises(NotAuthorizedError):
            actions.move_paths(donkey.config, seeded, donkey.tickets, "alice", ["/alice"], "/trash")

    def test_revokes_tickets(self, donkey: Donkey, seeded: DatabasePathStore):
        seeded.create_ticket("T1", REPORT, "alice")
        actions.move_paths(donkey.config, seeded, donkey.tickets, "alice", [REPORT], "/alice")
        assert seeded.get_ticket("T1") is None

    def test_superuser_is_rejected(self, donkey: Donkey, seeded: DatabasePathStore):
        with pytest.raises(NotAuthorizedError):
            actions.move_paths(donkey.config, seeded, donkey.tickets, "rods", [REPORT], "/alice")


class TestRename:
    def test_rename(self, donkey: Donkey, seeded: DatabasePathStore):
        result = actions.rename_path(
            donkey.config, seeded, donkey.tickets, "alice", REPORT, "/alice/docs/final.txt"
        )
        assert result.sources == [REPORT]
        assert result.dest == "/alice/docs/final.txt"
        assert seeded.is_file("/alice/docs/final.txt")

    def test_rename_onto_existing(self, donkey: Donkey, seeded: DatabasePathStore):
        with pytest.raises(PathExistsError):
            actions.rename_path(
                donkey.config, seeded, donkey.tickets, "alice", REPORT, "/alice/proj/a.txt"
            )


class TestCopy:
    def test_copy_is_owned_by_caller_and_tagged(
        self, donkey: Donkey, seeded: DatabasePathStore
    ):
        seeded.set_permission("bob", REPORT, "read")
        result = actions.copy_paths(donkey.config, seeded, "bob", [REPORT], "/bob")

        assert result.sources == [REPORT]
        assert seeded.owns("bob", "/bob/report.txt")
        assert not seeded.owns("alice", "/bob/report.txt")
        assert seeded.get_attribute("/bob/report.txt", actions.COPY_FROM_ATTR) == [REPORT]
        assert seeded.exists(REPORT)

    def test_copy_requires_read(self, donkey: Donkey, seeded: DatabasePathStore):
        with pytest.raises(NotReadableError):
            actions.copy_paths(donkey.config, seeded, "bob", [REPORT], "/bob")

    def test_copy_into_itself(self, donkey: Donkey, seeded: DatabasePathStore):
        with pytest.raises(InvalidCopyError):
            actions.copy_paths(donkey.config, seeded, "alice", ["/alice/proj"], "/alice/proj/sub")
        with pytest.raises(InvalidCopyError):
            actions.copy_paths(donkey.config, seeded, "alice", ["/alice/proj"], "/alice/proj")


class TestQueries:
    def test_exists(self, seeded: DatabasePathStore):
        assert actions.paths_exist(seeded, "bob", [REPORT, "/alice/nope"]) == {
            REPORT: True,
            "/alice/nope": False,
        }

    def test_stat(self, seeded: DatabasePathStore):
        stats = actions.stat_paths(seeded, "alice", [REPORT, "/alice/docs"])
        assert stats[REPORT].size_bytes == 42
        assert not stats[REPORT].is_directory
        assert stats["/alice/docs"].is_directory

    def test_stat_requires_read(self, seeded: DatabasePathStore):
        with pytest.raises(NotReadableError):
            actions.stat_paths(seeded, "bob", [REPORT])
