"""Tests for fs/validators.py: each check raises the right typed error."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from donkey.fs import validators
from donkey.fs.exceptions import (
    ERR_BAD_OR_MISSING_FIELD,
    ERR_NOT_A_USER,
    ERR_TOO_MANY_PATHS,
    BadFieldError,
    NotAFileError,
    NotAFolderError,
    NotAuthorizedError,
    NotReadableError,
    NotWriteableError,
    PathExistsError,
    PathNotFoundError,
    TicketNotFoundError,
    TooManyPathsError,
    UserNotFoundError,
)

if TYPE_CHECKING:
    from donkey.config import DonkeyConfig
    from donkey.fs.database import DatabasePathStore


class TestRequestShape:
    def test_good_string(self):
        validators.good_string("/alice/docs")

    def test_bad_string(self):
        with pytest.raises(BadFieldError) as exc_info:
            validators.good_string("", field="path")
        assert exc_info.value.error_code == ERR_BAD_OR_MISSING_FIELD
        assert exc_info.value.detail["field"] == "path"

    def test_num_paths(self, config: DonkeyConfig):
        config.max_paths = 2
        validators.num_paths(config, ["/a", "/b"])
        with pytest.raises(TooManyPathsError) as exc_info:
            validators.num_paths(config, ["/a", "/b", "/c"])
        assert exc_info.value.error_code == ERR_TOO_MANY_PATHS
        assert exc_info.value.detail == {"count": 3, "limit": 2}

    def test_not_superuser(self, config: DonkeyConfig):
        validators.not_superuser(config, "alice")
        with pytest.raises(NotAuthorizedError):
            validators.not_superuser(config, "rods")


class TestUsers:
    def test_user_exists(self, store: DatabasePathStore):
        validators.user_exists(store, "alice")
        with pytest.raises(UserNotFoundError) as exc_info:
            validators.user_exists(store, "mallory")
        assert exc_info.value.error_code == ERR_NOT_A_USER

    def test_all_users_exist_reports_every_missing_user(self, store: DatabasePathStore):
        with pytest.raises(UserNotFoundError) as exc_info:
            validators.all_users_exist(store, ["alice", "mallory", "eve"])
        assert exc_info.value.detail["users"] == ["mallory", "eve"]


class TestExistence:
    def test_all_paths_exist(self, seeded: DatabasePathStore):
        validators.all_paths_exist(seeded, ["/alice/docs", "/alice/docs/report.txt"])
        with pytest.raises(PathNotFoundError) as exc_info:
            validators.all_paths_exist(seeded, ["/alice/docs", "/nope", "/gone"])
        assert exc_info.value.detail["paths"] == ["/nope", "/gone"]
        assert exc_info.value.status_code == 404

    def test_path_not_exists(self, seeded: DatabasePathStore):
        validators.path_not_exists(seeded, "/alice/new")
        with pytest.raises(PathExistsError):
            validators.path_not_exists(seeded, "/alice/docs")

    def test_no_paths_exist(self, seeded: DatabasePathStore):
        with pytest.raises(PathExistsError) as exc_info:
            validators.no_paths_exist(seeded, ["/alice/new", "/alice/docs"])
        assert exc_info.value.detail["paths"] == ["/alice/docs"]

    def test_path_is_dir(self, seeded: DatabasePathStore):
        validators.path_is_dir(seeded, "/alice/docs")
        with pytest.raises(NotAFolderError) as exc_info:
            validators.path_is_dir(seeded, "/alice/docs/report.txt")
        assert exc_info.value.error_code == "ERR_NOT_A_FOLDER"
        assert not isinstance(exc_info.value, OSError)

    def test_path_is_file(self, seeded: DatabasePathStore):
        validators.path_is_file(seeded, "/alice/docs/report.txt")
        with pytest.raises(NotAFileError):
            validators.path_is_file(seeded, "/alice/docs")


class TestPermissions:
    def test_user_owns_paths(self, seeded: DatabasePathStore):
        validators.user_owns_paths(seeded, "alice", ["/alice/docs"])
        with pytest.raises(NotAuthorizedError) as exc_info:
            validators.user_owns_paths(seeded, "bob", ["/alice/docs", "/alice/proj"])
        assert exc_info.value.detail["paths"] == ["/alice/docs", "/alice/proj"]

    def test_user_owns_path(self, seeded: DatabasePathStore):
        with pytest.raises(NotAuthorizedError):
            validators.user_owns_path(seeded, "bob", "/alice/docs")

    def test_readable(self, seeded: DatabasePathStore):
        seeded.set_permission("bob", "/alice/docs", "read")
        validators.path_readable(seeded, "bob", "/alice/docs")
        with pytest.raises(NotReadableError) as exc_info:
            validators.all_paths_readable(seeded, "bob", ["/alice/docs", "/alice/proj"])
        assert exc_info.value.detail["paths"] == ["/alice/proj"]

    def test_writeable(self, seeded: DatabasePathStore):
        seeded.set_permission("bob", "/alice/docs", "read")
        with pytest.raises(NotWriteableError):
            validators.path_writeable(seeded, "bob", "/alice/docs")
        seeded.set_permission("bob", "/alice/docs", "write")
        validators.all_paths_writeable(seeded, "bob", ["/alice/docs"])

    def test_not_home_dirs_reports_every_protected_path(self, config: DonkeyConfig):
        validators.not_home_dirs(config, "alice", ["/alice/docs"])
        with pytest.raises(NotAuthorizedError) as exc_info:
            validators.not_home_dirs(config, "alice", ["/alice/docs", "/alice", "/alice/"])
        assert exc_info.value.detail["paths"] == ["/alice", "/alice/"]


class TestTickets:
    def test_all_tickets_exist(self, seeded: DatabasePathStore):
        seeded.create_ticket("T1", "/alice/docs", "alice")
        validators.all_tickets_exist(seeded, ["T1"])
        with pytest.raises(TicketNotFoundError) as exc_info:
            validators.all_tickets_exist(seeded, ["T1", "T9"])
        assert exc_info.value.detail["tickets"] == ["T9"]

    def test_all_tickets_nonexistent(self, seeded: DatabasePathStore):
        seeded.create_ticket("T1", "/alice/docs", "alice")
        validators.all_tickets_nonexistent(seeded, ["T2"])
        with pytest.raises(PathExistsError):
            validators.all_tickets_nonexistent(seeded, ["T1", "T2"])


class TestValidatorsDoNotMutate:
    def test_failed_validation_leaves_store_unchanged(self, seeded: DatabasePathStore):
        before = seeded.list_children("/alice")
        with pytest.raises(NotAuthorizedError):
            validators.user_owns_paths(seeded, "bob", ["/alice/docs"])
        assert seeded.list_children("/alice") == before
