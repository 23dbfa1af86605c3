"""Main Donkey class: lifecycle and service wiring."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from donkey.config import DonkeyConfig
from donkey.fs import actions
from donkey.fs.sessions import StoreSessionFactory, provision_store, provision_user
from donkey.fs.sharing import SharingEngine
from donkey.fs.tickets import TicketService
from donkey.fs.trash import TrashManager

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from sqlalchemy import Engine

    from donkey.fs.database import DatabasePathStore
    from donkey.fs.types import (
        CreateResult,
        DeleteResult,
        MoveResult,
        ObjectInfo,
        PathPermissions,
        Permissions,
        RestoreResult,
        ShareResult,
        TicketsResult,
        TrashInfo,
        TrashListing,
        UnshareResult,
    )

logger = logging.getLogger(__name__)


class Donkey:
    """Facade wiring the store session factory to the filesystem services.

    Every operation opens its own store session and closes it on return,
    whether or not the operation raised.  The HTTP layer uses the
    services directly with a request-scoped session instead.

    Usage::

        with Donkey(DonkeyConfig(database_url="sqlite://")) as d:
            d.provision(["alice"])
            d.delete("alice", ["/iplant/home/alice/old.txt"])
    """

    def __init__(self, config: DonkeyConfig | None = None, *, engine: Engine | None = None) -> None:
        self.config = config or DonkeyConfig()
        self.factory = StoreSessionFactory(self.config, engine=engine)
        self.tickets = TicketService(self.config)
        self.trash = TrashManager(self.config, self.tickets)
        self.sharing = SharingEngine(self.config)
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def provision(self, usernames: list[str] | None = None) -> None:
        """Create tables, the service account, and home directories."""
        provision_store(self.factory, usernames)

    def add_user(self, username: str) -> str:
        with self.factory.session() as store:
            return provision_user(store, self.config, username)

    def session(self) -> AbstractContextManager[DatabasePathStore]:
        """Open a store session directly (context manager)."""
        return self.factory.session()

    def close(self) -> None:
        if self._closed:
            return
        self.factory.dispose()
        self._closed = True
        logger.debug("Donkey closed")

    def __enter__(self) -> Donkey:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Trash
    # ------------------------------------------------------------------

    def delete(self, user: str, paths: list[str]) -> DeleteResult:
        with self.factory.session() as store:
            return self.trash.delete_paths(store, user, paths)

    def restore(self, user: str, paths: list[str]) -> RestoreResult:
        with self.factory.session() as store:
            return self.trash.restore_paths(store, user, paths)

    def user_trash(self, user: str) -> TrashInfo:
        with self.factory.session() as store:
            return self.trash.user_trash(store, user)

    def list_trash(self, user: str) -> TrashListing:
        with self.factory.session() as store:
            return self.trash.list_trash(store, user)

    def delete_trash(self, user: str) -> TrashListing:
        with self.factory.session() as store:
            return self.trash.delete_trash(store, user)

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    def share(
        self, user: str, grantees: list[str], paths: list[str], permissions: Permissions
    ) -> ShareResult:
        with self.factory.session() as store:
            return self.sharing.share(store, user, grantees, paths, permissions)

    def unshare(self, user: str, grantees: list[str], paths: list[str]) -> UnshareResult:
        with self.factory.session() as store:
            return self.sharing.unshare(store, user, grantees, paths)

    def shared_with_me(self, user: str) -> list[str]:
        with self.factory.session() as store:
            return self.sharing.list_shared_with_me(store, user)

    def list_permissions(self, user: str, paths: list[str]) -> list[PathPermissions]:
        with self.factory.session() as store:
            return self.sharing.list_permissions(store, user, paths)

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    def add_tickets(self, user: str, paths: list[str], *, public: bool = False) -> TicketsResult:
        with self.factory.session() as store:
            return self.tickets.add_tickets(store, user, paths, public=public)

    def remove_tickets(self, user: str, ticket_ids: list[str]) -> TicketsResult:
        with self.factory.session() as store:
            return self.tickets.remove_tickets(store, user, ticket_ids)

    def list_tickets(self, user: str, paths: list[str]) -> dict[str, list[str]]:
        with self.factory.session() as store:
            return self.tickets.list_tickets_for_paths(store, user, paths)

    # ------------------------------------------------------------------
    # Filesystem actions
    # ------------------------------------------------------------------

    def create_directory(self, user: str, path: str) -> CreateResult:
        with self.factory.session() as store:
            return actions.create_directory(self.config, store, user, path)

    def move(self, user: str, sources: list[str], dest: str) -> MoveResult:
        with self.factory.session() as store:
            return actions.move_paths(self.config, store, self.tickets, user, sources, dest)

    def rename(self, user: str, source: str, dest: str) -> MoveResult:
        with self.factory.session() as store:
            return actions.rename_path(self.config, store, self.tickets, user, source, dest)

    def copy(self, user: str, paths: list[str], dest: str) -> MoveResult:
        with self.factory.session() as store:
            return actions.copy_paths(self.config, store, user, paths, dest)

    def exists(self, user: str, paths: list[str]) -> dict[str, bool]:
        with self.factory.session() as store:
            return actions.paths_exist(store, user, paths)

    def stat(self, user: str, paths: list[str]) -> dict[str, ObjectInfo]:
        with self.factory.session() as store:
            return actions.stat_paths(store, user, paths)

