"""TrashManager: move to trash, restore, list and purge."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import validators
from .exceptions import NameGenerationError
from .types import DeleteResult, RestoredPath, RestoreResult, TrashInfo, TrashListing
from .utils import (
    ancestors,
    basename,
    dirname,
    is_under,
    normalize_path,
    normalize_paths,
    path_join,
    random_suffix,
)

if TYPE_CHECKING:
    from donkey.config import DonkeyConfig

    from .protocol import PathStore
    from .tickets import TicketService

logger = logging.getLogger(__name__)

TRASH_ORIGIN_ATTR = "ipc-trash-origin"
"""AVU recording a trashed object's path before deletion."""


class TrashManager:
    """Trash lifecycle: Live -> Trashed -> Restored | Purged.

    Depends on ``TicketService`` to revoke tickets before a path moves.
    None of the multi-path operations are transactional: a store failure
    on path N leaves paths 1..N-1 already processed.
    """

    def __init__(self, config: DonkeyConfig, tickets: TicketService) -> None:
        self._config = config
        self._tickets = tickets

    def user_trash_dir(self, user: str) -> str:
        return self._config.user_trash_dir(user)

    def in_trash(self, user: str, path: str) -> bool:
        return is_under(path, self.user_trash_dir(user))

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def _ensure_trash_dir(self, store: PathStore, user: str) -> str:
        trash = self.user_trash_dir(user)
        if not store.exists(trash):
            store.mkdirs(trash)
            store.set_owner(trash, user)
        return trash

    def _randomized_trash_path(self, store: PathStore, user: str, path: str) -> str:
        trash = self.user_trash_dir(user)
        name = basename(path)
        for _ in range(self._config.max_name_attempts):
            candidate = path_join(trash, f"{name}.{random_suffix(self._config.trash_suffix_length)}")
            if not store.exists(candidate):
                return candidate
        raise NameGenerationError(
            f"Could not find a free trash name for {path}",
            path=path,
            attempts=self._config.max_name_attempts,
        )

    def _move_to_trash(self, store: PathStore, user: str, path: str) -> str:
        self._ensure_trash_dir(store, user)
        trash_path = self._randomized_trash_path(store, user, path)
        store.move(path, trash_path)
        store.set_metadata(trash_path, TRASH_ORIGIN_ATTR, path)
        logger.info("Moved %s to trash at %s", path, trash_path)
        return trash_path

    def delete_paths(self, store: PathStore, user: str, paths: list[str]) -> DeleteResult:
        """Move *paths* into *user*'s trash; purge paths already in it."""
        validators.not_superuser(self._config, user)
        validators.num_paths(self._config, paths)
        paths = normalize_paths(paths)

        validators.user_exists(store, user)
        validators.all_paths_exist(store, paths)
        validators.user_owns_paths(store, user, paths)
        validators.not_home_dirs(self._config, user, paths)

        for path in paths:
            self._tickets.revoke_tickets(store, path)
            if self.in_trash(user, path):
                store.delete(path)
                logger.info("Purged %s from trash", path)
            else:
                self._move_to_trash(store, user, path)

        return DeleteResult(paths=paths)

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    def _origin_path(self, store: PathStore, user: str, path: str) -> tuple[str, bool]:
        """Return ``(origin, partial)`` for a trashed *path*.

        Without an origin attribute the object goes back to the home
        directory and the restore counts as partial.
        """
        values = store.get_attribute(path, TRASH_ORIGIN_ATTR)
        if values:
            return normalize_path(values[0]), False
        return path_join(self._config.user_home_dir(user), basename(path)), True

    def _restoration_path(self, store: PathStore, origin: str) -> str:
        if not store.exists(origin):
            return origin
        for attempt in range(self._config.max_name_attempts):
            candidate = f"{origin}.{attempt}"
            if not store.exists(candidate):
                return candidate
        raise NameGenerationError(
            f"Could not find a free restore name for {origin}",
            path=origin,
            attempts=self._config.max_name_attempts,
        )

    def _restore_parent_dirs(self, store: PathStore, user: str, path: str) -> None:
        """Create missing parents of *path* and hand them back to *user*.

        Directories created by the store belong to the service account,
        so ownership is repaired from the parent upward until the home
        directory or a directory *user* already owns.
        """
        parent = dirname(path)
        if store.exists(parent):
            return

        created = store.mkdirs(parent)
        logger.info("Created %s while restoring %s", created, path)

        home = self._config.user_home_dir(user)
        for directory in [parent, *ancestors(parent, stop_at={home})]:
            if directory == home or store.owns(user, directory):
                break
            logger.info("Restoring ownership of parent dir %s to %s", directory, user)
            store.set_owner(directory, user)

    def restore_paths(self, store: PathStore, user: str, paths: list[str]) -> RestoreResult:
        """Move trashed *paths* back to where they came from."""
        validators.not_superuser(self._config, user)
        validators.num_paths(self._config, paths)
        paths = normalize_paths(paths)

        validators.user_exists(store, user)
        validators.all_paths_exist(store, paths)
        validators.all_paths_writeable(store, user, paths)

        result = RestoreResult()
        for path in paths:
            origin, partial = self._origin_path(store, user, path)
            target = self._restoration_path(store, origin)
            logger.info("Restoring %s to %s", path, target)

            validators.path_not_exists(store, target)
            self._restore_parent_dirs(store, user, target)
            validators.path_writeable(store, user, dirname(target))
            validators.path_not_exists(store, target)

            store.move(path, target)
            store.delete_metadata(target, TRASH_ORIGIN_ATTR)
            result.restored[path] = RestoredPath(restored_path=target, partial_restore=partial)

        return result

    # ------------------------------------------------------------------
    # Listing and purge
    # ------------------------------------------------------------------

    def user_trash(self, store: PathStore, user: str) -> TrashInfo:
        validators.user_exists(store, user)
        return TrashInfo(trash=self.user_trash_dir(user))

    def list_trash(self, store: PathStore, user: str) -> TrashListing:
        validators.user_exists(store, user)
        trash = self.user_trash_dir(user)
        paths = store.list_children(trash) if store.exists(trash) else []
        return TrashListing(trash=trash, paths=paths)

    def delete_trash(self, store: PathStore, user: str) -> TrashListing:
        """Permanently delete everything in *user*'s trash."""
        validators.not_superuser(self._config, user)
        listing = self.list_trash(store, user)
        for path in listing.paths:
            self._tickets.revoke_tickets(store, path)
            store.delete(path)
        logger.info("Purged %d paths from %s", len(listing.paths), listing.trash)
        return listing
