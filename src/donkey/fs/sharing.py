"""SharingEngine: share/unshare permission propagation and the shared-with index.

Stateless service that receives the configuration at construction and a
store at call time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import validators
from .exceptions import BadFieldError
from .types import (
    PathPermissions,
    Permissions,
    ShareResult,
    SkippedShare,
    UnshareResult,
)
from .utils import ancestors, is_under, level_at_least, normalize_path

if TYPE_CHECKING:
    from donkey.config import DonkeyConfig

    from .protocol import PathStore

logger = logging.getLogger(__name__)

SHARED_WITH_ATTR = "ipc-contains-obj-shared-with"
"""AVU on a sharer's home directory; one value per grantee."""

SHARE_WITH_SELF = "share-with-self"
SHARE_FROM_TRASH = "share-from-trash"
ALREADY_SHARED = "already-shared"
UNSHARE_WITH_SELF = "unshare-with-self"
NOT_SHARED = "not-shared"


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class SharingEngine:
    """Grants and revokes access for (grantee, path) pairs.

    Pairs are classified grantee-major, path-minor.  Each decision is
    independent of the others; the order only fixes the order of the
    ``grantees`` and ``skipped`` lists in the result.
    """

    def __init__(self, config: DonkeyConfig) -> None:
        self._config = config

    def _base_dirs(self, user: str) -> set[str]:
        """Directories the ancestor walks never touch."""
        return {self._config.user_home_dir(user), self._config.user_trash_dir(user)}

    def _validate(
        self, store: PathStore, user: str, grantees: list[str], paths: list[str]
    ) -> None:
        validators.num_paths(self._config, paths)
        validators.user_exists(store, user)
        validators.all_users_exist(store, grantees)
        validators.all_paths_exist(store, paths)
        validators.user_owns_paths(store, user, paths)

    # ------------------------------------------------------------------
    # Share
    # ------------------------------------------------------------------

    def is_shared(
        self, store: PathStore, grantee: str, path: str, required: str | None = None
    ) -> bool:
        """True if *grantee* can read *path* (at *required* level, when given)."""
        level = store.permission_level(grantee, path)
        if level is None:
            return False
        return required is None or level_at_least(level, required)

    def _share_path(
        self, store: PathStore, user: str, grantee: str, level: str, path: str
    ) -> None:
        """Share *path* with *grantee*.

        1. Every ancestor below the sharer's home (and trash) directory is
           made readable, or the shared item is unreachable in listings.
        2. Directories get the inherit flag so new children are shared too.
        3. The requested level is applied recursively at *path*.
        """
        logger.info("%s is being shared with %s by %s", path, grantee, user)
        for parent in ancestors(path, stop_at=self._base_dirs(user)):
            if not is_under(parent, self._config.user_home_dir(user)):
                break
            if store.permission_level(grantee, parent) is None:
                store.set_permission(grantee, parent, "read")

        if store.is_dir(path):
            logger.info("%s is a directory, setting the inherit bit", path)
            store.set_inherit(path, True, recursive=True)

        store.set_permission(grantee, path, level, recursive=True)
        logger.info("%s given recursive %s permission on %s", grantee, level, path)

    def share(
        self,
        store: PathStore,
        user: str,
        grantees: list[str],
        paths: list[str],
        permissions: Permissions,
    ) -> ShareResult:
        level = permissions.level
        if level is None:
            raise BadFieldError("Permissions must grant at least read", field="permissions")

        paths = [normalize_path(p) for p in paths]
        self._validate(store, user, grantees, paths)

        trash = self._config.user_trash_dir(user)
        granted: list[str] = []
        skipped: list[SkippedShare] = []
        for grantee in grantees:
            for path in paths:
                if grantee == user:
                    reason = SHARE_WITH_SELF
                elif is_under(path, trash):
                    reason = SHARE_FROM_TRASH
                elif self.is_shared(store, grantee, path, level):
                    reason = ALREADY_SHARED
                else:
                    self._share_path(store, user, grantee, level, path)
                    granted.append(grantee)
                    continue
                logger.warning("Skipping share of %s with %s because: %s", path, grantee, reason)
                skipped.append(SkippedShare(grantee=grantee, path=path, reason=reason))

        home = self._config.user_home_dir(user)
        for grantee in _unique(granted):
            store.add_metadata(home, SHARED_WITH_ATTR, grantee)

        return ShareResult(
            grantees=_unique(granted),
            paths=paths,
            skipped=skipped,
            permissions=permissions,
        )

    # ------------------------------------------------------------------
    # Unshare
    # ------------------------------------------------------------------

    def _remove_inherit_bit(self, store: PathStore, user: str, path: str) -> bool:
        """True when nobody but admin accounts and *user* still holds access."""
        keep = {*self._config.irods_admins, user}
        return all(p.user in keep for p in store.list_user_perms(path))

    def _unshare_path(self, store: PathStore, user: str, grantee: str, path: str) -> None:
        """Remove *grantee*'s access to *path*.

        1. Access is removed recursively.
        2. A directory nobody else shares loses its inherit flag.
        3. Read access is withdrawn from ancestors below the sharer's home
           that no longer contain anything *grantee* can reach, stopping
           at the first that does.  Only read entries are removed: a
           higher level on an ancestor is a share of its own.
        """
        logger.info("Removing permissions on %s from %s by %s", path, grantee, user)
        store.remove_permissions(grantee, path, recursive=True)

        if store.is_dir(path) and self._remove_inherit_bit(store, user, path):
            logger.info("Removing inherit bit on %s", path)
            store.set_inherit(path, False, recursive=True)

        home = self._config.user_home_dir(user)
        for parent in ancestors(path, stop_at=self._base_dirs(user)):
            if not is_under(parent, home):
                break
            if store.contains_accessible_obj(grantee, parent):
                break
            if store.permission_level(grantee, parent) == "read":
                store.remove_permissions(grantee, parent)

    def unshare(
        self, store: PathStore, user: str, grantees: list[str], paths: list[str]
    ) -> UnshareResult:
        paths = [normalize_path(p) for p in paths]
        self._validate(store, user, grantees, paths)

        revoked: list[str] = []
        skipped: list[SkippedShare] = []
        for grantee in grantees:
            for path in paths:
                if grantee == user:
                    reason = UNSHARE_WITH_SELF
                elif self.is_shared(store, grantee, path):
                    self._unshare_path(store, user, grantee, path)
                    revoked.append(grantee)
                    continue
                else:
                    reason = NOT_SHARED
                logger.warning("Skipping unshare of %s with %s because: %s", path, grantee, reason)
                skipped.append(SkippedShare(grantee=grantee, path=path, reason=reason))

        home = self._config.user_home_dir(user)
        for grantee in _unique(revoked):
            if not store.contains_accessible_obj(grantee, home):
                logger.info("Removing shared-with marker on %s for %s", home, grantee)
                store.delete_metadata(home, SHARED_WITH_ATTR, grantee)

        return UnshareResult(grantees=_unique(revoked), paths=paths, skipped=skipped)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_shared_with_me(self, store: PathStore, user: str) -> list[str]:
        """Home directories holding at least one object shared with *user*."""
        validators.user_exists(store, user)
        return [
            home
            for home in store.paths_with_attribute(SHARED_WITH_ATTR, user)
            if store.contains_accessible_obj(user, home)
        ]

    def list_permissions(
        self, store: PathStore, user: str, paths: list[str]
    ) -> list[PathPermissions]:
        """ACLs on *paths*, hiding *user*, the service account and filtered accounts."""
        paths = [normalize_path(p) for p in paths]
        validators.num_paths(self._config, paths)
        validators.user_exists(store, user)
        validators.all_paths_exist(store, paths)
        validators.user_owns_paths(store, user, paths)

        hidden = {*self._config.perms_filter, self._config.irods_user, user}
        return [
            PathPermissions(
                path=path,
                user_permissions=[p for p in store.list_user_perms(path) if p.user not in hidden],
            )
            for path in paths
        ]
