"""Directory creation, move, copy and existence/stat queries.

Module-level functions taking the config, a store and the acting user,
in the same validate-then-mutate shape as the trash and sharing
services.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import validators
from .exceptions import InvalidCopyError
from .types import CreateResult, MoveResult, ObjectInfo, Permissions
from .utils import basename, dirname, is_under, normalize_path, normalize_paths, path_join

if TYPE_CHECKING:
    from donkey.config import DonkeyConfig

    from .protocol import PathStore
    from .tickets import TicketService

logger = logging.getLogger(__name__)

COPY_FROM_ATTR = "ipc-de-copy-from"
"""AVU stamped on a copy with the path it was copied from."""


def create_directory(
    config: DonkeyConfig, store: PathStore, user: str, path: str
) -> CreateResult:
    """Create *path* as a directory owned by *user*; its parent must be writeable."""
    validators.not_superuser(config, user)
    validators.good_string(path)
    path = normalize_path(path)
    parent = dirname(path)

    validators.user_exists(store, user)
    validators.path_exists(store, parent)
    validators.path_is_dir(store, parent)
    validators.path_writeable(store, user, parent)
    validators.path_not_exists(store, path)

    store.mkdir(path, owner=user)
    logger.info("%s created directory %s", user, path)
    return CreateResult(
        path=path, permissions=Permissions.from_level(store.permission_level(user, path))
    )


def move_paths(
    config: DonkeyConfig,
    store: PathStore,
    tickets: TicketService,
    user: str,
    sources: list[str],
    dest: str,
) -> MoveResult:
    """Move every source into the directory *dest*, keeping basenames.

    Tickets on a moved path are revoked first, as they are on delete.
    """
    validators.not_superuser(config, user)
    validators.num_paths(config, sources)
    sources = normalize_paths(sources)
    dest = normalize_path(dest)
    targets = [path_join(dest, basename(s)) for s in sources]

    validators.user_exists(store, user)
    validators.all_paths_exist(store, [*sources, dest])
    validators.path_is_dir(store, dest)
    validators.user_owns_paths(store, user, sources)
    validators.not_home_dirs(config, user, sources)
    validators.path_writeable(store, user, dest)
    validators.no_paths_exist(store, targets)

    for source, target in zip(sources, targets, strict=True):
        tickets.revoke_tickets(store, source)
        store.move(source, target)
        logger.info("%s moved %s to %s", user, source, target)
    return MoveResult(sources=sources, dest=dest)


def rename_path(
    config: DonkeyConfig,
    store: PathStore,
    tickets: TicketService,
    user: str,
    source: str,
    dest: str,
) -> MoveResult:
    """Move *source* to the full path *dest*."""
    validators.not_superuser(config, user)
    validators.good_string(dest, field="dest")
    source = normalize_path(source)
    dest = normalize_path(dest)

    validators.user_exists(store, user)
    validators.path_exists(store, source)
    validators.user_owns_path(store, user, source)
    validators.not_home_dirs(config, user, [source])
    validators.path_exists(store, dirname(dest))
    validators.path_is_dir(store, dirname(dest))
    validators.path_writeable(store, user, dirname(dest))
    validators.path_not_exists(store, dest)

    tickets.revoke_tickets(store, source)
    store.move(source, dest)
    logger.info("%s renamed %s to %s", user, source, dest)
    return MoveResult(sources=[source], dest=dest)


def copy_paths(
    config: DonkeyConfig, store: PathStore, user: str, paths: list[str], dest: str
) -> MoveResult:
    """Copy *paths* into the directory *dest*, owned by *user*.

    Each copy carries a ``COPY_FROM_ATTR`` attribute naming its source.
    """
    validators.num_paths(config, paths)
    paths = normalize_paths(paths)
    dest = normalize_path(dest)
    if any(is_under(dest, p) for p in paths):
        raise InvalidCopyError(f"Cannot copy {dest} into itself", paths=paths, destination=dest)
    targets = [path_join(dest, basename(p)) for p in paths]

    validators.user_exists(store, user)
    validators.all_paths_exist(store, [*paths, dest])
    validators.all_paths_readable(store, user, paths)
    validators.path_is_dir(store, dest)
    validators.path_writeable(store, user, dest)
    validators.no_paths_exist(store, targets)

    for source, target in zip(paths, targets, strict=True):
        store.copy(source, target, owner=user)
        store.set_metadata(target, COPY_FROM_ATTR, source)
        logger.info("%s copied %s to %s", user, source, target)
    return MoveResult(sources=paths, dest=dest)


def paths_exist(store: PathStore, user: str, paths: list[str]) -> dict[str, bool]:
    validators.user_exists(store, user)
    return {p: store.exists(normalize_path(p)) for p in paths}


def stat_paths(store: PathStore, user: str, paths: list[str]) -> dict[str, ObjectInfo]:
    """Stat every path; all must exist and be readable by *user*."""
    normalized = [normalize_path(p) for p in paths]
    validators.user_exists(store, user)
    validators.all_paths_exist(store, normalized)
    validators.all_paths_readable(store, user, normalized)

    result: dict[str, ObjectInfo] = {}
    for path in normalized:
        info = store.stat(path)
        if info is not None:
            result[path] = info
    return result
