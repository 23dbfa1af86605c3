"""Precondition checks run before any store mutation.

Each validator returns ``None`` or raises a ``DonkeyError`` subclass.
Validators that take several paths or users raise on the first failure
but report every offender in the error detail.  None of them mutate the
store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import (
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
from .utils import normalize_path, validate_path

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from donkey.config import DonkeyConfig

    from .protocol import PathStore


def _offenders(items: Iterable[str], bad: Callable[[str], bool]) -> list[str]:
    return [item for item in items if bad(item)]


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


def good_string(value: str, field: str = "path") -> None:
    """Reject empty strings and strings the store cannot hold."""
    valid, error = validate_path(value) if isinstance(value, str) else (False, "not a string")
    if not valid:
        raise BadFieldError(error, field=field, value=value)


def num_paths(config: DonkeyConfig, paths: list[str]) -> None:
    if len(paths) > config.max_paths:
        raise TooManyPathsError(
            f"Too many paths: {len(paths)} (max {config.max_paths})",
            count=len(paths),
            limit=config.max_paths,
        )


def not_superuser(config: DonkeyConfig, user: str) -> None:
    if config.is_superuser(user):
        raise NotAuthorizedError(f"Operation not permitted for {user}", user=user)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def user_exists(store: PathStore, user: str) -> None:
    if not store.user_exists(user):
        raise UserNotFoundError(f"User does not exist: {user}", user=user)


def all_users_exist(store: PathStore, users: list[str]) -> None:
    missing = _offenders(users, lambda u: not store.user_exists(u))
    if missing:
        raise UserNotFoundError(f"Users do not exist: {missing}", users=missing)


# ---------------------------------------------------------------------------
# Existence
# ---------------------------------------------------------------------------


def path_exists(store: PathStore, path: str) -> None:
    if not store.exists(path):
        raise PathNotFoundError(f"Path does not exist: {path}", path=path)


def all_paths_exist(store: PathStore, paths: list[str]) -> None:
    missing = _offenders(paths, lambda p: not store.exists(p))
    if missing:
        raise PathNotFoundError(f"Paths do not exist: {missing}", paths=missing)


def path_not_exists(store: PathStore, path: str) -> None:
    if store.exists(path):
        raise PathExistsError(f"Path exists: {path}", path=path)


def no_paths_exist(store: PathStore, paths: list[str]) -> None:
    present = _offenders(paths, store.exists)
    if present:
        raise PathExistsError(f"Paths exist: {present}", paths=present)


def path_is_dir(store: PathStore, path: str) -> None:
    if not store.is_dir(path):
        raise NotAFolderError(f"Not a directory: {path}", path=path)


def path_is_file(store: PathStore, path: str) -> None:
    if not store.is_file(path):
        raise NotAFileError(f"Not a file: {path}", path=path)


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


def user_owns_path(store: PathStore, user: str, path: str) -> None:
    if not store.owns(user, path):
        raise NotAuthorizedError(f"{user} does not own {path}", user=user, path=path)


def user_owns_paths(store: PathStore, user: str, paths: list[str]) -> None:
    not_owned = _offenders(paths, lambda p: not store.owns(user, p))
    if not_owned:
        raise NotAuthorizedError(f"{user} does not own {not_owned}", user=user, paths=not_owned)


def path_readable(store: PathStore, user: str, path: str) -> None:
    if not store.is_readable(user, path):
        raise NotReadableError(f"{path} is not readable by {user}", user=user, path=path)


def all_paths_readable(store: PathStore, user: str, paths: list[str]) -> None:
    unreadable = _offenders(paths, lambda p: not store.is_readable(user, p))
    if unreadable:
        raise NotReadableError(
            f"Paths not readable by {user}: {unreadable}", user=user, paths=unreadable
        )


def path_writeable(store: PathStore, user: str, path: str) -> None:
    if not store.is_writeable(user, path):
        raise NotWriteableError(f"{path} is not writeable by {user}", user=user, path=path)


def all_paths_writeable(store: PathStore, user: str, paths: list[str]) -> None:
    unwriteable = _offenders(paths, lambda p: not store.is_writeable(user, p))
    if unwriteable:
        raise NotWriteableError(
            f"Paths not writeable by {user}: {unwriteable}", user=user, paths=unwriteable
        )


def not_home_dirs(config: DonkeyConfig, user: str, paths: list[str]) -> None:
    """Reject any attempt on *user*'s home directory, reporting every such path."""
    home = config.user_home_dir(user)
    protected = _offenders(paths, lambda p: normalize_path(p) == home)
    if protected:
        raise NotAuthorizedError(
            f"Home directory may not be modified: {home}", user=user, paths=protected
        )


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------


def all_tickets_exist(store: PathStore, ticket_ids: list[str]) -> None:
    missing = _offenders(ticket_ids, lambda t: store.get_ticket(t) is None)
    if missing:
        raise TicketNotFoundError(f"Tickets do not exist: {missing}", tickets=missing)


def all_tickets_nonexistent(store: PathStore, ticket_ids: list[str]) -> None:
    present = _offenders(ticket_ids, lambda t: store.get_ticket(t) is not None)
    if present:
        raise PathExistsError(f"Tickets exist: {present}", tickets=present)
