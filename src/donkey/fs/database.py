"""DatabasePathStore: SQL-backed hierarchical store bound to one session.

Every mutating primitive commits before returning, so its effect is
visible to the next call and survives a failure later in the same
request.  Nothing here checks *who* is asking: permission policy lives
in ``validators`` and the services built on top.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from donkey.models import AccessEntry, ObjectAttribute, StoreObject, StoreUser, Ticket

from .exceptions import PathExistsError, PathNotFoundError, StorageError
from .types import ObjectInfo, TicketInfo, UserPermission
from .utils import ACCESS_LEVELS, is_under, normalize_path, split_path

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlmodel import Session

logger = logging.getLogger(__name__)


class DatabasePathStore:
    """Path store over the ``donkey_*`` tables.

    Holds a single SQLModel ``Session`` for the lifetime of a request.
    ``acting_user`` is the service account that owns directories the
    store creates implicitly (``mkdirs``).

    Implements the ``PathStore`` protocol.
    """

    def __init__(self, session: Session, acting_user: str = "rods") -> None:
        self._session = session
        self.acting_user = acting_user

    @property
    def session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @contextmanager
    def _atomic(self) -> Iterator[Session]:
        """Run one primitive: commit on success, roll back and wrap DB errors."""
        try:
            yield self._session
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Store operation failed: %s", exc)
            raise StorageError(str(exc)) from exc
        except Exception:
            self._session.rollback()
            raise

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def user_exists(self, username: str) -> bool:
        if not username:
            return False
        return self._session.get(StoreUser, username) is not None

    def add_user(self, username: str, user_type: str = "rodsuser") -> None:
        with self._atomic() as session:
            if session.get(StoreUser, username) is None:
                session.add(StoreUser(username=username, user_type=user_type))

    # ------------------------------------------------------------------
    # Object lookup
    # ------------------------------------------------------------------

    def _get(self, path: str) -> StoreObject | None:
        path = normalize_path(path)
        result = self._session.exec(select(StoreObject).where(StoreObject.path == path))
        return result.first()

    def _descendants(self, path: str) -> list[StoreObject]:
        """Objects strictly under *path*, shallowest first."""
        path = normalize_path(path)
        prefix = "/" if path == "/" else path + "/"
        result = self._session.exec(
            select(StoreObject).where(
                StoreObject.path.startswith(prefix, autoescape=True),  # type: ignore[attr-defined]
            )
        )
        return sorted(result.all(), key=lambda o: o.path.count("/"))

    def _subtree(self, path: str) -> list[StoreObject]:
        obj = self._get(path)
        if obj is None:
            return []
        return [obj, *self._descendants(path)]

    def exists(self, path: str) -> bool:
        path = normalize_path(path)
        if path == "/":
            return True
        return self._get(path) is not None

    def is_dir(self, path: str) -> bool:
        path = normalize_path(path)
        if path == "/":
            return True
        obj = self._get(path)
        return obj is not None and obj.is_directory

    def is_file(self, path: str) -> bool:
        obj = self._get(path)
        return obj is not None and not obj.is_directory

    def stat(self, path: str) -> ObjectInfo | None:
        obj = self._get(path)
        if obj is None:
            return None
        return ObjectInfo(
            path=obj.path,
            name=obj.name,
            is_directory=obj.is_directory,
            size_bytes=obj.size_bytes,
            creator=obj.creator,
            inherit=obj.inherit,
            created_at=obj.created_at,
            updated_at=obj.updated_at,
        )

    def list_children(self, path: str) -> list[str]:
        path = normalize_path(path)
        result = self._session.exec(
            select(StoreObject.path).where(StoreObject.parent_path == path)
        )
        return sorted(result.all())

    # ------------------------------------------------------------------
    # Object creation
    # ------------------------------------------------------------------

    def _insert(self, session: Session, path: str, *, is_directory: bool, owner: str,
                size_bytes: int = 0) -> StoreObject:
        """Insert one object; the parent must exist.  Applies parent inheritance."""
        parent_path, name = split_path(path)
        if not name:
            raise PathExistsError(f"Path exists: {path}", path=path)
        if self._get(path) is not None:
            raise PathExistsError(f"Path exists: {path}", path=path)

        parent = self._get(parent_path) if parent_path != "/" else None
        if parent_path != "/" and (parent is None or not parent.is_directory):
            raise PathNotFoundError(f"Parent directory does not exist: {parent_path}",
                                    path=parent_path)

        inherit = bool(parent is not None and parent.inherit)
        obj = StoreObject(
            path=path,
            parent_path=parent_path,
            name=name,
            is_directory=is_directory,
            creator=owner,
            inherit=inherit and is_directory,
            size_bytes=size_bytes,
        )
        session.add(obj)

        levels: dict[str, str] = {}
        if inherit:
            for entry in self._entries_on(parent_path):
                levels[entry.username] = entry.level
        levels[owner] = "own"
        for username, level in levels.items():
            session.add(AccessEntry(path=path, username=username, level=level))
        session.flush()
        return obj

    def mkdir(self, path: str, owner: str | None = None) -> None:
        path = normalize_path(path)
        with self._atomic() as session:
            self._insert(session, path, is_directory=True, owner=owner or self.acting_user)

    def mkdirs(self, path: str) -> list[str]:
        """Create *path* and any missing ancestors as ``acting_user``.

        Returns the directories created, shallowest first.
        """
        path = normalize_path(path)
        missing: list[str] = []
        current = path
        while current != "/":
            existing = self._get(current)
            if existing is not None:
                if not existing.is_directory:
                    raise PathExistsError(f"Path exists as file: {current}", path=current)
                break
            missing.insert(0, current)
            current = split_path(current)[0]

        if missing:
            with self._atomic() as session:
                for dir_path in missing:
                    self._insert(session, dir_path, is_directory=True, owner=self.acting_user)
            logger.debug("Created directories %s", missing)
        return missing

    def create_file(self, path: str, owner: str | None = None, size_bytes: int = 0) -> None:
        path = normalize_path(path)
        with self._atomic() as session:
            self._insert(
                session, path, is_directory=False, owner=owner or self.acting_user,
                size_bytes=size_bytes,
            )

    # ------------------------------------------------------------------
    # Move, copy, delete
    # ------------------------------------------------------------------

    def move(self, src: str, dest: str) -> None:
        """Rename *src* (and its subtree) to *dest*.

        ACLs, attributes and tickets travel with the objects.
        """
        src = normalize_path(src)
        dest = normalize_path(dest)

        src_obj = self._get(src)
        if src_obj is None:
            raise PathNotFoundError(f"Source not found: {src}", path=src)
        if self.exists(dest):
            raise PathExistsError(f"Destination exists: {dest}", path=dest)
        if src_obj.is_directory and is_under(dest, src):
            raise StorageError(f"Cannot move directory into itself: {dest} is inside {src}")
        dest_parent, dest_name = split_path(dest)
        if not self.is_dir(dest_parent):
            raise PathNotFoundError(f"Parent directory does not exist: {dest_parent}",
                                    path=dest_parent)

        def rebase(p: str) -> str:
            return dest + p[len(src):]

        now = datetime.now(UTC)
        with self._atomic() as session:
            for obj in self._subtree(src):
                obj.path = rebase(obj.path)
                obj.parent_path, obj.name = split_path(obj.path)
                obj.updated_at = now
            for model in (AccessEntry, ObjectAttribute, Ticket):
                for row in self._rows_under(model, src):
                    row.path = rebase(row.path)
        logger.debug("Moved %s to %s", src, dest)

    def copy(self, src: str, dest: str, owner: str | None = None) -> None:
        """Copy *src* (and its subtree) to *dest*, owned by *owner*."""
        src = normalize_path(src)
        dest = normalize_path(dest)
        owner = owner or self.acting_user

        src_obj = self._get(src)
        if src_obj is None:
            raise PathNotFoundError(f"Source not found: {src}", path=src)
        if self.exists(dest):
            raise PathExistsError(f"Destination exists: {dest}", path=dest)

        with self._atomic() as session:
            for obj in self._subtree(src):
                self._insert(
                    session,
                    dest + obj.path[len(src):],
                    is_directory=obj.is_directory,
                    owner=owner,
                    size_bytes=obj.size_bytes,
                )

    def delete(self, path: str) -> None:
        """Permanently delete *path*, its subtree, and everything attached to it."""
        path = normalize_path(path)
        if self._get(path) is None:
            raise PathNotFoundError(f"Path not found: {path}", path=path)

        with self._atomic() as session:
            for model in (AccessEntry, ObjectAttribute, Ticket):
                for row in self._rows_under(model, path):
                    session.delete(row)
            for obj in reversed(self._subtree(path)):
                session.delete(obj)
        logger.debug("Deleted %s", path)

    def _rows_under(self, model: type, path: str) -> list:
        """Rows of *model* whose ``path`` is *path* or lies beneath it."""
        result = self._session.exec(
            select(model).where(
                (model.path == path)
                | model.path.startswith(path + "/", autoescape=True)
            )
        )
        return list(result.all())

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    def _entries_on(self, path: str) -> list[AccessEntry]:
        result = self._session.exec(
            select(AccessEntry).where(AccessEntry.path == normalize_path(path))
        )
        return list(result.all())

    def permission_level(self, username: str, path: str) -> str | None:
        path = normalize_path(path)
        result = self._session.exec(
            select(AccessEntry.level).where(
                AccessEntry.path == path,
                AccessEntry.username == username,
            )
        )
        return result.first()

    def list_user_perms(self, path: str) -> list[UserPermission]:
        entries = self._entries_on(path)
        return [
            UserPermission(user=e.username, level=e.level)
            for e in sorted(entries, key=lambda e: e.username)
        ]

    def owns(self, username: str, path: str) -> bool:
        return self.permission_level(username, path) == "own"

    def is_readable(self, username: str, path: str) -> bool:
        return self.permission_level(username, path) is not None

    def is_writeable(self, username: str, path: str) -> bool:
        return self.permission_level(username, path) in ("write", "own")

    def set_permission(
        self, username: str, path: str, level: str | None, *, recursive: bool = False
    ) -> None:
        """Replace *username*'s entry on *path* (remove, then add).

        ``level=None`` only removes.  With ``recursive`` the same change is
        applied to every object under *path*.
        """
        if level is not None and level not in ACCESS_LEVELS:
            raise ValueError(f"Invalid access level: {level!r}")
        path = normalize_path(path)
        targets = [o.path for o in self._subtree(path)] if recursive else [path]
        if not targets or not self.exists(path):
            raise PathNotFoundError(f"Path not found: {path}", path=path)

        with self._atomic() as session:
            for target in targets:
                result = session.exec(
                    select(AccessEntry).where(
                        AccessEntry.path == target,
                        AccessEntry.username == username,
                    )
                )
                for entry in result.all():
                    session.delete(entry)
            session.flush()
            if level is not None:
                for target in targets:
                    session.add(AccessEntry(path=target, username=username, level=level))

    def remove_permissions(self, username: str, path: str, *, recursive: bool = False) -> None:
        self.set_permission(username, path, None, recursive=recursive)

    def set_owner(self, path: str, username: str) -> None:
        self.set_permission(username, path, "own")

    def set_inherit(self, path: str, inherit: bool, *, recursive: bool = False) -> None:
        path = normalize_path(path)
        objects = self._subtree(path) if recursive else [o for o in [self._get(path)] if o]
        if not objects:
            raise PathNotFoundError(f"Path not found: {path}", path=path)
        with self._atomic():
            for obj in objects:
                if obj.is_directory:
                    obj.inherit = inherit

    def is_inherit(self, path: str) -> bool:
        obj = self._get(path)
        return bool(obj is not None and obj.inherit)

    def contains_accessible_obj(self, username: str, path: str) -> bool:
        """True if *username* holds any entry on an object strictly under *path*."""
        path = normalize_path(path)
        prefix = "/" if path == "/" else path + "/"
        result = self._session.exec(
            select(AccessEntry.id).where(
                AccessEntry.username == username,
                AccessEntry.path.startswith(prefix, autoescape=True),  # type: ignore[attr-defined]
            )
        )
        return result.first() is not None

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _avus(self, path: str, attr: str, value: str | None = None) -> list[ObjectAttribute]:
        query = select(ObjectAttribute).where(
            ObjectAttribute.path == normalize_path(path),
            ObjectAttribute.attr == attr,
        )
        if value is not None:
            query = query.where(ObjectAttribute.value == value)
        return list(self._session.exec(query).all())

    def get_attribute(self, path: str, attr: str) -> list[str]:
        return [avu.value for avu in self._avus(path, attr)]

    def has_attribute(self, path: str, attr: str, value: str | None = None) -> bool:
        return bool(self._avus(path, attr, value))

    def set_metadata(self, path: str, attr: str, value: str, unit: str = "") -> None:
        """Set *attr* to a single *value*, replacing any existing values."""
        path = normalize_path(path)
        if not self.exists(path):
            raise PathNotFoundError(f"Path not found: {path}", path=path)
        with self._atomic() as session:
            for avu in self._avus(path, attr):
                session.delete(avu)
            session.flush()
            session.add(ObjectAttribute(path=path, attr=attr, value=value, unit=unit))

    def add_metadata(self, path: str, attr: str, value: str, unit: str = "") -> None:
        """Add *value* to *attr* unless it is already present."""
        path = normalize_path(path)
        if not self.exists(path):
            raise PathNotFoundError(f"Path not found: {path}", path=path)
        if self._avus(path, attr, value):
            return
        with self._atomic() as session:
            session.add(ObjectAttribute(path=path, attr=attr, value=value, unit=unit))

    def delete_metadata(self, path: str, attr: str, value: str | None = None) -> None:
        avus = self._avus(path, attr, value)
        if not avus:
            return
        with self._atomic() as session:
            for avu in avus:
                session.delete(avu)

    def paths_with_attribute(self, attr: str, value: str | None = None) -> list[str]:
        query = select(ObjectAttribute.path).where(ObjectAttribute.attr == attr)
        if value is not None:
            query = query.where(ObjectAttribute.value == value)
        return sorted(set(self._session.exec(query).all()))

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    @staticmethod
    def _ticket_info(ticket: Ticket) -> TicketInfo:
        return TicketInfo(
            ticket_id=ticket.ticket_id,
            path=ticket.path,
            owner=ticket.owner,
            public=ticket.public,
            created_at=ticket.created_at,
            expires_at=ticket.expires_at,
        )

    def create_ticket(
        self,
        ticket_id: str,
        path: str,
        owner: str,
        *,
        public: bool = False,
        expires_at: datetime | None = None,
    ) -> TicketInfo:
        path = normalize_path(path)
        if not self.exists(path):
            raise PathNotFoundError(f"Path not found: {path}", path=path)
        if self._session.get(Ticket, ticket_id) is not None:
            raise PathExistsError(f"Ticket exists: {ticket_id}", tickets=[ticket_id])
        ticket = Ticket(
            ticket_id=ticket_id, path=path, owner=owner, public=public, expires_at=expires_at,
        )
        with self._atomic() as session:
            session.add(ticket)
        return self._ticket_info(ticket)

    def get_ticket(self, ticket_id: str) -> TicketInfo | None:
        ticket = self._session.get(Ticket, ticket_id)
        return self._ticket_info(ticket) if ticket is not None else None

    def delete_ticket(self, ticket_id: str) -> None:
        ticket = self._session.get(Ticket, ticket_id)
        if ticket is None:
            return
        with self._atomic() as session:
            session.delete(ticket)

    def tickets_under(self, path: str) -> list[TicketInfo]:
        """Tickets bound to *path* or to anything beneath it."""
        path = normalize_path(path)
        rows = self._rows_under(Ticket, path)
        return [self._ticket_info(t) for t in sorted(rows, key=lambda t: t.ticket_id)]
