"""PathStore protocol: the primitives the trash, sharing and ticket services use.

Every mutating primitive is atomic and visible to the next call made
through the same store.  A sequence of primitives is *not* a
transaction: callers that fail half-way leave earlier steps applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from .types import ObjectInfo, TicketInfo, UserPermission


@runtime_checkable
class PathStore(Protocol):
    """Hierarchical path-addressed store with ACLs, AVUs and tickets."""

    acting_user: str

    def close(self) -> None:
        """Release the underlying connection."""
        ...

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def user_exists(self, username: str) -> bool: ...

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool: ...

    def stat(self, path: str) -> ObjectInfo | None: ...

    def list_children(self, path: str) -> list[str]: ...

    def mkdir(self, path: str, owner: str | None = None) -> None: ...

    def mkdirs(self, path: str) -> list[str]: ...

    def create_file(self, path: str, owner: str | None = None, size_bytes: int = 0) -> None: ...

    def move(self, src: str, dest: str) -> None: ...

    def copy(self, src: str, dest: str, owner: str | None = None) -> None: ...

    def delete(self, path: str) -> None: ...

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    def permission_level(self, username: str, path: str) -> str | None: ...

    def owns(self, username: str, path: str) -> bool: ...

    def is_readable(self, username: str, path: str) -> bool: ...

    def is_writeable(self, username: str, path: str) -> bool: ...

    def list_user_perms(self, path: str) -> list[UserPermission]: ...

    def set_permission(
        self, username: str, path: str, level: str | None, *, recursive: bool = False
    ) -> None: ...

    def remove_permissions(self, username: str, path: str, *, recursive: bool = False) -> None: ...

    def set_owner(self, path: str, username: str) -> None: ...

    def set_inherit(self, path: str, inherit: bool, *, recursive: bool = False) -> None: ...

    def is_inherit(self, path: str) -> bool: ...

    def contains_accessible_obj(self, username: str, path: str) -> bool: ...

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def get_attribute(self, path: str, attr: str) -> list[str]: ...

    def has_attribute(self, path: str, attr: str, value: str | None = None) -> bool: ...

    def set_metadata(self, path: str, attr: str, value: str, unit: str = "") -> None: ...

    def add_metadata(self, path: str, attr: str, value: str, unit: str = "") -> None: ...

    def delete_metadata(self, path: str, attr: str, value: str | None = None) -> None: ...

    def paths_with_attribute(self, attr: str, value: str | None = None) -> list[str]: ...

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    def create_ticket(
        self,
        ticket_id: str,
        path: str,
        owner: str,
        *,
        public: bool = False,
        expires_at: datetime | None = None,
    ) -> TicketInfo: ...

    def get_ticket(self, ticket_id: str) -> TicketInfo | None: ...

    def delete_ticket(self, ticket_id: str) -> None: ...

    def tickets_under(self, path: str) -> list[TicketInfo]: ...
