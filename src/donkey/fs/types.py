"""Result types: DeleteResult, RestoreResult, ShareResult, etc."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import BadFieldError

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True)
class Permissions:
    """The ``{read, write, own}`` permission map used by share requests."""

    read: bool = False
    write: bool = False
    own: bool = False

    @property
    def level(self) -> str | None:
        """Highest access level the flags grant, or ``None``."""
        if self.own:
            return "own"
        if self.write:
            return "write"
        if self.read:
            return "read"
        return None

    @classmethod
    def from_level(cls, level: str | None) -> Permissions:
        if level == "own":
            return cls(read=True, write=True, own=True)
        if level == "write":
            return cls(read=True, write=True)
        if level == "read":
            return cls(read=True)
        if level is None:
            return cls()
        raise BadFieldError(f"Unknown access level: {level!r}", field="permissions")

    def to_dict(self) -> dict[str, bool]:
        return {"read": self.read, "write": self.write, "own": self.own}


@dataclass
class ObjectInfo:
    """File/directory metadata."""

    path: str
    name: str
    is_directory: bool
    size_bytes: int = 0
    creator: str = ""
    inherit: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class UserPermission:
    """One ACL entry on a path."""

    user: str
    level: str

    @property
    def permissions(self) -> Permissions:
        return Permissions.from_level(self.level)


@dataclass
class TicketInfo:
    """Ticket metadata."""

    ticket_id: str
    path: str
    owner: str
    public: bool = False
    created_at: datetime | None = None
    expires_at: datetime | None = None


# ---------------------------------------------------------------------------
# Trash
# ---------------------------------------------------------------------------


@dataclass
class DeleteResult:
    """Result of moving paths to the trash (or purging trashed paths)."""

    paths: list[str] = field(default_factory=list)


@dataclass
class RestoredPath:
    """Where one trashed path ended up."""

    restored_path: str
    partial_restore: bool


@dataclass
class RestoreResult:
    """Result of a restore, keyed by the trash path that was restored."""

    restored: dict[str, RestoredPath] = field(default_factory=dict)


@dataclass
class TrashInfo:
    """A user's trash directory."""

    trash: str


@dataclass
class TrashListing:
    """A user's trash directory and the paths directly inside it."""

    trash: str
    paths: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------


@dataclass
class SkippedShare:
    """A (grantee, path) pair the sharing engine did not act on."""

    grantee: str
    path: str
    reason: str


@dataclass
class ShareResult:
    """Result of a share operation."""

    grantees: list[str] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)
    skipped: list[SkippedShare] = field(default_factory=list)
    permissions: Permissions = field(default_factory=Permissions)


@dataclass
class UnshareResult:
    """Result of an unshare operation."""

    grantees: list[str] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)
    skipped: list[SkippedShare] = field(default_factory=list)


@dataclass
class PathPermissions:
    """ACL listing for one path."""

    path: str
    user_permissions: list[UserPermission] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Tickets and actions
# ---------------------------------------------------------------------------


@dataclass
class TicketsResult:
    """Result of adding or removing tickets."""

    user: str
    tickets: list[TicketInfo] = field(default_factory=list)


@dataclass
class MoveResult:
    """Result of a move or copy of several sources into one directory."""

    sources: list[str] = field(default_factory=list)
    dest: str = "/"


@dataclass
class CreateResult:
    """Result of a directory creation."""

    path: str
    permissions: Permissions = field(default_factory=Permissions)
