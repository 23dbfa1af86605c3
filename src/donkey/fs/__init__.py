"""Filesystem layer: path store, validators, trash, sharing, tickets."""

from donkey.fs.database import DatabasePathStore
from donkey.fs.exceptions import (
    BadFieldError,
    DonkeyError,
    InvalidCopyError,
    NameGenerationError,
    NotAFileError,
    NotAFolderError,
    NotAuthorizedError,
    NotReadableError,
    NotWriteableError,
    PathExistsError,
    PathNotFoundError,
    StorageError,
    TicketNotFoundError,
    TooManyPathsError,
    UserNotFoundError,
)
from donkey.fs.protocol import PathStore
from donkey.fs.sessions import StoreSessionFactory, provision_store, provision_user
from donkey.fs.sharing import SHARED_WITH_ATTR, SharingEngine
from donkey.fs.tickets import TicketService
from donkey.fs.trash import TRASH_ORIGIN_ATTR, TrashManager
from donkey.fs.types import (
    CreateResult,
    DeleteResult,
    MoveResult,
    ObjectInfo,
    PathPermissions,
    Permissions,
    RestoredPath,
    RestoreResult,
    ShareResult,
    SkippedShare,
    TicketInfo,
    TicketsResult,
    TrashInfo,
    TrashListing,
    UnshareResult,
    UserPermission,
)

__all__ = [
    "SHARED_WITH_ATTR",
    "TRASH_ORIGIN_ATTR",
    "BadFieldError",
    "CreateResult",
    "DatabasePathStore",
    "DeleteResult",
    "DonkeyError",
    "InvalidCopyError",
    "MoveResult",
    "NameGenerationError",
    "NotAFileError",
    "NotAFolderError",
    "NotAuthorizedError",
    "NotReadableError",
    "NotWriteableError",
    "ObjectInfo",
    "PathExistsError",
    "PathNotFoundError",
    "PathPermissions",
    "PathStore",
    "Permissions",
    "RestoreResult",
    "RestoredPath",
    "ShareResult",
    "SharingEngine",
    "SkippedShare",
    "StorageError",
    "StoreSessionFactory",
    "TicketInfo",
    "TicketNotFoundError",
    "TicketService",
    "TicketsResult",
    "TooManyPathsError",
    "TrashInfo",
    "TrashListing",
    "TrashManager",
    "UnshareResult",
    "UserNotFoundError",
    "UserPermission",
    "provision_store",
    "provision_user",
]
