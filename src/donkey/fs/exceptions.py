"""Custom exception hierarchy for the Donkey filesystem layer.

Every error carries the wire ``error_code`` the HTTP layer reports, the
HTTP status it maps to, and a ``detail`` dict merged into the response
body.
"""

from __future__ import annotations

from typing import Any

ERR_NOT_A_USER = "ERR_NOT_A_USER"
ERR_DOES_NOT_EXIST = "ERR_DOES_NOT_EXIST"
ERR_EXISTS = "ERR_EXISTS"
ERR_NOT_WRITEABLE = "ERR_NOT_WRITEABLE"
ERR_NOT_READABLE = "ERR_NOT_READABLE"
ERR_NOT_AUTHORIZED = "ERR_NOT_AUTHORIZED"
ERR_BAD_OR_MISSING_FIELD = "ERR_BAD_OR_MISSING_FIELD"
ERR_INVALID_COPY = "ERR_INVALID_COPY"
ERR_NOT_A_FOLDER = "ERR_NOT_A_FOLDER"
ERR_NOT_A_FILE = "ERR_NOT_A_FILE"
ERR_TOO_MANY_PATHS = "ERR_TOO_MANY_PATHS"
ERR_TICKET_DOES_NOT_EXIST = "ERR_TICKET_DOES_NOT_EXIST"
ERR_STORAGE = "ERR_STORAGE"


class DonkeyError(Exception):
    """Base exception for all Donkey filesystem errors."""

    error_code: str = ERR_STORAGE
    status_code: int = 500

    def __init__(self, message: str = "", **detail: Any) -> None:
        super().__init__(message or self.error_code)
        self.message = message or self.error_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{"error_code": ..., **detail}``."""
        return {"error_code": self.error_code, **self.detail}


class UserNotFoundError(DonkeyError):
    """Raised when a user account does not exist."""

    error_code = ERR_NOT_A_USER
    status_code = 400


class PathNotFoundError(DonkeyError):
    """Raised when a file or directory path does not exist."""

    error_code = ERR_DOES_NOT_EXIST
    status_code = 404


class PathExistsError(DonkeyError):
    """Raised when a path that must be free is occupied."""

    error_code = ERR_EXISTS
    status_code = 409


class NameGenerationError(PathExistsError):
    """Raised when no free name is found within the attempt limit."""


class NotAuthorizedError(DonkeyError):
    """Raised on ownership, superuser or home-directory violations."""

    error_code = ERR_NOT_AUTHORIZED
    status_code = 403


class NotWriteableError(DonkeyError):
    error_code = ERR_NOT_WRITEABLE
    status_code = 403


class NotReadableError(DonkeyError):
    error_code = ERR_NOT_READABLE
    status_code = 403


class NotAFolderError(DonkeyError):
    error_code = ERR_NOT_A_FOLDER
    status_code = 400


class NotAFileError(DonkeyError):
    error_code = ERR_NOT_A_FILE
    status_code = 400


class BadFieldError(DonkeyError):
    """Raised when a request field is missing or malformed."""

    error_code = ERR_BAD_OR_MISSING_FIELD
    status_code = 400


class InvalidCopyError(DonkeyError):
    """Raised when a copy would place a path inside itself."""

    error_code = ERR_INVALID_COPY
    status_code = 400


class TooManyPathsError(DonkeyError):
    error_code = ERR_TOO_MANY_PATHS
    status_code = 400


class TicketNotFoundError(DonkeyError):
    error_code = ERR_TICKET_DOES_NOT_EXIST
    status_code = 404


class StorageError(DonkeyError):
    """Raised on storage backend failures (DB connection, constraint races, etc.)."""

    error_code = ERR_STORAGE
    status_code = 500
