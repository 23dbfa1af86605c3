"""Path utilities, random names, and access-level helpers."""

from __future__ import annotations

import posixpath
import secrets
import string

# =============================================================================
# Path Utilities
# =============================================================================

MAX_PATH_LENGTH = 2700
MAX_NAME_LENGTH = 255


def normalize_path(path: str) -> str:
    """Normalize a store path.

    - Ensures leading /
    - Resolves .. and . references
    - Removes double slashes
    - Removes trailing slash (except for root)

    Examples:
        normalize_path("iplant/home") -> "/iplant/home"
        normalize_path("/iplant//home/") -> "/iplant/home"
        normalize_path("/iplant/home/../trash") -> "/iplant/trash"
        normalize_path("") -> "/"
    """
    if not path:
        return "/"

    path = path.strip()

    if not path.startswith("/"):
        path = "/" + path

    path = posixpath.normpath(path)

    # POSIX keeps a leading "//" as-is
    if path.startswith("//"):
        path = "/" + path.lstrip("/")

    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return path


def normalize_paths(paths: list[str]) -> list[str]:
    """Normalize *paths*, dropping duplicates and keeping first-seen order."""
    return list(dict.fromkeys(normalize_path(p) for p in paths))


def split_path(path: str) -> tuple[str, str]:
    """Split path into (parent_dir, name).

    Examples:
        split_path("/foo/bar.txt") -> ("/foo", "bar.txt")
        split_path("/foo.txt") -> ("/", "foo.txt")
        split_path("/") -> ("/", "")
    """
    path = normalize_path(path)
    if path == "/":
        return "/", ""
    return posixpath.split(path)


def dirname(path: str) -> str:
    return split_path(path)[0]


def basename(path: str) -> str:
    return split_path(path)[1]


def path_join(base: str, *parts: str) -> str:
    """Join path segments and normalize the result.

    ``path_join("/", "alice")`` is ``"/alice"``; leading slashes on
    later segments do not reset the path.
    """
    joined = "/".join([base, *(p.strip("/") for p in parts if p)])
    return normalize_path(joined)


def is_under(path: str, root: str) -> bool:
    """True if *path* equals *root* or lies anywhere beneath it."""
    path = normalize_path(path)
    root = normalize_path(root)
    if root == "/":
        return True
    return path == root or path.startswith(root + "/")


def is_strictly_under(path: str, root: str) -> bool:
    return is_under(path, root) and normalize_path(path) != normalize_path(root)


def ancestors(path: str, stop_at: set[str] | None = None) -> list[str]:
    """Return the ancestors of *path*, nearest first.

    The walk ends before reaching any directory in *stop_at* and never
    includes the root ``/``.

    Examples:
        ancestors("/a/b/c.txt") -> ["/a/b", "/a"]
        ancestors("/a/b/c.txt", {"/a"}) -> ["/a/b"]
    """
    stops = {normalize_path(s) for s in (stop_at or set())}
    result: list[str] = []
    current = dirname(path)
    while current != "/" and current not in stops:
        result.append(current)
        current = dirname(current)
    return result


def validate_path(path: str) -> tuple[bool, str]:
    """Validate a path for security and compatibility issues.

    Returns:
        (is_valid, error_message) - error_message is empty if valid
    """
    if not path or not path.strip():
        return False, "Path is empty"

    if "\x00" in path:
        return False, "Path contains null bytes"

    for ch in path:
        code = ord(ch)
        if 0x01 <= code <= 0x1F:
            return False, f"Path contains control character: 0x{code:02x}"

    if len(path) > MAX_PATH_LENGTH:
        return False, f"Path too long (max {MAX_PATH_LENGTH} characters)"

    name = basename(path)
    if name and len(name) > MAX_NAME_LENGTH:
        return False, f"Name too long (max {MAX_NAME_LENGTH} characters)"

    return True, ""


# =============================================================================
# Random names
# =============================================================================

ALPHANUMERICS = string.digits + string.ascii_uppercase + string.ascii_lowercase


def random_suffix(length: int = 7) -> str:
    """Random alphanumeric string of *length* characters."""
    return "".join(secrets.choice(ALPHANUMERICS) for _ in range(length))


# =============================================================================
# Access levels
# =============================================================================

ACCESS_LEVELS = ("read", "write", "own")
"""Access levels in ascending order of privilege."""


def level_rank(level: str | None) -> int:
    """Rank of an access level; ``None`` (no access) ranks lowest."""
    if level is None:
        return 0
    return ACCESS_LEVELS.index(level) + 1


def level_at_least(level: str | None, required: str) -> bool:
    return level_rank(level) >= level_rank(required)
