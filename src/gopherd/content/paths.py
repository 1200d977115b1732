"""Security-first path resolution for selectors."""
import os
from typing import Literal

GOPHERMAP_SUFFIX = ".gph"
INDEX_FILE = "index.gph"
HEADER_FILE = "header.gph"
FOOTER_FILE = "footer.gph"
REVERSE_FILE = ".reverse"

IGNORED_FILES: frozenset[str] = frozenset({
    HEADER_FILE,
    FOOTER_FILE,
    REVERSE_FILE,
})

Override = Literal[".gph", "/index.gph"]


class SecurityError(Exception):
    """Raised when a path operation violates security constraints."""

    def __init__(self, message: str, path: str) -> None:
        """Initialize security error.

        Args:
            message: Error description.
            path: The offending path value.
        """
        super().__init__(message)
        self.path = path


def sanitize_selector(selector: str) -> str:
    """Strip traversal sequences and leading slashes from a selector.

    Every ``..`` becomes ``.``, repeated until none remain, so inputs such
    as ``...`` cannot collapse back into a parent reference.

    Args:
        selector: Client-supplied selector.

    Returns:
        Selector safe to append to the server root.
    """
    while ".." in selector:
        selector = selector.replace("..", ".")
    return selector.lstrip("/")


def join_root(root: str, selector: str) -> str:
    """Join a sanitized selector onto the root with a single separator."""
    return f"{root.rstrip('/')}/{sanitize_selector(selector)}"


def is_within_root(root: str, path: str) -> bool:
    """Check whether the canonical form of ``path`` lives under ``root``.

    Args:
        root: Canonical server root.
        path: Candidate path, which need not exist.

    Returns:
        True if the resolved path is the root or one of its descendants.
    """
    resolved = os.path.realpath(path)
    root = os.path.realpath(root)
    return resolved == root or resolved.startswith(root.rstrip("/") + "/")


def resolve_path(root: str, selector: str) -> str:
    """Resolve a selector to an on-disk path inside the root.

    Args:
        root: Canonical server root.
        selector: Client-supplied selector.

    Returns:
        Path made of the root and the sanitized selector.

    Raises:
        SecurityError: If the path contains a null byte or its canonical
            form (after following symlinks) leaves the root.
    """
    if "\0" in selector:
        raise SecurityError("Path contains null byte", selector)

    path = join_root(root, selector)
    if not is_within_root(root, path):
        raise SecurityError(f"Path resolves outside root: {root}", selector)
    return path


def find_override(path: str) -> Override | None:
    """Look for a gophermap that replaces the content at ``path``.

    ``<path>.gph`` wins over ``<path>/index.gph``.

    Args:
        path: Resolved path of the request.

    Returns:
        The suffix to append to the selector, or None without an override.
    """
    if fs_exists(path + GOPHERMAP_SUFFIX):
        return ".gph"
    if fs_exists(f"{path}/{INDEX_FILE}"):
        return "/index.gph"
    return None


def fs_exists(path: str) -> bool:
    """Check whether anything exists at ``path``, following symlinks.

    Any stat failure, including names too long for the filesystem, counts
    as absent.
    """
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def is_executable(path: str) -> bool:
    """Check whether any execute permission bit is set on ``path``."""
    try:
        return os.stat(path).st_mode & 0o111 != 0
    except OSError:
        return False


def is_excluded(name: str) -> bool:
    """Check if a filename should be excluded from directory listings.

    Args:
        name: Filename to check.

    Returns:
        True for hidden files and gophermap control files.
    """
    return name.startswith(".") or name in IGNORED_FILES
