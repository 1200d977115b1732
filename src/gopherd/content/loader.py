"""Gophermap source loading: static files and executable scripts."""
import subprocess
from pathlib import Path

import structlog

from gopherd.content.paths import is_executable

logger = structlog.get_logger()


class FileSystemError(Exception):
    """Raised when file operations fail."""

    def __init__(self, message: str, path: str, code: str | None = None) -> None:
        """Initialize filesystem error.

        Args:
            message: Error description.
            path: Path that caused the error.
            code: Optional error code (e.g., ENOENT).
        """
        super().__init__(message)
        self.path = path
        self.code = code


class ScriptError(Exception):
    """Raised when an executable gophermap cannot produce content."""

    def __init__(self, message: str, path: str, returncode: int | None = None) -> None:
        """Initialize script error.

        Args:
            message: Error description.
            path: Path of the script.
            returncode: Exit status, if the script ran at all.
        """
        super().__init__(message)
        self.path = path
        self.returncode = returncode


def read_text(path: str) -> str:
    """Read a UTF-8 text file.

    Args:
        path: Absolute path to the file.

    Returns:
        The decoded file content.

    Raises:
        FileSystemError: If the file cannot be read or decoded.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileSystemError(f"File not found: {path}", path, "ENOENT") from e
    except PermissionError as e:
        raise FileSystemError(f"Permission denied: {path}", path, "EACCES") from e
    except UnicodeDecodeError as e:
        raise FileSystemError(f"File is not valid UTF-8: {path}", path) from e
    except OSError as e:
        raise FileSystemError(
            f"Failed to read file: {e}",
            path,
            getattr(e, "errno", None),
        ) from e


def run_script(path: str, query: str, host: str, port: int) -> str:
    """Run an executable and capture its output as gophermap text.

    The script receives the query, host and port as positional arguments.
    Standard output is used on success, standard error otherwise.

    Args:
        path: Absolute path to the executable.
        query: Search query from the request.
        host: Advertised hostname.
        port: Advertised port.

    Returns:
        Captured output decoded as UTF-8.

    Raises:
        ScriptError: If the process cannot be started or its output is
            not valid UTF-8.
    """
    try:
        result = subprocess.run(
            [path, query, host, str(port)],
            capture_output=True,
            check=False,
        )
    except OSError as e:
        raise ScriptError(f"Failed to run {path}: {e}", path) from e

    output = result.stdout if result.returncode == 0 else result.stderr
    if result.returncode != 0:
        logger.debug("script_failed", path=path, returncode=result.returncode)

    try:
        return output.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ScriptError(
            f"Output of {path} is not valid UTF-8",
            path,
            result.returncode,
        ) from e


def load_gophermap(path: str, query: str, host: str, port: int) -> str:
    """Load gophermap source text, running the file if it is executable.

    Args:
        path: Absolute path to the gophermap.
        query: Search query passed to executable gophermaps.
        host: Advertised hostname.
        port: Advertised port.

    Returns:
        Raw gophermap text, not yet transcoded.

    Raises:
        FileSystemError: If a static gophermap cannot be read.
        ScriptError: If an executable gophermap fails to run.
    """
    if is_executable(path):
        return run_script(path, query, host, port)
    return read_text(path)
