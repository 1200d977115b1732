"""Directory listing and natural-order sorting."""

import os
import re
from collections.abc import Iterable

import structlog

from gopherd.content.classify import classify
from gopherd.content.paths import REVERSE_FILE, fs_exists, is_excluded
from gopherd.content.schemas import DirectoryEntry

logger = structlog.get_logger()

DIGITS_PATTERN = re.compile(r"(\d+)")

NaturalKey = tuple[str | tuple[int, str], ...]


def natural_key(name: str) -> NaturalKey:
    """Build a sort key that compares digit runs by numeric value.

    ``re.split`` with a capturing group alternates text and digit runs,
    so text parts always line up with text parts in the key.

    Args:
        name: Filename to build a key for.

    Returns:
        Tuple usable as a ``sorted`` key.
    """
    parts = DIGITS_PATTERN.split(name)
    return tuple(
        (int(part), part) if i % 2 else part
        for i, part in enumerate(parts)
    )


def sort_entries(
    entries: Iterable[DirectoryEntry],
    reverse: bool = False,
) -> list[DirectoryEntry]:
    """Order entries for a listing.

    Directories always come before files. Inside each group names are
    compared in natural order, inverted when ``reverse`` is set.

    Args:
        entries: Entries to sort.
        reverse: Invert the order inside each group.

    Returns:
        New sorted list.
    """
    directories: list[DirectoryEntry] = []
    files: list[DirectoryEntry] = []
    for entry in entries:
        (directories if entry.is_directory else files).append(entry)

    def key(entry: DirectoryEntry) -> NaturalKey:
        return natural_key(entry.name)

    directories.sort(key=key, reverse=reverse)
    files.sort(key=key, reverse=reverse)
    return directories + files


def list_directory(path: str, relative_path: str) -> list[DirectoryEntry]:
    """Read, filter, classify and sort the entries of a directory.

    Hidden files and gophermap control files are skipped. A ``.reverse``
    file in the directory reverses the order. Name bytes that are not
    valid UTF-8 are shown as U+FFFD in the entry name and selector.

    Args:
        path: Absolute directory path.
        relative_path: Selector of the directory, used to build entry
            selectors.

    Returns:
        Sorted entries ready to be rendered as menu lines.

    Raises:
        OSError: If the directory cannot be read.
    """
    reverse = fs_exists(os.path.join(path, REVERSE_FILE))
    prefix = relative_path.rstrip("/")

    entries: list[DirectoryEntry] = []
    with os.scandir(path) as it:
        for dir_entry in it:
            if is_excluded(dir_entry.name):
                continue
            try:
                is_directory = dir_entry.is_dir()
            except OSError:
                is_directory = False
            name = os.fsencode(dir_entry.name).decode("utf-8", "replace")
            entries.append(
                DirectoryEntry(
                    name=name,
                    path=f"{prefix}/{name}",
                    is_directory=is_directory,
                    item_type=classify(dir_entry.path),
                )
            )

    logger.debug("directory_listed", path=path, entries=len(entries), reverse=reverse)
    return sort_entries(entries, reverse=reverse)
