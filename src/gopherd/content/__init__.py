"""Content module: requests, paths, classification and listings."""

from gopherd.content.classify import classify, is_binary
from gopherd.content.loader import (
    FileSystemError,
    ScriptError,
    load_gophermap,
    run_script,
)
from gopherd.content.paths import (
    SecurityError,
    find_override,
    is_excluded,
    resolve_path,
)
from gopherd.content.request import Request
from gopherd.content.schemas import DirectoryEntry
from gopherd.content.types import ItemType
from gopherd.content.walker import list_directory, sort_entries

__all__ = [
    "DirectoryEntry",
    "FileSystemError",
    "ItemType",
    "Request",
    "ScriptError",
    "SecurityError",
    "classify",
    "find_override",
    "is_binary",
    "is_excluded",
    "list_directory",
    "load_gophermap",
    "resolve_path",
    "run_script",
    "sort_entries",
]
