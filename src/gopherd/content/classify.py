"""Text/binary sniffing and menu item type selection."""
import os
import stat

from gopherd.content.types import ItemType

MAX_PEEK_SIZE = 1024

BYTE_ORDER_MARKS: tuple[bytes, ...] = (
    b"\xef\xbb\xbf",
    b"\x00\x00\xfe\xff",
    b"\xff\xfe\x00\x00",
    b"\xfe\xff",
    b"\xff\xfe",
)

BINARY_MAGIC: tuple[bytes, ...] = (b"%PDF",)


def is_binary(buffer: bytes) -> bool:
    """Guess whether a buffer holds binary data.

    A byte-order mark marks text in a Unicode encoding. Otherwise known
    binary signatures or a NUL byte within the first ``MAX_PEEK_SIZE``
    bytes mean binary.

    Args:
        buffer: Leading bytes of a file.

    Returns:
        True if the content looks binary.
    """
    if buffer.startswith(BYTE_ORDER_MARKS):
        return False
    if buffer.startswith(BINARY_MAGIC):
        return True
    return b"\x00" in buffer[:MAX_PEEK_SIZE]


def peek(path: str, size: int = MAX_PEEK_SIZE) -> bytes:
    """Read up to ``size`` bytes from the start of a file."""
    with open(path, "rb") as fh:
        return fh.read(size)


def classify(path: str) -> ItemType:
    """Determine the Gopher item type of a path on disk.

    Never raises: anything that cannot be inspected is an error item.

    Args:
        path: Path to inspect, following symlinks.

    Returns:
        MENU for directories, TEXT or BINARY for regular files, ERROR
        for everything else.
    """
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return ItemType.ERROR

    if stat.S_ISDIR(mode):
        return ItemType.MENU

    if not stat.S_ISREG(mode):
        return ItemType.ERROR

    try:
        buffer = peek(path)
    except OSError:
        return ItemType.ERROR

    return ItemType.BINARY if is_binary(buffer) else ItemType.TEXT
