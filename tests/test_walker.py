"""Directory listing and sorting tests."""

import os
from pathlib import Path

import pytest

from gopherd.content.schemas import DirectoryEntry
from gopherd.content.types import ItemType
from gopherd.content.walker import list_directory, natural_key, sort_entries

RELEASES = [
    "phetch-v0.1.11-linux-armv7.tar.gz",
    "phetch-v0.1.7-linux-x86_64.tar.gz",
    "phetch-v0.1.10-macos.zip",
    "phetch-v0.1.7-linux-armv7.tar.gz",
    "phetch-v0.1.11-macos.zip",
    "phetch-v0.1.7-macos.zip",
]


@pytest.fixture
def sort_dir(tmp_path: Path) -> Path:
    """Directory of release archives plus one subdirectory."""
    directory = tmp_path / "sort"
    directory.mkdir()
    (directory / "zzz").mkdir()
    for name in RELEASES:
        (directory / name).write_bytes(b"\x1f\x8b\x08\x00")
    return directory


def names(entries: list[DirectoryEntry]) -> list[str]:
    return [entry.name for entry in entries]


def entry(name: str, is_directory: bool = False) -> DirectoryEntry:
    return DirectoryEntry(
        name=name,
        path=f"/{name}",
        is_directory=is_directory,
        item_type=ItemType.MENU if is_directory else ItemType.TEXT,
    )


def test_sort_directory(sort_dir: Path) -> None:
    """Directories first, then versions in numeric order."""
    listed = names(list_directory(str(sort_dir), "/sort"))
    assert listed[0] == "zzz"
    assert listed[1] == "phetch-v0.1.7-linux-armv7.tar.gz"
    assert listed[-1] == "phetch-v0.1.11-macos.zip"


def test_rsort_directory(sort_dir: Path) -> None:
    """A .reverse file flips the order but keeps directories first."""
    (sort_dir / ".reverse").touch()
    listed = names(list_directory(str(sort_dir), "/sort"))
    assert listed[0] == "zzz"
    assert listed[1] == "phetch-v0.1.11-macos.zip"
    assert listed[-1] == "phetch-v0.1.7-linux-armv7.tar.gz"


def test_reverse_is_exact_inverse_within_groups(sort_dir: Path) -> None:
    """Reversed file order is the forward file order backwards."""
    (sort_dir / "aaa").mkdir()
    forward = names(list_directory(str(sort_dir), ""))
    (sort_dir / ".reverse").touch()
    backward = names(list_directory(str(sort_dir), ""))

    assert forward[:2] == ["aaa", "zzz"]
    assert backward[:2] == ["zzz", "aaa"]
    assert backward[2:] == list(reversed(forward[2:]))


def test_natural_order() -> None:
    """Digit runs compare by value."""
    entries = [entry("file10"), entry("file2"), entry("file1"), entry("file")]
    assert names(sort_entries(entries)) == ["file", "file1", "file2", "file10"]


def test_directories_before_files_regardless_of_name() -> None:
    """The directory/file partition holds in both directions."""
    entries = [entry("a"), entry("z", is_directory=True), entry("b")]
    assert names(sort_entries(entries)) == ["z", "a", "b"]
    assert names(sort_entries(entries, reverse=True)) == ["z", "b", "a"]


def test_natural_key_alignment() -> None:
    """Text and number parts alternate so keys always compare."""
    assert natural_key("v0.1.7") < natural_key("v0.1.10")
    assert natural_key("a1") < natural_key("ab")
    assert natural_key("007") != natural_key("7")


def test_listing_skips_control_and_hidden_files(tmp_path: Path) -> None:
    """Hidden files and header/footer/.reverse never appear."""
    for name in ("header.gph", "footer.gph", ".reverse", ".git", "visible.txt"):
        (tmp_path / name).write_text("x\n")
    assert names(list_directory(str(tmp_path), "")) == ["visible.txt"]


def test_listing_builds_selectors_and_types(tmp_path: Path) -> None:
    """Entries carry their selector and classified item type."""
    (tmp_path / "notes.txt").write_text("notes\n")
    (tmp_path / "blob").write_bytes(b"\x00\x00")
    (tmp_path / "dir").mkdir()

    listed = list_directory(str(tmp_path), "/stuff/")
    assert [(e.name, e.path, e.item_type) for e in listed] == [
        ("dir", "/stuff/dir", ItemType.MENU),
        ("blob", "/stuff/blob", ItemType.BINARY),
        ("notes.txt", "/stuff/notes.txt", ItemType.TEXT),
    ]


def test_menu_line_format() -> None:
    """Entries render as four tab-separated fields and CRLF."""
    line = entry("docs", is_directory=True).to_menu_line("example.org", 70)
    assert line == "1docs\t/docs\texample.org\t70\r\n"


def test_listing_replaces_undecodable_name_bytes(tmp_path: Path) -> None:
    """Names that are not valid UTF-8 are listed with U+FFFD, not dropped."""
    (tmp_path / "ok.txt").write_text("ok\n")
    with open(os.fsencode(tmp_path) + b"/caf\xe9.txt", "wb") as fh:
        fh.write(b"latin-1 name\n")

    listed = list_directory(str(tmp_path), "/odd")
    assert [(e.name, e.path, e.item_type) for e in listed] == [
        ("caf\ufffd.txt", "/odd/caf\ufffd.txt", ItemType.TEXT),
        ("ok.txt", "/odd/ok.txt", ItemType.TEXT),
    ]
    assert listed[0].to_menu_line("example.org", 70).encode("utf-8") == (
        "0caf\ufffd.txt\t/odd/caf\ufffd.txt\texample.org\t70\r\n".encode("utf-8")
    )
