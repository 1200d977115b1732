"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from gopherd.config import Settings

HOST = "localhost"
PORT = 7070


@pytest.fixture
def settings(gopher_root: Path) -> Settings:
    """Create test settings."""
    return Settings(
        host=HOST,
        port=PORT,
        root=str(gopher_root),
        bind_raw="127.0.0.1:0",
        max_workers=2,
        debug=True,
    )


def write_script(path: Path, body: str) -> Path:
    """Write an executable shell script."""
    path.write_text("#!/bin/sh\n" + body)
    os.chmod(path, 0o755)
    return path


@pytest.fixture
def gopher_root(tmp_path: Path) -> Path:
    """Build a small Gopher site under a temporary directory.

    The root lives one level below ``tmp_path`` so tests can place
    files outside of it.
    """
    root = tmp_path / "root"
    root.mkdir()

    (root / "about.txt").write_text("All about this hole.\n")
    (root / "data.bin").write_bytes(b"\x7fELF\x00\x01\x02\x03")

    docs = root / "docs"
    docs.mkdir()
    (docs / "sub").mkdir()
    for name in ("file1.txt", "file10.txt", "file2.txt"):
        (docs / name).write_text(f"{name}\n")
    (docs / ".hidden").write_text("secret\n")
    (docs / "header.gph").write_text("Docs header\n")
    (docs / "footer.gph").write_text("[1|Back|/|server|port]\n")

    (root / "phlog.gph").write_text(
        "# not shown\n"
        "Welcome to the phlog\n"
        "0First post\t/phlog/first.txt\n"
    )

    menu = root / "menu"
    menu.mkdir()
    (menu / "index.gph").write_text("[1|Docs|/docs|server|port]\n")

    write_script(
        root / "search.gph",
        'echo "You searched: $1"\necho "[1|Home|/|$2|$3]"\n',
    )

    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("do not serve\n")

    return root
