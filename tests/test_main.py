"""Command-line entry point tests."""

from pathlib import Path

import pytest

from gopherd import __main__ as cli
from test_dispatcher import DOCS_LISTING


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Leave the global structlog configuration untouched."""
    monkeypatch.setattr(cli, "configure_logging", lambda **_: None)


def test_render_prints_response(gopher_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """--render prints the response and exits cleanly."""
    code = cli.main([str(gopher_root), "--render", "/docs", "-p", "7070", "-H", "localhost"])
    assert code == 0
    assert capsys.readouterr().out == DOCS_LISTING


def test_render_uses_advertised_host(gopher_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Host and port flags end up in generated links."""
    cli.main([str(gopher_root), "-r", "/menu", "-H", "gopher.example.org", "-p", "70"])
    assert capsys.readouterr().out == "1Docs\t/docs\tgopher.example.org\t70\r\n"


def test_missing_root_fails(tmp_path: Path) -> None:
    """A root that does not exist is a fatal error."""
    assert cli.main([str(tmp_path / "missing"), "-r", "/"]) == 1


def test_invalid_port_fails(gopher_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Configuration errors are reported before anything starts."""
    assert cli.main([str(gopher_root), "-p", "99999", "-r", "/"]) == 1
    assert "invalid configuration" in capsys.readouterr().err


def test_flags_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset flags fall back to environment values."""
    monkeypatch.setenv("GOPHERD_HOST", "env.example.org")
    monkeypatch.setenv("GOPHERD_PORT", "7071")
    args = cli.build_parser().parse_args(["-p", "7072", "--json-logs"])
    settings = cli.load_settings(args)
    assert settings.host == "env.example.org"
    assert settings.port == 7072
    assert settings.log_format == "json"
    assert settings.debug is False
