"""Shared test fixtures for tabtab.

Every test runs against a throw-away home directory: ``HOME``,
``XDG_CONFIG_HOME`` and ``XDG_DATA_HOME`` point into ``tmp_path`` and the
``COMP_*`` / ``TABTAB_*`` variables are cleared, so no test ever touches a
real shell config.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tabtab.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``tabtab`` logger after every test.

    The OutputManager caches a reference to sys.stderr at creation time,
    and :func:`~tabtab.output.configure_logging` binds a handler to it.
    When CliRunner redirects those streams the cached references go stale
    once the test finishes.
    """
    yield
    reset_output()
    logger = logging.getLogger("tabtab")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and the XDG directories at tmp_path and default SHELL to bash.

    Returns:
        The fake home directory.
    """
    home_dir = tmp_path / "home"
    home_dir.mkdir()

    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home_dir / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home_dir / ".local" / "share"))
    monkeypatch.setenv("SHELL", "/bin/bash")
    monkeypatch.setattr("tabtab.shell.platform.system", lambda: "Linux")

    for var in [
        "COMP_CWORD",
        "COMP_POINT",
        "COMP_LINE",
        "TABTAB_COMPLETION_DIR",
        "TABTAB_DEBUG",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    return home_dir


@pytest.fixture
def completion_dir(isolated_home: Path) -> Path:
    """Directory the installer writes router and tool scripts to."""
    return isolated_home / ".config" / "tabtab"


@pytest.fixture
def comp_env(monkeypatch: pytest.MonkeyPatch):
    """Return a helper that sets the three completion signals for a line.

    The cursor defaults to the end of the line and the word index to the
    last space-separated word.
    """

    def _set(line: str, point: int | None = None, cword: int | None = None) -> None:
        if point is None:
            point = len(line)
        if cword is None:
            cword = len(line[:point].split(" ")) - 1
        monkeypatch.setenv("COMP_LINE", line)
        monkeypatch.setenv("COMP_POINT", str(point))
        monkeypatch.setenv("COMP_CWORD", str(cword))

    return _set


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
