"""Configuration: directory layout, home resolution, and settings precedence.

* **Directory layout** -- generated completion scripts live in
  ``$TABTAB_COMPLETION_DIR``, falling back to ``$XDG_CONFIG_HOME/tabtab`` and
  then ``~/.config/tabtab``. Crash logs go under ``$XDG_DATA_HOME/tabtab``.
* **Home resolution** -- :func:`home` and :func:`untildify` expand the
  ``~`` prefix used by the canonical rc file locations.
* **Settings** -- :func:`resolve_settings` merges CLI flags, environment
  variables, and defaults into a :class:`Settings` instance.

Script writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so a crash never leaves a half-written completion
script for the shell to source.
"""

from __future__ import annotations

import os
import platform
import re
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

_APP_NAME = "tabtab"

ROUTER_SCRIPT_NAME = "__tabtab"
"""Stem of the shared per-shell router script."""

_TRUTHY = {"1", "true", "yes", "on"}


# --- Home resolution ---


def home() -> Optional[Path]:
    """Return the user's home directory, or ``None`` if it cannot be determined."""
    if platform.system() == "Windows":
        value = os.environ.get("USERPROFILE") or os.environ.get("FOLDERID_Profile")
    else:
        value = os.environ.get("HOME")
    return Path(value) if value else None


def untildify(path: str | Path) -> Path:
    """Expand a leading ``~`` in *path* to the home directory.

    Only a bare ``~`` or ``~`` followed by a path separator is expanded;
    ``~user`` forms are left alone. When no home directory is known the
    path is returned unchanged.
    """
    text = str(path)
    home_dir = home()
    if home_dir is None:
        return Path(text)
    return Path(re.sub(r"^~(?=$|/|\\)", lambda _: str(home_dir), text))


# --- Directory layout ---


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = home() or Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_completion_dir() -> Path:
    """Return the directory holding the router script and per-tool scripts.

    ``$TABTAB_COMPLETION_DIR`` wins, then ``$XDG_CONFIG_HOME/tabtab``
    (default ``~/.config/tabtab``). The directory is not created here;
    writers create it on demand.
    """
    override = os.environ.get("TABTAB_COMPLETION_DIR", "")
    if override:
        return untildify(override)
    return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    ``$XDG_DATA_HOME/tabtab/`` (default ``~/.local/share/tabtab/``).
    """
    path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up and the original error is re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Settings ---


class Settings(BaseModel):
    """Effective runtime settings after precedence resolution."""

    debug: bool = Field(default=False, description="Emit debug log records on stderr")


def resolve_settings(
    cli_completion_dir: Optional[str] = None,
    cli_verbose: bool = False,
) -> Settings:
    """Resolve settings with CLI flag > environment > default precedence.

    A CLI ``--completion-dir`` is exported as ``TABTAB_COMPLETION_DIR`` so
    that every module resolving :func:`get_completion_dir` during this
    process sees the same directory.

    Returns:
        The effective :class:`Settings`.
    """
    if cli_completion_dir:
        os.environ["TABTAB_COMPLETION_DIR"] = cli_completion_dir

    debug = cli_verbose or os.environ.get("TABTAB_DEBUG", "").lower() in _TRUTHY

    return Settings(debug=debug)
