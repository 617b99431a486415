"""Shell dialects: which shell is running, and where its config lives.

:class:`ShellKind` is the closed set of supported dialects. Every
dialect-specific capability (rc file, script extension, ``source`` line)
is a member of the enum so callers never compare shell names by hand.

Resolution reads ``$SHELL`` and keeps only the basename, so
``/usr/local/bin/zsh`` resolves to :attr:`ShellKind.ZSH`. Anything outside
bash/zsh/fish resolves to ``None``; :func:`require_shell` turns that into a
:class:`~tabtab.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import enum
import os
import platform
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from tabtab.config import untildify
from tabtab.exceptions import ConfigurationError

BASH_LOCATION = "~/.bashrc"
BASH_LOCATION_DARWIN = "~/.bash_profile"
ZSH_LOCATION = "~/.zshrc"
FISH_LOCATION = "~/.config/fish/config.fish"


class ShellKind(str, enum.Enum):
    """Supported completion dialects."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional[ShellKind]:
        """Map a shell name or path (``/bin/bash``, ``zsh``) to a dialect, or ``None``."""
        if not name:
            return None
        basename = name.replace("\\", "/").rsplit("/", 1)[-1].strip().lower()
        try:
            return cls(basename)
        except ValueError:
            return None

    @property
    def extension(self) -> str:
        """File extension used for generated scripts (``bash``, ``zsh``, ``fish``)."""
        return self.value

    @property
    def rc_path(self) -> str:
        """Canonical rc file, still carrying its ``~`` prefix."""
        if self is ShellKind.BASH:
            return BASH_LOCATION_DARWIN if platform.system() == "Darwin" else BASH_LOCATION
        if self is ShellKind.ZSH:
            return ZSH_LOCATION
        return FISH_LOCATION

    @property
    def rc_file(self) -> Path:
        """:attr:`rc_path` with ``~`` expanded."""
        return untildify(self.rc_path)

    def source_line(self, script: str | Path) -> str:
        """Return the guarded ``source`` directive for *script* in this dialect."""
        if self is ShellKind.FISH:
            return f'[ -f "{script}" ]; and . "{script}"; or true'
        if self is ShellKind.ZSH:
            return f'[[ -f "{script}" ]] && . "{script}" || true'
        return f'[ -f "{script}" ] && . "{script}" || true'


def resolve_shell(env: Optional[Mapping[str, str]] = None) -> Optional[ShellKind]:
    """Resolve the current dialect from ``$SHELL``.

    Args:
        env: Environment mapping to read; defaults to ``os.environ``.

    Returns:
        The matching :class:`ShellKind`, or ``None`` for an unset or
        unsupported shell.
    """
    if env is None:
        env = os.environ
    return ShellKind.from_name(env.get("SHELL", ""))


def require_shell(shell: ShellKind | str | None = None) -> ShellKind:
    """Return *shell* as a :class:`ShellKind`, resolving ``$SHELL`` when omitted.

    Raises:
        ConfigurationError: If the dialect is unknown or cannot be resolved.
    """
    if isinstance(shell, ShellKind):
        return shell
    if shell:
        kind = ShellKind.from_name(shell)
        if kind is None:
            raise ConfigurationError(
                f"Unsupported shell: {shell}. Supported: bash, zsh, fish"
            )
        return kind

    kind = resolve_shell()
    if kind is None:
        current = os.environ.get("SHELL") or "<unset>"
        raise ConfigurationError(
            f"Cannot resolve a completion dialect from SHELL={current}. "
            "Supported: bash, zsh, fish"
        )
    return kind


def location(shell: ShellKind | str) -> str:
    """Return the rc file path (with ``~``) for *shell*.

    Raises:
        ConfigurationError: If *shell* is not a supported dialect.
    """
    return require_shell(shell).rc_path


def default_location() -> str:
    """Return the rc file path (with ``~``) for the shell named by ``$SHELL``."""
    return require_shell().rc_path
