"""Canonical Pydantic models shared across all tabtab modules.

* :class:`InstallSpec` -- what :func:`~tabtab.installer.install` needs to
  wire one tool into the user's shell.
* :class:`CompletionContext` -- the decoded completion-state signals of a
  single completion invocation.
* :class:`CompletionItem` -- one candidate word with an optional
  description, as consumed by :func:`~tabtab.emitter.log`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InstallSpec(BaseModel):
    """Immutable description of one tool's completion wiring.

    Example::

        InstallSpec(name="hello", completer="hello", cmd="__complete")
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Program name completion is registered for")
    completer: str = Field(
        min_length=1, description="Program the shell invokes to compute candidates"
    )
    cmd: str = Field(
        default="completions",
        min_length=1,
        description="Sub-command of the completer that answers completion requests",
    )
    location: Optional[str] = Field(
        default=None,
        description="Shell config file to hook; defaults to the dialect's rc file",
    )


class CompletionContext(BaseModel):
    """Structured view of the ``COMP_CWORD`` / ``COMP_POINT`` / ``COMP_LINE`` signals.

    Built by :func:`~tabtab.env.parse_env` on every invocation. Check
    :attr:`is_completion_invocation` before emitting candidates: it is
    ``False`` when the CLI was launched by a user rather than by the shell.
    """

    model_config = ConfigDict(frozen=True)

    cursor_word_index: int = 0
    cursor_point: int = 0
    line: str = ""
    line_prefix: str = ""
    last_word: str = ""
    last_partial_word: str = ""
    previous_word: str = ""
    is_completion_invocation: bool = False

    @property
    def completing_new_word(self) -> bool:
        """True when the cursor sits after a space, i.e. a fresh word is being started."""
        return self.line_prefix.endswith(" ")

    @property
    def current_word(self) -> str:
        """The (possibly empty) word under the cursor."""
        return "" if self.completing_new_word else self.last_partial_word


class CompletionItem(BaseModel):
    """A completion candidate with an optional human-readable description."""

    name: str
    description: str = ""
