"""Print completion candidates in the format each shell expects.

* **bash** -- bare names, pre-filtered against the word being typed since
  ``COMPREPLY`` is used as-is.
* **zsh** -- ``name:description`` for ``_describe``, with colons in the
  name escaped.
* **fish** -- ``name<TAB>description``.

Candidates are written one per line to stdout, in input order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from tabtab.env import parse_env
from tabtab.exceptions import MalformedInputError
from tabtab.models import CompletionContext, CompletionItem
from tabtab.output import print_data
from tabtab.shell import ShellKind, require_shell

logger = logging.getLogger(__name__)

Candidate = Union[str, CompletionItem, Mapping[str, Any]]

_UNESCAPED_COLON = re.compile(r"(?<!\\):")


def completion_item(item: Candidate, shell: ShellKind | str | None = None) -> CompletionItem:
    """Normalize a candidate to a :class:`~tabtab.models.CompletionItem`.

    A string is split on its first colon that is not preceded by a
    backslash: ``"build:runs the build"`` becomes name ``build`` and
    description ``runs the build``. For zsh, ``\\:`` escapes in the name are
    kept so ``_describe`` does not split on them; other shells get the
    plain colon back.

    Raises:
        MalformedInputError: If *item* is not a string, item, or mapping
            with a ``name``.
    """
    logger.debug("completion item %r", item)

    if isinstance(item, CompletionItem):
        return item
    if isinstance(item, Mapping):
        try:
            return CompletionItem.model_validate(item)
        except ValueError as exc:
            raise MalformedInputError(f"Invalid completion item {item!r}: {exc}") from exc
    if not isinstance(item, str):
        raise MalformedInputError(
            f"Invalid completion item {item!r}, must be a string or have a name"
        )

    parts = _UNESCAPED_COLON.split(item, maxsplit=1)
    name = parts[0]
    description = parts[1] if len(parts) > 1 else ""

    if require_shell(shell) is not ShellKind.ZSH:
        name = name.replace("\\:", ":")

    return CompletionItem(name=name, description=description)


def format_item(item: CompletionItem, shell: ShellKind | str | None = None) -> str:
    """Render one normalized candidate as a line of shell output."""
    kind = require_shell(shell)
    if kind is ShellKind.ZSH and item.description:
        name = _UNESCAPED_COLON.sub(r"\\:", item.name)
        return f"{name}:{item.description}"
    if kind is ShellKind.FISH and item.description:
        return f"{item.name}\t{item.description}"
    return item.name


def log(
    items: Sequence[Candidate],
    shell: ShellKind | str | None = None,
    context: Optional[CompletionContext] = None,
) -> list[str]:
    """Print completion candidates to stdout for the current shell.

    Args:
        items: Candidates as strings (optionally ``"name:description"``),
            :class:`~tabtab.models.CompletionItem` instances, or mappings.
        shell: Target dialect; defaults to ``$SHELL``.
        context: Completion context used for bash prefix filtering;
            defaults to :func:`~tabtab.env.parse_env`.

    Returns:
        The lines that were printed.

    Raises:
        MalformedInputError: If *items* is not a sequence of candidates.
            Raised before anything is printed.
        ConfigurationError: If the dialect is unknown.
    """
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise MalformedInputError("log: Invalid arguments, must be a list")

    kind = require_shell(shell)
    lines = [format_item(completion_item(item, kind), kind) for item in items]

    if kind is ShellKind.BASH:
        if context is None:
            context = parse_env()
        lines = [line for line in lines if line.startswith(context.last_word)]

    for line in lines:
        print_data(line)
    return lines
