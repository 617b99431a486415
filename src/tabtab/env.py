"""Decode the completion-state environment of a completion invocation.

The generated shell scripts launch the completer with three variables:

* ``COMP_CWORD`` -- 0-based index of the word under the cursor
* ``COMP_POINT`` -- character offset of the cursor in the line
* ``COMP_LINE`` -- the full command line

:func:`parse_env` turns them into a :class:`~tabtab.models.CompletionContext`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Optional

from tabtab.models import CompletionContext

logger = logging.getLogger(__name__)

SIGNALS = ("COMP_CWORD", "COMP_POINT", "COMP_LINE")


def _to_int(value: Optional[str]) -> int:
    """Parse *value* as an int, treating anything unparsable as 0."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def parse_env(env: Optional[Mapping[str, str]] = None) -> CompletionContext:
    """Build a completion context from the ``COMP_*`` variables.

    Args:
        env: Mapping holding the signals; defaults to ``os.environ``.

    Returns:
        The decoded context. ``is_completion_invocation`` is only true when
        all three signals are present and non-empty.

    Example::

        >>> ctx = parse_env({"COMP_CWORD": "2", "COMP_POINT": "7", "COMP_LINE": "git ch foo"})
        >>> ctx.line_prefix, ctx.last_word, ctx.last_partial_word, ctx.previous_word
        ('git ch ', 'foo', 'ch', 'git')
    """
    if env is None:
        env = os.environ
    raw = {key: env.get(key) for key in SIGNALS}

    logger.debug(
        "Parsing env. CWORD: %s, COMP_POINT: %s, COMP_LINE: %s",
        raw["COMP_CWORD"],
        raw["COMP_POINT"],
        raw["COMP_LINE"],
    )

    cword = _to_int(raw["COMP_CWORD"])
    point = _to_int(raw["COMP_POINT"])
    line = raw["COMP_LINE"] or ""

    partial = line[: max(point, 0)]
    words = line.split(" ")
    prefix_words = partial.split()

    return CompletionContext(
        cursor_word_index=cword,
        cursor_point=point,
        line=line,
        line_prefix=partial,
        last_word=words[-1],
        last_partial_word=prefix_words[-1] if prefix_words else "",
        previous_word=prefix_words[-2] if len(prefix_words) > 1 else "",
        is_completion_invocation=all(raw.values()),
    )
