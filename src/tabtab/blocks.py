"""Idempotent insertion and removal of marked blocks in text files.

A marked block is what tabtab writes into a shell rc file or into the
router script::

    <blank line>
    # tabtab source for <scope>
    # uninstall by removing these lines
    <source directive>

:func:`remove_block` deletes the header and the two lines after it by
position, not by looking for an end marker. A block whose shape was
edited by hand (extra or missing lines after the header) will take the
wrong neighbour lines with it. Blocks must keep this exact shape.

A rewrite after removal trims trailing whitespace and ends the file with
exactly one newline. An install/uninstall round trip therefore restores
only files that ended in a single newline. A file with no final newline
gains one, and trailing blank lines are dropped.

Files are decoded as UTF-8 with ``surrogateescape``, so bytes that are not
valid UTF-8 (a Latin-1 comment in an rc file) are carried through
unchanged instead of failing the read.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

UNINSTALL_HINT = "# uninstall by removing these lines"

BLOCK_SIZE = 3
"""Lines removed per block: header, hint, source directive."""

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def read_text(path: Path) -> str:
    """Read *path* keeping undecodable bytes as surrogate escapes."""
    with open(path, encoding=ENCODING, errors=ENCODING_ERRORS) as f:
        return f.read()


def contains_line(path: Path, needle: str) -> bool:
    """Return True if *needle* occurs anywhere in the file at *path*.

    A missing file does not contain anything. Any other read failure is
    logged as a warning and reported as "not found" so one unreadable file
    does not abort the rest of an install.
    """
    logger.debug('Check %s for "%s"', path, needle)
    try:
        content = read_text(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Got an error while trying to read from %s: %s", path, exc)
        return False
    return needle in content


def append_block(path: Path, header: str, source_line: str) -> None:
    """Append a marked block to *path*, creating the file and its parent if needed.

    Existing content is never truncated or reordered. Write errors
    propagate to the caller.
    """
    logger.debug("Creating directory for %s", path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "a", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
        f.write(f"\n{header}")
        f.write(f"\n{UNINSTALL_HINT}")
        f.write(f"\n{source_line}")
        f.write("\n")

    logger.debug('=> Added tabtab source line in "%s"', path)


def remove_block(path: Path, header: str) -> bool:
    """Remove every block introduced by *header* from *path*.

    The header line and the two lines after it are blanked, then every
    empty line directly followed by another empty line is dropped, and
    trailing whitespace is trimmed. A non-empty result keeps a single
    trailing newline.

    Nothing is written when the file does not exist or does not contain
    *header*, so the file stays byte-identical in those cases.

    Returns:
        True if the file was rewritten.
    """
    logger.debug("Removing lines from %s, looking for %s", path, header)
    if not path.exists():
        logger.debug("File %s does not exist", path)
        return False

    content = read_text(path)
    lines = content.replace("\r\n", "\n").split("\n")
    if header not in lines:
        logger.debug("File %s does not include the line: %s", path, header)
        return False

    marked: set[int] = set()
    for index, line in enumerate(lines):
        if line == header:
            marked.update(range(index, index + BLOCK_SIZE))

    blanked = ["" if index in marked else line for index, line in enumerate(lines)]

    kept = [
        line
        for index, line in enumerate(blanked)
        if not (line == "" and index + 1 < len(blanked) and blanked[index + 1] == "")
    ]

    buffer = "\n".join(kept).rstrip()
    if buffer:
        buffer += "\n"

    with open(path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
        f.write(buffer)

    logger.debug("=> Removed tabtab source lines from %s", path)
    return True
