"""Install and uninstall completion for a tool.

Installation uses two levels of indirection so the user's shell config
only ever carries one tabtab line, however many tools are installed::

    ~/.bashrc                         (one shared block)
      -> <completion_dir>/__tabtab.bash   (one block per tool)
           -> <completion_dir>/<name>.bash  (rendered completion script)

:func:`install` writes all three levels. Re-running it is safe: the rc and
router blocks are only appended when their ``source`` target is not
already referenced, and the per-tool script is simply re-rendered.

:func:`uninstall` removes the per-tool script and its router block, and
drops the rc block once the router script is empty.

No locking is done. Installs of different tools against the same shell
should be run one after another.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from tabtab.blocks import append_block, contains_line, read_text, remove_block
from tabtab.config import ROUTER_SCRIPT_NAME, atomic_write, get_completion_dir, untildify
from tabtab.exceptions import InvalidUsageError
from tabtab.models import InstallSpec
from tabtab.scripts import render_script
from tabtab.shell import ShellKind, require_shell

logger = logging.getLogger(__name__)


def shared_header() -> str:
    """Header of the single block tabtab adds to a shell config file."""
    return "# tabtab source for modules"


def tool_header(name: str) -> str:
    """Header of the router-script block belonging to *name*."""
    return f"# tabtab source for {name} module"


def router_script_path(shell: ShellKind) -> Path:
    """Path of the shared router script for *shell*."""
    return get_completion_dir() / f"{ROUTER_SCRIPT_NAME}.{shell.extension}"


def tool_script_path(name: str, shell: ShellKind) -> Path:
    """Path of the rendered completion script for *name*."""
    return get_completion_dir() / f"{name}.{shell.extension}"


def _write_to_shell_config(location: Path, shell: ShellKind) -> None:
    """Add the router ``source`` block to the shell config, at most once."""
    router = router_script_path(shell)
    if contains_line(location, str(router)):
        logger.debug("=> Tabtab line already exists in %s", location)
        return
    append_block(location, shared_header(), shell.source_line(router))


def _write_to_router_script(name: str, shell: ShellKind) -> None:
    """Add the tool's ``source`` block to the router script, at most once."""
    router = router_script_path(shell)
    script = tool_script_path(name, shell)
    if contains_line(router, str(script)):
        logger.debug("=> Tabtab line already exists in %s", router)
        return
    append_block(router, tool_header(name), shell.source_line(script))


def _write_completion_script(spec: InstallSpec, shell: ShellKind) -> None:
    """Render and (over)write the tool's completion script."""
    path = tool_script_path(spec.name, shell)
    logger.debug("Writing completion script to %s", path)
    atomic_write(path, render_script(shell, spec.name, spec.completer, spec.cmd))
    logger.debug("=> Wrote completion script to %s", path)


def install(
    spec: Optional[InstallSpec] = None,
    *,
    shell: ShellKind | str | None = None,
    **options: str,
) -> InstallSpec:
    """Install and enable completion for one tool.

    Accepts either a ready :class:`~tabtab.models.InstallSpec` or its fields
    as keyword arguments::

        install(name="hello", completer="hello", cmd="__complete")

    The shell config block, the router block, and the rendered script are
    written concurrently. The first failure among them is re-raised once
    all three have finished.

    Args:
        spec: What to install.
        shell: Target dialect; defaults to ``$SHELL``.
        **options: ``InstallSpec`` fields when *spec* is omitted.

    Returns:
        The effective spec, with ``location`` filled in.

    Raises:
        ConfigurationError: If the dialect is unknown.
        InvalidUsageError: If neither *spec* nor a ``name`` is given, or if
            *spec* is combined with keyword options.
        OSError: If any of the writes fails.
    """
    if spec is not None and options:
        raise InvalidUsageError(
            f"Pass either an InstallSpec or keyword options, not both (got {sorted(options)})"
        )
    if spec is None:
        if not options.get("name"):
            raise InvalidUsageError("Unable to install if name is missing")
        options.setdefault("completer", options["name"])
        try:
            spec = InstallSpec(**options)
        except ValueError as exc:
            raise InvalidUsageError(f"Invalid install options: {exc}") from exc

    kind = require_shell(shell)
    if spec.location is None:
        spec = spec.model_copy(update={"location": kind.rc_path})
    logger.debug("Install with options %s", spec.model_dump())

    location = untildify(spec.location)
    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="tabtab") as pool:
        futures = [
            pool.submit(_write_to_shell_config, location, kind),
            pool.submit(_write_to_router_script, spec.name, kind),
            pool.submit(_write_completion_script, spec, kind),
        ]
    for future in futures:
        future.result()

    logger.debug(
        "=> Tabtab source line added to %s for %s module. Make sure to reload your shell.",
        spec.location,
        spec.name,
    )
    return spec


def uninstall(
    name: Optional[str],
    *,
    shell: ShellKind | str | None = None,
    location: Optional[str] = None,
) -> None:
    """Remove completion for *name*.

    Steps run in order and each tolerates a missing target: delete the
    tool's script, remove its router block, then, if the router script is
    left empty, remove the shared block from the shell config.

    Args:
        name: Tool to uninstall.
        shell: Target dialect; defaults to ``$SHELL``.
        location: Shell config file; defaults to the dialect's rc file.

    Raises:
        InvalidUsageError: If *name* is empty. Nothing is touched.
        ConfigurationError: If the dialect is unknown.
    """
    if not name:
        raise InvalidUsageError("Unable to uninstall if name is missing")

    kind = require_shell(shell)
    logger.debug("Uninstall %s for %s", name, kind.value)

    script = tool_script_path(name, kind)
    if script.exists():
        script.unlink()
        logger.debug("=> Removed completion script (%s)", script)

    router = router_script_path(kind)
    remove_block(router, tool_header(name))

    router_content = read_text(router) if router.exists() else ""
    if router_content.strip() == "":
        shell_config = untildify(location) if location else kind.rc_file
        logger.debug("File %s is empty. Removing source line from %s", router, shell_config)
        remove_block(shell_config, shared_header())

    logger.debug("=> Uninstalled completion for %s module", name)
