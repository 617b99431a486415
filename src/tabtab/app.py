"""Typer application and CLI entry point for tabtab.

The ``tabtab`` command wires completion for arbitrary tools from the
command line (``install``, ``uninstall``, ``show``, ``location``) and
completes itself through the same protocol it installs for others: a
hidden ``completion`` command answers the shell's callbacks, so
``tabtab install tabtab --cmd completion`` gives tabtab tab-completion.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from tabtab import __version__
from tabtab.exceptions import TabtabError
from tabtab.exit_codes import EXIT_GENERIC_FAILURE, EXIT_IO_ERROR
from tabtab.output import error, print_data, success, suggest

app = typer.Typer(
    name="tabtab",
    help="Tab-completion for any CLI under bash, zsh and fish.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_COMMANDS = {
    "install": "Install completion for a tool",
    "uninstall": "Remove completion for a tool",
    "show": "Print the completion script for a tool",
    "location": "Print the shell config file tabtab hooks into",
}

_COMMAND_OPTIONS = {
    "install": ["--completer", "--cmd", "--location", "--shell"],
    "uninstall": ["--location", "--shell"],
    "show": ["--completer", "--cmd", "--shell"],
    "location": ["--shell"],
}

_GLOBAL_OPTIONS = ["--version", "--completion-dir", "--no-color", "--quiet", "--verbose", "--help"]

_SHELLS = ["bash", "zsh", "fish"]


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tabtab {__version__}")
        raise typer.Exit()


def _fail(exc: TabtabError) -> typer.Exit:
    """Report *exc* on stderr and build the matching exit."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    completion_dir: Optional[str] = typer.Option(
        None,
        "--completion-dir",
        help="Directory for generated scripts (default: $XDG_CONFIG_HOME/tabtab).",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Resolves :class:`~tabtab.config.Settings`, installs the global
    :class:`~tabtab.output.OutputManager`, and routes library log records
    to stderr.
    """
    from tabtab.config import resolve_settings
    from tabtab.output import OutputManager, configure_logging, set_output

    settings = resolve_settings(cli_completion_dir=completion_dir, cli_verbose=verbose)
    set_output(OutputManager(no_color=no_color, quiet=quiet))
    configure_logging(settings.debug)


@app.command("install")
def install_command(
    name: str = typer.Argument(help="Program to complete."),
    completer: Optional[str] = typer.Option(
        None, "--completer", "-c", help="Program computing candidates (default: NAME)."
    ),
    cmd: str = typer.Option(
        "completions", "--cmd", help="Sub-command of the completer answering completion calls."
    ),
    location: Optional[str] = typer.Option(
        None, "--location", "-l", help="Shell config file to hook (default: the shell's rc file)."
    ),
    shell: Optional[str] = typer.Option(
        None, "--shell", "-s", help="bash, zsh or fish (default: $SHELL)."
    ),
) -> None:
    """Install completion for NAME into the current shell.

    Idempotent: running it again re-renders the completion script without
    duplicating any ``source`` line.

    Example::

        tabtab install mycli
        tabtab install mycli --completer mycli-complete --cmd complete --shell zsh
    """
    from tabtab.installer import install

    try:
        spec = install(
            name=name,
            completer=completer or name,
            cmd=cmd,
            location=location,
            shell=shell,
        )
    except TabtabError as exc:
        raise _fail(exc) from exc

    success(f"Completion for {spec.name} installed")
    suggest(f"Reload your shell or run: source {spec.location}")


@app.command("uninstall")
def uninstall_command(
    name: str = typer.Argument(help="Program whose completion is removed."),
    location: Optional[str] = typer.Option(
        None, "--location", "-l", help="Shell config file hooked at install time."
    ),
    shell: Optional[str] = typer.Option(
        None, "--shell", "-s", help="bash, zsh or fish (default: $SHELL)."
    ),
) -> None:
    """Remove completion for NAME.

    The shell config line is only removed together with the last tool.
    """
    from tabtab.installer import uninstall

    try:
        uninstall(name, shell=shell, location=location)
    except TabtabError as exc:
        raise _fail(exc) from exc

    success(f"Completion for {name} uninstalled")


@app.command("show")
def show_command(
    name: str = typer.Argument(help="Program to complete."),
    completer: Optional[str] = typer.Option(
        None, "--completer", "-c", help="Program computing candidates (default: NAME)."
    ),
    cmd: str = typer.Option(
        "completions", "--cmd", help="Sub-command of the completer answering completion calls."
    ),
    shell: Optional[str] = typer.Option(
        None, "--shell", "-s", help="bash, zsh or fish (default: $SHELL)."
    ),
) -> None:
    """Print the completion script for NAME to stdout.

    Example::

        tabtab show mycli --shell fish > ~/.config/fish/completions/mycli.fish
    """
    from tabtab.scripts import render_script

    try:
        script = render_script(shell, name, completer or name, cmd)
    except TabtabError as exc:
        raise _fail(exc) from exc

    print_data(script.rstrip("\n"))


@app.command("location")
def location_command(
    shell: Optional[str] = typer.Option(
        None, "--shell", "-s", help="bash, zsh or fish (default: $SHELL)."
    ),
) -> None:
    """Print the shell config file tabtab adds its source line to."""
    from tabtab.shell import default_location, location

    try:
        rc_path = location(shell) if shell else default_location()
    except TabtabError as exc:
        raise _fail(exc) from exc

    print_data(rc_path)


def _self_candidates(words: list[str], completing_new_word: bool) -> list[str]:
    """Candidates for tabtab's own command line, given the words before the cursor."""
    before = words if completing_new_word else words[:-1]
    args = before[1:]
    previous = before[-1] if before else ""

    if previous in ("--shell", "-s"):
        return list(_SHELLS)

    command = next((arg for arg in args if arg in _COMMANDS), None)
    if command is None:
        return [f"{name}:{description}" for name, description in _COMMANDS.items()] + list(
            _GLOBAL_OPTIONS
        )
    return _COMMAND_OPTIONS[command] + ["--help"]


@app.command(
    "completion",
    hidden=True,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def completion_command(
    words: Optional[list[str]] = typer.Argument(None, help="Words of the line being completed."),
) -> None:
    """Answer a completion callback from the shell for tabtab itself."""
    from tabtab.emitter import log
    from tabtab.env import parse_env

    ctx = parse_env()
    if not ctx.is_completion_invocation:
        return

    try:
        log(_self_candidates(ctx.line_prefix.split(), ctx.completing_new_word), context=ctx)
    except TabtabError as exc:
        raise _fail(exc) from exc


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from tabtab.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``tabtab`` console script.

    :class:`~tabtab.exceptions.TabtabError` exits with the error's
    ``exit_code``; :class:`OSError` from a failed read or write exits with
    :data:`~tabtab.exit_codes.EXIT_IO_ERROR`. Anything else produces a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except TabtabError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except OSError as exc:
        error(f"{exc.strerror or exc}: {exc.filename}" if exc.filename else str(exc))
        sys.exit(EXIT_IO_ERROR)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
