"""Example tool wiring its own tab-completion with tabtab.

Run ``python hello.py install-completion`` once, reload the shell, and
``hello <TAB>`` completes through the hidden ``__generate_completions``
command below.
"""

from __future__ import annotations

import typer

import tabtab
from tabtab.models import CompletionContext

app = typer.Typer(add_completion=False, no_args_is_help=True)

COMPLETION_CMD = "__generate_completions"


def complete(ctx: CompletionContext) -> None:
    """Print candidates for the word under the cursor."""
    previous = ctx.last_partial_word if ctx.completing_new_word else ctx.previous_word

    if previous == "someCommand":
        tabtab.log(["is", "this", "the", "real", "life"], context=ctx)
    elif previous == "anotherOne":
        tabtab.log(["is", "this", "just", "fantasy"], context=ctx)
    elif previous == "--loglevel":
        tabtab.log(["error", "warn", "info", "notice", "verbose"], context=ctx)
    else:
        tabtab.log(
            [
                "--help",
                "--loglevel",
                "foo",
                "bar",
                "someCommand:a comprehensive description of the command",
                tabtab.CompletionItem(
                    name="someOtherCommand",
                    description="comprehensive description of the other command",
                ),
                "anotherOne",
            ],
            context=ctx,
        )


@app.command("someCommand")
def some_command() -> None:
    typer.echo("is this the real life ?")


@app.command("anotherOne")
def another_one() -> None:
    typer.echo("is this just fantasy ?")


@app.command("install-completion")
def install_completion() -> None:
    # The completer is the same program here; point it elsewhere to
    # complete a different binary.
    tabtab.install(name="hello", completer="hello", cmd=COMPLETION_CMD)


@app.command("uninstall-completion")
def uninstall_completion() -> None:
    tabtab.uninstall("hello")


@app.command(
    COMPLETION_CMD,
    hidden=True,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def generate_completions(words: list[str] = typer.Argument(None)) -> None:
    ctx = tabtab.parse_env()
    if ctx.is_completion_invocation:
        complete(ctx)


if __name__ == "__main__":
    app()
