"""tabtab -- tab-completion for any CLI under bash, zsh and fish.

The package has two halves that share one contract:

* an **installer** that wires a per-shell completion script into the user's
  shell startup files (:func:`install`, :func:`uninstall`), and
* a **completion protocol handler** that, when the shell calls the CLI back
  in completion mode, decodes ``COMP_CWORD``/``COMP_POINT``/``COMP_LINE``
  (:func:`parse_env`) and prints candidates in the shell's dialect
  (:func:`log`).

Typical use inside a tool::

    import tabtab

    ctx = tabtab.parse_env()
    if ctx.is_completion_invocation:
        tabtab.log(["build:compile everything", "test", "--help"])

Modules:
    shell: Dialect resolution and rc file locations.
    scripts: Per-dialect completion script templates.
    blocks: Idempotent marked-block edits of text files.
    installer: Install/uninstall orchestration.
    env: Completion-state decoding.
    emitter: Candidate formatting and output.
    app: The ``tabtab`` command-line interface.
"""

__version__ = "0.3.0"

from tabtab.emitter import completion_item, log  # noqa: E402
from tabtab.env import parse_env  # noqa: E402
from tabtab.exceptions import (  # noqa: E402
    ConfigurationError,
    InvalidUsageError,
    MalformedInputError,
    TabtabError,
)
from tabtab.installer import install, uninstall  # noqa: E402
from tabtab.models import CompletionContext, CompletionItem, InstallSpec  # noqa: E402
from tabtab.shell import ShellKind, default_location, location  # noqa: E402

__all__ = [
    "CompletionContext",
    "CompletionItem",
    "ConfigurationError",
    "InstallSpec",
    "InvalidUsageError",
    "MalformedInputError",
    "ShellKind",
    "TabtabError",
    "completion_item",
    "default_location",
    "install",
    "location",
    "log",
    "parse_env",
    "uninstall",
]
