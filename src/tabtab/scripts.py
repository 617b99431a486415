"""Per-dialect completion script templates.

Each template registers a completion function for ``{pkgname}`` that calls
``{completer} {completion_cmd} -- <words>`` with ``COMP_CWORD``,
``COMP_LINE`` and ``COMP_POINT`` exported, and reads one candidate per
line from its stdout. The environment contract is the one
:func:`tabtab.env.parse_env` decodes.
"""

from __future__ import annotations

from tabtab.shell import ShellKind, require_shell

BASH_SCRIPT = r"""###-begin-{pkgname}-completion-###
if type complete &>/dev/null; then
  _{pkgname}_completion () {
    local words cword
    if type _get_comp_words_by_ref &>/dev/null; then
      _get_comp_words_by_ref -n = -n @ -n : -w words -i cword
    else
      cword="$COMP_CWORD"
      words=("${COMP_WORDS[@]}")
    fi

    local si="$IFS"
    IFS=$'\n' COMPREPLY=($(COMP_CWORD="$cword" \
                           COMP_LINE="$COMP_LINE" \
                           COMP_POINT="$COMP_POINT" \
                           {completer} {completion_cmd} -- "${words[@]}" \
                           2>/dev/null)) || return $?
    IFS="$si"
    if type __ltrim_colon_completions &>/dev/null; then
      __ltrim_colon_completions "${words[cword]}"
    fi
  }
  complete -o default -F _{pkgname}_completion {pkgname}
fi
###-end-{pkgname}-completion-###
"""

ZSH_SCRIPT = r"""###-begin-{pkgname}-completion-###
if type compdef &>/dev/null; then
  _{pkgname}_completion () {
    local reply
    local si=$IFS

    IFS=$'\n' reply=($(COMP_CWORD="$((CURRENT-1))" COMP_LINE="$BUFFER" COMP_POINT="$CURSOR" {completer} {completion_cmd} -- "${words[@]}"))
    IFS=$si

    _describe 'values' reply
  }
  compdef _{pkgname}_completion {pkgname}
fi
###-end-{pkgname}-completion-###
"""

FISH_SCRIPT = r"""###-begin-{pkgname}-completion-###
function _{pkgname}_completion
  set cmd (commandline -o)
  set cursor (commandline -C)
  set words (count $cmd)

  set completions (env COMP_CWORD="$words" COMP_LINE="$cmd " COMP_POINT="$cursor" {completer} {completion_cmd} -- $cmd)

  for completion in $completions
    echo -e $completion
  end
end

complete -f -d '{pkgname}' -c {pkgname} -a "(eval _{pkgname}_completion)"
###-end-{pkgname}-completion-###
"""

SCRIPTS: dict[ShellKind, str] = {
    ShellKind.BASH: BASH_SCRIPT,
    ShellKind.ZSH: ZSH_SCRIPT,
    ShellKind.FISH: FISH_SCRIPT,
}


def render_script(
    shell: ShellKind | str | None,
    name: str,
    completer: str,
    cmd: str = "completions",
) -> str:
    """Render the completion script for *name* in the given dialect.

    Placeholders are substituted with plain string replacement, never
    ``str.format``, because the templates are full of shell braces.

    Args:
        shell: Target dialect; ``None`` resolves ``$SHELL``.
        name: Program completion is registered for (``{pkgname}``).
        completer: Program invoked to compute candidates (``{completer}``).
        cmd: Completer sub-command answering requests (``{completion_cmd}``).

    Returns:
        The script text with ``\\n`` line endings.

    Raises:
        ConfigurationError: If the dialect is unknown.
    """
    template = SCRIPTS[require_shell(shell)]
    script = (
        template.replace("{pkgname}", name)
        .replace("{completer}", completer)
        .replace("{completion_cmd}", cmd)
    )
    return script.replace("\r\n", "\n")
