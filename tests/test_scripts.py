"""Tests for tabtab.scripts -- completion script templates and rendering."""

from __future__ import annotations

import pytest

from tabtab import scripts
from tabtab.exceptions import ConfigurationError
from tabtab.scripts import SCRIPTS, render_script
from tabtab.shell import ShellKind


class TestTemplates:
    @pytest.mark.parametrize("kind", list(ShellKind))
    def test_every_dialect_has_a_template(self, kind: ShellKind) -> None:
        assert kind in SCRIPTS

    @pytest.mark.parametrize("kind", list(ShellKind))
    def test_templates_use_all_three_placeholders(self, kind: ShellKind) -> None:
        template = SCRIPTS[kind]
        for placeholder in ("{pkgname}", "{completer}", "{completion_cmd}"):
            assert placeholder in template

    @pytest.mark.parametrize("kind", list(ShellKind))
    def test_templates_export_the_completion_signals(self, kind: ShellKind) -> None:
        template = SCRIPTS[kind]
        for signal in ("COMP_CWORD", "COMP_LINE", "COMP_POINT"):
            assert signal in template

    @pytest.mark.parametrize("kind", list(ShellKind))
    def test_templates_are_delimited(self, kind: ShellKind) -> None:
        template = SCRIPTS[kind]
        assert template.startswith("###-begin-{pkgname}-completion-###")
        assert template.rstrip().endswith("###-end-{pkgname}-completion-###")


class TestRender:
    @pytest.mark.parametrize("kind", list(ShellKind))
    def test_substitutes_every_placeholder(self, kind: ShellKind) -> None:
        script = render_script(kind, "hello", "hello-complete", "__complete")
        assert "{pkgname}" not in script
        assert "{completer}" not in script
        assert "{completion_cmd}" not in script
        assert "hello-complete __complete --" in script
        assert "###-begin-hello-completion-###" in script
        assert "###-end-hello-completion-###" in script

    def test_bash_registers_with_complete(self) -> None:
        script = render_script(ShellKind.BASH, "hello", "hello")
        assert "_hello_completion () {" in script
        assert "complete -o default -F _hello_completion hello" in script
        assert "hello completions --" in script

    def test_zsh_registers_with_compdef(self) -> None:
        script = render_script("zsh", "hello", "hello")
        assert 'COMP_CWORD="$((CURRENT-1))"' in script
        assert "compdef _hello_completion hello" in script
        assert "_describe 'values' reply" in script

    def test_fish_registers_with_complete(self) -> None:
        script = render_script("fish", "hello", "hello")
        assert "function _hello_completion" in script
        assert "set cursor (commandline -C)" in script
        assert "complete -f -d 'hello' -c hello -a \"(eval _hello_completion)\"" in script

    def test_defaults_to_current_shell(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert "compdef _hello_completion hello" in render_script(None, "hello", "hello")

    def test_normalizes_crlf(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(scripts.SCRIPTS, ShellKind.BASH, "a {pkgname}\r\nb {completer}\r\n")
        assert render_script(ShellKind.BASH, "x", "y") == "a x\nb y\n"

    def test_replaces_repeated_placeholders(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(scripts.SCRIPTS, ShellKind.FISH, "{pkgname}{pkgname} {completion_cmd}")
        assert render_script(ShellKind.FISH, "ab", "c", "go") == "abab go"

    def test_unknown_shell_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            render_script("tcsh", "hello", "hello")
