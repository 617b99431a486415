"""Tests for tabtab.installer -- install/uninstall against a fake home."""

from __future__ import annotations

from pathlib import Path

import pytest

from tabtab.blocks import UNINSTALL_HINT
from tabtab.exceptions import ConfigurationError, InvalidUsageError
from tabtab.installer import (
    install,
    router_script_path,
    shared_header,
    tool_header,
    tool_script_path,
    uninstall,
)
from tabtab.models import InstallSpec
from tabtab.scripts import render_script
from tabtab.shell import ShellKind


def _snapshot(*paths: Path) -> dict[Path, bytes | None]:
    return {p: p.read_bytes() if p.exists() else None for p in paths}


# ---------------------------------------------------------------------------
# Paths and headers
# ---------------------------------------------------------------------------


class TestPaths:
    def test_router_is_shared_per_shell(self, completion_dir: Path) -> None:
        assert router_script_path(ShellKind.BASH) == completion_dir / "__tabtab.bash"
        assert router_script_path(ShellKind.FISH) == completion_dir / "__tabtab.fish"

    def test_tool_script_is_named_after_tool(self, completion_dir: Path) -> None:
        assert tool_script_path("hello", ShellKind.ZSH) == completion_dir / "hello.zsh"

    def test_completion_dir_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TABTAB_COMPLETION_DIR", str(tmp_path / "custom"))
        assert router_script_path(ShellKind.BASH) == tmp_path / "custom" / "__tabtab.bash"

    def test_headers(self) -> None:
        assert shared_header() == "# tabtab source for modules"
        assert tool_header("hello") == "# tabtab source for hello module"


# ---------------------------------------------------------------------------
# install
# ---------------------------------------------------------------------------


class TestInstall:
    def test_writes_all_three_levels(self, isolated_home: Path, completion_dir: Path) -> None:
        install(InstallSpec(name="hello", completer="hello-cli", cmd="__complete"))

        rc = (isolated_home / ".bashrc").read_text()
        router = completion_dir / "__tabtab.bash"
        script = completion_dir / "hello.bash"

        assert rc == (
            f"\n{shared_header()}\n{UNINSTALL_HINT}\n"
            f'[ -f "{router}" ] && . "{router}" || true\n'
        )
        assert router.read_text() == (
            f"\n{tool_header('hello')}\n{UNINSTALL_HINT}\n"
            f'[ -f "{script}" ] && . "{script}" || true\n'
        )
        assert script.read_text() == render_script(
            ShellKind.BASH, "hello", "hello-cli", "__complete"
        )

    def test_keyword_form_defaults(self, isolated_home: Path, completion_dir: Path) -> None:
        spec = install(name="hello")
        assert spec.completer == "hello"
        assert spec.cmd == "completions"
        assert spec.location == "~/.bashrc"
        assert "hello completions --" in (completion_dir / "hello.bash").read_text()

    def test_keyword_form_requires_name(self) -> None:
        with pytest.raises(InvalidUsageError):
            install(completer="x")

    def test_keyword_form_rejects_empty_completer(self) -> None:
        with pytest.raises(InvalidUsageError):
            install(name="hello", completer="")

    def test_spec_and_keyword_options_are_exclusive(self, isolated_home: Path) -> None:
        spec = InstallSpec(name="hello", completer="hello")
        with pytest.raises(InvalidUsageError):
            install(spec, completer="other")
        assert list(isolated_home.iterdir()) == []

    def test_preserves_existing_rc_content(self, isolated_home: Path) -> None:
        rc = isolated_home / ".bashrc"
        rc.write_text("export PATH=$HOME/bin:$PATH\n")
        install(name="hello")
        assert rc.read_text().startswith("export PATH=$HOME/bin:$PATH\n\n# tabtab source")

    def test_is_idempotent(self, isolated_home: Path, completion_dir: Path) -> None:
        rc = isolated_home / ".bashrc"
        rc.write_text("export A=1\n")
        spec = InstallSpec(name="hello", completer="hello")

        install(spec)
        first = _snapshot(rc, completion_dir / "__tabtab.bash", completion_dir / "hello.bash")
        install(spec)
        second = _snapshot(rc, completion_dir / "__tabtab.bash", completion_dir / "hello.bash")

        assert first == second
        assert rc.read_text().count(shared_header()) == 1

    def test_is_idempotent_with_non_utf8_rc(self, isolated_home: Path) -> None:
        rc = isolated_home / ".bashrc"
        rc.write_bytes(b"# caf\xe9 alias\nexport A=1\n")

        install(name="hello")
        first = rc.read_bytes()
        install(name="hello")

        assert rc.read_bytes() == first
        assert first.count(shared_header().encode()) == 1
        assert first.startswith(b"# caf\xe9 alias\nexport A=1\n")

    def test_second_tool_shares_rc_line(self, isolated_home: Path, completion_dir: Path) -> None:
        install(name="foo")
        install(name="bar")

        rc = (isolated_home / ".bashrc").read_text()
        router = (completion_dir / "__tabtab.bash").read_text()

        assert rc.count(shared_header()) == 1
        assert tool_header("foo") in router
        assert tool_header("bar") in router
        assert (completion_dir / "foo.bash").exists()
        assert (completion_dir / "bar.bash").exists()

    def test_rerender_overwrites_script(self, completion_dir: Path) -> None:
        install(name="hello", completer="old")
        install(name="hello", completer="new")
        script = (completion_dir / "hello.bash").read_text()
        assert "new completions --" in script
        assert "old completions" not in script
        router = (completion_dir / "__tabtab.bash").read_text()
        assert router.count(tool_header("hello")) == 1

    def test_custom_location(self, tmp_path: Path, isolated_home: Path) -> None:
        custom = tmp_path / "profile.d" / "completion.sh"
        spec = install(name="hello", location=str(custom))
        assert spec.location == str(custom)
        assert shared_header() in custom.read_text()
        assert not (isolated_home / ".bashrc").exists()

    def test_location_with_tilde(self, isolated_home: Path) -> None:
        install(name="hello", location="~/.bash_aliases")
        assert shared_header() in (isolated_home / ".bash_aliases").read_text()

    @pytest.mark.parametrize(
        ("shell", "rc_relative"),
        [
            ("bash", ".bashrc"),
            ("zsh", ".zshrc"),
            ("fish", ".config/fish/config.fish"),
        ],
    )
    def test_each_shell_uses_its_rc_file(
        self,
        shell: str,
        rc_relative: str,
        isolated_home: Path,
        completion_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("SHELL", f"/usr/bin/{shell}")
        install(name="hello")

        rc = isolated_home / rc_relative
        kind = ShellKind(shell)
        router = completion_dir / f"__tabtab.{shell}"
        assert kind.source_line(router) in rc.read_text()
        assert (completion_dir / f"hello.{shell}").read_text() == render_script(
            kind, "hello", "hello", "completions"
        )

    def test_explicit_shell_overrides_environment(
        self, isolated_home: Path, completion_dir: Path
    ) -> None:
        install(name="hello", shell="zsh")
        assert (isolated_home / ".zshrc").exists()
        assert (completion_dir / "hello.zsh").exists()
        assert not (isolated_home / ".bashrc").exists()

    def test_unknown_shell_writes_nothing(
        self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SHELL", "/bin/tcsh")
        with pytest.raises(ConfigurationError):
            install(name="hello")
        assert list(isolated_home.iterdir()) == []

    def test_write_failure_propagates(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        monkeypatch.setenv("TABTAB_COMPLETION_DIR", str(blocker))
        with pytest.raises(OSError):
            install(name="hello")


# ---------------------------------------------------------------------------
# uninstall
# ---------------------------------------------------------------------------


class TestUninstall:
    def test_requires_name(self, isolated_home: Path, completion_dir: Path) -> None:
        install(name="hello")
        before = _snapshot(
            isolated_home / ".bashrc", completion_dir / "__tabtab.bash", completion_dir / "hello.bash"
        )
        for missing in (None, ""):
            with pytest.raises(InvalidUsageError):
                uninstall(missing)
        after = _snapshot(
            isolated_home / ".bashrc", completion_dir / "__tabtab.bash", completion_dir / "hello.bash"
        )
        assert before == after

    def test_round_trip_restores_rc(self, isolated_home: Path, completion_dir: Path) -> None:
        rc = isolated_home / ".bashrc"
        original = "export PATH=$HOME/bin:$PATH\nalias ll='ls -l'\n"
        rc.write_text(original)

        install(name="hello")
        uninstall("hello")

        assert rc.read_text() == original
        assert not (completion_dir / "hello.bash").exists()
        assert (completion_dir / "__tabtab.bash").read_text() == ""

    def test_round_trip_with_non_utf8_rc(self, isolated_home: Path) -> None:
        rc = isolated_home / ".bashrc"
        original = b"# caf\xe9 alias\nexport A=1\n"
        rc.write_bytes(original)

        install(name="hello")
        uninstall("hello")

        assert rc.read_bytes() == original

    def test_keeps_rc_line_while_other_tools_remain(
        self, isolated_home: Path, completion_dir: Path
    ) -> None:
        install(name="foo")
        install(name="bar")
        uninstall("foo")

        router = (completion_dir / "__tabtab.bash").read_text()
        assert tool_header("foo") not in router
        assert tool_header("bar") in router
        assert shared_header() in (isolated_home / ".bashrc").read_text()
        assert not (completion_dir / "foo.bash").exists()
        assert (completion_dir / "bar.bash").exists()

    def test_last_tool_removes_rc_line(self, isolated_home: Path) -> None:
        install(name="foo")
        install(name="bar")
        uninstall("foo")
        uninstall("bar")
        assert shared_header() not in (isolated_home / ".bashrc").read_text()

    def test_reinstall_after_uninstall(self, isolated_home: Path, completion_dir: Path) -> None:
        install(name="hello")
        uninstall("hello")
        install(name="hello")
        assert (isolated_home / ".bashrc").read_text().count(shared_header()) == 1
        assert (completion_dir / "__tabtab.bash").read_text().count(tool_header("hello")) == 1

    def test_nothing_installed_is_tolerated(self, isolated_home: Path, completion_dir: Path) -> None:
        uninstall("hello")
        assert not (isolated_home / ".bashrc").exists()
        assert not completion_dir.exists()

    def test_custom_location(self, tmp_path: Path) -> None:
        custom = tmp_path / "completion.sh"
        custom.write_text("# mine\n")
        install(name="hello", location=str(custom))
        uninstall("hello", location=str(custom))
        assert custom.read_text() == "# mine\n"

    def test_unknown_tool_leaves_other_tools(self, completion_dir: Path) -> None:
        install(name="foo")
        router = completion_dir / "__tabtab.bash"
        before = router.read_bytes()
        uninstall("bar")
        assert router.read_bytes() == before

    def test_unknown_shell_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SHELL", "/bin/tcsh")
        with pytest.raises(ConfigurationError):
            uninstall("hello")
