"""Tests for binfmt_manager.cli (Typer app, usage fallback, exit codes)."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from binfmt_manager import cli
from binfmt_manager.cli import USAGE, _command_of, app, main
from binfmt_manager.lister import NOT_ENABLED
from binfmt_manager.store import InMemoryEntryStore

runner = CliRunner()

JAVA_DEF = """\
name: java_app
type: M
offset: 0
magic: cafebabe
mask: ffffffff
interpreter: /usr/bin/run-jar
flags: P
"""


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> InMemoryEntryStore:
    shared = InMemoryEntryStore()
    monkeypatch.setattr(cli, "build_store", lambda config: shared)
    monkeypatch.setattr("os.geteuid", lambda: 0)
    for var in ("DEBUG", "BINFMT_MANAGER_FAILURE_POLICY", "BINFMT_MANAGER_CONFIG_DIR"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    return shared


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    d = tmp_path / "binfmt.d"
    d.mkdir()
    (d / "java_app").write_text(JAVA_DEF)
    return d


def _invoke(config_dir: Path, *args: str):
    return runner.invoke(app, ["--config-dir", str(config_dir), *args])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestRegisterCommand:
    def test_register_by_name(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        result = _invoke(config_dir, "register", "java_app")
        assert result.exit_code == 0, result.output
        assert store.enumerate() == ["java_app"]

    def test_register_without_argument(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        result = _invoke(config_dir, "register")
        assert result.exit_code == 1
        assert "No binfmt name or file path provided" in result.output

    def test_duplicate_exits_1(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        assert _invoke(config_dir, "register", "java_app").exit_code == 0
        result = _invoke(config_dir, "register", "java_app")
        assert result.exit_code == 1
        assert "binfmt named 'java_app' already exists" in result.output
        assert "Traceback" not in result.output

    def test_not_root(
        self,
        store: InMemoryEntryStore,
        config_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        result = _invoke(config_dir, "register", "java_app")
        assert result.exit_code == 1
        assert "root privileges" in result.output
        assert store.enumerate() == []


class TestToggleCommands:
    def test_disable_enable_unregister(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        _invoke(config_dir, "register", "java_app")

        assert _invoke(config_dir, "disable", "java_app").exit_code == 0
        assert store.read("java_app").startswith("disabled")

        assert _invoke(config_dir, "enable", "java_app").exit_code == 0
        assert store.read("java_app").startswith("enabled")

        assert _invoke(config_dir, "unregister", "java_app").exit_code == 0
        assert store.enumerate() == []

    @pytest.mark.parametrize("command", ["unregister", "enable", "disable"])
    def test_unknown_entry(
        self, store: InMemoryEntryStore, config_dir: Path, command: str
    ) -> None:
        result = _invoke(config_dir, command, "ghost")
        assert result.exit_code == 1
        assert "binfmt 'ghost' was not registered" in result.output


class TestBatchCommands:
    def test_reload_then_list(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        result = _invoke(config_dir, "reload")
        assert result.exit_code == 0, result.output

        listing = _invoke(config_dir, "list")
        assert listing.exit_code == 0
        assert "java_app:" in listing.stdout
        assert "\tInterpreter: /usr/bin/run-jar" in listing.stdout

    def test_unregister_all_then_list_is_empty(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        _invoke(config_dir, "reload")
        assert _invoke(config_dir, "unregister-all").exit_code == 0
        listing = _invoke(config_dir, "list")
        assert listing.exit_code == 0
        assert "java_app" not in listing.stdout

    def test_reload_aborts_by_default(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        (config_dir / "a_broken").write_text("name: a_broken\n")
        result = _invoke(config_dir, "reload")
        assert result.exit_code == 1
        assert "variable type is not set" in result.output
        assert store.enumerate() == []

    def test_reload_keep_going(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        (config_dir / "a_broken").write_text("name: a_broken\n")
        result = _invoke(config_dir, "reload", "--keep-going")
        assert result.exit_code == 1
        assert "1 of 2 operations failed" in result.output
        assert store.enumerate() == ["java_app"]

    def test_reload_keep_going_past_unreadable_file(
        self, store: InMemoryEntryStore, config_dir: Path
    ) -> None:
        (config_dir / "aaa_blob").write_bytes(b"\xff\xfe\x00\x01")
        result = _invoke(config_dir, "reload", "--keep-going")
        assert result.exit_code == 1
        assert "cannot be read" in result.output
        assert "Traceback" not in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert store.enumerate() == ["java_app"]


class TestConfigErrors:
    def test_invalid_policy_env(
        self,
        store: InMemoryEntryStore,
        config_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("BINFMT_MANAGER_FAILURE_POLICY", "skip")
        result = _invoke(config_dir, "list")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "invalid configuration: failure_policy" in result.output

    def test_malformed_config_file(
        self, store: InMemoryEntryStore, config_dir: Path, tmp_path: Path
    ) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        result = runner.invoke(app, ["--config", str(bad), "list"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "cannot load configuration" in result.output

class TestListCommand:
    def test_not_enabled(
        self, monkeypatch: pytest.MonkeyPatch, config_dir: Path
    ) -> None:
        inactive = InMemoryEntryStore(mounted=False)
        monkeypatch.setattr(cli, "build_store", lambda config: inactive)
        result = _invoke(config_dir, "list")
        assert result.exit_code == 0
        assert NOT_ENABLED in result.stdout

    def test_list_does_not_need_root(
        self,
        store: InMemoryEntryStore,
        config_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        assert _invoke(config_dir, "list").exit_code == 0


# ---------------------------------------------------------------------------
# Usage fallback
# ---------------------------------------------------------------------------


class TestUsage:
    def test_help_command(self, store: InMemoryEntryStore) -> None:
        result = runner.invoke(app, ["help"])
        assert result.exit_code == 0
        assert "unregister-all" in result.stdout

    @pytest.mark.parametrize("argv", [[], ["help"], ["bogus"], ["-v"], ["--root", "/x"]])
    def test_main_prints_usage(
        self, argv: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc:
            main(argv)
        assert exc.value.code == 0
        assert capsys.readouterr().out.strip() == USAGE

    def test_command_of_skips_options(self) -> None:
        assert _command_of(["-v", "--config", "list.json", "reload"]) == "reload"
        assert _command_of(["--root", "/x", "list"]) == "list"
        assert _command_of(["-v"]) is None
