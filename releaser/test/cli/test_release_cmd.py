from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import releaser.cli.app as cli_app
import releaser.services.compiler as compiler
from releaser.core.result import Err, Ok, Result
from releaser.output.console import MockConsole
from releaser.platform.process import ProcessError

runner = CliRunner()


def _write_workspace(root: Path, name: str = "config.json") -> Path:
    (root / "build").mkdir()
    (root / "build" / "app.exe").write_bytes(b"MZ")
    (root / "ignore.txt").write_text("*.log\n", encoding="utf-8")
    config = {
        "version": "3.1.0",
        "compiler": "iscc",
        "output": "dist",
        "apps": [
            {
                "app_name": "Viewer",
                "app_exe": "app.exe",
                "build_path": "build",
                "setup_target_path": "C:/Viewer",
            }
        ],
    }
    path = root / name
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


@pytest.fixture
def console(monkeypatch: pytest.MonkeyPatch) -> MockConsole:
    mock = MockConsole()
    monkeypatch.setattr(cli_app, "build_console", lambda: mock)
    return mock


@pytest.fixture
def compiled(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(
        cmd: list[str], cwd: Path, env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]:
        calls.append(cmd)
        return Ok("")

    monkeypatch.setattr(compiler, "run", fake_run)
    return calls


def test_default_config_in_cwd(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    console: MockConsole,
    compiled: list[list[str]],
) -> None:
    _write_workspace(tmp_path)
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli_app.app, [])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "dist" / "Viewer_3.1.0.iss").is_file()
    assert len(compiled) == 1
    assert console.find("version releaser")
    assert console.find("Viewer_3.1.0.iss")


def test_explicit_config_path(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    console: MockConsole,
    compiled: list[list[str]],
) -> None:
    config = _write_workspace(tmp_path, "release.json")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli_app.app, [str(config)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "dist" / "Viewer_3.1.0.iss").is_file()


def test_config_from_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    console: MockConsole,
    compiled: list[list[str]],
) -> None:
    _write_workspace(tmp_path, "env.json")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli_app.app, [], env={"RELEASER_CONFIG": "env.json"})

    assert result.exit_code == 0, result.output


def test_warning_logged_once_with_summary(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    console: MockConsole,
    compiled: list[list[str]],
) -> None:
    config = _write_workspace(tmp_path)
    data = json.loads(config.read_text(encoding="utf-8"))
    data["apps"][0]["vcredist"] = "{VC-KEY}"
    config.write_text(json.dumps(data), encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli_app.app, [])

    assert result.exit_code == 0, result.output
    assert len(console.find("can not find file")) == 1
    summary = console.find("release finished with 1 warning(s)")
    assert len(summary) == 1
    assert summary[0].fields["apps"] == "Viewer"


def test_missing_config_exits_1(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, console: MockConsole
) -> None:
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli_app.app, [])

    assert result.exit_code == 1
    assert console.has_error()
    assert not (tmp_path / "dist").exists()


def test_compiler_failure_exits_1(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, console: MockConsole
) -> None:
    _write_workspace(tmp_path)
    monkeypatch.chdir(tmp_path)

    def failing_run(
        cmd: list[str], cwd: Path, env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]:
        return Err(ProcessError(tuple(cmd), 2, "Compile aborted."))

    monkeypatch.setattr(compiler, "run", failing_run)

    result = runner.invoke(cli_app.app, [])

    assert result.exit_code == 1
    assert console.find("create setup file failed")
    assert (tmp_path / "dist" / "Viewer_3.1.0.iss").is_file()
