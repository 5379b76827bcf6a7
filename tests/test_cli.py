# tests/test_cli.py
from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path

import pytest

from prepush.cli import run_cli
from prepush.cli.commands import LAUNCH_FAULT_EXIT, exit_code
from prepush.config.types import HookConfig, TaskConfig
from prepush.runner.types import Failure, RunResult, Success


def _py(code: str) -> str:
    return shlex.join([sys.executable, "-c", code])


def _write_json_config(path: Path, tasks: dict) -> Path:
    path.write_text(json.dumps({"tasks": tasks}), encoding="utf-8")
    return path


def _exits(**codes: int) -> dict:
    return {name: {"command": _py(f"raise SystemExit({code})")} for name, code in codes.items()}


def test_all_checks_pass_exit_0(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_json_config(tmp_path / "prepush.json", _exits(A=0, B=0, C=0, D=0, E=0))

    code = run_cli(["--config", str(cfg), "run"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert [line.split(",")[0] for line in out] == ["OK A", "OK B", "OK C", "OK D", "OK E"]


def test_single_failure_exit_code_is_propagated(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = _write_json_config(tmp_path / "prepush.json", _exits(A=0, B=0, C=3, D=0, E=0))

    code = run_cli(["--config", str(cfg), "run"])
    out = capsys.readouterr().out

    assert code == 3
    assert "FAIL C" in out
    assert "exit code = 3" in out


def test_first_failure_in_order_wins(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_json_config(tmp_path / "prepush.json", _exits(A=0, B=1, C=0, D=2, E=0))

    code = run_cli(["--config", str(cfg)])
    out = capsys.readouterr().out

    assert code == 1
    assert "FAIL B" in out
    assert "FAIL D" in out


def test_run_selected_names_only(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_json_config(tmp_path / "prepush.json", _exits(a=0, b=4, c=0))

    code = run_cli(["--config", str(cfg), "run", "c", "a"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert [line.split(",")[0] for line in out] == ["OK a", "OK c"]


def test_unknown_name_returns_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write_json_config(tmp_path / "prepush.json", _exits(a=0))

    code = run_cli(["--config", str(cfg), "run", "nope"])
    captured = capsys.readouterr()

    assert code == 2
    assert "nope" in captured.err


def test_missing_script_is_reported_as_launch_fault(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    tasks = _exits(first=0)
    tasks["readme"] = {"command": str(tmp_path / "ci" / "check_readme.sh")}
    cfg = _write_json_config(tmp_path / "prepush.json", tasks)

    code = run_cli(["--config", str(cfg), "run"])
    captured = capsys.readouterr()

    assert code == LAUNCH_FAULT_EXIT
    assert "could not launch check 'readme'" in captured.err


def test_default_checks_in_empty_dir_are_a_launch_fault(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    code = run_cli([])
    captured = capsys.readouterr()

    assert code == LAUNCH_FAULT_EXIT
    assert "'format'" in captured.err


def test_list_prints_names_in_launch_order(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    tasks = _exits(zeta=0, alpha=0)
    tasks["alpha"]["quiet"] = True
    cfg = _write_json_config(tmp_path / "prepush.json", tasks)

    code = run_cli(["--config", str(cfg), "list"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert out == ["zeta", "alpha (quiet)"]


def test_list_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    code = run_cli(["list"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert out == [
        "format",
        "job-dependencies (quiet)",
        "msrv (quiet)",
        "readme (quiet)",
        "versions (quiet)",
    ]


def test_invalid_config_path_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = run_cli(["--config", str(tmp_path / "missing.json"), "list"])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.err != ""


@pytest.mark.parametrize(
    "status, expected",
    [
        (0, 0),
        (3, 3),
        (255, 255),
        (256, 1),
        (257, 1),
        (-15, 143),
    ],
)
def test_exit_code_mapping(status: int, expected: int) -> None:
    results = (RunResult("t", status, 0.0),)
    overall = Success(results) if status == 0 else Failure("t", status, results)

    assert exit_code(overall) == expected


def test_invalid_env_name_is_a_config_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    tasks = _exits(fmt=0)
    tasks["fmt"]["env"] = {"A=B": "x"}
    cfg = _write_json_config(tmp_path / "prepush.json", tasks)

    code = run_cli(["--config", str(cfg), "run"])

    assert code == 2
    assert "A=B" in capsys.readouterr().err


@pytest.mark.parametrize(
    "bad",
    [
        TaskConfig("bad", [sys.executable, "-c", "pass"], env={"A=B": "x"}),
        TaskConfig("bad", [sys.executable, "-c", "pass\0"]),
    ],
)
def test_rejected_launch_arguments_exit_127(
    bad: TaskConfig, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = HookConfig(
        tasks={"ok": TaskConfig("ok", [sys.executable, "-c", "pass"]), "bad": bad}
    )
    monkeypatch.setattr("prepush.cli.commands.resolve_config", lambda path: config)

    code = run_cli(["run"])

    assert code == LAUNCH_FAULT_EXIT
    assert "could not launch check 'bad'" in capsys.readouterr().err
