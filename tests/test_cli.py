from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import numpy as np
import yaml

NETWORK = {
    "connections": [
        {"first": "a", "second": "b", "transform": {"kind": "shift_dynamic", "key": "atb"}},
        {"first": "b", "second": "c", "transform": {"kind": "shift", "vec": [0, 1, 0]}},
        {
            "first": "c",
            "second": "d",
            "transform": {"kind": "rotate", "axis": [0, 0, 1], "angle": 180, "degrees": True},
        },
        {"first": "y", "second": "z"},
        {"first": "d", "second": "cam", "transform": {"kind": "pinhole"}},
    ],
    "state": {"atb": [1, 0, 0]},
}


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "coordnet.cli", *args],
        capture_output=True,
        text=True,
        check=False,
    )


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "network.yaml"
    path.write_text(yaml.safe_dump(NETWORK))
    return path


def test_cli_help() -> None:
    out = subprocess.check_output([sys.executable, "-m", "coordnet.cli", "--help"]).decode()
    assert "inspect" in out and "convert" in out and "affine" in out


def test_cli_convert_help() -> None:
    result = _run("convert", "--help")
    assert result.returncode == 0
    assert "--config" in result.stdout
    assert "--from" in result.stdout
    assert "--vec" in result.stdout


def test_cli_inspect(tmp_path: Path) -> None:
    result = _run("inspect", "-c", str(_write_config(tmp_path)))
    assert result.returncode == 0
    assert "Network Summary:" in result.stdout
    assert "a to c: a -> b -> c" in result.stdout
    assert "a to z: unreachable" in result.stdout


def test_cli_convert(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)
    result = _run("convert", "-c", str(cfg), "--from", "a", "--to", "c", "--vec", "0", "0", "0")
    assert result.returncode == 0
    out = json.loads(result.stdout)
    assert out["from"] == "a" and out["to"] == "c"
    np.testing.assert_allclose(out["vec"], [1, 1, 0], atol=1e-9)


def test_cli_convert_with_state(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)
    state = tmp_path / "state.json"
    state.write_text(json.dumps({"atb": [5, 0, 0]}))
    result = _run(
        "convert", "-c", str(cfg), "-s", str(state), "--from", "a", "--to", "d",
        "--vec", "0", "0", "0",
    )
    assert result.returncode == 0
    np.testing.assert_allclose(json.loads(result.stdout)["vec"], [-5, -1, 0], atol=1e-9)


def test_cli_affine(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)
    result = _run("affine", "-c", str(cfg), "--from", "a", "--to", "d")
    assert result.returncode == 0
    out = json.loads(result.stdout)
    np.testing.assert_allclose(out["A"], [[-1, 0, 0], [0, -1, 0], [0, 0, 1]], atol=1e-9)
    np.testing.assert_allclose(out["b"], [-1, -1, 0], atol=1e-9)

    result = _run("affine", "-c", str(cfg), "--from", "a", "--to", "d", "--homogeneous")
    assert result.returncode == 0
    matrix = np.array(json.loads(result.stdout))
    assert matrix.shape == (4, 4)
    np.testing.assert_allclose(matrix[:3, 3], [-1, -1, 0], atol=1e-9)
    np.testing.assert_allclose(matrix[3], [0, 0, 0, 1], atol=1e-9)


def test_cli_log_file(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)
    log_path = tmp_path / "run.jsonl"
    result = _run("--log-file", str(log_path), "-v", "inspect", "-c", str(cfg))
    assert result.returncode == 0

    lines = [json.loads(line) for line in log_path.read_text().splitlines()]
    assert any(line["message"].startswith("Compiled network") for line in lines)
    finished = [line for line in lines if line["message"] == "Command finished"]
    assert finished[0]["command"] == "inspect"
    assert finished[0]["exit_code"] == 0


def test_cli_errors(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)

    result = _run("convert", "-c", str(cfg), "--from", "a", "--to", "z", "--vec", "0", "0", "0")
    assert result.returncode == 1
    assert "cannot find" in result.stderr

    result = _run("convert", "-c", str(cfg), "--from", "q", "--to", "a", "--vec", "0", "0", "0")
    assert result.returncode == 1

    result = _run("affine", "-c", str(cfg), "--from", "a", "--to", "cam")
    assert result.returncode == 1
    assert "non euclidean" in result.stderr

    result = _run("inspect", "-c", str(tmp_path / "missing.yaml"))
    assert result.returncode == 1
    assert "not found" in result.stderr


def test_cli_missing_command() -> None:
    result = _run()
    assert result.returncode != 0
