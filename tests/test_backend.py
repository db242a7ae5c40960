"""
ShellExecutor against a real shell.

Only POSIX shell builtins are used, so no docker installation is needed.
"""

import subprocess
import time
from pathlib import Path

from wt_src.backend import ShellExecutor


def test_run_returns_exit_status(tmp_path: Path):
    executor = ShellExecutor(tmp_path)
    assert executor.run("true") == 0
    assert executor.run("exit 3") == 3


def test_run_uses_shell_semantics(tmp_path: Path):
    executor = ShellExecutor(tmp_path)
    assert executor.run("echo hello > out.txt && test -s out.txt") == 0
    assert (tmp_path / "out.txt").read_text().strip() == "hello"


def test_spawn_returns_without_waiting(tmp_path: Path):
    executor = ShellExecutor(tmp_path)
    log_path = tmp_path / "_build" / "logs" / "serve.log"

    started = time.monotonic()
    assert executor.spawn("sleep 5", log_path) == 0
    assert time.monotonic() - started < 4
    assert log_path.exists()

    [proc] = executor.spawned
    assert proc.poll() is None
    proc.terminate()
    proc.wait(timeout=5)


def test_spawn_writes_output_to_log(tmp_path: Path):
    executor = ShellExecutor(tmp_path)
    log_path = tmp_path / "logs" / "npm-dev.log"

    executor.spawn("echo ready", log_path)

    deadline = time.monotonic() + 5
    while time.monotonic() < deadline and "ready" not in log_path.read_text():
        time.sleep(0.05)
    assert "ready" in log_path.read_text()


def test_capture_collects_output(tmp_path: Path):
    result = ShellExecutor(tmp_path).capture(["sh", "-c", "echo captured"])
    assert result.returncode == 0
    assert result.stdout.strip() == "captured"


def test_spawn_keeps_handles(tmp_path: Path):
    executor = ShellExecutor(tmp_path)

    executor.spawn("true", tmp_path / "a.log")
    executor.spawn("true", tmp_path / "b.log")

    assert len(executor.spawned) == 2
    for proc in executor.spawned:
        assert proc.wait(timeout=5) == 0


def test_run_interrupted_returns_130(tmp_path: Path, monkeypatch, capsys):
    def interrupted(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(subprocess, "run", interrupted)

    assert ShellExecutor(tmp_path).run("sleep 60") == 130
    assert "Interrupted by user" in capsys.readouterr().out
