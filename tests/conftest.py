import subprocess
from pathlib import Path
from typing import Optional

import pytest

from wt_src.dispatcher import Dispatcher
from wt_src.models import Config

COMPOSE = "docker compose -f docker-compose.minimal.yml"
EXEC = f"{COMPOSE} exec --user=laradock workspace"


class RecordingExecutor:
    """Executor double that records calls instead of starting processes.

    ``codes`` maps a substring of the command line to the exit status
    returned for lines containing it.
    """

    def __init__(
        self,
        codes: Optional[dict[str, int]] = None,
        ps_output: str = "",
        ps_returncode: int = 0,
        docker_missing: bool = False,
    ):
        self.codes = codes or {}
        self.ps_output = ps_output
        self.ps_returncode = ps_returncode
        self.docker_missing = docker_missing
        self.calls: list[tuple[str, str]] = []
        self.log_paths: list[Path] = []

    def _code_for(self, line: str) -> int:
        for fragment, code in self.codes.items():
            if fragment in line:
                return code
        return 0

    def run(self, line: str) -> int:
        self.calls.append(("run", line))
        return self._code_for(line)

    def spawn(self, line: str, log_path: Path) -> int:
        self.calls.append(("spawn", line))
        self.log_paths.append(log_path)
        return 0

    def capture(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        self.calls.append(("capture", " ".join(args)))
        if self.docker_missing:
            raise FileNotFoundError("docker")
        return subprocess.CompletedProcess(
            args, self.ps_returncode, stdout=self.ps_output, stderr=""
        )

    @property
    def lines(self) -> list[str]:
        return [line for _, line in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "WT_WORKTREE",
        "WT_BACKEND__USER",
        "WT_BACKEND__SERVICE",
        "WT_BACKEND__COMPOSE_FILE",
        "WT_TOOLS__NODE",
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def host() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def dispatcher(tmp_path: Path, backend, host) -> Dispatcher:
    return Dispatcher(tmp_path, Config(), backend=backend, host=host)
