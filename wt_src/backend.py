#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Process execution for dispatched commands.
"""

import subprocess
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.markup import escape

console = Console()


class Executor(Protocol):
    """Execution capabilities the dispatcher relies on"""

    def run(self, line: str) -> int:
        """Run a shell line to completion and return its exit status"""
        ...

    def spawn(self, line: str, log_path: Path) -> int:
        """Start a shell line in the background without waiting for it"""
        ...

    def capture(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        """Run an argv list and capture its output"""
        ...


class ShellExecutor:
    """Runs command lines through the shell with inherited stdio.

    Command lines are executed as-is, so caller-supplied text substituted
    into them is subject to the shell's word splitting and expansion.
    """

    def __init__(self, cwd: Path):
        self.cwd = cwd
        self.spawned: list[subprocess.Popen] = []

    def run(self, line: str) -> int:
        console.print(f"\n[dim]Running: {escape(line)}[/dim]\n")

        try:
            result = subprocess.run(line, shell=True, cwd=self.cwd)
            return result.returncode
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted by user[/yellow]")
            return 130

    def spawn(self, line: str, log_path: Path) -> int:
        """Start a long-running server and return at once.

        The child runs in its own session and is never waited on; the
        matching stop command ends it with a pattern-based kill. Handles
        stay in ``spawned`` for the lifetime of the executor.
        """
        console.print(f"\n[dim]Starting in background: {escape(line)}[/dim]\n")

        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "ab") as log:
            proc = subprocess.Popen(
                line,
                shell=True,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=log,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        self.spawned.append(proc)

        console.print(f"[green]✓[/green] Started (pid {proc.pid})")
        console.print(f"[dim]Output: {log_path}[/dim]")
        return 0

    def capture(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        return subprocess.run(args, capture_output=True, text=True, cwd=self.cwd)
