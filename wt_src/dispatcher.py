#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command dispatcher for worktree operations.
"""

import shutil
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import yaml
from jinja2 import Environment, StrictUndefined
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .backend import Executor, ShellExecutor
from .models import Config
from .registry import CommandSpec, Target, build_registry, lookup

# Rich Console for beautiful output
console = Console()

CONFIG_FILENAME = "wt.yaml"

# Go template for `docker ps --format`, not Jinja2
DOCKER_PS_FORMAT = "table {{.Names}}\t{{.Status}}\t{{.Ports}}"


class BootstrapOutcome(str, Enum):
    """Result of the guarded environment file copy"""

    CREATED = "created"
    EXISTS = "exists"


# ============================================================================
# Core Dispatcher
# ============================================================================


class Dispatcher:
    """Maps command names to external invocations"""

    def __init__(
        self,
        project_root: Path,
        config: Config,
        backend: Optional[Executor] = None,
        host: Optional[Executor] = None,
    ):
        self.project_root = project_root
        self.config = config
        self.backend: Executor = backend or ShellExecutor(project_root)
        self.host: Executor = host or ShellExecutor(project_root)
        self.registry = build_registry(config)
        self.logs_dir = project_root / "_build" / "logs"
        self._env = Environment(undefined=StrictUndefined, autoescape=False)
        self._handlers: dict[str, Callable[[], int]] = {
            "help": self.show_help,
            "status": self.show_status,
            "ports": self.show_ports,
            "bootstrap": self._run_bootstrap,
        }

    @staticmethod
    def load_config(project_root: Path) -> Config:
        """Load and validate configuration from wt.yaml and WT_* variables"""
        config_path = project_root / CONFIG_FILENAME
        data = {}
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"{config_path} must contain a mapping")

        return Config(**data)

    @property
    def compose_prefix(self) -> str:
        backend = self.config.backend
        return f"{backend.compose_command} -f {backend.compose_file}"

    def render(self, name: str, argument: Optional[str] = None) -> list[str]:
        """Render the backend invocations for a command without running them"""
        spec = lookup(self.registry, name)

        if spec.target is Target.COMPOSITE:
            lines: list[str] = []
            for step in spec.steps:
                step_spec = lookup(self.registry, step)
                if step_spec.target in (Target.BACKEND, Target.COMPOSITE):
                    lines += self.render(step)
                else:
                    lines.append(self._describe_step(step_spec))
            return lines

        context = {
            "user": self.config.backend.user,
            "service": self.config.backend.service,
            "node": self.config.tools.node,
            "tools": self.config.tools,
            "serve": self.config.serve,
            "cmd": (argument or "") if spec.takes_argument else "",
            **spec.variables,
        }
        return [
            f"{self.compose_prefix} {self._env.from_string(t).render(**context)}"
            for t in spec.templates
        ]

    def _describe_step(self, spec: CommandSpec) -> str:
        """Comment line standing in for a step that runs on the host"""
        if spec.target is Target.FILESYSTEM:
            settings = self.config.bootstrap
            return (
                f"# {spec.name}: copy {settings.template} -> {settings.target}"
                f" (skipped if {settings.target} exists)"
            )
        return f"# {spec.name}: {spec.help}"

    def run(self, name: str, argument: Optional[str] = None) -> int:
        """Run a command by name and return its exit status.

        Raises UnknownCommand before anything is executed when ``name``
        is not registered.
        """
        spec = lookup(self.registry, name)

        if spec.target is Target.BACKEND:
            return self._run_backend(spec, argument)
        if spec.target is Target.COMPOSITE:
            return self._run_composite(spec)
        return self._handlers[spec.name]()

    def _run_backend(self, spec: CommandSpec, argument: Optional[str]) -> int:
        for line in self.render(spec.name, argument):
            if spec.detached:
                code = self.backend.spawn(line, self.logs_dir / f"{spec.name}.log")
            else:
                code = self.backend.run(line)

            if code in spec.tolerated_exit_codes:
                code = 0
            if code != 0:
                return code

        return 0

    def _run_composite(self, spec: CommandSpec) -> int:
        for step in spec.steps:
            code = self.run(step)
            if code != 0:
                console.print(
                    f"[red]✗ {spec.name} stopped: '{step}' exited with {code}[/red]"
                )
                return code

        console.print(
            Panel(
                f"[green]✓[/green] {spec.name.capitalize()} complete!\n\n"
                "Run 'wt shell' to enter the workspace",
                title="[bold green]Success[/bold green]",
                border_style="green",
            )
        )
        return 0

    # ------------------------------------------------------------------------
    # Filesystem
    # ------------------------------------------------------------------------

    def bootstrap(self) -> BootstrapOutcome:
        """Copy the environment template unless the working file exists"""
        settings = self.config.bootstrap
        target = self.project_root / settings.target
        template = self.project_root / settings.template

        if target.exists():
            console.print(f"[yellow]{settings.target} file already exists[/yellow]")
            return BootstrapOutcome.EXISTS

        if not template.exists():
            raise FileNotFoundError(f"{template} not found")

        shutil.copy(template, target)
        console.print(
            f"[green]✓[/green] Created {settings.target} file from {settings.template}"
        )
        console.print(f"Please review and adjust ports in {settings.target} file")
        return BootstrapOutcome.CREATED

    def _run_bootstrap(self) -> int:
        try:
            self.bootstrap()
        except FileNotFoundError as e:
            console.print(f"[red]Error: {e}[/red]")
            return 1
        return 0

    # ------------------------------------------------------------------------
    # Host information
    # ------------------------------------------------------------------------

    def show_help(self) -> int:
        console.print("[bold]Docker Worktree Management Commands[/bold]")
        console.print()
        console.print("Usage: wt [command] [args]")
        console.print()

        table = Table(title="Available commands", header_style="bold magenta")
        table.add_column("Command", style="cyan", no_wrap=True)
        table.add_column("Description")

        group = None
        for spec in self.registry.values():
            if group is not None and spec.group != group:
                table.add_section()
            group = spec.group
            table.add_row(spec.name, spec.help)

        console.print(table)
        console.print()
        console.print("Examples:")
        console.print("  wt up                  # Start containers")
        console.print("  wt shell               # Enter workspace container")
        console.print('  wt artisan "migrate"   # Run artisan commands')
        return 0

    def running_containers(self) -> list[str]:
        """`docker ps` lines for this worktree's containers"""
        try:
            result = self.host.capture(
                ["docker", "ps", "--format", DOCKER_PS_FORMAT]
            )
        except FileNotFoundError:
            return []

        if result.returncode != 0:
            return []

        fragment = self.config.backend.container_filter
        return [line for line in result.stdout.splitlines() if fragment in line]

    def show_status(self) -> int:
        console.print("[bold]Container Status:[/bold]")
        containers = self.running_containers()
        if containers:
            for line in containers:
                console.print(line, markup=False, highlight=False)
        else:
            console.print("No containers running")
        console.print()

        table = Table(title="Access URLs", header_style="bold magenta")
        table.add_column("Service", style="cyan", no_wrap=True)
        table.add_column("URL", style="yellow")
        for access in self.config.urls:
            table.add_row(access.name, access.url)

        console.print(table)
        return 0

    def show_ports(self) -> int:
        console.print(
            f"[bold]Port Mappings for {self.config.worktree} Worktree:[/bold]"
        )
        table = Table(header_style="bold magenta")
        table.add_column("Service", style="cyan", no_wrap=True)
        table.add_column("Host -> Container", style="green")
        for mapping in self.config.ports:
            table.add_row(mapping.name, f"{mapping.host} -> {mapping.container}")

        console.print(table)
        return 0
