#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI commands for worktree management.
"""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from rich.console import Console

from .dispatcher import Dispatcher
from .registry import EXIT_UNKNOWN_COMMAND, CommandSpec, UnknownCommand
from .schema_utils import generate_config_schema

console = Console()

# Trailing words (including ones that look like options) go to the command
PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}
# --help belongs to the tool in the container, not to wt
VERBATIM = {**PASSTHROUGH, "help_option_names": []}


def _join_argument(cmd: Optional[str], extra: list[str]) -> Optional[str]:
    parts = ([cmd] if cmd is not None else []) + list(extra)
    return " ".join(parts) if parts else None


def _register(app: typer.Typer, dispatcher: Dispatcher, spec: CommandSpec):
    """Add one registry entry as a subcommand"""
    if spec.takes_argument:

        @app.command(name=spec.name, help=spec.help, context_settings=VERBATIM)
        def _with_argument(
            ctx: typer.Context,
            cmd: Annotated[
                Optional[str],
                typer.Argument(help="Arguments passed through verbatim"),
            ] = None,
        ):
            raise typer.Exit(dispatcher.run(spec.name, _join_argument(cmd, ctx.args)))

    else:

        # Extra words are accepted and ignored
        @app.command(name=spec.name, help=spec.help, context_settings=PASSTHROUGH)
        def _without_argument():
            raise typer.Exit(dispatcher.run(spec.name))


# ============================================================================
# CLI Application
# ============================================================================


def create_app(dispatcher: Dispatcher) -> typer.Typer:
    """Build the CLI from the dispatcher's registry"""
    app = typer.Typer(
        name="wt",
        help="Docker worktree commands for the Laravel workspace",
        add_completion=False,
    )
    schema_app = typer.Typer(help="Schema utilities")
    app.add_typer(schema_app, name="schema")

    @app.callback(invoke_without_command=True)
    def default(ctx: typer.Context):
        """Show the command listing when no command is given"""
        if ctx.invoked_subcommand is None:
            raise typer.Exit(dispatcher.run("help"))

    for spec in dispatcher.registry.values():
        _register(app, dispatcher, spec)

    @app.command("run", context_settings=PASSTHROUGH)
    def run_named(
        ctx: typer.Context,
        name: Annotated[str, typer.Argument(help="Command name")],
        cmd: Annotated[
            Optional[str], typer.Argument(help="Arguments passed through verbatim")
        ] = None,
    ):
        """Run a command by name"""
        try:
            code = dispatcher.run(name, _join_argument(cmd, ctx.args))
        except UnknownCommand as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(EXIT_UNKNOWN_COMMAND)
        raise typer.Exit(code)

    @app.command("show", context_settings=PASSTHROUGH)
    def show(
        ctx: typer.Context,
        name: Annotated[str, typer.Argument(help="Command name")],
        cmd: Annotated[
            Optional[str], typer.Argument(help="Arguments passed through verbatim")
        ] = None,
    ):
        """Print the invocations a command would run, without running them"""
        try:
            lines = dispatcher.render(name, _join_argument(cmd, ctx.args))
        except UnknownCommand as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(EXIT_UNKNOWN_COMMAND)

        if not lines:
            console.print(f"[dim]'{name}' does not call docker compose[/dim]")
        for line in lines:
            console.print(line, markup=False, highlight=False)

    @schema_app.command("generate")
    def schema_generate():
        """Generate editor schema for wt.yaml"""
        try:
            schema_path = generate_config_schema(dispatcher.project_root)
            console.print(f"[green]✓[/green] Generated {schema_path}")
        except OSError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    return app


def main():
    """Main entry point"""
    project_root = Path.cwd()
    try:
        config = Dispatcher.load_config(project_root)
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: invalid configuration: {e}[/red]")
        sys.exit(1)

    app = create_app(Dispatcher(project_root, config))
    app()
