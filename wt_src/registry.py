#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command registry: command name -> invocation templates.

Backend templates are compose subcommands rendered with Jinja2; the
dispatcher prefixes them with the compose command and file. Available
template variables: ``user``, ``service``, ``cmd``, ``node``, ``serve``,
``tools``, plus the entry's own ``variables``.
"""

from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict

from .models import Config


class Target(str, Enum):
    """Where a command is executed"""

    HOST = "host"
    BACKEND = "backend"
    FILESYSTEM = "filesystem"
    COMPOSITE = "composite"


class CommandSpec(BaseModel):
    """A single registry entry"""

    model_config = ConfigDict(frozen=True)

    name: str
    help: str
    group: str
    target: Target = Target.BACKEND
    templates: tuple[str, ...] = ()
    takes_argument: bool = False
    detached: bool = False
    tolerated_exit_codes: tuple[int, ...] = ()
    steps: tuple[str, ...] = ()
    # Extra template values for this entry
    variables: dict[str, str] = {}


class UnknownCommand(KeyError):
    """Raised when a command name is not in the registry"""

    def __init__(self, name: str, known: list[str]):
        super().__init__(name)
        self.name = name
        self.known = known

    def __str__(self) -> str:
        return f"Unknown command: {self.name!r}. Run 'wt help' to list commands."


EXIT_UNKNOWN_COMMAND = 2

# As the configured user in the primary service
EXEC = "exec --user={{ user }} {{ service }}"
# Detached runs have no terminal attached
EXEC_DETACHED = "exec -T --user={{ user }} {{ service }}"


def _backend(
    name: str, help: str, group: str, *templates: str, **kwargs
) -> CommandSpec:
    return CommandSpec(name=name, help=help, group=group, templates=templates, **kwargs)


def _artisan(
    name: str, help: str, subcommand: str, group: str = "Laravel"
) -> CommandSpec:
    return _backend(name, help, group, f"{EXEC} php artisan {subcommand}")


def build_registry(config: Config) -> dict[str, CommandSpec]:
    """Build the ordered command registry for a configuration"""
    specs: list[CommandSpec] = [
        CommandSpec(
            name="help",
            help="Show this help message",
            group="Help",
            target=Target.HOST,
        ),
        # Container management
        _backend("up", "Start workspace and nginx containers", "Containers", "up -d"),
        _backend("down", "Stop and remove containers", "Containers", "down"),
        _backend("restart", "Restart all containers", "Containers", "restart"),
        _backend("stop", "Stop containers without removing", "Containers", "stop"),
        _backend("start", "Start stopped containers", "Containers", "start"),
        _backend("ps", "Show running containers", "Containers", "ps"),
        _backend("build", "Build or rebuild containers", "Containers", "build"),
        _backend(
            "rebuild", "Force rebuild containers", "Containers", "build --no-cache"
        ),
        # Container access
        _backend(
            "shell",
            "Enter workspace container as the configured user",
            "Access",
            f"{EXEC} bash",
        ),
        _backend(
            "root",
            "Enter workspace container as root",
            "Access",
            "exec {{ service }} bash",
        ),
        # Logs
        _backend("logs", "Show all container logs", "Logs", "logs -f"),
    ]

    for service in config.backend.log_services:
        specs.append(
            _backend(
                f"logs-{service}",
                f"Show {service} logs",
                "Logs",
                "logs -f {{ log_service }}",
                variables={"log_service": service},
            )
        )

    specs += [
        # Laravel
        _backend(
            "artisan",
            'Run artisan command (usage: wt artisan "migrate")',
            "Laravel",
            f"{EXEC} php artisan {{{{ cmd }}}}",
            takes_argument=True,
        ),
        _backend(
            "serve",
            "Start Laravel development server in the background",
            "Laravel",
            f"{EXEC_DETACHED} php artisan serve"
            " --host={{ serve.host }} --port={{ serve.port }}",
            detached=True,
        ),
        _backend(
            "serve-stop",
            "Stop Laravel development server",
            "Laravel",
            f'{EXEC} pkill -f "artisan serve"',
            tolerated_exit_codes=(1,),
        ),
        _artisan("migrate", "Run database migrations", "migrate"),
        _artisan("seed", "Run database seeders", "db:seed"),
        _artisan("fresh", "Fresh migration with seeders", "migrate:fresh --seed"),
        _artisan("tinker", "Start Laravel tinker", "tinker"),
        _artisan("queue", "Start queue worker", "queue:work"),
        _backend(
            "cache-clear",
            "Clear all Laravel caches",
            "Laravel",
            f"{EXEC} php artisan cache:clear",
            f"{EXEC} php artisan config:clear",
            f"{EXEC} php artisan route:clear",
            f"{EXEC} php artisan view:clear",
        ),
        # Composer
        _backend(
            "composer",
            'Run composer command (usage: wt composer "install")',
            "Composer",
            f"{EXEC} composer {{{{ cmd }}}}",
            takes_argument=True,
        ),
        _backend(
            "composer-install",
            "Install composer dependencies",
            "Composer",
            f"{EXEC} composer install",
        ),
        _backend(
            "composer-update",
            "Update composer dependencies",
            "Composer",
            f"{EXEC} composer update",
        ),
        _backend(
            "composer-dump",
            "Dump composer autoload",
            "Composer",
            f"{EXEC} composer dump-autoload",
        ),
        # Node
        _backend(
            "npm",
            'Run npm/yarn command (usage: wt npm "install")',
            "Node",
            f"{EXEC} {{{{ node }}}} {{{{ cmd }}}}",
            takes_argument=True,
        ),
        _backend(
            "npm-install",
            "Install node dependencies",
            "Node",
            f"{EXEC} {{{{ node }}}} install",
        ),
        _backend(
            "npm-dev",
            "Start Vite development server in the background",
            "Node",
            f"{EXEC_DETACHED} {{{{ node }}}} run dev",
            detached=True,
        ),
        _backend(
            "npm-dev-stop",
            "Stop Vite development server",
            "Node",
            f'{EXEC} pkill -f "{{{{ tools.dev_server_pattern }}}}"',
            tolerated_exit_codes=(1,),
        ),
        _backend(
            "npm-build",
            "Build assets for production",
            "Node",
            f"{EXEC} {{{{ node }}}} run build",
        ),
        _backend(
            "npm-watch",
            "Watch for asset changes",
            "Node",
            f"{EXEC} {{{{ node }}}} run watch",
        ),
        # Testing
        _artisan("test", "Run all tests", "test", group="Testing"),
        _artisan(
            "test-parallel", "Run tests in parallel", "test --parallel", group="Testing"
        ),
        _backend("pest", "Run Pest tests", "Testing", f"{EXEC} ./vendor/bin/pest"),
        # Status
        CommandSpec(
            name="status",
            help="Show container status and access URLs",
            group="Status",
            target=Target.HOST,
        ),
        CommandSpec(
            name="ports",
            help="Show port mappings",
            group="Status",
            target=Target.HOST,
        ),
        # Cleanup
        _backend("clean", "Clean up containers and volumes", "Cleanup", "down -v"),
        _backend(
            "clean-orphans",
            "Remove orphan containers",
            "Cleanup",
            "up -d --remove-orphans",
        ),
        # Setup
        CommandSpec(
            name="bootstrap",
            help="Initialize environment file from template",
            group="Setup",
            target=Target.FILESYSTEM,
        ),
        CommandSpec(
            name="setup",
            help="Complete setup: bootstrap, build, and start containers",
            group="Setup",
            target=Target.COMPOSITE,
            steps=("bootstrap", "build", "up"),
        ),
    ]

    return {spec.name: spec for spec in specs}


def lookup(registry: Mapping[str, CommandSpec], name: str) -> CommandSpec:
    """Return the registry entry for ``name``"""
    try:
        return registry[name]
    except KeyError:
        raise UnknownCommand(name, list(registry)) from None
