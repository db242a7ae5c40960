import pytest

from wt_src.models import Config
from wt_src.registry import Target, UnknownCommand, build_registry, lookup

COMMAND_NAMES = [
    "help",
    "up",
    "down",
    "restart",
    "stop",
    "start",
    "ps",
    "build",
    "rebuild",
    "shell",
    "root",
    "logs",
    "logs-workspace",
    "logs-nginx",
    "artisan",
    "serve",
    "serve-stop",
    "migrate",
    "seed",
    "fresh",
    "tinker",
    "queue",
    "cache-clear",
    "composer",
    "composer-install",
    "composer-update",
    "composer-dump",
    "npm",
    "npm-install",
    "npm-dev",
    "npm-dev-stop",
    "npm-build",
    "npm-watch",
    "test",
    "test-parallel",
    "pest",
    "status",
    "ports",
    "clean",
    "clean-orphans",
    "bootstrap",
    "setup",
]


@pytest.fixture
def registry():
    return build_registry(Config())


def test_registry_contains_every_command_in_order(registry):
    assert list(registry) == COMMAND_NAMES


def test_only_passthrough_commands_take_an_argument(registry):
    assert sorted(n for n, s in registry.items() if s.takes_argument) == [
        "artisan",
        "composer",
        "npm",
    ]


def test_only_servers_are_detached(registry):
    assert sorted(n for n, s in registry.items() if s.detached) == ["npm-dev", "serve"]


@pytest.mark.parametrize("name", ["help", "status", "ports"])
def test_informational_commands_run_on_host(registry, name):
    assert registry[name].target is Target.HOST
    assert registry[name].templates == ()


def test_setup_composes_bootstrap_build_up(registry):
    setup = registry["setup"]
    assert setup.target is Target.COMPOSITE
    assert setup.steps == ("bootstrap", "build", "up")
    assert registry["bootstrap"].target is Target.FILESYSTEM


def test_cache_clear_has_four_templates(registry):
    assert len(registry["cache-clear"].templates) == 4


def test_every_entry_has_help(registry):
    assert all(spec.help for spec in registry.values())


def test_log_commands_follow_configured_services():
    registry = build_registry(Config(backend={"log_services": ["app", "db"]}))
    assert [n for n in registry if n.startswith("logs")] == [
        "logs",
        "logs-app",
        "logs-db",
    ]


def test_log_service_names_are_template_values():
    registry = build_registry(Config(backend={"log_services": ["app.v2"]}))
    spec = registry["logs-app.v2"]
    assert spec.variables == {"log_service": "app.v2"}
    assert "app.v2" not in spec.templates[0]


def test_lookup_unknown_name(registry):
    with pytest.raises(UnknownCommand) as exc_info:
        lookup(registry, "artisan-serve")

    assert "artisan-serve" in str(exc_info.value)
    assert exc_info.value.known == COMMAND_NAMES


def test_specs_are_frozen(registry):
    with pytest.raises(Exception):
        registry["up"].name = "down"
