#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: <<spdxid>>
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Docker worktree command package.
"""

from .backend import Executor, ShellExecutor
from .commands import create_app, main
from .dispatcher import BootstrapOutcome, Dispatcher
from .models import (
    AccessUrl,
    BackendConfig,
    BootstrapConfig,
    Config,
    PortMapping,
    ServeConfig,
    ToolsConfig,
)
from .registry import CommandSpec, Target, UnknownCommand, build_registry

__all__ = [
    # Commands
    "create_app",
    "main",
    # Dispatcher
    "Dispatcher",
    "BootstrapOutcome",
    # Execution
    "Executor",
    "ShellExecutor",
    # Registry
    "CommandSpec",
    "Target",
    "UnknownCommand",
    "build_registry",
    # Models
    "Config",
    "BackendConfig",
    "ToolsConfig",
    "ServeConfig",
    "BootstrapConfig",
    "PortMapping",
    "AccessUrl",
]
