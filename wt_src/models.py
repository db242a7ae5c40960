#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Configuration models for the worktree command wrapper.
"""

import re
from typing import Literal, Tuple, Type
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
)

# ============================================================================
# Pydantic Models for Configuration
# ============================================================================


class BackendConfig(BaseModel):
    """Orchestration backend configuration"""

    compose_command: str = Field(
        default="docker compose", description="Orchestration tool command"
    )
    compose_file: str = Field(
        default="docker-compose.minimal.yml", description="Compose file path"
    )
    service: str = Field(
        default="workspace", description="Primary service for in-container commands"
    )
    user: str = Field(
        default="laradock", description="User for in-container commands"
    )
    container_filter: str = Field(
        default="ctndock-develop",
        description="Container name fragment shown by 'status'",
    )
    log_services: list[str] = Field(
        default_factory=lambda: ["workspace", "nginx"],
        description="Services that get a dedicated logs-<service> command",
    )

    @field_validator("compose_command", "compose_file", "service", "user")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty values"""
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("log_services")
    @classmethod
    def validate_log_services(cls, v: list[str]) -> list[str]:
        """Service names become command suffixes"""
        for name in v:
            if not re.fullmatch(r"[A-Za-z0-9][A-Za-z0-9_.-]*", name):
                raise ValueError(f"Invalid service name for logs: {name!r}")
        if len(set(v)) != len(v):
            raise ValueError("log_services contains duplicates")
        return v


class ToolsConfig(BaseModel):
    """In-container tool configuration"""

    node: Literal["npm", "yarn"] = Field(
        default="npm", description="Node package manager"
    )
    dev_server_pattern: str = Field(
        default="vite",
        description="Process pattern matched by 'npm-dev-stop'",
    )


class ServeConfig(BaseModel):
    """Development server configuration"""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Container port")


class BootstrapConfig(BaseModel):
    """Environment file bootstrap configuration"""

    template: str = Field(default=".env.dev", description="Template file")
    target: str = Field(default=".env", description="Working file created once")


class PortMapping(BaseModel):
    """Host to container port mapping"""

    name: str
    host: int = Field(ge=1, le=65535)
    container: int = Field(ge=1, le=65535)


class AccessUrl(BaseModel):
    """Access URL shown by 'status'"""

    name: str
    url: str


def _default_ports() -> list[PortMapping]:
    return [
        PortMapping(name="Laravel", host=8002, container=8000),
        PortMapping(name="Vite", host=5174, container=5173),
        PortMapping(name="SSH", host=2223, container=22),
        PortMapping(name="Nginx HTTP", host=8082, container=80),
        PortMapping(name="Nginx HTTPS", host=8444, container=443),
    ]


def _default_urls() -> list[AccessUrl]:
    return [
        AccessUrl(name="Laravel (artisan serve)", url="http://localhost:8002"),
        AccessUrl(name="Laravel (nginx)", url="http://localhost:8082"),
        AccessUrl(name="Vite", url="http://localhost:5174"),
        AccessUrl(name="SSH", url="ssh laradock@localhost -p 2223"),
    ]


class Config(BaseSettings):
    """Main configuration model"""

    model_config = SettingsConfigDict(
        env_prefix="WT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    worktree: str = Field(default="Develop", description="Worktree label")
    backend: BackendConfig = Field(default_factory=BackendConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    serve: ServeConfig = Field(default_factory=ServeConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    ports: list[PortMapping] = Field(default_factory=_default_ports)
    urls: list[AccessUrl] = Field(default_factory=_default_urls)

    @model_validator(mode="after")
    def check_port_conflicts(self) -> "Config":
        """Check for duplicate host ports"""
        seen = set[int]()
        duplicates: list[str] = []
        for mapping in self.ports:
            if mapping.host in seen:
                duplicates.append(f"{mapping.name}:{mapping.host}")
            seen.add(mapping.host)

        if duplicates:
            raise ValueError(f"Port conflicts detected: {', '.join(duplicates)}")

        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources priority.
        Priority: env vars > YAML (init) > defaults

        The project's .env belongs to the application in the container,
        so it is never read here.
        """
        return env_settings, init_settings
