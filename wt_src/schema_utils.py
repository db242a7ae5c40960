#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Schema generation utilities."""

from __future__ import annotations

import json
from pathlib import Path

from .dispatcher import CONFIG_FILENAME
from .models import Config

SCHEMA_FILENAME = "wt.schema.json"


def build_config_schema() -> dict:
    """JSON schema for wt.yaml, with WT_* override hints."""
    config_schema = Config.model_json_schema()
    config_schema.setdefault("$schema", "https://json-schema.org/draft/2020-12/schema")
    config_schema["title"] = CONFIG_FILENAME
    config_schema["description"] = (
        f"Settings for the wt worktree commands. Every key is optional; "
        f"environment variables such as WT_BACKEND__USER override {CONFIG_FILENAME}."
    )
    return config_schema


def generate_config_schema(project_root: Path) -> Path:
    """Write the wt.yaml schema where editors pick it up."""
    schema_path = project_root / ".vscode" / SCHEMA_FILENAME
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    schema_path.write_text(
        json.dumps(build_config_schema(), indent=2, ensure_ascii=True) + "\n",
        encoding="utf-8",
    )

    return schema_path
