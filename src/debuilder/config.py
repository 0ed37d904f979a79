# This file is part of Debuilder, a tool for building Debian packages from a
# changelog and its source history.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only
#
# Debuilder is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License version 3, as published by the
# Free Software Foundation.
#
# Debuilder is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranties of MERCHANTABILITY,
# SATISFACTORY QUALITY, or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# Debuilder. If not, see <http://www.gnu.org/licenses/>.

"""Configuration utilities for Debuilder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from debuilder.core.exceptions import ConfigError

DEFAULT_CONFIG: dict[str, Any] = {
    "account": {
        "name": "Debuilder",
        "email": "",
        "passphrase": "",
        "public_key": "",
        "private_key": "",
        "public_key_file": "",
        "private_key_file": "",
    },
    "build": {
        "generate_changelog": True,
        "build_even_when_no_changes": False,
        "distributor": "debian",
        "release_commit_message": "",
        "bootstrap_commands": [
            "sudo apt-get update",
            "sudo apt-get install -y aptitude pbuilder",
        ],
    },
    "paths": {
        "runs_root": "~/.cache/debuilder/runs",
        "artifacts_root": "~/.cache/debuilder/artifacts",
    },
}


def get_config_path() -> Path:
    """Return the path to the config file (DEBUILDER_CONFIG overrides it)."""
    override = os.environ.get("DEBUILDER_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "debuilder" / "config.yaml"


def ensure_config_exists() -> None:
    """Create the config file with defaults if it does not exist."""
    cfg_path = get_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    if not cfg_path.exists():
        cfg_path.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False))


def load_config() -> dict[str, Any]:
    """Load configuration from disk and merge with defaults.

    Top-level sections are merged key by key with DEFAULT_CONFIG, so a file
    that only sets ``account.email`` still gets every other default.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    ensure_config_exists()
    cfg_path = get_config_path()
    try:
        raw = yaml.safe_load(cfg_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid configuration in {cfg_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration in {cfg_path} must be a mapping")

    merged: dict[str, Any] = {}
    for key, val in DEFAULT_CONFIG.items():
        if key in raw and isinstance(raw[key], dict):
            merged[key] = {**val, **raw[key]}
        elif isinstance(val, dict):
            merged[key] = dict(val)
        else:
            merged[key] = raw.get(key, val)

    for pkey, pval in merged.get("paths", {}).items():
        merged["paths"][pkey] = str(Path(str(pval)).expanduser())

    return merged


def write_config(data: dict[str, Any]) -> None:
    """Write the provided data as YAML to the config path."""
    cfg_path = get_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(yaml.safe_dump(data, sort_keys=False))
