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

"""Build metadata published for downstream consumers.

A successful build records which source package and version it produced,
as a YAML document and as environment-style KEY=VALUE pairs.
"""

from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEBIAN_SOURCE_PACKAGE = "DEBIAN_SOURCE_PACKAGE"
DEBIAN_PACKAGE_VERSION = "DEBIAN_PACKAGE_VERSION"

METADATA_FILENAME = "debian-package.yaml"
ENV_FILENAME = "debian-package.env"


@dataclass
class PackageMetadata:
    """What a build produced.

    Attributes:
        source_package: The changelog's Source field.
        version: Effective version the package was built as.
        debian_dir: Control directory the build used.
        build_timestamp: UTC time the record was created.
        artifacts: File names archived for this build.
    """

    source_package: str
    version: str
    debian_dir: str = ""
    build_timestamp: str = field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat().replace("+00:00", "Z")
    )
    artifacts: list[str] = field(default_factory=list)

    def environment(self) -> dict[str, str]:
        return {
            DEBIAN_SOURCE_PACKAGE: self.source_package,
            DEBIAN_PACKAGE_VERSION: self.version,
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def write_env_file(environment: dict[str, str], path: Path) -> Path:
    """Write ``KEY=VALUE`` lines, one per variable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{k}={v}\n" for k, v in environment.items()), encoding="utf-8")
    return path


def publish_metadata(metadata: PackageMetadata, dest_dir: Path) -> tuple[Path, Path]:
    """Write the YAML record and the env file into ``dest_dir``.

    Returns:
        Paths of the metadata file and the env file.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    metadata_path = dest_dir / METADATA_FILENAME
    with metadata_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(metadata.to_dict(), f, default_flow_style=False, sort_keys=False)
    env_path = write_env_file(metadata.environment(), dest_dir / ENV_FILENAME)
    return metadata_path, env_path


def load_metadata(path: Path) -> PackageMetadata:
    """Load a record written by publish_metadata()."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return PackageMetadata(**data)
