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

"""Artifact collection for built packages.

Finds the package files produced for a version next to the package module
root and copies them into the build's artifact area, recording checksums.
"""

from __future__ import annotations

import hashlib
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from debuilder.debpkg.version import strip_epoch

if TYPE_CHECKING:
    from debuilder.build.runner import CommandRunner


@dataclass
class CollectedFile:
    """Information about a collected file."""

    source_path: Path
    copied_path: Path
    sha256: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_path": str(self.source_path),
            "copied_path": str(self.copied_path),
            "sha256": self.sha256,
            "size": self.size,
        }


def artifact_mask(version: str) -> str:
    """Glob matching the binary packages of ``version``.

    Package file names never carry the epoch, so it is dropped.
    """
    return f"*{strip_epoch(version)}*.deb"


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256 = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def copy_file_with_checksum(source: Path, dest_dir: Path) -> CollectedFile:
    """Copy ``source`` into ``dest_dir``, replacing any file of the same name."""
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / source.name
    if not (dest.exists() and dest.samefile(source)):
        shutil.copy2(source, dest)
    return CollectedFile(
        source_path=source.resolve(),
        copied_path=dest.resolve(),
        sha256=compute_sha256(dest),
        size=dest.stat().st_size,
    )


def archive_artifacts(
    runner: CommandRunner,
    search_dir: Path,
    artifacts_dir: Path,
    version: str,
) -> list[CollectedFile]:
    """Copy every file matching the version's artifact mask.

    No match is not an error; an empty list is returned.
    """
    collected: list[CollectedFile] = []
    for path in sorted(search_dir.glob(artifact_mask(version))):
        if not path.is_file():
            continue
        runner.announce("Archiving file <{0}> as a build artifact", path.name)
        collected.append(copy_file_with_checksum(path, artifacts_dir))
    return collected
