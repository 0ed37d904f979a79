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

"""Path helpers for locating a package's control directory."""

from __future__ import annotations

from pathlib import Path

DEBIAN_DIRNAME = "debian"


def resolve_debian_dir(workspace: Path, path_to_debian: str) -> Path:
    """Resolve the control-file directory of a package inside a workspace.

    ``path_to_debian`` may name the ``debian`` directory itself or the
    package root that contains it; "pkg", "pkg/debian" and "pkg/debian/"
    all resolve to the same directory.

    Args:
        workspace: Workspace root of the build.
        path_to_debian: Workspace-relative path from configuration.

    Returns:
        Absolute path to the ``debian`` directory.
    """
    relative = Path(path_to_debian.strip() or ".")
    base = workspace.expanduser().resolve()
    if relative.name == DEBIAN_DIRNAME:
        return (base / relative).resolve()
    return (base / relative / DEBIAN_DIRNAME).resolve()


def module_root(debian_dir: Path) -> Path:
    """Return the package module root (the parent of the ``debian`` directory)."""
    return debian_dir.parent
