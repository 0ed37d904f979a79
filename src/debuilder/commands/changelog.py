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

"""Implementation of `debuilder changelog` and `debuilder next-version`."""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from debuilder.build.runner import CommandRunner
from debuilder.core.exceptions import DebuilderError, MalformedVersionError
from debuilder.core.paths import resolve_debian_dir
from debuilder.core.run import activity
from debuilder.debpkg.changelog import read_changelog
from debuilder.debpkg.version import parse_version


def changelog(
    path_to_debian: str = typer.Argument(".", help="Workspace-relative package directory, with or without the trailing debian"),
    workspace: str = typer.Option(".", "-w", "--workspace", help="Workspace root"),
) -> None:
    """Show the fields of the latest changelog entry."""
    debian_dir = resolve_debian_dir(Path(workspace), path_to_debian)
    try:
        fields = read_changelog(CommandRunner(), debian_dir)
    except DebuilderError as e:
        activity("changelog", f"ERROR: {e.message}")
        sys.exit(e.exit_code)

    table = Table(title=str(debian_dir / "changelog"))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in fields.items():
        table.add_row(name, value)
    Console().print(table)


def next_version(
    version: str = typer.Argument(..., help="Current version, e.g. 1.2.0-3"),
) -> None:
    """Print the version a new changelog entry would get."""
    try:
        current = parse_version(version)
    except MalformedVersionError as e:
        activity("version", f"ERROR: {e.message}")
        sys.exit(e.exit_code)
    typer.echo(current.next_revision().format())
