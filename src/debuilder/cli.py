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

"""CLI application definition for Debuilder."""

from __future__ import annotations

from typer import Typer

from debuilder.commands.build import build
from debuilder.commands.changelog import changelog, next_version

app: Typer = Typer(
    name="debuilder",
    help="A tool for building Debian packages from a changelog and its source history.",
    add_completion=False,
)

app.command(name="build")(build)
app.command(name="changelog")(changelog)
app.command(name="next-version")(next_version)
