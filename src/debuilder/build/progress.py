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

"""Progress display for the long-running build steps.

Dependency satisfaction and the package build can take minutes. While one
runs, a Rich progress line on the terminal shows the build state, the
command (secrets masked) and the elapsed time. Off a terminal, or when
disabled, a plain activity line is printed as the step starts instead.
Either way a closing line reports how long the step took. Nothing here is
written into the run's captured logs.
"""

from __future__ import annotations

import contextlib
import sys
import time
from collections.abc import Iterator
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from debuilder.core.run import activity

if TYPE_CHECKING:
    from debuilder.build.command import Command
    from debuilder.build.types import BuildState


def on_terminal() -> bool:
    """Return True if the real stdout is a terminal."""
    stream = sys.__stdout__
    return stream is not None and not stream.closed and stream.isatty()


def describe_step(state: BuildState, command: Command) -> str:
    return f"{state.value}: {command.display()}"


@contextlib.contextmanager
def step_progress(prefix: str, state: BuildState, command: Command, disable: bool = False) -> Iterator[None]:
    """Show progress for ``command`` while the block runs it.

    Args:
        prefix: Activity prefix, e.g. "debian-package-builder".
        state: Build state the command belongs to.
        command: The command being run; only its display form is shown.
        disable: Never draw the live progress line.
    """
    description = describe_step(state, command)
    started = time.monotonic()

    if disable or not on_terminal():
        activity(prefix, description)
        yield
    else:
        console = Console(file=sys.__stdout__, force_terminal=True)
        columns = (
            SpinnerColumn(),
            TextColumn(f"[{prefix}] {{task.description}}", markup=False),
            TimeElapsedColumn(),
        )
        with Progress(*columns, console=console, transient=True) as progress:
            progress.add_task(description, total=None)
            yield

    activity(prefix, f"{state.value} finished in {time.monotonic() - started:.1f}s")
