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

"""Blocking execution of external commands on behalf of the orchestrator.

Three call forms cover every use the build makes of external tools:

- ``run`` raises CommandFailedError unless the command exits 0,
- ``run_for_output`` does the same and returns captured stdout,
- ``run_for_result`` never raises on a non-zero exit and returns a bool,
  for existence checks such as "is this key already imported".

Cancellation is cooperative: a set cancel event is observed before each
command starts, and a KeyboardInterrupt while a command runs is converted
into BuildInterruptedError.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import threading

from debuilder.build.command import Command
from debuilder.build.errors import PREFIX
from debuilder.core.exceptions import BuildInterruptedError, CommandFailedError
from debuilder.core.run import activity

logger = logging.getLogger(__name__)

# Lines of command output kept on CommandFailedError
OUTPUT_TAIL_LINES = 20


def _tail(text: str, lines: int = OUTPUT_TAIL_LINES) -> str:
    return "\n".join(text.splitlines()[-lines:])


class CommandRunner:
    """Runs Commands as subprocesses and reports progress.

    Args:
        prefix: Label used for announce() activity lines.
        cancel_event: Set from another thread to cancel the build.
        base_env: Environment the commands start from (default: os.environ).
    """

    def __init__(
        self,
        prefix: str = PREFIX,
        cancel_event: threading.Event | None = None,
        base_env: dict[str, str] | None = None,
    ) -> None:
        self.prefix = prefix
        self.cancel_event = cancel_event or threading.Event()
        self.base_env = dict(os.environ if base_env is None else base_env)

    def announce(self, message: str, *args: object) -> None:
        """Emit a progress line; ``{0}``-style placeholders take ``args``."""
        activity(self.prefix, message.format(*args) if args else message)

    def _check_cancelled(self, command: Command) -> None:
        if self.cancel_event.is_set():
            raise BuildInterruptedError(f"Interrupted before running: {command.display()}")

    def _execute(self, command: Command) -> subprocess.CompletedProcess[str]:
        self._check_cancelled(command)
        env = {**self.base_env, **command.env}
        logger.debug("Running %s", command.display())
        try:
            result = subprocess.run(
                command.argv(),
                cwd=command.cwd,
                env=env,
                capture_output=True,
                text=True,
            )
        except KeyboardInterrupt as e:
            self.cancel_event.set()
            raise BuildInterruptedError(f"Interrupted while running: {command.display()}") from e
        except OSError as e:
            raise CommandFailedError(
                f"Cannot start {command.program}: {e.strerror or e}",
                command=command.display(),
            ) from e

        # Output goes to the (possibly captured) standard streams for the run log.
        if result.stdout:
            sys.stdout.write(result.stdout)
        if result.stderr:
            sys.stderr.write(result.stderr)
        logger.debug("Exit status %d from %s", result.returncode, command.program)
        return result

    def _checked(self, command: Command) -> subprocess.CompletedProcess[str]:
        result = self._execute(command)
        if result.returncode != 0:
            raise CommandFailedError(
                f"Command exited with status {result.returncode}: {command.display()}",
                command=command.display(),
                returncode=result.returncode,
                output=_tail((result.stdout or "") + (result.stderr or "")),
            )
        return result

    def run(self, command: Command) -> None:
        self._checked(command)

    def run_for_output(self, command: Command) -> str:
        return self._checked(command).stdout

    def run_for_result(self, command: Command) -> bool:
        try:
            return self._execute(command).returncode == 0
        except CommandFailedError:
            return False
