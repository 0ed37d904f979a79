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

"""Error reporting helpers and exit codes for build phases.

Every phase logs both a human-readable activity line and a structured event
for machine consumption. The run context is optional so phases can execute
without a run directory (library use and tests).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from debuilder.core.run import activity

if TYPE_CHECKING:
    from debuilder.core.run import RunContext

PREFIX = "debian-package-builder"
ABORT_MESSAGE = "Aborting: {0}"


def log_phase_event(
    run: RunContext | None,
    phase: str,
    message: str,
    event_key: str,
    **event_data: Any,
) -> None:
    """Log a phase activity message and structured event together.

    Args:
        run: RunContext for structured logging, or None.
        phase: Phase label for the activity line.
        message: Human-readable message.
        event_key: Event key, e.g. "changelog.open".
        **event_data: Additional data for the event.
    """
    activity(phase, message)
    if run is not None:
        run.log_event({"event": event_key, **event_data})


def phase_error(
    run: RunContext | None,
    message: str,
    exit_code: int,
    *,
    phase: str = PREFIX,
    event_key: str = "build.aborted",
    **event_data: Any,
) -> int:
    """Log an abort in the uniform ``[prefix] Aborting: <detail>`` form.

    Also records a structured event and a failed run summary.

    Returns:
        The exit_code parameter, for use in ``return phase_error(...)``.
    """
    activity(phase, ABORT_MESSAGE.format(message))

    if run is not None:
        run.log_event({
            "event": event_key,
            "message": message,
            "exit_code": exit_code,
            **event_data,
        })
        run.write_summary(status="failed", error=message, exit_code=exit_code)

    return exit_code


def phase_warning(
    run: RunContext | None,
    phase: str,
    message: str,
    *,
    event_key: str | None = None,
    **event_data: Any,
) -> None:
    """Log a phase warning without affecting exit status."""
    activity(phase, f"Warning: {message}")
    if run is not None:
        run.log_event({"event": event_key or f"{phase}.warning", "message": message, **event_data})


EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_MALFORMED_VERSION = 2
EXIT_CHANGELOG_UNAVAILABLE = 3
EXIT_MISSING_FIELD = 4
EXIT_COMMAND_FAILED = 5
EXIT_CHANGELOG_ORDER = 6
EXIT_IO_ERROR = 8
EXIT_SOURCE_CONTROL_ERROR = 9
EXIT_INTERRUPTED = 130
