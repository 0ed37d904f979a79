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

"""Build module for Debuilder.

Provides the build state machine, its phase helpers and exit codes.
"""

from debuilder.build.errors import (
    ABORT_MESSAGE,
    EXIT_CHANGELOG_ORDER,
    EXIT_CHANGELOG_UNAVAILABLE,
    EXIT_COMMAND_FAILED,
    EXIT_CONFIG_ERROR,
    EXIT_INTERRUPTED,
    EXIT_IO_ERROR,
    EXIT_MALFORMED_VERSION,
    EXIT_MISSING_FIELD,
    EXIT_SOURCE_CONTROL_ERROR,
    EXIT_SUCCESS,
    PREFIX,
    log_phase_event,
    phase_error,
    phase_warning,
)
from debuilder.build.types import BuildOutcome, BuildState

__all__ = [
    "ABORT_MESSAGE",
    "EXIT_CHANGELOG_ORDER",
    "EXIT_CHANGELOG_UNAVAILABLE",
    "EXIT_COMMAND_FAILED",
    "EXIT_CONFIG_ERROR",
    "EXIT_INTERRUPTED",
    "EXIT_IO_ERROR",
    "EXIT_MALFORMED_VERSION",
    "EXIT_MISSING_FIELD",
    "EXIT_SOURCE_CONTROL_ERROR",
    "EXIT_SUCCESS",
    "PREFIX",
    "BuildOutcome",
    "BuildState",
    "log_phase_event",
    "phase_error",
    "phase_warning",
]
