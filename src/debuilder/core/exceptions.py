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

"""Debuilder exception types with associated exit codes."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DebuilderError(Exception):
    """Base class for Debuilder errors with an exit code."""

    message: str = "An error occurred"
    exit_code: int = field(default=1)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass
class ConfigError(DebuilderError):
    exit_code: int = field(default=1)


@dataclass
class MalformedVersionError(DebuilderError):
    """A version string does not have the ``<upstream>-<revision>`` shape."""

    exit_code: int = field(default=2)
    version: str = ""


@dataclass
class ChangelogUnavailableError(DebuilderError):
    """The changelog dump could not be obtained from the parser tool."""

    exit_code: int = field(default=3)


@dataclass
class MissingFieldError(DebuilderError):
    """A parsed changelog lacks a field the build depends on."""

    exit_code: int = field(default=4)
    field_name: str = ""


@dataclass
class CommandFailedError(DebuilderError):
    """An external command exited non-zero or could not be started.

    Attributes:
        command: Display form of the command (secrets masked).
        returncode: Exit status, or None if the process never started.
        output: Tail of the combined stdout/stderr, if captured.
    """

    exit_code: int = field(default=5)
    command: str = ""
    returncode: int | None = None
    output: str = ""


@dataclass
class ChangelogOrderError(DebuilderError):
    """A changelog entry was appended before a version was opened."""

    exit_code: int = field(default=6)


@dataclass
class BuildInterruptedError(DebuilderError):
    """Cancellation was observed at a command boundary."""

    message: str = "Build was interrupted"
    exit_code: int = field(default=130)


@dataclass
class SourceControlError(DebuilderError):
    """Source-control history could not be read."""

    exit_code: int = field(default=9)
