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

"""Tests for debuilder.core.exceptions module."""

from __future__ import annotations

import pytest

from debuilder.build import errors
from debuilder.core import exceptions


class TestExitCodes:
    """Each error kind maps to a distinct exit code."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (exceptions.ConfigError, errors.EXIT_CONFIG_ERROR),
            (exceptions.MalformedVersionError, errors.EXIT_MALFORMED_VERSION),
            (exceptions.ChangelogUnavailableError, errors.EXIT_CHANGELOG_UNAVAILABLE),
            (exceptions.MissingFieldError, errors.EXIT_MISSING_FIELD),
            (exceptions.CommandFailedError, errors.EXIT_COMMAND_FAILED),
            (exceptions.ChangelogOrderError, errors.EXIT_CHANGELOG_ORDER),
            (exceptions.SourceControlError, errors.EXIT_SOURCE_CONTROL_ERROR),
            (exceptions.BuildInterruptedError, errors.EXIT_INTERRUPTED),
        ],
    )
    def test_default_exit_code(self, error: type[exceptions.DebuilderError], code: int) -> None:
        assert error().exit_code == code

    def test_all_derive_from_base(self) -> None:
        assert issubclass(exceptions.MissingFieldError, exceptions.DebuilderError)
        assert issubclass(exceptions.DebuilderError, Exception)


class TestMessages:
    """Tests for error messages and extra fields."""

    def test_str_is_message(self) -> None:
        assert str(exceptions.ConfigError("account.email is not configured")) == "account.email is not configured"

    def test_missing_field_name(self) -> None:
        error = exceptions.MissingFieldError("No Version", field_name="Version")
        assert error.field_name == "Version"

    def test_command_failed_details(self) -> None:
        error = exceptions.CommandFailedError("failed", command="debuild", returncode=2, output="tail")
        assert (error.command, error.returncode, error.output) == ("debuild", 2, "tail")

    def test_can_be_raised(self) -> None:
        with pytest.raises(exceptions.DebuilderError, match="bad version"):
            raise exceptions.MalformedVersionError("bad version", version="1.0")
