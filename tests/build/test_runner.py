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

"""Tests for debuilder.build.runner module."""

from __future__ import annotations

import subprocess
import sys
import threading
from pathlib import Path
from unittest import mock

import pytest

from debuilder.build.command import Command
from debuilder.build.runner import CommandRunner
from debuilder.core.exceptions import BuildInterruptedError, CommandFailedError


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(["x"], returncode, stdout, stderr)


class TestRun:
    """Tests for CommandRunner.run and run_for_output."""

    def test_success(self) -> None:
        runner = CommandRunner(base_env={"PATH": "/usr/bin"})
        with mock.patch("debuilder.build.runner.subprocess.run", return_value=_completed()) as run_mock:
            runner.run(Command("true").with_env(FOO="bar"))

        args, kwargs = run_mock.call_args
        assert args[0] == ["true"]
        assert kwargs["env"] == {"PATH": "/usr/bin", "FOO": "bar"}

    def test_nonzero_exit_raises(self) -> None:
        runner = CommandRunner(base_env={})
        with mock.patch(
            "debuilder.build.runner.subprocess.run",
            return_value=_completed(2, "out", "err"),
        ):
            with pytest.raises(CommandFailedError) as exc_info:
                runner.run(Command("false"))

        assert exc_info.value.returncode == 2
        assert "out" in exc_info.value.output
        assert "err" in exc_info.value.output

    def test_failure_message_masks_secret(self) -> None:
        runner = CommandRunner(base_env={})
        with mock.patch("debuilder.build.runner.subprocess.run", return_value=_completed(1)):
            with pytest.raises(CommandFailedError) as exc_info:
                runner.run(Command("debuild").secret("hunter2", prefix="-p"))
        assert "hunter2" not in exc_info.value.message
        assert "hunter2" not in exc_info.value.command

    def test_missing_program_raises(self) -> None:
        runner = CommandRunner(base_env={})
        with mock.patch("debuilder.build.runner.subprocess.run", side_effect=FileNotFoundError(2, "No such file")):
            with pytest.raises(CommandFailedError) as exc_info:
                runner.run(Command("no-such-tool"))
        assert exc_info.value.returncode is None

    def test_run_for_output(self) -> None:
        runner = CommandRunner(base_env={})
        with mock.patch("debuilder.build.runner.subprocess.run", return_value=_completed(0, "Version: 1.0-1\n")):
            assert runner.run_for_output(Command("dpkg-parsechangelog")) == "Version: 1.0-1\n"

    def test_real_process(self, tmp_path: Path) -> None:
        runner = CommandRunner()
        output = runner.run_for_output(
            Command(sys.executable).arg("-c", "import os; print(os.getcwd())").in_dir(tmp_path)
        )
        assert Path(output.strip()).resolve() == tmp_path.resolve()


class TestRunForResult:
    """Tests for CommandRunner.run_for_result."""

    def test_true_on_zero(self) -> None:
        with mock.patch("debuilder.build.runner.subprocess.run", return_value=_completed(0)):
            assert CommandRunner(base_env={}).run_for_result(Command("gpg")) is True

    def test_false_on_nonzero(self) -> None:
        with mock.patch("debuilder.build.runner.subprocess.run", return_value=_completed(2)):
            assert CommandRunner(base_env={}).run_for_result(Command("gpg")) is False

    def test_false_when_program_missing(self) -> None:
        with mock.patch("debuilder.build.runner.subprocess.run", side_effect=FileNotFoundError(2, "missing")):
            assert CommandRunner(base_env={}).run_for_result(Command("gpg")) is False


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancel_event_checked_before_command(self) -> None:
        event = threading.Event()
        event.set()
        runner = CommandRunner(cancel_event=event, base_env={})
        with mock.patch("debuilder.build.runner.subprocess.run") as run_mock:
            with pytest.raises(BuildInterruptedError):
                runner.run(Command("true"))
        run_mock.assert_not_called()

    def test_keyboard_interrupt_converted(self) -> None:
        runner = CommandRunner(base_env={})
        with mock.patch("debuilder.build.runner.subprocess.run", side_effect=KeyboardInterrupt):
            with pytest.raises(BuildInterruptedError):
                runner.run(Command("sleep").arg("100"))
        assert runner.cancel_event.is_set()

    def test_run_for_result_still_interrupts(self) -> None:
        runner = CommandRunner(base_env={})
        runner.cancel_event.set()
        with pytest.raises(BuildInterruptedError):
            runner.run_for_result(Command("gpg"))


class TestAnnounce:
    """Tests for CommandRunner.announce."""

    def test_formats_positional_args(self) -> None:
        runner = CommandRunner(prefix="pfx", base_env={})
        with mock.patch("debuilder.build.runner.activity") as activity_mock:
            runner.announce("Determined latest version to be {0}", "1.0-1")
        activity_mock.assert_called_once_with("pfx", "Determined latest version to be 1.0-1")

    def test_message_without_args_is_verbatim(self) -> None:
        runner = CommandRunner(prefix="pfx", base_env={})
        with mock.patch("debuilder.build.runner.activity") as activity_mock:
            runner.announce("literal {braces}")
        activity_mock.assert_called_once_with("pfx", "literal {braces}")
