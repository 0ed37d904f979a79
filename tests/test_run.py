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

"""Tests for debuilder.core.run module."""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from unittest import mock

import pytest

from debuilder.core import run


class TestRunContext:
    """Tests for RunContext class."""

    def test_creates_run_directory_under_configured_root(self, temp_home: Path, mock_config: Path) -> None:
        with run.RunContext("build") as ctx:
            assert ctx.run_path.is_dir()
        assert ctx.run_path.parent == (temp_home / ".cache" / "debuilder" / "runs").resolve()

    def test_explicit_runs_root(self, tmp_path: Path) -> None:
        with run.RunContext("build", runs_root=tmp_path / "runs") as ctx:
            pass
        assert ctx.run_path.parent == (tmp_path / "runs").resolve()

    def test_run_id_format(self, tmp_path: Path) -> None:
        with run.RunContext("build", runs_root=tmp_path) as ctx:
            assert re.match(r"^\d{8}T\d{6}Z-build-[a-f0-9]{8}$", ctx.run_id)

    def test_captures_stdout_and_stderr(self, tmp_path: Path) -> None:
        with run.RunContext("build", runs_root=tmp_path) as ctx:
            print("dch output")
            print("debuild warning", file=sys.stderr)

        assert "dch output" in (ctx.logs_path / "stdout.log").read_text()
        assert "debuild warning" in (ctx.logs_path / "stderr.log").read_text()

    def test_events_jsonl(self, tmp_path: Path) -> None:
        with run.RunContext("build", runs_root=tmp_path) as ctx:
            ctx.log_event({"event": "state.build", "path": Path("/x")})

        lines = (ctx.logs_path / "events.jsonl").read_text().strip().split("\n")
        events = [json.loads(line) for line in lines]
        assert [e["event"] for e in events] == ["run.start", "state.build", "run.end"]
        assert events[1]["path"] == "/x"
        assert all("timestamp" in e for e in events)

    def test_summary_success(self, tmp_path: Path) -> None:
        with run.RunContext("build", runs_root=tmp_path) as ctx:
            ctx.write_summary(version="1.2-4")

        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["status"] == "success"
        assert summary["version"] == "1.2-4"
        assert "end_utc" in summary

    def test_explicit_status_is_kept(self, tmp_path: Path) -> None:
        with run.RunContext("build", runs_root=tmp_path) as ctx:
            ctx.write_summary(status="skipped", reason="no creditable changes")

        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["status"] == "skipped"

    def test_exception_marks_failure(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            with run.RunContext("build", runs_root=tmp_path) as ctx:
                raise ValueError("boom")

        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["status"] == "failed"
        assert summary["error"] == "boom"

    def test_restores_streams(self, tmp_path: Path) -> None:
        original_stdout, original_stderr = sys.stdout, sys.stderr
        with run.RunContext("build", runs_root=tmp_path):
            assert sys.stdout is not original_stdout
        assert sys.stdout is original_stdout
        assert sys.stderr is original_stderr


class TestActivity:
    """Tests for activity function."""

    def test_activity_format(self) -> None:
        output: list[str] = []
        with mock.patch("sys.__stdout__") as mock_stdout:
            mock_stdout.write = output.append
            run.activity("debian-package-builder", "Determined latest version to be 1.2-3")

        assert "".join(output) == "[debian-package-builder] Determined latest version to be 1.2-3\n"

    def test_activity_bypasses_capture(self, tmp_path: Path) -> None:
        output: list[str] = []
        with mock.patch("sys.__stdout__") as mock_stdout:
            mock_stdout.write = output.append
            with run.RunContext("build", runs_root=tmp_path) as ctx:
                run.activity("phase", "visible")

        assert "visible" in "".join(output)
        assert "visible" not in (ctx.logs_path / "stdout.log").read_text()
