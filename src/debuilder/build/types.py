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

"""Type definitions for the build state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from debuilder.build.changes import ChangeRecord
    from debuilder.build.collector import CollectedFile


class BuildState(Enum):
    """States of one build, in the only order they can be entered.

    ABORTED is reachable from every state; CHANGE_DECISION and
    CHANGELOG_WRITE are only entered when changelog generation is enabled.
    """

    INIT = "init"
    ENV_PREP = "env_prep"
    KEY_IMPORT = "key_import"
    CHANGELOG_PARSE = "changelog_parse"
    CHANGE_DECISION = "change_decision"
    CHANGELOG_WRITE = "changelog_write"
    DEPENDENCY_SATISFY = "dependency_satisfy"
    BUILD = "build"
    ARCHIVE_ARTIFACTS = "archive_artifacts"
    PUBLISH = "publish"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class BuildOutcome:
    """Final outcome of a build invocation.

    Attributes:
        success: True for a completed or deliberately skipped build.
        exit_code: Process exit code for the CLI.
        states: Every state entered, in order.
        source: Source package name from the changelog.
        version: Effective version (the new one if a changelog entry was opened).
        changes: Changes credited in the new changelog entry.
        artifacts: Archived package files.
        environment: Published DEBIAN_* variables.
        error: Abort detail if the build failed.
        skipped_reason: Why nothing was built, if skipped.
    """

    success: bool
    exit_code: int = 0
    states: list[BuildState] = field(default_factory=list)
    source: str = ""
    version: str = ""
    changes: list[ChangeRecord] = field(default_factory=list)
    artifacts: list[CollectedFile] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    skipped_reason: str | None = None

    @property
    def state(self) -> BuildState:
        return self.states[-1] if self.states else BuildState.INIT

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None
