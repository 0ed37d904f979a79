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

"""Build orchestration: the ordered, failure-aware sequence of build steps.

    INIT -> ENV_PREP -> KEY_IMPORT -> CHANGELOG_PARSE
         -> [CHANGE_DECISION -> CHANGELOG_WRITE]
         -> DEPENDENCY_SATISFY -> BUILD -> ARCHIVE_ARTIFACTS -> PUBLISH -> DONE

Any step may end in ABORTED. Steps run strictly one after the other and
nothing already done is rolled back: a changelog entry written before a
failing build stays written.

An automatic build (no user among its causes) whose change set is empty
stops in DONE without building, unless build_even_when_no_changes is set.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from debuilder.build.collector import archive_artifacts, artifact_mask
from debuilder.build.command import Command
from debuilder.build.errors import (
    EXIT_INTERRUPTED,
    EXIT_IO_ERROR,
    EXIT_SUCCESS,
    PREFIX,
    log_phase_event,
    phase_error,
    phase_warning,
)
from debuilder.build.progress import step_progress
from debuilder.build.provenance import PackageMetadata, publish_metadata
from debuilder.build.types import BuildOutcome, BuildState
from debuilder.core.exceptions import (
    BuildInterruptedError,
    ConfigError,
    DebuilderError,
    MalformedVersionError,
)
from debuilder.debpkg.changelog import (
    ChangelogWriter,
    compose_version_message,
    expand_macros,
    read_changelog,
)
from debuilder.debpkg.keys import import_keys

if TYPE_CHECKING:
    from debuilder.build.changes import ChangeSetResolver
    from debuilder.build.runner import CommandRunner
    from debuilder.core.context import BuildContext
    from debuilder.core.run import RunContext

logger = logging.getLogger(__name__)

SATISFYDEPENDS = "/usr/lib/pbuilder/pbuilder-satisfydepends"


class BuildOrchestrator:
    """Runs one build from a BuildContext and injected collaborators.

    Args:
        context: The build's own context; never shared between builds.
        runner: Executes external commands.
        resolver: Provides the change set since the current version.
        writer: Changelog writer; built from runner and context if omitted.
        run: Optional run record for structured events.
        spinner: Draw a live progress line around long commands on a terminal.
    """

    def __init__(
        self,
        context: BuildContext,
        runner: CommandRunner,
        resolver: ChangeSetResolver,
        writer: ChangelogWriter | None = None,
        run: RunContext | None = None,
        spinner: bool = True,
    ) -> None:
        self.context = context
        self.runner = runner
        self.resolver = resolver
        self.writer = writer or ChangelogWriter(
            runner,
            context.debian_dir,
            context.account,
            distributor=context.options.distributor,
        )
        self.run = run
        self.spinner = spinner
        self.outcome = BuildOutcome(success=False)
        self._enter(BuildState.INIT)

    def _enter(self, state: BuildState) -> None:
        self.outcome.states.append(state)
        logger.debug("Entering state %s", state.value)
        if self.run is not None:
            self.run.log_event({"event": f"state.{state.value}"})

    def execute(self) -> BuildOutcome:
        """Run every step and return the outcome; abort errors are not raised."""
        try:
            self._execute()
        except BuildInterruptedError as e:
            self._abort(e.message, EXIT_INTERRUPTED)
        except DebuilderError as e:
            self._abort(e.message, e.exit_code)
        except OSError as e:
            self._abort(str(e), EXIT_IO_ERROR)
        return self.outcome

    def _abort(self, detail: str, exit_code: int) -> None:
        self._enter(BuildState.ABORTED)
        self.outcome.success = False
        self.outcome.exit_code = exit_code
        self.outcome.error = detail
        phase_error(self.run, detail, exit_code, state=self.outcome.states[-2].value)

    def _finish(self) -> None:
        self._enter(BuildState.DONE)
        self.outcome.success = True
        self.outcome.exit_code = EXIT_SUCCESS

    def _execute(self) -> None:
        ctx = self.context

        self._enter(BuildState.ENV_PREP)
        self.prepare_environment()

        self._enter(BuildState.KEY_IMPORT)
        import_keys(self.runner, ctx.workspace, ctx.account)

        self._enter(BuildState.CHANGELOG_PARSE)
        fields = read_changelog(self.runner, ctx.debian_dir)
        version_text = fields.require("Version")
        self.outcome.source = fields.source or ""
        self.outcome.version = version_text
        self.runner.announce("Determined latest version to be {0}", version_text)

        if ctx.options.generate_changelog:
            self._enter(BuildState.CHANGE_DECISION)
            current = fields.package_version()
            self.runner.announce("Determined latest revision to be {0}", current.revision)
            candidate = current.next_revision()
            if not candidate > current:
                raise MalformedVersionError(
                    f"Next version {candidate} does not sort after {current}", version=version_text
                )

            changes = list(self.resolver.resolve_changes(current, ctx))
            log_phase_event(
                self.run, PREFIX, f"Found {len(changes)} change(s) since {current}",
                "changes.resolved", since=str(current), count=len(changes),
            )

            if ctx.triggered_automatically and not changes and not ctx.options.build_even_when_no_changes:
                self.runner.announce("There are no creditable changes for this build - not building package.")
                self.outcome.skipped_reason = "no creditable changes"
                if self.run is not None:
                    self.run.write_summary(status="skipped", reason=self.outcome.skipped_reason)
                self._finish()
                return

            self._enter(BuildState.CHANGELOG_WRITE)
            message = expand_macros(compose_version_message(ctx.causes), ctx.environment)
            self.writer.write(candidate, message, changes)
            self.outcome.changes = changes
            self.outcome.version = candidate.format()

        self._run_step(
            BuildState.DEPENDENCY_SATISFY,
            Command("sudo").arg(SATISFYDEPENDS, "--control", "control").in_dir(ctx.debian_dir),
        )
        self._run_step(BuildState.BUILD, self.build_command())

        self._enter(BuildState.ARCHIVE_ARTIFACTS)
        self.outcome.artifacts = archive_artifacts(
            self.runner, ctx.module_root, ctx.artifacts_dir, self.outcome.version
        )
        if not self.outcome.artifacts:
            phase_warning(
                self.run, PREFIX, f"No files matching {artifact_mask(self.outcome.version)} in {ctx.module_root}",
                event_key="artifacts.none",
            )

        self._enter(BuildState.PUBLISH)
        metadata = PackageMetadata(
            source_package=self.outcome.source,
            version=self.outcome.version,
            debian_dir=str(ctx.debian_dir),
            artifacts=[a.copied_path.name for a in self.outcome.artifacts],
        )
        metadata_path, env_path = publish_metadata(metadata, ctx.artifacts_dir)
        self.outcome.environment = metadata.environment()
        log_phase_event(
            self.run, PREFIX, f"Published {metadata.source_package} {metadata.version}",
            "publish.metadata", metadata=str(metadata_path), env_file=str(env_path),
            **self.outcome.environment,
        )

        self._finish()

    def _run_step(self, state: BuildState, command: Command) -> None:
        self._enter(state)
        with step_progress(PREFIX, state, command, disable=not self.spinner):
            self.runner.run(command)

    def prepare_environment(self) -> None:
        for line in self.context.options.bootstrap_commands:
            try:
                command = Command.from_string(line)
            except ValueError as e:
                raise ConfigError(f"Cannot parse bootstrap command {line!r}: {e}") from e
            self.runner.run(command)

    def build_command(self) -> Command:
        """The debuild invocation, signing with the account's key."""
        account = self.context.account
        command = Command("debuild").arg("--check-dirname-level", "0", "--no-tgz-check", f"-k{account.email}")
        if account.passphrase:
            command.secret(account.passphrase, prefix="-pgpg --no-tty --passphrase ")
        return command.in_dir(self.context.debian_dir)
