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

"""Implementation of `debuilder build` command.

Resolves configuration into a BuildContext, runs the build orchestrator
inside a RunContext and exits with the outcome's exit code.
"""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from debuilder.build.changes import GitChangeResolver
from debuilder.build.errors import EXIT_CONFIG_ERROR
from debuilder.build.orchestrator import BuildOrchestrator
from debuilder.build.provenance import write_env_file
from debuilder.build.runner import CommandRunner
from debuilder.config import load_config
from debuilder.core.context import AccountIdentity, BuildCause, BuildContext, BuildOptions
from debuilder.core.exceptions import ConfigError
from debuilder.core.paths import resolve_debian_dir
from debuilder.core.run import RunContext, activity

if TYPE_CHECKING:
    from debuilder.build.types import BuildOutcome


def parse_causes(causes: str) -> tuple[BuildCause, ...]:
    """Parse a comma-separated list of ``kind[:detail]`` causes."""
    return tuple(BuildCause.parse(c) for c in causes.split(",") if c.strip())


def build(
    path_to_debian: str = typer.Argument(".", help="Workspace-relative package directory, with or without the trailing debian"),
    workspace: str = typer.Option(".", "-w", "--workspace", help="Workspace root"),
    artifacts_dir: str = typer.Option("", "-a", "--artifacts-dir", help="Where to copy built packages (default: under paths.artifacts_root)"),
    causes: str = typer.Option("", "-c", "--causes", help="Comma-separated build causes: user[:name], timer, scm, upstream[:project], remote[:host] (default: current user)"),
    build_number: str = typer.Option("", "-n", "--build-number", help="Build number written into the changelog message"),
    no_changelog: bool = typer.Option(False, "--no-changelog", help="Do not open a new changelog version"),
    build_without_changes: bool = typer.Option(False, "--build-without-changes", help="Build automatic triggers even with no new changes"),
    env_file: str = typer.Option("", "-e", "--env-file", help="Also write DEBIAN_* variables to this file"),
    no_spinner: bool = typer.Option(False, "-q", "--no-spinner", help="Disable spinner output (quiet)"),
) -> None:
    """Build a Debian package, extending its changelog from source history."""
    try:
        cfg = load_config()
        cause_list = parse_causes(causes) or (BuildCause.current_user(),)
    except ConfigError as e:
        activity("error", e.message)
        sys.exit(EXIT_CONFIG_ERROR)

    with RunContext("build", runs_root=Path(cfg["paths"]["runs_root"])) as run:
        try:
            account = AccountIdentity.from_config(cfg)
        except ConfigError as e:
            activity("error", e.message)
            run.write_summary(status="failed", error=e.message, exit_code=EXIT_CONFIG_ERROR)
            exit_code = EXIT_CONFIG_ERROR
        else:
            options = BuildOptions.from_config(cfg)
            if no_changelog:
                options = dataclasses.replace(options, generate_changelog=False)
            if build_without_changes:
                options = dataclasses.replace(options, build_even_when_no_changes=True)

            ws = Path(workspace).expanduser().resolve()
            environment = dict(os.environ)
            if build_number:
                environment["BUILD_NUMBER"] = build_number

            context = BuildContext(
                workspace=ws,
                debian_dir=resolve_debian_dir(ws, path_to_debian),
                artifacts_dir=(
                    Path(artifacts_dir).expanduser().resolve()
                    if artifacts_dir
                    else Path(cfg["paths"]["artifacts_root"]) / run.run_id
                ),
                account=account,
                options=options,
                causes=cause_list,
                environment=environment,
            )
            run.log_event({
                "event": "build.context",
                "workspace": str(context.workspace),
                "debian_dir": str(context.debian_dir),
                "artifacts_dir": str(context.artifacts_dir),
                "causes": [c.description() for c in context.causes],
                "automatic": context.triggered_automatically,
            })

            outcome = BuildOrchestrator(
                context,
                CommandRunner(),
                GitChangeResolver(release_commit_message=options.release_commit_message),
                run=run,
                spinner=not no_spinner,
            ).execute()
            _report(run, outcome, env_file)
            exit_code = outcome.exit_code

    sys.exit(exit_code)


def _report(run: RunContext, outcome: BuildOutcome, env_file: str) -> None:
    if not outcome.success:
        return
    if outcome.skipped:
        run.write_summary(status="skipped", reason=outcome.skipped_reason, exit_code=outcome.exit_code)
        return

    for key, value in outcome.environment.items():
        activity("report", f"{key}={value}")
    if env_file:
        write_env_file(outcome.environment, Path(env_file).expanduser())
    run.write_summary(
        status="success",
        exit_code=outcome.exit_code,
        source=outcome.source,
        version=outcome.version,
        artifacts=[str(a.copied_path) for a in outcome.artifacts],
    )
