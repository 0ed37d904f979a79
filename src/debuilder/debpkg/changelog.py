# This file is part of Debuilder, a tool for building Debian packages from a
# changelog and its source history.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only

"""Debian changelog reading and writing for Debuilder builds.

Reading goes through ``dpkg-parsechangelog``, whose ``Field: value`` dump is
turned into a ChangelogFields mapping. Writing goes through ``dch``: one
command opens the new version, then one command per change appends an
entry, strictly in order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from debuilder.build.command import Command, sanitize_message
from debuilder.core.exceptions import (
    ChangelogOrderError,
    ChangelogUnavailableError,
    CommandFailedError,
    MissingFieldError,
)
from debuilder.debpkg.version import PackageVersion, parse_version

if TYPE_CHECKING:
    from debuilder.build.changes import ChangeRecord
    from debuilder.build.runner import CommandRunner
    from debuilder.core.context import AccountIdentity, BuildCause

__all__ = [
    "ChangelogFields",
    "ChangelogWriter",
    "compose_version_message",
    "expand_macros",
    "parse_changelog_fields",
    "read_changelog",
    "sanitize_message",
]

_FIELD_RE = re.compile(r"(\w+):\s*(.*)", re.ASCII)
_MACRO_RE = re.compile(r"\$\{(\w+)\}")

BUILD_NUMBER_PLACEHOLDER = "${BUILD_NUMBER}"


class ChangelogFields(dict[str, str]):
    """Fields of one changelog paragraph, keyed by field name."""

    @property
    def source(self) -> str | None:
        return self.get("Source")

    @property
    def version(self) -> str | None:
        return self.get("Version")

    def require(self, name: str) -> str:
        """Return a field value or raise MissingFieldError."""
        value = self.get(name)
        if value is None:
            raise MissingFieldError(f"Changelog has no {name} field", field_name=name)
        return value

    def package_version(self) -> PackageVersion:
        return parse_version(self.require("Version"))


def parse_changelog_fields(raw_output: str) -> ChangelogFields:
    """Parse a ``dpkg-parsechangelog`` dump into fields.

    Only lines of the form ``Identifier: value`` are kept; the last
    occurrence of a field wins. Continuation lines of multi-line fields
    (such as the body of ``Changes``) do not match and are dropped, so
    multi-line values are never reassembled.
    """
    fields = ChangelogFields()
    for row in raw_output.splitlines():
        match = _FIELD_RE.fullmatch(row)
        if match:
            fields[match.group(1)] = match.group(2)
    return fields


def read_changelog(runner: CommandRunner, debian_dir: Path) -> ChangelogFields:
    """Dump and parse ``debian/changelog``.

    Raises:
        ChangelogUnavailableError: If dpkg-parsechangelog cannot be run.
    """
    command = Command("dpkg-parsechangelog").arg("-lchangelog").in_dir(debian_dir)
    try:
        output = runner.run_for_output(command)
    except CommandFailedError as e:
        raise ChangelogUnavailableError(f"Cannot parse changelog in {debian_dir}: {e.message}") from e
    return parse_changelog_fields(output)


def compose_version_message(causes: Iterable[BuildCause]) -> str:
    """Compose the message that opens a new changelog version.

    Cause descriptions are deduplicated (first occurrence keeps its place)
    and joined with ". ", after a build-number placeholder that
    expand_macros() later fills in.

    Example:
        "Build #${BUILD_NUMBER}. Started by user alice. Started by timer."
    """
    descriptions = list(dict.fromkeys(c.description() for c in causes))
    head = f"Build #{BUILD_NUMBER_PLACEHOLDER}."
    if not descriptions:
        return head
    return f"{head} " + ". ".join(descriptions) + "."


def expand_macros(text: str, environment: Mapping[str, str]) -> str:
    """Replace ``${VAR}`` with values from ``environment``; unknown ones stay."""
    return _MACRO_RE.sub(lambda m: environment.get(m.group(1), m.group(0)), text)


class ChangelogWriter:
    """Issues the dch commands that extend ``debian/changelog``.

    open_version() must be called once before any append_entry() call;
    entries are appended in the order they are given.
    """

    def __init__(
        self,
        runner: CommandRunner,
        debian_dir: Path,
        account: AccountIdentity,
        distributor: str = "debian",
    ) -> None:
        self.runner = runner
        self.debian_dir = debian_dir
        self.account = account
        self.distributor = distributor
        self.opened: PackageVersion | None = None

    def _dch(self, author: str) -> Command:
        return (
            Command("dch")
            .arg("--check-dirname-level", "0")
            .in_dir(self.debian_dir)
            .with_env(DEBEMAIL=self.account.email, DEBFULLNAME=author)
        )

    def open_version(self, version: PackageVersion, message: str) -> None:
        self.runner.announce("Starting version <{0}> with message <{1}>", version, sanitize_message(message))
        command = (
            self._dch(self.account.name)
            .arg("-b", "--distributor", self.distributor, "--newversion", version.format(), "--")
            .text(message)
        )
        self.runner.run(command)
        self.opened = version

    def append_entry(self, change: ChangeRecord) -> None:
        if self.opened is None:
            raise ChangelogOrderError("Cannot append a changelog entry before a version is opened")
        self.runner.announce("Got changeset entry: {0} by {1}", sanitize_message(change.message), change.author)
        command = (
            self._dch(change.author)
            .arg("--distributor", self.distributor, "--append", "--")
            .text(change.message)
        )
        self.runner.run(command)

    def write(self, version: PackageVersion, message: str, changes: Iterable[ChangeRecord]) -> None:
        """Open ``version`` and append every change in order."""
        self.open_version(version, message)
        for change in changes:
            self.append_entry(change)
