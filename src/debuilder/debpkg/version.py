# This file is part of Debuilder, a tool for building Debian packages from a
# changelog and its source history.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only

"""Package version model for Debian-style ``<upstream>-<revision>`` strings.

The upstream part is kept as an opaque string so that arbitrary upstream
versioning schemes survive untouched; only the trailing numeric Debian
revision is interpreted, since it acts as the build serial that grows by
one every time a new changelog entry is opened.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

from debian.debian_support import Version as DebianVersion

from debuilder.core.exceptions import MalformedVersionError

_REVISION_RE = re.compile(r"[0-9]+")


@dataclass(eq=False)
@total_ordering
class PackageVersion:
    """Two-part package version.

    Attributes:
        upstream: Everything before the last hyphen.
        revision: The Debian revision, a non-negative integer.
    """

    upstream: str
    revision: int
    # Digits as written, so that e.g. "1.0-01" formats back unchanged
    # until the revision is incremented.
    _revision_text: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if self.revision < 0:
            raise MalformedVersionError(
                f"Debian revision must be non-negative, got {self.revision}",
                version=f"{self.upstream}-{self.revision}",
            )
        if not self._revision_text or int(self._revision_text) != self.revision:
            self._revision_text = str(self.revision)

    def increment_revision(self) -> None:
        """Bump the Debian revision by one, in place."""
        self.revision += 1
        self._revision_text = str(self.revision)

    def next_revision(self) -> PackageVersion:
        """Return a copy of this version with the revision bumped by one."""
        candidate = PackageVersion(self.upstream, self.revision, self._revision_text)
        candidate.increment_revision()
        return candidate

    def format(self) -> str:
        return f"{self.upstream}-{self._revision_text}"

    def __str__(self) -> str:
        return self.format()

    @property
    def without_epoch(self) -> str:
        """Version as it appears in artifact file names (epoch dropped)."""
        return strip_epoch(self.format())

    def _compare(self, other: PackageVersion) -> int:
        # Same upstream: the revision alone decides.
        if self.upstream == other.upstream:
            return (self.revision > other.revision) - (self.revision < other.revision)
        try:
            mine, theirs = DebianVersion(self.format()), DebianVersion(other.format())
        except ValueError as e:
            raise MalformedVersionError(
                f"Cannot order {self} against {other}: {e}", version=self.format()
            ) from e
        return (mine > theirs) - (mine < theirs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self._compare(other) < 0


def parse_version(text: str) -> PackageVersion:
    """Parse ``<upstream>-<revision>`` into a PackageVersion.

    The string is split on its last hyphen. The suffix must be a plain
    base-10 non-negative integer (no sign).

    Args:
        text: Version string as found in the changelog, e.g. "1.2.0-3".

    Returns:
        PackageVersion whose format() reproduces ``text`` exactly.

    Raises:
        MalformedVersionError: If there is no hyphen, the upstream part is
            empty, or the revision is not numeric.
    """
    idx = text.rfind("-")
    if idx < 0:
        raise MalformedVersionError(
            f"Version {text!r} has no Debian revision (expected <upstream>-<revision>)",
            version=text,
        )

    upstream = text[:idx]
    revision = text[idx + 1 :]
    if not upstream:
        raise MalformedVersionError(f"Version {text!r} has an empty upstream part", version=text)
    if not _REVISION_RE.fullmatch(revision):
        raise MalformedVersionError(
            f"Debian revision {revision!r} of version {text!r} is not a non-negative integer",
            version=text,
        )

    return PackageVersion(upstream=upstream, revision=int(revision), _revision_text=revision)


def strip_epoch(version: str) -> str:
    """Remove the ``epoch:`` prefix from a version string, if any."""
    if ":" in version:
        return version.split(":", 1)[1]
    return version
