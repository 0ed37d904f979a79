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

"""Change sets: the commits credited in a new changelog version.

The orchestrator only depends on the ChangeSetResolver protocol. The git
implementation walks history with GitPython from the release marker of the
current version up to HEAD, oldest first.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import git

from debuilder.core.exceptions import SourceControlError

if TYPE_CHECKING:
    from debuilder.core.context import BuildContext
    from debuilder.debpkg.version import PackageVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeRecord:
    """One creditable change.

    Attributes:
        author: Display name of the author.
        message: Free text as recorded in source control (unsanitized).
    """

    author: str
    message: str


class ChangeSetResolver(Protocol):
    def resolve_changes(self, since: PackageVersion, context: BuildContext) -> list[ChangeRecord]:
        """Return the changes since ``since``, oldest first (may be empty)."""
        ...


def debian_tag(version: str) -> str:
    """Return the git-buildpackage tag name for a Debian version."""
    return "debian/" + version.replace(":", "%").replace("~", "_")


class GitChangeResolver:
    """Resolves change sets from a git repository.

    The release marker of a version is, in order of preference: the
    ``debian/<version>`` tag, the newest commit whose summary equals the
    release commit message, the newest commit that touched the changelog.
    Without a marker the whole history is creditable.

    Args:
        repo_path: Repository (or a directory inside it); defaults to the
            module root of the build.
        release_commit_message: Summary of changelog-publishing commits;
            such commits are never credited.
    """

    def __init__(self, repo_path: Path | None = None, release_commit_message: str = "") -> None:
        self.repo_path = repo_path
        self.release_commit_message = release_commit_message

    def _open(self, path: Path) -> git.Repo:
        try:
            return git.Repo(path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise SourceControlError(f"Not a git repository: {path}") from e

    def _is_release_commit(self, commit: git.Commit) -> bool:
        return bool(self.release_commit_message) and commit.summary == self.release_commit_message

    def find_marker(self, repo: git.Repo, since: PackageVersion, changelog: Path) -> git.Commit | None:
        """Return the commit that released ``since``, if one can be found."""
        tag = debian_tag(since.format())
        if tag in repo.tags:
            return repo.tags[tag].commit

        if self.release_commit_message:
            for commit in repo.iter_commits("HEAD"):
                if self._is_release_commit(commit):
                    return commit

        relative = os.path.relpath(changelog.resolve(), Path(repo.working_tree_dir).resolve())
        touched = list(repo.iter_commits("HEAD", paths=relative, max_count=1))
        return touched[0] if touched else None

    def resolve_changes(self, since: PackageVersion, context: BuildContext) -> list[ChangeRecord]:
        repo = self._open(self.repo_path or context.module_root)
        if not repo.head.is_valid():
            return []

        try:
            marker = self.find_marker(repo, since, context.debian_dir / "changelog")
            rev = f"{marker.hexsha}..HEAD" if marker is not None else "HEAD"
            logger.debug("Resolving changes for %s in %s", since, rev)
            return [
                ChangeRecord(author=commit.author.name or "", message=str(commit.message).strip())
                for commit in repo.iter_commits(rev, reverse=True, no_merges=True)
                if not self._is_release_commit(commit)
            ]
        except git.GitCommandError as e:
            raise SourceControlError(f"Cannot read history of {repo.working_tree_dir}: {e}") from e
