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

"""Context objects for Debuilder build operations.

Immutable configs (frozen=True):
- AccountIdentity: Signing identity and key material
- BuildOptions: Per-build behavioral flags
- BuildCause: One reason a build was triggered

Per-invocation context:
- BuildContext: Everything the orchestrator needs for one build
"""

from __future__ import annotations

import getpass
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from debuilder.core.exceptions import ConfigError
from debuilder.core.paths import module_root


class CauseKind(Enum):
    """Closed set of build trigger variants."""

    USER = "user"
    TIMER = "timer"
    SCM = "scm"
    UPSTREAM = "upstream"
    REMOTE = "remote"


_CAUSE_DESCRIPTIONS: dict[CauseKind, str] = {
    CauseKind.USER: "Started by user {detail}",
    CauseKind.TIMER: "Started by timer",
    CauseKind.SCM: "Started by an SCM change",
    CauseKind.UPSTREAM: "Started by upstream project {detail}",
    CauseKind.REMOTE: "Started by remote host {detail}",
}


@dataclass(frozen=True)
class BuildCause:
    """A single reason a build was started.

    Attributes:
        kind: Trigger variant.
        detail: User name, upstream project or remote host, where relevant.
    """

    kind: CauseKind
    detail: str = ""

    def description(self) -> str:
        """Return the short human-readable description of this cause."""
        return _CAUSE_DESCRIPTIONS[self.kind].format(detail=self.detail or "anonymous")

    @property
    def is_user_initiated(self) -> bool:
        return self.kind is CauseKind.USER

    @classmethod
    def parse(cls, text: str) -> BuildCause:
        """Parse a ``kind[:detail]`` string such as "user:alice" or "timer"."""
        kind_text, _, detail = text.partition(":")
        try:
            kind = CauseKind(kind_text.strip().lower())
        except ValueError as e:
            valid = ", ".join(k.value for k in CauseKind)
            raise ConfigError(f"Unknown build cause {kind_text!r} (expected one of: {valid})") from e
        return cls(kind=kind, detail=detail.strip())

    @classmethod
    def current_user(cls) -> BuildCause:
        return cls(kind=CauseKind.USER, detail=getpass.getuser())


def is_triggered_automatically(causes: list[BuildCause] | tuple[BuildCause, ...]) -> bool:
    """Return True unless at least one cause was initiated by a user."""
    return not any(c.is_user_initiated for c in causes)


def _read_key(inline: Any, path: Any) -> str:
    if inline:
        return str(inline)
    if path:
        key_path = Path(str(path)).expanduser()
        try:
            return key_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read key file {key_path}: {e}") from e
    return ""


@dataclass(frozen=True)
class AccountIdentity:
    """Signing account used for changelog entries and package signatures.

    Attributes:
        name: Display name written as the changelog maintainer.
        email: Email used for DEBEMAIL and as the GPG key id.
        passphrase: GPG passphrase for signing.
        public_key: Armored public key material.
        private_key: Armored private key material.
    """

    name: str
    email: str
    passphrase: str = field(default="", repr=False)
    public_key: str = field(default="", repr=False)
    private_key: str = field(default="", repr=False)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> AccountIdentity:
        """Build the identity from the ``account`` section of the config.

        DEBUILDER_GPG_PASSPHRASE, when set, overrides the configured passphrase.
        """
        account: Mapping[str, Any] = cfg.get("account", {}) or {}
        email = str(account.get("email") or "").strip()
        if not email:
            raise ConfigError("account.email is not configured")

        passphrase = os.environ.get("DEBUILDER_GPG_PASSPHRASE") or str(account.get("passphrase") or "")

        return cls(
            name=str(account.get("name") or "Debuilder"),
            email=email,
            passphrase=passphrase,
            public_key=_read_key(account.get("public_key"), account.get("public_key_file")),
            private_key=_read_key(account.get("private_key"), account.get("private_key_file")),
        )


DEFAULT_BOOTSTRAP_COMMANDS: tuple[str, ...] = (
    "sudo apt-get update",
    "sudo apt-get install -y aptitude pbuilder",
)


@dataclass(frozen=True)
class BuildOptions:
    """Per-build behavioral flags.

    Attributes:
        generate_changelog: Open a new changelog version from source history.
        build_even_when_no_changes: Build automatic triggers with no changes.
        distributor: Distributor label passed to dch.
        release_commit_message: Summary of changelog-publishing commits,
            which are never credited as changes.
        bootstrap_commands: Environment preparation commands.
    """

    generate_changelog: bool = True
    build_even_when_no_changes: bool = False
    distributor: str = "debian"
    release_commit_message: str = ""
    bootstrap_commands: tuple[str, ...] = DEFAULT_BOOTSTRAP_COMMANDS

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> BuildOptions:
        build: Mapping[str, Any] = cfg.get("build", {}) or {}
        bootstrap = build.get("bootstrap_commands")
        return cls(
            generate_changelog=bool(build.get("generate_changelog", True)),
            build_even_when_no_changes=bool(build.get("build_even_when_no_changes", False)),
            distributor=str(build.get("distributor") or "debian"),
            release_commit_message=str(build.get("release_commit_message") or ""),
            bootstrap_commands=(
                tuple(str(c) for c in bootstrap if str(c).strip()) if bootstrap is not None else DEFAULT_BOOTSTRAP_COMMANDS
            ),
        )


@dataclass
class BuildContext:
    """Everything a single build invocation owns.

    Created once per invocation and never shared between builds.

    Attributes:
        workspace: Workspace root of the build.
        debian_dir: Resolved ``debian`` directory of the package.
        artifacts_dir: Where matching package files are copied.
        account: Signing identity.
        options: Behavioral flags.
        causes: Why the build was started.
        environment: Build variables used for ``${VAR}`` expansion.
    """

    workspace: Path
    debian_dir: Path
    artifacts_dir: Path
    account: AccountIdentity
    options: BuildOptions = field(default_factory=BuildOptions)
    causes: tuple[BuildCause, ...] = ()
    environment: dict[str, str] = field(default_factory=dict)

    @property
    def module_root(self) -> Path:
        return module_root(self.debian_dir)

    @property
    def triggered_automatically(self) -> bool:
        return is_triggered_automatically(self.causes)
