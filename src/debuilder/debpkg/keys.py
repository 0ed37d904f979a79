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

"""GPG key import for package signing.

Each key is imported only when gpg does not already know it. Key material
is written to a temporary file in the workspace for the import and the
file is removed on every exit path.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from debuilder.build.command import Command
from debuilder.core.exceptions import ConfigError

if TYPE_CHECKING:
    from debuilder.build.runner import CommandRunner
    from debuilder.core.context import AccountIdentity


@contextlib.contextmanager
def temporary_key_file(directory: Path, prefix: str, content: str) -> Iterator[Path]:
    """Write ``content`` to a private temporary file and delete it afterwards."""
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=prefix, suffix="key", dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        path.unlink(missing_ok=True)


def _import_key(
    runner: CommandRunner,
    workspace: Path,
    list_option: str,
    prefix: str,
    email: str,
    material: str,
) -> bool:
    if runner.run_for_result(Command("gpg").arg(list_option, email)):
        return False
    if not material:
        raise ConfigError(f"No {prefix} key material configured for {email}")

    with temporary_key_file(workspace, prefix, material) as key_file:
        runner.announce("Importing {0} key for {1}", prefix, email)
        runner.run(Command("gpg").arg("--batch", "--import", str(key_file)))
    return True


def import_keys(runner: CommandRunner, workspace: Path, account: AccountIdentity) -> list[str]:
    """Import the public and private keys of ``account`` when missing.

    Returns:
        Names of the keys that were imported ("public", "private").

    Raises:
        ConfigError: If a missing key has no configured material.
        CommandFailedError: If gpg fails to import a key.
    """
    imported: list[str] = []
    if _import_key(runner, workspace, "--list-key", "public", account.email, account.public_key):
        imported.append("public")
    if _import_key(runner, workspace, "--list-secret-key", "private", account.email, account.private_key):
        imported.append("private")
    return imported
