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

"""Structured command builder for external tool invocations.

Commands are assembled argument by argument instead of by positional string
substitution. Each argument records how it must be treated:

- plain arguments are passed through verbatim,
- free-text arguments (commit messages, changelog text) are sanitized by
  stripping single quotes before use,
- secret arguments (passphrases) are passed through but masked in every
  display form, so they never reach logs or events.

Commands are executed as argv lists without a shell; ``display()`` renders
an equivalent shell line for humans.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

SECRET_MASK = "********"


def sanitize_message(message: str) -> str:
    """Strip every single-quote character from free text."""
    return message.replace("'", "")


class ArgKind(Enum):
    PLAIN = "plain"
    TEXT = "text"
    SECRET = "secret"


@dataclass(frozen=True)
class Arg:
    """One command-line argument.

    Attributes:
        value: Raw value as supplied by the caller.
        kind: How the value is treated when rendered.
        prefix: Literal text glued in front of a secret value.
    """

    value: str
    kind: ArgKind = ArgKind.PLAIN
    prefix: str = ""

    @property
    def needs_sanitizing(self) -> bool:
        return self.kind is ArgKind.TEXT

    def actual(self) -> str:
        if self.kind is ArgKind.TEXT:
            return sanitize_message(self.value)
        return self.prefix + self.value

    def display(self) -> str:
        if self.kind is ArgKind.SECRET:
            return self.prefix + SECRET_MASK
        return self.actual()


@dataclass
class Command:
    """An external command with its working directory and extra environment.

    Builder methods return ``self`` so commands read as one expression:

        Command("dch").arg("--append").text(message).in_dir(debian_dir)
    """

    program: str
    args: list[Arg] = field(default_factory=list)
    cwd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_string(cls, line: str) -> Command:
        """Build a command from a shell-like string of plain arguments."""
        parts = shlex.split(line)
        if not parts:
            raise ValueError("Empty command line")
        return cls(parts[0], [Arg(p) for p in parts[1:]])

    def arg(self, *values: str) -> Command:
        self.args.extend(Arg(str(v)) for v in values)
        return self

    def text(self, value: str) -> Command:
        """Append a free-text argument that is sanitized before use."""
        self.args.append(Arg(value, ArgKind.TEXT))
        return self

    def secret(self, value: str, prefix: str = "") -> Command:
        """Append an argument whose value is masked when displayed."""
        self.args.append(Arg(value, ArgKind.SECRET, prefix))
        return self

    def in_dir(self, cwd: Path) -> Command:
        self.cwd = cwd
        return self

    def with_env(self, env: Mapping[str, str] | None = None, **extra: str) -> Command:
        if env:
            self.env.update(env)
        self.env.update(extra)
        return self

    def argv(self) -> list[str]:
        return [self.program, *(a.actual() for a in self.args)]

    def display(self) -> str:
        """Shell-equivalent rendering with secrets masked."""
        parts: list[str] = []
        if self.cwd is not None:
            parts.append(f"cd {shlex.quote(str(self.cwd))} &&")
        parts.extend(f"{k}={shlex.quote(v)}" for k, v in self.env.items())
        parts.append(shlex.join([self.program, *(a.display() for a in self.args)]))
        return " ".join(parts)

    def __str__(self) -> str:
        return self.display()
