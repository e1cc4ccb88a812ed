# This file is part of Debrelease, a tool for building Debian packages for local testing and Ubuntu PPAs.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only
#
# Debrelease is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License version 3, as published by the
# Free Software Foundation.
#
# Debrelease is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranties of MERCHANTABILITY,
# SATISFACTORY QUALITY, or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# Debrelease. If not, see <http://www.gnu.org/licenses/>.

"""Debrelease-specific exception types with associated exit codes.

Two families exist. Configuration errors (exit 2) are raised before any
build tree is touched and must not be retried by the caller. Build errors
(exit 1) come from the packaging or upload tools and may be retried.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DebreleaseError(Exception):
    """Base class for Debrelease errors with an exit code."""

    message: str = "An error occurred"
    exit_code: int = field(default=1)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.message} (exit {self.exit_code})"


@dataclass
class ConfigError(DebreleaseError):
    exit_code: int = field(default=2)


@dataclass
class InvalidVersionError(ConfigError):
    """Base version contains characters outside the Debian version alphabet."""

    version: str = ""


@dataclass
class MissingOptionError(ConfigError):
    """A mode-specific option was not supplied by CLI, environment or config."""

    option: str = ""


@dataclass
class TagNotFoundError(ConfigError):
    tag: str = ""


@dataclass
class EmptySubjectError(ConfigError):
    tag: str = ""


@dataclass
class EmptyBodyError(ConfigError):
    tag: str = ""


@dataclass
class DistributionDetectError(ConfigError):
    pass


@dataclass
class ControlFileError(ConfigError):
    path: str = ""


@dataclass
class MissingToolError(ConfigError):
    missing: list[str] = field(default_factory=list)


@dataclass
class BuildError(DebreleaseError):
    """Runtime failure while building, signing or uploading."""

    exit_code: int = field(default=1)
    series: str | None = None


@dataclass
class PackagingError(BuildError):
    returncode: int = 0


@dataclass
class MissingArtifactError(BuildError):
    path: str = ""


@dataclass
class UploadError(BuildError):
    returncode: int = 0
