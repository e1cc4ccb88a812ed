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

"""Context objects for Debrelease build operations.

Immutable configs (frozen=True):
- ReleaseRequest: CLI inputs before resolution
- ReleaseOptions: Fully resolved options for one invocation
- BuildContext: One isolated build tree (local, or one PPA series)

Mutable results:
- SeriesResult / ReleaseResult: Ordered log of completed and failed builds
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

# Directory (relative to the package root) holding exported trees and artifacts
BUILD_DIR_NAME = "build"


class Mode(Enum):
    """Release mode selection."""

    LOCAL = "local"
    PPA = "ppa"


@dataclass(frozen=True)
class ReleaseRequest:
    """Immutable request containing CLI inputs for a release run.

    Values left as None were not given on the command line or in the
    environment and are filled from the config file during resolution.

    Attributes:
        mode: Local or PPA.
        base_version: Base version from the command line (e.g., "0.0.9").
        root: Package root containing debian/control.
        clean: --clean flag, wipe the build directory before starting.
        distribution: --dist / DEB_DIST (local only).
        subject: --subject (local only).
        tag: --msg-from-tag (ppa only).
        series: --series / PPA_SERIES as a raw string (ppa only).
        ppa_target: --ppa / PPA_TARGET (ppa only).
        gpg_key_id: --gpg-key / GPG_KEY_ID (ppa only).
        upload: --upload flag (ppa only).
        keep_going: --keep-going/--fail-fast (ppa only).
        source_date_epoch: --source-date-epoch / SOURCE_DATE_EPOCH raw value.
        no_spinner: --no-spinner flag.
    """

    mode: Mode
    base_version: str
    root: Path = Path(".")
    clean: bool = False
    distribution: str | None = None
    subject: str | None = None
    tag: str | None = None
    series: str | None = None
    ppa_target: str | None = None
    gpg_key_id: str | None = None
    upload: bool | None = None
    keep_going: bool | None = None
    source_date_epoch: str | None = None
    no_spinner: bool = False


@dataclass(frozen=True)
class ReleaseOptions:
    """Resolved options for one invocation."""

    mode: Mode
    base_version: str
    root: Path
    clean: bool = False
    distribution: str | None = None
    subject: str | None = None
    tag: str | None = None
    series: tuple[str, ...] = ()
    ppa_target: str | None = None
    gpg_key_id: str | None = None
    upload: bool = False
    keep_going: bool = False
    source_date_epoch: int | None = None
    no_spinner: bool = False

    @property
    def build_dir(self) -> Path:
        return self.root / BUILD_DIR_NAME

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/summary."""
        return {
            "mode": self.mode.value,
            "base_version": self.base_version,
            "root": str(self.root),
            "clean": self.clean,
            "distribution": self.distribution,
            "subject": self.subject,
            "tag": self.tag,
            "series": list(self.series),
            "ppa_target": self.ppa_target,
            "gpg_key_id": self.gpg_key_id,
            "upload": self.upload,
            "keep_going": self.keep_going,
            "source_date_epoch": self.source_date_epoch,
        }


@dataclass(frozen=True)
class BuildContext:
    """A single isolated build tree.

    Attributes:
        mode: Local or PPA.
        source_dir: Exported source tree (build/src_local or build/src_<series>).
        package_name: Binary package name from debian/control.
        source_name: Source package name from debian/control.
        distribution: Changelog distribution (host codename or series).
        version: Fully composed package version.
    """

    mode: Mode
    source_dir: Path
    package_name: str
    source_name: str
    distribution: str
    version: str

    @property
    def output_dir(self) -> Path:
        """Directory where the packaging tool drops artifacts."""
        return self.source_dir.parent

    @property
    def changes_file(self) -> Path:
        return self.output_dir / f"{self.source_name}_{self.version}_source.changes"

    @property
    def orig_tarball(self) -> Path:
        return self.output_dir / f"{self.source_name}_{self.version}.orig.tar.gz"

    def binary_glob(self) -> str:
        return f"{self.package_name}_{self.version}_*.deb"


@dataclass
class SeriesResult:
    """Outcome of building one build context."""

    distribution: str
    version: str
    artifact: Path | None = None
    uploaded: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "distribution": self.distribution,
            "version": self.version,
            "artifact": str(self.artifact) if self.artifact else None,
            "uploaded": self.uploaded,
            "error": self.error,
        }


@dataclass
class ReleaseResult:
    """Ordered log of completed and failed build contexts."""

    mode: Mode
    completed: list[SeriesResult] = field(default_factory=list)
    failed: list[SeriesResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "completed": [r.to_dict() for r in self.completed],
            "failed": [r.to_dict() for r in self.failed],
        }
