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

"""Debian control file parsing utilities using python-debian."""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass
from pathlib import Path

from debrelease.core.exceptions import ControlFileError

# Suppress python3-apt warning - it's optional and not installable via pip
with warnings.catch_warnings():
    warnings.filterwarnings("ignore", message=".*python.*-apt.*")
    warnings.filterwarnings("ignore", message=".*apt_pkg.*")
    from debian.deb822 import Deb822

_MAINTAINER_RE = re.compile(r"^(.*?)\s*<([^>]+)>\s*$")


@dataclass(frozen=True)
class ControlInfo:
    """Identity fields read once from debian/control."""

    package: str
    source: str
    maintainer_name: str
    maintainer_email: str

    @property
    def maintainer(self) -> str:
        return f"{self.maintainer_name} <{self.maintainer_email}>"

    def maintainer_env(self) -> dict[str, str]:
        """Environment for debuild/dch so signatures match the changelog."""
        return {"DEBFULLNAME": self.maintainer_name, "DEBEMAIL": self.maintainer_email}


def parse_maintainer(value: str) -> tuple[str, str]:
    """Split a "Name <email>" maintainer field; the name may be empty.

    Raises:
        ValueError: If the field does not have that shape.
    """
    match = _MAINTAINER_RE.match(value.strip())
    if not match:
        raise ValueError(f"unexpected maintainer format: {value!r}")
    return match.group(1).strip(), match.group(2).strip()


def parse_control(text: str, path: str = "debian/control") -> ControlInfo:
    """Parse control file text into ControlInfo.

    The first Package, Source and Maintainer fields found across the
    stanzas are used. Source falls back to Package when absent.

    Raises:
        ControlFileError: If Package or Maintainer is missing or malformed.
    """
    package = ""
    source = ""
    maintainer = ""
    for para in Deb822.iter_paragraphs(text.splitlines()):
        package = package or para.get("Package", "").strip()
        source = source or para.get("Source", "").strip()
        maintainer = maintainer or para.get("Maintainer", "").strip()

    if not package:
        raise ControlFileError(message=f"Failed to parse Package from {path}", path=path)
    if not maintainer:
        raise ControlFileError(message=f"Failed to parse Maintainer from {path}", path=path)
    try:
        name, email = parse_maintainer(maintainer)
    except ValueError as e:
        raise ControlFileError(message=f"Failed to parse Maintainer from {path}: {e}", path=path) from e

    return ControlInfo(
        package=package,
        source=source or package,
        maintainer_name=name,
        maintainer_email=email,
    )


def read_control_info(root: Path) -> ControlInfo:
    """Read ControlInfo from <root>/debian/control.

    Raises:
        ControlFileError: If the file is missing or incomplete.
    """
    control_path = root / "debian" / "control"
    if not control_path.is_file():
        raise ControlFileError(
            message="debian/control not found. Run from package root.",
            path=str(control_path),
        )
    return parse_control(control_path.read_text(encoding="utf-8"), path=str(control_path))
