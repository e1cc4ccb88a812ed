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
"""External tool validation for Debrelease.

Each mode needs a fixed set of executables on PATH. A missing tool is a
configuration error and is reported before any build tree is created.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from debrelease.core.context import Mode
from debrelease.core.exceptions import MissingToolError

# Executable -> Debian package providing it
TOOL_PACKAGES: dict[str, str] = {
    "git": "git",
    "debuild": "devscripts",
    "gpg": "gnupg",
    "dput": "dput",
    "lsb_release": "lsb-release",
}

# git is needed even outside a repository: GitPython shells out to it
MODE_TOOLS: dict[Mode, tuple[str, ...]] = {
    Mode.LOCAL: ("git", "debuild"),
    Mode.PPA: ("git", "debuild", "gpg", "dput"),
}


@dataclass
class ToolCheck:
    """Where each wanted tool was found, and which ones were not."""

    tools: dict[str, Path | None] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)

    def is_complete(self) -> bool:
        return not self.missing


def tools_for(mode: Mode, need_lsb_release: bool = False) -> list[str]:
    wanted = list(MODE_TOOLS[mode])
    if need_lsb_release:
        wanted.append("lsb_release")
    return wanted


def check_required_tools(mode: Mode, need_lsb_release: bool = False) -> ToolCheck:
    """Look up the tools a mode needs on PATH.

    Args:
        mode: Local or PPA.
        need_lsb_release: Also require lsb_release (local distribution detection).
    """
    check = ToolCheck()
    for tool in tools_for(mode, need_lsb_release):
        located = shutil.which(tool)
        check.tools[tool] = Path(located) if located else None
        if located is None:
            check.missing.append(tool)
    return check


def get_missing_tools_message(missing: list[str]) -> str:
    """Describe missing tools with the apt command that installs them."""
    if not missing:
        return ""

    packages = list(dict.fromkeys(TOOL_PACKAGES.get(tool, tool) for tool in missing))
    lines = [f"Missing command: {', '.join(missing)}"]
    lines.extend(f"  - {tool} (package {TOOL_PACKAGES.get(tool, tool)})" for tool in missing)
    lines += ["", f"Install with: sudo apt install {' '.join(packages)}"]
    return "\n".join(lines)


def require_tools(mode: Mode, need_lsb_release: bool = False) -> ToolCheck:
    """Raise MissingToolError unless every needed tool is on PATH."""
    check = check_required_tools(mode, need_lsb_release=need_lsb_release)
    if not check.is_complete():
        raise MissingToolError(message=get_missing_tools_message(check.missing), missing=check.missing)
    return check
