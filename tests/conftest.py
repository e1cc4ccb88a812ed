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

"""Pytest fixtures and configuration for Debrelease tests."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

# Fixed commit time used by git-backed fixtures: 2024-01-02 03:04:05 UTC
COMMIT_EPOCH = 1704164645

# Absolute symlink target commonly committed as debian/copyright or COPYING
LICENSE_LINK_TARGET = "/usr/share/common-licenses/GPL-3"

CONTROL_TEXT = """\
Source: hello-src
Section: utils
Priority: optional
Maintainer: Jane Doe <jane@example.com>
Build-Depends: debhelper-compat (= 13)
Standards-Version: 4.6.2

Package: hello
Architecture: all
Depends: ${misc:Depends}
Description: example package
 An example package used in tests.
"""


@pytest.fixture
def temp_home(monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create a temporary home directory and set HOME/XDG paths."""
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir)
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
        monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
        # Also patch Path.home() to return our temp home
        monkeypatch.setattr(Path, "home", lambda: home)
        yield home


@pytest.fixture
def mock_config(temp_home: Path) -> Path:
    """Create a minimal config file in the temp home."""
    config_dir = temp_home / ".config" / "debrelease"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.yaml"
    config_file.write_text("""
paths:
  runs_root: "~/.cache/debrelease/runs"

defaults:
  distribution: null
  ppa_series: []
  ppa_target: null
  gpg_key_id: null
  upload: false
  keep_going: false
""")
    return config_file


@pytest.fixture
def package_root(tmp_path: Path) -> Path:
    """Create a minimal Debian package source tree."""
    root = tmp_path / "hello"
    (root / "debian").mkdir(parents=True)
    (root / "debian" / "control").write_text(CONTROL_TEXT)
    (root / "debian" / "rules").write_text("#!/usr/bin/make -f\n%:\n\tdh $@\n")
    (root / "debian" / "changelog").write_text(
        "hello (0.0.1) unstable; urgency=medium\n\n  * Old entry.\n\n"
        " -- Jane Doe <jane@example.com>  Mon, 01 Jan 2024 00:00:00 +0000\n"
    )
    (root / "hello.sh").write_text("#!/bin/sh\necho hello\n")
    return root


@pytest.fixture
def git_package(package_root: Path):
    """Commit package_root into a fresh git repository.

    Returns:
        The GitPython Repo.
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    import git

    repo = git.Repo.init(package_root)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Jane Doe")
        cw.set_value("user", "email", "jane@example.com")
        cw.set_value("tag", "gpgSign", "false")
        cw.set_value("commit", "gpgSign", "false")
    repo.index.add(["debian/control", "debian/rules", "debian/changelog", "hello.sh"])
    stamp = f"{COMMIT_EPOCH} +0000"
    repo.index.commit("Initial import", author_date=stamp, commit_date=stamp)
    return repo


@pytest.fixture
def license_symlink(git_package, package_root: Path) -> Path:
    """Commit COPYING as a symlink pointing outside the package tree."""
    link = package_root / "COPYING"
    link.symlink_to(LICENSE_LINK_TARGET)
    git_package.index.add(["COPYING"])
    stamp = f"{COMMIT_EPOCH} +0000"
    git_package.index.commit("Link license", author_date=stamp, commit_date=stamp)
    return link


@pytest.fixture
def stub_tool(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Return a factory writing shell-script stand-ins onto the front of PATH."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _write(name: str, script: str) -> Path:
        path = bin_dir / name
        path.write_text("#!/bin/sh\n" + script)
        path.chmod(0o755)
        return path

    return _write
