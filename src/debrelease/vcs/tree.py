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

"""Source tree access for release builds.

Exports committed HEAD content into isolated build directories, creates
.orig tarballs, and reads HEAD metadata (short hash, commit time). When the
package root is not a git checkout, local builds fall back to copying the
working tree.
"""

from __future__ import annotations

import io
import logging
import shutil
import tarfile
from pathlib import Path

import git

from debrelease.core.context import BUILD_DIR_NAME
from debrelease.debpkg.version import NO_GIT_HASH

logger = logging.getLogger(__name__)

SHORT_HASH_LENGTH = 12


def open_repo(root: Path) -> git.Repo | None:
    """Open the git repository containing root, or None if there is none."""
    try:
        return git.Repo(root, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        logger.info("%s is not inside a git repository", root)
        return None


def head_short_hash(repo: git.Repo | None, length: int = SHORT_HASH_LENGTH) -> str:
    """Return the abbreviated HEAD commit id, or "nogit" if unavailable."""
    if repo is None:
        return NO_GIT_HASH
    try:
        return repo.git.rev_parse(f"--short={length}", "HEAD").strip() or NO_GIT_HASH
    except git.GitCommandError:
        logger.info("No HEAD commit; using '%s' as short hash", NO_GIT_HASH)
        return NO_GIT_HASH


def head_commit_epoch(repo: git.Repo | None) -> int | None:
    """Return the committer timestamp of HEAD, or None if unavailable."""
    if repo is None:
        return None
    try:
        return int(repo.head.commit.committed_date)
    except ValueError:
        # Unborn branch (no commits yet)
        return None


def _treeish(repo: git.Repo, root: Path) -> str:
    """Return the HEAD tree-ish for root, which may be a repo subdirectory."""
    worktree = Path(repo.working_tree_dir or root).resolve()
    rel = root.resolve().relative_to(worktree)
    if rel == Path("."):
        return "HEAD"
    return f"HEAD:{rel.as_posix()}"


def export_tree(repo: git.Repo | None, root: Path, dest: Path) -> Path:
    """Export the package source into dest.

    With a repository, committed HEAD content is exported (equivalent to
    `git archive HEAD | tar -x`), so uncommitted changes never leak into a
    release. Without one, the working tree is copied minus .git and the
    build directory.

    Args:
        repo: Repository or None.
        root: Package root.
        dest: Target directory; created if needed.

    Returns:
        dest.
    """
    dest.mkdir(parents=True, exist_ok=True)

    if repo is None:
        root_resolved = root.resolve()

        def _ignore(directory: str, names: list[str]) -> set[str]:
            ignored = {".git"} & set(names)
            if Path(directory).resolve() == root_resolved and BUILD_DIR_NAME in names:
                ignored.add(BUILD_DIR_NAME)
            return ignored

        shutil.copytree(root, dest, ignore=_ignore, dirs_exist_ok=True)
        return dest

    buf = io.BytesIO()
    repo.archive(buf, treeish=_treeish(repo, root), format="tar")
    buf.seek(0)
    with tarfile.open(fileobj=buf, mode="r:") as tar:
        # Committed symlinks may point outside the tree (COPYING -> /usr/share/...)
        tar.extractall(dest, filter="tar")
    return dest


def make_orig_tarball(repo: git.Repo, root: Path, source: str, version: str, out_dir: Path) -> Path:
    """Create <out_dir>/<source>_<version>.orig.tar.gz from HEAD.

    Entries are prefixed with "<source>-<version>/".
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / f"{source}_{version}.orig.tar.gz"
    with out.open("wb") as f:
        repo.archive(f, treeish=_treeish(repo, root), prefix=f"{source}-{version}/", format="tar.gz")
    return out
