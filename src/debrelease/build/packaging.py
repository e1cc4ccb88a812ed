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

"""Packaging and upload tool invocations.

debuild and dput are run synchronously with no timeout; the calling CI job
bounds the run. Their combined output goes to the run's stdout log. After
each build the expected artifact is checked on disk.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from debrelease.core.context import BuildContext
from debrelease.core.exceptions import MissingArtifactError, PackagingError, UploadError
from debrelease.core.run import activity
from debrelease.spinner import activity_spinner

logger = logging.getLogger(__name__)

# Lines of tool output echoed to the terminal on failure
OUTPUT_TAIL_LINES = 20


def run_command(
    cmd: Sequence[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command and return exit code, stdout, stderr.

    Args:
        cmd: Command and arguments to run.
        cwd: Working directory for the command.
        env: Environment variables (merged with current env).
    """
    run_env = os.environ.copy()
    if env:
        run_env.update(env)

    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    result = subprocess.run(
        list(cmd),
        cwd=cwd,
        env=run_env,
        capture_output=True,
        text=True,
    )
    return result.returncode, result.stdout, result.stderr


def _record_output(stdout: str, stderr: str) -> str:
    output = stdout + stderr
    # sys.stdout is the run's stdout.log inside a RunContext
    print(output, file=sys.stdout)
    return output


def _tail(output: str) -> str:
    return "\n".join(output.splitlines()[-OUTPUT_TAIL_LINES:])


def build_binary_package(
    ctx: BuildContext,
    env: dict[str, str] | None = None,
    no_spinner: bool = False,
) -> list[Path]:
    """Build an unsigned binary package with `debuild -us -uc -b -jauto`.

    Returns:
        The produced .deb files.

    Raises:
        PackagingError: If debuild fails.
        MissingArtifactError: If no .deb matching the version was produced.
    """
    cmd = ["debuild", "-us", "-uc", "-b", "-jauto"]
    with activity_spinner("build", f"debuild (binary) {ctx.package_name} {ctx.version}", disable=no_spinner):
        returncode, stdout, stderr = run_command(cmd, cwd=ctx.source_dir, env=env)
    output = _record_output(stdout, stderr)

    if returncode != 0:
        raise PackagingError(
            message=f"debuild failed with exit code {returncode}\n{_tail(output)}",
            returncode=returncode,
            series=ctx.distribution,
        )

    debs = sorted(ctx.output_dir.glob(ctx.binary_glob()))
    if not debs:
        raise MissingArtifactError(
            message=f"Expected binary package not found: {ctx.output_dir / ctx.binary_glob()}",
            path=str(ctx.output_dir / ctx.binary_glob()),
            series=ctx.distribution,
        )
    return debs


def build_signed_source(
    ctx: BuildContext,
    gpg_key_id: str,
    env: dict[str, str] | None = None,
    no_spinner: bool = False,
) -> Path:
    """Build a signed source package with `debuild -S -sa -k<key>`.

    Returns:
        Path to the produced <source>_<version>_source.changes.

    Raises:
        PackagingError: If debuild fails.
        MissingArtifactError: If the .changes file is missing afterwards.
    """
    cmd = ["debuild", "-S", "-sa", f"-k{gpg_key_id}"]
    with activity_spinner("build", f"debuild (source) {ctx.source_name} {ctx.version}", disable=no_spinner):
        returncode, stdout, stderr = run_command(cmd, cwd=ctx.source_dir, env=env)
    output = _record_output(stdout, stderr)

    if returncode != 0:
        raise PackagingError(
            message=f"debuild failed for {ctx.distribution} with exit code {returncode}\n{_tail(output)}",
            returncode=returncode,
            series=ctx.distribution,
        )

    changes = ctx.changes_file
    if not changes.is_file():
        raise MissingArtifactError(
            message=f"Expected changes file not found: {changes}",
            path=str(changes),
            series=ctx.distribution,
        )
    return changes


def upload_changes(
    target: str,
    changes_file: Path,
    series: str | None = None,
    no_spinner: bool = False,
) -> None:
    """Upload a source package with `dput <target> <changes>`.

    dput runs next to the .changes file, which is passed by name so the
    upload works for relative paths too.

    Raises:
        UploadError: If dput is missing or fails.
    """
    cmd = ["dput", target, changes_file.name]
    activity("upload", f"  Command: {' '.join(cmd)}")
    try:
        with activity_spinner("upload", f"Uploading {changes_file.name} to {target}", disable=no_spinner):
            returncode, stdout, stderr = run_command(cmd, cwd=changes_file.parent)
    except FileNotFoundError as e:
        raise UploadError(
            message="dput is not installed. Install with: sudo apt install dput",
            series=series,
        ) from e

    output = _record_output(stdout, stderr)
    if returncode != 0:
        raise UploadError(
            message=f"Upload of {changes_file.name} to {target} failed with exit code {returncode}\n{_tail(output)}",
            returncode=returncode,
            series=series,
        )
