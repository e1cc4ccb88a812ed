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

"""Implementation of `debrelease local` and `debrelease ppa` commands.

Exit codes:
  0 - Success
  1 - Build, signing or upload failed (safe to retry)
  2 - Configuration error (do not retry)
"""

from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional

import typer

from debrelease.build.errors import EXIT_CONFIG_ERROR, report_error, report_result
from debrelease.config import load_config, resolve_options
from debrelease.core.context import Mode, ReleaseRequest
from debrelease.core.exceptions import ConfigError, DebreleaseError
from debrelease.core.run import RunContext, activity
from debrelease.release.orchestrator import ReleaseOrchestrator


def run_release(request: ReleaseRequest) -> int:
    """Run a release and return the exit code (without sys.exit)."""
    try:
        cfg = load_config()
    except ConfigError as e:
        activity("config", f"ERROR: {e.message}")
        return EXIT_CONFIG_ERROR

    with RunContext(request.mode.value, cfg) as run:
        try:
            options = resolve_options(request, cfg)
            result = ReleaseOrchestrator(options, run).execute()
        except DebreleaseError as e:
            return report_error(run, "config" if isinstance(e, ConfigError) else "build", e)
        except Exception as e:
            for line in traceback.format_exc().splitlines():
                activity("error", f"  {line}")
            return report_error(run, "build", e)

        return report_result(run, result)


def local(
    version: str = typer.Argument(..., help="Base package version (e.g., 0.0.9)"),
    clean: bool = typer.Option(False, "--clean", help="Remove the build directory before starting"),
    dist: str = typer.Option("", "--dist", envvar="DEB_DIST", help="Distribution (default: autodetect)"),
    subject: str = typer.Option("", "--subject", help="Changelog subject (default: 'Local build <version>')"),
    source_date_epoch: str = typer.Option(
        "", "--source-date-epoch", envvar="SOURCE_DATE_EPOCH", help="Fixed changelog timestamp (epoch seconds)"
    ),
    directory: Path = typer.Option(Path("."), "-C", "--directory", help="Package root containing debian/"),
    no_spinner: bool = typer.Option(False, "-q", "--no-spinner", help="Disable spinner output (quiet)"),
) -> None:
    """Build a local unsigned .deb for development/testing.

    The version is suffixed with +git<sha>+<timestamp> so it never collides
    with PPA builds.
    """
    request = ReleaseRequest(
        mode=Mode.LOCAL,
        base_version=version,
        root=directory,
        clean=clean,
        distribution=dist or None,
        subject=subject or None,
        source_date_epoch=source_date_epoch or None,
        no_spinner=no_spinner,
    )
    sys.exit(run_release(request))


def ppa(
    version: str = typer.Argument(..., help="Base package version (e.g., 0.0.9)"),
    msg_from_tag: str = typer.Option(
        "", "--msg-from-tag", help="Annotated tag whose subject and body become the changelog"
    ),
    clean: bool = typer.Option(False, "--clean", help="Remove the build directory before starting"),
    series: str = typer.Option("", "--series", envvar="PPA_SERIES", help="Series list (e.g., 'jammy noble')"),
    ppa_target: str = typer.Option("", "--ppa", envvar="PPA_TARGET", help="Upload target (e.g., ppa:TEAM/NAME)"),
    upload: Optional[bool] = typer.Option(None, "--upload/--no-upload", help="Upload each series after it is built"),
    gpg_key: str = typer.Option("", "--gpg-key", envvar="GPG_KEY_ID", help="Signing key id"),
    keep_going: Optional[bool] = typer.Option(
        None, "--keep-going/--fail-fast", help="Continue with remaining series after a failure"
    ),
    source_date_epoch: str = typer.Option(
        "", "--source-date-epoch", envvar="SOURCE_DATE_EPOCH", help="Fixed changelog timestamp (epoch seconds)"
    ),
    directory: Path = typer.Option(Path("."), "-C", "--directory", help="Package root containing debian/"),
    no_spinner: bool = typer.Option(False, "-q", "--no-spinner", help="Disable spinner output (quiet)"),
) -> None:
    """Build signed source packages for an Ubuntu PPA, one per series.

    The changelog comes from an annotated tag: both its subject and body
    must be non-empty. A subject starting with 'CRITICAL: ' sets
    urgency=critical.
    """
    request = ReleaseRequest(
        mode=Mode.PPA,
        base_version=version,
        root=directory,
        clean=clean,
        tag=msg_from_tag or None,
        series=series or None,
        ppa_target=ppa_target or None,
        gpg_key_id=gpg_key or None,
        upload=upload,
        keep_going=keep_going,
        source_date_epoch=source_date_epoch or None,
        no_spinner=no_spinner,
    )
    sys.exit(run_release(request))
