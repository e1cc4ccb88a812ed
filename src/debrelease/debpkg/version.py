# This file is part of Debrelease, a tool for building Debian packages for local testing and Ubuntu PPAs.
#
# Copyright 2025 Canonical Ltd.
#
# SPDX-License-Identifier: GPL-3.0-only

"""Version composition and comparison for Debian packages.

Local builds get a `+git<sha>+<timestamp>` suffix so they never collide with
PPA uploads. PPA builds get a `~<series>` suffix; the tilde sorts before
everything in Debian version ordering, so `1.2.0~jammy` is lower than
`1.2.0` and a later archive upload of the plain version supersedes it.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

from debian.debian_support import Version as DebianVersion

from debrelease.core.exceptions import InvalidVersionError

# Characters allowed in a base version
BASE_VERSION_RE = re.compile(r"^[A-Za-z0-9.+:~-]+$")

# Short hash used when the source is not a git checkout
NO_GIT_HASH = "nogit"

LOCAL_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class LocalContext:
    """Context for a local development build."""

    short_hash: str
    timestamp: datetime.datetime


@dataclass(frozen=True)
class SeriesContext:
    """Context for a PPA build targeting one series."""

    series: str


@dataclass(frozen=True)
class ReleaseVersion:
    """A base version bound to a build context."""

    base: str
    context: LocalContext | SeriesContext

    def __str__(self) -> str:
        return compose(self.base, self.context)


def validate_base_version(base: str) -> str:
    """Check that base only contains Debian version characters.

    Raises:
        InvalidVersionError: If base is empty or contains other characters.
    """
    if not BASE_VERSION_RE.match(base or ""):
        raise InvalidVersionError(message=f"Invalid Debian version: '{base}'", version=base)
    return base


def compose(base: str, context: LocalContext | SeriesContext) -> str:
    """Compose the package version for a build context.

    Format:
        local:  <base>+git<sha>+<YYYYMMDDHHMMSS UTC>
        series: <base>~<series>

    Args:
        base: Base version (e.g., "0.0.9").
        context: LocalContext or SeriesContext.

    Returns:
        Full package version string.
    """
    if isinstance(context, SeriesContext):
        return f"{base}~{context.series}"

    ts = context.timestamp
    if ts.tzinfo is not None:
        ts = ts.astimezone(datetime.UTC)
    short_hash = context.short_hash or NO_GIT_HASH
    return f"{base}+git{short_hash}+{ts.strftime(LOCAL_TIMESTAMP_FORMAT)}"


def compare_versions(v1: str, v2: str) -> int:
    """Compare two Debian version strings.

    Returns:
        -1 if v1 < v2, 0 if v1 == v2, 1 if v1 > v2.
    """
    dv1 = DebianVersion(v1)
    dv2 = DebianVersion(v2)
    if dv1 < dv2:
        return -1
    elif dv1 > dv2:
        return 1
    return 0
