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

"""Distribution series utilities."""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Iterable

from debrelease.core.exceptions import DistributionDetectError, MissingToolError

logger = logging.getLogger(__name__)

_SERIES_SPLIT = re.compile(r"[\s,]+")


def parse_series_list(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Parse a series list, keeping the listed order.

    Accepts a whitespace or comma separated string ("jammy noble") or an
    iterable of names (as loaded from YAML). Empty entries and repeats are
    dropped; the first occurrence wins.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[str] = _SERIES_SPLIT.split(value)
    else:
        items = (str(v) for v in value)

    seen: list[str] = []
    for item in items:
        name = item.strip()
        if name and name not in seen:
            seen.append(name)
    return tuple(seen)


def detect_local_distribution() -> str:
    """Detect the host distribution codename with `lsb_release -cs`.

    Returns:
        Codename such as "noble".

    Raises:
        MissingToolError: If lsb_release is not installed.
        DistributionDetectError: If the codename cannot be determined.
    """
    try:
        result = subprocess.run(
            ["lsb_release", "-cs"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except FileNotFoundError as e:
        raise MissingToolError(message="Missing command: lsb_release", missing=["lsb_release"]) from e
    except subprocess.CalledProcessError as e:
        logger.warning("lsb_release failed: %s", e)
        raise DistributionDetectError(
            message="Could not detect local distribution; use --dist or DEB_DIST"
        ) from e
    except subprocess.TimeoutExpired as e:
        logger.warning("lsb_release timed out")
        raise DistributionDetectError(
            message="Could not detect local distribution; use --dist or DEB_DIST"
        ) from e

    codename = result.stdout.strip()
    if not codename:
        raise DistributionDetectError(message="Could not detect local distribution; use --dist or DEB_DIST")
    return codename


if __name__ == "__main__":
    print(detect_local_distribution())
