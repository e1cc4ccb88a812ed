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

"""Progress display for long-running packaging tools.

debuild and dput can run for minutes with their output captured to the run
logs. While they run, a Rich status spinner with the phase label is shown
on a TTY; otherwise a single start line is printed. Either way a closing
line reports how long the step took.
"""

from __future__ import annotations

import contextlib
import sys
import time
from collections.abc import Iterator

from rich.console import Console
from rich.markup import escape


def is_tty() -> bool:
    """Return True if the real stdout is a terminal."""
    stream = sys.__stdout__
    if stream is None:  # pragma: no cover
        return False
    with contextlib.suppress(Exception):
        return stream.isatty()
    return False  # pragma: no cover


def _emit(line: str) -> None:
    with contextlib.suppress(Exception):
        print(line, file=sys.__stdout__, flush=True)


@contextlib.contextmanager
def activity_spinner(phase: str, description: str, disable: bool = False) -> Iterator[None]:
    """Show progress for the wrapped tool invocation.

    Args:
        phase: Phase label (e.g., "build", "upload").
        description: What is running (e.g., "debuild (source) hello 1.2.0~noble").
        disable: Print plain lines even on a TTY (--no-spinner).
    """
    label = f"[{phase}] {description}"
    start = time.monotonic()
    outcome = "failed"
    try:
        if disable or not is_tty():
            _emit(label)
            yield
        else:
            console = Console(file=sys.__stdout__, force_terminal=True)
            with console.status(escape(label), spinner="dots"):
                yield
        outcome = "done"
    finally:
        _emit(f"{label}: {outcome} in {time.monotonic() - start:.1f}s")
