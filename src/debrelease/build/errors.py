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

"""Exit codes and error reporting for release phases.

Every failure is reported twice: one human-readable `[phase]` activity line
on the terminal, and one structured event in the run's events.jsonl. The
final exit code is also written to summary.json.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from debrelease.core.exceptions import DebreleaseError
from debrelease.core.run import activity

if TYPE_CHECKING:
    from debrelease.core.context import ReleaseResult
    from debrelease.core.run import RunContext


# Exit codes. Callers (CI, service managers) retry on 1 and never on 2.
EXIT_SUCCESS = 0
EXIT_BUILD_FAILED = 1
EXIT_CONFIG_ERROR = 2

# Error fields that are already part of every error event
_BASE_FIELDS = {"message", "exit_code"}


def exit_code_for(error: BaseException) -> int:
    """Return the process exit code for an error.

    Debrelease errors carry their own code; anything else is treated as a
    runtime failure.
    """
    if isinstance(error, DebreleaseError):
        return error.exit_code
    return EXIT_BUILD_FAILED


def error_details(error: BaseException) -> dict[str, Any]:
    """Extra fields of a Debrelease error (tag, option, series, ...)."""
    if not isinstance(error, DebreleaseError):
        return {}
    return {
        f.name: getattr(error, f.name)
        for f in dataclasses.fields(error)
        if f.name not in _BASE_FIELDS and getattr(error, f.name) not in (None, "", [])
    }


def log_phase_event(
    run: RunContext,
    phase: str,
    message: str,
    event_key: str,
    **event_data: Any,
) -> None:
    """Print an activity line and record the matching structured event.

    Example:
        log_phase_event(run, "upload", f"Uploaded {changes.name}", "ppa.uploaded", series=series)
    """
    activity(phase, message)
    run.log_event({"event": event_key, **event_data})


def phase_warning(
    run: RunContext,
    phase: str,
    message: str,
    *,
    event_key: str | None = None,
    **event_data: Any,
) -> None:
    """Report a non-fatal problem; the run status is left alone."""
    activity(phase, f"Warning: {message}")
    run.log_event({"event": event_key or f"{phase}.warning", "message": message, **event_data})


def phase_error(
    run: RunContext,
    phase: str,
    message: str,
    exit_code: int,
    **event_data: Any,
) -> int:
    """Report a fatal problem, mark the run failed and return exit_code.

    Meant to be used as `return phase_error(...)` from a command.
    """
    activity(phase, f"ERROR: {message}")
    run.log_event({"event": f"{phase}.error", "message": message, "exit_code": exit_code, **event_data})
    run.write_summary(status="failed", error=message, exit_code=exit_code)
    return exit_code


def report_error(run: RunContext, phase: str, error: BaseException) -> int:
    """Report an exception raised by a release phase.

    Returns:
        The exit code for the error (2 for configuration errors, 1 otherwise).
    """
    message = error.message if isinstance(error, DebreleaseError) else str(error)
    return phase_error(
        run,
        phase,
        message,
        exit_code_for(error),
        error_type=type(error).__name__,
        **error_details(error),
    )


def report_result(run: RunContext, result: ReleaseResult) -> int:
    """Write the release result to the summary and return the exit code.

    Completed series are listed even when a later one failed; their
    artifacts (and uploads) stay valid.
    """
    run.write_summary(result=result.to_dict())
    if result.success:
        run.write_summary(status="success", exit_code=EXIT_SUCCESS)
        return EXIT_SUCCESS

    completed = [r.distribution for r in result.completed]
    if completed:
        activity("report", f"Completed: {', '.join(completed)}")
    for record in result.failed:
        activity("report", f"Failed: {record.distribution} ({record.version})")
    failed = ", ".join(r.distribution for r in result.failed)
    return phase_error(
        run,
        "report",
        f"Build failed for: {failed}",
        EXIT_BUILD_FAILED,
        failed=[r.to_dict() for r in result.failed],
        completed=completed,
    )
