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

"""Run records for Debrelease CLI invocations.

Each invocation gets its own directory under the configured runs_root:

    <runs_root>/<YYYYMMDDTHHMMSSZ>-<command>-<id>/
        events.jsonl          one JSON event per line
        summary.json          status, exit code, release result
        logs/stdout.log       captured stdout (debuild and dput output)
        logs/stderr.log       captured stderr
        logs/debrelease.log   library logging

Activity lines and spinners bypass the capture and go to the real terminal
(sys.__stdout__).
"""

from __future__ import annotations

import contextlib
import datetime
import json
import logging
import os
import sys
import time
import uuid
from collections.abc import Mapping
from typing import IO, Any

from debrelease.config import load_config, resolve_runs_root

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RunContext:
    """Context manager owning the run directory of one invocation.

    Usage:
        with RunContext("ppa", cfg) as run:
            run.log_event({"event": "ppa.built", "series": "noble"})
            run.write_summary(exit_code=0)
    """

    def __init__(self, command: str, cfg: Mapping[str, Any] | None = None) -> None:
        self.command = command
        self.runs_root = resolve_runs_root(cfg if cfg is not None else load_config())
        self.started = datetime.datetime.now(datetime.UTC)
        self.run_id = f"{self.started:%Y%m%dT%H%M%SZ}-{command}-{uuid.uuid4().hex[:8]}"
        self.run_path = self.runs_root / self.run_id
        self.logs_path = self.run_path / "logs"
        self.summary: dict[str, Any] = {
            "command": command,
            "run_id": self.run_id,
            "start_utc": self.started.isoformat(),
        }
        self._stack = contextlib.ExitStack()
        self._events: IO[str] | None = None
        self._t0 = 0.0

    def _open_log(self, name: str) -> IO[str]:
        return self._stack.enter_context((self.logs_path / name).open("w", encoding="utf-8"))

    def _attach_logging(self) -> None:
        handler = logging.FileHandler(self.logs_path / "debrelease.log", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger = logging.getLogger("debrelease")
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        self._stack.callback(handler.close)
        self._stack.callback(logger.removeHandler, handler)

    def __enter__(self) -> RunContext:
        self.logs_path.mkdir(parents=True, exist_ok=True)
        self._t0 = time.monotonic()

        stdout = self._open_log("stdout.log")
        stderr = self._open_log("stderr.log")
        self._events = self._stack.enter_context((self.run_path / "events.jsonl").open("a", encoding="utf-8"))
        self._attach_logging()
        self._stack.enter_context(contextlib.redirect_stdout(stdout))
        self._stack.enter_context(contextlib.redirect_stderr(stderr))

        self.log_event({"event": "run.start", "run_id": self.run_id, "pid": os.getpid()})
        return self

    def log_event(self, event: dict[str, Any]) -> None:
        """Append a timestamped event to events.jsonl."""
        if self._events is None:  # pragma: no cover
            return
        record = {"timestamp": datetime.datetime.now(datetime.UTC).isoformat(), **event}
        self._events.write(json.dumps(record, default=str) + "\n")
        self._events.flush()

    def write_summary(self, **fields: Any) -> None:
        """Merge fields into summary.json, replacing the file atomically."""
        self.summary.update(fields)
        self.run_path.mkdir(parents=True, exist_ok=True)
        tmp = self.run_path / "summary.json.tmp"
        tmp.write_text(json.dumps(self.summary, indent=2, default=str) + "\n", encoding="utf-8")
        tmp.replace(self.run_path / "summary.json")

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> bool | None:
        if exc is not None:
            self.summary["status"] = "failed"
            self.summary["error"] = str(exc)
        status = self.summary.setdefault("status", "success")

        try:
            self.write_summary(
                end_utc=datetime.datetime.now(datetime.UTC).isoformat(),
                duration_s=round(time.monotonic() - self._t0, 3),
            )
            self.log_event({"event": "run.end", "status": status})
        finally:
            self._stack.close()
            self._events = None

        if status != "success":
            activity("report", f"Logs: {self.run_path}")
        return None


def activity(phase: str, description: str) -> None:
    """Print a `[phase] description` line on the real terminal."""
    with contextlib.suppress(Exception):
        print(f"[{phase}] {description}", file=sys.__stdout__, flush=True)
