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

"""Tests for debrelease.spinner module."""

from __future__ import annotations

import io
import sys
from unittest.mock import patch

import pytest

from debrelease import spinner


@pytest.fixture
def terminal(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    stream = io.StringIO()
    monkeypatch.setattr(sys, "__stdout__", stream)
    return stream


class TestActivitySpinner:
    """Tests for activity_spinner()."""

    def test_plain_lines_when_disabled(self, terminal: io.StringIO) -> None:
        with spinner.activity_spinner("build", "debuild (source) hello 1.2.0~noble", disable=True):
            pass
        lines = terminal.getvalue().splitlines()
        assert lines[0] == "[build] debuild (source) hello 1.2.0~noble"
        assert lines[1].startswith("[build] debuild (source) hello 1.2.0~noble: done in ")

    def test_plain_lines_without_tty(self, terminal: io.StringIO) -> None:
        with patch("debrelease.spinner.is_tty", return_value=False):
            with spinner.activity_spinner("upload", "Uploading"):
                pass
        assert terminal.getvalue().startswith("[upload] Uploading\n")

    def test_failure_reported_and_propagated(self, terminal: io.StringIO) -> None:
        with pytest.raises(RuntimeError):
            with spinner.activity_spinner("build", "debuild", disable=True):
                raise RuntimeError("boom")
        assert "[build] debuild: failed in " in terminal.getvalue()

    def test_is_tty_false_for_stringio(self, terminal: io.StringIO) -> None:
        assert spinner.is_tty() is False

    def test_rich_status_on_tty(self, terminal: io.StringIO) -> None:
        with patch("debrelease.spinner.is_tty", return_value=True), patch("debrelease.spinner.Console") as console_cls:
            with spinner.activity_spinner("build", "debuild"):
                pass
        console_cls.return_value.status.assert_called_once_with("\\[build] debuild", spinner="dots")
        assert terminal.getvalue().startswith("[build] debuild: done in ")
