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

"""Tests for debrelease.commands.release module."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from debrelease.commands import release
from debrelease.core.context import Mode, ReleaseRequest, ReleaseResult, SeriesResult
from debrelease.core.exceptions import EmptyBodyError, PackagingError


def _request(**kwargs) -> ReleaseRequest:
    defaults = {
        "mode": Mode.PPA,
        "base_version": "1.2.0",
        "root": Path("/tmp/pkg"),
        "tag": "v1.2.0",
        "series": "jammy noble",
        "ppa_target": "ppa:team/name",
        "gpg_key_id": "ABCDEF",
        "no_spinner": True,
    }
    defaults.update(kwargs)
    return ReleaseRequest(**defaults)


def _summary(temp_home: Path) -> dict:
    runs = sorted((temp_home / ".cache" / "debrelease" / "runs").iterdir())
    return json.loads((runs[-1] / "summary.json").read_text())


class TestRunRelease:
    """Tests for run_release() exit code mapping."""

    def test_success(self, temp_home: Path) -> None:
        result = ReleaseResult(mode=Mode.PPA)
        result.completed.append(SeriesResult(distribution="jammy", version="1.2.0~jammy"))
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            mock_orch.return_value.execute.return_value = result
            assert release.run_release(_request()) == 0

        options = mock_orch.call_args[0][0]
        assert options.series == ("jammy", "noble")
        summary = _summary(temp_home)
        assert summary["status"] == "success"
        assert summary["result"]["completed"][0]["distribution"] == "jammy"

    def test_missing_option_is_config_error(self, temp_home: Path) -> None:
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            assert release.run_release(_request(ppa_target=None)) == 2
        mock_orch.assert_not_called()
        assert _summary(temp_home)["exit_code"] == 2

    def test_tag_error_is_config_error(self, temp_home: Path) -> None:
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            mock_orch.return_value.execute.side_effect = EmptyBodyError(
                message="Tag body (release description) for v1.2.0 is empty; refusing to proceed",
                tag="v1.2.0",
            )
            assert release.run_release(_request()) == 2
        assert "refusing to proceed" in _summary(temp_home)["error"]

    def test_failed_series_is_build_failure(self, temp_home: Path) -> None:
        result = ReleaseResult(mode=Mode.PPA)
        result.completed.append(SeriesResult(distribution="jammy", version="1.2.0~jammy"))
        result.failed.append(SeriesResult(distribution="noble", version="1.2.0~noble", error="debuild failed"))
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            mock_orch.return_value.execute.return_value = result
            assert release.run_release(_request()) == 1

        summary = _summary(temp_home)
        assert summary["status"] == "failed"
        assert summary["error"] == "Build failed for: noble"

    def test_build_error_is_build_failure(self, temp_home: Path) -> None:
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            mock_orch.return_value.execute.side_effect = PackagingError(message="debuild failed", series="jammy")
            assert release.run_release(_request()) == 1

    def test_unexpected_error_is_build_failure(self, temp_home: Path) -> None:
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            mock_orch.return_value.execute.side_effect = OSError("disk full")
            assert release.run_release(_request()) == 1
        assert _summary(temp_home)["error"] == "disk full"

    def test_invalid_config_file(self, temp_home: Path) -> None:
        config_dir = temp_home / ".config" / "debrelease"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("defaults: [broken\n")
        assert release.run_release(_request()) == 2

    def test_config_defaults_fill_request(self, temp_home: Path, mock_config: Path) -> None:
        mock_config.write_text("defaults:\n  ppa_series: noble\n  upload: true\n")
        result = ReleaseResult(mode=Mode.PPA)
        with patch("debrelease.commands.release.ReleaseOrchestrator") as mock_orch:
            mock_orch.return_value.execute.return_value = result
            release.run_release(_request(series=None))

        options = mock_orch.call_args[0][0]
        assert options.series == ("noble",)
        assert options.upload is True


@pytest.mark.parametrize("version", ["1.0 beta", "1.0_1"])
def test_invalid_version_exit_code(temp_home: Path, version: str) -> None:
    request = ReleaseRequest(mode=Mode.LOCAL, base_version=version, distribution="noble")
    assert release.run_release(request) == 2
