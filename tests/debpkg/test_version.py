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

"""Tests for debrelease.debpkg.version module."""

from __future__ import annotations

import datetime

import pytest
from debian.debian_support import Version

from debrelease.core.exceptions import ConfigError, InvalidVersionError
from debrelease.debpkg import version
from debrelease.debpkg.version import LocalContext, ReleaseVersion, SeriesContext


class TestComposeSeries:
    """Tests for compose() with a SeriesContext."""

    @pytest.mark.parametrize("base", ["1.2.0", "0.0.9", "2:1.0-1", "1.0+dfsg", "3.0~rc1"])
    @pytest.mark.parametrize("series", ["jammy", "noble", "focal"])
    def test_series_suffix_sorts_below_base(self, base: str, series: str) -> None:
        composed = version.compose(base, SeriesContext(series))
        assert composed == f"{base}~{series}"
        assert Version(composed) < Version(base)
        assert version.compare_versions(composed, base) == -1

    def test_series_ordering_is_alphabetical(self) -> None:
        jammy = version.compose("1.2.0", SeriesContext("jammy"))
        noble = version.compose("1.2.0", SeriesContext("noble"))
        assert version.compare_versions(jammy, noble) == -1


class TestComposeLocal:
    """Tests for compose() with a LocalContext."""

    def test_local_format(self) -> None:
        ts = datetime.datetime(2026, 2, 20, 12, 30, 5, tzinfo=datetime.UTC)
        composed = version.compose("0.0.9", LocalContext(short_hash="0123456789ab", timestamp=ts))
        assert composed == "0.0.9+git0123456789ab+20260220123005"

    def test_timestamp_converted_to_utc(self) -> None:
        tz = datetime.timezone(datetime.timedelta(hours=2))
        ts = datetime.datetime(2026, 2, 20, 14, 30, 5, tzinfo=tz)
        composed = version.compose("0.0.9", LocalContext(short_hash="abc", timestamp=ts))
        assert composed.endswith("+20260220123005")

    def test_empty_hash_becomes_nogit(self) -> None:
        ts = datetime.datetime(2026, 1, 1, tzinfo=datetime.UTC)
        composed = version.compose("1.0", LocalContext(short_hash="", timestamp=ts))
        assert composed == "1.0+gitnogit+20260101000000"

    def test_local_sorts_above_base(self) -> None:
        ts = datetime.datetime(2026, 1, 1, tzinfo=datetime.UTC)
        composed = version.compose("1.0", LocalContext(short_hash="abc", timestamp=ts))
        assert version.compare_versions(composed, "1.0") == 1

    def test_deterministic(self) -> None:
        ctx = LocalContext(short_hash="abc", timestamp=datetime.datetime(2026, 1, 1, tzinfo=datetime.UTC))
        assert version.compose("1.0", ctx) == version.compose("1.0", ctx)


class TestReleaseVersion:
    def test_str_composes(self) -> None:
        assert str(ReleaseVersion("1.2.0", SeriesContext("noble"))) == "1.2.0~noble"


class TestValidateBaseVersion:
    """Tests for validate_base_version()."""

    @pytest.mark.parametrize("base", ["1.2.0", "0.0.9", "2:1.0-1", "1.0+dfsg~rc1", "A.b"])
    def test_valid(self, base: str) -> None:
        assert version.validate_base_version(base) == base

    @pytest.mark.parametrize("base", ["", "1.0 beta", "1.0_1", "v1/2", "1.0;rm"])
    def test_invalid(self, base: str) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            version.validate_base_version(base)
        assert exc_info.value.exit_code == 2
        assert isinstance(exc_info.value, ConfigError)
        assert "Invalid Debian version" in exc_info.value.message


class TestCompareVersions:
    def test_equal(self) -> None:
        assert version.compare_versions("1.0-1", "1.0-1") == 0

    def test_greater(self) -> None:
        assert version.compare_versions("1.1", "1.0") == 1

    def test_epoch_wins(self) -> None:
        assert version.compare_versions("1:0.1", "9.9") == 1
