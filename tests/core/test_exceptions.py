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

"""Tests for debrelease.core.exceptions module."""

from __future__ import annotations

import pytest

from debrelease.build.errors import EXIT_BUILD_FAILED, EXIT_CONFIG_ERROR
from debrelease.core import exceptions


@pytest.mark.parametrize(
    "cls",
    [
        exceptions.InvalidVersionError,
        exceptions.MissingOptionError,
        exceptions.TagNotFoundError,
        exceptions.EmptySubjectError,
        exceptions.EmptyBodyError,
        exceptions.DistributionDetectError,
        exceptions.ControlFileError,
        exceptions.MissingToolError,
    ],
)
def test_config_errors_exit_2(cls: type[exceptions.ConfigError]) -> None:
    err = cls(message="boom")
    assert isinstance(err, exceptions.ConfigError)
    assert isinstance(err, exceptions.DebreleaseError)
    assert err.exit_code == EXIT_CONFIG_ERROR


@pytest.mark.parametrize(
    "cls",
    [exceptions.PackagingError, exceptions.MissingArtifactError, exceptions.UploadError],
)
def test_build_errors_exit_1(cls: type[exceptions.BuildError]) -> None:
    err = cls(message="boom", series="noble")
    assert isinstance(err, exceptions.BuildError)
    assert err.exit_code == EXIT_BUILD_FAILED
    assert err.series == "noble"


def test_raise_and_catch_as_base() -> None:
    with pytest.raises(exceptions.DebreleaseError) as exc_info:
        raise exceptions.EmptyBodyError(message="Tag body is empty", tag="v1")
    assert exc_info.value.tag == "v1"
    assert exc_info.value.message == "Tag body is empty"


def test_missing_tool_defaults() -> None:
    err = exceptions.MissingToolError()
    assert err.missing == []
    assert err.message == "An error occurred"
