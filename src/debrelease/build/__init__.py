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

"""Build module for Debrelease.

Provides the debuild/dput invocations, external tool checks, and the
exit codes and error helpers shared by the release phases.
"""

# Error handling and exit codes
from debrelease.build.errors import (
    EXIT_BUILD_FAILED,
    EXIT_CONFIG_ERROR,
    EXIT_SUCCESS,
    error_details,
    exit_code_for,
    log_phase_event,
    phase_error,
    phase_warning,
    report_error,
    report_result,
)

# Packaging tool invocations
from debrelease.build.packaging import (
    build_binary_package,
    build_signed_source,
    run_command,
    upload_changes,
)

# Tool checks
from debrelease.build.tools import (
    ToolCheck,
    check_required_tools,
    get_missing_tools_message,
    require_tools,
)

__all__ = [
    # Exit codes
    "EXIT_BUILD_FAILED",
    "EXIT_CONFIG_ERROR",
    "EXIT_SUCCESS",
    # Tool checks
    "ToolCheck",
    # Packaging
    "build_binary_package",
    "build_signed_source",
    "check_required_tools",
    # Error helpers
    "error_details",
    "exit_code_for",
    "get_missing_tools_message",
    "log_phase_event",
    "phase_error",
    "phase_warning",
    "report_error",
    "report_result",
    "require_tools",
    "run_command",
    "upload_changes",
]
