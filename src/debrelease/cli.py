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

"""CLI application definition for Debrelease."""

from __future__ import annotations

from typer import Typer

from debrelease.commands.release import local, ppa

app: Typer = Typer(
    name="debrelease",
    help="Build Debian packages for local testing and signed Ubuntu PPA uploads.",
    add_completion=False,
)

# Register commands
app.command(name="local")(local)
app.command(name="ppa")(ppa)


def main() -> None:
    app()
