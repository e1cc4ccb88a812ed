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

"""Debian changelog generation for release builds.

A release note (subject + body) is turned into a single changelog stanza:

    pkg (1.2.0~noble) noble; urgency=medium

      Add X

      [ Fixes ]
      * Fix Y

     -- Jane Doe <jane@example.com>  Thu, 20 Feb 2026 12:30:00 +0000

Body lines starting with '-' become section headers, blank lines stay as
paragraph separators, and everything else becomes a bullet. Lines are never
wrapped. The stanza replaces any existing debian/changelog in the tree.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

CRITICAL_PREFIX = "CRITICAL: "

# Trailer date format (RFC 2822, always rendered in UTC)
CHANGELOG_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"


class Urgency(Enum):
    """Changelog urgency levels used by Debrelease."""

    MEDIUM = "medium"
    CRITICAL = "critical"


class LineKind(Enum):
    """Classification of a single body line."""

    SECTION = "section"
    BULLET = "bullet"
    BLANK = "blank"


@dataclass(frozen=True)
class BodyLine:
    kind: LineKind
    text: str = ""

    def render(self) -> str:
        if self.kind is LineKind.SECTION:
            return f"  [ {self.text} ]"
        if self.kind is LineKind.BULLET:
            return f"  * {self.text}"
        return ""


@dataclass(frozen=True)
class ChangelogEntry:
    """Everything needed to render one changelog stanza.

    Maintainer identity and date are explicit inputs so that rendering is a
    pure function of the entry.
    """

    package: str
    version: str
    distribution: str
    urgency: Urgency
    subject: str
    maintainer_name: str
    maintainer_email: str
    date: str
    body_lines: tuple[BodyLine, ...] = field(default_factory=tuple)


def strip_carriage_returns(text: str) -> str:
    """Drop one trailing '\\r' from every line."""
    return "\n".join(line.removesuffix("\r") for line in text.split("\n"))


def urgency_for_subject(subject: str) -> Urgency:
    """Return CRITICAL for subjects starting with 'CRITICAL: ', else MEDIUM."""
    if subject.startswith(CRITICAL_PREFIX):
        return Urgency.CRITICAL
    return Urgency.MEDIUM


def _is_blank(line: str) -> bool:
    return not line.strip()


def trim_blank_lines(lines: list[str]) -> list[str]:
    """Remove leading and trailing whitespace-only lines."""
    start = 0
    end = len(lines)
    while start < end and _is_blank(lines[start]):
        start += 1
    while end > start and _is_blank(lines[end - 1]):
        end -= 1
    return lines[start:end]


def classify_line(line: str) -> BodyLine:
    if _is_blank(line):
        return BodyLine(LineKind.BLANK)
    if line.startswith("-"):
        section = line[1:]
        if section.startswith(" "):
            section = section[1:]
        return BodyLine(LineKind.SECTION, section)
    return BodyLine(LineKind.BULLET, line)


def classify_body(body: str) -> tuple[BodyLine, ...]:
    """Turn a raw release-note body into classified lines.

    Carriage returns are normalized and surrounding blank lines trimmed;
    interior blank lines are kept one-for-one.
    """
    if not body:
        return ()
    lines = trim_blank_lines(strip_carriage_returns(body).split("\n"))
    return tuple(classify_line(line) for line in lines)


def changelog_date(epoch: int | None = None) -> str:
    """Render the trailer date.

    Args:
        epoch: Fixed Unix timestamp (SOURCE_DATE_EPOCH). The wall clock is
            used when None.
    """
    if epoch is not None:
        when = datetime.datetime.fromtimestamp(epoch, datetime.UTC)
    else:
        when = datetime.datetime.now(datetime.UTC)
    return when.strftime(CHANGELOG_DATE_FORMAT)


def format_entry(entry: ChangelogEntry) -> str:
    """Render a changelog stanza as text."""
    lines = [
        f"{entry.package} ({entry.version}) {entry.distribution}; urgency={entry.urgency.value}",
        "",
        f"  {entry.subject}",
    ]
    if entry.body_lines:
        lines.append("")
        lines.extend(line.render() for line in entry.body_lines)
    lines.append("")
    lines.append(f" -- {entry.maintainer_name} <{entry.maintainer_email}>  {entry.date}")
    return "\n".join(lines) + "\n"


def write_changelog(source_dir: Path, entry: ChangelogEntry) -> Path:
    """Replace debian/changelog in source_dir with a fresh stanza.

    Returns:
        Path to the written changelog.
    """
    changelog_path = source_dir / "debian" / "changelog"
    changelog_path.unlink(missing_ok=True)
    changelog_path.parent.mkdir(parents=True, exist_ok=True)
    changelog_path.write_text(format_entry(entry), encoding="utf-8")
    logger.debug("Wrote %s for %s", changelog_path, entry.version)
    return changelog_path
