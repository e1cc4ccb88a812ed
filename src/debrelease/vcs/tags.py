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

"""Release notes from annotated git tags.

The tag's subject becomes the changelog subject line and the tag's body the
changelog body. Both must be present: a PPA upload with an empty release
note is refused. The subject/body split is git's own (text before the first
blank line is the subject); it is read with `git tag --format` and not
re-implemented here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import git

from debrelease.core.exceptions import EmptyBodyError, EmptySubjectError, TagNotFoundError
from debrelease.debpkg.changelog import strip_carriage_returns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagMessage:
    """Subject and body of an annotated tag."""

    subject: str
    body: str


def _is_empty(text: str) -> bool:
    return not text.strip()


def parse_tag_message(tag: str, subject: str, body: str) -> TagMessage:
    """Normalize and validate a tag subject/body pair.

    Trailing carriage returns are removed from every line before the
    emptiness check.

    Raises:
        EmptySubjectError: If the subject is empty or whitespace-only.
        EmptyBodyError: If the body is empty or whitespace-only.
    """
    subject = strip_carriage_returns(subject).strip("\n")
    body = strip_carriage_returns(body)

    if _is_empty(subject):
        raise EmptySubjectError(
            message=f"Tag subject (release title) for {tag} is empty; refusing to proceed",
            tag=tag,
        )
    if _is_empty(body):
        raise EmptyBodyError(
            message=f"Tag body (release description) for {tag} is empty; refusing to proceed",
            tag=tag,
        )
    return TagMessage(subject=subject, body=body)


def _tag_field(repo: git.Repo, tag: str, field: str) -> str:
    return repo.git.tag("-l", f"--format=%(contents:{field})", tag)


def read_tag_message(repo: git.Repo | None, tag: str) -> TagMessage:
    """Read and validate the release note stored in an annotated tag.

    Args:
        repo: Repository holding the tag (None when not in a git checkout).
        tag: Tag name (e.g., "v0.0.9").

    Raises:
        TagNotFoundError: If the tag does not exist.
        EmptySubjectError: If the tag has no subject (including lightweight tags).
        EmptyBodyError: If the tag has no body.
    """
    if repo is None:
        raise TagNotFoundError(message=f"Tag not found: {tag} (not a git repository)", tag=tag)

    try:
        ref = repo.tags[tag]
    except IndexError as e:
        raise TagNotFoundError(message=f"Tag not found: {tag}", tag=tag) from e

    if ref.tag is None:
        # Lightweight tags carry no message of their own.
        logger.warning("Tag %s is a lightweight tag; an annotated tag is required", tag)
        return parse_tag_message(tag, "", "")

    try:
        subject = _tag_field(repo, tag, "subject")
        body = _tag_field(repo, tag, "body")
    except git.GitCommandError as e:
        raise TagNotFoundError(message=f"Tag not found: {tag} ({e})", tag=tag) from e

    return parse_tag_message(tag, subject, body)
