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

"""Local and PPA release flows.

Local:
    Init -> DistDetect -> VersionCompose -> ChangelogWrite -> Build -> Done

PPA:
    Init -> TagValidate -> for each series, in configured order:
        Isolate -> VersionCompose -> ChangelogWrite -> Build -> [Upload]
    -> Done

Everything that can be a configuration error (control file, tools,
distribution, tag message) is checked in `prepare()`, before --clean or any
export touches the build directory. Per-series runtime failures are recorded
against that series; artifacts of already completed series stay on disk.
"""

from __future__ import annotations

import datetime
import shutil
import tarfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import git

from debrelease.build import packaging
from debrelease.build.errors import log_phase_event, phase_warning
from debrelease.build.tools import require_tools
from debrelease.core.context import (
    BuildContext,
    Mode,
    ReleaseOptions,
    ReleaseResult,
    SeriesResult,
)
from debrelease.core.exceptions import BuildError
from debrelease.core.run import activity
from debrelease.debpkg.changelog import (
    ChangelogEntry,
    Urgency,
    changelog_date,
    classify_body,
    urgency_for_subject,
    write_changelog,
)
from debrelease.debpkg.control import ControlInfo, read_control_info
from debrelease.debpkg.version import LocalContext, SeriesContext, compose
from debrelease.series import detect_local_distribution
from debrelease.vcs.tags import TagMessage, read_tag_message
from debrelease.vcs.tree import (
    export_tree,
    head_commit_epoch,
    head_short_hash,
    make_orig_tarball,
    open_repo,
)

if TYPE_CHECKING:
    from debrelease.core.run import RunContext

LOCAL_SOURCE_DIR = "src_local"

# Errors raised while exporting a tree or writing into it
TREE_ERRORS = (git.GitCommandError, tarfile.TarError, OSError)


def default_clock() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def local_context(
    repo: git.Repo | None,
    clock: Callable[[], datetime.datetime] = default_clock,
) -> LocalContext:
    """Capture the HEAD short hash and current time for a local version."""
    return LocalContext(short_hash=head_short_hash(repo), timestamp=clock())


@dataclass(frozen=True)
class PreparedRelease:
    """Everything resolved before the first filesystem mutation."""

    control: ControlInfo
    repo: git.Repo | None
    epoch: int | None
    distribution: str | None = None
    message: TagMessage | None = None


class ReleaseOrchestrator:
    """Run a local or PPA release for one package root."""

    def __init__(
        self,
        options: ReleaseOptions,
        run: RunContext,
        clock: Callable[[], datetime.datetime] = default_clock,
    ) -> None:
        self.options = options
        self.run = run
        self.clock = clock

    def prepare(self) -> PreparedRelease:
        """Resolve and validate every input; raises ConfigError subclasses."""
        opts = self.options
        control = read_control_info(opts.root)
        require_tools(opts.mode, need_lsb_release=opts.mode is Mode.LOCAL and not opts.distribution)
        repo = open_repo(opts.root)

        epoch = opts.source_date_epoch
        if epoch is None:
            epoch = head_commit_epoch(repo)

        distribution = None
        message = None
        if opts.mode is Mode.LOCAL:
            distribution = opts.distribution or detect_local_distribution()
        else:
            message = read_tag_message(repo, opts.tag or "")

        return PreparedRelease(
            control=control,
            repo=repo,
            epoch=epoch,
            distribution=distribution,
            message=message,
        )

    def execute(self) -> ReleaseResult:
        prepared = self.prepare()
        self._report_header(prepared)

        if self.options.clean:
            self._clean()

        if self.options.mode is Mode.LOCAL:
            return self._run_local(prepared)
        return self._run_ppa(prepared)

    def _report_header(self, prepared: PreparedRelease) -> None:
        opts = self.options
        control = prepared.control
        activity("init", f"Package: {control.package}")
        activity("init", f"Source: {control.source}")
        activity("init", f"Maintainer: {control.maintainer}")
        activity("init", f"Mode: {opts.mode.value}")
        activity("init", f"Base version: {opts.base_version}")
        if opts.mode is Mode.PPA:
            activity("init", f"Series: {' '.join(opts.series)}")
            activity("init", f"Upload: {'yes' if opts.upload else 'no'}")
            activity("init", f"PPA target: {opts.ppa_target}")
            activity("init", f"Signing key: {opts.gpg_key_id}")
            activity("init", f"Tag for msg: {opts.tag}")
        self.run.log_event({"event": "release.options", **opts.to_dict()})

    def _clean(self) -> None:
        activity("clean", "Cleaning build directory...")
        shutil.rmtree(self.options.build_dir, ignore_errors=True)
        self.run.log_event({"event": "release.clean", "path": str(self.options.build_dir)})

    def _build_env(self, prepared: PreparedRelease) -> dict[str, str]:
        env = prepared.control.maintainer_env()
        if prepared.epoch is not None:
            env["SOURCE_DATE_EPOCH"] = str(prepared.epoch)
        return env

    def _isolate(self, prepared: PreparedRelease, dirname: str, distribution: str) -> Path:
        """Export a fresh copy of the source into build/<dirname>."""
        source_dir = self.options.build_dir / dirname
        shutil.rmtree(source_dir, ignore_errors=True)
        try:
            export_tree(prepared.repo, self.options.root, source_dir)
        except TREE_ERRORS as e:
            raise BuildError(
                message=f"Failed to export source into {source_dir}: {e}", series=distribution
            ) from e
        return source_dir

    def _write_entry(self, ctx: BuildContext, entry: ChangelogEntry) -> None:
        try:
            write_changelog(ctx.source_dir, entry)
        except OSError as e:
            raise BuildError(
                message=f"Failed to write changelog in {ctx.source_dir}: {e}", series=ctx.distribution
            ) from e

    def _entry(
        self,
        prepared: PreparedRelease,
        ctx: BuildContext,
        urgency: Urgency,
        subject: str,
        body: str,
    ) -> ChangelogEntry:
        control = prepared.control
        return ChangelogEntry(
            package=control.package,
            version=ctx.version,
            distribution=ctx.distribution,
            urgency=urgency,
            subject=subject,
            body_lines=classify_body(body),
            maintainer_name=control.maintainer_name,
            maintainer_email=control.maintainer_email,
            date=changelog_date(prepared.epoch),
        )

    def _run_local(self, prepared: PreparedRelease) -> ReleaseResult:
        opts = self.options
        control = prepared.control
        distribution = prepared.distribution or ""
        result = ReleaseResult(mode=Mode.LOCAL)

        version = compose(opts.base_version, local_context(prepared.repo, self.clock))
        subject = opts.subject or f"Local build {opts.base_version}"
        activity("version", f"Local version: {version}")
        activity("version", f"Distribution: {distribution}")

        record = SeriesResult(distribution=distribution, version=version)
        try:
            source_dir = self._isolate(prepared, LOCAL_SOURCE_DIR, distribution)
            ctx = BuildContext(
                mode=Mode.LOCAL,
                source_dir=source_dir,
                package_name=control.package,
                source_name=control.source,
                distribution=distribution,
                version=version,
            )
            # Local builds carry the subject only, no body
            self._write_entry(ctx, self._entry(prepared, ctx, urgency_for_subject(subject), subject, ""))
            log_phase_event(
                self.run, "changelog", f"Wrote changelog for {version}", "local.changelog",
                version=version, distribution=distribution,
            )
            debs = packaging.build_binary_package(
                ctx, env=self._build_env(prepared), no_spinner=opts.no_spinner
            )
        except BuildError as e:
            record.error = e.message
            result.failed.append(record)
            self.run.log_event({"event": "local.build_failed", "version": version, "error": e.message})
            return result

        record.artifact = debs[0]
        result.completed.append(record)
        for deb in debs:
            log_phase_event(self.run, "build", f"Built: {deb}", "local.built", deb=str(deb))
        activity("report", "Local build complete.")
        return result

    def _run_ppa(self, prepared: PreparedRelease) -> ReleaseResult:
        opts = self.options
        message = prepared.message
        assert message is not None  # prepare() reads the tag in ppa mode
        urgency = urgency_for_subject(message.subject)
        activity("init", f"Urgency: {urgency.value}")

        result = ReleaseResult(mode=Mode.PPA)
        opts.build_dir.mkdir(parents=True, exist_ok=True)

        for series in opts.series:
            version = compose(opts.base_version, SeriesContext(series))
            activity("series", f"Building source for {series} (version {version})")
            record = SeriesResult(distribution=series, version=version)
            try:
                ctx = self._build_series(prepared, series, version, urgency, message)
                record.artifact = ctx.changes_file
                if opts.upload:
                    packaging.upload_changes(
                        opts.ppa_target or "", ctx.changes_file, series=series, no_spinner=opts.no_spinner
                    )
                    record.uploaded = True
                    log_phase_event(
                        self.run, "upload", f"Uploaded {ctx.changes_file.name} to {opts.ppa_target}",
                        "ppa.uploaded", series=series, changes=str(ctx.changes_file),
                    )
                else:
                    activity("report", f"Built: {ctx.changes_file}")
            except BuildError as e:
                record.error = e.message
                result.failed.append(record)
                phase_warning(
                    self.run, "series", f"{series}: {e.message}",
                    event_key="ppa.series_failed", series=series, version=version,
                )
                if not opts.keep_going:
                    break
                continue

            result.completed.append(record)
            self.run.log_event({"event": "ppa.series_complete", **record.to_dict()})

        if result.success:
            activity("report", "PPA build complete.")
        return result

    def _build_series(
        self,
        prepared: PreparedRelease,
        series: str,
        version: str,
        urgency: Urgency,
        message: TagMessage,
    ) -> BuildContext:
        opts = self.options
        control = prepared.control
        assert prepared.repo is not None  # a tag was read, so there is a repository

        try:
            make_orig_tarball(prepared.repo, opts.root, control.source, version, opts.build_dir)
        except TREE_ERRORS as e:
            raise BuildError(message=f"Failed to create orig tarball for {series}: {e}", series=series) from e
        source_dir = self._isolate(prepared, f"src_{series}", series)
        ctx = BuildContext(
            mode=Mode.PPA,
            source_dir=source_dir,
            package_name=control.package,
            source_name=control.source,
            distribution=series,
            version=version,
        )
        self._write_entry(ctx, self._entry(prepared, ctx, urgency, message.subject, message.body))
        log_phase_event(
            self.run, "changelog", f"Wrote changelog for {version}", "ppa.changelog",
            series=series, version=version, urgency=urgency.value,
        )

        packaging.build_signed_source(
            ctx, opts.gpg_key_id or "", env=self._build_env(prepared), no_spinner=opts.no_spinner
        )
        log_phase_event(
            self.run, "build", f"Built source package for {series}", "ppa.built",
            series=series, changes=str(ctx.changes_file),
        )
        return ctx
