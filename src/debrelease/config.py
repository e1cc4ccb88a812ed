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

"""Configuration utilities for Debrelease.

Option values are resolved in this order: command line, environment
(handled by Typer envvars), the `defaults` section of the YAML config file,
and finally the built-in defaults below.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from debrelease.core.context import Mode, ReleaseOptions, ReleaseRequest
from debrelease.core.exceptions import ConfigError, MissingOptionError
from debrelease.debpkg.version import validate_base_version
from debrelease.series import parse_series_list

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "runs_root": "~/.cache/debrelease/runs",
    },
    "defaults": {
        "distribution": None,
        "ppa_series": [],
        "ppa_target": None,
        "gpg_key_id": None,
        "upload": False,
        "keep_going": False,
    },
}


def get_config_path() -> Path:
    """Return the path to the config file."""
    return Path.home() / ".config" / "debrelease" / "config.yaml"


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from disk and merge with defaults.

    A missing file is not an error; the built-in defaults are returned. A
    file that is not valid YAML, or not a mapping, is a configuration error.
    """
    cfg_path = path or get_config_path()
    raw: Any = {}
    if cfg_path.exists():
        try:
            raw = yaml.safe_load(cfg_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid config file {cfg_path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(message=f"Invalid config file {cfg_path}: expected a mapping")

    # Simple shallow merge for top-level sections.
    merged: dict[str, Any] = {}
    for key, val in DEFAULT_CONFIG.items():
        if key in raw and isinstance(raw[key], dict):
            merged[key] = {**val, **raw[key]}
        else:
            merged[key] = dict(val)

    for pkey, pval in merged.get("paths", {}).items():
        merged["paths"][pkey] = str(Path(str(pval)).expanduser())

    return merged


def resolve_runs_root(cfg: Mapping[str, Any]) -> Path:
    paths: Mapping[str, Any] = cfg.get("paths", {})
    return Path(str(paths.get("runs_root", DEFAULT_CONFIG["paths"]["runs_root"]))).expanduser().resolve()


def parse_source_date_epoch(value: str | int | None) -> int | None:
    """Validate a SOURCE_DATE_EPOCH value.

    Returns:
        The epoch as an int, or None when unset/empty.

    Raises:
        ConfigError: If the value is not a non-negative integer.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if not text.isdigit():
        raise ConfigError(message="SOURCE_DATE_EPOCH must be an integer epoch seconds")
    return int(text)


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def resolve_options(request: ReleaseRequest, cfg: Mapping[str, Any]) -> ReleaseOptions:
    """Resolve CLI inputs against the config file into ReleaseOptions.

    All configuration errors are raised here, before anything on disk is
    touched.

    Raises:
        InvalidVersionError: If the base version is malformed.
        MissingOptionError: If a mode-specific option is missing.
        ConfigError: If SOURCE_DATE_EPOCH is malformed.
    """
    validate_base_version(request.base_version)
    defaults: Mapping[str, Any] = cfg.get("defaults", {})
    epoch = parse_source_date_epoch(request.source_date_epoch)
    root = request.root.resolve()

    if request.mode is Mode.LOCAL:
        return ReleaseOptions(
            mode=Mode.LOCAL,
            base_version=request.base_version,
            root=root,
            clean=request.clean,
            distribution=_first_set(request.distribution, defaults.get("distribution")),
            subject=request.subject or None,
            source_date_epoch=epoch,
            no_spinner=request.no_spinner,
        )

    series_raw = _first_set(request.series, defaults.get("ppa_series"))
    series = parse_series_list(series_raw)
    if not series:
        raise MissingOptionError(message="PPA_SERIES is not set (use --series or env var)", option="series")

    ppa_target = _first_set(request.ppa_target, defaults.get("ppa_target"))
    if not ppa_target:
        raise MissingOptionError(message="PPA_TARGET is not set (use --ppa or env var)", option="ppa_target")

    gpg_key_id = _first_set(request.gpg_key_id, defaults.get("gpg_key_id"))
    if not gpg_key_id:
        raise MissingOptionError(
            message="GPG key id required for ppa mode (set GPG_KEY_ID or use --gpg-key)",
            option="gpg_key_id",
        )

    if not request.tag:
        raise MissingOptionError(
            message="ppa mode requires --msg-from-tag <tag> (strict subject+body)",
            option="tag",
        )

    upload = request.upload if request.upload is not None else bool(defaults.get("upload", False))
    keep_going = request.keep_going if request.keep_going is not None else bool(defaults.get("keep_going", False))

    options = ReleaseOptions(
        mode=Mode.PPA,
        base_version=request.base_version,
        root=root,
        clean=request.clean,
        tag=request.tag,
        series=series,
        ppa_target=str(ppa_target),
        gpg_key_id=str(gpg_key_id),
        upload=upload,
        keep_going=keep_going,
        source_date_epoch=epoch,
        no_spinner=request.no_spinner,
    )
    logger.debug("Resolved options: %s", options.to_dict())
    return options


if __name__ == "__main__":
    # Basic smoke-check
    print(json.dumps(load_config(), indent=2))
