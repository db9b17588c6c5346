# Copyright 2025 oxe-check contributors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.
"""Check modes: device command and classifier per mode."""

from __future__ import annotations

from typing import Callable, Iterable

from oxe_check.appid import check_app_identity
from oxe_check.channels import check_link, check_trunk_group
from oxe_check.couplers import check_couplers
from oxe_check.models import CheckOptions, CheckResult
from oxe_check.terminals import check_terminals

MODE_COUPLER = "coupler"
MODE_TERMINAL = "terminal"
MODE_TRUNK = "trunk"
MODE_LINK = "link"
MODE_APPID = "appid"

Classifier = Callable[[Iterable[str], CheckOptions], CheckResult]

_CLASSIFIERS: dict[str, Classifier] = {
    MODE_COUPLER: check_couplers,
    MODE_TERMINAL: check_terminals,
    MODE_TRUNK: check_trunk_group,
    MODE_LINK: check_link,
    MODE_APPID: check_app_identity,
}

_BASE_COMMANDS = {
    MODE_COUPLER: "config",
    MODE_TERMINAL: "listerm",
    MODE_TRUNK: "trkstat",
    MODE_LINK: "trkstat",
    MODE_APPID: "siteid",
}

MODES: tuple[str, ...] = tuple(_CLASSIFIERS)

_SHORT_NAMES = {
    MODE_COUPLER: "Couplers",
    MODE_TERMINAL: "Terminals",
    MODE_TRUNK: "Trunk",
    MODE_LINK: "Link",
    MODE_APPID: "AppID",
}


def short_name(mode: str) -> str:
    """Label used on the status line before a check has produced one."""

    return _SHORT_NAMES.get(mode, mode)


def build_command(mode: str, options: CheckOptions) -> str:
    """Build the device command for a check mode."""

    if mode not in _BASE_COMMANDS:
        raise ValueError(f"Unknown mode={mode}")
    parts = [_BASE_COMMANDS[mode]]
    if mode == MODE_TRUNK and options.trunk_group is not None:
        parts.append(str(options.trunk_group))
    if options.crystal is not None:
        parts.append(str(options.crystal))
    if options.coupler is not None:
        parts.append(str(options.coupler))
    return " ".join(parts)


def run_check(mode: str, lines: Iterable[str], options: CheckOptions) -> CheckResult:
    """Classify a device reply for a check mode."""

    classifier = _CLASSIFIERS.get(mode)
    if classifier is None:
        raise ValueError(f"Unknown mode={mode}")
    return classifier(list(lines), options)
