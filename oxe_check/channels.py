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
"""Trunk group and link channel usage on the output of ``trkstat``."""

from __future__ import annotations

import logging
from typing import Iterable

from oxe_check.models import (
    CheckOptions,
    CheckResult,
    Delimiter,
    LinkInfo,
    PerfMetric,
    Severity,
    TrunkGroupInfo,
    Verdict,
)
from oxe_check.normalize import split_fields
from oxe_check.output import unknown_result

_LOGGER = logging.getLogger(__name__)

TRUNK_NAME_KEY = "Trunk group name"
STATE_KEY = "State"
NOT_APPLICABLE_STATE = "--"


def parse_trunk_group(lines: Iterable[str], options: CheckOptions) -> TrunkGroupInfo:
    """Collect the name and channel states of a trunk group.

    State lines are ``State : F F B ...`` pairs; every State line of the
    reply continues the same channel sequence.
    """

    info = TrunkGroupInfo(number=options.trunk_group)
    for line in lines:
        field_set = split_fields(line, Delimiter.COLON)
        if field_set is None or len(field_set) != 2:
            continue
        key, value = (part.strip() for part in field_set.fields)
        if key == TRUNK_NAME_KEY:
            info.name = value
            _LOGGER.debug("Trunk group has name: %s", value)
            continue
        if key != STATE_KEY or not value:
            continue
        states = value.split()
        info.states.extend(states)
        _LOGGER.debug("Added %s trunk channel states", len(states))
    return info


def parse_link(lines: Iterable[str], options: CheckOptions) -> LinkInfo:
    """Collect the channel states of a crystal/coupler link.

    State lines are whitespace separated columns; ``--`` marks a slot
    without a channel and is not counted. A block repeating the one
    just accepted is a prompt echo and is skipped.
    """

    info = LinkInfo(
        crystal=options.crystal,
        coupler=options.coupler,
        remote_description=options.remote_description,
    )
    previous: list[str] = []
    for line in lines:
        field_set = split_fields(line, Delimiter.WHITESPACE)
        if field_set is None or field_set.fields[0] != STATE_KEY:
            continue
        states = [state for state in field_set.fields[1:] if state != NOT_APPLICABLE_STATE]
        if not states or states == previous:
            continue
        previous = states
        info.states.extend(states)
        _LOGGER.debug("Added %s link channel states", len(states))
    return info


def summarize_channels(
    label: str, info: TrunkGroupInfo | LinkInfo, kind: str
) -> CheckResult:
    """Reduce a channel sequence to a verdict and NonFree metrics."""

    if not info.total:
        return unknown_result(label, f"No {kind} channel states found")

    if info.busy == info.total:
        verdict = Verdict(Severity.WARNING, ("NO Free channels",))
    else:
        verdict = Verdict(Severity.OK, (f"{info.free} Free channels",))

    metrics = tuple(
        PerfMetric(
            label=metric_label,
            value=info.busy,
            warn=info.total,
            crit=0,
            min=0,
            max=info.total,
        )
        for metric_label in ("NonFree", "in", "out")
    )
    return CheckResult(label=label, verdict=verdict, metrics=metrics)


def check_trunk_group(lines: Iterable[str], options: CheckOptions) -> CheckResult:
    """Report channel usage of one trunk group."""

    _LOGGER.debug("Checking trunk group %s", options.trunk_group)
    info = parse_trunk_group(lines, options)
    return summarize_channels(info.label, info, "trunk")


def check_link(lines: Iterable[str], options: CheckOptions) -> CheckResult:
    """Report channel usage of one link."""

    info = parse_link(lines, options)
    _LOGGER.debug("Checking %s", info.label)
    return summarize_channels(info.label, info, "link")
