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
"""Coupler (card) service status check on the output of ``config``."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable

from oxe_check.models import (
    CheckOptions,
    CheckResult,
    CouplerRecord,
    Delimiter,
    PerfMetric,
    TypeCounters,
)
from oxe_check.normalize import CANONICAL_TABLE_WIDTH, split_fields, strip_all_whitespace
from oxe_check.output import assemble_verdict, unknown_result

_LOGGER = logging.getLogger(__name__)

LABEL = "Couplers"

_TRANSITIONAL_MARKERS = ("NOT INIT", "MAO FILE", "OPS FILE")


class CouplerState(Enum):
    """Classification of a coupler status text."""

    IN_SERVICE = "in_service"
    OUT_OF_SERVICE = "out_of_service"
    FAULT = "fault"
    TRANSITIONAL = "transitional"


_STATUS_RULES: tuple[tuple[Callable[[str], bool], CouplerState], ...] = (
    (lambda status: "IN SERVICE" in status, CouplerState.IN_SERVICE),
    (lambda status: "OUT OF SERV" in status, CouplerState.OUT_OF_SERVICE),
    (
        lambda status: not any(marker in status for marker in _TRANSITIONAL_MARKERS),
        CouplerState.FAULT,
    ),
)


def classify_coupler_status(status: str) -> CouplerState:
    """Classify a coupler status text; the first matching rule wins."""

    for predicate, state in _STATUS_RULES:
        if predicate(status):
            return state
    return CouplerState.TRANSITIONAL


def parse_coupler_records(
    lines: Iterable[str], options: CheckOptions
) -> list[CouplerRecord]:
    """Extract coupler rows that pass the type and number filters."""

    records: list[CouplerRecord] = []
    for line in lines:
        field_set = split_fields(line, Delimiter.PIPE, drop_hw_column=True)
        if field_set is None or len(field_set) != CANONICAL_TABLE_WIDTH:
            continue
        fields = field_set.fields
        type_name = strip_all_whitespace(fields[3])
        if options.coupler_types and type_name not in options.coupler_types:
            continue
        coupler = strip_all_whitespace(fields[2])
        if options.coupler is not None and not _coupler_matches(coupler, options.coupler):
            continue
        records.append(
            CouplerRecord(
                crystal=options.crystal,
                coupler=coupler,
                type_name=type_name,
                status=fields[4].strip(),
            )
        )
    return records


def _coupler_matches(raw: str, wanted: int) -> bool:
    return raw.isdigit() and int(raw) == wanted


def check_couplers(lines: Iterable[str], options: CheckOptions) -> CheckResult:
    """Classify coupler service status for one crystal."""

    counters: dict[str, TypeCounters] = {
        type_name: TypeCounters() for type_name in options.coupler_types
    }
    critical: list[str] = []
    warning: list[str] = []

    for record in parse_coupler_records(lines, options):
        state = classify_coupler_status(record.status)
        _LOGGER.debug(
            "Found coupler number %s, type %s, status %s: %s",
            record.coupler,
            record.type_name,
            record.status,
            state.name,
        )
        if state is CouplerState.TRANSITIONAL:
            continue
        counters.setdefault(record.type_name, TypeCounters()).record(
            state is CouplerState.IN_SERVICE
        )
        if state is CouplerState.OUT_OF_SERVICE:
            critical.append(f"{record.name}: OFF")
        elif state is CouplerState.FAULT:
            warning.append(f"{record.name}: {record.status}")

    metrics = tuple(
        PerfMetric(label=type_name, value=tally.ok, warn=0, crit=0, min=0, max=tally.total)
        for type_name, tally in sorted(counters.items())
        if tally.total > 0
    )
    total = sum(tally.total for tally in counters.values())
    if not total:
        return unknown_result(LABEL, _no_match_message(options))

    verdict = assemble_verdict(critical, warning, f"All {total} couplers OK")
    return CheckResult(label=LABEL, verdict=verdict, metrics=metrics)


def _no_match_message(options: CheckOptions) -> str:
    if options.coupler_types:
        return "No couplers matching list: " + ",".join(options.coupler_types)
    if options.coupler is not None:
        return f"No coupler number {options.coupler} found"
    return f"No couplers found on crystal {options.crystal}"
