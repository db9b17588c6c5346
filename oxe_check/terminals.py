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
"""Terminal status statistics on the output of ``listerm``."""

from __future__ import annotations

import logging
from typing import Iterable

from oxe_check.models import (
    CheckOptions,
    CheckResult,
    Delimiter,
    PerfMetric,
    Severity,
    TerminalRecord,
    TypeCounters,
    Verdict,
)
from oxe_check.normalize import (
    CANONICAL_TABLE_WIDTH,
    is_blank_flag,
    normalize_terminal_type,
    split_fields,
    strip_all_whitespace,
)
from oxe_check.output import unknown_result

_LOGGER = logging.getLogger(__name__)

LABEL = "Terminals"


def parse_terminal_records(lines: Iterable[str]) -> list[TerminalRecord]:
    """Extract terminal rows that carry a numeric identifier."""

    records: list[TerminalRecord] = []
    for line in lines:
        field_set = split_fields(line, Delimiter.PIPE)
        if field_set is None or len(field_set) != CANONICAL_TABLE_WIDTH:
            continue
        fields = field_set.fields
        identifier = strip_all_whitespace(fields[4])
        if not (identifier.isascii() and identifier.isdigit()):
            continue
        records.append(
            TerminalRecord(
                type_name=normalize_terminal_type(fields[3]),
                ok=is_blank_flag(fields[5]),
            )
        )
    return records


def check_terminals(lines: Iterable[str], options: CheckOptions) -> CheckResult:
    """Tally terminals per type."""

    if options.crystal is not None:
        _LOGGER.debug("Checking terminals on crystal %s", options.crystal)
    else:
        _LOGGER.debug("Checking terminals")

    counters: dict[str, TypeCounters] = {}
    for record in parse_terminal_records(lines):
        counters.setdefault(record.type_name, TypeCounters()).record(record.ok)

    total = sum(tally.total for tally in counters.values())
    if not total:
        if options.crystal is not None:
            return unknown_result(LABEL, f"No terminals found on crystal {options.crystal}")
        return unknown_result(LABEL, "No terminals found on this PBX")

    total_ok = sum(tally.ok for tally in counters.values())
    metrics = tuple(
        PerfMetric(label=type_name, value=tally.ok, warn=0, crit=0, min=0, max=tally.total)
        for type_name, tally in sorted(counters.items())
    )
    message = (
        f"{len(counters)} types, {total} total terminals, "
        f"{total_ok} OK, {total - total_ok} not OK"
    )
    return CheckResult(label=LABEL, verdict=Verdict(Severity.OK, (message,)), metrics=metrics)
