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
"""Verdict assembly and plugin output rendering."""

from __future__ import annotations

from typing import Iterable, Sequence

from oxe_check.models import CheckResult, PerfMetric, Severity, Verdict


def assemble_verdict(
    critical: Sequence[str],
    warning: Sequence[str],
    ok_message: str,
) -> Verdict:
    """Merge classifier contributions into one verdict.

    The worst severity present wins. Non-OK fragments are kept in order,
    critical ones first; the OK message is used only when there are none.
    """

    if critical:
        return Verdict(Severity.CRITICAL, tuple(critical) + tuple(warning))
    if warning:
        return Verdict(Severity.WARNING, tuple(warning))
    return Verdict(Severity.OK, (ok_message,))


def unknown_result(label: str, message: str) -> CheckResult:
    """Build an UNKNOWN result with no performance data."""

    return CheckResult(label=label, verdict=Verdict(Severity.UNKNOWN, (message,)))


def format_metric(metric: PerfMetric) -> str:
    """Render one metric as ``label=value;warn;crit;min;max``."""

    label = metric.label
    if " " in label or "=" in label:
        label = "'" + label.replace("'", "''") + "'"
    bounds = (metric.warn, metric.crit, metric.min, metric.max)
    rendered = ";".join("" if bound is None else str(bound) for bound in bounds)
    return f"{label}={metric.value};{rendered}"


def render_perfdata(metrics: Iterable[PerfMetric]) -> str:
    """Render the performance data vector."""

    return " ".join(format_metric(metric) for metric in metrics)


def render_status_line(result: CheckResult) -> str:
    """Render the single plugin output line."""

    line = f"{result.label} {result.verdict.severity.name} - {result.verdict.message}"
    perfdata = render_perfdata(result.metrics)
    if perfdata:
        line += f" | {perfdata}"
    return line
