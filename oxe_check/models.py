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
"""Data models for oxe-check."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

FREE_STATE = "F"


class Severity(IntEnum):
    """Plugin severity; the value is the plugin exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


class Delimiter(Enum):
    """Field delimiter strategy for a line of device output."""

    PIPE = "pipe"
    COLON = "colon"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class FieldSet:
    """Tokenized line."""

    fields: tuple[str, ...]
    delimiter: Delimiter

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class CheckOptions:
    """Filters and identifiers for one check invocation."""

    crystal: int | None = None
    coupler: int | None = None
    coupler_types: tuple[str, ...] = ()
    trunk_group: int | None = None
    remote_description: str | None = None


@dataclass(frozen=True)
class CouplerRecord:
    """One coupler (card) row of the configuration table."""

    crystal: int | None
    coupler: str
    type_name: str
    status: str

    @property
    def name(self) -> str:
        parts = [self.coupler, self.type_name]
        if self.crystal is not None:
            parts.insert(0, str(self.crystal))
        return "-".join(parts)


@dataclass(frozen=True)
class TerminalRecord:
    """One terminal row of the terminal list."""

    type_name: str
    ok: bool


@dataclass
class TypeCounters:
    """Running tally for one coupler or terminal type."""

    total: int = 0
    ok: int = 0

    def record(self, ok: bool) -> None:
        self.total += 1
        if ok:
            self.ok += 1


@dataclass
class _ChannelSequence:
    states: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.states)

    @property
    def busy(self) -> int:
        return sum(1 for state in self.states if state != FREE_STATE)

    @property
    def free(self) -> int:
        return self.total - self.busy


@dataclass
class TrunkGroupInfo(_ChannelSequence):
    """Channel states of one trunk group."""

    number: int | None = None
    name: str = ""

    @property
    def label(self) -> str:
        label = f"TG {self.number}"
        if self.name:
            label += f": {self.name}"
        return label


@dataclass
class LinkInfo(_ChannelSequence):
    """Channel states of one crystal/coupler link."""

    crystal: int | None = None
    coupler: int | None = None
    remote_description: str | None = None

    @property
    def label(self) -> str:
        label = f"Link from: ({self.crystal}-{self.coupler})"
        if self.remote_description:
            label += f" to: {self.remote_description}"
        return label


@dataclass(frozen=True)
class AppIdentity:
    """Software identity reported by the call server."""

    release: str
    delivery: str
    patch: str
    cpu: str

    @property
    def identity(self) -> str:
        return f"{self.release}-{self.delivery}-{self.patch}"


@dataclass(frozen=True)
class PerfMetric:
    """Performance data entry."""

    label: str
    value: int
    warn: int | None = None
    crit: int | None = None
    min: int | None = None
    max: int | None = None


@dataclass(frozen=True)
class Verdict:
    """Overall severity plus message fragments."""

    severity: Severity
    messages: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return " ".join(self.messages)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one check invocation."""

    label: str
    verdict: Verdict
    metrics: tuple[PerfMetric, ...] = ()
