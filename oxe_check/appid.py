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
"""Call server software identity."""

from __future__ import annotations

import logging
from typing import Iterable

from oxe_check.models import AppIdentity, CheckOptions, CheckResult, Severity, Verdict
from oxe_check.output import unknown_result

_LOGGER = logging.getLogger(__name__)

LABEL = "AppID"


def parse_app_identity(lines: Iterable[str]) -> AppIdentity | None:
    """Parse ``R<release>-<delivery>-<patch>[-<patch>]-<build>-<cpu>`` lines.

    The last matching line of the reply wins.
    """

    identity: AppIdentity | None = None
    for line in lines:
        fields = [part.strip() for part in line.strip().split("-")]
        if len(fields) not in (5, 6):
            continue
        patch = fields[2]
        if len(fields) == 6:
            patch = f"{patch}.{fields[3]}"
        identity = AppIdentity(
            release=fields[0].removeprefix("R"),
            delivery=fields[1],
            patch=patch,
            cpu=fields[-1],
        )
    return identity


def check_app_identity(lines: Iterable[str], options: CheckOptions) -> CheckResult:
    """Report the software identity of the call server."""

    identity = parse_app_identity(lines)
    if identity is None:
        return unknown_result(LABEL, "No application identity found")

    _LOGGER.debug("Found application identity %s on cpu %s", identity.identity, identity.cpu)
    message = (
        f"CPU {identity.cpu}, release {identity.release}, delivery {identity.delivery}, "
        f"patch {identity.patch} ({identity.identity})"
    )
    return CheckResult(label=LABEL, verdict=Verdict(Severity.OK, (message,)))
