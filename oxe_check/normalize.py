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
"""Line tokenizing and field normalization utilities."""

from __future__ import annotations

import re

from oxe_check.models import Delimiter, FieldSet

CANONICAL_TABLE_WIDTH = 6
_HW_TYPE_COLUMN = 4
_WHITESPACE_RUN = re.compile(r"\s+")


def split_fields(
    line: str,
    delimiter: Delimiter,
    strip_leading: bool = True,
    drop_hw_column: bool = False,
) -> FieldSet | None:
    """Split a raw output line into fields.

    Args:
        line: Raw line as printed by the device
        delimiter: Delimiter strategy to apply
        strip_leading: Remove leading padding before splitting
        drop_hw_column: For pipe tables, drop the hardware type column of
            the 7-field layout so the row matches the 6-field layout

    Returns:
        FieldSet, or None when the line is empty after trimming
    """

    text = line.rstrip("\r\n")
    if strip_leading:
        text = text.lstrip()
    if not text.strip():
        return None

    if delimiter is Delimiter.PIPE:
        fields = text.split("|")
        if drop_hw_column and len(fields) == CANONICAL_TABLE_WIDTH + 1:
            del fields[_HW_TYPE_COLUMN]
    elif delimiter is Delimiter.COLON:
        fields = text.replace("|", "").split(":")
    else:
        fields = _WHITESPACE_RUN.split(text.replace("|", "").strip())

    return FieldSet(fields=tuple(fields), delimiter=delimiter)


def strip_all_whitespace(value: str) -> str:
    """Remove every whitespace character."""

    return _WHITESPACE_RUN.sub("", value)


def normalize_terminal_type(raw_type: str) -> str:
    """Normalize a terminal type column, e.g. ``4012 (LE)`` becomes ``4012-LE``."""

    cleaned = re.sub(r"[\s)]", "", raw_type)
    return cleaned.replace("(", "-")


def is_blank_flag(raw_flag: str) -> bool:
    """Return True when a flag column holds only whitespace and dots."""

    return not re.sub(r"[\s.]", "", raw_flag)
