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
"""Tests for line tokenizing and field normalization."""

from oxe_check.models import Delimiter
from oxe_check.normalize import (
    is_blank_flag,
    normalize_terminal_type,
    split_fields,
    strip_all_whitespace,
)


def test_split_fields_pipe_table_keeps_edge_fields() -> None:
    field_set = split_fields("   | 0 | 1 | INTOF_A | IN SERVICE |", Delimiter.PIPE)

    assert field_set is not None
    assert len(field_set) == 6
    assert field_set.fields[3].strip() == "INTOF_A"
    assert field_set.fields[4].strip() == "IN SERVICE"


def test_split_fields_drops_hw_type_column_of_wide_table() -> None:
    wide = split_fields(
        "| 0 | 1 | INTOF_A | hw | IN SERVICE |", Delimiter.PIPE, drop_hw_column=True
    )
    narrow = split_fields(
        "| 0 | 1 | INTOF_A | IN SERVICE |", Delimiter.PIPE, drop_hw_column=True
    )

    assert wide is not None and narrow is not None
    assert wide.fields == narrow.fields


def test_split_fields_keeps_wide_table_without_flag() -> None:
    field_set = split_fields("| 0 | 1 | INTOF_A | hw | IN SERVICE |", Delimiter.PIPE)

    assert field_set is not None
    assert len(field_set) == 7


def test_split_fields_colon_removes_pipes() -> None:
    field_set = split_fields("| State : F F B F |", Delimiter.COLON)

    assert field_set is not None
    assert [part.strip() for part in field_set.fields] == ["State", "F F B F"]


def test_split_fields_whitespace_runs() -> None:
    field_set = split_fields("  | State   F   --   B  |", Delimiter.WHITESPACE)

    assert field_set is not None
    assert field_set.fields == ("State", "F", "--", "B")
    assert field_set.delimiter is Delimiter.WHITESPACE


def test_split_fields_handles_empty() -> None:
    assert split_fields("", Delimiter.PIPE) is None
    assert split_fields("   \r\n", Delimiter.COLON) is None


def test_normalize_terminal_type_joins_parenthesized_suffix() -> None:
    assert normalize_terminal_type(" 4012 (LE) ") == "4012-LE"
    assert normalize_terminal_type("IP Touch 4068") == "IPTouch4068"


def test_is_blank_flag_ignores_dots() -> None:
    assert is_blank_flag("  ...  ")
    assert is_blank_flag("")
    assert not is_blank_flag(" X ")


def test_strip_all_whitespace() -> None:
    assert strip_all_whitespace(" 1 0 \t") == "10"
