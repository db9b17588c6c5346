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
"""Tests for the SSH session transport and capture files."""

from __future__ import annotations

import socket
from pathlib import Path
from typing import Any

import paramiko
import pytest

from oxe_check.session import (
    SessionError,
    SessionSettings,
    load_capture,
    run_command,
    save_capture,
)

PROMPT = b"(001)xa00101> "


class FakeShell:
    def __init__(self, chunks: list[Any]) -> None:
        self.chunks = list(chunks)
        self.sent: list[str] = []
        self.timeout: float | None = None

    def settimeout(self, timeout: float) -> None:
        self.timeout = timeout

    def recv(self, size: int) -> bytes:
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def send(self, data: str) -> None:
        self.sent.append(data)

    def close(self) -> None:
        pass


class FakeClient:
    def __init__(self, shell: FakeShell, connect_error: Exception | None = None) -> None:
        self.shell = shell
        self.connect_error = connect_error
        self.connect_kwargs: dict[str, Any] = {}
        self.closed = False

    def set_missing_host_key_policy(self, policy: Any) -> None:
        self.policy = policy

    def connect(self, host: str, **kwargs: Any) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.connect_kwargs = {"host": host, **kwargs}

    def invoke_shell(self, **kwargs: Any) -> FakeShell:
        return self.shell

    def close(self) -> None:
        self.closed = True


def _settings(timeout: int = 15) -> SessionSettings:
    return SessionSettings(host="10.0.0.1", username="mtcl", password="secret", timeout=timeout)


def test_read_timeout_stays_below_plugin_timeout() -> None:
    assert _settings(15).read_timeout == 10
    assert _settings(5).read_timeout == 3
    assert _settings(3).read_timeout == 1


def test_read_timeout_caps_only_above_ten_seconds() -> None:
    assert _settings(11).read_timeout == 10
    assert _settings(10).read_timeout == 8


def test_run_command_strips_echo_and_prompt() -> None:
    shell = FakeShell(
        [
            b"Welcome\r\n" + PROMPT,
            b"config 0\r\n",
            b"\x1b[0m| 0 | 1 | INTOF_A | IN SERVICE |\r\n| 0 | 2 | PRA2 | IN SERVICE |\r\n"
            + PROMPT,
        ]
    )
    client = FakeClient(shell)

    lines = run_command(_settings(), "config 0", client_factory=lambda: client)

    assert lines == ["| 0 | 1 | INTOF_A | IN SERVICE |", "| 0 | 2 | PRA2 | IN SERVICE |"]
    assert shell.sent == ["config 0\n"]
    assert shell.timeout == 10
    assert client.connect_kwargs["username"] == "mtcl"
    assert client.connect_kwargs["look_for_keys"] is False
    assert client.closed


def test_run_command_rejects_empty_reply() -> None:
    shell = FakeShell([PROMPT, b"config 0\r\n" + PROMPT])

    with pytest.raises(SessionError, match="Error issuing cmd config 0"):
        run_command(_settings(), "config 0", client_factory=lambda: FakeClient(shell))


def test_run_command_reports_login_failure() -> None:
    client = FakeClient(
        FakeShell([]), connect_error=paramiko.AuthenticationException("Authentication failed.")
    )

    with pytest.raises(SessionError, match="Can't login to host 10.0.0.1") as excinfo:
        run_command(_settings(), "listerm", client_factory=lambda: client)

    assert excinfo.value.host == "10.0.0.1"


def test_run_command_reports_connect_failure() -> None:
    client = FakeClient(FakeShell([]), connect_error=OSError("No route to host"))

    with pytest.raises(SessionError, match="Can't connect to host 10.0.0.1"):
        run_command(_settings(), "listerm", client_factory=lambda: client)


def test_run_command_reports_prompt_timeout() -> None:
    shell = FakeShell([b"Welcome\r\n", socket.timeout("timed out")])

    with pytest.raises(SessionError, match="Timed out waiting for prompt"):
        run_command(_settings(), "listerm", client_factory=lambda: FakeClient(shell))


def test_run_command_reports_closed_session() -> None:
    shell = FakeShell([PROMPT])

    with pytest.raises(SessionError, match="Session closed"):
        run_command(_settings(), "listerm", client_factory=lambda: FakeClient(shell))


def test_save_and_load_capture(tmp_path: Path) -> None:
    capture_path = tmp_path / "reply.json"

    save_capture(capture_path, "trkstat 1", ["| State : F B |", ""])

    assert load_capture(capture_path) == ("trkstat 1", ["| State : F B |", ""])


def test_load_capture_rejects_other_json(tmp_path: Path) -> None:
    capture_path = tmp_path / "reply.json"
    capture_path.write_text('["not", "a", "capture"]', encoding="utf-8")

    with pytest.raises(ValueError, match="not a captured device reply"):
        load_capture(capture_path)
