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
"""Interactive SSH session to the call server."""

from __future__ import annotations

import json
import logging
import re
import socket
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import paramiko

_LOGGER = logging.getLogger(__name__)

PROMPT_PATTERN = re.compile(r"\(\d{3}\)xa00\d{3}> $")
MIN_TIMEOUT = 3
_MAX_READ_TIMEOUT = 10
_TIMEOUT_MARGIN = 2
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")
_RECV_SIZE = 65535


class SessionError(Exception):
    """Raised when a command could not be run on the call server."""

    def __init__(self, message: str, host: str | None = None) -> None:
        self.message = message
        self.host = host
        super().__init__(message)


@dataclass(frozen=True)
class SessionSettings:
    """Connection parameters for one session."""

    host: str
    username: str
    password: str
    timeout: int
    port: int = 22

    @property
    def read_timeout(self) -> int:
        """Timeout for each wait on the session, below the overall plugin timeout."""

        if self.timeout > _MAX_READ_TIMEOUT:
            return _MAX_READ_TIMEOUT
        return self.timeout - _TIMEOUT_MARGIN


def run_command(
    settings: SessionSettings,
    command: str,
    client_factory: Callable[[], Any] = paramiko.SSHClient,
) -> list[str]:
    """Run one command and return the reply lines without echo and prompt."""

    client = _connect(settings, client_factory)
    try:
        shell = client.invoke_shell(width=200, height=1000)
        shell.settimeout(settings.read_timeout)
        _read_until_prompt(shell, settings)
        _LOGGER.debug("Sending command %s to host %s", command, settings.host)
        shell.send(command + "\n")
        raw_output = _read_until_prompt(shell, settings)
        shell.close()
    finally:
        client.close()

    lines = _reply_lines(raw_output, command)
    if len(lines) < 2:
        raise SessionError(
            f"Error issuing cmd {command} to host {settings.host}, no reply",
            host=settings.host,
        )
    _LOGGER.debug("Received %s lines from host %s", len(lines), settings.host)
    return lines


def _connect(settings: SessionSettings, client_factory: Callable[[], Any]) -> Any:
    """Open and authenticate the SSH connection."""

    client = client_factory()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
    _LOGGER.debug("Connecting to host %s", settings.host)
    try:
        client.connect(
            settings.host,
            port=settings.port,
            username=settings.username,
            password=settings.password,
            timeout=settings.read_timeout,
            look_for_keys=False,
            allow_agent=False,
        )
    except paramiko.AuthenticationException as exc:
        raise SessionError(
            f"Can't login to host {settings.host}, {exc}", host=settings.host
        ) from exc
    except (paramiko.SSHException, OSError) as exc:
        raise SessionError(
            f"Can't connect to host {settings.host}, {exc}", host=settings.host
        ) from exc
    return client


def _read_until_prompt(shell: Any, settings: SessionSettings) -> str:
    """Read from the shell until the call server prompt ends the buffer."""

    deadline = time.monotonic() + settings.read_timeout
    buffer = ""
    while not PROMPT_PATTERN.search(_ANSI_ESCAPE.sub("", buffer)):
        if time.monotonic() > deadline:
            raise SessionError(
                f"Timed out waiting for prompt on host {settings.host}", host=settings.host
            )
        try:
            chunk = shell.recv(_RECV_SIZE)
        except socket.timeout as exc:
            raise SessionError(
                f"Timed out waiting for prompt on host {settings.host}", host=settings.host
            ) from exc
        if not chunk:
            raise SessionError(f"Session closed by host {settings.host}", host=settings.host)
        buffer += chunk.decode("utf-8", errors="ignore")
    return buffer


def _reply_lines(raw_output: str, command: str) -> list[str]:
    """Split raw shell output into lines, dropping the command echo and prompt."""

    text = _ANSI_ESCAPE.sub("", raw_output).replace("\r", "")
    lines = text.split("\n")
    if lines and PROMPT_PATTERN.search(lines[-1]):
        lines.pop()
    if lines and lines[0].strip().endswith(command):
        lines.pop(0)
    return lines


def save_capture(path: str | Path, command: str, lines: list[str]) -> None:
    """Save a device reply to JSON for later offline evaluation."""

    data = {"command": command, "lines": lines}
    with Path(path).open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2, ensure_ascii=False)
        handle.write("\n")


def load_capture(path: str | Path) -> tuple[str, list[str]]:
    """Load a device reply saved by save_capture."""

    with Path(path).open(encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict) or not isinstance(data.get("lines"), list):
        raise ValueError(f"{path} is not a captured device reply")
    return str(data.get("command", "")), [str(line) for line in data["lines"]]
