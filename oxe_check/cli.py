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
"""CLI entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import NoReturn, Sequence

from oxe_check.checks import (
    MODE_COUPLER,
    MODE_LINK,
    MODE_TERMINAL,
    MODE_TRUNK,
    MODES,
    build_command,
    run_check,
    short_name,
)
from oxe_check.models import CheckOptions, Severity
from oxe_check.output import render_status_line, unknown_result
from oxe_check.session import (
    MIN_TIMEOUT,
    SessionError,
    SessionSettings,
    load_capture,
    run_command,
    save_capture,
)

_LOGGER = logging.getLogger(__name__)

VERSION = "1.1.0"

_EPILOG = """examples:
  %(prog)s -H x.x.x.x -m coupler -i 0 -y INTIPA,INTOF_A,PRA2,UA32
  %(prog)s -H x.x.x.x -m coupler -i 0 -c 1
  %(prog)s -H x.x.x.x -m terminal -i 1
  %(prog)s -H x.x.x.x -m trunk -g 1
  %(prog)s -H x.x.x.x -m link -i 0 -c 27 -r 'RPBX (0-19)'
  %(prog)s -H x.x.x.x -m appid
"""

# option dest -> (flag, applicable modes)
_SELECTORS: dict[str, tuple[str, tuple[str, ...]]] = {
    "crystal": ("--crystal (-i)", (MODE_COUPLER, MODE_TERMINAL, MODE_LINK)),
    "coupler": ("--coupler (-c)", (MODE_COUPLER, MODE_LINK)),
    "ctype": ("--ctype (-y)", (MODE_COUPLER,)),
    "trkgroup": ("--trkgroup (-g)", (MODE_TRUNK,)),
    "rdescr": ("--rdescr (-r)", (MODE_LINK,)),
}


class PluginArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with the UNKNOWN plugin code on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(int(Severity.UNKNOWN), f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""

    parser = PluginArgumentParser(
        prog="oxe-check",
        description="Check an Alcatel OmniPCX Enterprise call server",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-H", "--host", help="address of the call server")
    parser.add_argument(
        "-m",
        "--mode",
        required=True,
        help="what to check: coupler, terminal, trunk, link or appid",
    )
    parser.add_argument("-i", "--crystal", type=int, help="crystal number")
    parser.add_argument("-c", "--coupler", type=int, help="coupler number")
    parser.add_argument("-y", "--ctype", help="comma separated list of coupler types")
    parser.add_argument("-g", "--trkgroup", type=int, help="trunk group number")
    parser.add_argument("-r", "--rdescr", help="remote PBX description shown for a link")
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=15,
        help=f"plugin timeout seconds (minimum {MIN_TIMEOUT})",
    )
    parser.add_argument(
        "-u",
        "--username",
        default=os.getenv("OXE_USERNAME"),
        help="login user (default: $OXE_USERNAME)",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=os.getenv("OXE_PASSWORD"),
        help="login password (default: $OXE_PASSWORD)",
    )
    parser.add_argument("--port", type=int, default=22, help="SSH port")
    parser.add_argument("--command", help="override the command sent to the call server")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="trace parsing decisions on stderr",
    )
    parser.add_argument(
        "--log-level",
        default="WARN",
        choices=["INFO", "DEBUG", "WARN"],
        help="log level",
    )
    parser.add_argument(
        "--load-output",
        type=str,
        help="evaluate a captured reply from JSON file instead of connecting",
    )
    parser.add_argument(
        "--save-output",
        type=str,
        help="save the device reply to JSON file for later --load-output use",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def configure_logging(level: str) -> None:
    """Configure logging."""

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(message)s",
        stream=sys.stderr,
    )


def validate_args(args: argparse.Namespace) -> None:
    """Check mode specific option combinations."""

    mode = args.mode
    if mode not in MODES:
        raise ValueError(f"Unknown mode={mode}")

    for dest, (flag, modes) in _SELECTORS.items():
        if getattr(args, dest) is not None and mode not in modes:
            raise ValueError(f"Invalid option {flag} for mode={mode}")

    if mode == MODE_COUPLER:
        if args.crystal is None:
            raise ValueError("Mode=coupler requires option --crystal")
        if args.ctype is None and args.coupler is None:
            raise ValueError("Mode=coupler requires option --ctype or --coupler")
        if args.ctype is not None and not _split_types(args.ctype):
            raise ValueError("Option --ctype (-y) needs at least one coupler type")
    elif mode == MODE_TRUNK and args.trkgroup is None:
        raise ValueError("Mode=trunk requires option --trkgroup")
    elif mode == MODE_LINK:
        if args.crystal is None:
            raise ValueError("Mode=link requires option --crystal")
        if args.coupler is None:
            raise ValueError("Mode=link requires option --coupler")

    if args.timeout < MIN_TIMEOUT:
        raise ValueError(
            f"Timeout value {args.timeout} is less than minimum ({MIN_TIMEOUT} secs)"
        )

    if args.load_output:
        return
    if not args.host:
        raise ValueError("No host specified")
    if not args.username or not args.password:
        raise ValueError(
            "No login credentials, use --username/--password or OXE_USERNAME/OXE_PASSWORD"
        )


def _split_types(raw: str) -> tuple[str, ...]:
    return tuple(type_name.strip() for type_name in raw.split(",") if type_name.strip())


def build_options(args: argparse.Namespace) -> CheckOptions:
    """Build check options from parsed arguments."""

    return CheckOptions(
        crystal=args.crystal,
        coupler=args.coupler,
        coupler_types=_split_types(args.ctype or ""),
        trunk_group=args.trkgroup,
        remote_description=args.rdescr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run oxe-check and return the plugin exit code."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else args.log_level)
    label = short_name(args.mode)

    try:
        validate_args(args)
    except ValueError as exc:
        print(render_status_line(unknown_result(label, str(exc))))
        return int(Severity.UNKNOWN)

    options = build_options(args)
    command = args.command or build_command(args.mode, options)
    _LOGGER.info("Running mode %s with command %r", args.mode, command)

    try:
        if args.load_output:
            _LOGGER.info("Loading device reply from %s", args.load_output)
            _, lines = load_capture(args.load_output)
        else:
            settings = SessionSettings(
                host=args.host,
                username=args.username,
                password=args.password,
                timeout=args.timeout,
                port=args.port,
            )
            lines = run_command(settings, command)
    except SessionError as exc:
        _LOGGER.error("Session failed: %s", exc.message)
        print(render_status_line(unknown_result(label, exc.message)))
        return int(Severity.UNKNOWN)
    except (OSError, ValueError) as exc:
        _LOGGER.error("Invalid capture file: %s", exc)
        print(render_status_line(unknown_result(label, f"Invalid capture file: {exc}")))
        return int(Severity.UNKNOWN)

    if args.save_output:
        try:
            save_capture(args.save_output, command, lines)
        except OSError as exc:
            _LOGGER.error("Cannot save device reply: %s", exc)
            message = f"Cannot save device reply: {exc}"
            print(render_status_line(unknown_result(label, message)))
            return int(Severity.UNKNOWN)
        _LOGGER.info("Saved device reply to %s", args.save_output)

    result = run_check(args.mode, lines, options)
    print(render_status_line(result))
    return int(result.verdict.severity)


if __name__ == "__main__":
    raise SystemExit(main())
