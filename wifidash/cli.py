# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review for correctness and security.

"""
Command-line interface for wifidash.

This module contains the main entry point and command-line argument handling.
"""

import argparse
import contextlib
import logging
import os
import sys
import termios
from typing import IO, Any, Dict, List, Optional, Sequence

from wifidash.app import App
from wifidash.config import load_config
from wifidash.driver import RenderDriver
from wifidash.input_keys import ReadcharInputSource, terminal_raw_mode
from wifidash.producers import start_input_thread, start_scan_thread
from wifidash.scan_source import create_scan_source
from wifidash.ui_render import TerminalSurface, enter_alternate_screen, leave_alternate_screen

logger = logging.getLogger(__name__)


def _configure_logging(log_level: str, log_file: Optional[str]) -> None:
    """
    Configure logging handlers for CLI execution.

    The dashboard owns the whole screen, so records only go to a file when
    one is given and are discarded otherwise.
    """
    handlers: List[logging.Handler] = [logging.NullHandler()]
    if log_file:
        handlers = [logging.FileHandler(os.path.expanduser(log_file), encoding="utf-8")]
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


# Hardcoded defaults for config-overridable fields.
# Applied after config merging for any field still set to None.
_HARDCODED_DEFAULTS: Dict[str, Any] = {
    "source": "nmcli",
    "log_level": "WARNING",
    "color": False,
}


def _apply_config_to_args(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    """
    Overlay config file values onto a parsed argument namespace.

    Only fields that are still ``None`` (i.e. not explicitly set on the CLI)
    are updated.
    """
    for key, value in config.items():
        if hasattr(args, key) and getattr(args, key) is None:
            setattr(args, key, value)


def handle_options(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse and validate command-line arguments."""
    parser = argparse.ArgumentParser(
        description="wifidash - Live Wi-Fi scan dashboard for the terminal",
        epilog="Keys: q quit, b/s sort by BSSID/SSID, up/down move the selection, "
        "Enter switch between the network and element tables.",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        choices=["nmcli", "file"],
        help="Where scan results come from (default: nmcli)",
    )
    parser.add_argument(
        "--snapshot-file",
        type=str,
        default=None,
        help="YAML/JSON snapshot file, re-read on every scan (required with --source file)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path; nothing is logged without one",
    )
    color_group = parser.add_mutually_exclusive_group()
    color_group.add_argument(
        "-C",
        "--color",
        dest="color",
        action="store_true",
        default=None,
        help="Enable colored output",
    )
    color_group.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        default=None,
        help="Disable colored output, overriding the config file",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        default=False,
        help="Skip loading ~/.wifidash.conf config file",
    )

    args = parser.parse_args(argv)

    if not args.no_config:
        try:
            _apply_config_to_args(args, load_config())
        except ValueError as exc:
            parser.error(str(exc))

    for field, default in _HARDCODED_DEFAULTS.items():
        if getattr(args, field, None) is None:
            setattr(args, field, default)

    if args.source not in ("nmcli", "file"):
        parser.error(f"Unknown scan source '{args.source}'. Use nmcli or file.")
    if args.source == "file" and not args.snapshot_file:
        parser.error("--snapshot-file is required with --source file.")
    return args


def _leave_screen_quietly(stream: IO[str]) -> None:
    try:
        leave_alternate_screen(stream)
    except (OSError, ValueError) as exc:
        logger.debug("Terminal teardown failed: %s", exc)


def run(args: argparse.Namespace) -> int:
    """Run the dashboard with parsed arguments and return the exit status."""
    _configure_logging(args.log_level, args.log_file)
    source = create_scan_source(args.source, args.snapshot_file)
    stream = sys.stdout
    surface = TerminalSurface(stream, use_color=bool(args.color) and stream.isatty())

    setup_error: Optional[BaseException] = None
    with contextlib.ExitStack() as stack:
        try:
            stack.enter_context(terminal_raw_mode())
            enter_alternate_screen(stream)
        except (termios.error, OSError, ValueError) as exc:
            logger.error("Terminal setup failed: %s", exc)
            setup_error = exc
        else:
            stack.callback(_leave_screen_quietly, stream)
            scan_channel, _ = start_scan_thread(source)
            input_channel, _ = start_input_thread(ReadcharInputSource())
            driver = RenderDriver(App(), surface, scan_channel, input_channel)
            try:
                driver.run()
            except KeyboardInterrupt:
                logger.info("Interrupted")

    if setup_error is not None:
        print(f"Error: cannot set up the terminal: {setup_error}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    """Main entrypoint for the CLI - parses arguments and runs the application."""
    args = handle_options()
    sys.exit(run(args))
