#!/usr/bin/env python3
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
# Review required for correctness, security, and licensing.

"""
Keyboard input handling for wifidash using the readchar library.

This module provides the blocking input source used by the input producer
thread, escape sequence parsing for arrow keys, the mapping from keys to
dashboard commands, and the raw terminal mode context manager.
"""

import contextlib
import logging
import sys
import termios
import tty
from dataclasses import dataclass
from enum import Enum
from typing import Generator, Optional, Protocol

import readchar
import readchar.key

logger = logging.getLogger(__name__)


class InputSourceError(RuntimeError):
    """Raised when the keyboard can no longer be read."""


@dataclass(frozen=True)
class KeyEvent:
    """A single key press; ``key`` is a character or a named key such as 'arrow_up'."""

    key: str


class InputSource(Protocol):
    def read_event(self) -> object:
        ...


class Command(Enum):
    QUIT = "quit"
    SORT_BSSID = "sort_bssid"
    SORT_SSID = "sort_ssid"
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    CYCLE_FOCUS = "cycle_focus"


KEY_BINDINGS = {
    "q": Command.QUIT,
    "ctrl_c": Command.QUIT,
    "b": Command.SORT_BSSID,
    "s": Command.SORT_SSID,
    "arrow_down": Command.SELECT_NEXT,
    "arrow_up": Command.SELECT_PREVIOUS,
    "enter": Command.CYCLE_FOCUS,
}


@contextlib.contextmanager
def terminal_raw_mode(fd: Optional[int] = None) -> Generator[None, None, None]:
    """Context manager that sets a terminal file descriptor to raw mode and restores it on exit.

    This ensures terminal state is properly restored even when a signal (e.g. SIGINT)
    interrupts the caller, preventing the shell from being left in an unusable state.

    Args:
        fd: Terminal file descriptor to configure.  Defaults to ``sys.stdin.fileno()``.
    """
    if fd is None:
        fd = sys.stdin.fileno()
    try:
        old_settings = termios.tcgetattr(fd)
    except termios.error:
        # Not a real terminal (e.g. a pipe or test mock) – skip raw-mode setup.
        yield
        return
    tty.setraw(fd)
    try:
        yield
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        except termios.error as exc:
            logger.debug("Could not restore terminal settings: %s", exc)


def parse_escape_sequence(seq: str) -> Optional[str]:
    """
    Parse ANSI escape sequence to identify arrow keys.

    Args:
        seq: The escape sequence string (without the leading ESC)

    Returns:
        String identifier for arrow keys ('arrow_up', 'arrow_down', etc.)
        or None if sequence is not recognized
    """
    arrow_map = {
        "A": "arrow_up",
        "B": "arrow_down",
        "C": "arrow_right",
        "D": "arrow_left",
    }
    if not seq:
        return None
    if seq[0] in ("[", "O") and len(seq) > 1 and seq[-1] in arrow_map:
        return arrow_map[seq[-1]]
    return None


def map_readchar_key(key_value: str) -> str:
    """
    Map a key returned by readchar.readkey() to a wifidash key name.

    Arrow keys become 'arrow_up'/'arrow_down'/'arrow_left'/'arrow_right',
    carriage return and line feed become 'enter', Ctrl-C becomes 'ctrl_c'.
    Anything else is returned unchanged.
    """
    key_map = {
        readchar.key.UP: "arrow_up",
        readchar.key.DOWN: "arrow_down",
        readchar.key.LEFT: "arrow_left",
        readchar.key.RIGHT: "arrow_right",
        readchar.key.CR: "enter",
        readchar.key.LF: "enter",
        readchar.key.CTRL_C: "ctrl_c",
    }
    if key_value in key_map:
        return key_map[key_value]

    # readchar returns full escape sequences like "\x1b[1;5A" for modified arrows
    if key_value and key_value[0] == "\x1b" and len(key_value) > 1:
        parsed = parse_escape_sequence(key_value[1:])
        if parsed:
            return parsed

    return key_value


def map_key_to_command(key: str) -> Optional[Command]:
    """Return the dashboard command bound to a key name, or None."""
    return KEY_BINDINGS.get(key)


class ReadcharInputSource:
    """Blocking keyboard reader for the input producer thread."""

    def read_event(self) -> KeyEvent:
        """
        Block until the next key press.

        Raises:
            InputSourceError: stdin is closed or cannot be read
        """
        try:
            key = readchar.readkey()
        except KeyboardInterrupt:
            return KeyEvent("ctrl_c")
        except (OSError, ValueError, termios.error) as exc:
            raise InputSourceError(f"Cannot read keyboard input: {exc}") from exc
        if not key:
            raise InputSourceError("stdin closed")
        return KeyEvent(map_readchar_key(key))
