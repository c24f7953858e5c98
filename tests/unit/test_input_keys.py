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
Unit tests for wifidash.input_keys.

Covers escape sequence parsing, the readchar key mapping, key bindings,
the blocking input source, and terminal raw mode handling.
"""

import os
import sys
import termios
import unittest
from unittest.mock import patch

import readchar

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import factories  # noqa: E402,F401

from wifidash.input_keys import (  # noqa: E402
    Command,
    InputSourceError,
    KeyEvent,
    ReadcharInputSource,
    map_key_to_command,
    map_readchar_key,
    parse_escape_sequence,
    terminal_raw_mode,
)


class TestParseEscapeSequence(unittest.TestCase):
    def test_arrow_keys(self):
        self.assertEqual(parse_escape_sequence("[A"), "arrow_up")
        self.assertEqual(parse_escape_sequence("[B"), "arrow_down")
        self.assertEqual(parse_escape_sequence("[C"), "arrow_right")
        self.assertEqual(parse_escape_sequence("[D"), "arrow_left")

    def test_application_mode_and_modifiers(self):
        self.assertEqual(parse_escape_sequence("OA"), "arrow_up")
        self.assertEqual(parse_escape_sequence("[1;5B"), "arrow_down")

    def test_unrecognized(self):
        self.assertIsNone(parse_escape_sequence(""))
        self.assertIsNone(parse_escape_sequence("["))
        self.assertIsNone(parse_escape_sequence("[Z"))
        self.assertIsNone(parse_escape_sequence("XA"))


class TestMapReadcharKey(unittest.TestCase):
    def test_named_keys(self):
        self.assertEqual(map_readchar_key(readchar.key.UP), "arrow_up")
        self.assertEqual(map_readchar_key(readchar.key.DOWN), "arrow_down")
        self.assertEqual(map_readchar_key(readchar.key.LEFT), "arrow_left")
        self.assertEqual(map_readchar_key(readchar.key.RIGHT), "arrow_right")
        self.assertEqual(map_readchar_key(readchar.key.CTRL_C), "ctrl_c")

    def test_enter_variants(self):
        self.assertEqual(map_readchar_key("\r"), "enter")
        self.assertEqual(map_readchar_key("\n"), "enter")

    def test_modified_arrow_sequence(self):
        self.assertEqual(map_readchar_key("\x1b[1;2A"), "arrow_up")

    def test_plain_characters_pass_through(self):
        self.assertEqual(map_readchar_key("q"), "q")
        self.assertEqual(map_readchar_key("\x1b"), "\x1b")
        self.assertEqual(map_readchar_key("\x1b[Z"), "\x1b[Z")


class TestKeyBindings(unittest.TestCase):
    def test_bound_keys(self):
        expected = {
            "q": Command.QUIT,
            "ctrl_c": Command.QUIT,
            "b": Command.SORT_BSSID,
            "s": Command.SORT_SSID,
            "arrow_down": Command.SELECT_NEXT,
            "arrow_up": Command.SELECT_PREVIOUS,
            "enter": Command.CYCLE_FOCUS,
        }
        for key, command in expected.items():
            self.assertIs(map_key_to_command(key), command, msg=key)

    def test_unbound_keys(self):
        for key in ("Q", "B", "x", "arrow_left", "arrow_right", ""):
            self.assertIsNone(map_key_to_command(key), msg=key)


class TestReadcharInputSource(unittest.TestCase):
    @patch("wifidash.input_keys.readchar.readkey")
    def test_returns_mapped_event(self, mock_readkey):
        mock_readkey.side_effect = ["b", readchar.key.DOWN, "\r"]
        source = ReadcharInputSource()
        self.assertEqual(source.read_event(), KeyEvent("b"))
        self.assertEqual(source.read_event(), KeyEvent("arrow_down"))
        self.assertEqual(source.read_event(), KeyEvent("enter"))

    @patch("wifidash.input_keys.readchar.readkey")
    def test_keyboard_interrupt_becomes_ctrl_c(self, mock_readkey):
        mock_readkey.side_effect = KeyboardInterrupt
        self.assertEqual(ReadcharInputSource().read_event(), KeyEvent("ctrl_c"))

    @patch("wifidash.input_keys.readchar.readkey")
    def test_read_errors(self, mock_readkey):
        for error in (OSError("bad fd"), ValueError("closed file"), termios.error(25, "not a tty")):
            mock_readkey.side_effect = error
            with self.assertRaises(InputSourceError):
                ReadcharInputSource().read_event()

    @patch("wifidash.input_keys.readchar.readkey", return_value="")
    def test_end_of_input(self, _mock_readkey):
        with self.assertRaises(InputSourceError):
            ReadcharInputSource().read_event()


class TestTerminalRawMode(unittest.TestCase):
    def test_not_a_terminal_is_skipped(self):
        read_fd, write_fd = os.pipe()
        try:
            with terminal_raw_mode(read_fd):
                pass
        finally:
            os.close(read_fd)
            os.close(write_fd)

    @patch("wifidash.input_keys.termios.tcsetattr")
    @patch("wifidash.input_keys.tty.setraw")
    @patch("wifidash.input_keys.termios.tcgetattr", return_value=["saved"])
    def test_restores_settings_after_exception(self, _mock_get, mock_setraw, mock_set):
        with self.assertRaises(RuntimeError):
            with terminal_raw_mode(7):
                raise RuntimeError("boom")
        mock_setraw.assert_called_once_with(7)
        mock_set.assert_called_once_with(7, termios.TCSADRAIN, ["saved"])

    @patch("wifidash.input_keys.termios.tcsetattr", side_effect=termios.error(5, "I/O error"))
    @patch("wifidash.input_keys.tty.setraw")
    @patch("wifidash.input_keys.termios.tcgetattr", return_value=["saved"])
    def test_restore_failure_is_suppressed(self, _mock_get, _mock_setraw, _mock_set):
        with self.assertLogs("wifidash.input_keys", level="DEBUG"):
            with terminal_raw_mode(7):
                pass

    @patch("wifidash.input_keys.termios.tcsetattr")
    @patch("wifidash.input_keys.tty.setraw", side_effect=termios.error(5, "I/O error"))
    @patch("wifidash.input_keys.termios.tcgetattr", return_value=["saved"])
    def test_setraw_failure_propagates(self, _mock_get, _mock_setraw, mock_set):
        with self.assertRaises(termios.error):
            with terminal_raw_mode(7):
                self.fail("body must not run")  # pragma: no cover
        mock_set.assert_not_called()


if __name__ == "__main__":
    unittest.main()
