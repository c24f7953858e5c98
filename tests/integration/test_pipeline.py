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
Integration tests for the producer threads and the render loop.

Both producers run on real threads against fake sources; the render loop
runs on its own thread with a short tick so the tests finish quickly.
"""

import os
import queue
import sys
import threading
import time
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from factories import make_element, make_record  # noqa: E402

from wifidash.app import App, Focus  # noqa: E402
from wifidash.columns import BssColumn  # noqa: E402
from wifidash.driver import RenderDriver  # noqa: E402
from wifidash.input_keys import InputSourceError, KeyEvent  # noqa: E402
from wifidash.producers import start_input_thread, start_scan_thread  # noqa: E402

WAIT_SECONDS = 5.0


class FakeScanSource:
    """Returns the same snapshot from every scan."""

    def __init__(self, records):
        self.records = tuple(records)
        self.scans = 0

    def cached_scan_results(self):
        return ()

    def scan(self):
        self.scans += 1
        return self.records


class QueueInputSource:
    """Blocks on a queue of key names; None ends the input."""

    def __init__(self):
        self.keys = queue.Queue()

    def read_event(self):
        key = self.keys.get(timeout=WAIT_SECONDS)
        if key is None:
            raise InputSourceError("stdin closed")
        return KeyEvent(key)


class RecordingSurface:
    def __init__(self):
        self.lock = threading.Lock()
        self.frames = []

    def draw(self, bss_table, ie_table, focus):
        with self.lock:
            self.frames.append(([record.bssid for record in bss_table.records], focus))

    def saw_records(self):
        with self.lock:
            return any(bssids for bssids, _ in self.frames)


def _wait_for(predicate, timeout=WAIT_SECONDS):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestPipeline(unittest.TestCase):
    def setUp(self):
        self.records = [
            make_record("cc", ssid="Bravo", elements=[make_element(0), make_element(48)]),
            make_record("aa", ssid="Charlie", elements=[make_element(0)]),
            make_record("bb", ssid="Alpha", elements=[make_element(0), make_element(1), make_element(3)]),
        ]
        self.scan_source = FakeScanSource(self.records)
        self.input_source = QueueInputSource()
        self.surface = RecordingSurface()
        self.app = App()

        self.scan_channel, self.scan_thread = start_scan_thread(self.scan_source, interval=0.02)
        self.input_channel, self.input_thread = start_input_thread(self.input_source)
        self.driver = RenderDriver(self.app, self.surface, self.scan_channel, self.input_channel, tick_seconds=0.005)
        self.driver_thread = threading.Thread(target=self.driver.run, name="render-driver", daemon=True)

    def tearDown(self):
        self.input_source.keys.put(None)
        for thread in (self.driver_thread, self.scan_thread, self.input_thread):
            thread.join(timeout=WAIT_SECONDS)

    def test_keys_drive_the_dashboard_until_quit(self):
        self.driver_thread.start()
        self.assertTrue(_wait_for(self.surface.saw_records))

        for key in ("s", "arrow_down", "enter", "arrow_down", "arrow_down", "q"):
            self.input_source.keys.put(key)

        self.driver_thread.join(timeout=WAIT_SECONDS)
        self.assertFalse(self.driver_thread.is_alive())

        # Sorted by SSID: Alpha(bb), Bravo(cc), Charlie(aa); moved to Bravo,
        # then focus moved to its elements and down to the last one.
        self.assertEqual(self.app.bss_table.sort_column, BssColumn.SSID)
        self.assertEqual(self.app.bss_table.currently_selected().bssid, "cc")
        self.assertIs(self.app.focus, Focus.DETAIL)
        self.assertEqual(self.app.ie_table.currently_selected().id, 48)

        self.scan_thread.join(timeout=WAIT_SECONDS)
        self.assertFalse(self.scan_thread.is_alive())
        self.assertGreaterEqual(self.scan_source.scans, 1)

    def test_input_failure_stops_the_dashboard(self):
        self.driver_thread.start()
        self.assertTrue(_wait_for(self.surface.saw_records))

        with self.assertLogs("wifidash.producers", level="WARNING"):
            self.input_source.keys.put(None)
            self.input_thread.join(timeout=WAIT_SECONDS)

        self.driver_thread.join(timeout=WAIT_SECONDS)
        self.assertFalse(self.driver_thread.is_alive())
        self.assertTrue(self.scan_channel.receiver_closed.is_set())


if __name__ == "__main__":
    unittest.main()
