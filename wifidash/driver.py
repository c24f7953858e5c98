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
Render loop for wifidash.

The driver owns the App and is the only code that mutates it. Every tick it
checks the scan channel once, then the input channel once, never blocking on
either, and redraws after every change.
"""

import logging
import queue
import time
from typing import Any, Callable

from wifidash.app import App
from wifidash.channel import Channel, ChannelDisconnected
from wifidash.columns import BssColumn, SortDirection
from wifidash.input_keys import Command, KeyEvent, map_key_to_command

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1


class RenderDriver:
    """Single-threaded fixed-tick loop draining the producer channels."""

    def __init__(
        self,
        app: App,
        surface: Any,
        scan_channel: Channel,
        input_channel: Channel,
        tick_seconds: float = TICK_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.app = app
        self.surface = surface
        self.scan_channel = scan_channel
        self.input_channel = input_channel
        self.tick_seconds = tick_seconds
        self._sleep = sleep

    def run(self) -> None:
        """Run until the quit command or until either producer disappears."""
        try:
            self.redraw()
            while self.tick():
                self._sleep(self.tick_seconds)
        finally:
            self.scan_channel.close_receiver()
            self.input_channel.close_receiver()

    def tick(self) -> bool:
        """Process at most one snapshot and one input event; return False to stop."""
        try:
            snapshot = self.scan_channel.try_recv()
        except queue.Empty:
            pass
        except ChannelDisconnected:
            logger.info("Scan producer is gone, stopping")
            return False
        else:
            self.app.apply_new_snapshot(snapshot)
            self.redraw()

        try:
            event = self.input_channel.try_recv()
        except queue.Empty:
            return True
        except ChannelDisconnected:
            logger.info("Input producer is gone, stopping")
            return False
        return self.dispatch(event)

    def dispatch(self, event: Any) -> bool:
        """Apply one input event; return False when it asks to quit."""
        if not isinstance(event, KeyEvent):
            return True
        command = map_key_to_command(event.key)
        if command is None:
            return True
        if command is Command.QUIT:
            return False

        if command is Command.SORT_BSSID:
            self.app.sort_primary(BssColumn.BSSID, SortDirection.DESCENDING)
        elif command is Command.SORT_SSID:
            self.app.sort_primary(BssColumn.SSID, SortDirection.DESCENDING)
        elif command is Command.SELECT_NEXT:
            self.app.select_next()
        elif command is Command.SELECT_PREVIOUS:
            self.app.select_previous()
        elif command is Command.CYCLE_FOCUS:
            self.app.cycle_focus()
        self.redraw()
        return True

    def redraw(self) -> None:
        self.app.render(self.surface)
