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
Background producer threads for wifidash.

The scan producer publishes a snapshot after every successful scan; the
input producer forwards key events. Each producer closes its channel when it
stops, which is how the render loop learns that it is gone.
"""

import logging
import threading
from typing import Tuple

from wifidash.channel import Channel, ChannelClosed
from wifidash.input_keys import InputSource, InputSourceError
from wifidash.scan_source import ScanSource, ScanSourceError

logger = logging.getLogger(__name__)

SCAN_INTERVAL_SECONDS = 1.0


def scan_producer(source: ScanSource, channel: Channel, interval: float = SCAN_INTERVAL_SECONDS) -> None:
    """
    Publish scan snapshots until the receiver goes away.

    The cached results are published once, best effort. After that every
    scan is followed by a fixed ``interval`` pause, so scans never start
    closer together than ``interval`` but may be further apart when a scan
    is slow. Failed scans are skipped.

    Args:
        source: Scan source to drive
        channel: Channel receiving tuples of NetworkRecord
        interval: Pause in seconds after each scan
    """
    try:
        try:
            channel.send(tuple(source.cached_scan_results()))
        except ScanSourceError as exc:
            logger.debug("Cached scan results unavailable: %s", exc)

        while True:
            try:
                snapshot = tuple(source.scan())
            except ScanSourceError as exc:
                logger.debug("Scan failed: %s", exc)
            else:
                channel.send(snapshot)
            if channel.receiver_closed.wait(interval):
                break
    except ChannelClosed:
        logger.debug("Render loop went away, dropping snapshot")
    finally:
        channel.close()
        logger.debug("Scan producer stopped")


def input_producer(source: InputSource, channel: Channel) -> None:
    """Forward input events until the source fails or the receiver goes away."""
    try:
        while True:
            try:
                event = source.read_event()
            except InputSourceError as exc:
                logger.warning("Keyboard input stopped: %s", exc)
                return
            channel.send(event)
    except ChannelClosed:
        logger.debug("Render loop went away, dropping input event")
    finally:
        channel.close()
        logger.debug("Input producer stopped")


def start_scan_thread(source: ScanSource, interval: float = SCAN_INTERVAL_SECONDS) -> Tuple[Channel, threading.Thread]:
    """Start the scan producer on a daemon thread and return its channel."""
    channel = Channel()
    thread = threading.Thread(target=scan_producer, args=(source, channel, interval), name="scan-producer", daemon=True)
    thread.start()
    return channel, thread


def start_input_thread(source: InputSource) -> Tuple[Channel, threading.Thread]:
    """Start the input producer on a daemon thread and return its channel."""
    channel = Channel()
    thread = threading.Thread(target=input_producer, args=(source, channel), name="input-producer", daemon=True)
    thread.start()
    return channel, thread
