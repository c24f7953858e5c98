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
Single-producer/single-consumer channel built on queue.Queue.

A plain Queue cannot tell an idle producer from a dead one. Channel adds an
explicit close on each side: the consumer sees ChannelDisconnected once the
producer has closed and every queued item has been drained, and the producer
gets ChannelClosed from send() once the consumer has gone away.
"""

import queue
import threading
from typing import Any

_SENDER_GONE = object()


class ChannelClosed(Exception):
    """Raised by send() when the receiving side has been closed."""


class ChannelDisconnected(Exception):
    """Raised by try_recv() when the sending side is gone and the channel is drained."""


class Channel:
    """Unbounded FIFO channel with disconnect detection on both ends."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._sender_closed = threading.Event()
        self._receiver_closed = threading.Event()
        self._disconnected = False

    def send(self, item: Any) -> None:
        """Queue an item without blocking."""
        if self._receiver_closed.is_set():
            raise ChannelClosed("receiver closed")
        self._queue.put(item)

    def close(self) -> None:
        """Close the sending side; idempotent."""
        if not self._sender_closed.is_set():
            self._sender_closed.set()
            self._queue.put(_SENDER_GONE)

    def try_recv(self) -> Any:
        """
        Return the next item without blocking.

        Raises:
            queue.Empty: Nothing is queued and the sender is still alive
            ChannelDisconnected: The sender closed and all items were received
        """
        if self._disconnected:
            raise ChannelDisconnected("sender closed")
        item = self._queue.get_nowait()
        if item is _SENDER_GONE:
            self._disconnected = True
            raise ChannelDisconnected("sender closed")
        return item

    def close_receiver(self) -> None:
        self._receiver_closed.set()

    @property
    def receiver_closed(self) -> threading.Event:
        """Event set once the receiver is gone; producers may wait on it."""
        return self._receiver_closed
