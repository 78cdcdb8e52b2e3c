# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Many-producer, single-consumer channel for finished task results.

Scoring workers send results as they complete; the consumer iterates the
channel and the iteration ends once the channel is closed. Closing is a
sentinel put behind every result already sent, so nothing sent before
close() can be missed.
"""

import queue
import threading
from collections.abc import Iterator

from scorerun.evaluation.tasks.models import TaskResult

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    """Raised when sending on a channel that has already been closed."""


class ResultChannel:
    """Unbounded by default; pass `maxsize` to make senders block when full."""

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, result: TaskResult) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("send on closed result channel")
            self._queue.put(result)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[TaskResult]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
