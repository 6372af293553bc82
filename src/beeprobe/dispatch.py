# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Marshaling work onto the interactive thread.

Background workers never touch host UI or the rendering surface directly;
they `post` a callable and the owning thread runs it.
"""

from __future__ import annotations

import queue
from collections.abc import Callable
from typing import Protocol


class Dispatcher(Protocol):
    def post(self, fn: Callable[[], None]) -> None: ...


class InlineDispatcher:
    """Runs posted work immediately on the calling thread (CLI and tests)."""

    def post(self, fn: Callable[[], None]) -> None:
        fn()


class QueueDispatcher:
    """Queues posted work until the owning thread calls `drain`."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Callable[[], None]] = queue.Queue()

    def post(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def drain(self, timeout: float | None = None) -> int:
        """
        Run everything queued so far; returns the number of callables run.

        With a timeout, waits up to that long for the first item.
        """
        ran = 0
        block = timeout is not None
        while True:
            try:
                fn = self._queue.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                return ran
            block = False
            fn()
            ran += 1

    @property
    def pending(self) -> int:
        return self._queue.qsize()


__all__ = ["Dispatcher", "InlineDispatcher", "QueueDispatcher"]
