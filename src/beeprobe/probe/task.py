# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Background execution of a probe run.

The run executes on a dedicated single worker. Progress snapshots flow out
through a queue (one producer, one consumer) and through the host's
`on_progress` callback; the final session arrives through a Future and the
host's `on_complete` callback. Host callbacks are always posted through the
dispatcher so they run on the interactive thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import suppress

from ..dispatch import Dispatcher, InlineDispatcher
from ..models import CandidateEndpoint, ProbeSession
from .report import format_session
from .runner import ProbeRunner

logger = logging.getLogger(__name__)

TextCallback = Callable[[str], None]


class ProbeTask:
    def __init__(
        self,
        runner: ProbeRunner,
        *,
        dispatcher: Dispatcher | None = None,
        on_progress: TextCallback | None = None,
        on_complete: TextCallback | None = None,
    ):
        self.runner = runner
        self.dispatcher = dispatcher or InlineDispatcher()
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.progress: queue.Queue[str] = queue.Queue()
        self.session: ProbeSession | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="beeprobe-probe")
        self._lock = threading.Lock()
        self._interrupt = threading.Event()
        self._future: Future[ProbeSession] | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        """True while a run is in flight; the host disables its trigger control meanwhile."""
        with self._lock:
            return self._future is not None and not self._future.done()

    def start(self, candidates: Iterable[CandidateEndpoint]) -> Future[ProbeSession]:
        with self._lock:
            if self._closed:
                raise RuntimeError("ProbeTask has been shut down")
            if self._future is not None and not self._future.done():
                raise RuntimeError("A probe run is already in progress")
            self.session = None
            self.progress = queue.Queue()
            future = self._executor.submit(self._run, tuple(candidates))
            self._future = future
        return future

    def _run(self, candidates: tuple[CandidateEndpoint, ...]) -> ProbeSession:
        try:
            session = self.runner.run(candidates, on_progress=self._publish, interrupt=self._interrupt)
        except Exception:
            logger.exception("Probe run failed")
            raise
        self.session = session
        text = format_session(session)
        callback = self.on_complete
        if callback is not None:
            self.dispatcher.post(lambda: callback(text))
        return session

    def _publish(self, text: str) -> None:
        self.progress.put(text)
        callback = self.on_progress
        if callback is not None:
            self.dispatcher.post(lambda: callback(text))

    def snapshots(self) -> list[str]:
        """Drain the progress queue without blocking."""
        items: list[str] = []
        while True:
            try:
                items.append(self.progress.get_nowait())
            except queue.Empty:
                return items

    def shutdown(self) -> None:
        """Stop accepting runs and abandon pending pauses. Safe to call repeatedly."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._interrupt.set()
        with suppress(Exception):
            self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["ProbeTask", "TextCallback"]
