# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading
import time

import pytest

from beeprobe.config import ProbeSettings
from beeprobe.dispatch import InlineDispatcher, QueueDispatcher
from beeprobe.http import HttpResponse, StubHttpClient
from beeprobe.probe.candidates import build_candidates, candidates_from_urls
from beeprobe.probe.report import format_session
from beeprobe.probe.runner import ProbeRunner
from beeprobe.probe.task import ProbeTask


def _runner(client):
    return ProbeRunner(client, ProbeSettings(probe_delay=0))


class BlockingClient(StubHttpClient):
    def __init__(self):
        super().__init__()
        self.release = threading.Event()
        self.entered = threading.Event()

    def request(self, request):
        self.entered.set()
        self.release.wait(5)
        return HttpResponse(ok=True, status_code=200, reason_phrase="OK", text="ok")


def test_task_reports_progress_and_completion():
    progress = []
    completed = []
    candidates = build_candidates("h")
    client = StubHttpClient({candidates[0].url: HttpResponse(ok=True, status_code=200, reason_phrase="OK")})
    task = ProbeTask(_runner(client), dispatcher=InlineDispatcher(), on_progress=progress.append, on_complete=completed.append)

    session = task.start(candidates).result(timeout=5)

    assert len(session.records) == 6
    assert len(progress) == 6
    assert completed == [format_session(session)]
    assert completed[0].startswith(progress[-1])
    assert task.session is session
    assert task.snapshots() == progress
    assert task.running is False
    task.shutdown()


def test_callbacks_are_marshaled_to_dispatcher_thread():
    dispatcher = QueueDispatcher()
    seen_threads = []
    task = ProbeTask(
        _runner(StubHttpClient()),
        dispatcher=dispatcher,
        on_progress=lambda _text: seen_threads.append(threading.current_thread()),
        on_complete=lambda _text: seen_threads.append(threading.current_thread()),
    )

    task.start(candidates_from_urls(["http://a/", "http://b/"])).result(timeout=5)

    assert seen_threads == []
    assert dispatcher.drain() == 3
    assert seen_threads == [threading.main_thread()] * 3
    task.shutdown()


def test_second_start_while_running_is_rejected():
    client = BlockingClient()
    task = ProbeTask(_runner(client))
    future = task.start(candidates_from_urls(["http://a/"]))
    assert client.entered.wait(5)

    assert task.running is True
    with pytest.raises(RuntimeError):
        task.start(candidates_from_urls(["http://b/"]))

    client.release.set()
    future.result(timeout=5)
    assert task.running is False

    second = task.start(candidates_from_urls(["http://b/"])).result(timeout=5)
    assert [r.candidate.url for r in second.records] == ["http://b/"]
    task.shutdown()


def test_shutdown_is_idempotent_and_blocks_new_runs():
    task = ProbeTask(_runner(StubHttpClient()))
    task.shutdown()
    task.shutdown()
    with pytest.raises(RuntimeError):
        task.start(candidates_from_urls(["http://a/"]))


def test_shutdown_of_other_task_keeps_pauses():
    runner = ProbeRunner(StubHttpClient(), ProbeSettings(probe_delay=0.3))
    active = ProbeTask(runner)
    idle = ProbeTask(runner)

    started = time.monotonic()
    future = active.start(candidates_from_urls(["http://a/", "http://b/", "http://c/"]))
    idle.shutdown()
    future.result(timeout=5)

    assert time.monotonic() - started >= 0.8
    active.shutdown()


def test_shutdown_cuts_own_pauses_short():
    client = BlockingClient()
    task = ProbeTask(ProbeRunner(client, ProbeSettings(probe_delay=30.0)))
    future = task.start(candidates_from_urls(["http://a/", "http://b/", "http://c/"]))
    assert client.entered.wait(5)

    started = time.monotonic()
    task.shutdown()
    client.release.set()
    session = future.result(timeout=5)

    assert time.monotonic() - started < 5
    assert len(session.records) == 3
