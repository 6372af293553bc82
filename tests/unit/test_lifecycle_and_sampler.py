# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from types import SimpleNamespace

import psutil

from beeprobe.cache.lifecycle import ManagedSurface
from beeprobe.cache.sampler import FixedMemorySampler, ProcessMemorySampler
from beeprobe.config import GovernorSettings
from beeprobe.dispatch import QueueDispatcher
from beeprobe.models import CacheAction


class FakeSurface:
    def __init__(self, fail_on=()):
        self.calls = []
        self.is_destroyed = False
        self.fail_on = set(fail_on)

    def _record(self, name):
        if name in self.fail_on:
            raise RuntimeError(f"{name} after teardown")
        self.calls.append(name)

    def clear_cache(self, include_disk_files):
        self._record("clear_cache")

    def clear_form_data(self):
        self._record("clear_form_data")

    def clear_history(self):
        self._record("clear_history")

    def pause(self):
        self._record("pause")

    def resume(self):
        self._record("resume")

    def destroy(self):
        self._record("destroy")
        self.is_destroyed = True


def _managed(surface, ratio=0.5, dispatcher=None):
    return ManagedSurface(
        surface,
        dispatcher=dispatcher,
        sampler=FixedMemorySampler(int(ratio * 1000), 1000),
        settings=GovernorSettings(gc_hint=False),
    )


def test_cleanup_is_idempotent():
    surface = FakeSurface()
    managed = _managed(surface)

    managed.cleanup()
    managed.detached()
    managed.cleanup()

    assert surface.calls == ["clear_cache", "clear_history", "clear_form_data", "destroy"]
    assert managed.cleaned_up is True
    assert managed.governor.closed is True


def test_cleanup_swallows_teardown_errors():
    surface = FakeSurface(fail_on={"clear_history"})
    managed = _managed(surface)
    managed.cleanup()
    assert surface.calls == ["clear_cache", "clear_form_data", "destroy"]


def test_cleanup_after_host_destroyed_surface():
    surface = FakeSurface()
    managed = _managed(surface)
    surface.destroy()
    surface.calls.clear()
    managed.cleanup()
    managed.cleanup()
    assert surface.calls == []


def test_lifecycle_events_route_to_governor():
    dispatcher = QueueDispatcher()
    surface = FakeSurface()
    managed = _managed(surface, ratio=0.85, dispatcher=dispatcher)

    assert managed.page_started().result(timeout=5) == CacheAction.CLEAR_CACHE_ONLY
    assert managed.page_finished().result(timeout=5) == CacheAction.CLEAR_CACHE_AND_FORM_DATA
    assert managed.low_memory().result(timeout=5) == CacheAction.CLEAR_ALL_AND_HISTORY
    dispatcher.drain()

    assert surface.calls == [
        "clear_cache",
        "clear_cache",
        "clear_form_data",
        "clear_cache",
        "clear_form_data",
        "clear_history",
    ]
    managed.cleanup()


def test_pause_resume_skip_dead_surface():
    surface = FakeSurface()
    managed = _managed(surface)
    managed.pause()
    managed.resume()
    managed.cleanup()
    managed.pause()
    managed.resume()
    assert surface.calls[:2] == ["pause", "resume"]
    assert surface.calls.count("pause") == 1


def test_events_after_cleanup_are_ignored():
    surface = FakeSurface()
    managed = _managed(surface, ratio=0.95)
    managed.cleanup()
    assert managed.page_finished() is None
    assert managed.low_memory() is None


def test_process_sampler_reads_fresh_values(monkeypatch):
    readings = iter([100, 250])
    process = SimpleNamespace(memory_info=lambda: SimpleNamespace(rss=next(readings)))
    monkeypatch.setattr(psutil, "virtual_memory", lambda: SimpleNamespace(total=1000))

    sampler = ProcessMemorySampler(process=process)
    first = sampler.sample()
    second = sampler.sample()

    assert (first.used_bytes, first.max_bytes) == (100, 1000)
    assert (second.used_bytes, second.ratio) == (250, 0.25)


def test_process_sampler_uses_configured_ceiling(monkeypatch):
    process = SimpleNamespace(memory_info=lambda: SimpleNamespace(rss=300))
    monkeypatch.setattr(psutil, "virtual_memory", lambda: (_ for _ in ()).throw(AssertionError("not expected")))
    sample = ProcessMemorySampler(max_bytes=400, process=process).sample()
    assert sample.ratio == 0.75


def test_fixed_sampler_reflects_updates():
    sampler = FixedMemorySampler(10, 100)
    assert sampler.sample().ratio == 0.1
    sampler.used_bytes = 90
    assert sampler.sample().ratio == 0.9
