# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Graduated cache eviction under memory pressure.

Lifecycle hooks return immediately: sampling and evaluation happen on a
single background worker, and the resulting eviction is posted back to the
interactive thread, the only place the surface may be mutated.
"""

from __future__ import annotations

import gc
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import suppress

from ..config import GovernorSettings, load_governor_settings
from ..dispatch import Dispatcher, InlineDispatcher
from ..models import CacheAction, EvictionPolicy, MemorySample, TriggerContext
from .sampler import MemorySampler, ProcessMemorySampler
from .surface import SurfaceHandle

logger = logging.getLogger(__name__)


def select_action(
    policy: EvictionPolicy,
    sample: MemorySample,
    trigger: TriggerContext | None = None,
) -> CacheAction | None:
    """An OS low-memory signal always clears everything; otherwise the policy decides."""
    if trigger == TriggerContext.LOW_MEMORY:
        return CacheAction.CLEAR_ALL_AND_HISTORY
    return policy.select(sample.ratio, trigger)


class CacheGovernor:
    def __init__(
        self,
        handle: SurfaceHandle,
        *,
        sampler: MemorySampler | None = None,
        policy: EvictionPolicy | None = None,
        dispatcher: Dispatcher | None = None,
        settings: GovernorSettings | None = None,
    ):
        self.settings = settings or load_governor_settings()
        self.handle = handle
        self.sampler = sampler or ProcessMemorySampler(self.settings.max_bytes)
        self.policy = policy or EvictionPolicy.default(self.settings.soft_ratio, self.settings.aggressive_ratio)
        self.dispatcher = dispatcher or InlineDispatcher()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="beeprobe-governor")
        self._lock = threading.Lock()
        self._closed = False

    def evaluate(self, sample: MemorySample, trigger: TriggerContext | None = None) -> CacheAction | None:
        return select_action(self.policy, sample, trigger)

    def on_navigation_start(self) -> Future | None:
        return self._submit(TriggerContext.NAVIGATION_START)

    def on_navigation_finish(self) -> Future | None:
        return self._submit(TriggerContext.NAVIGATION_FINISH)

    def on_low_memory(self) -> Future | None:
        return self._submit(TriggerContext.LOW_MEMORY)

    def _submit(self, trigger: TriggerContext) -> Future | None:
        with self._lock:
            if self._closed:
                return None
            try:
                return self._executor.submit(self._evaluate_and_post, trigger)
            except RuntimeError:
                # Executor shut down underneath us.
                return None

    def _evaluate_and_post(self, trigger: TriggerContext) -> CacheAction | None:
        if not self.handle.is_alive():
            return None
        try:
            sample = self.sampler.sample()
        except Exception:  # noqa: BLE001
            logger.debug("Memory sampling failed on %s", trigger.value, exc_info=True)
            return None
        action = self.evaluate(sample, trigger)
        logger.debug(
            "Memory %.1f%% (%d/%d bytes) on %s -> %s",
            sample.ratio * 100,
            sample.used_bytes,
            sample.max_bytes,
            trigger.value,
            action.value if action else "no action",
        )
        if action is not None:
            self.dispatcher.post(lambda: self.apply(action))
        return action

    def apply(self, action: CacheAction) -> bool:
        """Run an eviction on the surface. Must be called on the interactive thread."""
        surface = self.handle.get()
        if surface is None:
            logger.debug("Skipping %s: surface no longer attached", action.value)
            return False

        # Cookies are not part of the cache; the signed-in session survives every tier.
        surface.clear_cache(True)
        if action.severity >= CacheAction.CLEAR_CACHE_AND_FORM_DATA.severity:
            surface.clear_form_data()
        if action == CacheAction.CLEAR_ALL_AND_HISTORY:
            surface.clear_history()
            if self.settings.gc_hint:
                gc.collect()
        logger.info("Applied cache eviction %s", action.value)
        return True

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        with suppress(Exception):
            self._executor.shutdown(wait=False, cancel_futures=True)

    @property
    def closed(self) -> bool:
        return self._closed


__all__ = ["CacheGovernor", "select_action"]
