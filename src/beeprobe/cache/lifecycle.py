# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Lifecycle wiring between a host's rendering surface and the cache governor."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

from ..config import GovernorSettings
from ..dispatch import Dispatcher, InlineDispatcher
from .governor import CacheGovernor
from .sampler import MemorySampler
from .surface import RenderingSurface, SurfaceHandle

logger = logging.getLogger(__name__)


class ManagedSurface:
    """
    Routes host lifecycle events for one surface to the cache governor.

    `cleanup` runs at most once however many times it is called, so it is
    safe to call from an explicit teardown and again from `detached`.
    """

    def __init__(
        self,
        surface: RenderingSurface,
        *,
        dispatcher: Dispatcher | None = None,
        sampler: MemorySampler | None = None,
        settings: GovernorSettings | None = None,
    ):
        self.handle = SurfaceHandle(surface)
        self.dispatcher = dispatcher or InlineDispatcher()
        self.governor = CacheGovernor(
            self.handle,
            sampler=sampler,
            dispatcher=self.dispatcher,
            settings=settings,
        )
        self._cleanup_lock = threading.Lock()
        self._cleaned_up = False

    @property
    def cleaned_up(self) -> bool:
        return self._cleaned_up

    def page_started(self) -> Future | None:
        return self.governor.on_navigation_start()

    def page_finished(self) -> Future | None:
        return self.governor.on_navigation_finish()

    def low_memory(self) -> Future | None:
        return self.governor.on_low_memory()

    def pause(self) -> None:
        surface = self.handle.get()
        if surface is not None:
            surface.pause()

    def resume(self) -> None:
        surface = self.handle.get()
        if surface is not None:
            surface.resume()

    def detached(self) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        with self._cleanup_lock:
            if self._cleaned_up:
                return
            self._cleaned_up = True

        self.governor.close()
        surface = self.handle.get()
        self.handle.release()
        if surface is None:
            logger.debug("Surface already gone at cleanup")
            return
        for step in (
            lambda: surface.clear_cache(True),
            surface.clear_history,
            surface.clear_form_data,
            surface.destroy,
        ):
            try:
                step()
            except Exception as exc:  # noqa: BLE001
                logger.debug("Ignoring surface teardown error: %r", exc)


__all__ = ["ManagedSurface"]
