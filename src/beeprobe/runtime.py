# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level beeprobe facade for connectivity diagnostics and cache governance."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import suppress

from .cache.lifecycle import ManagedSurface
from .cache.sampler import MemorySampler
from .cache.surface import RenderingSurface
from .config import GovernorSettings, ProbeSettings, load_governor_settings, load_probe_settings
from .dispatch import Dispatcher, InlineDispatcher
from .http.client import HttpClient, create_default_http_client
from .models import CandidateEndpoint, ProbeSession
from .probe.candidates import build_candidates, candidates_from_urls
from .probe.runner import ProbeRunner
from .probe.task import ProbeTask, TextCallback


class BeeProbe:
    """
    Convenience wrapper that wires one HTTP client, dispatcher and settings
    across probe runs and managed rendering surfaces.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        probe_settings: ProbeSettings | None = None,
        governor_settings: GovernorSettings | None = None,
        dispatcher: Dispatcher | None = None,
    ):
        self.probe_settings = probe_settings or load_probe_settings()
        self.governor_settings = governor_settings or load_governor_settings()
        self.http_client = http_client or create_default_http_client(self.probe_settings)
        self.dispatcher = dispatcher or InlineDispatcher()
        self.runner = ProbeRunner(self.http_client, self.probe_settings)
        self.task = ProbeTask(self.runner, dispatcher=self.dispatcher)
        self._surfaces: list[ManagedSurface] = []

    def candidates(self, urls: Iterable[str] | None = None) -> tuple[CandidateEndpoint, ...]:
        if urls:
            return candidates_from_urls(urls)
        return build_candidates(self.probe_settings.host)

    def probe(
        self,
        urls: Iterable[str] | None = None,
        *,
        on_progress: TextCallback | None = None,
    ) -> ProbeSession:
        """Blocking run on the shared probe worker; `on_progress` is posted through the dispatcher."""
        task = self.probe_task(on_progress=on_progress)
        return task.start(self.candidates(urls)).result()

    def probe_task(
        self,
        *,
        on_progress: TextCallback | None = None,
        on_complete: TextCallback | None = None,
    ) -> ProbeTask:
        """
        The one ProbeTask every run goes through, with the given callbacks.

        Probing is strictly sequential, so rebinding callbacks while a run is
        in flight is refused.
        """
        if self.task.running:
            raise RuntimeError("A probe run is already in progress")
        self.task.on_progress = on_progress
        self.task.on_complete = on_complete
        return self.task

    def manage_surface(self, surface: RenderingSurface, *, sampler: MemorySampler | None = None) -> ManagedSurface:
        managed = ManagedSurface(
            surface,
            dispatcher=self.dispatcher,
            sampler=sampler,
            settings=self.governor_settings,
        )
        self._surfaces.append(managed)
        return managed

    def close(self) -> None:
        self.task.shutdown()
        for managed in self._surfaces:
            managed.cleanup()
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> BeeProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
