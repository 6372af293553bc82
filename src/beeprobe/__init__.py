# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
beeprobe package entrypoint.

Two supporting subsystems for a web-app shell: a connectivity diagnostic
engine that probes scheme/port variants of the backend host and reports what
works, and a cache governor that evicts the rendering surface's cached state
under memory pressure. HTTP behavior is abstracted behind an injectable
client interface, and domain objects are modeled with typed dataclasses.
"""

from .cache import CacheGovernor, FixedMemorySampler, ManagedSurface, ProcessMemorySampler, SurfaceHandle
from .config import GovernorSettings, ProbeSettings, load_governor_settings, load_probe_settings
from .dispatch import InlineDispatcher, QueueDispatcher
from .errors import DiagnosticCategory, classify
from .http import HttpClient, HttpRequest, HttpResponse, HttpxClient, StubHttpClient, create_default_http_client
from .log import setup_logging
from .models import CacheAction, CandidateEndpoint, MemorySample, ProbeSession, TriggerContext
from .probe import ProbeRunner, ProbeTask, build_candidates, format_session
from .runtime import BeeProbe
from .version import __version__

__all__ = [
    "BeeProbe",
    "CacheAction",
    "CacheGovernor",
    "CandidateEndpoint",
    "DiagnosticCategory",
    "FixedMemorySampler",
    "GovernorSettings",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "InlineDispatcher",
    "ManagedSurface",
    "MemorySample",
    "ProbeRunner",
    "ProbeSession",
    "ProbeSettings",
    "ProbeTask",
    "ProcessMemorySampler",
    "QueueDispatcher",
    "StubHttpClient",
    "SurfaceHandle",
    "TriggerContext",
    "build_candidates",
    "classify",
    "create_default_http_client",
    "format_session",
    "load_governor_settings",
    "load_probe_settings",
    "setup_logging",
    "__version__",
]
