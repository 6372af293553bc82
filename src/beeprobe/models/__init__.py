# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for beeprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .memory import CacheAction, EvictionPolicy, EvictionTier, MemorySample, TriggerContext
from .probe import (
    CandidateEndpoint,
    ProbeFailure,
    ProbeOutcome,
    ProbeRecord,
    ProbeSession,
    ProbeSuccess,
    truncate_preview,
)

__all__ = [
    "CacheAction",
    "CandidateEndpoint",
    "EvictionPolicy",
    "EvictionTier",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "MemorySample",
    "ProbeFailure",
    "ProbeOutcome",
    "ProbeRecord",
    "ProbeSession",
    "ProbeSuccess",
    "TriggerContext",
    "truncate_preview",
]
