# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Memory sample and eviction tier models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class MemorySample:
    used_bytes: int
    max_bytes: int

    @property
    def ratio(self) -> float:
        if self.max_bytes <= 0:
            return 0.0
        return self.used_bytes / self.max_bytes


class CacheAction(str, Enum):
    CLEAR_CACHE_ONLY = "CLEAR_CACHE_ONLY"
    CLEAR_CACHE_AND_FORM_DATA = "CLEAR_CACHE_AND_FORM_DATA"
    CLEAR_ALL_AND_HISTORY = "CLEAR_ALL_AND_HISTORY"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    CacheAction.CLEAR_CACHE_ONLY: 1,
    CacheAction.CLEAR_CACHE_AND_FORM_DATA: 2,
    CacheAction.CLEAR_ALL_AND_HISTORY: 3,
}


class TriggerContext(str, Enum):
    NAVIGATION_START = "NAVIGATION_START"
    NAVIGATION_FINISH = "NAVIGATION_FINISH"
    LOW_MEMORY = "LOW_MEMORY"


@dataclass(frozen=True)
class EvictionTier:
    ratio: float
    action: CacheAction
    trigger: TriggerContext | None = None


class EvictionPolicy:
    """Tiers sorted by severity; thresholds must strictly increase with it."""

    def __init__(self, tiers: Iterable[EvictionTier]):
        ordered = sorted(tiers, key=lambda tier: tier.action.severity)
        for lower, higher in zip(ordered, ordered[1:]):
            if higher.ratio <= lower.ratio:
                raise ValueError(
                    f"Eviction thresholds must increase with severity: {higher.action.value} "
                    f"({higher.ratio}) <= {lower.action.value} ({lower.ratio})"
                )
        self.tiers: tuple[EvictionTier, ...] = tuple(ordered)

    @classmethod
    def default(cls, soft_ratio: float = 0.75, aggressive_ratio: float = 0.80) -> EvictionPolicy:
        return cls(
            [
                EvictionTier(soft_ratio, CacheAction.CLEAR_CACHE_ONLY, TriggerContext.NAVIGATION_START),
                EvictionTier(aggressive_ratio, CacheAction.CLEAR_CACHE_AND_FORM_DATA, TriggerContext.NAVIGATION_FINISH),
            ]
        )

    def select(self, ratio: float, trigger: TriggerContext | None = None) -> CacheAction | None:
        """Most severe tier bound to `trigger` (any tier when None) whose threshold `ratio` exceeds."""
        selected: CacheAction | None = None
        for tier in self.tiers:
            if trigger is not None and tier.trigger is not None and tier.trigger != trigger:
                continue
            if ratio > tier.ratio:
                selected = tier.action
        return selected
