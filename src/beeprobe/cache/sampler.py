# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Point-in-time memory utilization readings."""

from __future__ import annotations

from typing import Protocol

import psutil

from ..models import MemorySample


class MemorySampler(Protocol):
    def sample(self) -> MemorySample: ...


class ProcessMemorySampler:
    """
    Resident set size of this process against a ceiling.

    The ceiling is `max_bytes` when given, else total physical memory. Every
    call reads fresh values.
    """

    def __init__(self, max_bytes: int | None = None, process: psutil.Process | None = None):
        self.max_bytes = max_bytes
        self._process = process or psutil.Process()

    def sample(self) -> MemorySample:
        used = self._process.memory_info().rss
        ceiling = self.max_bytes if self.max_bytes else psutil.virtual_memory().total
        return MemorySample(used_bytes=int(used), max_bytes=int(ceiling))


class FixedMemorySampler:
    """Reports caller-supplied figures; the host updates them as it learns more."""

    def __init__(self, used_bytes: int, max_bytes: int):
        self.used_bytes = used_bytes
        self.max_bytes = max_bytes

    def sample(self) -> MemorySample:
        return MemorySample(used_bytes=self.used_bytes, max_bytes=self.max_bytes)


__all__ = ["FixedMemorySampler", "MemorySampler", "ProcessMemorySampler"]
