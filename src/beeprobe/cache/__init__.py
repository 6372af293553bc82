# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Adaptive cache governor for the rendering surface."""

from .governor import CacheGovernor
from .lifecycle import ManagedSurface
from .sampler import FixedMemorySampler, MemorySampler, ProcessMemorySampler
from .surface import RenderingSurface, SurfaceHandle

__all__ = [
    "CacheGovernor",
    "FixedMemorySampler",
    "ManagedSurface",
    "MemorySampler",
    "ProcessMemorySampler",
    "RenderingSurface",
    "SurfaceHandle",
]
