# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Rendering surface collaborator.

The surface belongs to the host. beeprobe only sees it through the
`RenderingSurface` protocol, holds it through a non-owning `SurfaceHandle`,
and checks liveness before every call.
"""

from __future__ import annotations

import weakref
from typing import Protocol


class RenderingSurface(Protocol):
    @property
    def is_destroyed(self) -> bool: ...

    def clear_cache(self, include_disk_files: bool) -> None: ...

    def clear_form_data(self) -> None: ...

    def clear_history(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def destroy(self) -> None: ...


class SurfaceHandle:
    """Weak, liveness-checked reference to a RenderingSurface."""

    def __init__(self, surface: RenderingSurface):
        self._ref = weakref.ref(surface)
        self._released = False

    def get(self) -> RenderingSurface | None:
        """The surface when it is still usable, else None."""
        if self._released:
            return None
        surface = self._ref()
        if surface is None or surface.is_destroyed:
            return None
        return surface

    def is_alive(self) -> bool:
        return self.get() is not None

    def release(self) -> None:
        self._released = True


__all__ = ["RenderingSurface", "SurfaceHandle"]
