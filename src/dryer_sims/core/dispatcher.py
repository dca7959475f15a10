# src/dryer_sims/core/dispatcher.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List

from .config import LINT_TRAP_THRESHOLD
from .surfaces import Surface, SurfaceId

# Listener signature: (surface, impact speed in m/s)
CollisionListener = Callable[[Surface, float], None]


@dataclass
class CollisionDispatcher:
    """
    Filters collision candidates and fans them out to listeners.

    - lint trap: drop candidates slower than `lint_trap_threshold` while enabled
    - debounce: drop a candidate on the same surface as the last dispatched one
    - listeners run synchronously, in registration order
    """
    lint_trap_enabled: bool = False
    lint_trap_threshold: float = LINT_TRAP_THRESHOLD
    last_surface_id: SurfaceId | None = None
    listeners: List[CollisionListener] = field(default_factory=list)
    n_dispatched: int = 0

    def add_listener(self, listener: CollisionListener) -> None:
        self.listeners.append(listener)

    def consider_collision(self, surface: Surface, speed: float) -> bool:
        """Returns True if the collision reached the listeners."""
        if self.lint_trap_enabled and speed < self.lint_trap_threshold:
            return False
        if surface.id == self.last_surface_id:
            return False

        self.last_surface_id = surface.id
        self.n_dispatched += 1
        for listener in self.listeners:
            listener(surface, speed)
        return True

    def reset(self) -> None:
        self.last_surface_id = None
