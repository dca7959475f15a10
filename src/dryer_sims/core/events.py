# src/dryer_sims/core/events.py

from __future__ import annotations
from dataclasses import dataclass
from abc import ABC

import numpy as np

from .surfaces import SurfaceKind


@dataclass(kw_only=True)
class BaseEvent(ABC):
    """Marker base class so you can type on 'list[BaseEvent]'."""
    t: float  # simulation time when this event occurred

    def to_payload_dict(self) -> dict:
        """Convert event-specific data to a serializable dict."""
        return {}


@dataclass(kw_only=True)
class CollisionEvent(BaseEvent):
    """
    A collision candidate produced by the boundary resolver.

    Identifies the struck surface by kind and index; the world resolves it
    against its current surface catalog before dispatching.
    """
    kind: SurfaceKind
    index: int
    speed: float            # |v . n| before reflection
    norm_vec: np.ndarray    # (2,) unit contact normal, pointing away from the surface

    def to_payload_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "index": self.index,
            "speed": self.speed,
            "norm_vec": self.norm_vec.tolist(),
        }
