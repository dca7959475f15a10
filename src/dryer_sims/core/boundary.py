# src/dryer_sims/core/boundary.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List

import numpy as np

from .shapes import Ball
from .events import CollisionEvent
from .surfaces import SurfaceKind

# Below this, a distance is treated as zero and its normal is undefined.
DIST_EPS: float = 1e-9


@dataclass
class DrumBoundary:
    """
    Circular drum wall with `vane_count` radial vanes, in the rotating frame.

    Vane i lies on the ray at angle 2*pi*i/vane_count and runs from the
    inner radius `radius * (1 - vane_height)` out to the wall. Vanes do not
    move in this frame.
    """
    radius: float           # m
    vane_count: int
    vane_height: float      # fraction of radius, 0 < h < 1

    @property
    def inner_radius(self) -> float:
        return self.radius * (1.0 - self.vane_height)

    @property
    def angle_per_segment(self) -> float:
        return 2.0 * np.pi / self.vane_count

    def vane_angle(self, i: int) -> float:
        return (i / self.vane_count) * 2.0 * np.pi

    def vane_endpoints(self, i: int) -> tuple[np.ndarray, np.ndarray]:
        """(inner, outer) endpoints of vane i."""
        a = self.vane_angle(i)
        direction = np.array([np.cos(a), np.sin(a)])
        return self.inner_radius * direction, self.radius * direction

    def segment_index(self, pos: np.ndarray) -> int:
        """Index of the drum wall segment facing the angular position of `pos`."""
        angle = float(np.arctan2(pos[1], pos[0]))
        if angle < 0.0:
            angle += 2.0 * np.pi
        return int(np.floor(angle / self.angle_per_segment)) % self.vane_count

    def contains(self, pos: np.ndarray, radius: float = 0.0, tol: float = 1e-9) -> bool:
        """True if a circle of `radius` at `pos` fits inside the drum wall."""
        return float(np.linalg.norm(pos)) + radius <= self.radius + tol

    def resolve_collision(self, ball: Ball, t: float) -> List[CollisionEvent]:
        """
        Push the ball out of the wall and every vane it overlaps, reflecting
        its velocity where it was moving into the surface. Returns one
        candidate per surface struck.
        """
        events: List[CollisionEvent] = []
        wall_event = self.resolve_wall(ball, t)
        if wall_event is not None:
            events.append(wall_event)
        events.extend(self.resolve_vanes(ball, t))
        return events

    def resolve_wall(self, ball: Ball, t: float = 0.0) -> CollisionEvent | None:
        dist = float(np.linalg.norm(ball.pos))
        if self.contains(ball.pos, ball.radius, tol=0.0) or dist < DIST_EPS:
            return None

        penetration = dist + ball.radius - self.radius
        n = -ball.pos / dist  # points toward center
        ball.pos += n * penetration

        vn = float(np.dot(ball.vel, n))
        if vn >= 0.0:
            return None

        # segment is taken from the corrected position, before reflection
        segment = self.segment_index(ball.pos)
        _reflect(ball, n, vn)
        return CollisionEvent(
            t=t,
            kind=SurfaceKind.DRUM,
            index=segment,
            speed=abs(vn),
            norm_vec=n,
        )

    def resolve_vanes(self, ball: Ball, t: float = 0.0) -> List[CollisionEvent]:
        events: List[CollisionEvent] = []
        for i in range(self.vane_count):
            ev = self._resolve_vane(ball, i, t)
            if ev is not None:
                events.append(ev)
        return events

    def _resolve_vane(self, ball: Ball, i: int, t: float) -> CollisionEvent | None:
        start, end = self.vane_endpoints(i)
        seg = end - start
        length = float(np.linalg.norm(seg))
        if length < DIST_EPS:
            return None

        rel = ball.pos - start
        s = float(np.dot(rel, seg)) / (length * length)
        if s < 0.0 or s > 1.0:
            return None

        closest = start + s * seg
        offset = ball.pos - closest
        dist = float(np.linalg.norm(offset))
        if dist >= ball.radius or dist < DIST_EPS:
            return None

        penetration = ball.radius - dist
        n = offset / dist
        ball.pos += n * penetration

        vn = float(np.dot(ball.vel, n))
        if vn >= 0.0:
            return None

        _reflect(ball, n, vn)
        perp = np.array([-seg[1], seg[0]]) / length
        kind = SurfaceKind.VANE_LEADING if float(np.dot(rel, perp)) > 0.0 else SurfaceKind.VANE_TRAILING
        return CollisionEvent(
            t=t,
            kind=kind,
            index=i,
            speed=abs(vn),
            norm_vec=n,
        )


def _reflect(ball: Ball, n: np.ndarray, vn: float) -> None:
    ball.vel -= (1.0 + ball.restitution) * vn * n
