# src/dryer_sims/core/recording.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator
from pathlib import Path
import pickle
import lzma
import numpy as np
if TYPE_CHECKING:
    from .world import DryerWorld
    from .surfaces import Surface


@dataclass
class BallStateSnapshot:
    """Per-frame dynamic state of the ball, in the rotating frame."""
    pos: tuple[float, float]
    vel: tuple[float, float]


@dataclass
class EventSnapshot:
    t: float
    surface: str            # e.g. "drum_2", "vane_0_lead"
    kind: str               # SurfaceKind value
    index: int
    speed: float
    payload: dict[str, Any] = field(default_factory=dict)
    # payload carries whatever collision listeners attached, e.g. note numbers


@dataclass
class FrameSnapshot:
    t: float
    drum_angle: float
    ball: BallStateSnapshot
    events: list[EventSnapshot] = field(default_factory=list)


@dataclass
class SimulationRecording:
    """
    Frozen record of a full simulation run.

    `meta` holds config, ball preset, drum geometry, etc.
    """
    frames: list[FrameSnapshot] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def add_frame(self, frame: FrameSnapshot) -> None:
        self.frames.append(frame)

    @property
    def times(self) -> list[float]:
        return [f.t for f in self.frames]

    @property
    def t_end(self) -> float | None:
        """Time of the last frame, or None if no frames."""
        if not self.frames:
            return None
        return self.frames[-1].t

    @property
    def n_events(self) -> int:
        return sum(len(f.events) for f in self.frames)

    def iter_events(self) -> Iterator[EventSnapshot]:
        """Iterate over all EventSnapshots in time order."""
        for frame in self.frames:
            for ev in frame.events:
                yield ev

    def positions(self) -> np.ndarray:
        """Ball positions, shape (n_frames, 2)."""
        return np.array([f.ball.pos for f in self.frames], dtype=float).reshape(-1, 2)

    def save(self, path: str | Path) -> None:
        path = Path(path)
        with lzma.open(path, "wb") as f:
            pickle.dump(self, f, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, path: str | Path) -> "SimulationRecording":
        path = Path(path)
        with lzma.open(path, "rb") as f:
            rec = pickle.load(f)
        return rec


def make_event_snapshot(t: float, surface: Surface, speed: float, payload: dict | None = None) -> EventSnapshot:
    return EventSnapshot(
        t=t,
        surface=surface.name,
        kind=surface.kind.value,
        index=surface.index,
        speed=float(speed),
        payload={} if payload is None else dict(payload),
    )


def snapshot_world(world: DryerWorld, events: list[EventSnapshot]) -> FrameSnapshot:
    pos = np.asarray(world.ball.pos, dtype=float)
    vel = np.asarray(world.ball.vel, dtype=float)
    return FrameSnapshot(
        t=world.time,
        drum_angle=world.drum_angle,
        ball=BallStateSnapshot(
            pos=(float(pos[0]), float(pos[1])),
            vel=(float(vel[0]), float(vel[1])),
        ),
        events=list(events),
    )
