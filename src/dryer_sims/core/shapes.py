# src/dryer_sims/core/shapes.py

from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class BallPreset:
    """Physical constants of a ball type. Applied to a Ball all at once."""
    name: str
    radius: float       # m
    mass: float         # kg
    restitution: float  # 0-1
    drag_coeff: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Ball radius must be > 0, got {self.radius}")
        if self.mass <= 0:
            raise ValueError(f"Ball mass must be > 0, got {self.mass}")
        if not 0.0 <= self.restitution <= 1.0:
            raise ValueError(f"Restitution must be in [0, 1], got {self.restitution}")


TENNIS_BALL = BallPreset(name="tennis", radius=0.035, mass=0.058, restitution=0.75, drag_coeff=0.55)
BALLOON_BALL = BallPreset(name="balloon", radius=0.075, mass=0.001, restitution=0.10, drag_coeff=0.47)

BALL_PRESETS: dict[str, BallPreset] = {
    TENNIS_BALL.name: TENNIS_BALL,
    BALLOON_BALL.name: BALLOON_BALL,
}


def get_preset(name: str) -> BallPreset:
    try:
        return BALL_PRESETS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown ball preset {name!r}; choose from {sorted(BALL_PRESETS)}") from None


@dataclass
class Ball:
    """
    The simulated body.

    - pos / vel: position (m) and velocity (m/s) in the frame that rotates
      with the drum, origin at the drum center
    - radius, mass, restitution, drag_coeff: replaced together by apply_preset
    """
    pos: np.ndarray = field(default_factory=lambda: np.zeros(2))
    vel: np.ndarray = field(default_factory=lambda: np.zeros(2))
    radius: float = TENNIS_BALL.radius
    mass: float = TENNIS_BALL.mass
    restitution: float = TENNIS_BALL.restitution
    drag_coeff: float = TENNIS_BALL.drag_coeff
    preset_name: str = TENNIS_BALL.name

    def __post_init__(self):
        self.pos = np.array(self.pos, dtype=float)
        self.vel = np.array(self.vel, dtype=float)

    @property
    def area(self) -> float:
        return float(np.pi * self.radius ** 2)

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.vel))

    @property
    def distance_from_center(self) -> float:
        return float(np.linalg.norm(self.pos))

    def apply_preset(self, preset: BallPreset) -> None:
        self.radius = preset.radius
        self.mass = preset.mass
        self.restitution = preset.restitution
        self.drag_coeff = preset.drag_coeff
        self.preset_name = preset.name

    def place(self, pos, vel=(0.0, 0.0)) -> None:
        self.pos = np.array(pos, dtype=float)
        self.vel = np.array(vel, dtype=float)
