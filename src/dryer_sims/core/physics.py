# src/dryer_sims/core/physics.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

import numpy as np

from .config import AIR_DENSITY, LINEAR_DRAG_K, PhysicsToggles
from .shapes import Ball
from .events import CollisionEvent
if TYPE_CHECKING:
    from .world import DryerWorld

CENTRIFUGAL_MIN_DIST: float = 1e-4  # m
DRAG_MIN_SPEED: float = 1e-3        # m/s


@dataclass
class ForceBreakdown:
    """Per-term accelerations (m/s^2) in the rotating frame."""
    gravity: np.ndarray = field(default_factory=lambda: np.zeros(2))
    centrifugal: np.ndarray = field(default_factory=lambda: np.zeros(2))
    coriolis: np.ndarray = field(default_factory=lambda: np.zeros(2))
    drag: np.ndarray = field(default_factory=lambda: np.zeros(2))

    @property
    def total(self) -> np.ndarray:
        return self.gravity + self.centrifugal + self.coriolis + self.drag


@dataclass
class DebugInfo:
    centrifugal_magnitude: float = 0.0
    coriolis_magnitude: float = 0.0
    drag_magnitude: float = 0.0
    total_velocity: float = 0.0


def gravity_in_drum_frame(gravity: float, angle: float) -> np.ndarray:
    """World-frame gravity (straight down) seen from a drum rotated by `angle`."""
    return gravity * np.array([-np.sin(angle), -np.cos(angle)])


def compute_acceleration(
    ball: Ball,
    angular_velocity: float,
    angle: float,
    gravity: float,
    toggles: PhysicsToggles,
    air_density: float = AIR_DENSITY,
) -> ForceBreakdown:
    """
    Acceleration on the ball in the drum's rotating frame. Does not mutate
    the ball.

    Linear drag is not part of the result: it acts directly on velocity,
    see `apply_linear_drag`.
    """
    forces = ForceBreakdown(gravity=gravity_in_drum_frame(gravity, angle))
    w = angular_velocity

    if toggles.centrifugal:
        dist = ball.distance_from_center
        if dist > CENTRIFUGAL_MIN_DIST:
            forces.centrifugal = (ball.pos / dist) * (w * w * dist)

    if toggles.coriolis:
        vx, vy = ball.vel
        forces.coriolis = toggles.coriolis_sign * np.array([2.0 * w * vy, -2.0 * w * vx])

    if toggles.drag and toggles.quadratic_drag:
        speed = ball.speed
        if speed > DRAG_MIN_SPEED:
            force_mag = 0.5 * air_density * speed * speed * ball.drag_coeff * ball.area
            forces.drag = -(ball.vel / speed) * (force_mag / ball.mass)

    return forces


def apply_linear_drag(ball: Ball, dt: float, toggles: PhysicsToggles, k: float = LINEAR_DRAG_K) -> float:
    """
    Exponential velocity decay v *= exp(-k dt) for the linear drag model.
    Returns the drag magnitude for diagnostics (0 when not applied).
    """
    if not toggles.drag or toggles.quadratic_drag:
        return 0.0
    speed = ball.speed
    if speed <= DRAG_MIN_SPEED:
        return 0.0
    ball.vel *= np.exp(-k * dt)
    return k * speed


def integrate(ball: Ball, acc: np.ndarray, dt: float) -> None:
    """Semi-implicit Euler: velocity first, then position with the new velocity."""
    ball.vel += acc * dt
    ball.pos += ball.vel * dt


def step_physics(world: DryerWorld, dt: float) -> List[CollisionEvent]:
    """
    Advance physics by dt seconds and return collision candidates.
    """
    ball = world.ball
    toggles = world.toggles

    world.drum_angle += world.angular_velocity * dt

    forces = compute_acceleration(
        ball,
        angular_velocity=world.angular_velocity,
        angle=world.drum_angle,
        gravity=world.gravity,
        toggles=toggles,
        air_density=world.air_density,
    )
    linear_drag = apply_linear_drag(ball, dt, toggles)

    integrate(ball, forces.total, dt)
    _update_debug_info(world.debug_info, forces, linear_drag, toggles, ball)

    events = world.boundary.resolve_collision(ball, world.time + dt)

    world.time += dt
    return events


def _update_debug_info(info: DebugInfo, forces: ForceBreakdown, linear_drag: float,
                       toggles: PhysicsToggles, ball: Ball) -> None:
    # magnitudes keep their last value while a term is inactive
    if toggles.centrifugal and np.any(forces.centrifugal):
        info.centrifugal_magnitude = float(np.linalg.norm(forces.centrifugal))
    if toggles.coriolis:
        info.coriolis_magnitude = float(np.linalg.norm(forces.coriolis))
    if toggles.drag:
        if toggles.quadratic_drag and np.any(forces.drag):
            info.drag_magnitude = float(np.linalg.norm(forces.drag))
        elif linear_drag > 0.0:
            info.drag_magnitude = linear_drag
    info.total_velocity = ball.speed
