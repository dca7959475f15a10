# src/dryer_sims/core/world.py

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Deque, List

import numpy as np

from .boundary import DrumBoundary
from .config import (
    AIR_DENSITY,
    EARTH_GRAVITY,
    MOON_GRAVITY,
    DrumConfig,
    PhysicsToggles,
    clamp_drum_size,
    clamp_rpm,
    clamp_vane_count,
    clamp_vane_height,
)
from .dispatcher import CollisionDispatcher, CollisionListener
from .events import CollisionEvent
from .physics import DebugInfo, step_physics
from .recording import EventSnapshot, SimulationRecording, make_event_snapshot, snapshot_world
from .shapes import Ball, BallPreset, BALLOON_BALL, TENNIS_BALL, get_preset
from .surfaces import Surface, find_surface, regenerate_surfaces

# Drum diameter plus a 10% margin fills the canvas.
SCREEN_FILL: float = 2.2
# Ball start offset from center, as a fraction of the drum radius.
RESET_OFFSET: float = 0.3


@dataclass(frozen=True)
class ScreenBall:
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class ScreenVane:
    inner_x: float
    inner_y: float
    outer_x: float
    outer_y: float
    index: int


class DryerWorld:
    """
    A single ball tumbling in a rotating drum with radial vanes.

    All state lives in the drum's rotating frame. Not thread-safe: setters
    and `step` must be called from one thread.
    """

    def __init__(self, config: DrumConfig | None = None, verbose: bool = True):
        self.verbose = verbose
        self.ball = Ball()
        self.gravity = EARTH_GRAVITY
        self.air_density = AIR_DENSITY
        self.toggles = PhysicsToggles()
        self.dispatcher = CollisionDispatcher()
        self.debug_info = DebugInfo()
        self.drum_angle = 0.0
        self.time = 0.0
        self.rpm = 0.0
        self.angular_velocity = 0.0
        self.boundary = DrumBoundary(radius=0.80, vane_count=5, vane_height=0.30)
        self.surfaces: List[Surface] = []
        self.moon_gravity_enabled = False
        self._dispatched: Deque[EventSnapshot] = deque(maxlen=4096)

        config = config or DrumConfig()
        self.set_parameters(config.rpm, config.drum_size_cm, config.vane_count, config.vane_height_percent)
        self.toggles = config.toggles
        self.ball.apply_preset(get_preset(config.ball))
        self.dispatcher.lint_trap_enabled = config.lint_trap
        self.moon_gravity_enabled = config.moon_gravity
        self.gravity = MOON_GRAVITY if config.moon_gravity else EARTH_GRAVITY
        self.reset()

    # ------------------ configuration ------------------ #

    @property
    def drum_radius(self) -> float:
        return self.boundary.radius

    @property
    def vane_count(self) -> int:
        return self.boundary.vane_count

    @property
    def vane_height(self) -> float:
        return self.boundary.vane_height

    @property
    def lint_trap_enabled(self) -> bool:
        return self.dispatcher.lint_trap_enabled

    def set_parameters(self, rpm: float, drum_size_cm: float, vane_count: int, vane_height_percent: float) -> None:
        """
        Set drum speed and geometry. Out-of-range values are clamped.
        Regenerates the surface catalog; after a vane count change any
        mapping keyed by surface id must be rebuilt.
        """
        vane_count = clamp_vane_count(vane_count)
        if vane_count != self.boundary.vane_count:
            # ids issued for the old catalog no longer name the same surfaces
            self.dispatcher.reset()

        self.rpm = clamp_rpm(rpm)
        self.angular_velocity = self.rpm * 2.0 * np.pi / 60.0
        self.boundary = DrumBoundary(
            radius=clamp_drum_size(drum_size_cm) / 100.0,
            vane_count=vane_count,
            vane_height=clamp_vane_height(vane_height_percent) / 100.0,
        )
        self.surfaces = regenerate_surfaces(vane_count)

    def set_ball_preset(self, preset: str | BallPreset) -> None:
        if isinstance(preset, str):
            preset = get_preset(preset)
        self.ball.apply_preset(preset)
        self._log(f"Ball preset: {preset.name}")

    def set_tennis_ball(self) -> None:
        self.set_ball_preset(TENNIS_BALL)

    def set_balloon_ball(self) -> None:
        self.set_ball_preset(BALLOON_BALL)

    def set_ball_properties(self, radius: float, mass: float, restitution: float, drag_coeff: float) -> None:
        self.ball.apply_preset(BallPreset(name="custom", radius=radius, mass=mass,
                                          restitution=restitution, drag_coeff=drag_coeff))

    def set_lint_trap(self, enabled: bool) -> None:
        self.dispatcher.lint_trap_enabled = bool(enabled)
        self._log(f"Lint trap: {_on_off(enabled)}")

    def set_moon_gravity(self, enabled: bool) -> None:
        self.moon_gravity_enabled = bool(enabled)
        self.gravity = MOON_GRAVITY if enabled else EARTH_GRAVITY
        self._log(f"Moon gravity: {_on_off(enabled)}")

    def toggle_coriolis(self, enable: bool) -> None:
        self.toggles = self.toggles.with_changes(coriolis=bool(enable))
        self._log(f"Coriolis: {_on_off(enable)}")

    def toggle_centrifugal(self, enable: bool) -> None:
        self.toggles = self.toggles.with_changes(centrifugal=bool(enable))
        self._log(f"Centrifugal: {_on_off(enable)}")

    def toggle_drag(self, enable: bool) -> None:
        self.toggles = self.toggles.with_changes(drag=bool(enable))
        self._log(f"Air drag: {_on_off(enable)}")

    def set_quadratic_drag(self, enable: bool) -> None:
        self.toggles = self.toggles.with_changes(quadratic_drag=bool(enable))
        self._log(f"Drag model: {'quadratic' if enable else 'linear'}")

    def set_coriolis_sign(self, sign: int) -> None:
        self.toggles = self.toggles.with_changes(coriolis_sign=sign)

    def on_collision(self, listener: CollisionListener) -> None:
        self.dispatcher.add_listener(listener)

    # ------------------ simulation ------------------ #

    def reset(self) -> None:
        """Ball back to its start offset at rest, drum angle back to zero."""
        self.ball.place((self.drum_radius * RESET_OFFSET, 0.0))
        self.drum_angle = 0.0
        self.dispatcher.reset()

    def step(self, dt: float) -> None:
        """Advance by dt seconds: integrate, resolve collisions, dispatch."""
        if not dt > 0:
            raise ValueError(f"dt must be > 0, got {dt}")
        for ev in step_physics(self, dt):
            self._dispatch(ev)

    def _dispatch(self, ev: CollisionEvent) -> None:
        surface = find_surface(self.surfaces, ev.kind, ev.index)
        if surface is None:
            return
        if self.dispatcher.consider_collision(surface, ev.speed):
            self._dispatched.append(make_event_snapshot(ev.t, surface, ev.speed, ev.to_payload_dict()))

    def drain_dispatched(self) -> list[EventSnapshot]:
        """Collisions dispatched since the last call, oldest first."""
        out = list(self._dispatched)
        self._dispatched.clear()
        return out

    # ------------------ render egress ------------------ #

    def ball_screen_position(self, canvas_size: int) -> ScreenBall:
        """Ball in canvas pixels (y down), with the drum's rotation applied."""
        return project_ball(self.ball.pos, self.ball.radius, self.drum_angle, self.drum_radius, canvas_size)

    def vane_screen_positions(self, canvas_size: int) -> list[ScreenVane]:
        return project_vanes(self.boundary, self.drum_angle, canvas_size)

    def _log(self, msg: str) -> None:
        if self.verbose:
            print(msg)


def _on_off(enabled: bool) -> str:
    return "ON" if enabled else "OFF"


def screen_scale(drum_radius: float, canvas_size: int) -> tuple[float, float]:
    """(pixels per meter, canvas center) for a square canvas."""
    return canvas_size / (drum_radius * SCREEN_FILL), canvas_size / 2.0


def project_ball(pos, radius: float, drum_angle: float, drum_radius: float, canvas_size: int) -> ScreenBall:
    scale, center = screen_scale(drum_radius, canvas_size)
    c, s = np.cos(drum_angle), np.sin(drum_angle)
    x, y = float(pos[0]), float(pos[1])
    screen_x = x * c - y * s
    screen_y = x * s + y * c
    return ScreenBall(
        x=float(center + screen_x * scale),
        y=float(center - screen_y * scale),
        radius=float(radius * scale),
    )


def project_vanes(boundary: DrumBoundary, drum_angle: float, canvas_size: int) -> list[ScreenVane]:
    scale, center = screen_scale(boundary.radius, canvas_size)
    inner = boundary.inner_radius
    outer = boundary.radius
    vanes = []
    for i in range(boundary.vane_count):
        angle = boundary.vane_angle(i) + drum_angle
        c, s = np.cos(angle), np.sin(angle)
        vanes.append(ScreenVane(
            inner_x=float(center + inner * c * scale),
            inner_y=float(center - inner * s * scale),
            outer_x=float(center + outer * c * scale),
            outer_y=float(center - outer * s * scale),
            index=i,
        ))
    return vanes


def run_simulation(
    world: DryerWorld,
    n_frames: int,
    frame_dt: float,
    substeps: int = 4,
    log_interval: int = 600,
    *,
    record_events: bool = True,
) -> SimulationRecording:
    """
    Step the world forward n_frames frames of `substeps` physics steps each
    and record one snapshot per frame.
    """
    recording = SimulationRecording()
    recording.meta = {
        "drum_radius": world.drum_radius,
        "vane_count": world.vane_count,
        "vane_height": world.vane_height,
        "rpm": world.rpm,
        "ball": world.ball.preset_name,
        "ball_radius": world.ball.radius,
        "surfaces": [s.name for s in world.surfaces],
        "surface_colors": {s.name: s.color for s in world.surfaces},
        "frame_dt": frame_dt,
        "substeps": substeps,
    }
    dt = frame_dt / substeps
    world.drain_dispatched()
    for frame in range(n_frames):
        for _ in range(substeps):
            world.step(dt)
        events = world.drain_dispatched()
        recording.add_frame(snapshot_world(world, events if record_events else []))
        if (frame + 1) % log_interval == 0:
            print(f"Simulated {world.time:.3f} seconds / {n_frames * frame_dt:.3f} seconds...")
            print(f"Collisions so far: {world.dispatcher.n_dispatched}")

    return recording
