# src/dryer_sims/core/__init__.py

from .config import DrumConfig, PhysicsToggles
from .world import DryerWorld, ScreenBall, ScreenVane, run_simulation
from .physics import step_physics, compute_acceleration, integrate, apply_linear_drag, ForceBreakdown, DebugInfo
from .shapes import Ball, BallPreset, TENNIS_BALL, BALLOON_BALL, BALL_PRESETS
from .boundary import DrumBoundary
from .dispatcher import CollisionDispatcher
from .surfaces import Surface, SurfaceKind, regenerate_surfaces, find_surface
from .recording import FrameSnapshot, EventSnapshot, SimulationRecording
from .events import BaseEvent, CollisionEvent

__all__ = [
    "DrumConfig",
    "PhysicsToggles",
    "DryerWorld",
    "ScreenBall",
    "ScreenVane",
    "run_simulation",
    "step_physics",
    "compute_acceleration",
    "integrate",
    "apply_linear_drag",
    "ForceBreakdown",
    "DebugInfo",
    "Ball",
    "BallPreset",
    "TENNIS_BALL",
    "BALLOON_BALL",
    "BALL_PRESETS",
    "DrumBoundary",
    "CollisionDispatcher",
    "Surface",
    "SurfaceKind",
    "regenerate_surfaces",
    "find_surface",
    "FrameSnapshot",
    "EventSnapshot",
    "SimulationRecording",
    "BaseEvent",
    "CollisionEvent",
]
