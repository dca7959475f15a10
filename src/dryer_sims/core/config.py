# src/dryer_sims/core/config.py

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace

# Physical constants (SI units)
EARTH_GRAVITY: float = 9.81    # m/s^2
MOON_GRAVITY: float = 1.635    # m/s^2
AIR_DENSITY: float = 1.225     # kg/m^3
LINEAR_DRAG_K: float = 0.1     # 1/s, exponential velocity decay rate

# Event filtering
LINT_TRAP_THRESHOLD: float = 0.15  # m/s

# Limits enforced at the configuration boundary
MIN_DRUM_SIZE_CM: float = 40.0
MAX_DRUM_SIZE_CM: float = 120.0
MIN_VANE_HEIGHT_PERCENT: float = 1.0
MAX_VANE_HEIGHT_PERCENT: float = 99.0
MAX_VANE_COUNT: int = 12


@dataclass(frozen=True)
class PhysicsToggles:
    """
    Per-step switches for the force model.

    A new value replaces the old one whenever a toggle changes, so a single
    step always sees a consistent set.
    """
    coriolis: bool = True
    centrifugal: bool = True
    drag: bool = True
    quadratic_drag: bool = False
    coriolis_sign: int = 1

    def __post_init__(self):
        if self.coriolis_sign not in (1, -1):
            raise ValueError(f"coriolis_sign must be +1 or -1, got {self.coriolis_sign!r}")

    def with_changes(self, **changes) -> "PhysicsToggles":
        return replace(self, **changes)


@dataclass
class DrumConfig:
    rpm: float = 20.0
    drum_size_cm: float = 80.0          # drum radius in cm
    vane_count: int = 5
    vane_height_percent: float = 30.0   # percent of drum radius
    ball: str = "tennis"
    lint_trap: bool = False
    moon_gravity: bool = False
    toggles: PhysicsToggles = field(default_factory=PhysicsToggles)

    @classmethod
    def from_args(cls, args) -> "DrumConfig":
        kwargs = {}
        for f in fields(cls):
            name = f.name
            if hasattr(args, name):
                kwargs[name] = getattr(args, name)
        toggle_kwargs = {}
        for f in fields(PhysicsToggles):
            if hasattr(args, f.name):
                toggle_kwargs[f.name] = getattr(args, f.name)
        kwargs["toggles"] = PhysicsToggles(**toggle_kwargs)
        return cls(**kwargs)

    def clamped(self) -> "DrumConfig":
        """Return a copy with every parameter pulled into its valid range."""
        return replace(
            self,
            rpm=clamp_rpm(self.rpm),
            drum_size_cm=clamp_drum_size(self.drum_size_cm),
            vane_count=clamp_vane_count(self.vane_count),
            vane_height_percent=clamp_vane_height(self.vane_height_percent),
        )


def clamp_rpm(rpm: float) -> float:
    return max(0.0, float(rpm))


def clamp_drum_size(drum_size_cm: float) -> float:
    return min(max(float(drum_size_cm), MIN_DRUM_SIZE_CM), MAX_DRUM_SIZE_CM)


def clamp_vane_count(vane_count: int) -> int:
    return min(max(int(vane_count), 1), MAX_VANE_COUNT)


def clamp_vane_height(vane_height_percent: float) -> float:
    return min(max(float(vane_height_percent), MIN_VANE_HEIGHT_PERCENT), MAX_VANE_HEIGHT_PERCENT)
