# src/dryer_sims/core/surfaces.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

# 0xRRGGBB
SURFACE_COLORS: tuple[int, ...] = (
    0xff6b6b, 0x4ecdc4, 0xffe66d, 0xa8e6cf,
    0xff8b94, 0xc7ceea, 0xffd3b6, 0xffaaa5,
    0xdcedc1, 0xa8d8ea, 0xffccf9, 0xb4f8c8,
)


class SurfaceKind(Enum):
    DRUM = "drum"
    VANE_LEADING = "vane_leading"
    VANE_TRAILING = "vane_trailing"

    @property
    def is_vane(self) -> bool:
        return self is not SurfaceKind.DRUM


SurfaceId = tuple[SurfaceKind, int]


@dataclass(frozen=True)
class Surface:
    """A collidable surface: one drum wall segment or one face of a vane."""
    kind: SurfaceKind
    index: int
    color: int  # 0xRRGGBB

    @property
    def id(self) -> SurfaceId:
        return (self.kind, self.index)

    @property
    def name(self) -> str:
        if self.kind is SurfaceKind.DRUM:
            return f"drum_{self.index}"
        side = "lead" if self.kind is SurfaceKind.VANE_LEADING else "trail"
        return f"vane_{self.index}_{side}"


def surface_color(index: int) -> int:
    return SURFACE_COLORS[index % len(SURFACE_COLORS)]


def surface_rgb(color: int) -> tuple[float, float, float]:
    return (((color >> 16) & 0xff) / 255, ((color >> 8) & 0xff) / 255, (color & 0xff) / 255)


def regenerate_surfaces(vane_count: int) -> list[Surface]:
    """
    Build the ordered surface catalog for a drum with `vane_count` vanes.

    For each vane index i the catalog holds the drum segment that starts at
    vane i, then the leading and trailing faces of vane i. Both faces of a
    vane share a color; the drum segment takes the palette entry before it.
    """
    surfaces: list[Surface] = []
    for i in range(vane_count):
        surfaces.append(Surface(SurfaceKind.DRUM, i, surface_color(2 * i)))
        surfaces.append(Surface(SurfaceKind.VANE_LEADING, i, surface_color(2 * i + 1)))
        surfaces.append(Surface(SurfaceKind.VANE_TRAILING, i, surface_color(2 * i + 1)))
    return surfaces


def find_surface(surfaces: Sequence[Surface], kind: SurfaceKind, index: int) -> Surface | None:
    for s in surfaces:
        if s.kind is kind and s.index == index:
            return s
    return None
