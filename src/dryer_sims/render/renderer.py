# src/dryer_sims/render/renderer.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from matplotlib.patches import Arc, Circle

from dryer_sims.core.boundary import DrumBoundary
from dryer_sims.core.surfaces import surface_rgb
from dryer_sims.core.world import project_ball, project_vanes, screen_scale

if TYPE_CHECKING:
    from dryer_sims.core.recording import FrameSnapshot, SimulationRecording
    from dryer_sims.core.world import DryerWorld


@dataclass
class RendererConfig:
    canvas_px: int = 720
    dpi: int = 100
    background_color: str = "black"
    drum_linewidth: float = 3.0
    vane_linewidth: float = 4.0
    highlight_scale: float = 2.0   # linewidth multiplier for the surface just hit
    ball_color: str = "#d4f542"
    show_debug: bool = False


class DrumRenderer:
    """
    Draws the drum, its vanes and the ball in canvas pixel coordinates
    (origin top-left, y down), using the same projections the simulation
    exposes to display clients.
    """

    def __init__(self, config: RendererConfig | None = None):
        self.config = config or RendererConfig()
        self.fig = None
        self.ax = None
        self._hud_text = None

    def _init_figure(self) -> None:
        size_in = self.config.canvas_px / self.config.dpi
        fig, ax = plt.subplots(figsize=(size_in, size_in), dpi=self.config.dpi)
        fig.patch.set_facecolor(self.config.background_color)
        ax.set_position([0.0, 0.0, 1.0, 1.0])
        ax.set_facecolor(self.config.background_color)
        ax.set_axis_off()
        self.fig, self.ax = fig, ax
        self._hud_text = fig.text(0.02, 0.98, "", ha="left", va="top", size=9,
                                  color="white", family="monospace")

    # ------------------ drawing ------------------ #

    def render_world(self, world: DryerWorld, highlight: str | None = None) -> None:
        colors = {s.name: s.color for s in world.surfaces}
        self._draw(
            boundary=world.boundary,
            drum_angle=world.drum_angle,
            ball_pos=world.ball.pos,
            ball_radius=world.ball.radius,
            colors=colors,
            highlight=highlight,
        )
        if self.config.show_debug:
            info = world.debug_info
            self._hud_text.set_text(
                f"t={world.time:6.2f}s  |v|={info.total_velocity:5.2f}\n"
                f"cf={info.centrifugal_magnitude:5.2f} co={info.coriolis_magnitude:5.2f} "
                f"drag={info.drag_magnitude:5.3f}"
            )

    def render_snapshot(self, frame: FrameSnapshot, recording: SimulationRecording,
                        highlight: str | None = None) -> None:
        meta = recording.meta
        boundary = DrumBoundary(
            radius=meta["drum_radius"],
            vane_count=meta["vane_count"],
            vane_height=meta["vane_height"],
        )
        if highlight is None and frame.events:
            highlight = frame.events[-1].surface
        self._draw(
            boundary=boundary,
            drum_angle=frame.drum_angle,
            ball_pos=frame.ball.pos,
            ball_radius=meta["ball_radius"],
            colors=meta.get("surface_colors", {}),
            highlight=highlight,
        )
        if self.config.show_debug:
            self._hud_text.set_text(f"t={frame.t:6.2f}s  hits={len(frame.events)}")

    def _draw(self, *, boundary: DrumBoundary, drum_angle: float, ball_pos, ball_radius: float,
              colors: dict[str, int], highlight: str | None) -> None:
        if self.fig is None:
            self._init_figure()
        cfg = self.config
        ax = self.ax
        ax.clear()
        ax.set_axis_off()
        n = cfg.canvas_px
        ax.set_xlim(0, n)
        ax.set_ylim(n, 0)
        ax.set_aspect("equal")

        scale, center = screen_scale(boundary.radius, n)
        diameter = 2.0 * boundary.radius * scale
        seg_deg = 360.0 / boundary.vane_count
        rot_deg = float(np.degrees(drum_angle))
        for i in range(boundary.vane_count):
            name = f"drum_{i}"
            lw = cfg.drum_linewidth * (cfg.highlight_scale if name == highlight else 1.0)
            # y axis is flipped, so screen angles run clockwise
            start = -(rot_deg + (i + 1) * seg_deg)
            ax.add_patch(Arc((center, center), diameter, diameter, angle=0.0,
                             theta1=start, theta2=start + seg_deg,
                             color=surface_rgb(colors.get(name, 0x808080)), linewidth=lw))

        for vane in project_vanes(boundary, drum_angle, n):
            lead = f"vane_{vane.index}_lead"
            trail = f"vane_{vane.index}_trail"
            hit = highlight in (lead, trail)
            lw = cfg.vane_linewidth * (cfg.highlight_scale if hit else 1.0)
            ax.plot([vane.inner_x, vane.outer_x], [vane.inner_y, vane.outer_y],
                    color=surface_rgb(colors.get(lead, 0x808080)), linewidth=lw,
                    solid_capstyle="round")

        ball = project_ball(ball_pos, ball_radius, drum_angle, boundary.radius, n)
        ax.add_patch(Circle((ball.x, ball.y), ball.radius, facecolor=cfg.ball_color,
                            edgecolor="white", linewidth=0.5))

    def save_png(self, path: str | Path) -> Path:
        path = Path(path)
        self.fig.savefig(path, dpi=self.config.dpi, facecolor=self.fig.get_facecolor())
        return path

    def close(self) -> None:
        if self.fig is not None:
            plt.close(self.fig)
        self.fig = None
        self.ax = None


def use_headless_backend() -> None:
    """Switch matplotlib to a non-interactive backend for file output."""
    matplotlib.use("Agg")
