# src/dryer_sims/render/video.py

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import shutil
import subprocess

import matplotlib.pyplot as plt
from matplotlib.animation import FFMpegWriter

from .renderer import DrumRenderer, RendererConfig

if TYPE_CHECKING:
    from dryer_sims.core.recording import SimulationRecording, FrameSnapshot


def require_ffmpeg() -> str:
    path = shutil.which("ffmpeg")
    if path is None:
        raise RuntimeError(
            "ffmpeg not found. Install with: conda install -c conda-forge ffmpeg"
        )
    return path


def select_frames_for_fps(recording: SimulationRecording, fps: int) -> list[FrameSnapshot]:
    """
    Every frame whose time reaches the next 1/fps tick, with each recorded
    hit moved onto the nearest selected frame so skipped frames lose none.
    """
    target_dt = 1.0 / fps
    frames = recording.frames
    if not frames:
        return []

    selected: list[FrameSnapshot] = []
    next_t = frames[0].t
    for f in frames:
        if f.t + 1e-9 >= next_t:
            # copies, the recording itself keeps its per-frame events
            selected.append(replace(f, events=[]))
            next_t += target_dt

    j = 0
    for f in frames:
        for ev in f.events:
            while j + 1 < len(selected) and abs(selected[j + 1].t - ev.t) <= abs(selected[j].t - ev.t):
                j += 1
            selected[j].events.append(ev)
    return selected


def render_video(
    recording: SimulationRecording,
    *,
    output_path: str | Path,
    fps: int = 60,
    renderer: DrumRenderer | None = None,
    bitrate: int | None = None,
    log_interval: int = 1  # seconds
) -> Path:
    """
    Render a SimulationRecording to an MP4 using Matplotlib + ffmpeg.
    """
    require_ffmpeg()
    if renderer is None:
        renderer = DrumRenderer(RendererConfig())

    output_path = Path(output_path)
    writer = FFMpegWriter(fps=fps, metadata={"artist": "dryer_sims"}, bitrate=bitrate)

    renderer._init_figure()
    with writer.saving(renderer.fig, str(output_path), renderer.config.dpi):
        for idx, frame in enumerate(select_frames_for_fps(recording, fps)):
            renderer.render_snapshot(frame, recording)
            if (idx + 1) % (fps * log_interval) == 0:
                print(f"Rendered {(idx+1)/fps:.1f} seconds of video...")
            writer.grab_frame()
    plt.close(renderer.fig)
    renderer.fig = None
    return output_path


def mux_audio_into_video_ffmpeg(video_in: str | Path, audio_in: str | Path, video_out: str | Path) -> Path:
    """Copy the video stream and add the WAV as AAC audio."""
    ffmpeg = require_ffmpeg()
    video_out = Path(video_out)
    cmd = [
        ffmpeg, "-y",
        "-i", str(video_in),
        "-i", str(audio_in),
        "-c:v", "copy",
        "-c:a", "aac",
        "-shortest",
        str(video_out),
    ]
    subprocess.run(cmd, check=True)
    return video_out
