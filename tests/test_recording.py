"""
Recording and rendering of simulation runs.
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from dryer_sims.core import DryerWorld, SimulationRecording, run_simulation
from dryer_sims.core.recording import BallStateSnapshot, EventSnapshot, FrameSnapshot
from dryer_sims.render.renderer import DrumRenderer, RendererConfig
from dryer_sims.render.video import select_frames_for_fps


@pytest.fixture(scope="module")
def recording():
    world = DryerWorld(verbose=False)
    return run_simulation(world, n_frames=90, frame_dt=1 / 60, substeps=4)


class TestRecording:

    def test_save_and_load(self, recording, tmp_path):
        path = tmp_path / "run.pkl.xz"
        recording.save(path)
        loaded = SimulationRecording.load(path)
        assert len(loaded.frames) == len(recording.frames)
        assert loaded.meta["vane_count"] == 5
        np.testing.assert_allclose(loaded.positions(), recording.positions())

    def test_positions_stay_inside(self, recording):
        radius = recording.meta["drum_radius"]
        ball_r = recording.meta["ball_radius"]
        dists = np.linalg.norm(recording.positions(), axis=1)
        assert np.all(dists + ball_r <= radius + 2e-3)

    def test_events_are_time_ordered(self, recording):
        times = [ev.t for ev in recording.iter_events()]
        assert times == sorted(times)
        assert all(ev.surface in recording.meta["surfaces"] for ev in recording.iter_events())

    def test_no_event_recording(self):
        world = DryerWorld(verbose=False)
        rec = run_simulation(world, n_frames=60, frame_dt=1 / 60, record_events=False)
        assert rec.n_events == 0

    def test_select_frames_for_fps(self, recording):
        assert len(select_frames_for_fps(recording, 30)) == 45
        assert select_frames_for_fps(SimulationRecording(), 30) == []

    def test_select_frames_keeps_hits_from_skipped_frames(self, recording):
        selected = select_frames_for_fps(recording, 20)
        assert len(selected) == 30
        assert sum(len(f.events) for f in selected) == recording.n_events
        times = np.array([f.t for f in selected])
        for f in selected:
            for ev in f.events:
                assert abs(ev.t - f.t) == pytest.approx(np.min(np.abs(times - ev.t)), abs=1e-12)

    def test_select_frames_leaves_recording_untouched(self):
        ball = BallStateSnapshot(pos=(0.0, 0.0), vel=(0.0, 0.0))
        hit = EventSnapshot(t=0.01, surface="drum_0", kind="drum", index=0, speed=1.0)
        rec = SimulationRecording()
        for i in range(4):
            rec.add_frame(FrameSnapshot(t=i / 60, drum_angle=0.0, ball=ball, events=[hit] if i == 1 else []))
        selected = select_frames_for_fps(rec, 30)
        assert [f.t for f in selected] == [0.0, 2 / 60]
        assert [len(f.events) for f in selected] == [1, 0]
        assert rec.frames[1].events == [hit]
        assert rec.frames[0].events == []


class TestRenderer:

    def test_render_world_png(self, tmp_path):
        world = DryerWorld(verbose=False)
        for _ in range(30):
            world.step(1 / 240)
        renderer = DrumRenderer(RendererConfig(canvas_px=200, show_debug=True))
        renderer.render_world(world, highlight="drum_0")
        path = renderer.save_png(tmp_path / "frame.png")
        renderer.close()
        assert path.exists() and path.stat().st_size > 0

    def test_render_snapshot_draws_vanes_and_ball(self, recording):
        renderer = DrumRenderer(RendererConfig(canvas_px=200))
        renderer.render_snapshot(recording.frames[-1], recording)
        assert len(renderer.ax.lines) == recording.meta["vane_count"]
        # one arc per drum segment plus the ball
        assert len(renderer.ax.patches) == recording.meta["vane_count"] + 1
        renderer.close()
