# scripts/main.py

from __future__ import annotations

from pathlib import Path
from dataclasses import asdict

from dryer_sims.core import DryerWorld, DrumConfig, run_simulation
from dryer_sims.audio.build_soundtrack import build_and_save_soundtrack, speed_stats
from dryer_sims.utils.cli import build_parser

PROJECT_ROOT = Path(__file__).parent.parent


def main():
    parser = build_parser()
    args = parser.parse_args()
    config = DrumConfig.from_args(args).clamped()

    # 1. Build the drum
    world = DryerWorld(config)

    # 2. Run simulation and record
    n_frames = int(args.duration * args.frame_rate)
    frame_dt = 1 / args.frame_rate
    recording = run_simulation(world, n_frames, frame_dt, substeps=args.substeps,
                               log_interval=args.frame_rate)
    stats = speed_stats(recording.iter_events())
    print(f"Simulation completed: {stats['count']} collisions, "
          f"impact speed {stats['min']:.2f}-{stats['max']:.2f} m/s")

    recording.meta["config"] = asdict(config)
    recording.meta["engine_version"] = "0.1.0"

    # 3. Output paths
    exp_dir = PROJECT_ROOT / args.outdir / args.exp_name
    exp_dir.mkdir(exist_ok=True, parents=True)
    recording.save(exp_dir / "recording.pkl.xz")

    wav_path = None
    if args.audio:
        wav_path = build_and_save_soundtrack(recording, exp_dir / "soundtrack.wav",
                                             sr=args.audio_sr, base_note=args.base_note)

    if args.video:
        from dryer_sims.render.renderer import DrumRenderer, RendererConfig, use_headless_backend
        from dryer_sims.render.video import render_video, mux_audio_into_video_ffmpeg

        use_headless_backend()
        renderer = DrumRenderer(RendererConfig(canvas_px=args.canvas_px, show_debug=args.show_debug))
        video_path = render_video(recording, output_path=exp_dir / "video_silent.mp4",
                                  fps=args.frame_rate, renderer=renderer)
        if wav_path is not None:
            mux_audio_into_video_ffmpeg(video_path, wav_path, exp_dir / "video.mp4")


if __name__ == "__main__":
    main()
