import argparse

from dryer_sims.core.shapes import BALL_PRESETS


def build_parser():
    parser = argparse.ArgumentParser(description='Tumble a ball in a vaned drum and record the hits')
    parser.add_argument('--exp_name', type=str, default='', metavar='N',
                        help='experiment name')
    parser.add_argument('--outdir', type=str, default='results', metavar='N',
                        help='directory to save the recording, soundtrack and video (default: results)')
    parser.add_argument('--rpm', type=float, default=20.0, metavar='N',
                        help='drum speed in revolutions per minute (default: 20)')
    parser.add_argument('--drum_size_cm', type=float, default=80.0, metavar='N',
                        help='drum radius in cm (default: 80)')
    parser.add_argument('--vane_count', type=int, default=5, metavar='N',
                        help='number of vanes (default: 5)')
    parser.add_argument('--vane_height_percent', type=float, default=30.0, metavar='N',
                        help='vane height as a percent of the drum radius (default: 30)')
    parser.add_argument('--ball', type=str, default='tennis', choices=sorted(BALL_PRESETS),
                        help='ball preset (default: tennis)')
    parser.add_argument('--lint_trap', action='store_true',
                        help='drop collisions slower than the lint trap threshold')
    parser.add_argument('--moon_gravity', action='store_true',
                        help='use lunar instead of earth gravity')
    parser.add_argument('--no_coriolis', dest='coriolis', action='store_false',
                        help='disable the Coriolis term')
    parser.add_argument('--no_centrifugal', dest='centrifugal', action='store_false',
                        help='disable the centrifugal term')
    parser.add_argument('--no_drag', dest='drag', action='store_false',
                        help='disable air drag')
    parser.add_argument('--quadratic_drag', action='store_true',
                        help='use quadratic instead of linear drag')
    parser.add_argument('--coriolis_sign', type=int, default=1, choices=[1, -1],
                        help='sign multiplier applied to the Coriolis term (default: 1)')
    parser.add_argument('--frame_rate', type=int, default=60, metavar='N',
                        help='frames per simulated second (default: 60)')
    parser.add_argument('--substeps', type=int, default=4, metavar='N',
                        help='physics steps per frame (default: 4)')
    parser.add_argument('--duration', type=float, default=10.0, metavar='N',
                        help='duration of the simulation in seconds (default: 10.0)')
    parser.add_argument('--base_note', type=int, default=36, metavar='N',
                        help='MIDI note of the first surface (default: 36)')
    parser.add_argument(
        "--audio",
        action='store_true',
        help="write a percussion soundtrack (WAV) of the collisions",
    )
    parser.add_argument(
        "--audio-sr",
        type=int,
        default=44100,
        help="Audio sample rate for soundtrack.",
    )
    parser.add_argument(
        "--video",
        action='store_true',
        help="render an MP4 of the run (requires ffmpeg)",
    )
    parser.add_argument(
        "--canvas_px",
        type=int,
        default=720,
        help="width and height of the rendered video in pixels",
    )
    parser.add_argument(
        "--show_debug",
        action='store_true',
        help="whether to show debug information overlay in the rendered video"
    )
    return parser

'''
usage: python scripts/main.py --exp_name tumble --rpm 30 --vane_count 6 \
    --vane_height_percent 25 --ball balloon --moon_gravity --duration 20 --audio --video
'''
