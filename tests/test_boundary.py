"""
Collision detection and resolution against the drum wall and vanes.
"""

import math
import numpy as np
import pytest

from dryer_sims.core.boundary import DrumBoundary
from dryer_sims.core.shapes import Ball, BallPreset, TENNIS_BALL
from dryer_sims.core.surfaces import SurfaceKind


def make_boundary(vane_count=5) -> DrumBoundary:
    return DrumBoundary(radius=0.8, vane_count=vane_count, vane_height=0.3)


def at_angle(r: float, deg: float) -> np.ndarray:
    a = math.radians(deg)
    return np.array([r * math.cos(a), r * math.sin(a)])


class TestWall:

    def test_no_collision_inside(self):
        ball = Ball(pos=(0.2, -0.1), vel=(1.0, 1.0))
        assert make_boundary().resolve_collision(ball, t=0.0) == []

    def test_push_back_inside_and_reflect(self):
        boundary = make_boundary()
        # middle of segment 0, between vanes at 0 and 72 degrees
        ball = Ball(pos=at_angle(0.79, 36.0), vel=at_angle(2.0, 36.0))
        ev = boundary.resolve_wall(ball)
        assert ev is not None
        assert ev.kind is SurfaceKind.DRUM
        assert ev.index == 0
        assert ev.speed == pytest.approx(2.0)
        assert np.linalg.norm(ball.pos) + ball.radius <= boundary.radius + 1e-9
        # outgoing normal speed is restitution * incoming
        np.testing.assert_allclose(ball.vel, at_angle(-2.0 * TENNIS_BALL.restitution, 36.0), atol=1e-12)

    def test_reported_speed_not_below_outgoing_normal_speed(self):
        boundary = make_boundary()
        ball = Ball(pos=at_angle(0.79, 36.0), vel=np.array([1.5, 0.7]))
        n_out = at_angle(1.0, 36.0)
        incoming = float(np.dot(ball.vel, n_out))
        ev = boundary.resolve_wall(ball)
        outgoing = -float(np.dot(ball.vel, n_out))
        assert ev.speed == pytest.approx(incoming)
        assert outgoing <= ev.speed

    def test_moving_away_corrects_position_without_event(self):
        boundary = make_boundary()
        ball = Ball(pos=at_angle(0.79, 36.0), vel=at_angle(-1.0, 36.0))
        assert boundary.resolve_wall(ball) is None
        assert boundary.contains(ball.pos, ball.radius)

    @pytest.mark.parametrize("deg, expected", [(100.0, 1), (350.0, 3), (-10.0, 3), (181.0, 2)])
    def test_segment_index(self, deg, expected):
        boundary = make_boundary(vane_count=4)
        ball = Ball(pos=at_angle(0.79, deg), vel=at_angle(1.0, deg))
        ev = boundary.resolve_wall(ball)
        assert ev.index == expected

    def test_degenerate_center_is_skipped(self):
        boundary = DrumBoundary(radius=0.01, vane_count=3, vane_height=0.3)
        ball = Ball(pos=(0.0, 0.0), vel=(1.0, 0.0))
        assert boundary.resolve_wall(ball) is None
        assert np.all(np.isfinite(ball.pos)) and np.all(np.isfinite(ball.vel))


class TestVanes:

    def test_leading_face(self):
        # vane 0 lies on +x from 0.56 m to 0.8 m; ball above it moving down
        boundary = make_boundary()
        ball = Ball(pos=(0.7, 0.02), vel=(0.0, -1.0))
        events = boundary.resolve_vanes(ball)
        assert len(events) == 1
        ev = events[0]
        assert ev.kind is SurfaceKind.VANE_LEADING
        assert ev.index == 0
        assert ev.speed == pytest.approx(1.0)
        assert ball.pos[1] == pytest.approx(ball.radius)
        assert ball.vel[1] == pytest.approx(TENNIS_BALL.restitution)

    def test_trailing_face(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.7, -0.02), vel=(0.0, 1.0))
        events = boundary.resolve_vanes(ball)
        assert [e.kind for e in events] == [SurfaceKind.VANE_TRAILING]

    def test_rotated_vane(self):
        boundary = make_boundary()
        # vane 1 at 72 degrees; approach it from the side of increasing angle
        radial = at_angle(1.0, 72.0)
        tangent = at_angle(1.0, 162.0)
        ball = Ball(pos=0.7 * radial + 0.02 * tangent, vel=-1.0 * tangent)
        events = boundary.resolve_vanes(ball)
        assert len(events) == 1
        assert events[0].index == 1
        assert events[0].kind is SurfaceKind.VANE_LEADING

    def test_beyond_inner_end_is_ignored(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.5, 0.01), vel=(0.0, -1.0))
        assert boundary.resolve_vanes(ball) == []

    def test_separating_contact_has_no_event(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.7, 0.02), vel=(0.0, 1.0))
        assert boundary.resolve_vanes(ball) == []
        assert ball.pos[1] == pytest.approx(ball.radius)

    def test_ball_on_vane_line_is_skipped(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.7, 0.0), vel=(0.0, -1.0))
        assert boundary.resolve_vanes(ball) == []
        assert np.all(np.isfinite(ball.vel))

    def test_inelastic_ball_stops_normal_motion(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.7, 0.02), vel=(0.5, -1.0))
        ball.apply_preset(BallPreset("clay", radius=0.035, mass=0.1, restitution=0.0, drag_coeff=0.5))
        boundary.resolve_vanes(ball)
        np.testing.assert_allclose(ball.vel, [0.5, 0.0], atol=1e-12)


class TestGeometry:

    def test_vane_endpoints(self):
        boundary = make_boundary(vane_count=4)
        inner, outer = boundary.vane_endpoints(1)
        np.testing.assert_allclose(inner, [0.0, 0.56], atol=1e-12)
        np.testing.assert_allclose(outer, [0.0, 0.8], atol=1e-12)

    def test_contains(self):
        boundary = make_boundary()
        assert boundary.contains(np.array([0.0, 0.7]), radius=0.1)
        assert not boundary.contains(np.array([0.0, 0.75]), radius=0.1)


class TestWallThenVane:
    """Wall correction runs first; a vane push near the rim can then leave a small overhang."""

    def test_both_surfaces_report_in_order(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.79, 0.005), vel=(2.0, -0.5))
        events = boundary.resolve_collision(ball, t=0.0)
        assert [(e.kind, e.index) for e in events] == [(SurfaceKind.DRUM, 0), (SurfaceKind.VANE_LEADING, 0)]
        assert ball.pos[1] == pytest.approx(ball.radius)

    def test_overhang_is_bounded_by_tangential_push(self):
        boundary = make_boundary()
        ball = Ball(pos=(0.79, 0.005), vel=(2.0, -0.5))
        boundary.resolve_collision(ball, t=0.0)
        overhang = np.linalg.norm(ball.pos) + ball.radius - boundary.radius
        inner = boundary.radius - ball.radius
        assert overhang == pytest.approx(7.85e-4, abs=1e-5)
        assert overhang <= math.hypot(inner, ball.radius) - inner
