"""Tests for radar projection and canvas geometry helpers."""

import math

import pytest

from radar.projection import (
    AXIS_EXTENT,
    BLIP_MAX_SIZE,
    BLIP_MIN_SIZE,
    HIT_RADIUS,
    blip_size,
    hit_test,
    is_pinged,
    project,
    screen_position,
)

MAX_DISTANCE = math.hypot(AXIS_EXTENT, AXIS_EXTENT)


class TestProject:
    """Tests for project(grade, trading_return)."""

    @pytest.mark.parametrize("grade", [0, 12.5, 50, 70, 99.9, 100])
    @pytest.mark.parametrize("ret", [-50, 0, 37.2, 150])
    def test_finite_and_bounded(self, grade: float, ret: float) -> None:
        p = project(grade, ret)
        assert math.isfinite(p.angle)
        assert math.isfinite(p.distance)
        assert -AXIS_EXTENT <= p.x <= AXIS_EXTENT
        assert -AXIS_EXTENT <= p.y <= AXIS_EXTENT
        assert 0 <= p.distance <= MAX_DISTANCE + 1e-12

    def test_grade_endpoints(self) -> None:
        assert project(0, 50).x == pytest.approx(-0.8)
        assert project(100, 50).x == pytest.approx(0.8)

    def test_returns_endpoints(self) -> None:
        assert project(50, -50).y == pytest.approx(-0.8)
        assert project(50, 150).y == pytest.approx(0.8)
        # midpoint of [-50, 150] sits on the horizontal axis
        assert project(50, 50).y == pytest.approx(0.0)

    def test_returns_clamped_before_normalisation(self) -> None:
        assert project(70, -1000) == project(70, -50)
        assert project(70, 10_000) == project(70, 150)

    def test_grade_clamped(self) -> None:
        assert project(-20, 0) == project(0, 0)
        assert project(250, 0) == project(100, 0)

    def test_centre_has_zero_distance(self) -> None:
        p = project(50, 50)
        assert p.distance == pytest.approx(0.0)

    def test_angle_and_distance_match_components(self) -> None:
        p = project(82, 120.5)
        assert p.angle == pytest.approx(math.atan2(p.y, p.x))
        assert p.distance == pytest.approx(math.sqrt(p.x**2 + p.y**2))

    def test_top_right_corner(self) -> None:
        p = project(100, 150)
        assert p.angle == pytest.approx(math.pi / 4)
        assert p.distance == pytest.approx(MAX_DISTANCE)

    def test_deterministic(self) -> None:
        assert project(63.3, 12.0) == project(63.3, 12.0)


class TestScreenPosition:
    """Tests for canvas placement."""

    def test_y_axis_inverted(self) -> None:
        x, y = screen_position(math.pi / 2, 0.5, cx=200, cy=200, radius=100)
        assert x == pytest.approx(200)
        assert y == pytest.approx(150)

    def test_right_of_centre(self) -> None:
        x, y = screen_position(0.0, 0.8, cx=100, cy=100, radius=50)
        assert (x, y) == pytest.approx((140, 100))


class TestBlips:
    """Tests for blip sizing, sweep pings and hit testing."""

    def test_size_range(self) -> None:
        assert blip_size(-30) == BLIP_MIN_SIZE
        assert blip_size(0) == BLIP_MIN_SIZE
        assert blip_size(50) == pytest.approx(13.0)
        assert blip_size(100) == BLIP_MAX_SIZE
        assert blip_size(400) == BLIP_MAX_SIZE

    def test_pinged_blip_grows(self) -> None:
        assert blip_size(100, pinged=True) == pytest.approx(BLIP_MAX_SIZE * 1.5)

    def test_is_pinged_window(self) -> None:
        assert is_pinged(1.0, 1.2) is True
        assert is_pinged(1.0, 1.5) is False

    def test_is_pinged_wraps_around(self) -> None:
        assert is_pinged(2 * math.pi - 0.1, 0.05) is True

    def test_hit_test_returns_first_match(self) -> None:
        blips = [("AAA", 100.0, 100.0), ("BBB", 104.0, 100.0)]
        assert hit_test(blips, 102, 100) == "AAA"

    def test_hit_radius_is_fixed_and_exclusive(self) -> None:
        blips = [("AAA", 100.0, 100.0)]
        assert HIT_RADIUS == 15.0
        # smallest blip is 6px but still catches the pointer up to 15px away
        assert hit_test(blips, 114.9, 100) == "AAA"
        assert hit_test(blips, 100, 115) is None
        assert hit_test(blips, 116, 100) is None

    def test_hit_test_empty(self) -> None:
        assert hit_test([], 0, 0) is None
