"""Radar projection: trader grade and trading returns to polar coordinates.

X axis (right): higher trader grade. Y axis (up): higher trading returns.
Both axes are clamped, normalised to 0-1 and mapped onto [-0.8, 0.8] so
blips always sit inside the radar rim. All functions are pure, so the
page can re-derive screen positions every animation frame.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar

GRADE_MIN = 0.0
GRADE_MAX = 100.0
RETURNS_MIN = -50.0  # percent
RETURNS_MAX = 150.0
AXIS_EXTENT = 0.8

#: Blip diameter range in pixels, scaled by trading returns.
BLIP_MIN_SIZE = 6.0
BLIP_MAX_SIZE = 20.0
PING_SCALE = 1.5
PING_WINDOW = 0.3  # radians either side of the sweep line
HIT_RADIUS = 15.0  # pixels, hover and click

T = TypeVar("T")


@dataclass(frozen=True)
class Projection:
    """Polar position of one blip, with its cartesian axis components."""

    angle: float
    distance: float
    x: float
    y: float


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _to_axis(normalized: float) -> float:
    """Map a 0-1 value onto [-AXIS_EXTENT, AXIS_EXTENT]."""
    return normalized * (2 * AXIS_EXTENT) - AXIS_EXTENT


def project(grade: float, trading_return: float) -> Projection:
    """Project a trader grade (0-100) and trading return (%) onto the radar.

    Out-of-range inputs are clamped before normalisation, so projecting a
    -1000% return is identical to projecting -50%.
    """
    x = _to_axis(_clamp(grade, GRADE_MIN, GRADE_MAX) / (GRADE_MAX - GRADE_MIN))
    clamped = _clamp(trading_return, RETURNS_MIN, RETURNS_MAX)
    y = _to_axis((clamped - RETURNS_MIN) / (RETURNS_MAX - RETURNS_MIN))
    return Projection(
        angle=math.atan2(y, x),
        distance=math.hypot(x, y),
        x=x,
        y=y,
    )


def screen_position(
    angle: float, distance: float, cx: float, cy: float, radius: float
) -> tuple[float, float]:
    """Canvas pixel position of a blip. Canvas y grows downward."""
    return (
        cx + math.cos(angle) * distance * radius,
        cy - math.sin(angle) * distance * radius,
    )


def is_pinged(sweep_angle: float, angle: float) -> bool:
    """True when the sweep line has just passed over the blip."""
    diff = abs(sweep_angle - angle)
    return diff < PING_WINDOW or diff > (2 * math.pi - PING_WINDOW)


def blip_size(trading_return: float, pinged: bool = False) -> float:
    """Blip diameter: bigger for bigger winners, minimum size for losers."""
    scale = 0.0 if trading_return < 0 else min(trading_return / 100, 1.0)
    size = BLIP_MIN_SIZE + scale * (BLIP_MAX_SIZE - BLIP_MIN_SIZE)
    return size * PING_SCALE if pinged else size


def hit_test(
    blips: Iterable[tuple[T, float, float]],
    x: float,
    y: float,
) -> T | None:
    """Return the first blip within HIT_RADIUS pixels of the point.

    The radius is fixed so small and pinged blips are equally easy to hover
    and click.

    Args:
        blips: (item, screen_x, screen_y) tuples in draw order.
        x: Pointer x in canvas pixels.
        y: Pointer y in canvas pixels.
    """
    for item, bx, by in blips:
        if math.hypot(x - bx, y - by) < HIT_RADIUS:
            return item
    return None
