"""Bezier curve construction for routed arrows."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import ArrowHeadType, ConnectionPoint, Point, Side

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_TENSION = 0.5


def straight_bezier(start: Point, end: Point) -> list[float]:
    """A single cubic segment with its control points on the line.

    Control points sit at 1/3 and 2/3 of the way, so the curve has
    zero curvature. The thirds are taken before subtracting so that
    finite endpoints never overflow.
    """
    third_x = end.x / 3 - start.x / 3
    third_y = end.y / 3 - start.y / 3
    return [
        start.x, start.y,
        start.x + third_x, start.y + third_y,
        end.x - third_x, end.y - third_y,
        end.x, end.y,
    ]


def create_smooth_curve(
    waypoints: Sequence[Point],
    tension: float = DEFAULT_TENSION,
) -> tuple[list[float], int]:
    """Create a multi-segment cubic Bezier passing through every waypoint.

    Uses a Catmull-Rom spline converted to Bezier: for each pair (p1, p2)
    with neighbours p0 and p3 (clamped at the ends), the control points are
    ``p1 + tension * (p2 - p0) / 3`` and ``p2 - tension * (p3 - p1) / 3``.

    Args:
        waypoints: Points the curve must pass through
        tension: 0 = tight curves, 0.5 = moderate, 1 = loose curves

    Returns:
        (points, segments) where points is the flattened
        ``[x, y, cx1, cy1, cx2, cy2, x, y, ...]`` sequence
    """
    if len(waypoints) < 2:
        return [], 0

    if len(waypoints) == 2:
        return straight_bezier(waypoints[0], waypoints[1]), 1

    points = [waypoints[0].x, waypoints[0].y]
    last = len(waypoints) - 1

    for i in range(last):
        p0 = waypoints[i - 1] if i > 0 else waypoints[i]
        p1 = waypoints[i]
        p2 = waypoints[i + 1]
        p3 = waypoints[i + 2] if i + 1 < last else waypoints[i + 1]

        # Tangents at p1 and p2
        m1x = (p2.x - p0.x) * tension
        m1y = (p2.y - p0.y) * tension
        m2x = (p3.x - p1.x) * tension
        m2y = (p3.y - p1.y) * tension

        points.extend([
            p1.x + m1x / 3, p1.y + m1y / 3,
            p2.x - m2x / 3, p2.y - m2y / 3,
            p2.x, p2.y,
        ])

    return points, last


def cubic_bezier_point(p0: Point, c1: Point, c2: Point, p3: Point, t: float) -> Point:
    """Evaluate one cubic Bezier segment at parameter t."""
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(
        a * p0.x + b * c1.x + c * c2.x + d * p3.x,
        a * p0.y + b * c1.y + c * c2.y + d * p3.y,
    )


def bezier_segments(points: Sequence[float]) -> list[tuple[Point, Point, Point, Point]]:
    """Split a flattened Bezier sequence into (anchor, control, control, anchor) tuples."""
    segments = []
    for base in range(0, len(points) - 7, 6):
        segments.append((
            Point(points[base], points[base + 1]),
            Point(points[base + 2], points[base + 3]),
            Point(points[base + 4], points[base + 5]),
            Point(points[base + 6], points[base + 7]),
        ))
    return segments


def sample_curve(points: Sequence[float], samples_per_segment: int = 16) -> list[Point]:
    """Sample a flattened Bezier sequence, segment boundaries included."""
    segments = bezier_segments(points)
    if not segments:
        return [Point(points[0], points[1])] if len(points) >= 2 else []

    samples = [segments[0][0]]
    for p0, c1, c2, p3 in segments:
        for i in range(1, samples_per_segment + 1):
            samples.append(cubic_bezier_point(p0, c1, c2, p3, i / samples_per_segment))
    return samples


def polyline_center(points: Sequence[Point]) -> Point:
    """Point halfway along a polyline by arc length."""
    if not points:
        return Point(0, 0)
    if len(points) == 1:
        return points[0]

    arc_lengths = [0.0]
    for prev, curr in zip(points, points[1:]):
        arc_lengths.append(arc_lengths[-1] + prev.distance_to(curr))

    total = arc_lengths[-1]
    if total == 0:
        return points[0]

    target = total / 2
    for i in range(1, len(arc_lengths)):
        if arc_lengths[i] >= target:
            segment_length = arc_lengths[i] - arc_lengths[i - 1]
            if segment_length == 0:
                return points[i - 1]
            t = (target - arc_lengths[i - 1]) / segment_length
            prev, curr = points[i - 1], points[i]
            return Point(prev.x + t * (curr.x - prev.x), prev.y + t * (curr.y - prev.y))

    return points[-1]


def curve_center(points: Sequence[float]) -> Point:
    """Arc-length midpoint of a flattened Bezier sequence (label anchor)."""
    return polyline_center(sample_curve(points, samples_per_segment=10))


def arrow_head_angle(points: Sequence[float]) -> float:
    """Direction of the last coordinate pair as seen from the one before it."""
    if len(points) < 4:
        return 0.0
    angle = math.atan2(points[-1] - points[-3], points[-2] - points[-4])
    return angle if math.isfinite(angle) else 0.0


@dataclass
class ArrowHead:
    """Arrowhead geometry in local coordinates, tip at the origin pointing +x."""

    points: list[float]
    rotation: float  # Degrees
    position: Point
    head_type: ArrowHeadType


def arrow_head_shape(
    points: Sequence[float],
    size: float,
    head_type: ArrowHeadType,
) -> ArrowHead | None:
    """Compute the arrowhead placed at the end of a curve.

    Circle heads carry no polygon; the renderer draws a circle of
    diameter ``size`` at the tip.
    """
    if head_type == ArrowHeadType.NONE or len(points) < 4:
        return None

    if head_type == ArrowHeadType.TRIANGLE:
        polygon = [
            0, 0,
            -size, -size / 2,
            -size, size / 2,
        ]
    elif head_type == ArrowHeadType.DIAMOND:
        polygon = [
            0, 0,
            -size, -size / 2,
            -size * 1.5, 0,
            -size, size / 2,
        ]
    else:
        polygon = []

    return ArrowHead(
        points=polygon,
        rotation=math.degrees(arrow_head_angle(points)),
        position=Point(points[-2], points[-1]),
        head_type=head_type,
    )


def straight_line(start: Point, end: Point) -> list[float]:
    return [start.x, start.y, end.x, end.y]


def step_path(start: ConnectionPoint, end: ConnectionPoint) -> list[float]:
    """Right-angled polyline between two connection points."""
    horizontal = (Side.LEFT, Side.RIGHT)
    vertical = (Side.TOP, Side.BOTTOM)
    points = [start.x, start.y]

    if start.side in horizontal and end.side in horizontal and start.side != end.side:
        mid_x = (start.x + end.x) / 2
        points.extend([mid_x, start.y, mid_x, end.y])
    elif start.side in vertical and end.side in vertical and start.side != end.side:
        mid_y = (start.y + end.y) / 2
        points.extend([start.x, mid_y, end.x, mid_y])
    elif start.side in horizontal:
        # L shape
        points.extend([end.x, start.y])
    else:
        points.extend([start.x, end.y])

    points.extend([end.x, end.y])
    return points


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def svg_path_data(points: Sequence[float]) -> str:
    """Convert a flattened Bezier sequence into SVG path data (M ... C ...)."""
    if len(points) < 2:
        return ""
    commands = [f"M{_fmt(points[0])},{_fmt(points[1])}"]
    for p0, c1, c2, p3 in bezier_segments(points):
        commands.append(
            f"C{_fmt(c1.x)},{_fmt(c1.y)} {_fmt(c2.x)},{_fmt(c2.y)} {_fmt(p3.x)},{_fmt(p3.y)}"
        )
    return " ".join(commands)


def polyline_path_data(points: Sequence[float]) -> str:
    """Convert a flattened polyline into SVG path data (M ... L ...)."""
    if len(points) < 2:
        return ""
    commands = [f"M{_fmt(points[0])},{_fmt(points[1])}"]
    for i in range(2, len(points) - 1, 2):
        commands.append(f"L{_fmt(points[i])},{_fmt(points[i + 1])}")
    return " ".join(commands)
