"""Top-level arrow routing: fast straight path or A* with smoothing."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .curves import arrow_head_angle, create_smooth_curve, straight_bezier
from .edges import connection_point
from .models import ConnectionPoint, PathResult, Point, Rectangle
from .pathfinding import (
    RoutingConfig,
    adjust_waypoints_for_clearance,
    astar,
    line_intersects_obstacles,
    simplify_path,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import Side

logger = logging.getLogger(__name__)


def _straight_result(start: Point, end: Point) -> PathResult:
    return PathResult(points=straight_bezier(start, end), segments=1, waypoints=[start, end])


def find_arrow_path(
    start: Point,
    end: Point,
    obstacles: Sequence[Rectangle],
    source_obstacle: Rectangle | None = None,
    target_obstacle: Rectangle | None = None,
    config: RoutingConfig | None = None,
) -> PathResult:
    """Route a connector from start to end around obstacles.

    The connector's own cards are never treated as obstacles. When the
    straight segment is clear the result is a single straight Bezier;
    otherwise the route is searched on the grid, simplified, nudged away
    from obstacles and smoothed.

    Never raises; degenerate input yields the straight form.

    Args:
        start: Source connection point
        end: Target connection point
        obstacles: Bounds of the other visible cards
        source_obstacle: Bounds of the source card
        target_obstacle: Bounds of the target card
        config: Routing configuration

    Returns:
        PathResult whose curve starts exactly at start and ends exactly at end
    """
    config = config or RoutingConfig()

    if not (start.is_finite() and end.is_finite()):
        logger.debug("Non-finite endpoint, skipping routing")
        return _straight_result(start, end)

    remaining = [
        obstacle for obstacle in obstacles
        if obstacle != source_obstacle
        and obstacle != target_obstacle
        and obstacle.is_finite()
    ]

    if not line_intersects_obstacles(
        start, end, remaining, config.obstacle_padding, config.sample_step
    ):
        return _straight_result(start, end)

    waypoints = astar(start, end, remaining, config)
    simplified = simplify_path(waypoints, config.simplify_tolerance, config.corner_angle)
    adjusted = adjust_waypoints_for_clearance(
        simplified, remaining, config.min_clearance, config
    )
    points, segments = create_smooth_curve(adjusted, config.tension)

    if not points or not all(math.isfinite(v) for v in points):
        logger.debug("Smoothing produced an invalid curve, using straight line")
        return _straight_result(start, end)

    logger.debug(
        "Routed arrow around %d obstacles: %d raw, %d final waypoints",
        len(remaining), len(waypoints), len(adjusted),
    )
    return PathResult(points=points, segments=segments, waypoints=adjusted)


@dataclass
class Connector:
    """A routed connector between two cards."""

    start: ConnectionPoint
    end: ConnectionPoint
    path: PathResult

    @property
    def arrow_head_angle(self) -> float:
        """Arrowhead direction in radians, from the last two curve points."""
        return arrow_head_angle(self.path.points)


def route_connector(
    source: Rectangle,
    target: Rectangle,
    obstacles: Sequence[Rectangle],
    source_side: Side | None = None,
    target_side: Side | None = None,
    config: RoutingConfig | None = None,
) -> Connector:
    """Pick connection points on both cards and route between them.

    Each endpoint is placed where the ray towards the other card's center
    leaves the card, unless a side is preferred.
    """
    start = connection_point(source, target.center, source_side)
    end = connection_point(target, source.center, target_side)
    path = find_arrow_path(start, end, obstacles, source, target, config)
    return Connector(start=start, end=end, path=path)
