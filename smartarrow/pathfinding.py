"""Grid-based A* pathfinding for routing arrows around cards."""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import Point, Rectangle

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

GRID_SIZE = 20.0  # Grid cell size in pixels
OBSTACLE_PADDING = 15.0  # Extra padding around obstacles for collision tests
CLEARANCE_PREFERENCE = 40.0  # Soft-avoid radius around obstacles
MAX_ITERATIONS = 1000  # Hard cap on expanded nodes per search
MIN_CLEARANCE = 25.0
CORNER_ANGLE = math.pi / 6

# 4 axis moves followed by 4 diagonals
_DIRECTIONS = [
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
]


@dataclass
class RoutingConfig:
    """Configuration for obstacle-aware arrow routing."""

    grid_size: float = GRID_SIZE
    obstacle_padding: float = OBSTACLE_PADDING
    clearance_preference: float = CLEARANCE_PREFERENCE
    max_iterations: int = MAX_ITERATIONS
    # Turn cost is (1 - cos(theta)) * grid_size * weight
    direction_penalty_weight: float = 0.3
    # Proximity cost is (1 - dist / clearance_preference)^2 * grid_size * weight
    clearance_penalty_weight: float = 0.5
    # Douglas-Peucker tolerance as a multiple of grid_size
    simplify_tolerance_factor: float = 2.0
    min_clearance: float = MIN_CLEARANCE
    # Catmull-Rom tension: 0 = tight, 0.5 = moderate, 1 = loose
    tension: float = 0.5
    corner_angle: float = CORNER_ANGLE

    def __post_init__(self) -> None:
        if not (math.isfinite(self.grid_size) and self.grid_size > 0):
            raise ValueError(f"grid_size must be a positive number, got {self.grid_size}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        for name in ("obstacle_padding", "clearance_preference", "min_clearance"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0):
                raise ValueError(f"{name} must be a non-negative number, got {value}")

    @property
    def simplify_tolerance(self) -> float:
        return self.grid_size * self.simplify_tolerance_factor

    @property
    def sample_step(self) -> float:
        """Spacing of collision samples along a segment."""
        return self.grid_size / 2


@dataclass
class GridNode:
    """A search node; lives for a single astar() call."""

    x: float
    y: float
    g: float  # Cost from start
    h: float  # Heuristic to end
    parent: GridNode | None = None

    @property
    def f(self) -> float:
        return self.g + self.h


def snap_to_grid(point: Point, grid_size: float = GRID_SIZE) -> Point:
    """Round a point to the nearest grid intersection."""
    return Point(
        round(point.x / grid_size) * grid_size,
        round(point.y / grid_size) * grid_size,
    )


def is_point_in_obstacle(
    point: Point,
    obstacles: Sequence[Rectangle],
    padding: float = OBSTACLE_PADDING,
) -> bool:
    """Check if a point is inside or near an obstacle (with padding)."""
    return any(obstacle.contains(point, padding) for obstacle in obstacles)


def distance_to_nearest_obstacle(point: Point, obstacles: Sequence[Rectangle]) -> float:
    """Distance to the closest obstacle boundary, 0 when inside one.

    Returns infinity when there are no obstacles.
    """
    return min((obstacle.distance_to(point) for obstacle in obstacles), default=math.inf)


def line_intersects_obstacles(
    start: Point,
    end: Point,
    obstacles: Sequence[Rectangle],
    padding: float = OBSTACLE_PADDING,
    step: float = GRID_SIZE / 2,
) -> bool:
    """Check if a line segment crosses any padded obstacle.

    Samples points along the segment every ``step`` pixels, endpoints included.
    """
    if not obstacles:
        return False
    length = start.distance_to(end)
    if not math.isfinite(length):
        return True
    steps = max(1, math.ceil(length / step))
    for i in range(steps + 1):
        t = i / steps
        point = Point(
            start.x + (end.x - start.x) * t,
            start.y + (end.y - start.y) * t,
        )
        if is_point_in_obstacle(point, obstacles, padding):
            return True
    return False


def _direction_penalty(current: GridNode, next_x: float, next_y: float, config: RoutingConfig) -> float:
    """Penalty for bending away from the incoming direction."""
    parent = current.parent
    if parent is None:
        return 0.0

    prev_dx = current.x - parent.x
    prev_dy = current.y - parent.y
    curr_dx = next_x - current.x
    curr_dy = next_y - current.y

    prev_len = math.hypot(prev_dx, prev_dy)
    curr_len = math.hypot(curr_dx, curr_dy)
    if prev_len == 0 or curr_len == 0:
        return 0.0

    # 0 = same direction, 2 = reversal
    dot = (prev_dx * curr_dx + prev_dy * curr_dy) / (prev_len * curr_len)
    return (1 - dot) * config.grid_size * config.direction_penalty_weight


def _clearance_penalty(point: Point, obstacles: Sequence[Rectangle], config: RoutingConfig) -> float:
    """Penalty for passing closer than the preferred clearance."""
    preference = config.clearance_preference
    if preference <= 0:
        return 0.0
    dist = distance_to_nearest_obstacle(point, obstacles)
    if dist >= preference:
        return 0.0
    ratio = 1 - dist / preference
    return ratio * ratio * config.grid_size * config.clearance_penalty_weight


def _reconstruct(node: GridNode, start: Point, end: Point) -> list[Point]:
    path: list[Point] = []
    current: GridNode | None = node
    while current is not None:
        path.append(Point(current.x, current.y))
        current = current.parent
    path.reverse()

    if len(path) < 2:
        return [start, end]

    # Grid search works on snapped points; the route must hit the real ones
    path[0] = start
    path[-1] = end
    return path


def astar(
    start: Point,
    end: Point,
    obstacles: Sequence[Rectangle],
    config: RoutingConfig | None = None,
) -> list[Point]:
    """Find a waypoint sequence from start to end around padded obstacles.

    Searches an 8-connected grid. Move cost is the step length plus a
    penalty for changing direction plus a penalty for hugging obstacles.
    Ties on f are broken by the lower heuristic, then by insertion order.

    Args:
        start: Exact start point
        end: Exact end point
        obstacles: Rectangles to route around (unpadded)
        config: Routing configuration

    Returns:
        At least two points, beginning with start and ending with end.
        Falls back to [start, end] when the goal is not reached within
        ``config.max_iterations`` expansions.
    """
    config = config or RoutingConfig()
    if not (start.is_finite() and end.is_finite()):
        return [start, end]

    grid = config.grid_size
    obstacles = [obstacle for obstacle in obstacles if obstacle.is_finite()]

    grid_start = snap_to_grid(start, grid)
    grid_end = snap_to_grid(end, grid)

    def key_of(x: float, y: float) -> tuple[int, int]:
        return round(x / grid), round(y / grid)

    start_node = GridNode(
        x=grid_start.x,
        y=grid_start.y,
        g=0.0,
        h=grid_start.distance_to(grid_end),
    )

    counter = itertools.count()
    open_heap: list[tuple[float, float, int, GridNode]] = [
        (start_node.f, start_node.h, next(counter), start_node),
    ]
    open_nodes: dict[tuple[int, int], GridNode] = {key_of(start_node.x, start_node.y): start_node}
    closed: set[tuple[int, int]] = set()

    iterations = 0
    while open_heap and iterations < config.max_iterations:
        f, _, _, current = heapq.heappop(open_heap)
        current_key = key_of(current.x, current.y)

        # Entries left behind by an in-place improvement
        if current_key in closed or f != current.f:
            continue

        iterations += 1

        if abs(current.x - grid_end.x) < grid and abs(current.y - grid_end.y) < grid:
            logger.debug("Route found after %d iterations", iterations)
            return _reconstruct(current, start, end)

        del open_nodes[current_key]
        closed.add(current_key)

        for dx, dy in _DIRECTIONS:
            next_x = current.x + dx * grid
            next_y = current.y + dy * grid
            neighbor_key = key_of(next_x, next_y)
            if neighbor_key in closed:
                continue

            neighbor = Point(next_x, next_y)
            if is_point_in_obstacle(neighbor, obstacles, config.obstacle_padding):
                continue

            move_cost = math.hypot(dx * grid, dy * grid)
            g = (
                current.g
                + move_cost
                + _direction_penalty(current, next_x, next_y, config)
                + _clearance_penalty(neighbor, obstacles, config)
            )

            existing = open_nodes.get(neighbor_key)
            if existing is not None:
                if g < existing.g:
                    existing.g = g
                    existing.parent = current
                    heapq.heappush(open_heap, (existing.f, existing.h, next(counter), existing))
                continue

            node = GridNode(x=next_x, y=next_y, g=g, h=neighbor.distance_to(grid_end), parent=current)
            open_nodes[neighbor_key] = node
            heapq.heappush(open_heap, (node.f, node.h, next(counter), node))

    if open_heap:
        logger.debug("Route search hit the %d iteration cap, using direct line", config.max_iterations)
    else:
        logger.debug("Route search exhausted after %d iterations, using direct line", iterations)
    return [start, end]


def _corner_flags(path: Sequence[Point], corner_angle: float) -> list[bool]:
    """Mark endpoints and every point turning by more than corner_angle."""
    flags = [False] * len(path)
    flags[0] = True
    flags[-1] = True

    for i in range(1, len(path) - 1):
        prev, curr, nxt = path[i - 1], path[i], path[i + 1]
        v1x, v1y = curr.x - prev.x, curr.y - prev.y
        v2x, v2y = nxt.x - curr.x, nxt.y - curr.y

        len1 = math.hypot(v1x, v1y)
        len2 = math.hypot(v2x, v2y)
        if len1 == 0 or len2 == 0:
            continue

        cos_angle = (v1x * v2x + v1y * v2y) / (len1 * len2)
        angle = math.acos(max(-1.0, min(1.0, cos_angle)))
        if angle > corner_angle:
            flags[i] = True

    return flags


def _perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """Distance from point to the infinite line through line_start and line_end."""
    length = line_start.distance_to(line_end)
    if length == 0:
        return point.distance_to(line_start)
    return abs(
        (line_end.y - line_start.y) * point.x
        - (line_end.x - line_start.x) * point.y
        + line_end.x * line_start.y
        - line_end.y * line_start.x
    ) / length


def simplify_path(
    path: Sequence[Point],
    tolerance: float = GRID_SIZE,
    corner_angle: float = CORNER_ANGLE,
) -> list[Point]:
    """Simplify a path with Douglas-Peucker, keeping sharp corners.

    A point turning by more than ``corner_angle`` forces a split wherever
    it lies, so corners survive even when they sit on the chord.

    Args:
        path: Dense waypoint sequence
        tolerance: Maximum perpendicular distance that may be dropped
        corner_angle: Turn angle (radians) above which a point is protected

    Returns:
        Reduced waypoint sequence with the same endpoints
    """
    if len(path) <= 2:
        return list(path)

    is_corner = _corner_flags(path, corner_angle)
    keep = [False] * len(path)
    keep[0] = True
    keep[-1] = True

    # Explicit stack instead of recursion; the order of splits does not matter
    stack = [(0, len(path) - 1)]
    while stack:
        first, last = stack.pop()
        if last - first <= 1:
            continue

        split = None
        max_distance = 0.0
        for i in range(first + 1, last):
            if is_corner[i]:
                split = i
                break
            dist = _perpendicular_distance(path[i], path[first], path[last])
            if dist > max_distance:
                max_distance = dist
                if dist > tolerance:
                    split = i
        if split is None:
            continue

        keep[split] = True
        stack.append((first, split))
        stack.append((split, last))

    return [point for point, kept in zip(path, keep) if kept]


def _nudge_away(point: Point, obstacles: Sequence[Rectangle], min_clearance: float) -> Point | None:
    """Push a point straight away from its nearest obstacle to min_clearance.

    Returns None when the point is inside an obstacle, already clear, or
    the push direction is undefined.
    """
    nearest: Rectangle | None = None
    nearest_dist = math.inf
    for obstacle in obstacles:
        dist = obstacle.distance_to(point)
        if dist < nearest_dist:
            nearest_dist = dist
            nearest = obstacle

    if nearest is None or not (0 < nearest_dist < min_clearance):
        return None

    closest = nearest.closest_point(point)
    push_dx = point.x - closest.x
    push_dy = point.y - closest.y
    push_dist = math.hypot(push_dx, push_dy)
    if push_dist == 0:
        return None

    amount = min_clearance - nearest_dist
    nudged = Point(
        point.x + push_dx / push_dist * amount,
        point.y + push_dy / push_dist * amount,
    )
    return nudged if nudged.is_finite() else None


def _adds_collision(
    segment: tuple[Point, Point],
    baseline: tuple[Point, Point],
    obstacles: Sequence[Rectangle],
    config: RoutingConfig,
) -> bool:
    """True when segment hits an obstacle that baseline does not."""
    for obstacle in obstacles:
        hit = line_intersects_obstacles(
            *segment, [obstacle], config.obstacle_padding, config.sample_step
        )
        if hit and not line_intersects_obstacles(
            *baseline, [obstacle], config.obstacle_padding, config.sample_step
        ):
            return True
    return False


def adjust_waypoints_for_clearance(
    waypoints: Sequence[Point],
    obstacles: Sequence[Rectangle],
    min_clearance: float = MIN_CLEARANCE,
    config: RoutingConfig | None = None,
) -> list[Point]:
    """Push interior waypoints away from obstacles they pass too close to.

    A nudge is kept only if neither of the waypoint's segments starts
    hitting an obstacle its unadjusted segment missed. Endpoints never move.

    Args:
        waypoints: Simplified route
        obstacles: Rectangles to keep clear of (unpadded)
        min_clearance: Target distance from the nearest obstacle
        config: Routing configuration (padding and sampling step)

    Returns:
        Waypoints of the same length
    """
    if len(waypoints) <= 2:
        return list(waypoints)
    config = config or RoutingConfig()

    adjusted = [waypoints[0]]
    for i in range(1, len(waypoints) - 1):
        point = waypoints[i]
        nudged = _nudge_away(point, obstacles, min_clearance)
        if nudged is None:
            adjusted.append(point)
            continue

        prev_point = adjusted[-1]
        next_point = waypoints[i + 1]
        if _adds_collision(
            (prev_point, nudged), (waypoints[i - 1], point), obstacles, config
        ) or _adds_collision(
            (nudged, next_point), (point, next_point), obstacles, config
        ):
            logger.debug("Rejected clearance nudge of waypoint %d at (%.1f, %.1f)", i, point.x, point.y)
            adjusted.append(point)
        else:
            adjusted.append(nudged)

    adjusted.append(waypoints[-1])
    return adjusted
