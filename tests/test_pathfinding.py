"""Tests for pathfinding.py module."""

import logging
import math

import pytest
from hypothesis import given, settings, strategies as st

from smartarrow.models import Point, Rectangle
from smartarrow.pathfinding import (
    RoutingConfig,
    adjust_waypoints_for_clearance,
    astar,
    distance_to_nearest_obstacle,
    is_point_in_obstacle,
    line_intersects_obstacles,
    simplify_path,
    snap_to_grid,
)
from smartarrow.router import find_arrow_path


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _is_subsequence(short, long):
    it = iter(long)
    return all(any(item == candidate for candidate in it) for item in short)


def _hits(segment, obstacles, config):
    return {
        i for i, obstacle in enumerate(obstacles)
        if line_intersects_obstacles(
            *segment, [obstacle], config.obstacle_padding, config.sample_step
        )
    }


coords = st.integers(min_value=-300, max_value=300).map(float)
points = st.builds(Point, coords, coords)
obstacles_strategy = st.lists(
    st.builds(
        Rectangle,
        coords,
        coords,
        st.integers(min_value=10, max_value=150).map(float),
        st.integers(min_value=10, max_value=150).map(float),
    ),
    max_size=4,
)


# ─── Config ──────────────────────────────────────────────────────────────────

class TestRoutingConfig:
    """Defaults and validation."""

    def test_defaults(self, config):
        assert config.grid_size == 20
        assert config.obstacle_padding == 15
        assert config.clearance_preference == 40
        assert config.max_iterations == 1000
        assert config.min_clearance == 25
        assert config.tension == 0.5
        assert config.corner_angle == pytest.approx(math.pi / 6)

    def test_derived_values(self, config):
        assert config.simplify_tolerance == 40
        assert config.sample_step == 10

    @pytest.mark.parametrize("kwargs", [
        {"grid_size": 0},
        {"grid_size": -5},
        {"grid_size": math.nan},
        {"max_iterations": 0},
        {"obstacle_padding": -1},
        {"min_clearance": math.inf},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RoutingConfig(**kwargs)


# ─── Geometry helpers ────────────────────────────────────────────────────────

class TestHelpers:
    def test_snap_to_grid(self):
        assert snap_to_grid(Point(29, -11)) == Point(20, -20)
        assert snap_to_grid(Point(7, 7), grid_size=5) == Point(5, 5)

    def test_point_in_padded_obstacle(self):
        obstacles = [Rectangle(0, 0, 10, 10)]
        assert is_point_in_obstacle(Point(5, 5), obstacles, padding=0)
        assert is_point_in_obstacle(Point(24, 5), obstacles, padding=15)
        assert not is_point_in_obstacle(Point(26, 5), obstacles, padding=15)

    def test_distance_to_nearest_obstacle(self):
        obstacles = [Rectangle(0, 0, 10, 10), Rectangle(100, 0, 10, 10)]
        assert distance_to_nearest_obstacle(Point(20, 5), obstacles) == 10
        assert distance_to_nearest_obstacle(Point(5, 5), obstacles) == 0
        assert distance_to_nearest_obstacle(Point(5, 5), []) == math.inf

    def test_line_through_obstacle(self, start, end, blocker):
        assert line_intersects_obstacles(start, end, [blocker])

    def test_line_missing_obstacle(self, start, end):
        assert not line_intersects_obstacles(start, end, [Rectangle(150, 200, 50, 100)])

    def test_line_without_obstacles(self, start, end):
        assert not line_intersects_obstacles(start, end, [])

    def test_zero_length_segment_is_sampled(self, blocker):
        inside = Point(175, 50)
        assert line_intersects_obstacles(inside, inside, [blocker])

    def test_padding_counts(self):
        obstacle = Rectangle(0, 20, 100, 20)
        # Passes 10 px above the obstacle, inside the 15 px padding
        assert line_intersects_obstacles(Point(-50, 10), Point(150, 10), [obstacle])
        assert not line_intersects_obstacles(
            Point(-50, 10), Point(150, 10), [obstacle], padding=5
        )


# ─── A* ──────────────────────────────────────────────────────────────────────

class TestAstar:
    """Tests for the grid search."""

    def test_open_field_goes_straight(self):
        path = astar(Point(0, 0), Point(100, 0), [])
        assert path[0] == Point(0, 0)
        assert path[-1] == Point(100, 0)
        assert len(path) == 6
        assert all(p.y == 0 for p in path)

    def test_exact_endpoints_off_grid(self):
        start, end = Point(3, 7), Point(97, 5)
        path = astar(start, end, [])
        assert path[0] == start
        assert path[-1] == end
        assert len(path) >= 2

    def test_routes_around_obstacle(self, start, end, blocker, config):
        path = astar(start, end, [blocker], config)

        assert path[0] == start
        assert path[-1] == end
        assert len(path) > 2
        for point in path[1:-1]:
            assert not blocker.contains(point, config.obstacle_padding)

    def test_iteration_cap_returns_direct_line(self, start, end, blocker):
        path = astar(start, end, [blocker], RoutingConfig(max_iterations=1))
        assert path == [start, end]

    def test_unreachable_goal_hits_cap(self, start, blocker, caplog):
        caplog.set_level(logging.DEBUG, logger="smartarrow.pathfinding")
        goal = Point(175, 50)  # Inside the blocker

        path = astar(start, goal, [blocker], RoutingConfig(max_iterations=200))

        assert path == [start, goal]
        assert "iteration cap" in caplog.text

    def test_enclosed_start_exhausts_open_set(self, caplog):
        caplog.set_level(logging.DEBUG, logger="smartarrow.pathfinding")
        start, goal = Point(175, 50), Point(500, 50)

        path = astar(start, goal, [Rectangle(100, 0, 200, 200)])

        assert path == [start, goal]
        assert "exhausted" in caplog.text

    def test_non_finite_endpoint(self):
        start = Point(math.nan, 0)
        path = astar(start, Point(100, 0), [])
        assert len(path) == 2
        assert path[0] is start

    def test_start_equals_end(self):
        point = Point(42, 42)
        assert astar(point, point, []) == [point, point]

    def test_staggered_maze_with_default_config(self):
        """Walls alternate between top and bottom inside a closed box."""
        box = [
            Rectangle(-60, -40, 760, 20),
            Rectangle(-60, 320, 760, 20),
            Rectangle(-60, -40, 20, 380),
            Rectangle(680, -40, 20, 380),
        ]
        walls = [
            Rectangle(60 + 100 * i, -20, 20, 240) if i % 2 == 0
            else Rectangle(60 + 100 * i, 100, 20, 220)
            for i in range(6)
        ]
        obstacles = box + walls
        start, goal = Point(0, 150), Point(640, 150)
        config = RoutingConfig()

        path = astar(start, goal, obstacles, config)

        assert path[0] == start
        assert path[-1] == goal
        assert len(path) > 2
        for point in path[1:-1]:
            assert not is_point_in_obstacle(point, obstacles, config.obstacle_padding)
        # Passes under the top-anchored walls and over the bottom-anchored ones
        assert any(point.y > 235 for point in path)
        assert any(point.y < 85 for point in path)

        result = find_arrow_path(start, goal, obstacles)
        assert result.segments >= 2
        assert result.points[:2] == [start.x, start.y]
        assert result.points[-2:] == [goal.x, goal.y]
        assert all(math.isfinite(v) for v in result.points)

    @given(points, points, obstacles_strategy)
    @settings(max_examples=30, deadline=None)
    def test_always_terminates_with_exact_endpoints(self, start, end, obstacles):
        path = astar(start, end, obstacles, RoutingConfig(max_iterations=150))
        assert len(path) >= 2
        assert path[0] == start
        assert path[-1] == end


# ─── Simplification ──────────────────────────────────────────────────────────

class TestSimplifyPath:
    """Corner-aware Douglas-Peucker."""

    def test_short_paths_unchanged(self):
        path = [Point(0, 0), Point(10, 10)]
        assert simplify_path(path) == path
        assert simplify_path([]) == []

    def test_collinear_points_removed(self):
        path = [Point(0, 0), Point(20, 0), Point(40, 0), Point(60, 0)]
        assert simplify_path(path) == [Point(0, 0), Point(60, 0)]

    def test_small_wiggles_removed(self):
        path = [Point(0, 0), Point(20, 5), Point(40, 0), Point(60, 5), Point(80, 0)]
        assert simplify_path(path, tolerance=40) == [Point(0, 0), Point(80, 0)]

    def test_right_angle_corner_kept(self):
        path = [Point(0, 0), Point(20, 0), Point(40, 0), Point(40, 20), Point(40, 40)]
        assert simplify_path(path, tolerance=1000) == [
            Point(0, 0), Point(40, 0), Point(40, 40),
        ]

    def test_corner_on_the_chord_kept(self):
        """A reversal lies on its own chord but still forces a split."""
        path = [Point(0, 0), Point(40, 0), Point(20, 0)]
        assert simplify_path(path, tolerance=1000) == path

    def test_large_deviation_kept_without_corner(self):
        path = [Point(0, 0), Point(50, 10), Point(100, 20), Point(150, 100), Point(200, 180)]
        result = simplify_path(path, tolerance=5, corner_angle=math.pi)
        assert Point(100, 20) in result

    @given(st.lists(points, min_size=2, max_size=40), st.floats(min_value=0, max_value=100))
    @settings(max_examples=50, deadline=None)
    def test_keeps_endpoints_and_order(self, path, tolerance):
        result = simplify_path(path, tolerance)
        assert result[0] == path[0]
        assert result[-1] == path[-1]
        assert _is_subsequence(result, path)


# ─── Clearance ───────────────────────────────────────────────────────────────

class TestAdjustWaypointsForClearance:
    """Nudging interior waypoints away from obstacles."""

    @pytest.fixture
    def floor(self):
        return Rectangle(50, 0, 100, 100)

    def test_short_paths_unchanged(self, floor):
        path = [Point(0, -10), Point(200, -10)]
        assert adjust_waypoints_for_clearance(path, [floor]) == path

    def test_close_waypoint_is_pushed_out(self, floor):
        path = [Point(0, -100), Point(100, -10), Point(200, -100)]
        adjusted = adjust_waypoints_for_clearance(path, [floor])

        assert adjusted[0] == path[0]
        assert adjusted[-1] == path[-1]
        assert adjusted[1] == Point(100, -25)

    def test_clear_waypoint_untouched(self, floor):
        path = [Point(0, -100), Point(100, -30), Point(200, -100)]
        assert adjust_waypoints_for_clearance(path, [floor]) == path

    def test_waypoint_inside_obstacle_untouched(self, floor):
        path = [Point(0, -100), Point(100, 50), Point(200, -100)]
        assert adjust_waypoints_for_clearance(path, [floor]) == path

    def test_nudge_rejected_when_it_creates_a_collision(self, floor, caplog):
        caplog.set_level(logging.DEBUG, logger="smartarrow.pathfinding")
        # Pushing up from the floor would run into the overhang
        overhang = Rectangle(90, -50, 20, 20)
        path = [Point(0, -10), Point(100, -10), Point(200, -10)]

        adjusted = adjust_waypoints_for_clearance(path, [floor, overhang])

        assert adjusted == path
        assert "Rejected clearance nudge" in caplog.text

    @given(st.lists(points, min_size=3, max_size=8), obstacles_strategy)
    @settings(max_examples=50, deadline=None)
    def test_never_adds_collisions(self, path, obstacles):
        config = RoutingConfig()
        adjusted = adjust_waypoints_for_clearance(path, obstacles, config=config)

        assert len(adjusted) == len(path)
        assert adjusted[0] == path[0]
        assert adjusted[-1] == path[-1]
        for i in range(len(path) - 1):
            before = _hits((path[i], path[i + 1]), obstacles, config)
            after = _hits((adjusted[i], adjusted[i + 1]), obstacles, config)
            assert after <= before
