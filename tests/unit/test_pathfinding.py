"""
Tests for the grid router and label placement.

These tests verify:
1. Optimal paths without obstacles
2. Detours that keep clear of padded obstacles
3. The direct-segment fallback
4. Path simplification and label anchoring
"""

import pytest

from vectorflow.errors import ConfigurationError, GeometryError
from vectorflow.models import Bounds, Point
from vectorflow.pathfinding import (
    Obstacle,
    PathRouter,
    calculate_label_position,
    find_path,
    path_length,
    simplify_path,
    snap,
)
from vectorflow.shapes import Rectangle
from vectorflow.tracer import LayoutTrace


def is_orthogonal(path):
    return all(a.x == b.x or a.y == b.y for a, b in zip(path, path[1:]))


class TestRouting:
    """Tests for A* routing."""

    @pytest.mark.parametrize(
        "start,end",
        [((0, 0), (100, 0)), ((0, 0), (100, 60)), ((13, 27), (-42, 88)), ((5, 5), (5, 5))],
    )
    def test_no_obstacles_is_manhattan_optimal(self, start, end):
        """Without obstacles the path is as short as the snapped Manhattan distance."""
        grid = 10
        path = find_path(start, end, grid_size=grid)
        sx, sy = snap(start[0], grid) * grid, snap(start[1], grid) * grid
        ex, ey = snap(end[0], grid) * grid, snap(end[1], grid) * grid
        assert path_length(path) == pytest.approx(abs(ex - sx) + abs(ey - sy))
        assert is_orthogonal(path)

    def test_straight_path_is_two_points(self):
        """Collinear results are simplified to the endpoints."""
        assert find_path((0, 0), (100, 0)) == [Point(0, 0), Point(100, 0)]

    def test_detours_around_obstacle(self, wall):
        """The path goes around the wall and never enters its padded box."""
        padding = 20
        path = find_path((0, 0), (200, 0), [wall], padding=padding)
        padded = wall.expanded(padding)
        assert len(path) > 2
        assert path[0] == Point(0, 0) and path[-1] == Point(200, 0)
        assert is_orthogonal(path)
        for a, b in zip(path, path[1:]):
            steps = int(max(abs(b.x - a.x), abs(b.y - a.y)) / 10)
            for i in range(steps + 1):
                t = i / steps if steps else 0
                p = a + (b - a) * t
                assert not padded.contains(p, inclusive=False)

    def test_detour_is_longer_than_direct(self, wall):
        """A detour costs more than the straight distance."""
        path = find_path((0, 0), (200, 0), [wall])
        assert path_length(path) > 200

    def test_enclosed_goal_falls_back(self):
        """When the goal cannot be reached the direct segment is returned."""
        ring = [
            Obstacle(80, -40, 80, 10),
            Obstacle(80, 30, 80, 10),
            Obstacle(80, -40, 10, 80),
            Obstacle(150, -40, 10, 80),
        ]
        trace = LayoutTrace()
        path = find_path((0, 0), (120, 0), ring, padding=10, trace=trace)
        assert path == [Point(0, 0), Point(120, 0)]
        assert len(trace.route_fallbacks()) == 1

    def test_node_budget_falls_back(self, wall):
        """Exhausting the node budget degrades to a direct segment."""
        path = find_path((0, 0), (200, 0), [wall], max_expansions=5)
        assert path == [Point(0, 0), Point(200, 0)]

    def test_goal_on_padding_edge_is_reachable(self):
        """The goal is traversable even where the padding would block it."""
        target = Obstacle(100, -50, 50, 100)
        path = find_path((0, 0), (80, 0), [target], padding=20)
        assert path == [Point(0, 0), Point(80, 0)]

    def test_trace_records_route(self):
        """Successful routes are recorded when tracing."""
        trace = LayoutTrace()
        find_path((0, 0), (50, 50), trace=trace)
        events = trace.get_events("route")
        assert len(events) == 1
        assert events[0].data["fallback"] is False

    def test_invalid_router_config(self):
        """Non-positive grid sizes are rejected."""
        with pytest.raises(ConfigurationError):
            PathRouter(grid_size=0)
        with pytest.raises(ConfigurationError):
            PathRouter(padding=-1)


class TestObstacle:
    """Tests for Obstacle."""

    def test_from_element(self):
        """Obstacles cover the element's world bounding box."""
        obstacle = Obstacle.from_element(Rectangle(30, 20, x=5, y=6))
        assert obstacle == Obstacle(5, 6, 30, 20)

    def test_expanded(self):
        """Padding grows every side."""
        assert Obstacle(0, 0, 10, 10).expanded(5) == Bounds(-5, -5, 15, 15)


class TestSimplify:
    """Tests for simplify_path and path_length."""

    def test_removes_collinear_points(self):
        """Only direction changes survive."""
        path = simplify_path([(0, 0), (10, 0), (20, 0), (20, 10), (20, 20)])
        assert path == [Point(0, 0), Point(20, 0), Point(20, 20)]

    def test_removes_duplicates(self):
        """Consecutive duplicates are dropped."""
        assert simplify_path([(0, 0), (0, 0), (5, 0)]) == [Point(0, 0), Point(5, 0)]

    def test_path_length(self):
        """Length sums the segments."""
        assert path_length([(0, 0), (3, 4), (3, 10)]) == 11


class TestLabelPosition:
    """Tests for calculate_label_position."""

    def test_long_segment_offsets_past_midpoint(self):
        """Long segments put the label past the midpoint."""
        pos = calculate_label_position([(0, 0), (200, 0)], min_distance=30)
        assert pos.x == pytest.approx(200 * (0.5 + 0.5 * 30 / 200))
        assert pos.y == 0

    def test_short_segment_uses_midpoint(self):
        """Segments shorter than twice the distance use the midpoint."""
        pos = calculate_label_position([(0, 0), (50, 0)], min_distance=30)
        assert pos == Point(25, 0)

    def test_longest_segment_wins(self):
        """The label goes on the longest segment."""
        pos = calculate_label_position([(0, 0), (0, 20), (100, 20), (100, 30)], min_distance=30)
        assert pos.y == 20
        assert 50 <= pos.x <= 100

    def test_single_point(self):
        """A one-point path returns that point."""
        assert calculate_label_position([(7, 8)]) == Point(7, 8)

    def test_empty_path(self):
        """An empty path is a geometry error."""
        with pytest.raises(GeometryError):
            calculate_label_position([])
