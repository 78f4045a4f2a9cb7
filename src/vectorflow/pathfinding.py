"""
Grid-based orthogonal path routing.

Implements connector routing with:
- Obstacles expanded by a clearance padding
- A* search over a regular grid with 4-directional moves
- Path simplification to the vertices where direction changes
- Label anchor placement on the longest segment

The router never fails: when the search space is exhausted (enclosed goal,
or the node budget is spent) it returns the direct start -> end segment.

The snapped start and goal nodes are always traversable, even inside an
obstacle's clearance, so connectors can attach to the element they leave or
enter. The first and last hops may therefore cross the padding.
"""

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import ConfigurationError, GeometryError
from .models import Bounds, Point, PointLike, as_point

if TYPE_CHECKING:
    from .element import Element
    from .tracer import LayoutTrace

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTING CONFIGURATION - Adjust these values to tune routing behavior
# =============================================================================

# Distance between neighbouring grid nodes (in pixels)
DEFAULT_GRID_SIZE = 10

# Clearance added around every obstacle before searching
DEFAULT_PADDING = 20

# Extra grid cells searched beyond the start, end and obstacle bounds
# Lets paths detour around obstacles that touch the search boundary
SEARCH_MARGIN_CELLS = 2

# Upper bound on node expansions per search before falling back
MAX_SEARCH_NODES = 50000

# Minimum distance between a label and either end of its segment
DEFAULT_LABEL_DISTANCE = 30

# 4-directional moves: right, down, left, up
NEIGHBOR_OFFSETS = ((1, 0), (0, 1), (-1, 0), (0, -1))

# =============================================================================


@dataclass(frozen=True)
class Obstacle:
    """
    Axis-aligned rectangle the router must avoid.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent.
        height: Vertical extent.
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> "Obstacle":
        return cls(bounds.min_x, bounds.min_y, bounds.width, bounds.height)

    @classmethod
    def from_element(cls, element: "Element") -> "Obstacle":
        """Obstacle covering an element's world-space bounding box."""
        bounds = element.bounding_box()
        if bounds is None:
            raise GeometryError(f"{element.label} has no geometry to derive an obstacle from")
        return cls.from_bounds(bounds)

    @property
    def bounds(self) -> Bounds:
        return Bounds.from_rect(self.x, self.y, self.width, self.height)

    def expanded(self, padding: float) -> Bounds:
        return self.bounds.expand(padding)


@dataclass
class GridNode:
    """
    A node of one A* search.

    Attributes:
        ix: Grid column (x = ix * grid_size).
        iy: Grid row (y = iy * grid_size).
        g: Cost of the best known path from the start.
        h: Heuristic estimate to the goal.
        parent: Predecessor on the best known path.
    """

    ix: int
    iy: int
    g: float = 0.0
    h: float = 0.0
    parent: Optional["GridNode"] = field(default=None, repr=False)

    @property
    def f(self) -> float:
        return self.g + self.h

    @property
    def key(self) -> Tuple[int, int]:
        return (self.ix, self.iy)


def snap(value: float, grid_size: float) -> int:
    """Index of the nearest grid line (halves round up)."""
    return int(math.floor(value / grid_size + 0.5))


class PathRouter:
    """
    A* router over a regular grid.

    Args:
        grid_size: Distance between grid nodes.
        padding: Clearance kept around every obstacle.
        max_expansions: Node budget before falling back to a direct path.
    """

    def __init__(
        self,
        grid_size: float = DEFAULT_GRID_SIZE,
        padding: float = DEFAULT_PADDING,
        max_expansions: int = MAX_SEARCH_NODES,
    ):
        if grid_size <= 0:
            raise ConfigurationError(f"Router grid_size must be positive, got {grid_size!r}")
        if padding < 0:
            raise ConfigurationError(f"Router padding must be non-negative, got {padding!r}")
        self.grid_size = grid_size
        self.padding = padding
        self.max_expansions = max_expansions

    def route(
        self,
        start: PointLike,
        end: PointLike,
        obstacles: Iterable[Obstacle] = (),
        trace: Optional["LayoutTrace"] = None,
    ) -> List[Point]:
        """
        Find an orthogonal path from `start` to `end` around `obstacles`.

        Returns:
            The simplified path as grid-snapped points, or ``[start, end]``
            when no path could be found.
        """
        start = as_point(start)
        end = as_point(end)
        grid = self.grid_size
        blockers = [o.expanded(self.padding) for o in obstacles]

        start_key = (snap(start.x, grid), snap(start.y, grid))
        goal_key = (snap(end.x, grid), snap(end.y, grid))

        # Search region in grid indices
        region = Bounds.from_points([start, end])
        for b in blockers:
            region = region.union(b)
        min_ix = math.floor(region.min_x / grid) - SEARCH_MARGIN_CELLS
        max_ix = math.ceil(region.max_x / grid) + SEARCH_MARGIN_CELLS
        min_iy = math.floor(region.min_y / grid) - SEARCH_MARGIN_CELLS
        max_iy = math.ceil(region.max_y / grid) + SEARCH_MARGIN_CELLS

        blocked_cache: Dict[Tuple[int, int], bool] = {}

        def is_blocked(key: Tuple[int, int]) -> bool:
            if key == start_key or key == goal_key:
                return False
            if key not in blocked_cache:
                point = Point(key[0] * grid, key[1] * grid)
                blocked_cache[key] = any(b.contains(point) for b in blockers)
            return blocked_cache[key]

        def heuristic(key: Tuple[int, int]) -> float:
            return (abs(key[0] - goal_key[0]) + abs(key[1] - goal_key[1])) * grid

        start_node = GridNode(start_key[0], start_key[1], 0.0, heuristic(start_key))
        nodes: Dict[Tuple[int, int], GridNode] = {start_key: start_node}
        closed = set()
        counter = 0
        open_heap: List[Tuple[float, float, int, Tuple[int, int]]] = [
            (start_node.f, start_node.h, counter, start_key)
        ]
        expansions = 0

        while open_heap:
            _, _, _, key = heapq.heappop(open_heap)
            if key in closed:
                continue
            current = nodes[key]
            if key == goal_key:
                path = self._reconstruct(current)
                self._record(trace, start, end, path, expansions, fallback=False)
                return path

            closed.add(key)
            expansions += 1
            if expansions > self.max_expansions:
                return self._fallback(start, end, trace, expansions, "node budget exhausted")

            for dx, dy in NEIGHBOR_OFFSETS:
                nkey = (key[0] + dx, key[1] + dy)
                if not (min_ix <= nkey[0] <= max_ix and min_iy <= nkey[1] <= max_iy):
                    continue
                if nkey in closed or is_blocked(nkey):
                    continue
                tentative = current.g + grid
                neighbor = nodes.get(nkey)
                if neighbor is None:
                    neighbor = GridNode(nkey[0], nkey[1], tentative, heuristic(nkey), current)
                    nodes[nkey] = neighbor
                elif tentative < neighbor.g:
                    neighbor.g = tentative
                    neighbor.parent = current
                else:
                    continue
                counter += 1
                heapq.heappush(open_heap, (neighbor.f, neighbor.h, counter, nkey))

        return self._fallback(start, end, trace, expansions, "open set exhausted")

    def _reconstruct(self, node: GridNode) -> List[Point]:
        keys = []
        current: Optional[GridNode] = node
        while current is not None:
            keys.append(current.key)
            current = current.parent
        keys.reverse()
        return simplify_path([Point(ix * self.grid_size, iy * self.grid_size) for ix, iy in keys])

    def _fallback(
        self,
        start: Point,
        end: Point,
        trace: Optional["LayoutTrace"],
        expansions: int,
        reason: str,
    ) -> List[Point]:
        logger.debug(
            "No route from (%g, %g) to (%g, %g) after %d expansions (%s); using direct segment",
            start.x,
            start.y,
            end.x,
            end.y,
            expansions,
            reason,
        )
        path = [start, end]
        self._record(trace, start, end, path, expansions, fallback=True, reason=reason)
        return path

    @staticmethod
    def _record(
        trace: Optional["LayoutTrace"],
        start: Point,
        end: Point,
        path: List[Point],
        expansions: int,
        fallback: bool,
        reason: str = "",
    ) -> None:
        if trace is None:
            return
        data = {
            "from": start.as_tuple(),
            "to": end.as_tuple(),
            "points": len(path),
            "expansions": expansions,
            "fallback": fallback,
        }
        if reason:
            data["reason"] = reason
        trace.add_event("route", "path", data)


def find_path(
    start: PointLike,
    end: PointLike,
    obstacles: Iterable[Obstacle] = (),
    grid_size: float = DEFAULT_GRID_SIZE,
    padding: float = DEFAULT_PADDING,
    max_expansions: int = MAX_SEARCH_NODES,
    trace: Optional["LayoutTrace"] = None,
) -> List[Point]:
    """
    Route an orthogonal path between two world-space points.

    Args:
        start: Start point.
        end: End point.
        obstacles: Rectangles to avoid.
        grid_size: Distance between grid nodes.
        padding: Clearance kept around every obstacle.
        max_expansions: Node budget before falling back to a direct path.
        trace: Optional trace receiving a "route" event.

    Returns:
        The simplified path; ``[start, end]`` if no route exists.
    """
    router = PathRouter(grid_size=grid_size, padding=padding, max_expansions=max_expansions)
    return router.route(start, end, obstacles, trace=trace)


def _direction(a: Point, b: Point) -> Tuple[int, int]:
    dx, dy = b.x - a.x, b.y - a.y
    return ((dx > 0) - (dx < 0), (dy > 0) - (dy < 0))


def simplify_path(points: Sequence[PointLike]) -> List[Point]:
    """Keep the endpoints and every vertex where the travel direction changes."""
    pts: List[Point] = []
    for p in points:
        p = as_point(p)
        # Remove duplicate consecutive points
        if not pts or p != pts[-1]:
            pts.append(p)
    if len(pts) <= 2:
        return pts

    simplified = [pts[0]]
    for i in range(1, len(pts) - 1):
        if _direction(pts[i - 1], pts[i]) != _direction(pts[i], pts[i + 1]):
            simplified.append(pts[i])
    simplified.append(pts[-1])
    return simplified


def path_length(points: Sequence[PointLike]) -> float:
    """Total length of a polyline."""
    pts = [as_point(p) for p in points]
    return sum(a.distance_to(b) for a, b in zip(pts, pts[1:]))


def calculate_label_position(
    path: Sequence[PointLike], min_distance: float = DEFAULT_LABEL_DISTANCE
) -> Point:
    """
    Anchor point for a label along a path.

    Uses the longest segment. If it is longer than twice `min_distance`,
    the label sits past the midpoint, at
    ``start + d * (0.5 + 0.5 * min_distance / length)``; otherwise it sits at
    the midpoint.

    Raises:
        GeometryError: If the path is empty.
    """
    pts = [as_point(p) for p in path]
    if not pts:
        raise GeometryError("Cannot place a label on an empty path")
    if len(pts) == 1:
        return pts[0]

    best_start, best_end = pts[0], pts[1]
    best_length = -1.0
    for a, b in zip(pts, pts[1:]):
        length = a.distance_to(b)
        if length > best_length:
            best_start, best_end, best_length = a, b, length

    delta = best_end - best_start
    if best_length > 2 * min_distance:
        t = 0.5 + 0.5 * (min_distance / best_length)
        return best_start + delta * t
    return best_start + delta * 0.5
