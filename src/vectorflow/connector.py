"""
Connectors between elements.

A connector draws a polyline between two endpoints. Endpoints are either
fixed world points or anchors on other elements; anchors are resolved every
time the path is computed, so a connector follows the elements it joins
after layout has moved them.

Routing modes:
- ``straight``: start, waypoints, end.
- ``orthogonal``: right-angle elbows between consecutive points.
- ``routed``: A* search around obstacles (see pathfinding).
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .element import Element
from .errors import ConfigurationError
from .models import Point, PointLike, as_point
from .pathfinding import (
    DEFAULT_GRID_SIZE,
    DEFAULT_LABEL_DISTANCE,
    DEFAULT_PADDING,
    Obstacle,
    calculate_label_position,
    find_path,
    simplify_path,
)
from .render import fmt_points, svg_element
from .style import Style, StyleLike

ROUTING_MODES = ("straight", "orthogonal", "routed")
ARROW_MODES = ("none", "end", "both")

# Documented connector defaults
CONNECTOR_STYLE = {"stroke": "#2A2A2A", "stroke_width": 1.5, "fill": "none"}
ARROW_SIZE = 10.0

# Label box: estimated width per character, height and padding
LABEL_FONT_SIZE = 12
LABEL_CHAR_WIDTH = 7.0
LABEL_HEIGHT = 16.0
LABEL_PADDING = 4.0
LABEL_BACKGROUND = "#FFFFFF"


@dataclass(frozen=True)
class Anchor:
    """
    A named anchor point on an element, resolved on demand.

    Attributes:
        element: The element to attach to.
        name: Anchor name (center, top, right, bottom, left, top_left, ...),
            or "auto" to pick the side facing `toward`.
        toward: Element an "auto" anchor faces.
    """

    element: Element
    name: str = "center"
    toward: Optional[Element] = None

    def resolve(self) -> Point:
        if self.name != "auto":
            return self.element.anchor(self.name)
        if self.toward is None:
            raise ConfigurationError(
                f"Anchor \"auto\" on {self.element.label} needs a `toward` element"
            )
        return self.element.anchor(facing_side(self.element, self.toward))


def facing_side(element: Element, other: Element) -> str:
    """
    Side of `element` facing `other`, judged by the dominant axis between
    their centers.
    """
    delta = other.center - element.center
    if abs(delta.x) > abs(delta.y):
        return "right" if delta.x > 0 else "left"
    return "bottom" if delta.y > 0 else "top"


Endpoint = Union[Anchor, Point, tuple]


def _resolve(endpoint: Endpoint) -> Point:
    if isinstance(endpoint, Anchor):
        return endpoint.resolve()
    return as_point(endpoint)


def orthogonal_path(start: Point, end: Point, waypoints: Sequence[Point] = ()) -> List[Point]:
    """
    Elbow path through `waypoints`.

    Each leg turns at its midpoint: horizontal first when the leg is wider
    than tall, vertical first otherwise.
    """
    points = [start]
    current = start
    for target in list(waypoints) + [end]:
        mid_x = (current.x + target.x) / 2
        mid_y = (current.y + target.y) / 2
        if abs(target.x - current.x) > abs(target.y - current.y):
            points.append(Point(mid_x, current.y))
            points.append(Point(mid_x, target.y))
        else:
            points.append(Point(current.x, mid_y))
            points.append(Point(target.x, mid_y))
        points.append(target)
        current = target
    return simplify_path(points)


class Connector(Element):
    """
    A polyline between two endpoints, with optional arrowheads and label.

    Connectors are layout overlays: containers neither move nor measure
    them.
    """

    layout_overlay = True

    def __init__(
        self,
        start: Endpoint,
        end: Endpoint,
        routing: str = "straight",
        waypoints: Optional[Sequence[PointLike]] = None,
        obstacles: Optional[Sequence[Union[Element, Obstacle]]] = None,
        arrow: str = "end",
        label: Optional[str] = None,
        label_min_distance: float = DEFAULT_LABEL_DISTANCE,
        grid_size: float = DEFAULT_GRID_SIZE,
        padding: float = DEFAULT_PADDING,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            z_index=z_index,
            style=Style.coerce(style).with_defaults(CONNECTOR_STYLE),
            name=name,
        )
        if routing not in ROUTING_MODES:
            raise ConfigurationError(
                f"{self.label}: invalid routing {routing!r}; expected one of: {', '.join(ROUTING_MODES)}"
            )
        if arrow not in ARROW_MODES:
            raise ConfigurationError(
                f"{self.label}: invalid arrow {arrow!r}; expected one of: {', '.join(ARROW_MODES)}"
            )
        self.start = start
        self.end = end
        self.routing = routing
        self.waypoints = [as_point(p) for p in waypoints or []]
        self.obstacles = list(obstacles or [])
        self.arrow = arrow
        self.text = label
        self.label_min_distance = label_min_distance
        self.grid_size = grid_size
        self.padding = padding

    def obstacle_rects(self) -> List[Obstacle]:
        rects = []
        for item in self.obstacles:
            rects.append(item if isinstance(item, Obstacle) else Obstacle.from_element(item))
        return rects

    def path(self, trace=None) -> List[Point]:
        """World-space points of the connector."""
        start = _resolve(self.start)
        end = _resolve(self.end)
        if self.routing == "straight":
            return [start] + self.waypoints + [end]
        if self.routing == "orthogonal":
            return orthogonal_path(start, end, self.waypoints)

        legs = [start] + self.waypoints + [end]
        points: List[Point] = []
        for a, b in zip(legs, legs[1:]):
            leg = find_path(
                a,
                b,
                self.obstacle_rects(),
                grid_size=self.grid_size,
                padding=self.padding,
                trace=trace,
            )
            # Snapped grid ends are joined to the exact endpoints by an elbow
            if leg[0] != a:
                leg[:0] = [a, Point(leg[0].x, a.y)]
            if leg[-1] != b:
                leg.extend([Point(b.x, leg[-1].y), b])
            points.extend(leg if not points else leg[1:])
        return simplify_path(points)

    def label_position(self, trace=None) -> Optional[Point]:
        if not self.text:
            return None
        return calculate_label_position(self.path(trace), self.label_min_distance)

    def local_vertices(self) -> List[Point]:
        to_local = self.world_transform().inverse()
        return to_local.apply_all(self.path())

    def _svg_node(self, ctx):
        path = self.path(ctx.trace)
        stroke = str(self.style.get("stroke"))
        attrs = {"points": fmt_points(path)}
        attrs.update(self.style.to_attributes())
        if self.arrow in ("end", "both"):
            attrs["marker-end"] = f"url(#{ctx.arrow_marker(stroke, ARROW_SIZE)})"
        if self.arrow == "both":
            attrs["marker-start"] = f"url(#{ctx.arrow_marker(stroke, ARROW_SIZE, reverse=True)})"
        line = svg_element("polyline", attrs)
        if not self.text:
            return line

        group = svg_element("g")
        group.append(line)
        pos = calculate_label_position(path, self.label_min_distance)
        width = len(self.text) * LABEL_CHAR_WIDTH
        group.append(
            svg_element(
                "rect",
                {
                    "x": pos.x - width / 2 - LABEL_PADDING,
                    "y": pos.y - LABEL_HEIGHT / 2 - LABEL_PADDING,
                    "width": width + LABEL_PADDING * 2,
                    "height": LABEL_HEIGHT + LABEL_PADDING * 2,
                    "fill": LABEL_BACKGROUND,
                    "stroke": stroke,
                    "stroke-width": float(self.style.get("stroke_width")) * 0.5,
                },
            )
        )
        group.append(
            svg_element(
                "text",
                {
                    "x": pos.x,
                    "y": pos.y,
                    "text-anchor": "middle",
                    "dominant-baseline": "middle",
                    "font-size": LABEL_FONT_SIZE,
                    "fill": stroke,
                },
                text=self.text,
            )
        )
        return group
