"""
Concrete shapes.

Classes:
    Side: A directed edge with length, direction and normals.
    Rectangle: Border-box shape with a box model; base of containers.
    Text: A rectangle sized from its text content.
    Circle: A circle positioned by its center.
    Line: A straight segment between two local points.
    Polyline: An open chain of segments.
    Polygon: An arbitrary closed polygon.
    RegularPolygon: An n-sided regular polygon positioned by its center.
    Triangle: Right, equilateral or isosceles triangle.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .box_model import Box, BoxModel
from .errors import ConfigurationError, GeometryError
from .element import Element, anchor_fraction
from .models import Bounds, Point, PointLike, as_point
from .render import fmt_points, rotation_attr, svg_element
from .style import Style, StyleLike
from .transform import Transform

# =============================================================================
# TEXT ESTIMATION
# =============================================================================
# Text extent is estimated, not measured: no font metrics are available.

DEFAULT_FONT_SIZE = 16.0
# Average glyph advance as a fraction of the font size
CHAR_WIDTH_RATIO = 0.6
# Line box height as a fraction of the font size
LINE_HEIGHT_RATIO = 1.2


@dataclass(frozen=True)
class Side:
    """
    A directed edge from `start` to `end`.

    Attributes:
        start: First endpoint.
        end: Second endpoint.
    """

    start: Point
    end: Point

    @property
    def vector(self) -> Point:
        return self.end - self.start

    @property
    def length(self) -> float:
        return self.vector.length

    @property
    def center(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)

    @property
    def angle(self) -> float:
        """Angle in degrees; 0 points right, 90 points down."""
        v = self.vector
        return math.degrees(math.atan2(v.y, v.x))

    def _require_length(self, what: str) -> float:
        length = self.length
        if length == 0:
            raise GeometryError(
                f"Cannot compute {what} of zero-length side at ({self.start.x:g}, {self.start.y:g})"
            )
        return length

    @property
    def direction(self) -> Point:
        """Unit vector from start to end."""
        length = self._require_length("direction")
        v = self.vector
        return Point(v.x / length, v.y / length)

    @property
    def outward_normal(self) -> Point:
        """Unit normal pointing out of a polygon wound clockwise on screen."""
        length = self._require_length("outward normal")
        v = self.vector
        return Point(v.y / length, -v.x / length)

    @property
    def inward_normal(self) -> Point:
        length = self._require_length("inward normal")
        v = self.vector
        return Point(-v.y / length, v.x / length)

    def point_at(self, t: float) -> Point:
        """Point at fraction `t` along the side (0 = start, 1 = end)."""
        return self.start + self.vector * t

    def intersection(self, other: "Side", segments_only: bool = True) -> Optional[Point]:
        """
        Intersection point with another side.

        Returns None for parallel sides, or, when `segments_only` is set,
        when the crossing lies outside either segment.
        """
        p, r = self.start, self.vector
        q, s = other.start, other.vector
        denom = r.x * s.y - r.y * s.x
        if abs(denom) < 1e-12:
            return None
        qp = q - p
        t = (qp.x * s.y - qp.y * s.x) / denom
        u = (qp.x * r.y - qp.y * r.x) / denom
        if segments_only and not (0 <= t <= 1 and 0 <= u <= 1):
            return None
        return self.point_at(t)


def _world_sides(element: Element) -> List[Side]:
    corners = element.transformed_corners()
    return [Side(corners[i], corners[(i + 1) % len(corners)]) for i in range(len(corners))]


# =============================================================================
# RECTANGLE
# =============================================================================


class Rectangle(Element):
    """
    A rectangle whose width and height are its border box.

    The local origin is the top-left corner of the border box and the pivot
    is its center. Margin is outside the border box, so it does not change
    the drawn rectangle; border and padding shrink the content box.
    """

    def __init__(
        self,
        width: float = 0.0,
        height: float = 0.0,
        x: Optional[float] = None,
        y: Optional[float] = None,
        box_model=None,
        corner_radius: float = 0.0,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(x=x, y=y, rotation=rotation, z_index=z_index, style=style, name=name)
        if width < 0 or height < 0:
            raise ConfigurationError(
                f"{self.label}: size must be non-negative, got {width:g} x {height:g}"
            )
        self.box_model = BoxModel.from_config(box_model)
        self.corner_radius = float(corner_radius)
        self._width = float(width)
        self._height = float(height)
        self.box_model.content_size(self._width, self._height, owner=self.label)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def set_size(self, width: float, height: float) -> None:
        """
        Resize the border box.

        Raises:
            ConfigurationError: If the new size leaves a negative content box.
        """
        self._resize(width, height)
        self._invalidate_layout()

    def _resize(self, width: float, height: float) -> None:
        self.box_model.content_size(width, height, owner=self.label)
        self._width = float(width)
        self._height = float(height)

    # Box accessors, relative to the border-box origin

    @property
    def margin_box(self) -> Box:
        return self.box_model.margin_box(self._width, self._height)

    @property
    def border_box(self) -> Box:
        return self.box_model.border_box(self._width, self._height)

    @property
    def padding_box(self) -> Box:
        return self.box_model.padding_box(self._width, self._height)

    @property
    def content_box(self) -> Box:
        return self.box_model.content_box(self._width, self._height, owner=self.label)

    @property
    def content_width(self) -> float:
        return self.content_box.width

    @property
    def content_height(self) -> float:
        return self.content_box.height

    def local_pivot(self) -> Point:
        return Point(self._width / 2, self._height / 2)

    def local_vertices(self) -> List[Point]:
        return [
            Point(0.0, 0.0),
            Point(self._width, 0.0),
            Point(self._width, self._height),
            Point(0.0, self._height),
        ]

    def sides(self) -> List[Side]:
        """World-space sides, clockwise from the top edge."""
        return _world_sides(self)

    def anchor(self, name: str = "center", box: str = "border") -> Point:
        """
        World-space anchor on one of the nested boxes.

        Args:
            name: Anchor name (center, top, top_left, ...).
            box: One of "margin", "border", "padding" or "content".
        """
        boxes = {
            "margin": lambda: self.margin_box,
            "border": lambda: self.border_box,
            "padding": lambda: self.padding_box,
            "content": lambda: self.content_box,
        }
        if box not in boxes:
            raise ConfigurationError(f"{self.label}: unknown box {box!r}; expected {', '.join(boxes)}")
        fx, fy = anchor_fraction(name)
        b = boxes[box]()
        local = Point(b.x + fx * b.width, b.y + fy * b.height)
        return self.world_transform().apply(local)

    def _world_frame(self):
        transform = self.world_transform()
        origin = transform.apply(Point(0.0, 0.0))
        return origin, transform.rotation_degrees

    def _svg_node(self, ctx):
        origin, angle = self._world_frame()
        attrs = {
            "x": origin.x,
            "y": origin.y,
            "width": self._width,
            "height": self._height,
            "rx": self.corner_radius or None,
            "transform": rotation_attr(angle, origin),
        }
        attrs.update(self.style.to_attributes())
        return svg_element("rect", attrs)


class Text(Rectangle):
    """
    A block of text laid out in a rectangle.

    Without an explicit size, the border box is estimated from the text:
    ``longest line * font_size * CHAR_WIDTH_RATIO`` wide and
    ``lines * font_size * LINE_HEIGHT_RATIO`` tall, plus border and padding.
    """

    def __init__(
        self,
        content: str,
        font_size: Optional[float] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        align: str = "start",
        x: Optional[float] = None,
        y: Optional[float] = None,
        box_model=None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        style = Style.coerce(style)
        if font_size is not None:
            style = style.merged({"font_size": font_size})
        if align not in ("start", "middle", "end"):
            raise ConfigurationError(f"Invalid text align {align!r}; expected start, middle or end")
        self.content = str(content)
        self.align = align
        model = BoxModel.from_config(box_model)
        size = float(style.get("font_size", DEFAULT_FONT_SIZE))
        est_w, est_h = model.border_size_for_content(
            max((len(line) for line in self.lines_of(self.content)), default=0) * size * CHAR_WIDTH_RATIO,
            len(self.lines_of(self.content)) * size * LINE_HEIGHT_RATIO,
        )
        super().__init__(
            width=est_w if width is None else width,
            height=est_h if height is None else height,
            x=x,
            y=y,
            box_model=model,
            rotation=rotation,
            z_index=z_index,
            style=style,
            name=name,
        )

    @staticmethod
    def lines_of(content: str) -> List[str]:
        return content.split("\n") if content else [""]

    @property
    def lines(self) -> List[str]:
        return self.lines_of(self.content)

    @property
    def font_size(self) -> float:
        return float(self.style.get("font_size", DEFAULT_FONT_SIZE))

    def _svg_node(self, ctx):
        origin, angle = self._world_frame()
        content = self.content_box
        anchor_x = {"start": 0.0, "middle": 0.5, "end": 1.0}[self.align]
        x = origin.x + content.x + anchor_x * content.width
        line_height = self.font_size * LINE_HEIGHT_RATIO
        attrs = {
            "x": x,
            "y": origin.y + content.y,
            "dominant-baseline": "text-before-edge",
            "text-anchor": self.align if self.align != "start" else None,
            "transform": rotation_attr(angle, origin),
        }
        attrs.update(self.style.to_attributes())
        node = svg_element("text", attrs)
        lines = self.lines
        if len(lines) == 1:
            node.text = lines[0]
            return node
        for i, line in enumerate(lines):
            node.append(
                svg_element(
                    "tspan",
                    {"x": x, "y": origin.y + content.y + i * line_height},
                    text=line,
                )
            )
        return node


# =============================================================================
# CIRCLE & LINE
# =============================================================================


class Circle(Element):
    """A circle whose position is its center."""

    def __init__(
        self,
        radius: float,
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(x=x, y=y, rotation=rotation, z_index=z_index, style=style, name=name)
        if radius < 0:
            raise ConfigurationError(f"{self.label}: radius must be non-negative, got {radius:g}")
        self.radius = float(radius)

    def local_vertices(self) -> List[Point]:
        r = self.radius
        return [Point(-r, -r), Point(r, -r), Point(r, r), Point(-r, r)]

    def _geometry_bounds(self, transform: Transform) -> Optional[Bounds]:
        c = transform.apply(Point(0.0, 0.0))
        r = self.radius
        return Bounds(c.x - r, c.y - r, c.x + r, c.y + r)

    def point_at_angle(self, degrees: float) -> Point:
        """World-space point on the circumference (0 = right, 90 = down)."""
        rad = math.radians(degrees)
        local = Point(self.radius * math.cos(rad), self.radius * math.sin(rad))
        return self.world_transform().apply(local)

    def _svg_node(self, ctx):
        c = self.world_transform().apply(Point(0.0, 0.0))
        attrs = {"cx": c.x, "cy": c.y, "r": self.radius}
        attrs.update(self.style.to_attributes())
        return svg_element("circle", attrs)


class Line(Element):
    """A segment between two points given in the line's local frame."""

    def __init__(
        self,
        start: PointLike,
        end: PointLike,
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(x=x, y=y, rotation=rotation, z_index=z_index, style=style, name=name)
        self.start = as_point(start)
        self.end = as_point(end)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def local_pivot(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)

    def local_vertices(self) -> List[Point]:
        return [self.start, self.end]

    def side(self) -> Side:
        a, b = self.transformed_corners()
        return Side(a, b)

    def _svg_node(self, ctx):
        a, b = self.transformed_corners()
        attrs = {"x1": a.x, "y1": a.y, "x2": b.x, "y2": b.y}
        attrs.update(self.style.to_attributes())
        return svg_element("line", attrs)


class Polyline(Element):
    """An open chain of segments through local points."""

    def __init__(
        self,
        points: Sequence[PointLike],
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            x=x,
            y=y,
            rotation=rotation,
            z_index=z_index,
            style=Style.coerce(style).with_defaults({"fill": "none"}),
            name=name,
        )
        self.points = [as_point(p) for p in points]
        if len(self.points) < 2:
            raise ConfigurationError(
                f"{self.label}: a polyline needs at least 2 points, got {len(self.points)}"
            )

    def local_pivot(self) -> Point:
        n = len(self.points)
        return Point(sum(p.x for p in self.points) / n, sum(p.y for p in self.points) / n)

    def local_vertices(self) -> List[Point]:
        return list(self.points)

    def _svg_node(self, ctx):
        attrs = {"points": fmt_points(self.transformed_corners())}
        attrs.update(self.style.to_attributes())
        return svg_element("polyline", attrs)


# =============================================================================
# POLYGONS
# =============================================================================


class Polygon(Element):
    """A closed polygon; the pivot is the vertex centroid."""

    def __init__(
        self,
        points: Sequence[PointLike],
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(x=x, y=y, rotation=rotation, z_index=z_index, style=style, name=name)
        self.points = [as_point(p) for p in points]
        if len(self.points) < 3:
            raise ConfigurationError(
                f"{self.label}: a polygon needs at least 3 points, got {len(self.points)}"
            )

    def local_pivot(self) -> Point:
        n = len(self.points)
        return Point(sum(p.x for p in self.points) / n, sum(p.y for p in self.points) / n)

    def local_vertices(self) -> List[Point]:
        return list(self.points)

    def sides(self) -> List[Side]:
        return _world_sides(self)

    def _svg_node(self, ctx):
        attrs = {"points": fmt_points(self.transformed_corners())}
        attrs.update(self.style.to_attributes())
        return svg_element("polygon", attrs)


class RegularPolygon(Polygon):
    """
    A regular polygon centered on its position.

    The first vertex sits at `start_angle` degrees (default -90, straight up).
    """

    def __init__(
        self,
        sides: int,
        radius: float,
        start_angle: float = -90.0,
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        if sides < 3:
            raise ConfigurationError(f"RegularPolygon needs at least 3 sides, got {sides}")
        if radius <= 0:
            raise ConfigurationError(f"RegularPolygon radius must be positive, got {radius:g}")
        self.radius = float(radius)
        step = 360.0 / sides
        points = [
            Point(
                radius * math.cos(math.radians(start_angle + i * step)),
                radius * math.sin(math.radians(start_angle + i * step)),
            )
            for i in range(sides)
        ]
        super().__init__(points, x=x, y=y, rotation=rotation, z_index=z_index, style=style, name=name)

    def local_pivot(self) -> Point:
        return Point(0.0, 0.0)


TRIANGLE_KINDS = ("right", "equilateral", "isosceles")
TRIANGLE_ORIENTATIONS = ("top_left", "top_right", "bottom_left", "bottom_right")


class Triangle(Polygon):
    """
    A triangle built from side lengths.

    Kinds:
        right: legs `a` and `b` (b defaults to a); `orientation` names the
            corner holding the right angle.
        equilateral: side `a`, pointing up.
        isosceles: base `a` and height `b` (defaults to a), pointing up.

    Vertices are shifted so the bounding box starts at the local origin.
    """

    def __init__(
        self,
        kind: str,
        a: float,
        b: Optional[float] = None,
        orientation: str = "bottom_left",
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        if kind not in TRIANGLE_KINDS:
            raise ConfigurationError(f"Invalid triangle kind {kind!r}; expected one of: {', '.join(TRIANGLE_KINDS)}")
        if orientation not in TRIANGLE_ORIENTATIONS:
            raise ConfigurationError(
                f"Invalid triangle orientation {orientation!r}; "
                f"expected one of: {', '.join(TRIANGLE_ORIENTATIONS)}"
            )
        if a <= 0 or (b is not None and b <= 0):
            raise ConfigurationError(f"Triangle sides must be positive, got a={a!r}, b={b!r}")
        self.kind = kind
        self.orientation = orientation
        points = self._vertices(kind, float(a), float(b if b is not None else a), orientation)
        bounds = Bounds.from_points(points)
        points = [Point(p.x - bounds.min_x, p.y - bounds.min_y) for p in points]
        super().__init__(points, x=x, y=y, rotation=rotation, z_index=z_index, style=style, name=name)

    @staticmethod
    def _vertices(kind: str, a: float, b: float, orientation: str) -> List[Point]:
        if kind == "right":
            sx = -1.0 if orientation.endswith("right") else 1.0
            sy = -1.0 if orientation.startswith("bottom") else 1.0
            return [Point(0.0, 0.0), Point(sx * a, 0.0), Point(0.0, sy * b)]
        if kind == "equilateral":
            h = a * math.sqrt(3) / 2
            return [Point(-a / 2, h / 3), Point(a / 2, h / 3), Point(0.0, -2 * h / 3)]
        return [Point(-a / 2, b / 2), Point(a / 2, b / 2), Point(0.0, -b / 2)]
