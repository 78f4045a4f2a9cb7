"""
Geometric value types and layout enumerations.

This module contains the small immutable values that the rest of the package
passes around: points, axis-aligned bounds, per-axis size modes and the
layout enumerations used by containers.

Classes:
    Point: An immutable 2-D coordinate or vector.
    Bounds: An axis-aligned rectangle given by its min and max corners.
    Fixed: A fixed axis size.
    Auto: An axis sized from the container's children.
    Direction: Container layout mode.
    Alignment: Main-axis and cross-axis alignment.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class Point:
    """
    An immutable 2-D point, also used as a vector.

    Attributes:
        x: Horizontal coordinate (grows to the right).
        y: Vertical coordinate (grows downwards, as in SVG).
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        return (other - self).length

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[Point, Tuple[float, float]]


def as_point(value: PointLike) -> Point:
    """Coerce an (x, y) tuple or Point into a Point."""
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


@dataclass(frozen=True)
class Bounds:
    """
    Axis-aligned rectangle described by its extreme coordinates.

    Attributes:
        min_x: Left edge.
        min_y: Top edge.
        max_x: Right edge.
        max_y: Bottom edge.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Optional["Bounds"]:
        """Smallest bounds enclosing the points, or None for no points."""
        points = list(points)
        if not points:
            return None
        return cls(
            min(p.x for p in points),
            min(p.y for p in points),
            max(p.x for p in points),
            max(p.y for p in points),
        )

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> "Bounds":
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def top_left(self) -> Point:
        return Point(self.min_x, self.min_y)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners clockwise from the top-left."""
        return (
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        )

    def union(self, other: Optional["Bounds"]) -> "Bounds":
        if other is None:
            return self
        return Bounds(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def expand(self, amount: float) -> "Bounds":
        return Bounds(
            self.min_x - amount,
            self.min_y - amount,
            self.max_x + amount,
            self.max_y + amount,
        )

    def translate(self, dx: float, dy: float) -> "Bounds":
        return Bounds(self.min_x + dx, self.min_y + dy, self.max_x + dx, self.max_y + dy)

    def contains(self, point: Point, inclusive: bool = True) -> bool:
        if inclusive:
            return (
                self.min_x <= point.x <= self.max_x
                and self.min_y <= point.y <= self.max_y
            )
        return self.min_x < point.x < self.max_x and self.min_y < point.y < self.max_y


def union_all(bounds: Iterable[Optional[Bounds]]) -> Optional[Bounds]:
    """Union of every non-empty bounds, or None if there are none."""
    result: Optional[Bounds] = None
    for b in bounds:
        if b is None:
            continue
        result = b if result is None else result.union(b)
    return result


# =============================================================================
# SIZE MODES
# =============================================================================


@dataclass(frozen=True)
class Fixed:
    """A fixed border-box size along one axis."""

    value: float

    def __post_init__(self):
        if self.value < 0:
            raise ConfigurationError(f"Fixed size must be non-negative, got {self.value}")


@dataclass(frozen=True)
class Auto:
    """An axis whose size is measured from the container's children."""

    pass


AUTO = Auto()

SizeMode = Union[Fixed, Auto]


def parse_size_mode(value: Union[SizeMode, float, str, None], what: str = "size") -> SizeMode:
    """
    Resolve a user-facing size value into a size mode.

    Accepts a Fixed/Auto instance, a non-negative number, or the string
    "auto". None is treated as "auto".
    """
    if isinstance(value, (Fixed, Auto)):
        return value
    if value is None:
        return AUTO
    if isinstance(value, str):
        if value.strip().lower() == "auto":
            return AUTO
        raise ConfigurationError(f"Invalid {what} {value!r}: expected a number or 'auto'")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"Invalid {what} {value!r}: expected a number or 'auto'")
    if value < 0:
        raise ConfigurationError(f"Invalid {what} {value!r}: must be non-negative")
    return Fixed(float(value))


# =============================================================================
# LAYOUT ENUMERATIONS
# =============================================================================


class Direction(Enum):
    """Layout mode of a container."""

    STACK_HORIZONTAL = "stack-horizontal"
    STACK_VERTICAL = "stack-vertical"
    BOUNDED = "bounded"
    FREEFORM = "freeform"

    @property
    def is_stack(self) -> bool:
        return self in (Direction.STACK_HORIZONTAL, Direction.STACK_VERTICAL)

    @classmethod
    def parse(cls, value: Union["Direction", str]) -> "Direction":
        if isinstance(value, Direction):
            return value
        key = str(value).strip().lower().replace("_", "-")
        key = _DIRECTION_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        valid = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"Invalid container direction {value!r}; expected one of: {valid}")


_DIRECTION_ALIASES = {
    "horizontal": "stack-horizontal",
    "vertical": "stack-vertical",
    "none": "bounded",
}


class Alignment(Enum):
    """Alignment of children along an axis of a container."""

    START = "start"
    CENTER = "center"
    END = "end"
    SPACE_BETWEEN = "space-between"

    @classmethod
    def parse(cls, value: Union["Alignment", str], axis: str = "main") -> "Alignment":
        if isinstance(value, Alignment):
            member = value
        else:
            key = str(value).strip().lower().replace("_", "-")
            key = _ALIGNMENT_ALIASES.get(key, key)
            member = next((m for m in cls if m.value == key), None)
            if member is None:
                valid = ", ".join(m.value for m in cls)
                raise ConfigurationError(
                    f"Invalid {axis}-axis alignment {value!r}; expected one of: {valid}"
                )
        if axis == "cross" and member is Alignment.SPACE_BETWEEN:
            raise ConfigurationError(
                "Invalid cross-axis alignment 'space-between'; expected start, center or end"
            )
        return member


_ALIGNMENT_ALIASES = {
    "left": "start",
    "top": "start",
    "middle": "center",
    "right": "end",
    "bottom": "end",
    "spread": "space-between",
}
