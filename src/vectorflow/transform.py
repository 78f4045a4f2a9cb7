"""
2-D affine transforms.

Transforms use the SVG matrix convention::

    | a c e |
    | b d f |
    | 0 0 1 |

so a point (x, y) maps to (a*x + c*y + e, b*x + d*y + f). The y axis points
downwards, so a positive rotation turns clockwise on screen.

`t1 @ t2` composes transforms: the result applies t2 first, then t1.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List

from .errors import GeometryError
from .models import Point, PointLike, as_point


@dataclass(frozen=True)
class Transform:
    """An immutable 2-D affine transform."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def translation(cls, dx: float, dy: float) -> "Transform":
        return cls(e=dx, f=dy)

    @classmethod
    def rotation(cls, degrees: float, cx: float = 0.0, cy: float = 0.0) -> "Transform":
        """Rotation by `degrees` about the point (cx, cy)."""
        if not degrees:
            return cls()
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        return cls(
            a=cos,
            b=sin,
            c=-sin,
            d=cos,
            e=cx - cos * cx + sin * cy,
            f=cy - sin * cx - cos * cy,
        )

    def __matmul__(self, other: "Transform") -> "Transform":
        return Transform(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, point: PointLike) -> Point:
        p = as_point(point)
        return Point(
            self.a * p.x + self.c * p.y + self.e,
            self.b * p.x + self.d * p.y + self.f,
        )

    def apply_all(self, points: Iterable[PointLike]) -> List[Point]:
        return [self.apply(p) for p in points]

    def apply_vector(self, vector: PointLike) -> Point:
        """Map a direction vector (ignores the translation part)."""
        v = as_point(vector)
        return Point(self.a * v.x + self.c * v.y, self.b * v.x + self.d * v.y)

    def inverse(self) -> "Transform":
        det = self.a * self.d - self.b * self.c
        if abs(det) < 1e-12:
            raise GeometryError(f"Transform {self} is not invertible (determinant {det})")
        a = self.d / det
        b = -self.b / det
        c = -self.c / det
        d = self.a / det
        return Transform(
            a=a,
            b=b,
            c=c,
            d=d,
            e=-(a * self.e + c * self.f),
            f=-(b * self.e + d * self.f),
        )

    @property
    def rotation_degrees(self) -> float:
        """Rotation angle encoded in the linear part, in degrees."""
        return math.degrees(math.atan2(self.b, self.a))

    @property
    def translation_part(self) -> Point:
        return Point(self.e, self.f)


def normalize(vector: PointLike, what: str = "direction") -> Point:
    """
    Return the unit vector pointing along `vector`.

    Raises:
        GeometryError: If the vector has zero length.
    """
    v = as_point(vector)
    length = v.length
    if length == 0 or not math.isfinite(length):
        raise GeometryError(f"Cannot normalize zero-length {what} vector ({v.x}, {v.y})")
    return Point(v.x / length, v.y / length)


def rotate_point(point: PointLike, degrees: float, center: PointLike = (0.0, 0.0)) -> Point:
    """Rotate `point` about `center` by `degrees` (clockwise on screen)."""
    c = as_point(center)
    return Transform.rotation(degrees, c.x, c.y).apply(point)
