"""
SVG markup assembly.

Elements build their own markup nodes (see `Element.to_svg`); this module
provides the shared pieces: number formatting, the per-render id generator,
the render context that carries shared `<defs>`, and the final document
serialization.
"""

import math
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Dict, Iterable, Optional

from .models import Point

if TYPE_CHECKING:
    from .tracer import LayoutTrace

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

# Decimal places kept in emitted coordinates
COORDINATE_PRECISION = 3


def fmt(value: float) -> str:
    """Compact decimal rendering of a coordinate (no trailing zeros)."""
    if not math.isfinite(value):
        return "0"
    rounded = round(float(value), COORDINATE_PRECISION)
    if rounded == 0:
        return "0"
    text = f"{rounded:.{COORDINATE_PRECISION}f}".rstrip("0").rstrip(".")
    return text


def fmt_points(points: Iterable[Point]) -> str:
    return " ".join(f"{fmt(p.x)},{fmt(p.y)}" for p in points)


def rotation_attr(degrees: float, pivot: Point) -> Optional[str]:
    """SVG rotate() transform attribute, or None for no rotation."""
    if abs(degrees) < 1e-9:
        return None
    return f"rotate({fmt(degrees)} {fmt(pivot.x)} {fmt(pivot.y)})"


def svg_element(tag: str, attrs: Optional[Dict[str, object]] = None, text: Optional[str] = None) -> ET.Element:
    """Create a markup node, dropping attributes whose value is None."""
    node = ET.Element(tag)
    for key, value in (attrs or {}).items():
        if value is None:
            continue
        node.set(key, fmt(value) if isinstance(value, (int, float)) else str(value))
    if text is not None:
        node.text = text
    return node


class IdGenerator:
    """
    Hands out document-unique ids.

    One generator belongs to one render, so repeated renders of the same
    tree produce identical markup.
    """

    def __init__(self):
        self._counters: Dict[str, int] = {}
        self._used = set()

    def next(self, prefix: str) -> str:
        """Next id of the form ``prefix-N``."""
        while True:
            count = self._counters.get(prefix, 0)
            self._counters[prefix] = count + 1
            candidate = f"{prefix}-{count}"
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate

    def unique(self, name: str) -> str:
        """`name` itself if still free, else a numbered variant."""
        if name not in self._used:
            self._used.add(name)
            return name
        return self.next(name)


class RenderContext:
    """
    State shared by all elements during one render.

    Attributes:
        ids: Id generator for this render.
        defs: The document's ``<defs>`` node (markers etc.).
        trace: Optional debug trace receiving render events.
    """

    def __init__(self, trace: Optional["LayoutTrace"] = None):
        self.ids = IdGenerator()
        self.defs = ET.Element("defs")
        self.trace = trace
        self._markers: Dict[tuple, str] = {}

    def arrow_marker(self, color: str, size: float = 10.0, reverse: bool = False) -> str:
        """
        Id of an arrowhead marker with the given color and size.

        Markers are created once per distinct (color, size, direction) and
        shared by every connector that uses them.
        """
        key = (color, size, reverse)
        if key in self._markers:
            return self._markers[key]
        marker_id = self.ids.next("arrow")
        marker = svg_element(
            "marker",
            {
                "id": marker_id,
                "viewBox": "0 0 10 10",
                "refX": 0 if reverse else 10,
                "refY": 5,
                "markerWidth": size,
                "markerHeight": size,
                "markerUnits": "userSpaceOnUse",
                "orient": "auto",
            },
        )
        path = "M 10 0 L 0 5 L 10 10 z" if reverse else "M 0 0 L 10 5 L 0 10 z"
        marker.append(svg_element("path", {"d": path, "fill": color}))
        self.defs.append(marker)
        self._markers[key] = marker_id
        return marker_id


def render_document(
    content: Iterable[ET.Element],
    width: float,
    height: float,
    origin: Point = Point(0.0, 0.0),
    ctx: Optional[RenderContext] = None,
) -> str:
    """
    Serialize an ``<svg>`` document.

    Args:
        content: Top-level markup nodes in drawing order.
        width: Document width in user units.
        height: Document height in user units.
        origin: World point shown at the top-left corner.
        ctx: Render context whose ``<defs>`` are included when non-empty.

    Returns:
        The SVG document as a string.
    """
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NAMESPACE,
            "width": fmt(width),
            "height": fmt(height),
            "viewBox": f"{fmt(origin.x)} {fmt(origin.y)} {fmt(width)} {fmt(height)}",
        },
    )
    if ctx is not None and len(ctx.defs):
        root.append(ctx.defs)
    for node in content:
        root.append(node)
    return ET.tostring(root, encoding="unicode")
