"""
Element tree: ownership, relative positions, transforms and z-order.

Every drawable thing in a diagram is an Element. Elements form a tree in
which a parent exclusively owns its children and each child keeps only a
weak back-reference to its parent. Positions are stored relative to the
parent; absolute positions and transformed geometry are computed on demand
by walking up the ownership chain, so they are never stale.

An element's local frame has its origin at the element's position. Rotation
is applied about the element's pivot (its own center), so the world transform
of an element is::

    parent.world_transform() @ translate(x, y) @ rotate(rotation, pivot)
"""

import logging
import weakref
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationError, ElementLookupError, GeometryError
from .models import Bounds, Point, PointLike, as_point, union_all
from .style import Style, StyleLike
from .transform import Transform, normalize

logger = logging.getLogger(__name__)

# Anchor names and their fractional position within an element's local extent
ANCHORS: Dict[str, Tuple[float, float]] = {
    "center": (0.5, 0.5),
    "top": (0.5, 0.0),
    "bottom": (0.5, 1.0),
    "left": (0.0, 0.5),
    "right": (1.0, 0.5),
    "top_left": (0.0, 0.0),
    "top_right": (1.0, 0.0),
    "bottom_left": (0.0, 1.0),
    "bottom_right": (1.0, 1.0),
}


def anchor_fraction(name: str) -> Tuple[float, float]:
    """Fractional (fx, fy) position of a named anchor."""
    key = name.replace("-", "_")
    key = "".join("_" + ch.lower() if ch.isupper() else ch for ch in key)
    if key not in ANCHORS:
        raise ConfigurationError(
            f"Unknown anchor {name!r}; expected one of: {', '.join(ANCHORS)}"
        )
    return ANCHORS[key]


class Element:
    """
    Base class of every node in a diagram tree.

    Attributes:
        name: Optional caller-chosen name, used in lookups and error messages.
        style: Presentation properties emitted with the element.
        layout_overlay: When True, containers neither place nor measure this
            element (used by connectors, which follow other elements).
    """

    layout_overlay = False

    def __init__(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        self.name = name
        self.style = Style.coerce(style)
        self._parent_ref: Optional[weakref.ref] = None
        self._children: List["Element"] = []
        self._x = float(x or 0.0)
        self._y = float(y or 0.0)
        self._rotation = float(rotation)
        self._z_index = z_index
        self._explicit_position = x is not None or y is not None

    def __repr__(self) -> str:
        return f"<{self.label} at ({self._x:g}, {self._y:g})>"

    @property
    def label(self) -> str:
        """Human-readable identification used in messages."""
        kind = type(self).__name__
        return f"{kind} {self.name!r}" if self.name else kind

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    @property
    def parent(self) -> Optional["Element"]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def children(self) -> Tuple["Element", ...]:
        return tuple(self._children)

    def add_child(self, child: "Element") -> "Element":
        """
        Append `child`, removing it from any previous parent first.

        Re-adding a child that already belongs to this element moves it to
        the end of the children sequence.

        Returns:
            The child, to allow ``box = parent.add_child(Rectangle(...))``.

        Raises:
            ConfigurationError: If `child` is not an Element, or adding it
                would make an element its own ancestor.
        """
        if not isinstance(child, Element):
            raise ConfigurationError(f"{self.label}: cannot add non-element child {child!r}")
        if child is self or child.is_ancestor_of(self):
            raise ConfigurationError(
                f"{self.label}: cannot add {child.label} because it is an ancestor of this element"
            )
        previous = child.parent
        if previous is not None:
            previous._detach(child)
        self._children.append(child)
        child._parent_ref = weakref.ref(self)
        self._child_added(child)
        return child

    def add_children(self, *children: "Element") -> None:
        for child in children:
            self.add_child(child)

    def remove_child(self, child: "Element") -> "Element":
        """
        Remove `child` from this element.

        Raises:
            ElementLookupError: If `child` is not a child of this element.
        """
        if not any(c is child for c in self._children):
            raise ElementLookupError(f"{self.label}: {child.label} is not a child of this element")
        self._detach(child)
        return child

    def _detach(self, child: "Element") -> None:
        self._children = [c for c in self._children if c is not child]
        child._parent_ref = None
        self._child_removed(child)

    def _child_added(self, child: "Element") -> None:
        self._invalidate_layout()

    def _child_removed(self, child: "Element") -> None:
        self._invalidate_layout()

    def child_at(self, index: int) -> "Element":
        """
        Child at `index` in ownership order.

        Raises:
            ElementLookupError: If the index is out of range.
        """
        if not 0 <= index < len(self._children):
            raise ElementLookupError(
                f"{self.label}: child index {index} is out of range "
                f"(element has {len(self._children)} children)"
            )
        return self._children[index]

    def index_of(self, child: "Element") -> int:
        for i, c in enumerate(self._children):
            if c is child:
                return i
        raise ElementLookupError(f"{self.label}: {child.label} is not a child of this element")

    def is_ancestor_of(self, other: "Element") -> bool:
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def root(self) -> "Element":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def iter_tree(self) -> Iterator["Element"]:
        """Pre-order traversal of this element and its descendants."""
        yield self
        for child in self._children:
            yield from child.iter_tree()

    def find(self, name: str) -> "Element":
        """First descendant (or self) with the given name."""
        for element in self.iter_tree():
            if element.name == name:
                return element
        raise ElementLookupError(f"{self.label}: no element named {name!r} in this tree")

    def _invalidate_layout(self) -> None:
        """Reset the layout state of this element and every ancestor."""
        node: Optional[Element] = self
        while node is not None:
            node._layout_dirty()
            node = node.parent

    def _layout_dirty(self) -> None:
        pass

    def _notify_parent(self) -> None:
        parent = self.parent
        if parent is not None:
            parent._invalidate_layout()

    # =========================================================================
    # Z-ORDER
    # =========================================================================

    @property
    def z_index(self) -> Optional[int]:
        return self._z_index

    @z_index.setter
    def z_index(self, value: Optional[int]) -> None:
        self._z_index = value

    def render_order(self) -> List["Element"]:
        """
        Children in drawing order.

        Ascending z-index with unset values counting as 0; the sort is
        stable, so equal keys keep ownership order.
        """
        return sorted(self._children, key=lambda c: c._z_index or 0)

    # =========================================================================
    # POSITION & TRANSFORMS
    # =========================================================================

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def position_offset(self) -> Point:
        """Position relative to the parent."""
        return Point(self._x, self._y)

    @property
    def has_explicit_position(self) -> bool:
        return self._explicit_position

    @property
    def rotation(self) -> float:
        return self._rotation

    def set_position(self, x: float, y: float) -> None:
        """Place the element at (x, y) in its parent's coordinates."""
        self._x = float(x)
        self._y = float(y)
        self._explicit_position = True
        self._notify_parent()

    def move_by(self, dx: float, dy: float) -> None:
        self.set_position(self._x + dx, self._y + dy)

    def _place(self, x: float, y: float) -> None:
        """Layout-internal move: does not mark the position as explicit."""
        self._x = float(x)
        self._y = float(y)

    def translate(self, direction: PointLike, magnitude: float) -> None:
        """
        Move `magnitude` units along `direction`.

        The direction is normalized first, so only its orientation matters.

        Raises:
            GeometryError: If `direction` has zero length.
        """
        unit = normalize(direction, what=f"direction passed to {self.label}.translate()")
        self.move_by(unit.x * magnitude, unit.y * magnitude)

    def rotate(self, degrees: float) -> None:
        """Set the rotation about the element's own center (overwrites)."""
        self._rotation = float(degrees)
        self._notify_parent()

    def position(
        self,
        relative_from: str = "center",
        relative_to: PointLike = (0.0, 0.0),
        x: float = 0.0,
        y: float = 0.0,
    ) -> None:
        """
        Move so that the `relative_from` anchor lands on a world point.

        Args:
            relative_from: Anchor of this element to align, e.g. "top_left".
            relative_to: World-space target point.
            x: Extra horizontal offset added to the target.
            y: Extra vertical offset added to the target.
        """
        target = as_point(relative_to) + Point(x, y)
        delta = target - self.anchor(relative_from)
        local = self.parent_transform().inverse().apply_vector(delta)
        self.set_position(self._x + local.x, self._y + local.y)

    def local_pivot(self) -> Point:
        """Center of rotation in the element's local frame."""
        return Point(0.0, 0.0)

    def local_transform(self) -> Transform:
        """Maps the element's local frame into its parent's frame."""
        transform = Transform.translation(self._x, self._y)
        if self._rotation:
            pivot = self.local_pivot()
            transform = transform @ Transform.rotation(self._rotation, pivot.x, pivot.y)
        return transform

    def parent_transform(self) -> Transform:
        parent = self.parent
        return parent.world_transform() if parent is not None else Transform.identity()

    def world_transform(self) -> Transform:
        """Maps the element's local frame into world space."""
        transform = self.local_transform()
        node = self.parent
        while node is not None:
            transform = node.local_transform() @ transform
            node = node.parent
        return transform

    def absolute_position(self) -> Point:
        """World-space position of this element's origin."""
        return self.parent_transform().apply(Point(self._x, self._y))

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def local_vertices(self) -> List[Point]:
        """Corner/vertex polygon in the element's local frame."""
        return []

    def transformed_corners(self) -> List[Point]:
        """Local vertices mapped into world space."""
        return self.world_transform().apply_all(self.local_vertices())

    def _geometry_bounds(self, transform: Transform) -> Optional[Bounds]:
        vertices = self.local_vertices()
        if vertices:
            return Bounds.from_points(transform.apply_all(vertices))
        return union_all(
            c._geometry_bounds(transform @ c.local_transform())
            for c in self._children
            if not c.layout_overlay
        )

    def bounding_box(self) -> Optional[Bounds]:
        """World-space axis-aligned bounds, None if there is no geometry."""
        return self._geometry_bounds(self.world_transform())

    def layout_bounds(self) -> Optional[Bounds]:
        """Axis-aligned bounds in the parent's frame."""
        return self._geometry_bounds(self.local_transform())

    def local_extent(self) -> Optional[Bounds]:
        """Unrotated bounds in the element's own frame."""
        return self._geometry_bounds(Transform.identity())

    def anchor(self, name: str = "center") -> Point:
        """
        World-space point of a named anchor (center, top, top_left, ...).

        Anchors are taken on the unrotated local extent and then mapped
        through the world transform, so they follow rotation.
        """
        fx, fy = anchor_fraction(name)
        extent = self.local_extent()
        if extent is None:
            raise GeometryError(f"{self.label} has no geometry to take anchor {name!r} from")
        local = Point(extent.min_x + fx * extent.width, extent.min_y + fy * extent.height)
        return self.world_transform().apply(local)

    @property
    def center(self) -> Point:
        return self.anchor("center")

    # =========================================================================
    # RENDERING
    # =========================================================================

    def _svg_node(self, ctx) -> Optional[ET.Element]:
        """Markup for the element itself, excluding children."""
        return None

    def to_svg(self, ctx) -> Optional[ET.Element]:
        """Markup for the element and its children, children in z-order."""
        node = self._svg_node(ctx)
        if not self._children:
            return node
        group = ET.Element("g")
        if self.name:
            group.set("id", ctx.ids.unique(self.name))
        if node is not None:
            group.append(node)
        for child in self.render_order():
            child_node = child.to_svg(ctx)
            if child_node is not None:
                group.append(child_node)
        return group


class Group(Element):
    """A geometry-less element that only groups its children."""

    pass
