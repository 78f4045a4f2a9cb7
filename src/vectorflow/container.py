"""
Containers: elements that arrange their children.

A container is a rectangle with a layout mode:

- ``stack-horizontal`` / ``stack-vertical`` place each child as it is added,
  one after another along the main axis with `spacing` between them.
- ``bounded`` places children at the content origin unless they were
  positioned explicitly, and re-normalizes its bounds after every insertion.
- ``freeform`` lets children position themselves without resizing, then
  resizes and normalizes once in `finalize()`.

Sizes are resolved per axis: `Fixed` keeps the given border-box size, `Auto`
fits the children. Alignment that depends on the final size is applied by
`arrange()` in two passes: measure the children, then place them.

Classes:
    LayoutState: unarranged / arranging / arranged.
    ContainerConfig: Layout configuration of one container.
    Container: The layout element.
    Artboard: Top-level bounded canvas that renders an SVG document.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from .box_model import BoxModel
from .element import Element
from .errors import ConfigurationError
from .models import (
    Alignment,
    Auto,
    Bounds,
    Direction,
    Fixed,
    Point,
    SizeMode,
    parse_size_mode,
    union_all,
)
from .render import RenderContext, render_document
from .shapes import Rectangle
from .style import Style, StyleLike
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)

# Coordinates closer than this are treated as equal during normalization
NORMALIZE_TOLERANCE = 1e-9

DEFAULT_ARTBOARD_WIDTH = 800.0
DEFAULT_ARTBOARD_HEIGHT = 600.0


class LayoutState(Enum):
    """Lifecycle of a container's arrangement."""

    UNARRANGED = "unarranged"
    ARRANGING = "arranging"
    ARRANGED = "arranged"


_CONFIG_KEYS = {
    "direction": "direction",
    "spacing": "spacing",
    "mainAxisAlignment": "main_axis_alignment",
    "main_axis_alignment": "main_axis_alignment",
    "crossAxisAlignment": "cross_axis_alignment",
    "cross_axis_alignment": "cross_axis_alignment",
    "width": "width",
    "height": "height",
}


@dataclass
class ContainerConfig:
    """
    Layout configuration of a container.

    Attributes:
        direction: Layout mode.
        spacing: Gap inserted between consecutive children on the main axis.
        main_axis_alignment: Distribution of children along the main axis.
        cross_axis_alignment: Placement of each child on the cross axis.
        width: Fixed border-box width or Auto.
        height: Fixed border-box height or Auto.
    """

    direction: Direction = Direction.BOUNDED
    spacing: float = 0.0
    main_axis_alignment: Alignment = Alignment.START
    cross_axis_alignment: Alignment = Alignment.START
    width: SizeMode = field(default_factory=Auto)
    height: SizeMode = field(default_factory=Auto)

    def __post_init__(self):
        self.direction = Direction.parse(self.direction)
        self.main_axis_alignment = Alignment.parse(self.main_axis_alignment, axis="main")
        self.cross_axis_alignment = Alignment.parse(self.cross_axis_alignment, axis="cross")
        self.width = parse_size_mode(self.width, "width")
        self.height = parse_size_mode(self.height, "height")
        if isinstance(self.spacing, bool) or not isinstance(self.spacing, (int, float)):
            raise ConfigurationError(f"Invalid spacing {self.spacing!r}: expected a number")
        if self.spacing < 0:
            raise ConfigurationError(f"Invalid spacing {self.spacing!r}: must be non-negative")
        self.spacing = float(self.spacing)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "ContainerConfig":
        """
        Build a configuration from a mapping.

        Accepts ``direction``, ``spacing``, ``mainAxisAlignment``,
        ``crossAxisAlignment``, ``width`` and ``height``; snake_case variants
        of the alignment keys are accepted too.
        """
        kwargs = {}
        for key, value in config.items():
            if key not in _CONFIG_KEYS:
                raise ConfigurationError(
                    f"Unknown container option {key!r}; expected one of: "
                    "direction, spacing, mainAxisAlignment, crossAxisAlignment, width, height"
                )
            kwargs[_CONFIG_KEYS[key]] = value
        return cls(**kwargs)


class Container(Rectangle):
    """
    A rectangle that lays out its children.

    Example:
        >>> column = Container(direction="stack-vertical", spacing=20)
        >>> _ = column.add_child(Rectangle(100, 50))
        >>> second = column.add_child(Rectangle(100, 80))
        >>> second.y
        70.0
    """

    def __init__(
        self,
        direction="bounded",
        spacing: float = 0.0,
        main_axis_alignment="start",
        cross_axis_alignment="start",
        width="auto",
        height="auto",
        x: Optional[float] = None,
        y: Optional[float] = None,
        box_model=None,
        corner_radius: float = 0.0,
        rotation: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
        config: Optional[ContainerConfig] = None,
    ):
        if config is None:
            config = ContainerConfig(
                direction=direction,
                spacing=spacing,
                main_axis_alignment=main_axis_alignment,
                cross_axis_alignment=cross_axis_alignment,
                width=width,
                height=height,
            )
        self.config = config
        self._state = LayoutState.UNARRANGED
        inset = BoxModel.from_config(box_model).content_inset
        super().__init__(
            width=config.width.value if isinstance(config.width, Fixed) else inset.horizontal,
            height=config.height.value if isinstance(config.height, Fixed) else inset.vertical,
            x=x,
            y=y,
            box_model=box_model,
            corner_radius=corner_radius,
            rotation=rotation,
            z_index=z_index,
            style=style,
            name=name,
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs: Any) -> "Container":
        """Create a container from a configuration mapping (see ContainerConfig.from_dict)."""
        return cls(config=ContainerConfig.from_dict(config), **kwargs)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> LayoutState:
        return self._state

    @property
    def direction(self) -> Direction:
        return self.config.direction

    @property
    def is_arranged(self) -> bool:
        return self._state is LayoutState.ARRANGED

    def _layout_dirty(self) -> None:
        self._state = LayoutState.UNARRANGED

    def set_width_mode(self, value) -> None:
        """Switch the width between a fixed size and "auto"."""
        self.config.width = parse_size_mode(value, f"{self.label} width")
        self._apply_fixed_sizes()
        self._invalidate_layout()

    def set_height_mode(self, value) -> None:
        """Switch the height between a fixed size and "auto"."""
        self.config.height = parse_size_mode(value, f"{self.label} height")
        self._apply_fixed_sizes()
        self._invalidate_layout()

    def set_size(self, width: float, height: float) -> None:
        """Fix both axes to the given border-box size."""
        self.config.width = parse_size_mode(width, f"{self.label} width")
        self.config.height = parse_size_mode(height, f"{self.label} height")
        super().set_size(width, height)

    def _apply_fixed_sizes(self) -> None:
        width, height = self._width, self._height
        if isinstance(self.config.width, Fixed):
            width = self.config.width.value
        if isinstance(self.config.height, Fixed):
            height = self.config.height.value
        self._resize(width, height)

    def _fit_content(self, content_width: Optional[float], content_height: Optional[float]) -> None:
        """Resize auto axes so the content box has the given size."""
        inset = self.box_model.content_inset
        width, height = self._width, self._height
        if content_width is not None and isinstance(self.config.width, Auto):
            width = max(0.0, content_width) + inset.horizontal
        if content_height is not None and isinstance(self.config.height, Auto):
            height = max(0.0, content_height) + inset.vertical
        if (width, height) != (self._width, self._height):
            self._resize(width, height)

    # =========================================================================
    # CHILD PLACEMENT
    # =========================================================================

    def layout_children(self) -> List[Element]:
        """Children that take part in layout, in ownership order."""
        return [c for c in self._children if not c.layout_overlay]

    def _content_origin(self) -> Point:
        inset = self.box_model.content_inset
        return Point(inset.left, inset.top)

    @staticmethod
    def _extent(child: Element) -> Bounds:
        bounds = child.layout_bounds()
        if bounds is None:
            return Bounds(child.x, child.y, child.x, child.y)
        return bounds

    @staticmethod
    def _place_child_at(child: Element, x: float, y: float, bounds: Optional[Bounds] = None) -> None:
        """Move `child` so the top-left of its layout bounds lands on (x, y)."""
        if bounds is None:
            bounds = Container._extent(child)
        child._place(child.x + (x - bounds.min_x), child.y + (y - bounds.min_y))

    def _child_added(self, child: Element) -> None:
        self._invalidate_layout()
        if child.layout_overlay:
            return
        self._state = LayoutState.ARRANGING
        if self.direction.is_stack:
            self._place_stacked(child)
        else:
            if not child.has_explicit_position:
                origin = self._content_origin()
                self._place_child_at(child, origin.x, origin.y)
            if self.direction is Direction.BOUNDED:
                self._normalize()
        logger.debug("%s: placed %s at (%g, %g)", self.label, child.label, child.x, child.y)

    def _child_removed(self, child: Element) -> None:
        self._invalidate_layout()
        if self.direction.is_stack:
            self._restack()
        elif self.direction is Direction.BOUNDED:
            self._normalize()

    def _split(self, bounds: Bounds) -> Tuple[float, float]:
        """(main, cross) extents of a bounds for this container's direction."""
        if self.direction is Direction.STACK_HORIZONTAL:
            return bounds.width, bounds.height
        return bounds.height, bounds.width

    def _to_xy(self, main: float, cross: float) -> Tuple[float, float]:
        if self.direction is Direction.STACK_HORIZONTAL:
            return main, cross
        return cross, main

    def _content_main_cross(self) -> Tuple[float, float]:
        content = self.content_box
        if self.direction is Direction.STACK_HORIZONTAL:
            return content.width, content.height
        return content.height, content.width

    def _cross_is_fixed(self) -> bool:
        mode = self.config.height if self.direction is Direction.STACK_HORIZONTAL else self.config.width
        return isinstance(mode, Fixed)

    def _cross_offset(self, available: float, extent: float) -> float:
        alignment = self.config.cross_axis_alignment
        if alignment is Alignment.CENTER:
            return (available - extent) / 2
        if alignment is Alignment.END:
            return available - extent
        return 0.0

    def _measure_stack(self, children: List[Element]) -> Tuple[float, float]:
        """Natural (main, cross) content size of the stacked children."""
        mains, crosses = [], []
        for child in children:
            main, cross = self._split(self._extent(child))
            mains.append(main)
            crosses.append(cross)
        total_main = sum(mains) + self.config.spacing * max(0, len(children) - 1)
        return total_main, max(crosses, default=0.0)

    def _fit_stack(self, natural_main: float, natural_cross: float) -> None:
        content_w, content_h = self._to_xy(natural_main, natural_cross)
        self._fit_content(content_w, content_h)

    def _place_stacked(self, child: Element) -> None:
        """
        Insertion-time placement at the running main-axis offset.

        Cross alignment is applied now only when the cross size is fixed;
        otherwise it waits for `arrange()`.
        """
        children = self.layout_children()
        previous = children[: children.index(child)] if child in children else children
        origin_main, origin_cross = self._split_point(self._content_origin())
        offset = origin_main
        for sibling in previous:
            offset += self._split(self._extent(sibling))[0] + self.config.spacing
        self._fit_stack(*self._measure_stack(children))
        bounds = self._extent(child)
        cross = origin_cross
        if self._cross_is_fixed():
            cross += self._cross_offset(self._content_main_cross()[1], self._split(bounds)[1])
        x, y = self._to_xy(offset, cross)
        self._place_child_at(child, x, y, bounds)

    def _split_point(self, point: Point) -> Tuple[float, float]:
        if self.direction is Direction.STACK_HORIZONTAL:
            return point.x, point.y
        return point.y, point.x

    def _restack(self) -> None:
        children = self.layout_children()
        self._fit_stack(*self._measure_stack(children))
        origin_main, origin_cross = self._split_point(self._content_origin())
        available_cross = self._content_main_cross()[1]
        offset = origin_main
        for child in children:
            bounds = self._extent(child)
            cross = origin_cross
            if self._cross_is_fixed():
                cross += self._cross_offset(available_cross, self._split(bounds)[1])
            x, y = self._to_xy(offset, cross)
            self._place_child_at(child, x, y, bounds)
            offset += self._split(bounds)[0] + self.config.spacing

    # =========================================================================
    # ARRANGEMENT
    # =========================================================================

    def arrange(self, trace: Optional[LayoutTrace] = None) -> None:
        """
        Resolve sizes and positions of this container and its descendants.

        Nested containers are arranged first (post-order). Calling this on an
        already arranged container does nothing.
        """
        if self._state is LayoutState.ARRANGED:
            return
        for nested in _nested_containers(self):
            nested.arrange(trace)
        self._state = LayoutState.ARRANGING
        self._layout_pass(trace)
        self._state = LayoutState.ARRANGED
        logger.debug(
            "%s: arranged %d children, size %gx%g",
            self.label,
            len(self._children),
            self._width,
            self._height,
        )
        if trace is not None:
            trace.add_event(
                "arrange",
                self.label,
                {
                    "direction": self.direction.value,
                    "children": len(self._children),
                    "size": (self._width, self._height),
                },
            )

    def finalize(self, trace: Optional[LayoutTrace] = None) -> None:
        """
        Second phase of freeform layout: fit auto axes and normalize bounds.

        Idempotent: a second call without intervening mutation changes
        nothing.
        """
        self.arrange(trace)

    def _layout_pass(self, trace: Optional[LayoutTrace]) -> None:
        """Place the children of this container once its descendants are arranged."""
        if self.direction.is_stack:
            self._arrange_stack(trace)
        else:
            self._normalize(trace)

    def _arrange_stack(self, trace: Optional[LayoutTrace]) -> None:
        children = self.layout_children()
        # Pass 1: measure
        natural_main, natural_cross = self._measure_stack(children)
        self._fit_stack(natural_main, natural_cross)

        # Pass 2: place with the final content size
        available_main, available_cross = self._content_main_cross()
        origin_main, origin_cross = self._split_point(self._content_origin())
        remaining = max(0.0, available_main - natural_main)
        alignment = self.config.main_axis_alignment
        gap = self.config.spacing
        start = 0.0
        if alignment is Alignment.CENTER:
            start = remaining / 2
        elif alignment is Alignment.END:
            start = remaining
        elif alignment is Alignment.SPACE_BETWEEN and len(children) > 1:
            gap += remaining / (len(children) - 1)

        offset = origin_main + start
        for child in children:
            bounds = self._extent(child)
            main, cross = self._split(bounds)
            x, y = self._to_xy(offset, origin_cross + self._cross_offset(available_cross, cross))
            self._place_child_at(child, x, y, bounds)
            offset += main + gap

    def _normalize(self, trace: Optional[LayoutTrace] = None) -> None:
        """
        Shift children off negative coordinates and fit auto axes.

        A container with both axes fixed keeps the coordinates the caller
        gave. Otherwise both axes are shifted, and only the auto axes are
        resized.
        """
        children = self.layout_children()
        union = union_all(c.layout_bounds() for c in children)
        if union is None:
            self._fit_content(0.0, 0.0)
            return
        origin = self._content_origin()
        shift_x = shift_y = 0.0
        if isinstance(self.config.width, Auto) or isinstance(self.config.height, Auto):
            if union.min_x < origin.x - NORMALIZE_TOLERANCE:
                shift_x = origin.x - union.min_x
            if union.min_y < origin.y - NORMALIZE_TOLERANCE:
                shift_y = origin.y - union.min_y
        if shift_x or shift_y:
            for child in children:
                child._place(child.x + shift_x, child.y + shift_y)
            logger.debug("%s: normalized bounds by (%g, %g)", self.label, shift_x, shift_y)
            if trace is not None:
                trace.add_event("normalize", self.label, {"shift": (shift_x, shift_y)})
        self._fit_content(union.max_x + shift_x - origin.x, union.max_y + shift_y - origin.y)

    # =========================================================================
    # RENDERING
    # =========================================================================

    def _svg_node(self, ctx):
        if not len(self.style):
            return None
        return super()._svg_node(ctx)


def _nested_containers(element: Element) -> Iterator[Container]:
    """Closest descendant containers of `element`."""
    for child in element.children:
        if isinstance(child, Container):
            yield child
        else:
            yield from _nested_containers(child)


class Artboard(Container):
    """
    Top-level canvas.

    A bounded container, 800 x 600 by default; either axis may be "auto" to
    fit the content. `render()` arranges the whole tree and returns the SVG
    document.
    """

    def __init__(
        self,
        width=DEFAULT_ARTBOARD_WIDTH,
        height=DEFAULT_ARTBOARD_HEIGHT,
        background_color: Optional[str] = None,
        box_model=None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        style = Style.coerce(style)
        if background_color is not None:
            style = style.merged({"fill": background_color})
        super().__init__(
            direction=Direction.BOUNDED,
            width=width,
            height=height,
            box_model=box_model,
            style=style,
            name=name,
        )
        self._trace: Optional[LayoutTrace] = None

    def render(self, debug: bool = False) -> str:
        """
        Arrange the tree and serialize it as an SVG document.

        Args:
            debug: Record a LayoutTrace, available from `get_trace()`.
        """
        trace = LayoutTrace(root=self.label) if debug else None
        self._trace = trace
        if trace is not None:
            # force a full pass so the trace covers every container
            for element in self.iter_tree():
                if isinstance(element, Container):
                    element._state = LayoutState.UNARRANGED
        self.arrange(trace)
        ctx = RenderContext(trace)
        content = []
        background = self._svg_node(ctx)
        if background is not None:
            content.append(background)
        for child in self.render_order():
            node = child.to_svg(ctx)
            if node is not None:
                content.append(node)
        if trace is not None:
            trace.add_event("render", self.label, {"nodes": len(content)})
        return render_document(content, self._width, self._height, self.absolute_position(), ctx)

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last `render(debug=True)` call, if any."""
        return self._trace
