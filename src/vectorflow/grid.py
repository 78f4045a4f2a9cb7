"""
Column, grid and overlay helper layouts.

Columns and Grid are plain containers built from other containers, so every
column or cell is itself a Container children can be added to. ZStack
overlays its children instead of stacking them.
"""

from typing import List, Optional

from .container import Container
from .errors import ConfigurationError, ElementLookupError
from .models import Direction
from .style import StyleLike


class Columns(Container):
    """
    A horizontal row of equally wide columns separated by a gutter.

    Args:
        count: Number of columns.
        column_width: Border-box width of each column.
        gutter: Gap between columns.
        height: Column height, a number or "auto".
        column_direction: Layout mode inside each column.
        column_spacing: Spacing between children inside a column.
        column_alignment: Cross-axis alignment inside each column.
        column_style: Style of each column's background.
    """

    def __init__(
        self,
        count: int,
        column_width: float,
        gutter: float = 0.0,
        height="auto",
        column_direction="stack-vertical",
        column_spacing: float = 0.0,
        column_alignment="start",
        column_style: StyleLike = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        box_model=None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        if count < 1:
            raise ConfigurationError(f"Columns needs at least one column, got {count}")
        super().__init__(
            direction=Direction.STACK_HORIZONTAL,
            spacing=gutter,
            x=x,
            y=y,
            box_model=box_model,
            style=style,
            name=name,
        )
        self._columns: List[Container] = []
        for i in range(count):
            column = Container(
                direction=column_direction,
                spacing=column_spacing,
                cross_axis_alignment=column_alignment,
                width=column_width,
                height=height,
                style=column_style,
                name=f"{name}-column-{i}" if name else None,
            )
            self.add_child(column)
            self._columns.append(column)
        self.arrange()

    @property
    def columns(self) -> List[Container]:
        return list(self._columns)

    def column(self, index: int) -> Container:
        """
        Column at `index`.

        Raises:
            ElementLookupError: If the index is out of bounds.
        """
        if not 0 <= index < len(self._columns):
            raise ElementLookupError(
                f"{self.label}: column {index} is out of bounds (has {len(self._columns)} columns)"
            )
        return self._columns[index]


class Grid(Container):
    """
    Rows x columns of fixed-size cells.

    Rows are horizontal stacks inside a vertical stack; each cell is a
    bounded container of `cell_width` x `cell_height`.
    """

    def __init__(
        self,
        rows: int,
        columns: int,
        cell_width: float,
        cell_height: float,
        gutter: float = 0.0,
        cell_style: StyleLike = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        box_model=None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        if rows < 1 or columns < 1:
            raise ConfigurationError(f"Grid needs at least one row and column, got {rows} x {columns}")
        super().__init__(
            direction=Direction.STACK_VERTICAL,
            spacing=gutter,
            x=x,
            y=y,
            box_model=box_model,
            style=style,
            name=name,
        )
        self.row_count = rows
        self.column_count = columns
        self._cells: List[List[Container]] = []
        for r in range(rows):
            row = Container(direction=Direction.STACK_HORIZONTAL, spacing=gutter)
            self.add_child(row)
            cells = []
            for c in range(columns):
                cell = Container(
                    direction=Direction.BOUNDED,
                    width=cell_width,
                    height=cell_height,
                    style=cell_style,
                )
                row.add_child(cell)
                cells.append(cell)
            self._cells.append(cells)
        self.arrange()

    def cell(self, row: int, column: int) -> Container:
        """
        Cell at (`row`, `column`).

        Raises:
            ElementLookupError: If either index is out of bounds.
        """
        if not (0 <= row < self.row_count and 0 <= column < self.column_count):
            raise ElementLookupError(
                f"{self.label}: cell ({row}, {column}) is out of bounds "
                f"(grid is {self.row_count} x {self.column_count})"
            )
        return self._cells[row][column]

    def row(self, index: int) -> List[Container]:
        if not 0 <= index < self.row_count:
            raise ElementLookupError(f"{self.label}: row {index} is out of bounds (has {self.row_count} rows)")
        return list(self._cells[index])

    def column(self, index: int) -> List[Container]:
        if not 0 <= index < self.column_count:
            raise ElementLookupError(
                f"{self.label}: column {index} is out of bounds (has {self.column_count} columns)"
            )
        return [cells[index] for cells in self._cells]


HORIZONTAL_ALIGNS = ("left", "center", "right")
VERTICAL_ALIGNS = ("top", "center", "bottom")


class ZStack(Container):
    """
    Overlays its children in the content box.

    Every child is aligned on both axes and shifted by ``index *
    layer_offset``, towards the bottom-right for left/top/center alignment
    and towards the top-left for right/bottom. Later children are drawn on
    top. Explicitly positioned children keep their coordinates. Auto axes
    grow to fit every layer.

    Example:
        >>> badge = ZStack(width=100, height=100)
        >>> _ = badge.add_child(Container(width=100, height=100))
        >>> dot = badge.add_child(Container(width=20, height=20))
        >>> badge.arrange()
        >>> dot.x, dot.y
        (40.0, 40.0)
    """

    def __init__(
        self,
        horizontal_align: str = "center",
        vertical_align: str = "center",
        layer_offset: float = 0.0,
        width="auto",
        height="auto",
        x: Optional[float] = None,
        y: Optional[float] = None,
        box_model=None,
        corner_radius: float = 0.0,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        if horizontal_align not in HORIZONTAL_ALIGNS:
            raise ConfigurationError(
                f"Invalid horizontal_align {horizontal_align!r}; expected one of: {', '.join(HORIZONTAL_ALIGNS)}"
            )
        if vertical_align not in VERTICAL_ALIGNS:
            raise ConfigurationError(
                f"Invalid vertical_align {vertical_align!r}; expected one of: {', '.join(VERTICAL_ALIGNS)}"
            )
        if layer_offset < 0:
            raise ConfigurationError(f"layer_offset must be non-negative, got {layer_offset!r}")
        super().__init__(
            direction=Direction.FREEFORM,
            width=width,
            height=height,
            x=x,
            y=y,
            box_model=box_model,
            corner_radius=corner_radius,
            z_index=z_index,
            style=style,
            name=name,
        )
        self.horizontal_align = horizontal_align
        self.vertical_align = vertical_align
        self.layer_offset = float(layer_offset)

    @staticmethod
    def _required(align: str, extent: float, shift: float) -> float:
        # A centered layer moves away from the center, so it needs twice the shift
        return extent + (2 * shift if align == "center" else shift)

    @staticmethod
    def _aligned(align: str, origin: float, available: float, extent: float, shift: float) -> float:
        if align in ("left", "top"):
            return origin + shift
        if align in ("right", "bottom"):
            return origin + available - extent - shift
        return origin + (available - extent) / 2 + shift

    def _layout_pass(self, trace) -> None:
        children = self.layout_children()
        origin = self._content_origin()

        # Pass 1: measure
        content_w = content_h = 0.0
        for index, child in enumerate(children):
            bounds = self._extent(child)
            if child.has_explicit_position:
                content_w = max(content_w, bounds.max_x - origin.x)
                content_h = max(content_h, bounds.max_y - origin.y)
                continue
            shift = index * self.layer_offset
            content_w = max(content_w, self._required(self.horizontal_align, bounds.width, shift))
            content_h = max(content_h, self._required(self.vertical_align, bounds.height, shift))
        self._fit_content(content_w, content_h)

        # Pass 2: place with the final content size
        content = self.content_box
        for index, child in enumerate(children):
            if child.has_explicit_position:
                continue
            bounds = self._extent(child)
            shift = index * self.layer_offset
            x = self._aligned(self.horizontal_align, origin.x, content.width, bounds.width, shift)
            y = self._aligned(self.vertical_align, origin.y, content.height, bounds.height, shift)
            self._place_child_at(child, x, y, bounds)
