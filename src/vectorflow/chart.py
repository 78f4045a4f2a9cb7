"""
Chart composite elements.

A chart is a rectangle (the chart background) whose children are the grid
lines, axes, data marks and labels, all laid out inside a plot area inset by
the chart padding. Data marks are ordinary child elements, so they can be
used as anchors for connectors and annotations.

Classes:
    Chart: Background rectangle and plot area shared by plotted charts.
    BarChart: Vertical or horizontal bars.
    LineChart: One polyline per series, with markers and optional area fill.
    DonutChart: Ring of slices proportional to the data.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .box_model import Insets
from .errors import ConfigurationError, ElementLookupError
from .models import Point
from .shapes import Circle, Line, Polygon, Polyline, Rectangle, Text
from .style import Style, StyleLike

logger = logging.getLogger(__name__)

# =============================================================================
# CHART DEFAULTS
# =============================================================================

CHART_STYLE = {"fill": "#ffffff", "stroke": "#e0e0e0", "stroke_width": 1}
BAR_COLOR = "#2196f3"
BAR_STROKE = "#424242"
GRID_STYLE = {"stroke": "#e0e0e0", "stroke_width": 0.5, "opacity": 0.5}
AXIS_STYLE = {"stroke": "#424242", "stroke_width": 2}
LABEL_FONT_SIZE = 12
LABEL_COLOR = "#424242"

# Space between the chart border and the plot area
CHART_PADDING = {"top": 20, "right": 20, "bottom": 40, "left": 60}

GRID_LINE_COUNT = 5

# Gap between bars as a fraction of the bar thickness
BAR_SPACING = 0.2

# Headroom above the largest value, as a fraction of the value range
VALUE_HEADROOM = 0.1

ORIENTATIONS = ("vertical", "horizontal")

# =============================================================================


@dataclass
class BarDatum:
    """
    One bar of a chart.

    Attributes:
        label: Category label.
        value: Bar value.
        color: Fill color overriding the chart's bar color.
    """

    label: str
    value: float
    color: Optional[str] = None


@dataclass
class RemarkablePoint:
    """A notable bar (maximum, minimum, closest to average)."""

    kind: str
    index: int
    value: float
    label: str


class Chart(Rectangle):
    """
    Background rectangle with a plot area inset by the chart padding.

    Attributes:
        chart_padding: Insets between the border and the plot area.
        plot_x, plot_y: Top-left of the plot area in chart coordinates.
        plot_width, plot_height: Size of the plot area.
    """

    def __init__(
        self,
        width: float,
        height: float,
        chart_padding=None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            width,
            height,
            x=x,
            y=y,
            z_index=z_index,
            style=Style.coerce(style).with_defaults(CHART_STYLE),
            name=name,
        )
        padding = dict(CHART_PADDING)
        if isinstance(chart_padding, dict):
            padding.update(chart_padding)
            self.chart_padding = Insets.parse(padding, "chart padding")
        elif chart_padding is not None:
            self.chart_padding = Insets.parse(chart_padding, "chart padding")
        else:
            self.chart_padding = Insets.parse(padding, "chart padding")

        self.plot_x = self.chart_padding.left
        self.plot_y = self.chart_padding.top
        self.plot_width = width - self.chart_padding.horizontal
        self.plot_height = height - self.chart_padding.vertical
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ConfigurationError(
                f"{self.label}: chart padding leaves no plot area "
                f"({self.plot_width:g} x {self.plot_height:g})"
            )


class BarChart(Chart):
    """
    Vertical or horizontal bar chart.

    The value axis spans ``[min(0, smallest value), largest value + 10% of
    the range]`` unless `min_value` / `max_value` are given.
    """

    def __init__(
        self,
        data: Sequence[BarDatum],
        width: float,
        height: float,
        orientation: str = "vertical",
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        bar_color: str = BAR_COLOR,
        bar_spacing: float = BAR_SPACING,
        chart_padding=None,
        grid_line_count: int = GRID_LINE_COUNT,
        show_grid: bool = True,
        show_axes: bool = True,
        show_category_labels: bool = True,
        show_value_labels: bool = False,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            width,
            height,
            chart_padding=chart_padding,
            x=x,
            y=y,
            z_index=z_index,
            style=style,
            name=name,
        )
        if orientation not in ORIENTATIONS:
            raise ConfigurationError(
                f"{self.label}: invalid orientation {orientation!r}; expected vertical or horizontal"
            )
        if not data:
            raise ConfigurationError(f"{self.label}: a bar chart needs at least one data point")
        if grid_line_count < 1:
            raise ConfigurationError(f"{self.label}: grid_line_count must be at least 1, got {grid_line_count}")
        self.data = [d if isinstance(d, BarDatum) else BarDatum(*d) for d in data]
        self.orientation = orientation
        self.bar_color = bar_color
        self.bar_spacing = bar_spacing
        self.grid_line_count = grid_line_count

        values = [d.value for d in self.data]
        self.min_value = min(0.0, min(values)) if min_value is None else float(min_value)
        if max_value is None:
            max_value = max(values) + (max(values) - self.min_value) * VALUE_HEADROOM
        self.max_value = float(max_value)
        if self.max_value <= self.min_value:
            self.max_value = self.min_value + 1.0

        self._bars: List[Rectangle] = []
        self._build(show_grid, show_axes, show_category_labels, show_value_labels)

    def _scale(self, value: float) -> float:
        """Fraction of the value axis covered by `value`."""
        return (value - self.min_value) / (self.max_value - self.min_value)

    def _build(self, show_grid: bool, show_axes: bool, show_categories: bool, show_values: bool) -> None:
        vertical = self.orientation == "vertical"
        grid_style = Style(GRID_STYLE)
        label_style = {"fill": LABEL_COLOR}

        if show_grid:
            for i in range(self.grid_line_count + 1):
                t = i / self.grid_line_count
                if vertical:
                    y = self.plot_y + self.plot_height - t * self.plot_height
                    line = Line((self.plot_x, y), (self.plot_x + self.plot_width, y), style=grid_style)
                else:
                    x = self.plot_x + t * self.plot_width
                    line = Line((x, self.plot_y), (x, self.plot_y + self.plot_height), style=grid_style)
                self.add_child(line)

        count = len(self.data)
        extent = self.plot_width if vertical else self.plot_height
        thickness = extent / (count + (count + 1) * self.bar_spacing)
        gap = thickness * self.bar_spacing

        for i, datum in enumerate(self.data):
            length = self._scale(datum.value) * (self.plot_height if vertical else self.plot_width)
            length = max(0.0, length)
            offset = gap + i * (thickness + gap)
            if vertical:
                bx, by = self.plot_x + offset, self.plot_y + self.plot_height - length
                bw, bh = thickness, length
            else:
                bx, by = self.plot_x, self.plot_y + offset
                bw, bh = length, thickness
            bar = Rectangle(
                bw,
                bh,
                x=bx,
                y=by,
                style={"fill": datum.color or self.bar_color, "stroke": BAR_STROKE, "stroke_width": 1},
                name=f"bar-{i}",
            )
            self.add_child(bar)
            self._bars.append(bar)

            if show_categories:
                text = Text(datum.label, font_size=LABEL_FONT_SIZE, align="middle", style=label_style)
                self.add_child(text)
                if vertical:
                    text.set_position(bx + bw / 2 - text.width / 2, self.plot_y + self.plot_height + 8)
                else:
                    text.set_position(self.plot_x - text.width - 8, by + bh / 2 - text.height / 2)
            if show_values:
                text = Text(f"{datum.value:g}", font_size=LABEL_FONT_SIZE, align="middle", style=label_style)
                self.add_child(text)
                if vertical:
                    text.set_position(bx + bw / 2 - text.width / 2, by - text.height - 4)
                else:
                    text.set_position(bx + bw + 4, by + bh / 2 - text.height / 2)

        if show_axes:
            bottom = self.plot_y + self.plot_height
            right = self.plot_x + self.plot_width
            self.add_child(Line((self.plot_x, self.plot_y), (self.plot_x, bottom), style=AXIS_STYLE))
            self.add_child(Line((self.plot_x, bottom), (right, bottom), style=AXIS_STYLE))

    @property
    def bars(self) -> List[Rectangle]:
        return list(self._bars)

    def bar(self, index: int) -> Rectangle:
        """
        Bar element at `index`.

        Raises:
            ElementLookupError: If no bar has that index.
        """
        if not 0 <= index < len(self._bars):
            raise ElementLookupError(
                f"{self.label}: bar {index} is out of bounds (chart has {len(self._bars)} bars)"
            )
        return self._bars[index]

    def remarkable_points(self) -> List[RemarkablePoint]:
        """Maximum, minimum and closest-to-average bars, without repeats."""
        values = [d.value for d in self.data]
        found: Dict[int, RemarkablePoint] = {}
        max_index = values.index(max(values))
        min_index = values.index(min(values))
        average = sum(values) / len(values)
        avg_index = min(range(len(values)), key=lambda i: abs(values[i] - average))
        for kind, index in (("maximum", max_index), ("minimum", min_index), ("average", avg_index)):
            if index not in found:
                found[index] = RemarkablePoint(kind, index, values[index], self.data[index].label)
        return list(found.values())


# =============================================================================
# LINE CHART
# =============================================================================

LINE_COLORS = (
    "#2196f3",
    "#f44336",
    "#4caf50",
    "#ff9800",
    "#9c27b0",
    "#00bcd4",
    "#ffeb3b",
    "#795548",
    "#607d8b",
    "#e91e63",
)
LINE_WIDTH = 2
MARKER_RADIUS = 6
MARKER_STROKE = "#ffffff"
FILL_OPACITY = 0.2

# Points sampled along each curve segment of a smoothed line
SMOOTH_SAMPLES = 8


@dataclass
class LineDatum:
    """One (x, y) sample of a series, with an optional label."""

    x: float
    y: float
    label: Optional[str] = None


@dataclass
class LineSeries:
    """
    A named sequence of samples drawn as one line.

    Attributes:
        name: Series name.
        data: Samples, as LineDatum or (x, y) tuples.
        color: Line color; defaults to the chart palette.
        show_markers: Draw a circle on every sample.
    """

    name: str
    data: Sequence[LineDatum]
    color: Optional[str] = None
    show_markers: bool = True

    def __post_init__(self):
        self.data = [d if isinstance(d, LineDatum) else LineDatum(*d) for d in self.data]


@dataclass
class LinePoint:
    """A notable sample of a series (extremum, zero crossing, start, end)."""

    kind: str
    series: int
    index: int
    x: float
    y: float


def _quadratic(a: Point, control: Point, b: Point, t: float) -> Point:
    u = 1 - t
    return Point(
        u * u * a.x + 2 * u * t * control.x + t * t * b.x,
        u * u * a.y + 2 * u * t * control.y + t * t * b.y,
    )


def smooth_points(points: Sequence[Point], samples: int = SMOOTH_SAMPLES) -> List[Point]:
    """
    Sample a smoothed line through `points`.

    Each sample point is the control point of a quadratic curve ending at the
    midpoint to the next sample; the last segment is straight.
    """
    if len(points) < 3:
        return list(points)
    result = [points[0]]
    current = points[0]
    for i in range(len(points) - 1):
        control = points[i]
        nxt = points[i + 1]
        end = Point((control.x + nxt.x) / 2, (control.y + nxt.y) / 2)
        for step in range(1, samples + 1):
            result.append(_quadratic(current, control, end, step / samples))
        current = end
    result.append(points[-1])
    return result


class LineChart(Chart):
    """
    Multi-series line chart.

    The x axis spans the sample range. The y axis spans
    ``[min(0, smallest y), largest y * 1.1]``. Explicit `min_x`, `max_x`,
    `min_y` and `max_y` override either end.
    """

    def __init__(
        self,
        series: Sequence[LineSeries],
        width: float,
        height: float,
        min_x: Optional[float] = None,
        max_x: Optional[float] = None,
        min_y: Optional[float] = None,
        max_y: Optional[float] = None,
        chart_padding=None,
        x_grid_line_count: int = GRID_LINE_COUNT,
        y_grid_line_count: int = GRID_LINE_COUNT,
        line_width: float = LINE_WIDTH,
        marker_radius: float = MARKER_RADIUS,
        fill_area: bool = False,
        smooth: bool = False,
        show_grid: bool = True,
        show_axes: bool = True,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            width,
            height,
            chart_padding=chart_padding,
            x=x,
            y=y,
            z_index=z_index,
            style=style,
            name=name,
        )
        if not series:
            raise ConfigurationError(f"{self.label}: a line chart needs at least one series")
        for s in series:
            if not s.data:
                raise ConfigurationError(f"{self.label}: series {s.name!r} has no data")
        if x_grid_line_count < 1 or y_grid_line_count < 1:
            raise ConfigurationError(f"{self.label}: grid line counts must be at least 1")
        self.series = list(series)
        self.x_grid_line_count = x_grid_line_count
        self.y_grid_line_count = y_grid_line_count
        self.line_width = line_width
        self.marker_radius = marker_radius
        self.fill_area = fill_area
        self.smooth = smooth

        xs = [d.x for s in self.series for d in s.data]
        ys = [d.y for s in self.series for d in s.data]
        self.min_x = float(min(xs) if min_x is None else min_x)
        self.max_x = float(max(xs) if max_x is None else max_x)
        self.min_y = float(min(min(ys), 0.0) if min_y is None else min_y)
        self.max_y = float(max(ys) * (1 + VALUE_HEADROOM) if max_y is None else max_y)
        if self.max_x <= self.min_x:
            self.max_x = self.min_x + 1.0
        if self.max_y <= self.min_y:
            self.max_y = self.min_y + 1.0

        self._lines: List[Polyline] = []
        self._markers: List[List[Circle]] = []
        self._build(show_grid, show_axes)

    def series_color(self, index: int) -> str:
        return self.series[index].color or LINE_COLORS[index % len(LINE_COLORS)]

    def screen_point(self, x: float, y: float) -> Point:
        """Chart-local position of the data point (x, y)."""
        sx = self.plot_x + (x - self.min_x) / (self.max_x - self.min_x) * self.plot_width
        sy = self.plot_y + self.plot_height - (y - self.min_y) / (self.max_y - self.min_y) * self.plot_height
        return Point(sx, sy)

    def _build(self, show_grid: bool, show_axes: bool) -> None:
        bottom = self.plot_y + self.plot_height
        right = self.plot_x + self.plot_width

        if show_grid:
            grid_style = Style(GRID_STYLE)
            for i in range(self.y_grid_line_count + 1):
                y = bottom - i / self.y_grid_line_count * self.plot_height
                self.add_child(Line((self.plot_x, y), (right, y), style=grid_style))
            for i in range(self.x_grid_line_count + 1):
                x = self.plot_x + i / self.x_grid_line_count * self.plot_width
                self.add_child(Line((x, self.plot_y), (x, bottom), style=grid_style))

        for index, series in enumerate(self.series):
            color = self.series_color(index)
            points = [self.screen_point(d.x, d.y) for d in series.data]
            if len(points) == 1:
                points = points * 2
            path = smooth_points(points) if self.smooth else points

            if self.fill_area:
                area = path + [Point(path[-1].x, bottom), Point(path[0].x, bottom)]
                self.add_child(
                    Polygon(
                        area,
                        style={"fill": color, "opacity": FILL_OPACITY, "stroke": "none"},
                        name=f"area-{index}",
                    )
                )

            line = Polyline(
                path,
                style={"stroke": color, "stroke_width": self.line_width},
                name=f"series-{index}",
            )
            self.add_child(line)
            self._lines.append(line)

            markers: List[Circle] = []
            if series.show_markers:
                for j, datum in enumerate(series.data):
                    p = self.screen_point(datum.x, datum.y)
                    marker = Circle(
                        self.marker_radius,
                        x=p.x,
                        y=p.y,
                        style={"fill": color, "stroke": MARKER_STROKE, "stroke_width": 2},
                        name=f"marker-{index}-{j}",
                    )
                    self.add_child(marker)
                    markers.append(marker)
            self._markers.append(markers)

        if show_axes:
            self.add_child(Line((self.plot_x, self.plot_y), (self.plot_x, bottom), style=AXIS_STYLE))
            self.add_child(Line((self.plot_x, bottom), (right, bottom), style=AXIS_STYLE))

    def series_line(self, index: int) -> Polyline:
        """
        Line element of series `index`.

        Raises:
            ElementLookupError: If no series has that index.
        """
        if not 0 <= index < len(self._lines):
            raise ElementLookupError(
                f"{self.label}: series {index} is out of bounds (chart has {len(self._lines)} series)"
            )
        return self._lines[index]

    def marker(self, series: int, index: int) -> Circle:
        """
        Marker of sample `index` in series `series`.

        Raises:
            ElementLookupError: If the series or sample does not exist, or the
                series draws no markers.
        """
        self.series_line(series)
        markers = self._markers[series]
        if not 0 <= index < len(markers):
            raise ElementLookupError(
                f"{self.label}: no marker {index} in series {series} ({len(markers)} markers)"
            )
        return markers[index]

    def remarkable_points(self) -> List[LinePoint]:
        """
        Per series: maximum, minimum, interior local extrema, zero crossings,
        start and end.
        """
        found: List[LinePoint] = []
        for s, series in enumerate(self.series):
            data = series.data
            ys = [d.y for d in data]
            max_index = ys.index(max(ys))
            min_index = ys.index(min(ys))
            found.append(LinePoint("maximum", s, max_index, data[max_index].x, ys[max_index]))
            if min_index != max_index:
                found.append(LinePoint("minimum", s, min_index, data[min_index].x, ys[min_index]))

            for i in range(1, len(data) - 1):
                prev, curr, nxt = ys[i - 1], ys[i], ys[i + 1]
                if curr > prev and curr > nxt:
                    found.append(LinePoint("local_maximum", s, i, data[i].x, curr))
                elif curr < prev and curr < nxt:
                    found.append(LinePoint("local_minimum", s, i, data[i].x, curr))

            for i in range(len(data) - 1):
                curr, nxt = ys[i], ys[i + 1]
                if (curr > 0 > nxt) or (curr < 0 < nxt):
                    t = -curr / (nxt - curr)
                    cross_x = data[i].x + t * (data[i + 1].x - data[i].x)
                    found.append(LinePoint("crossing", s, i, cross_x, 0.0))

            found.append(LinePoint("start", s, 0, data[0].x, ys[0]))
            found.append(LinePoint("end", s, len(data) - 1, data[-1].x, ys[-1]))
        return found


# =============================================================================
# DONUT CHART
# =============================================================================

DONUT_COLORS = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#FF6384",
    "#C9CBCF",
    "#4BC0C0",
    "#FF9F40",
)
DONUT_STROKE = "#ffffff"
# Outer radius as a fraction of the largest circle fitting the chart
OUTER_RADIUS_RATIO = 0.9
DEFAULT_INNER_RADIUS = "50%"
# Slices start at the top and run clockwise
START_ANGLE = -90.0
# Maximum angle between sampled arc points, in degrees
ARC_STEP = 2.0
# Distance of a slice label outside the outer radius
LABEL_OFFSET = 20


@dataclass
class DonutDatum:
    """One slice of a donut chart."""

    label: str
    value: float
    color: Optional[str] = None


@dataclass
class DonutSlice:
    """
    Angular extent of one slice.

    Angles are in degrees, 0 pointing right and 90 pointing down.
    """

    index: int
    start_angle: float
    end_angle: float
    percentage: float

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2


def _arc(cx: float, cy: float, radius: float, start: float, end: float) -> List[Point]:
    steps = max(1, int(math.ceil(abs(end - start) / ARC_STEP)))
    points = []
    for i in range(steps + 1):
        rad = math.radians(start + (end - start) * i / steps)
        points.append(Point(cx + radius * math.cos(rad), cy + radius * math.sin(rad)))
    return points


class DonutChart(Rectangle):
    """
    Ring of slices proportional to the absolute data values.

    The ring is centered in the chart. The outer radius is 90% of the
    largest circle that fits; `inner_radius` is a length or a percentage of
    the outer radius. Slices are polygons sampled along their arcs.
    """

    def __init__(
        self,
        data: Sequence[DonutDatum],
        width: float,
        height: float,
        inner_radius=DEFAULT_INNER_RADIUS,
        show_labels: bool = False,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            width,
            height,
            x=x,
            y=y,
            z_index=z_index,
            style=Style.coerce(style).with_defaults({"fill": "none", "stroke": "none"}),
            name=name,
        )
        if not data:
            raise ConfigurationError(f"{self.label}: a donut chart needs at least one data point")
        self.data = [d if isinstance(d, DonutDatum) else DonutDatum(*d) for d in data]
        self.cx = width / 2
        self.cy = height / 2
        self.outer_radius = min(self.cx, self.cy) * OUTER_RADIUS_RATIO
        self.inner_radius = self._parse_radius(inner_radius)
        self.total = sum(abs(d.value) for d in self.data)

        self._slices: List[DonutSlice] = []
        self._polygons: List[Optional[Polygon]] = []
        if self.total == 0:
            logger.warning("%s: all values are zero; no slices drawn", self.label)
        else:
            self._build(show_labels)

    def _parse_radius(self, value) -> float:
        if isinstance(value, str):
            text = value.strip()
            if not text.endswith("%"):
                raise ConfigurationError(f"{self.label}: invalid inner radius {value!r}")
            try:
                fraction = float(text[:-1]) / 100
            except ValueError:
                raise ConfigurationError(f"{self.label}: invalid inner radius {value!r}") from None
            radius = self.outer_radius * fraction
        else:
            radius = float(value)
        if not 0 <= radius < self.outer_radius:
            raise ConfigurationError(
                f"{self.label}: inner radius {radius:g} must be in [0, {self.outer_radius:g})"
            )
        return radius

    def _build(self, show_labels: bool) -> None:
        angle = START_ANGLE
        for i, datum in enumerate(self.data):
            fraction = abs(datum.value) / self.total
            sweep = fraction * 360.0
            info = DonutSlice(i, angle, angle + sweep, fraction * 100)
            self._slices.append(info)
            angle += sweep
            if sweep == 0:
                self._polygons.append(None)
                continue

            outer = _arc(self.cx, self.cy, self.outer_radius, info.start_angle, info.end_angle)
            if self.inner_radius > 0:
                inner = _arc(self.cx, self.cy, self.inner_radius, info.end_angle, info.start_angle)
            else:
                inner = [Point(self.cx, self.cy)]
            color = datum.color or DONUT_COLORS[i % len(DONUT_COLORS)]
            polygon = Polygon(
                outer + inner,
                style={"fill": color, "stroke": DONUT_STROKE, "stroke_width": 2},
                name=f"slice-{i}",
            )
            self.add_child(polygon)
            self._polygons.append(polygon)

            if show_labels:
                pos = self.label_position(i)
                text = Text(datum.label, font_size=LABEL_FONT_SIZE, align="middle", style={"fill": LABEL_COLOR})
                self.add_child(text)
                text.set_position(pos.x - text.width / 2, pos.y - text.height / 2)

    @property
    def slices(self) -> List[DonutSlice]:
        return list(self._slices)

    def slice(self, index: int) -> Polygon:
        """
        Polygon of slice `index`.

        Raises:
            ElementLookupError: If no slice has that index, or the slice has
                zero value and is not drawn.
        """
        if not 0 <= index < len(self._polygons):
            raise ElementLookupError(
                f"{self.label}: slice {index} is out of bounds (chart has {len(self._polygons)} slices)"
            )
        polygon = self._polygons[index]
        if polygon is None:
            raise ElementLookupError(f"{self.label}: slice {index} has zero value and is not drawn")
        return polygon

    def percentage(self, index: int) -> float:
        if not 0 <= index < len(self._slices):
            raise ElementLookupError(f"{self.label}: slice {index} is out of bounds")
        return self._slices[index].percentage

    def label_position(self, index: int) -> Point:
        """Chart-local point just outside the middle of slice `index`."""
        if not 0 <= index < len(self._slices):
            raise ElementLookupError(f"{self.label}: slice {index} is out of bounds")
        rad = math.radians(self._slices[index].mid_angle)
        r = self.outer_radius + LABEL_OFFSET
        return Point(self.cx + r * math.cos(rad), self.cy + r * math.sin(rad))

    def remarkable_points(self) -> List[RemarkablePoint]:
        """
        Maximum and minimum slices, a slice holding the majority (over 50%),
        and the average value (index -1).
        """
        if self.total == 0:
            return []
        values = [abs(d.value) for d in self.data]
        found: List[RemarkablePoint] = []
        max_index = values.index(max(values))
        min_index = values.index(min(values))
        found.append(RemarkablePoint("maximum", max_index, self.data[max_index].value, self.data[max_index].label))
        if min_index != max_index:
            found.append(
                RemarkablePoint("minimum", min_index, self.data[min_index].value, self.data[min_index].label)
            )
        for info in self._slices:
            if info.percentage > 50:
                found.append(
                    RemarkablePoint("majority", info.index, self.data[info.index].value, self.data[info.index].label)
                )
        found.append(RemarkablePoint("average", -1, self.total / len(values), "average"))
        return found
