"""Tests for the chart elements."""

import pytest

from vectorflow.chart import BarChart, BarDatum, DonutChart, DonutDatum, LineChart, LineSeries
from vectorflow.errors import ConfigurationError, ElementLookupError
from vectorflow.models import Point
from vectorflow.shapes import Circle, Line, Polygon, Text

DATA = [BarDatum("Q1", 10), BarDatum("Q2", 40), BarDatum("Q3", 25), BarDatum("Q4", 5, color="#ff0000")]


@pytest.fixture
def chart():
    """A 400 x 300 vertical bar chart."""
    return BarChart(DATA, width=400, height=300, max_value=50)


class TestBarChart:
    """Tests for bar geometry."""

    def test_bar_heights_scale_with_values(self, chart):
        """Bar length is proportional to the value."""
        plot_height = 300 - 20 - 40
        assert chart.bar(1).height == pytest.approx(40 / 50 * plot_height)
        assert chart.bar(3).height == pytest.approx(5 / 50 * plot_height)

    def test_bars_stand_on_the_axis(self, chart):
        """Vertical bars share the bottom edge of the plot area."""
        bottoms = {round(bar.y + bar.height, 6) for bar in chart.bars}
        assert bottoms == {300 - 40}

    def test_bars_do_not_overlap(self, chart):
        """Bars are separated by the bar spacing."""
        xs = [bar.x for bar in chart.bars]
        assert xs == sorted(xs)
        for a, b in zip(chart.bars, chart.bars[1:]):
            assert a.x + a.width < b.x

    def test_bar_color_override(self, chart):
        """A datum color overrides the chart bar color."""
        assert chart.bar(3).style.get("fill") == "#ff0000"
        assert chart.bar(0).style.get("fill") == chart.bar_color

    def test_horizontal_orientation(self):
        """Horizontal bars grow to the right from the value axis."""
        chart = BarChart(DATA, width=400, height=300, orientation="horizontal", max_value=50)
        lefts = {bar.x for bar in chart.bars}
        assert lefts == {chart.plot_x}
        assert chart.bar(1).width > chart.bar(0).width

    def test_default_value_range(self):
        """The value axis gets headroom above the largest value."""
        chart = BarChart(DATA, width=400, height=300)
        assert chart.min_value == 0
        assert chart.max_value == pytest.approx(40 + 40 * 0.1)

    def test_grid_and_axes(self, chart):
        """Grid lines and two axes are drawn as lines."""
        lines = [c for c in chart.children if isinstance(c, Line)]
        assert len(lines) == chart.grid_line_count + 1 + 2

    def test_category_labels(self, chart):
        """Each bar gets a category label."""
        labels = [c.content for c in chart.children if isinstance(c, Text)]
        assert labels == ["Q1", "Q2", "Q3", "Q4"]

    def test_bar_anchor(self, chart):
        """Bars are ordinary elements with anchors."""
        top = chart.bar(1).anchor("top")
        assert top.y == pytest.approx(chart.bar(1).y)

    def test_remarkable_points(self, chart):
        """Maximum, minimum and average bars are reported once each."""
        points = {p.kind: p.index for p in chart.remarkable_points()}
        assert points["maximum"] == 1
        assert points["minimum"] == 3
        assert points["average"] == 2


class TestBarChartErrors:
    """Tests for invalid charts."""

    def test_out_of_bounds_bar(self, chart):
        """Bar lookups are bounds-checked."""
        with pytest.raises(ElementLookupError, match="out of bounds"):
            chart.bar(4)

    def test_empty_data(self):
        """A chart needs data."""
        with pytest.raises(ConfigurationError):
            BarChart([], width=100, height=100)

    def test_invalid_orientation(self):
        """Orientation must be vertical or horizontal."""
        with pytest.raises(ConfigurationError):
            BarChart(DATA, width=100, height=100, orientation="diagonal")

    def test_padding_leaves_no_plot(self):
        """Padding larger than the chart is rejected."""
        with pytest.raises(ConfigurationError, match="no plot area"):
            BarChart(DATA, width=50, height=50)


SERIES = [LineSeries("a", [(0, 0), (1, 10), (2, 5), (3, -5), (4, 20)])]


@pytest.fixture
def line_chart():
    """A 400 x 300 line chart with one series."""
    return LineChart(SERIES, width=400, height=300)


class TestLineChart:
    """Tests for line chart geometry."""

    def test_default_ranges(self, line_chart):
        """x spans the data; y runs from min(0, data) to 110% of the largest value."""
        assert (line_chart.min_x, line_chart.max_x) == (0, 4)
        assert line_chart.min_y == -5
        assert line_chart.max_y == pytest.approx(22)

    def test_screen_mapping(self, line_chart):
        """Range corners map to the plot area corners."""
        assert line_chart.screen_point(0, -5) == Point(60, 260)
        corner = line_chart.screen_point(4, 22)
        assert corner.x == pytest.approx(380)
        assert corner.y == pytest.approx(20)

    def test_line_follows_samples(self, line_chart):
        """The series line has one vertex per sample."""
        line = line_chart.series_line(0)
        assert len(line.points) == 5
        assert line.points[1] == line_chart.screen_point(1, 10)
        assert line.style.get("stroke") == "#2196f3"

    def test_markers_sit_on_samples(self, line_chart):
        """Markers are circles centered on the samples."""
        marker = line_chart.marker(0, 4)
        expected = line_chart.screen_point(4, 20)
        assert isinstance(marker, Circle)
        assert marker.x == pytest.approx(expected.x)
        assert marker.y == pytest.approx(expected.y)

    def test_grid_and_axes(self, line_chart):
        """Both grids and the two axes are drawn as lines."""
        lines = [c for c in line_chart.children if isinstance(c, Line)]
        assert len(lines) == 6 + 6 + 2

    def test_smooth_line_keeps_endpoints(self):
        """A smoothed line is sampled but starts and ends on the data."""
        chart = LineChart(SERIES, width=400, height=300, smooth=True)
        points = chart.series_line(0).points
        assert len(points) > 5
        assert points[0] == chart.screen_point(0, 0)
        assert points[-1] == chart.screen_point(4, 20)

    def test_fill_area_closes_on_the_bottom(self):
        """The area polygon is translucent and closes along the plot bottom."""
        chart = LineChart(SERIES, width=400, height=300, fill_area=True)
        areas = [c for c in chart.children if isinstance(c, Polygon)]
        assert len(areas) == 1
        assert areas[0].style.get("opacity") == 0.2
        assert {p.y for p in areas[0].points[-2:]} == {260}

    def test_series_colors_cycle(self):
        """Series without a color take the palette in order."""
        chart = LineChart(
            [LineSeries("a", [(0, 1), (1, 2)]), LineSeries("b", [(0, 2), (1, 1)], color="#000000")],
            width=400,
            height=300,
        )
        assert chart.series_color(0) == "#2196f3"
        assert chart.series_line(1).style.get("stroke") == "#000000"

    def test_remarkable_points(self, line_chart):
        """Extrema, local extrema, zero crossings, start and end are reported."""
        points = line_chart.remarkable_points()
        assert [p.kind for p in points] == [
            "maximum",
            "minimum",
            "local_maximum",
            "local_minimum",
            "crossing",
            "crossing",
            "start",
            "end",
        ]
        crossings = [p.x for p in points if p.kind == "crossing"]
        assert crossings == [pytest.approx(2.5), pytest.approx(3.2)]


class TestLineChartErrors:
    """Tests for invalid line charts."""

    def test_no_series(self):
        """A line chart needs a series."""
        with pytest.raises(ConfigurationError):
            LineChart([], width=400, height=300)

    def test_empty_series(self):
        """Every series needs data."""
        with pytest.raises(ConfigurationError, match="no data"):
            LineChart([LineSeries("empty", [])], width=400, height=300)

    def test_out_of_bounds_series(self, line_chart):
        """Series lookups are bounds-checked."""
        with pytest.raises(ElementLookupError, match="out of bounds"):
            line_chart.series_line(1)

    def test_marker_lookup_without_markers(self):
        """A series drawn without markers has none to look up."""
        chart = LineChart([LineSeries("a", [(0, 1), (1, 2)], show_markers=False)], width=400, height=300)
        with pytest.raises(ElementLookupError):
            chart.marker(0, 0)


DONUT = [DonutDatum("A", 30), DonutDatum("B", 60), DonutDatum("C", 10)]


@pytest.fixture
def donut():
    """A 200 x 200 donut chart."""
    return DonutChart(DONUT, width=200, height=200)


class TestDonutChart:
    """Tests for donut chart geometry."""

    def test_radii(self, donut):
        """The ring fills 90% of the chart; the hole is half the ring."""
        assert donut.outer_radius == pytest.approx(90)
        assert donut.inner_radius == pytest.approx(45)

    def test_slice_angles(self, donut):
        """Slices start at the top and sweep in proportion to their value."""
        slices = donut.slices
        assert slices[0].start_angle == -90
        assert slices[0].end_angle == pytest.approx(18)
        assert slices[-1].end_angle == pytest.approx(270)
        assert [donut.percentage(i) for i in range(3)] == [
            pytest.approx(30),
            pytest.approx(60),
            pytest.approx(10),
        ]

    def test_slice_points_lie_on_the_ring(self, donut):
        """Slice polygons stay between the inner and outer radius."""
        for i in range(3):
            for p in donut.slice(i).points:
                distance = p.distance_to(Point(100, 100))
                assert 45 - 1e-6 <= distance <= 90 + 1e-6

    def test_numeric_inner_radius(self):
        """A numeric inner radius is used as a length; zero gives pie wedges."""
        chart = DonutChart(DONUT, width=200, height=200, inner_radius=0)
        assert Point(100, 100) in chart.slice(0).points

    def test_label_position(self, donut):
        """Labels sit outside the middle of their slice."""
        pos = donut.label_position(1)
        assert pos.distance_to(Point(100, 100)) == pytest.approx(110)

    def test_show_labels(self):
        """Labels are added as text children."""
        chart = DonutChart(DONUT, width=200, height=200, show_labels=True)
        assert [c.content for c in chart.children if isinstance(c, Text)] == ["A", "B", "C"]

    def test_remarkable_points(self, donut):
        """Maximum, minimum, majority and average are reported."""
        points = {p.kind: p for p in donut.remarkable_points()}
        assert points["maximum"].index == 1
        assert points["minimum"].index == 2
        assert points["majority"].index == 1
        assert points["average"].index == -1
        assert points["average"].value == pytest.approx(100 / 3)

    def test_zero_total_draws_nothing(self, caplog):
        """All-zero data logs a warning and draws no slices."""
        chart = DonutChart([DonutDatum("A", 0)], width=200, height=200)
        assert chart.slices == []
        assert chart.children == ()
        assert "no slices" in caplog.text


class TestDonutChartErrors:
    """Tests for invalid donut charts."""

    def test_out_of_bounds_slice(self, donut):
        """Slice lookups are bounds-checked."""
        with pytest.raises(ElementLookupError, match="out of bounds"):
            donut.slice(3)

    def test_invalid_inner_radius(self):
        """Inner radius must be a percentage or a length below the outer radius."""
        with pytest.raises(ConfigurationError):
            DonutChart(DONUT, width=200, height=200, inner_radius="half")
        with pytest.raises(ConfigurationError):
            DonutChart(DONUT, width=200, height=200, inner_radius=95)
