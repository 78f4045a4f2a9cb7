"""Tests for SVG and PNG export."""

import pytest
from PIL import Image

from vectorflow.connector import Connector
from vectorflow.container import Artboard, Container
from vectorflow.errors import ConfigurationError
from vectorflow.export import DiagramExporter, parse_color, parse_opacity
from vectorflow.shapes import Circle, Line, Polyline, Rectangle, Text, Triangle


@pytest.fixture
def board():
    """A small artboard with one of each drawable kind."""
    board = Artboard(width=200, height=100, background_color="#ffffff")
    board.add_child(Rectangle(50, 40, x=10, y=10, style={"fill": "#ff0000", "stroke": "#000000"}))
    board.add_child(Circle(15, x=120, y=30, style={"fill": "#00ff00"}))
    board.add_child(Line((0, 90), (200, 90), style={"stroke": "#0000ff", "stroke_width": 2}))
    board.add_child(Triangle("equilateral", 20, x=160, y=50, style={"fill": "#000000"}))
    board.add_child(Text("hi", x=10, y=60, style={"fill": "#333333"}))
    board.add_child(Connector((60, 30), (105, 30), label="go"))
    return board


class TestParseColor:
    """Tests for color conversion."""

    def test_hex_and_names(self):
        """Hex codes and CSS names convert to RGB."""
        assert parse_color("#ff0000") == (255, 0, 0)
        assert parse_color("blue") == (0, 0, 255)

    def test_none_values(self):
        """'none' and missing values mean no paint."""
        assert parse_color(None) is None
        assert parse_color("none") is None

    def test_unsupported_color(self):
        """Paint servers cannot be rasterized."""
        assert parse_color("url(#gradient)") is None


class TestParseOpacity:
    """Tests for opacity conversion."""

    def test_missing_is_opaque(self):
        """No opacity means fully opaque."""
        assert parse_opacity(None) == 255

    def test_fraction_to_alpha(self):
        """Opacity fractions scale to 0-255 and are clamped."""
        assert parse_opacity(0.2) == 51
        assert parse_opacity("0.5") == 128
        assert parse_opacity(2) == 255

    def test_unparseable_is_opaque(self):
        """Invalid values draw opaque."""
        assert parse_opacity("half") == 255


class TestDiagramExporter:
    """Tests for DiagramExporter."""

    def test_save_svg(self, board, tmp_path):
        """The SVG file holds the rendered document."""
        path = DiagramExporter(board).save_svg(str(tmp_path / "out.svg"))
        content = path.read_text(encoding="utf-8")
        assert content.startswith("<svg")
        assert "<circle" in content

    def test_png_size_follows_scale(self, board):
        """The image is the artboard size times the scale."""
        image = DiagramExporter(board).to_png_image(scale=2)
        assert image.size == (400, 200)

    def test_png_draws_fills(self, board):
        """Filled shapes show up at their positions."""
        image = DiagramExporter(board).to_png_image(scale=1).convert("RGB")
        assert image.getpixel((30, 30)) == (255, 0, 0)
        assert image.getpixel((120, 30)) == (0, 255, 0)
        assert image.getpixel((190, 5)) == (255, 255, 255)

    def test_save_png(self, board, tmp_path):
        """PNG files can be read back."""
        path = DiagramExporter(board).save_png(str(tmp_path / "out.png"), scale=1)
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (200, 100)

    def test_transparent_background(self):
        """A None background leaves the canvas transparent."""
        image = DiagramExporter(Artboard(width=10, height=10)).to_png_image(scale=1, background=None)
        assert image.getpixel((5, 5))[3] == 0

    def test_unstyled_containers_are_not_painted(self):
        """Plain containers only group their children."""
        board = Artboard(width=20, height=20)
        board.add_child(Container(width=20, height=20))
        image = DiagramExporter(board).to_png_image(scale=1).convert("RGB")
        assert image.getpixel((10, 10)) == (255, 255, 255)

    def test_invalid_scale(self, board):
        """Scale must be positive."""
        with pytest.raises(ConfigurationError):
            DiagramExporter(board).to_png_image(scale=0)

    def test_requires_artboard(self):
        """Only artboards can be exported."""
        with pytest.raises(ConfigurationError):
            DiagramExporter(Container())

    def test_png_blends_translucent_fills(self):
        """Opacity blends a fill with what is underneath."""
        board = Artboard(width=20, height=20, background_color="#ffffff")
        board.add_child(Rectangle(20, 20, style={"fill": "#000000", "opacity": 0.5}))
        r, g, b = DiagramExporter(board).to_png_image(scale=1).convert("RGB").getpixel((10, 10))
        assert 120 <= r <= 135
        assert r == g == b

    def test_png_draws_polylines(self):
        """Polylines are stroked, not filled."""
        board = Artboard(width=100, height=20, background_color="#ffffff")
        board.add_child(Polyline([(0, 10), (50, 10), (100, 10)], style={"stroke": "#0000ff", "stroke_width": 4}))
        image = DiagramExporter(board).to_png_image(scale=1).convert("RGB")
        assert image.getpixel((50, 10)) == (0, 0, 255)
        assert image.getpixel((50, 2)) == (255, 255, 255)
