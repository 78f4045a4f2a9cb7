"""
File export for artboards.

This module writes a rendered artboard to disk:
- SVG documents (.svg) - the markup produced by `Artboard.render()`
- PNG images - a rasterized approximation drawn with Pillow

The rasterizer draws the same element tree the SVG renderer walks, in the
same z-order, using world-space geometry. It covers fills, strokes, text and
element opacity (blended); SVG-only features such as dash patterns and
markers are approximated or skipped.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from .connector import ARROW_SIZE, LABEL_FONT_SIZE, Connector
from .container import Artboard, Container
from .element import Element
from .errors import ConfigurationError
from .models import Point
from .shapes import LINE_HEIGHT_RATIO, Circle, Line, Polygon, Polyline, Rectangle, Text

logger = logging.getLogger(__name__)

# Resolution multiplier for crisp output (2 for retina)
DEFAULT_SCALE = 2

DEFAULT_BACKGROUND = "#FFFFFF"

# Fonts tried in order for text; Pillow's default font is the last resort
FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "Arial.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "C:/Windows/Fonts/arial.ttf",
)

RGB = Tuple[int, int, int]


def parse_opacity(value) -> int:
    """Alpha (0-255) for an opacity style value; missing means opaque."""
    if value is None:
        return 255
    try:
        opacity = float(value)
    except (TypeError, ValueError):
        logger.warning("Cannot rasterize opacity %r; drawing opaque", value)
        return 255
    return int(round(255 * min(1.0, max(0.0, opacity))))


def parse_color(value) -> Optional[RGB]:
    """
    RGB triple for a CSS color, or None for "none" / missing values.

    Colors Pillow does not understand (gradients, ``url(...)``) are
    skipped with a warning.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("none", "transparent"):
        return None
    try:
        return ImageColor.getrgb(text)[:3]
    except ValueError:
        logger.warning("Cannot rasterize color %r; drawing without it", text)
        return None


class DiagramExporter:
    """
    Exports an artboard to SVG or PNG files.

    Attributes:
        artboard: The artboard to export.
    """

    def __init__(self, artboard: Artboard):
        if not isinstance(artboard, Artboard):
            raise ConfigurationError(f"DiagramExporter needs an Artboard, got {type(artboard).__name__}")
        self.artboard = artboard
        self._fonts = {}
        self._scale = float(DEFAULT_SCALE)
        self._origin = Point(0.0, 0.0)

    def save_svg(self, filename: str) -> Path:
        """
        Render the artboard and write the SVG document.

        Args:
            filename: Output filename (should end in .svg).

        Returns:
            The path written.
        """
        output_path = Path(filename)
        output_path.write_text(self.artboard.render(), encoding="utf-8")
        logger.info("Wrote SVG %s", output_path)
        return output_path

    def save_png(
        self,
        filename: str,
        scale: int = DEFAULT_SCALE,
        background: Optional[str] = DEFAULT_BACKGROUND,
    ) -> Path:
        """
        Rasterize the artboard and write a PNG image.

        Args:
            filename: Output filename (should end in .png).
            scale: Resolution multiplier.
            background: Color behind the artboard, None for transparent.

        Returns:
            The path written.
        """
        image = self.to_png_image(scale=scale, background=background)
        output_path = Path(filename)
        image.save(output_path, "PNG")
        logger.info("Wrote PNG %s (%dx%d)", output_path, image.width, image.height)
        return output_path

    def to_png_image(self, scale: int = DEFAULT_SCALE, background: Optional[str] = DEFAULT_BACKGROUND) -> Image.Image:
        """Rasterize the arranged artboard into a Pillow image."""
        if scale <= 0:
            raise ConfigurationError(f"PNG scale must be positive, got {scale!r}")
        board = self.artboard
        board.arrange()
        width = max(1, int(round(board.width * scale)))
        height = max(1, int(round(board.height * scale)))
        fill = parse_color(background)
        image = Image.new("RGBA", (width, height), fill + (255,) if fill else (0, 0, 0, 0))
        # RGBA mode blends translucent fills over what is already drawn
        draw = ImageDraw.Draw(image, "RGBA")

        origin = board.absolute_position()
        self._scale = scale
        self._origin = origin
        if len(board.style):
            self._draw_element(draw, board)
        for child in board.render_order():
            self._draw_tree(draw, child)
        return image

    # =========================================================================
    # RASTERIZATION
    # =========================================================================

    def _to_pixels(self, points: List[Point]) -> List[Tuple[float, float]]:
        return [((p.x - self._origin.x) * self._scale, (p.y - self._origin.y) * self._scale) for p in points]

    def _stroke_width(self, element: Element) -> int:
        width = float(element.style.get("stroke_width", 1))
        return max(1, int(round(width * self._scale)))

    def _draw_tree(self, draw: ImageDraw.ImageDraw, element: Element) -> None:
        self._draw_element(draw, element)
        for child in element.render_order():
            self._draw_tree(draw, child)

    def _draw_element(self, draw: ImageDraw.ImageDraw, element: Element) -> None:
        style = element.style
        fill = parse_color(style.get("fill"))
        stroke = parse_color(style.get("stroke"))
        alpha = parse_opacity(style.get("opacity"))
        if alpha < 255:
            fill = fill + (alpha,) if fill else None
            stroke = stroke + (alpha,) if stroke else None

        if isinstance(element, Connector):
            self._draw_connector(draw, element, stroke)
        elif isinstance(element, Text):
            # fill is the glyph color for text
            self._draw_text(draw, element, fill or (0, 0, 0))
        elif isinstance(element, Container) and not len(style):
            return
        elif isinstance(element, Rectangle):
            draw.polygon(
                self._to_pixels(element.transformed_corners()),
                fill=fill,
                outline=stroke,
                width=self._stroke_width(element) if stroke else 0,
            )
        elif isinstance(element, Circle):
            (cx, cy), = self._to_pixels([element.world_transform().apply(Point(0.0, 0.0))])
            r = element.radius * self._scale
            draw.ellipse(
                [cx - r, cy - r, cx + r, cy + r],
                fill=fill,
                outline=stroke,
                width=self._stroke_width(element) if stroke else 0,
            )
        elif isinstance(element, Line):
            draw.line(self._to_pixels(element.transformed_corners()), fill=stroke or (0, 0, 0),
                      width=self._stroke_width(element))
        elif isinstance(element, Polyline):
            draw.line(
                self._to_pixels(element.transformed_corners()),
                fill=stroke or (0, 0, 0),
                width=self._stroke_width(element),
                joint="curve",
            )
        elif isinstance(element, Polygon):
            draw.polygon(
                self._to_pixels(element.transformed_corners()),
                fill=fill,
                outline=stroke,
                width=self._stroke_width(element) if stroke else 0,
            )

    def _draw_connector(self, draw: ImageDraw.ImageDraw, connector: Connector, color: Optional[RGB]) -> None:
        color = color or (0, 0, 0)
        path = connector.path()
        points = self._to_pixels(path)
        draw.line(points, fill=color, width=self._stroke_width(connector), joint="curve")
        if connector.arrow in ("end", "both") and len(path) >= 2:
            self._draw_arrowhead(draw, path[-2], path[-1], color)
        if connector.arrow == "both" and len(path) >= 2:
            self._draw_arrowhead(draw, path[1], path[0], color)
        if connector.text:
            pos = connector.label_position()
            font = self._font(LABEL_FONT_SIZE * self._scale)
            (px, py), = self._to_pixels([pos])
            box = draw.textbbox((px, py), connector.text, font=font, anchor="mm")
            pad = 4 * self._scale
            draw.rectangle([box[0] - pad, box[1] - pad, box[2] + pad, box[3] + pad], fill=(255, 255, 255), outline=color)
            draw.text((px, py), connector.text, fill=color, font=font, anchor="mm")

    def _draw_arrowhead(self, draw: ImageDraw.ImageDraw, tail: Point, tip: Point, color: RGB) -> None:
        direction = tip - tail
        length = direction.length
        if length == 0:
            return
        unit = direction * (1.0 / length)
        normal = Point(-unit.y, unit.x)
        base = tip - unit * ARROW_SIZE
        half = ARROW_SIZE / 2
        draw.polygon(self._to_pixels([tip, base + normal * half, base - normal * half]), fill=color)

    def _draw_text(self, draw: ImageDraw.ImageDraw, text: Text, color: RGB) -> None:
        font = self._font(text.font_size * self._scale)
        content = text.content_box
        line_height = text.font_size * LINE_HEIGHT_RATIO
        anchor_x = {"start": 0.0, "middle": 0.5, "end": 1.0}[text.align]
        pil_anchor = {"start": "la", "middle": "ma", "end": "ra"}[text.align]
        transform = text.world_transform()
        for i, line in enumerate(text.lines):
            local = Point(content.x + anchor_x * content.width, content.y + i * line_height)
            (px, py), = self._to_pixels([transform.apply(local)])
            draw.text((px, py), line, fill=color, font=font, anchor=pil_anchor)

    def _font(self, size: float):
        """
        Load a font for text rendering, cached per size.

        Tries the FONT_CANDIDATES in order, then Pillow's default font.
        """
        size = max(1, int(round(size)))
        if size in self._fonts:
            return self._fonts[size]
        font = None
        for candidate in FONT_CANDIDATES:
            try:
                font = ImageFont.truetype(candidate, size)
                break
            except OSError:
                continue
        if font is None:
            logger.debug("No TrueType font found; using Pillow's default font")
            font = ImageFont.load_default(size=size)
        self._fonts[size] = font
        return font
