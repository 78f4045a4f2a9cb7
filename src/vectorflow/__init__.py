"""
VectorFlow - Declarative 2-D Vector Diagrams

A Python library for building diagrams as trees of shapes and containers,
laid out automatically and rendered to SVG (or PNG).

Example:
    >>> from vectorflow import Artboard, Container, Rectangle
    >>> board = Artboard(width="auto", height="auto")
    >>> column = board.add_child(Container(direction="stack-vertical", spacing=20))
    >>> _ = column.add_child(Rectangle(100, 50, style={"fill": "#eee"}))
    >>> _ = column.add_child(Rectangle(100, 80, style={"fill": "#ddd"}))
    >>> svg = board.render()

Debug Mode Example:
    >>> svg = board.render(debug=True)
    >>> trace = board.get_trace()
    >>> print(trace.summary())
"""

import logging

from .box_model import Box, BoxModel, Insets
from .chart import (
    BarChart,
    BarDatum,
    Chart,
    DonutChart,
    DonutDatum,
    DonutSlice,
    LineChart,
    LineDatum,
    LinePoint,
    LineSeries,
    RemarkablePoint,
)
from .connector import Anchor, Connector, facing_side, orthogonal_path
from .container import Artboard, Container, ContainerConfig, LayoutState
from .element import Element, Group
from .errors import ConfigurationError, ElementLookupError, GeometryError, VectorFlowError
from .export import DiagramExporter
from .flowchart import Flowchart, FlowchartConnection, FlowchartNode
from .flowchart_layout import FlowchartLayout, LayoutNode, LayoutResult
from .grid import Columns, Grid, ZStack
from .models import AUTO, Alignment, Auto, Bounds, Direction, Fixed, Point
from .pathfinding import Obstacle, PathRouter, calculate_label_position, find_path, simplify_path
from .shapes import Circle, Line, Polygon, Polyline, Rectangle, RegularPolygon, Side, Text, Triangle
from .style import Style
from .tracer import LayoutEvent, LayoutTrace
from .transform import Transform

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Canvas & layout
    "Artboard",
    "Container",
    "ContainerConfig",
    "LayoutState",
    "Columns",
    "Grid",
    "ZStack",
    # Elements
    "Element",
    "Group",
    "Rectangle",
    "Text",
    "Circle",
    "Line",
    "Polyline",
    "Polygon",
    "RegularPolygon",
    "Triangle",
    "Side",
    # Connectors & routing
    "Anchor",
    "Connector",
    "facing_side",
    "orthogonal_path",
    "Obstacle",
    "PathRouter",
    "find_path",
    "simplify_path",
    "calculate_label_position",
    # Composites
    "Flowchart",
    "FlowchartNode",
    "FlowchartConnection",
    "FlowchartLayout",
    "LayoutNode",
    "LayoutResult",
    "Chart",
    "BarChart",
    "BarDatum",
    "RemarkablePoint",
    "LineChart",
    "LineSeries",
    "LineDatum",
    "LinePoint",
    "DonutChart",
    "DonutDatum",
    "DonutSlice",
    # Geometry & styling
    "Point",
    "Bounds",
    "Transform",
    "Box",
    "BoxModel",
    "Insets",
    "Style",
    "Direction",
    "Alignment",
    "Fixed",
    "Auto",
    "AUTO",
    # Export
    "DiagramExporter",
    # Errors
    "VectorFlowError",
    "ConfigurationError",
    "GeometryError",
    "ElementLookupError",
    # Debug/Tracing (for development and debugging)
    "LayoutTrace",
    "LayoutEvent",
]
