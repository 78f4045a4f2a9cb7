"""
Flowchart composite element.

A Flowchart takes node and connection descriptions, places the nodes with
the layered layout in `flowchart_layout`, and joins them with routed
connectors that avoid every node other than the two they connect.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .connector import Anchor, Connector
from .container import Container
from .errors import ElementLookupError
from .flowchart_layout import (
    DEFAULT_LEVEL_SPACING,
    DEFAULT_MARGIN,
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_SPACING,
    DEFAULT_NODE_WIDTH,
    FlowchartLayout,
    LayoutNode,
    LayoutResult,
)
from .models import Direction, Point, PointLike, as_point
from .pathfinding import DEFAULT_GRID_SIZE, DEFAULT_LABEL_DISTANCE, DEFAULT_PADDING
from .shapes import Rectangle, Text
from .style import Style, StyleLike

logger = logging.getLogger(__name__)

# Documented node defaults
NODE_STYLE = {"fill": "#FFFFFF", "stroke": "#2A2A2A", "stroke_width": 1.5}
NODE_TEXT_SIZE = 14
NODE_CORNER_RADIUS = 4.0


@dataclass
class FlowchartNode:
    """
    A flowchart box.

    Attributes:
        id: Unique id used by connections.
        text: Text shown in the box.
        width: Box width.
        height: Box height.
        center: Explicit center in flowchart coordinates; laid out if None.
        style: Extra style for the box.
    """

    id: str
    text: str = ""
    width: float = DEFAULT_NODE_WIDTH
    height: float = DEFAULT_NODE_HEIGHT
    center: Optional[PointLike] = None
    style: StyleLike = None


@dataclass
class FlowchartConnection:
    """
    A directed connection between two nodes.

    Attributes:
        source: Id of the start node.
        target: Id of the end node.
        label: Optional text placed along the connector.
        source_anchor: Side of the start node, or "auto".
        target_anchor: Side of the end node, or "auto".
    """

    source: str
    target: str
    label: Optional[str] = None
    source_anchor: str = "auto"
    target_anchor: str = "auto"


class Flowchart(Container):
    """
    A freeform container of flowchart boxes and routed connectors.

    Example:
        >>> chart = Flowchart(
        ...     nodes=[FlowchartNode("a", "Start"), FlowchartNode("b", "End")],
        ...     connections=[FlowchartConnection("a", "b", label="go")],
        ... )
        >>> chart.node("b").center.y > chart.node("a").center.y
        True
    """

    def __init__(
        self,
        nodes: Sequence[FlowchartNode],
        connections: Sequence[FlowchartConnection] = (),
        direction: str = "top-down",
        node_spacing: float = DEFAULT_NODE_SPACING,
        level_spacing: float = DEFAULT_LEVEL_SPACING,
        margin: float = DEFAULT_MARGIN,
        grid_size: float = DEFAULT_GRID_SIZE,
        padding: float = DEFAULT_PADDING,
        label_min_distance: float = DEFAULT_LABEL_DISTANCE,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z_index: Optional[int] = None,
        style: StyleLike = None,
        name: Optional[str] = None,
    ):
        super().__init__(
            direction=Direction.FREEFORM,
            x=x,
            y=y,
            z_index=z_index,
            style=style,
            name=name,
        )
        self.node_configs = list(nodes)
        self.connection_configs = list(connections)
        self.grid_size = grid_size
        self.padding = padding
        self.label_min_distance = label_min_distance
        self._nodes: Dict[str, Rectangle] = {}
        self._connectors: List[Connector] = []
        self.layout_engine = FlowchartLayout(
            direction=direction,
            node_spacing=node_spacing,
            level_spacing=level_spacing,
            margin=margin,
        )
        self.layout_result: LayoutResult = self._build()
        self.finalize()

    def _build(self) -> LayoutResult:
        layout_nodes = [
            LayoutNode(
                n.id,
                n.width,
                n.height,
                as_point(n.center) if n.center is not None else None,
            )
            for n in self.node_configs
        ]
        result = self.layout_engine.layout(
            layout_nodes, [(c.source, c.target) for c in self.connection_configs]
        )

        for config in self.node_configs:
            center = result.centers[config.id]
            box = Rectangle(
                config.width,
                config.height,
                corner_radius=NODE_CORNER_RADIUS,
                style=Style(NODE_STYLE).merged(Style.coerce(config.style)),
                name=config.id,
            )
            self.add_child(box)
            box.set_position(center.x - config.width / 2, center.y - config.height / 2)
            if config.text:
                label = Text(config.text, font_size=NODE_TEXT_SIZE, align="middle")
                box.add_child(label)
                label.set_position(
                    (config.width - label.width) / 2, (config.height - label.height) / 2
                )
            self._nodes[config.id] = box

        for config in self.connection_configs:
            source = self._nodes[config.source]
            target = self._nodes[config.target]
            obstacles = [
                box for node_id, box in self._nodes.items()
                if node_id not in (config.source, config.target)
            ]
            connector = Connector(
                Anchor(source, config.source_anchor, toward=target),
                Anchor(target, config.target_anchor, toward=source),
                routing="routed",
                obstacles=obstacles,
                label=config.label,
                label_min_distance=self.label_min_distance,
                grid_size=self.grid_size,
                padding=self.padding,
            )
            self.add_child(connector)
            self._connectors.append(connector)

        logger.debug(
            "%s: built %d nodes in %d layers, %d connections (%d back edges)",
            self.label,
            len(self._nodes),
            len(result.layers),
            len(self._connectors),
            len(result.back_edges),
        )
        return result

    def node(self, node_id: str) -> Rectangle:
        """The box for `node_id`."""
        if node_id not in self._nodes:
            raise ElementLookupError(f"{self.label}: no node with id {node_id!r}")
        return self._nodes[node_id]

    @property
    def nodes(self) -> Dict[str, Rectangle]:
        return dict(self._nodes)

    @property
    def connectors(self) -> List[Connector]:
        return list(self._connectors)

    def node_center(self, node_id: str) -> Point:
        return self.node(node_id).center
