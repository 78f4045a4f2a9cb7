"""
Layered flowchart layout using networkx.

Uses networkx for:
- Graph representation
- Cycle detection
- Topological sorting / layer assignment
- Node ordering within layers

The result gives each node a center point; layers advance along the flow
direction and nodes within a layer are spread across it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

import networkx as nx

from .errors import ConfigurationError, ElementLookupError
from .models import Point

# =============================================================================
# LAYOUT CONFIGURATION
# =============================================================================

# Default node box size
DEFAULT_NODE_WIDTH = 140.0
DEFAULT_NODE_HEIGHT = 60.0

# Gap between nodes of the same layer
DEFAULT_NODE_SPACING = 60.0

# Gap between consecutive layers
DEFAULT_LEVEL_SPACING = 100.0

# Space before the first layer and the first node of each layer
DEFAULT_MARGIN = 50.0

# Barycenter sweeps (forward + backward) used to reduce crossings
ORDERING_PASSES = 4

LAYOUT_DIRECTIONS = ("top-down", "left-right")

# =============================================================================


@dataclass
class LayoutNode:
    """
    A node to be placed.

    Attributes:
        id: Unique node id.
        width: Box width.
        height: Box height.
        center: Explicit center; when set the node keeps it.
    """

    id: str
    width: float = DEFAULT_NODE_WIDTH
    height: float = DEFAULT_NODE_HEIGHT
    center: Optional[Point] = None


@dataclass
class LayoutResult:
    """Result of the layout algorithm."""

    centers: Dict[str, Point] = field(default_factory=dict)
    layers: List[List[str]] = field(default_factory=list)
    back_edges: Set[Tuple[str, str]] = field(default_factory=set)
    has_cycles: bool = False


class FlowchartLayout:
    """
    Sugiyama-style layered layout.

    For DAGs: longest-path layer assignment over a topological order.
    For cyclic graphs: identifies back edges, breaks cycles, then layouts.

    Args:
        direction: "top-down" (layers are rows) or "left-right" (columns).
        node_spacing: Gap between nodes of one layer.
        level_spacing: Gap between layers.
        margin: Offset of the first layer and of each layer's first node.
        origin: Point the margins are measured from.
    """

    def __init__(
        self,
        direction: str = "top-down",
        node_spacing: float = DEFAULT_NODE_SPACING,
        level_spacing: float = DEFAULT_LEVEL_SPACING,
        margin: float = DEFAULT_MARGIN,
        origin: Point = Point(0.0, 0.0),
    ):
        if direction not in LAYOUT_DIRECTIONS:
            raise ConfigurationError(
                f"Invalid flowchart direction {direction!r}; expected one of: {', '.join(LAYOUT_DIRECTIONS)}"
            )
        self.direction = direction
        self.node_spacing = node_spacing
        self.level_spacing = level_spacing
        self.margin = margin
        self.origin = origin
        self.graph: nx.DiGraph = nx.DiGraph()
        self.back_edges: Set[Tuple[str, str]] = set()

    def layout(self, nodes: Sequence[LayoutNode], connections: Sequence[Tuple[str, str]]) -> LayoutResult:
        """
        Compute node centers.

        Args:
            nodes: Nodes in declaration order.
            connections: (source id, target id) pairs.

        Returns:
            LayoutResult with a center for every node.

        Raises:
            ElementLookupError: If a connection names an unknown node.
        """
        node_map = {n.id: n for n in nodes}
        for source, target in connections:
            for node_id in (source, target):
                if node_id not in node_map:
                    raise ElementLookupError(
                        f"Connection {source!r} -> {target!r} refers to unknown node {node_id!r}"
                    )

        # Build networkx graph; isolated nodes are kept
        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(n.id for n in nodes)
        self.graph.add_edges_from(connections)

        has_cycles = not nx.is_directed_acyclic_graph(self.graph)
        self.back_edges = set()
        if has_cycles:
            self._break_cycles()

        layers = self._assign_layers()
        layers = self._order_layers(layers)

        result = LayoutResult(layers=layers, back_edges=set(self.back_edges), has_cycles=has_cycles)
        result.centers = self._place(layers, node_map)
        return result

    def _break_cycles(self) -> None:
        """
        Identify back edges with a DFS so that removing them leaves a DAG.
        """
        visited = set()
        rec_stack = set()

        def dfs(node):
            visited.add(node)
            rec_stack.add(node)
            for successor in list(self.graph.successors(node)):
                if successor not in visited:
                    dfs(successor)
                elif successor in rec_stack:
                    self.back_edges.add((node, successor))
            rec_stack.remove(node)

        # Start from nodes with no predecessors, then any node left over
        roots = [n for n in self.graph.nodes() if self.graph.in_degree(n) == 0]
        for node in roots + list(self.graph.nodes()):
            if node not in visited:
                dfs(node)

    def _working_graph(self) -> nx.DiGraph:
        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)
        return working_graph

    def _assign_layers(self) -> List[List[str]]:
        """
        Assign nodes to layers using longest path method.
        """
        working_graph = self._working_graph()
        node_layer: Dict[str, int] = {}

        for node in nx.topological_sort(working_graph):
            predecessors = list(working_graph.predecessors(node))
            if not predecessors:
                node_layer[node] = 0
            else:
                node_layer[node] = max(node_layer[p] for p in predecessors) + 1

        if not node_layer:
            return []

        layers: List[List[str]] = [[] for _ in range(max(node_layer.values()) + 1)]
        # Declaration order seeds the ordering within a layer
        for node in self.graph.nodes():
            layers[node_layer[node]].append(node)
        return layers

    def _order_layers(self, layers: List[List[str]]) -> List[List[str]]:
        """
        Order nodes within each layer to reduce edge crossings.
        Uses barycenter heuristic.
        """
        if len(layers) <= 1:
            return layers

        working_graph = self._working_graph()
        for _ in range(ORDERING_PASSES):
            for i in range(1, len(layers)):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i - 1], working_graph, use_predecessors=True
                )
            for i in range(len(layers) - 2, -1, -1):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i + 1], working_graph, use_predecessors=False
                )
        return layers

    @staticmethod
    def _order_layer_by_barycenter(
        layer: List[str],
        ref_layer: List[str],
        graph: nx.DiGraph,
        use_predecessors: bool,
    ) -> List[str]:
        """
        Order nodes by barycenter (average position of connected nodes).
        """
        ref_positions = {node: i for i, node in enumerate(ref_layer)}

        def barycenter(node: str) -> float:
            neighbors = graph.predecessors(node) if use_predecessors else graph.successors(node)
            positions = [ref_positions[n] for n in neighbors if n in ref_positions]
            if not positions:
                # Keep original order for nodes with no connections to ref layer
                return layer.index(node)
            return sum(positions) / len(positions)

        return sorted(layer, key=barycenter)

    def _place(self, layers: List[List[str]], node_map: Dict[str, LayoutNode]) -> Dict[str, Point]:
        """Centers for every node; each layer is centered on the widest one."""
        vertical = self.direction == "top-down"

        def main_size(node: LayoutNode) -> float:
            return node.height if vertical else node.width

        def cross_size(node: LayoutNode) -> float:
            return node.width if vertical else node.height

        spans = [
            sum(cross_size(node_map[n]) for n in layer) + self.node_spacing * max(0, len(layer) - 1)
            for layer in layers
        ]
        widest = max(spans, default=0.0)
        origin_main = (self.origin.y if vertical else self.origin.x) + self.margin
        origin_cross = (self.origin.x if vertical else self.origin.y) + self.margin

        centers: Dict[str, Point] = {}
        offset = origin_main
        for layer, span in zip(layers, spans):
            depth = max(main_size(node_map[n]) for n in layer)
            cross = origin_cross + (widest - span) / 2
            for node_id in layer:
                node = node_map[node_id]
                if node.center is not None:
                    centers[node_id] = node.center
                    continue
                size = cross_size(node)
                along, across = offset + depth / 2, cross + size / 2
                centers[node_id] = Point(across, along) if vertical else Point(along, across)
                cross += size + self.node_spacing
            offset += depth + self.level_spacing
        return centers
