"""
Layout module using networkx for hierarchical graph layout.

Uses networkx for:
- Graph representation
- Cycle detection
- Topological sorting / layer assignment
- Node ordering within layers

Any object with a ``layout(graph) -> LayoutResult`` method can stand in for
the default engine (see ``LayoutEngine``).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Set, Tuple

import networkx as nx

from .graph import Graph


@dataclass
class NodeLayout:
    """Represents a node's layout information. ``x``/``y`` is the box center."""

    id: str
    label: str = ""
    level: Optional[int] = None
    layer: int = 0
    position: int = 0  # Position within layer
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


@dataclass
class LayoutResult:
    """Result of the layout algorithm."""

    nodes: Dict[str, NodeLayout] = field(default_factory=dict)
    edges: List[Tuple[str, str]] = field(default_factory=list)
    layers: List[List[str]] = field(default_factory=list)
    back_edges: Set[Tuple[str, str]] = field(default_factory=set)
    has_cycles: bool = False
    width: float = 0
    height: float = 0


class LayoutEngine(Protocol):
    """Places sized nodes and routes directed edges."""

    def layout(self, graph: Graph) -> LayoutResult:
        ...


class NetworkXLayout:
    """
    Top-to-bottom layered layout using networkx.

    For DAGs: longest-path layering over a topological order
    For cyclic graphs: identifies back edges, breaks cycles, then layouts
    """

    def __init__(
        self,
        node_width: float = 140,
        node_height: float = 70,
        node_spacing: float = 60,
        rank_spacing: float = 80,
        margin: float = 0,
    ):
        """
        Initialize the layout engine.

        Args:
            node_width: Width of every box (default: 140)
            node_height: Height of every box (default: 70)
            node_spacing: Horizontal gap between boxes in a layer (default: 60)
            rank_spacing: Vertical gap between layers (default: 80)
            margin: Offset of the whole drawing from the origin (default: 0)
        """
        if node_width <= 0 or node_height <= 0:
            raise ValueError("node_width and node_height must be positive")
        if node_spacing < 0 or rank_spacing < 0 or margin < 0:
            raise ValueError("spacing and margin must not be negative")

        self.node_width = node_width
        self.node_height = node_height
        self.node_spacing = node_spacing
        self.rank_spacing = rank_spacing
        self.margin = margin

        self.graph: nx.DiGraph = None
        self.back_edges: Set[Tuple[str, str]] = set()

    def layout(self, graph: Graph) -> LayoutResult:
        """
        Compute layout for the given graph.

        Args:
            graph: Leveled graph

        Returns:
            LayoutResult with box centers and layer assignments
        """
        edges = list(dict.fromkeys((e.source, e.target) for e in graph.edges))

        # Build networkx graph
        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(node.id for node in graph)
        self.graph.add_edges_from(edges)

        # Check for cycles
        has_cycles = not nx.is_directed_acyclic_graph(self.graph)
        self.back_edges = set()

        if has_cycles:
            self._break_cycles()

        layers = self._assign_layers()
        layers = self._order_layers(layers)

        result = LayoutResult()
        result.has_cycles = has_cycles
        result.back_edges = self.back_edges
        result.layers = layers
        result.edges = edges

        placements = self._place(layers)
        for node in graph:
            layer_idx, pos_idx, x, y = placements[node.id]
            result.nodes[node.id] = NodeLayout(
                id=node.id,
                label=node.label,
                level=node.level,
                layer=layer_idx,
                position=pos_idx,
                x=x,
                y=y,
                width=self.node_width,
                height=self.node_height,
            )

        result.width, result.height = self._extent(layers)
        return result

    def _break_cycles(self) -> None:
        """
        Identify back edges and create a DAG by conceptually removing them.
        Uses DFS to find back edges.
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
                    # This is a back edge
                    self.back_edges.add((node, successor))

            rec_stack.remove(node)

        # Start DFS from nodes with no predecessors, or any node if all have them
        roots = [n for n in self.graph.nodes() if self.graph.in_degree(n) == 0]
        if not roots:
            roots = [next(iter(self.graph.nodes()))]

        for root in roots:
            if root not in visited:
                dfs(root)

        # Visit any remaining unvisited nodes
        for node in self.graph.nodes():
            if node not in visited:
                dfs(node)

    def _assign_layers(self) -> List[List[str]]:
        """
        Assign nodes to layers using longest path method.
        """
        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)

        node_layer: Dict[str, int] = {}

        try:
            topo_order = list(nx.topological_sort(working_graph))
        except nx.NetworkXUnfeasible:
            topo_order = list(working_graph.nodes())

        for node in topo_order:
            predecessors = list(working_graph.predecessors(node))
            if not predecessors:
                node_layer[node] = 0
            else:
                node_layer[node] = max(node_layer.get(p, 0) for p in predecessors) + 1

        if not node_layer:
            return []

        max_layer = max(node_layer.values())
        layers: List[List[str]] = [[] for _ in range(max_layer + 1)]

        # Insertion order keeps the initial in-layer order stable
        for node in self.graph.nodes():
            layers[node_layer[node]].append(node)

        return layers

    def _order_layers(self, layers: List[List[str]]) -> List[List[str]]:
        """
        Order nodes within each layer to minimize edge crossings.
        Uses barycenter heuristic.
        """
        if len(layers) <= 1:
            return layers

        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)

        for _ in range(4):
            # Forward pass
            for i in range(1, len(layers)):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i - 1], working_graph, use_predecessors=True
                )

            # Backward pass
            for i in range(len(layers) - 2, -1, -1):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i + 1], working_graph, use_predecessors=False
                )

        return layers

    def _order_layer_by_barycenter(
        self,
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
            if use_predecessors:
                neighbors = list(graph.predecessors(node))
            else:
                neighbors = list(graph.successors(node))

            positions = [ref_positions[n] for n in neighbors if n in ref_positions]

            if not positions:
                # Keep original order for nodes with no connections to ref layer
                return layer.index(node)

            return sum(positions) / len(positions)

        return sorted(layer, key=barycenter)

    def _layer_width(self, count: int) -> float:
        if count == 0:
            return 0
        return count * self.node_width + (count - 1) * self.node_spacing

    def _place(
        self, layers: List[List[str]]
    ) -> Dict[str, Tuple[int, int, float, float]]:
        """Convert layer/position indices into box centers, centering each layer."""
        widest = max((self._layer_width(len(layer)) for layer in layers), default=0)
        placements: Dict[str, Tuple[int, int, float, float]] = {}

        for layer_idx, layer in enumerate(layers):
            offset = (widest - self._layer_width(len(layer))) / 2
            y = (
                self.margin
                + self.node_height / 2
                + layer_idx * (self.node_height + self.rank_spacing)
            )
            for pos_idx, node_id in enumerate(layer):
                x = (
                    self.margin
                    + offset
                    + pos_idx * (self.node_width + self.node_spacing)
                    + self.node_width / 2
                )
                placements[node_id] = (layer_idx, pos_idx, x, y)

        return placements

    def _extent(self, layers: List[List[str]]) -> Tuple[float, float]:
        """Total drawing size including margins."""
        if not layers:
            return 0, 0
        widest = max(self._layer_width(len(layer)) for layer in layers)
        tallest = len(layers) * self.node_height + (len(layers) - 1) * self.rank_spacing
        return widest + 2 * self.margin, tallest + 2 * self.margin


def compute_layout(graph: Graph, **kwargs) -> LayoutResult:
    """
    Convenience function to lay out a graph with the default engine.

    Args:
        graph: Leveled graph
        **kwargs: Additional parameters for NetworkXLayout

    Returns:
        LayoutResult
    """
    return NetworkXLayout(**kwargs).layout(graph)
