"""
Graph module for sitemap conversion.

Provides the ordered node registry and edge list that flow between the
pipeline stages.
"""

from typing import Dict, Iterator, List, Optional

from .models import Edge, Node


class Graph:
    """Directed graph with insertion-ordered nodes and duplicate-friendly edges."""

    def __init__(self):
        self.nodes: Dict[str, Node] = {}  # id -> Node, first-seen order
        self.edges: List[Edge] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def declare(self, node_id: str, label: Optional[str] = None) -> Node:
        """
        Register a node occurrence.

        A new identifier gets ``label`` (or its own id when no label is given).
        An existing node only takes the label when it differs from the id,
        so a bare reference never erases a descriptive label.

        Args:
            node_id: Identifier token.
            label: Bracketed label text, if the occurrence carried one.

        Returns:
            The stored Node.
        """
        label = label or node_id
        node = self.nodes.get(node_id)
        if node is None:
            node = Node(id=node_id, label=label)
            self.nodes[node_id] = node
        elif label != node_id:
            node.label = label
        return node

    def add_edge(self, source: str, target: str) -> Edge:
        """Add a directed edge, creating bare endpoint nodes when missing."""
        for node_id in (source, target):
            if node_id not in self.nodes:
                self.nodes[node_id] = Node(id=node_id)
        edge = Edge(source, target)
        self.edges.append(edge)
        return edge

    def get_node(self, node_id: str) -> Node:
        """Return the node with the given id (KeyError if unknown)."""
        return self.nodes[node_id]

    def get_nodes(self) -> List[Node]:
        """Return list of all nodes in insertion order."""
        return list(self.nodes.values())

    def get_edges(self) -> List[Edge]:
        """Return list of all edges."""
        return self.edges

    def adjacency(self) -> Dict[str, List[str]]:
        """
        Map every node id to its targets in edge-declaration order.

        Duplicate edges produce duplicate entries.
        """
        adjacency: Dict[str, List[str]] = {node_id: [] for node_id in self.nodes}
        for edge in self.edges:
            adjacency.setdefault(edge.source, []).append(edge.target)
        return adjacency

    def get_successors(self, node_id: str) -> List[str]:
        """Get all nodes that this node points to."""
        return [edge.target for edge in self.edges if edge.source == node_id]

    def get_predecessors(self, node_id: str) -> List[str]:
        """Get all nodes that point to this node."""
        return [edge.source for edge in self.edges if edge.target == node_id]

    def in_degrees(self) -> Dict[str, int]:
        """Count incoming edges per node id."""
        counts = {node_id: 0 for node_id in self.nodes}
        for edge in self.edges:
            if edge.target in self.nodes:
                counts[edge.target] += 1
        return counts

    def get_roots(self) -> List[Node]:
        """Get nodes with no incoming edges, in insertion order."""
        in_degree = self.in_degrees()
        return [node for node in self.nodes.values() if in_degree[node.id] == 0]


def create_graph(connections) -> Graph:
    """
    Create a Graph from a list of connections.

    Args:
        connections: Iterable of (source, target) tuples

    Returns:
        Graph object
    """
    graph = Graph()
    for source, target in connections:
        graph.add_edge(source, target)
    return graph
