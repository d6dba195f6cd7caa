"""
Hierarchy module for sitemap conversion.

Turns a parsed graph into a single-rooted, leveled tree:

- ``link_orphans`` attaches every extra root to one main root.
- ``assign_levels`` records each node's BFS depth from that root.

Both functions take the graph explicitly and return it.
"""

import logging
from collections import deque
from typing import Optional

from .graph import Graph
from .models import Node

logger = logging.getLogger(__name__)

MAIN_ROOT_KEYWORD = "home"


def find_main_root(graph: Graph) -> Optional[Node]:
    """
    Pick the node that should anchor the hierarchy.

    The first root (in insertion order) whose label contains "home",
    case-insensitively, wins; otherwise the first root. Returns None when
    every node has an incoming edge.
    """
    roots = graph.get_roots()
    if not roots:
        return None
    for root in roots:
        if MAIN_ROOT_KEYWORD in root.label.lower():
            return root
    return roots[0]


def link_orphans(graph: Graph) -> Graph:
    """
    Connect disconnected roots to the main root.

    Every root other than the main root gets a synthesized edge from the main
    root, in insertion order. Graphs with zero or one root are unchanged.

    Args:
        graph: Parsed graph

    Returns:
        The same graph, with synthesized edges appended
    """
    roots = graph.get_roots()
    if len(roots) <= 1:
        return graph

    main_root = find_main_root(graph)
    logger.info(
        "Found %d disconnected roots, linking them to %r", len(roots), main_root.label
    )

    for root in roots:
        if root.id == main_root.id:
            continue
        logger.info("Connecting orphan %r to %r", root.label, main_root.label)
        graph.add_edge(main_root.id, root.id)

    return graph


def assign_levels(graph: Graph) -> Graph:
    """
    Assign every node its hop distance from the root.

    The root is the first node without incoming edges, or the first node
    when a cycle leaves none. Breadth-first traversal follows edges in
    declaration order and a node keeps the level of its first discovery.
    Nodes the root cannot reach keep ``level = None``.

    Args:
        graph: Normalized graph

    Returns:
        The same graph with levels written
    """
    for node in graph:
        node.level = None

    if not len(graph):
        return graph

    roots = graph.get_roots()
    root = roots[0] if roots else graph.get_nodes()[0]
    adjacency = graph.adjacency()

    root.level = 0
    queue = deque([root.id])
    while queue:
        current = graph.get_node(queue.popleft())
        for neighbor_id in adjacency.get(current.id, []):
            neighbor = graph.get_node(neighbor_id)
            if neighbor.level is None:
                neighbor.level = current.level + 1
                queue.append(neighbor_id)

    unreached = [node.id for node in graph if node.level is None]
    if unreached:
        logger.info("Nodes unreachable from %r: %s", root.id, ", ".join(unreached))

    return graph
