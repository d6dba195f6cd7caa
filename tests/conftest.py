"""Pytest configuration and shared fixtures for SitemapFlow tests."""

import pytest

from sitemapflow import Graph, LayoutResult, NodeLayout, Parser, SitemapConverter


class FixedLayout:
    """Layout stub placing node i at a fixed grid cell, one row per level."""

    def __init__(self, width=100, height=40):
        self.width = width
        self.height = height
        self.calls = 0

    def layout(self, graph: Graph) -> LayoutResult:
        self.calls += 1
        result = LayoutResult()
        for index, node in enumerate(graph):
            row = node.level if node.level is not None else -1
            result.nodes[node.id] = NodeLayout(
                id=node.id,
                label=node.label,
                level=node.level,
                x=200 * (index + 1),
                y=100 * (row + 1),
                width=self.width,
                height=self.height,
            )
        result.edges = [(edge.source, edge.target) for edge in graph.edges]
        return result


@pytest.fixture
def sitemap_input():
    """The basic four-page sitemap."""
    return """graph TD
A[Home] --> B[About]
A --> C[Products]
C --> D[Electronics]
"""


@pytest.fixture
def orphan_input():
    """Two disconnected chains, one of them rooted at Home."""
    return """graph TD
A[Home] --> B
X[Other] --> Y
"""


@pytest.fixture
def diamond_input():
    """A node reachable over paths of different length."""
    return """
    A --> B --> C
    A --> C
    """


@pytest.fixture
def parser():
    """Default Parser instance."""
    return Parser()


@pytest.fixture
def fixed_layout():
    """Deterministic layout stub."""
    return FixedLayout()


@pytest.fixture
def converter(fixed_layout):
    """Converter wired to the deterministic layout stub."""
    return SitemapConverter(layout_engine=fixed_layout)
