"""
SitemapFlow - Mermaid flowcharts to draw.io sitemaps

A Python library for turning Mermaid-style flowchart markup into leveled,
tree-laid-out draw.io diagrams.

Example:
    >>> from sitemapflow import SitemapConverter
    >>> converter = SitemapConverter()
    >>> xml = converter.convert('''
    ...     graph TD
    ...     A[Home] --> B[About]
    ...     A --> C[Products]
    ... ''')

Stage-by-stage Example:
    >>> graph = parse_flowchart("A[Home] --> B")
    >>> graph = assign_levels(link_orphans(graph))
    >>> layout = NetworkXLayout().layout(graph)
    >>> xml = DrawioSerializer().serialize(layout)
"""

__version__ = "1.2.0"

from .converter import (
    ConversionError,
    EmptyGraphError,
    InputUnreadableError,
    SitemapConverter,
    convert_text,
)
from .drawio import DrawioSerializer, serialize_layout
from .export import DiagramExporter
from .graph import Graph, create_graph
from .hierarchy import assign_levels, find_main_root, link_orphans
from .layout import (
    LayoutEngine,
    LayoutResult,
    NetworkXLayout,
    NodeLayout,
    compute_layout,
)
from .lexer import Lexer, Token, TokenType, tokenize
from .models import DEFAULT_STYLE, TIER_STYLES, Edge, Node, TierStyle
from .parser import Parser, parse_flowchart

__all__ = [
    # Main API
    "SitemapConverter",
    "convert_text",
    "ConversionError",
    "EmptyGraphError",
    "InputUnreadableError",
    # Parser
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "Parser",
    "parse_flowchart",
    # Graph
    "Graph",
    "Node",
    "Edge",
    "create_graph",
    "link_orphans",
    "assign_levels",
    "find_main_root",
    # Layout
    "LayoutEngine",
    "NetworkXLayout",
    "LayoutResult",
    "NodeLayout",
    "compute_layout",
    # Output
    "DrawioSerializer",
    "serialize_layout",
    "DiagramExporter",
    "TierStyle",
    "TIER_STYLES",
    "DEFAULT_STYLE",
]
