"""
draw.io serializer for positioned sitemaps.

Builds the ``mxfile`` XML document that diagrams.net (draw.io) imports:
one vertex cell per node, colored by hierarchy level, and one orthogonal
connector cell per edge.
"""

import re
from typing import Optional
from xml.etree.ElementTree import Element, SubElement, indent, tostring

from .layout import LayoutResult, NodeLayout
from .models import style_for_level

# Fixed page/canvas settings of the mxGraphModel element
GRAPH_MODEL_ATTRS = {
    "dx": "1000",
    "dy": "1000",
    "grid": "1",
    "gridSize": "10",
    "guides": "1",
    "tooltips": "1",
    "connect": "1",
    "arrows": "1",
    "fold": "1",
    "page": "1",
    "pageScale": "1",
    "pageWidth": "827",
    "pageHeight": "1169",
    "math": "0",
    "shadow": "0",
}

NODE_STYLE = (
    "rounded=1;whiteSpace=wrap;html=1;shadow=1;"
    "fillColor={fill};strokeColor={stroke};fontStyle=1;fontSize=14;"
)

# Leaves the source at bottom-center, enters the target at top-center
EDGE_STYLE = (
    "edgeStyle=orthogonalEdgeStyle;rounded=0;orthogonalLoop=1;jettySize=auto;"
    "html=1;entryX=0.5;entryY=0;entryDx=0;entryDy=0;exitX=0.5;exitY=1;"
    "exitDx=0;exitDy=0;strokeWidth=2;"
)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Characters XML 1.0 does not allow anywhere in a document
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

ROOT_CELL_ID = "0"
LAYER_CELL_ID = "1"


def format_number(value: float) -> str:
    """Render integral values without a fractional part."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def xml_safe(text: str) -> str:
    """Drop characters that cannot appear in an XML 1.0 document."""
    return _XML_ILLEGAL.sub("", text)


def node_style(level: Optional[int]) -> str:
    """Style string for a vertex at the given hierarchy level."""
    tier = style_for_level(level)
    return NODE_STYLE.format(fill=tier.fill, stroke=tier.stroke)


class DrawioSerializer:
    """
    Serializes a LayoutResult into draw.io XML.

    Attributes:
        diagram_name: Name of the diagram page.
        diagram_id: Identifier of the diagram page.
        host: Value of the ``mxfile`` host attribute.
    """

    def __init__(
        self,
        diagram_name: str = "Sitemap",
        diagram_id: str = "diagram_1",
        host: str = "Electron",
    ):
        self.diagram_name = diagram_name
        self.diagram_id = diagram_id
        self.host = host

    def build(self, layout: LayoutResult) -> Element:
        """
        Build the element tree for a positioned graph.

        Args:
            layout: Positioned nodes and edges

        Returns:
            The ``mxfile`` root element
        """
        mxfile = Element("mxfile", {"host": self.host, "type": "device"})
        diagram = SubElement(
            mxfile,
            "diagram",
            {"name": xml_safe(self.diagram_name), "id": self.diagram_id},
        )
        model = SubElement(diagram, "mxGraphModel", dict(GRAPH_MODEL_ATTRS))
        root = SubElement(model, "root")

        SubElement(root, "mxCell", {"id": ROOT_CELL_ID})
        SubElement(root, "mxCell", {"id": LAYER_CELL_ID, "parent": ROOT_CELL_ID})

        for node in layout.nodes.values():
            self._add_vertex(root, node)

        for index, (source, target) in enumerate(layout.edges):
            self._add_edge(root, index, source, target)

        return mxfile

    def serialize(self, layout: LayoutResult) -> str:
        """
        Serialize a positioned graph to a pretty-printed XML string.

        Args:
            layout: Positioned nodes and edges

        Returns:
            XML document text with a UTF-8 declaration
        """
        mxfile = self.build(layout)
        indent(mxfile, space="  ")
        return XML_DECLARATION + tostring(mxfile, encoding="unicode") + "\n"

    def _add_vertex(self, root: Element, node: NodeLayout) -> Element:
        cell = SubElement(
            root,
            "mxCell",
            {
                "id": node.id,
                "value": xml_safe(node.label),
                "style": node_style(node.level),
                "parent": LAYER_CELL_ID,
                "vertex": "1",
            },
        )
        # draw.io positions by top-left corner; layouts report centers
        SubElement(
            cell,
            "mxGeometry",
            {
                "x": format_number(node.x - node.width / 2),
                "y": format_number(node.y - node.height / 2),
                "width": format_number(node.width),
                "height": format_number(node.height),
                "as": "geometry",
            },
        )
        return cell

    def _add_edge(self, root: Element, index: int, source: str, target: str) -> Element:
        cell = SubElement(
            root,
            "mxCell",
            {
                "id": f"edge_{index}",
                "style": EDGE_STYLE,
                "edge": "1",
                "parent": LAYER_CELL_ID,
                "source": source,
                "target": target,
            },
        )
        geometry = SubElement(cell, "mxGeometry", {"relative": "1", "as": "geometry"})
        for point in ("sourcePoint", "targetPoint"):
            SubElement(geometry, "mxPoint", {"x": "0", "y": "0", "as": point})
        return cell


def serialize_layout(layout: LayoutResult, **kwargs) -> str:
    """
    Convenience function to serialize a layout.

    Args:
        layout: Positioned nodes and edges
        **kwargs: Additional parameters for DrawioSerializer

    Returns:
        XML document text
    """
    return DrawioSerializer(**kwargs).serialize(layout)
