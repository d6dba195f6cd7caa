"""
Main conversion module.

Combines parsing, orphan linking, level assignment, layout and serialization
to turn flowchart markup into a draw.io document.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .drawio import DrawioSerializer
from .export import DiagramExporter
from .graph import Graph
from .hierarchy import assign_levels, link_orphans
from .layout import LayoutEngine, LayoutResult, NetworkXLayout
from .parser import Parser

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "output.drawio"


class ConversionError(Exception):
    """Base class for failures that abort a conversion run."""

    pass


class InputUnreadableError(ConversionError):
    """Raised when the source file cannot be read."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


class EmptyGraphError(ConversionError):
    """Raised when the markup yields no nodes at all."""

    def __init__(self):
        super().__init__("No nodes found. Check your file syntax.")


class SitemapConverter:
    """
    Convert flowchart markup into draw.io sitemaps.

    Example:
        >>> converter = SitemapConverter()
        >>> xml = converter.convert('''
        ...     graph TD
        ...     A[Home] --> B[About]
        ... ''')
    """

    def __init__(
        self,
        layout_engine: Optional[LayoutEngine] = None,
        diagram_name: str = "Sitemap",
        exporter: Optional[DiagramExporter] = None,
    ):
        """
        Initialize the converter.

        Args:
            layout_engine: Object placing the nodes; defaults to NetworkXLayout
            diagram_name: Name of the draw.io page (default: "Sitemap")
            exporter: File writer; defaults to DiagramExporter
        """
        if not diagram_name:
            raise ValueError("diagram_name must not be empty")

        self.parser = Parser()
        self.layout_engine = layout_engine or NetworkXLayout()
        self.serializer = DrawioSerializer(diagram_name=diagram_name)
        self.exporter = exporter or DiagramExporter()

    def build_graph(self, input_text: str) -> Graph:
        """
        Parse markup and turn it into a single-rooted, leveled graph.

        Args:
            input_text: Flowchart markup

        Returns:
            Leveled Graph

        Raises:
            EmptyGraphError: If no node could be parsed
        """
        graph = self.parser.parse(input_text)
        if not len(graph):
            raise EmptyGraphError()

        logger.info("Parsed %d nodes and %d edges", len(graph), len(graph.edges))
        link_orphans(graph)
        assign_levels(graph)
        return graph

    def layout(self, input_text: str) -> LayoutResult:
        """Run every stage up to and including layout."""
        graph = self.build_graph(input_text)
        logger.info("Calculating layout")
        return self.layout_engine.layout(graph)

    def convert(self, input_text: str) -> str:
        """
        Convert markup text to a draw.io XML document.

        Args:
            input_text: Flowchart markup

        Returns:
            draw.io XML as a string

        Raises:
            EmptyGraphError: If no node could be parsed
        """
        layout = self.layout(input_text)
        logger.info("Building draw.io XML")
        return self.serializer.serialize(layout)

    def convert_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path] = DEFAULT_OUTPUT,
        png_path: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        Convert a markup file and write the draw.io document.

        Nothing is written unless every stage succeeds, and the document is
        replaced in a single step so a prior output file stays intact on
        failure.

        Args:
            input_path: Path to the markup file (e.g. ``sitemap.mmd``)
            output_path: Path of the draw.io file to write
            png_path: Optional path of a PNG preview to write as well

        Returns:
            Path of the written draw.io file

        Raises:
            InputUnreadableError: If the input cannot be read or decoded
            EmptyGraphError: If no node could be parsed
        """
        input_path = Path(input_path)
        logger.info("Reading %s", input_path)
        input_text = self.read_input(input_path)

        layout = self.layout(input_text)
        document = self.serializer.serialize(layout)

        written = self.exporter.save_drawio(document, output_path)
        if png_path is not None:
            self.exporter.save_png(layout, png_path)
        return written

    @staticmethod
    def read_input(input_path: Path) -> str:
        """Read the whole markup file, mapping I/O failures to InputUnreadableError."""
        try:
            return input_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InputUnreadableError(input_path, "not valid UTF-8 text") from exc
        except OSError as exc:
            raise InputUnreadableError(input_path, exc.strerror or str(exc)) from exc


def convert_text(input_text: str, **kwargs) -> str:
    """
    Convenience function to convert markup to draw.io XML.

    Args:
        input_text: Flowchart markup
        **kwargs: Additional parameters for SitemapConverter

    Returns:
        draw.io XML as a string
    """
    converter = SitemapConverter(**kwargs)
    return converter.convert(input_text)
