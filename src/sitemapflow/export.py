"""
File export functionality for sitemaps.

This module handles writing converted sitemaps to disk:
- draw.io documents (.drawio) - the XML produced by the serializer
- PNG images - a quick raster preview of the positioned diagram

The DiagramExporter class writes every file in one step (temporary file plus
rename), so an interrupted or failed export never leaves a half-written file
in place of a previous one.
"""

import io
import os
import stat
import tempfile
import textwrap
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .layout import LayoutResult, NodeLayout
from .models import style_for_level


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return tuple(int(color[i : i + 2], 16) for i in (0, 2, 4))


class DiagramExporter:
    """
    Exports converted sitemaps to files.

    Attributes:
        default_font: Default font name for PNG export.
    """

    def __init__(self, default_font: Optional[str] = None):
        """
        Initialize the diagram exporter.

        Args:
            default_font: Default font name for PNG export (e.g., "DejaVu Sans").
        """
        self.default_font = default_font

    def save_drawio(self, document: str, filename: str) -> Path:
        """
        Save a draw.io document.

        Args:
            document: The XML text to save.
            filename: Output filename (usually ends in .drawio).

        Returns:
            Path of the written file.
        """
        output_path = Path(filename)
        self._write_atomic(output_path, document.encode("utf-8"))
        return output_path

    def save_png(
        self,
        layout: LayoutResult,
        filename: str,
        bg_color: str = "#FFFFFF",
        line_color: str = "#333333",
        font_size: int = 14,
        padding: int = 20,
        font: Optional[str] = None,
        scale: int = 2,
    ) -> Path:
        """
        Save a PNG preview of a positioned sitemap.

        Boxes use the same level colors as the draw.io document and edges
        are drawn as orthogonal connectors from the bottom of the parent to
        the top of the child.

        Args:
            layout: Positioned nodes and edges.
            filename: Output filename (should end in .png).
            bg_color: Background color as hex string.
            line_color: Connector color as hex string.
            font_size: Label font size in points (before scaling).
            padding: Padding around the diagram in pixels (before scaling).
            font: Font name to use (overrides default_font if provided).
            scale: Resolution multiplier for crisp output (default 2 for retina).

        Returns:
            Path of the written file.
        """
        loaded_font = self._load_font(font_size * scale, font or self.default_font)
        min_x, min_y, max_x, max_y = self._bounds(layout.nodes.values())

        def to_px(x: float, y: float) -> Tuple[int, int]:
            return (
                round((x - min_x + padding) * scale),
                round((y - min_y + padding) * scale),
            )

        img_width = max(round((max_x - min_x + 2 * padding) * scale), 100 * scale)
        img_height = max(round((max_y - min_y + 2 * padding) * scale), 100 * scale)

        img = Image.new("RGB", (img_width, img_height), _hex_to_rgb(bg_color))
        draw = ImageDraw.Draw(img)

        line_rgb = _hex_to_rgb(line_color)
        for source, target in layout.edges:
            if source in layout.nodes and target in layout.nodes:
                self._draw_connector(
                    draw,
                    layout.nodes[source],
                    layout.nodes[target],
                    to_px,
                    line_rgb,
                    scale,
                )

        for node in layout.nodes.values():
            self._draw_box(draw, node, to_px, loaded_font, scale)

        buffer = io.BytesIO()
        img.save(buffer, "PNG")

        output_path = Path(filename)
        self._write_atomic(output_path, buffer.getvalue())
        return output_path

    def _bounds(self, nodes) -> Tuple[float, float, float, float]:
        nodes = list(nodes)
        if not nodes:
            return 0, 0, 0, 0
        return (
            min(n.x - n.width / 2 for n in nodes),
            min(n.y - n.height / 2 for n in nodes),
            max(n.x + n.width / 2 for n in nodes),
            max(n.y + n.height / 2 for n in nodes),
        )

    def _draw_box(
        self, draw: ImageDraw.ImageDraw, node: NodeLayout, to_px, font, scale: int
    ):
        tier = style_for_level(node.level)
        left, top = to_px(node.x - node.width / 2, node.y - node.height / 2)
        right, bottom = to_px(node.x + node.width / 2, node.y + node.height / 2)

        # Drop shadow
        offset = 3 * scale
        draw.rounded_rectangle(
            (left + offset, top + offset, right + offset, bottom + offset),
            radius=8 * scale,
            fill=(190, 190, 190),
        )
        draw.rounded_rectangle(
            (left, top, right, bottom),
            radius=8 * scale,
            fill=_hex_to_rgb(tier.fill),
            outline=_hex_to_rgb(tier.stroke),
            width=max(1, scale),
        )

        lines = self._wrap_label(node.label, font, right - left - 8 * scale)
        line_height = self._text_size("Mg", font)[1] + 2 * scale
        text_y = (top + bottom) / 2 - line_height * len(lines) / 2
        for line in lines:
            text_width = self._text_size(line, font)[0]
            text_x = (left + right - text_width) / 2
            draw.text((text_x, text_y), line, font=font, fill=(0, 0, 0))
            text_y += line_height

    def _draw_connector(
        self,
        draw: ImageDraw.ImageDraw,
        source: NodeLayout,
        target: NodeLayout,
        to_px,
        color,
        scale: int,
    ):
        start = to_px(source.x, source.y + source.height / 2)
        end = to_px(target.x, target.y - target.height / 2)
        mid_y = (start[1] + end[1]) // 2
        points = [start, (start[0], mid_y), (end[0], mid_y), end]
        draw.line(points, fill=color, width=2 * scale)

        # Arrow head pointing into the target
        size = 6 * scale
        direction = 1 if end[1] >= mid_y else -1
        draw.polygon(
            [
                end,
                (end[0] - size, end[1] - direction * size),
                (end[0] + size, end[1] - direction * size),
            ],
            fill=color,
        )

    def _wrap_label(self, label: str, font, max_width: int) -> List[str]:
        avg_char = max(1, self._text_size("x", font)[0])
        width = max(1, max_width // avg_char)
        return textwrap.wrap(label, width=width) or [label]

    @staticmethod
    def _text_size(text: str, font) -> Tuple[int, int]:
        bbox = font.getbbox(text)
        return bbox[2] - bbox[0], bbox[3] - bbox[1]

    def _write_atomic(self, output_path: Path, data: bytes) -> None:
        """Write the whole payload to a sibling temp file, then rename it into place."""
        fd, tmp_name = tempfile.mkstemp(
            dir=output_path.parent, prefix=f".{output_path.name}."
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.chmod(tmp_name, self._target_mode(output_path))
            os.replace(tmp_name, output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _target_mode(output_path: Path) -> int:
        """Mode of an existing target, else the umask default for a new file."""
        try:
            return stat.S_IMODE(output_path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def _load_font(
        self, font_size: int, font_name: Optional[str] = None
    ) -> ImageFont.FreeTypeFont:
        """
        Load a font for PNG labels.

        Tries the following in order:
        1. User-specified font name if provided
        2. Common system sans-serif fonts
        3. Pillow's default font

        Args:
            font_size: Font size in points.
            font_name: Optional font name (e.g., "DejaVu Sans", "Arial").

        Returns:
            A PIL ImageFont object.
        """
        fonts_to_try = []

        if font_name:
            fonts_to_try.append(font_name)

        # Common bold sans fonts across different systems
        fonts_to_try.extend(
            [
                # Linux
                "DejaVuSans-Bold.ttf",
                "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
                "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
                # macOS
                "/System/Library/Fonts/Helvetica.ttc",
                "/Library/Fonts/Arial Bold.ttf",
                # Windows
                "arialbd.ttf",
                "C:/Windows/Fonts/arialbd.ttf",
            ]
        )

        for font in fonts_to_try:
            try:
                return ImageFont.truetype(font, font_size)
            except OSError:
                continue

        # Fall back to Pillow's default font
        try:
            return ImageFont.load_default(size=font_size)
        except TypeError:
            # Older Pillow versions don't support size parameter
            return ImageFont.load_default()
