"""Unit tests for the export module."""

import os
import stat

import pytest
from PIL import Image

from sitemapflow.export import DiagramExporter
from sitemapflow.layout import LayoutResult, NodeLayout


@pytest.fixture
def exporter():
    """Default DiagramExporter instance."""
    return DiagramExporter()


@pytest.fixture
def small_layout():
    """Three positioned nodes over two levels, plus an unleveled one."""
    result = LayoutResult()
    size = {"width": 140, "height": 70}
    result.nodes["A"] = NodeLayout(id="A", label="Home", level=0, x=170, y=35, **size)
    result.nodes["B"] = NodeLayout(
        id="B", label="A rather long page title", level=1, x=70, y=185, **size
    )
    result.nodes["C"] = NodeLayout(id="C", label="Shop", level=None, x=270, y=185, **size)
    result.edges = [("A", "B"), ("A", "C")]
    return result


class TestSaveDrawio:
    """Tests for draw.io export."""

    def test_writes_document(self, exporter, tmp_path):
        """Test that the XML is written as UTF-8."""
        target = tmp_path / "site.drawio"
        written = exporter.save_drawio("<mxfile>Café</mxfile>", str(target))
        assert written == target
        assert target.read_text(encoding="utf-8") == "<mxfile>Café</mxfile>"

    def test_replaces_existing_file(self, exporter, tmp_path):
        """Test overwriting a previous output."""
        target = tmp_path / "site.drawio"
        target.write_text("old", encoding="utf-8")
        exporter.save_drawio("new", str(target))
        assert target.read_text(encoding="utf-8") == "new"

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
    def test_new_file_follows_umask(self, exporter, tmp_path):
        """Test that a fresh output gets the usual 0666 minus umask mode."""
        previous = os.umask(0o022)
        try:
            target = exporter.save_drawio("<mxfile/>", str(tmp_path / "site.drawio"))
        finally:
            os.umask(previous)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
    def test_overwrite_keeps_existing_mode(self, exporter, tmp_path):
        """Test that replacing a file keeps its permissions."""
        target = tmp_path / "site.drawio"
        target.write_text("old", encoding="utf-8")
        target.chmod(0o664)
        exporter.save_drawio("new", str(target))
        assert stat.S_IMODE(target.stat().st_mode) == 0o664

    def test_leaves_no_temporary_files(self, exporter, tmp_path):
        """Test that only the target remains in the directory."""
        exporter.save_drawio("<mxfile/>", str(tmp_path / "site.drawio"))
        assert [p.name for p in tmp_path.iterdir()] == ["site.drawio"]

    def test_missing_directory_raises(self, exporter, tmp_path):
        """Test that an unwritable target raises OSError."""
        with pytest.raises(OSError):
            exporter.save_drawio("<mxfile/>", str(tmp_path / "missing" / "site.drawio"))


class TestSavePng:
    """Tests for PNG preview export."""

    def test_writes_png(self, exporter, small_layout, tmp_path):
        """Test that a PNG of the diagram size is written."""
        target = tmp_path / "site.png"
        exporter.save_png(small_layout, str(target), scale=1)

        with Image.open(target) as img:
            assert img.format == "PNG"
            assert img.size == (340 + 40, 220 + 40)

    def test_scale_multiplies_size(self, exporter, small_layout, tmp_path):
        """Test the resolution multiplier."""
        target = tmp_path / "site.png"
        exporter.save_png(small_layout, str(target), scale=2)
        with Image.open(target) as img:
            assert img.size == ((340 + 40) * 2, (220 + 40) * 2)

    def test_box_uses_tier_fill(self, exporter, small_layout, tmp_path):
        """Test that the root box is painted in the tier 0 color."""
        target = tmp_path / "site.png"
        exporter.save_png(small_layout, str(target), scale=1)
        with Image.open(target) as img:
            # Just inside the left border of the Home box, clear of its label
            assert img.convert("RGB").getpixel((20 + 100 + 6, 20 + 35)) == (218, 232, 252)

    def test_empty_layout(self, exporter, tmp_path):
        """Test that an empty layout still produces an image."""
        target = tmp_path / "empty.png"
        exporter.save_png(LayoutResult(), str(target), scale=1)
        with Image.open(target) as img:
            assert img.size == (100, 100)

    def test_no_temporary_files(self, exporter, small_layout, tmp_path):
        """Test that only the PNG remains in the directory."""
        exporter.save_png(small_layout, str(tmp_path / "site.png"), scale=1)
        assert [p.name for p in tmp_path.iterdir()] == ["site.png"]
