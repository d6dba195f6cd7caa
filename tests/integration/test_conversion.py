"""End-to-end tests from markup text to draw.io XML."""

from xml.etree import ElementTree as ET

from sitemapflow import SitemapConverter
from sitemapflow.drawio import node_style


def cells_by_kind(xml):
    root = ET.fromstring(xml.encode("utf-8"))
    all_cells = list(root.iter("mxCell"))
    shapes = [c for c in all_cells if c.get("vertex") == "1"]
    links = [c for c in all_cells if c.get("edge") == "1"]
    return all_cells, shapes, links


class TestSitemapScenario:
    """The four-page sitemap."""

    def test_graph(self, sitemap_input):
        """Test nodes, edges and levels."""
        graph = SitemapConverter().build_graph(sitemap_input)
        assert len(graph) == 4
        assert len(graph.edges) == 3
        assert {n.id: n.level for n in graph} == {"A": 0, "B": 1, "C": 1, "D": 2}
        assert {n.id: n.label for n in graph} == {
            "A": "Home",
            "B": "About",
            "C": "Products",
            "D": "Electronics",
        }

    def test_document(self, sitemap_input):
        """Test shapes, connectors and tier styles."""
        xml = SitemapConverter().convert(sitemap_input)
        all_cells, shapes, links = cells_by_kind(xml)

        assert len(all_cells) == 2 + 4 + 3
        assert [s.get("id") for s in shapes] == ["A", "B", "C", "D"]
        assert [s.get("style") for s in shapes] == [
            node_style(0),
            node_style(1),
            node_style(1),
            node_style(2),
        ]
        assert [(l.get("id"), l.get("source"), l.get("target")) for l in links] == [
            ("edge_0", "A", "B"),
            ("edge_1", "A", "C"),
            ("edge_2", "C", "D"),
        ]

    def test_tree_layout_is_top_down(self, sitemap_input):
        """Test that children are drawn below their parents."""
        xml = SitemapConverter().convert(sitemap_input)
        _, shapes, _ = cells_by_kind(xml)
        y = {s.get("id"): float(s.find("mxGeometry").get("y")) for s in shapes}
        assert y["A"] < y["B"] == y["C"] < y["D"]


class TestOrphanScenario:
    """Two disconnected chains."""

    def test_orphan_is_linked(self, orphan_input):
        """Test the synthesized Home -> Other edge and resulting levels."""
        graph = SitemapConverter().build_graph(orphan_input)
        assert len(graph) == 4
        assert [(e.source, e.target) for e in graph.edges] == [
            ("A", "B"),
            ("X", "Y"),
            ("A", "X"),
        ]
        assert graph.get_node("X").level == 1
        assert graph.get_node("Y").level == 2

    def test_document(self, orphan_input):
        """Test the rendered styles of the linked chain."""
        xml = SitemapConverter().convert(orphan_input)
        _, shapes, links = cells_by_kind(xml)
        styles = {s.get("id"): s.get("style") for s in shapes}
        assert styles["X"] == node_style(1)
        assert styles["Y"] == node_style(2)
        assert len(links) == 3


class TestDegradedInput:
    """Inputs that convert with best-effort recovery."""

    def test_deep_levels_use_default_style(self):
        """Test that levels past the palette fall back to the neutral style."""
        xml = SitemapConverter().convert("A --> B --> C --> D --> E --> F")
        _, shapes, _ = cells_by_kind(xml)
        styles = {s.get("id"): s.get("style") for s in shapes}
        assert styles["D"] == node_style(3)
        assert styles["E"] == node_style(None)
        assert styles["F"] == node_style(None)

    def test_unreachable_cycle_uses_default_style(self):
        """Test that nodes the root never reaches render neutrally."""
        xml = SitemapConverter().convert("A[Home] --> B\nC --> D\nD --> C")
        _, shapes, links = cells_by_kind(xml)
        styles = {s.get("id"): s.get("style") for s in shapes}
        assert styles["A"] == node_style(0)
        assert styles["C"] == node_style(None)
        assert styles["D"] == node_style(None)
        assert len(links) == 3

    def test_malformed_lines_are_skipped(self):
        """Test that garbage lines do not abort the conversion."""
        xml = SitemapConverter().convert("graph TD\n!!!\nA[Home] --> B[Blog]\n--> ???\n")
        _, shapes, links = cells_by_kind(xml)
        assert len(shapes) == 2
        assert len(links) == 1

    def test_duplicate_edges_render_once(self):
        """Test that repeated edges produce a single connector."""
        xml = SitemapConverter().convert("A --> B\nA --> B")
        _, _, links = cells_by_kind(xml)
        assert len(links) == 1

    def test_control_character_in_label(self):
        """Test that a label with a control character still converts."""
        xml = SitemapConverter().convert("A[Home\x01Page] --> B")
        _, shapes, _ = cells_by_kind(xml)
        assert shapes[0].get("value") == "HomePage"
