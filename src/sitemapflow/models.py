"""
Data models for sitemap conversion.

This module contains the dataclasses shared by every stage of the pipeline:
the vertices and directed links produced by the parser, and the color tiers
used when the leveled graph is rendered.

Classes:
    Node: A labeled vertex (one page or section of the sitemap).
    Edge: A directed link from a parent node to a child node.
    TierStyle: Fill and stroke colors for one hierarchy level.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Node:
    """
    A labeled vertex of the flowchart.

    Attributes:
        id: Identifier token from the markup (``[A-Za-z0-9_]+``, case-sensitive).
        label: Display text. Defaults to the identifier.
        level: Hop distance from the root, or None until levels are assigned
            (and for nodes the root never reaches).
    """

    id: str
    label: str = ""
    level: Optional[int] = None

    def __post_init__(self):
        if not self.label:
            self.label = self.id


@dataclass(frozen=True)
class Edge:
    """
    A directed link between two node identifiers.

    Attributes:
        source: Identifier of the parent node.
        target: Identifier of the child node.
    """

    source: str
    target: str


@dataclass(frozen=True)
class TierStyle:
    """
    Colors for one hierarchy tier.

    Attributes:
        fill: Box fill color as a hex string.
        stroke: Box border color as a hex string.
    """

    fill: str
    stroke: str


# Blue, green, orange, purple for levels 0-3
TIER_STYLES = (
    TierStyle(fill="#dae8fc", stroke="#6c8ebf"),
    TierStyle(fill="#d5e8d4", stroke="#82b366"),
    TierStyle(fill="#ffe6cc", stroke="#d79b00"),
    TierStyle(fill="#e1d5e7", stroke="#9673a6"),
)

DEFAULT_STYLE = TierStyle(fill="#f5f5f5", stroke="#666666")


def style_for_level(level: Optional[int]) -> TierStyle:
    """Return the tier colors for a level, falling back to the neutral style."""
    if level is not None and 0 <= level < len(TIER_STYLES):
        return TIER_STYLES[level]
    return DEFAULT_STYLE
