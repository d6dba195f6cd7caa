"""
Parser module for sitemap conversion.

Handles parsing of Mermaid-style flowchart text into a Graph of labeled
nodes and directed edges. Parsing is best effort: lines that cannot be
understood contribute nothing and never abort the run.
"""

import logging
from typing import List, Optional

from .graph import Graph
from .lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = frozenset({"graph", "flowchart"})
COMMENT_PREFIX = "%%"


class Parser:
    """Parses flowchart markup into a Graph."""

    def __init__(self, lexer: Optional[Lexer] = None):
        self.lexer = lexer or Lexer()

    def parse(self, input_text: str) -> Graph:
        """
        Parse markup text and return the resulting graph.

        Each line is handled in two independent passes over its tokens:
        1. Node declarations: ``ID``, ``ID[Label]`` or ``ID(Label)``
        2. Edges: the line is split on arrow tokens and consecutive
           segments are linked, so ``A --> B --> C`` yields two edges

        Args:
            input_text: Multi-line markup, optionally starting with a
                ``graph TD`` / ``flowchart LR`` header

        Returns:
            Graph with nodes in first-seen order and edges in declaration order
        """
        graph = Graph()

        for line_num, line in enumerate(input_text.splitlines(), 1):
            stripped = line.strip()

            # Skip empty lines and comments
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue

            tokens = self.lexer.tokenize(stripped)
            if self._is_header(tokens):
                continue

            declared = self._parse_nodes(tokens, graph)
            linked = self._parse_edges(tokens, graph)

            if not declared and not linked:
                logger.debug("Line %d: nothing recognized in %r", line_num, stripped)

        return graph

    def _is_header(self, tokens: List[Token]) -> bool:
        first = tokens[0] if tokens else None
        return (
            first is not None
            and first.type is TokenType.IDENTIFIER
            and first.value in HEADER_KEYWORDS
        )

    def _parse_nodes(self, tokens: List[Token], graph: Graph) -> int:
        """
        Declare every node occurrence on the line.

        Returns:
            Number of node occurrences found.
        """
        count = 0
        for idx, token in enumerate(tokens):
            if token.type is not TokenType.IDENTIFIER:
                continue
            graph.declare(token.value, self._label_after(tokens, idx))
            count += 1
        return count

    def _label_after(self, tokens: List[Token], idx: int) -> Optional[str]:
        """Return the bracketed label directly following tokens[idx], if any."""
        following = tokens[idx + 1 : idx + 4]
        if [t.type for t in following] == [
            TokenType.OPEN,
            TokenType.LABEL,
            TokenType.CLOSE,
        ]:
            return following[1].value
        return None

    def _parse_edges(self, tokens: List[Token], graph: Graph) -> int:
        """
        Link the leading identifiers of consecutive arrow-separated segments.

        Returns:
            Number of edges added.
        """
        segments = self.split_segments(tokens)
        if len(segments) < 2:
            return 0

        count = 0
        for left, right in zip(segments, segments[1:]):
            source = self._leading_identifier(left)
            target = self._leading_identifier(right)
            if source is None or target is None:
                continue
            graph.add_edge(source, target)
            count += 1
        return count

    @staticmethod
    def split_segments(tokens: List[Token]) -> List[List[Token]]:
        """Split a token stream on ARROW tokens."""
        segments: List[List[Token]] = [[]]
        for token in tokens:
            if token.type is TokenType.ARROW:
                segments.append([])
            else:
                segments[-1].append(token)
        return segments

    @staticmethod
    def _leading_identifier(segment: List[Token]) -> Optional[str]:
        for token in segment:
            if token.type is TokenType.IDENTIFIER:
                return token.value
        return None


def parse_flowchart(input_text: str) -> Graph:
    """
    Convenience function to parse flowchart input.

    Args:
        input_text: Multi-line markup text

    Returns:
        Parsed Graph
    """
    parser = Parser()
    return parser.parse(input_text)
