"""
Lexer module for sitemap markup.

Turns one line of Mermaid-style flowchart markup into a flat stream of typed
tokens. The lexer is deliberately forgiving: any character it does not
understand becomes an OTHER token, so the parser can always make progress.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

IDENTIFIER_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_"
)

# Opening bracket -> matching closer
BRACKET_PAIRS = {
    "[": "]",
    "(": ")",
}


class TokenType(Enum):
    """Kinds of tokens produced by the lexer."""

    IDENTIFIER = "identifier"
    OPEN = "open"
    LABEL = "label"
    CLOSE = "close"
    ARROW = "arrow"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    """A single lexed token and the column it starts at."""

    type: TokenType
    value: str
    column: int = 0


class Lexer:
    """
    Splits a markup line into tokens.

    Recognized tokens:
        IDENTIFIER: a run of ``[A-Za-z0-9_]`` characters.
        OPEN / LABEL / CLOSE: ``[text]`` or ``(text)``; the label runs up to
            the first matching closer and must not be empty.
        ARROW: one or more dashes with an optional trailing ``>``
            (``-->``, ``---``, ``->``).
        OTHER: anything else that is not whitespace.

    An opener without a closer later on the line (or with an empty label)
    is emitted as OTHER and lexing resumes right after it.
    """

    def tokenize(self, line: str) -> List[Token]:
        """
        Tokenize a single line.

        Args:
            line: One line of markup (without the trailing newline).

        Returns:
            List of tokens in source order. Never raises.
        """
        tokens: List[Token] = []
        pos = 0
        length = len(line)

        while pos < length:
            char = line[pos]

            if char.isspace():
                pos += 1
                continue

            if char in IDENTIFIER_CHARS:
                end = pos
                while end < length and line[end] in IDENTIFIER_CHARS:
                    end += 1
                tokens.append(Token(TokenType.IDENTIFIER, line[pos:end], pos))
                pos = end
                continue

            if char == "-":
                end = pos
                while end < length and line[end] == "-":
                    end += 1
                if end < length and line[end] == ">":
                    end += 1
                tokens.append(Token(TokenType.ARROW, line[pos:end], pos))
                pos = end
                continue

            if char in BRACKET_PAIRS:
                closer = BRACKET_PAIRS[char]
                close_pos = line.find(closer, pos + 1)
                if close_pos > pos + 1:
                    tokens.append(Token(TokenType.OPEN, char, pos))
                    tokens.append(
                        Token(TokenType.LABEL, line[pos + 1 : close_pos], pos + 1)
                    )
                    tokens.append(Token(TokenType.CLOSE, closer, close_pos))
                    pos = close_pos + 1
                    continue

            tokens.append(Token(TokenType.OTHER, char, pos))
            pos += 1

        return tokens


def tokenize(line: str) -> List[Token]:
    """Convenience function to tokenize one line."""
    return Lexer().tokenize(line)
