"""
Token definitions for the MiniLang lexer.

This module defines the token kinds recognized by the language and the
priority-ordered matcher table the lexer walks at every cursor position.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TokenKind(Enum):
    """Enumeration of all token kinds in MiniLang."""

    KEYWORD = auto()
    OPERATOR = auto()
    PUNCTUATION = auto()
    BOOLEAN = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """
    A classified lexical unit.

    Attributes:
        kind: The token kind
        text: The exact source text that was matched
        position: 0-indexed character offset where the token begins
    """

    kind: TokenKind
    text: str
    position: int

    @property
    def end(self) -> int:
        """Offset one past the last character of the token."""
        return self.position + len(self.text)

    def is_(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        """Check the kind, and the text when one is given."""
        return self.kind == kind and (text is None or self.text == text)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.position})"


@dataclass(frozen=True, slots=True)
class TokenMatcher:
    """
    A pattern paired with the token kind it produces.

    ``kind`` is None for matchers whose text is consumed but never emitted.
    """

    kind: Optional[TokenKind]
    pattern: re.Pattern
    ignore: bool = False


TYPE_KEYWORDS: tuple[str, ...] = ("int", "float", "string", "bool")

KEYWORDS: tuple[str, ...] = (
    "if",
    "else",
    "while",
    "for",
    "function",
    *TYPE_KEYWORDS,
    "return",
)

# Operators the Term rule folds into binary expressions. Every other
# operator character is lexically valid but rejected by the grammar.
TERM_OPERATORS: tuple[str, ...] = ("+", "-", "*", "/")


def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.ASCII)


# Order is part of the grammar: the first matcher that matches at the cursor
# wins, so keywords shadow identifiers and booleans shadow identifiers.
TOKEN_MATCHERS: tuple[TokenMatcher, ...] = (
    TokenMatcher(
        TokenKind.KEYWORD,
        _compile(r"\b(?:" + "|".join(KEYWORDS) + r")\b"),
    ),
    TokenMatcher(TokenKind.OPERATOR, _compile(r"[+\-*/%|&=<>!]")),
    TokenMatcher(TokenKind.PUNCTUATION, _compile(r"[{}();,]")),
    TokenMatcher(TokenKind.BOOLEAN, _compile(r"\b(?:true|false)\b")),
    TokenMatcher(TokenKind.IDENTIFIER, _compile(r"\b[a-zA-Z_][a-zA-Z0-9_]*\b")),
    TokenMatcher(TokenKind.NUMBER, _compile(r"\b\d+(?:\.\d+)?\b")),
    TokenMatcher(TokenKind.STRING, _compile(r'"(?:[^"\\]|\\.)*"')),
    # Unicode whitespace, plus the byte order mark that Unicode \s leaves out.
    TokenMatcher(None, re.compile(r"[\s\ufeff]+"), ignore=True),
)
