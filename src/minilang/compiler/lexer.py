"""
MiniLang Lexer (Tokenizer).

Transforms source text into an ordered list of tokens by testing a fixed,
priority-ordered list of matchers at each cursor position. The first matcher
that matches wins; whitespace is consumed and discarded.
"""

import logging
from typing import Iterator, Optional

from minilang.compiler.tokens import TOKEN_MATCHERS, Token, TokenMatcher
from minilang.utils.errors import SourceLocation, UnexpectedCharacterError, line_at

logger = logging.getLogger(__name__)


class Lexer:
    """
    Tokenizer for MiniLang source code.

    The lexer recognizes, in priority order:
    - Keywords (``if``, ``while``, ``for``, ``function``, type names, ...)
    - Single-character operators and punctuation
    - Boolean literals ``true`` / ``false``
    - Identifiers, numbers and double-quoted strings

    Tokenization stops at the first character no matcher accepts.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        # or iterate: for token in lexer: ...
    """

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        """
        Initialize the lexer with source code.

        Args:
            source: The MiniLang source code to tokenize
            filename: Optional filename for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.tokens: list[Token] = []

    def _match_at_cursor(self) -> tuple[Optional[TokenMatcher], str]:
        """Return the first matcher accepting the input at the cursor."""
        for matcher in TOKEN_MATCHERS:
            match = matcher.pattern.match(self.source, self.pos)
            if match and match.end() > self.pos:
                return matcher, match.group()
        return None, ""

    def _error(self) -> UnexpectedCharacterError:
        """Create an error for the character at the cursor."""
        return UnexpectedCharacterError(
            self.source[self.pos],
            self.pos,
            SourceLocation.from_offset(self.source, self.pos, self.filename),
            line_at(self.source, self.pos),
        )

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of tokens in source order.

        Raises:
            UnexpectedCharacterError: If no matcher accepts the current input.
        """
        self.pos = 0
        self.tokens = []

        while self.pos < len(self.source):
            matcher, text = self._match_at_cursor()
            if matcher is None:
                raise self._error()

            if not matcher.ignore:
                token = Token(matcher.kind, text, self.pos)
                self.tokens.append(token)
                logger.debug(f"Token found: {text!r} of kind {token.kind.name} at {self.pos}")

            self.pos += len(text)

        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        return iter(self.tokenize())


def tokenize(source: str, filename: Optional[str] = None) -> list[Token]:
    """Tokenize source text with a fresh lexer."""
    return Lexer(source, filename).tokenize()
