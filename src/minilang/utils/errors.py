"""
Error types and source location tracking for the MiniLang front end.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from minilang.compiler.tokens import Token


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        offset: 0-indexed character offset from start of source
        filename: Optional filename for error reporting
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    @classmethod
    def from_offset(
        cls, source: str, offset: int, filename: Optional[str] = None
    ) -> "SourceLocation":
        """Compute line and column for a character offset into source."""
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            line=line,
            column=offset - line_start + 1,
            offset=offset,
            filename=filename,
        )

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


def line_at(source: str, offset: int) -> str:
    """Return the full source line containing offset."""
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end == -1:
        end = len(source)
    return source[start:end]


class MiniLangError(Exception):
    """Base exception for all MiniLang front-end errors."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.position = position
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            header = f"[{self.location}] {self.message}"
        elif self.position is not None:
            header = f"[offset {self.position}] {self.message}"
        else:
            header = self.message

        lines = [header]
        if self.source_line and self.location:
            lines.append(f"    {self.source_line}")
            # Caret under the error column
            lines.append(" " * (4 + self.location.column - 1) + "^")

        return "\n".join(lines)


def describe_token(token: Optional["Token"]) -> str:
    """Describe a token (or end of input) for error messages."""
    if token is None:
        return "end of input"
    return f"'{token.text}'"


class LexerError(MiniLangError):
    """Raised when the lexer encounters a character no matcher accepts."""

    pass


class UnexpectedCharacterError(LexerError):
    """No token matcher recognizes the character at ``position``."""

    def __init__(
        self,
        char: str,
        position: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.char = char
        super().__init__(
            f"Unexpected character '{char}' at position {position}",
            position,
            location,
            source_line,
        )


class ParserError(MiniLangError):
    """Raised when the parser encounters a syntax error."""

    def __init__(
        self,
        message: str,
        token: Optional["Token"] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.token = token
        position = token.position if token is not None else None
        super().__init__(message, position, location, source_line)


class ExpectedTokenError(ParserError):
    """
    A required token is missing.

    Covers punctuation (``;``, ``(``, ``)``, ``{``, ``}``, ``,``), the ``=``
    operator, identifiers, and keywords.
    """

    def __init__(
        self,
        expected: str,
        token: Optional["Token"] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        context: Optional[str] = None,
    ) -> None:
        self.expected = expected
        self.context = context
        found = describe_token(token)
        where = f" {context}" if context else ""
        super().__init__(
            f"Expected {expected}{where}, found {found}",
            token,
            location,
            source_line,
        )


class UnexpectedStatementError(ParserError):
    """No statement rule starts with the current token."""

    def __init__(
        self,
        token: Optional["Token"] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        found = describe_token(token)
        super().__init__(
            f"Expected statement, found {found}",
            token,
            location,
            source_line,
        )


class UnparseableFactorError(ParserError):
    """The expression grammar found no valid leaf at the current token."""

    def __init__(
        self,
        token: Optional["Token"] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        found = describe_token(token)
        super().__init__(
            f"Invalid factor: expected number, boolean, string, identifier "
            f"or '(', found {found}",
            token,
            location,
            source_line,
        )


class NestingTooDeepError(ParserError):
    """Blocks or grouped expressions are nested beyond what the parser accepts."""

    def __init__(
        self,
        limit: int,
        token: Optional["Token"] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.limit = limit
        found = describe_token(token)
        super().__init__(
            f"Nesting exceeds {limit} levels at {found}",
            token,
            location,
            source_line,
        )
