"""
Rust-like diagnostics for MiniLang.

This module turns front-end errors into structured diagnostic records with
an error code, a source offset, and optional source context, and defines the
sinks those records are delivered to.

Example output:
    error[E0203]: Expected ';' after expression, found end of input
      --> example.ml:1:10
       |
     1 | int x = 5
       |          ^
       |
       = help: add ';'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from minilang.utils.errors import (
    ExpectedTokenError,
    LexerError,
    MiniLangError,
    NestingTooDeepError,
    UnexpectedStatementError,
    UnparseableFactorError,
)


# =============================================================================
# Error Codes Catalog
# =============================================================================


class ErrorCode:
    """
    Catalog of error codes for MiniLang diagnostics.

    - E02xx: Syntax errors (lexing and parsing)
    """

    E0203 = "E0203"  # missing token
    E0204 = "E0204"  # invalid expression
    E0205 = "E0205"  # invalid statement
    E0206 = "E0206"  # nesting too deep
    E0208 = "E0208"  # unexpected character


ERROR_DESCRIPTIONS: dict[str, str] = {
    ErrorCode.E0203: "missing token",
    ErrorCode.E0204: "invalid expression",
    ErrorCode.E0205: "invalid statement",
    ErrorCode.E0206: "nesting too deep",
    ErrorCode.E0208: "unexpected character",
}


# =============================================================================
# Diagnostic Types
# =============================================================================


class DiagnosticLevel(Enum):
    """Severity level of a diagnostic message."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"

    def color_code(self) -> str:
        """Get ANSI color code for this level."""
        colors = {
            DiagnosticLevel.ERROR: "\033[91m",  # Red
            DiagnosticLevel.WARNING: "\033[93m",  # Yellow
            DiagnosticLevel.NOTE: "\033[96m",  # Cyan
            DiagnosticLevel.HELP: "\033[92m",  # Green
        }
        return colors.get(self, "")

    def log_level(self) -> int:
        """Get the matching ``logging`` level."""
        levels = {
            DiagnosticLevel.ERROR: logging.ERROR,
            DiagnosticLevel.WARNING: logging.WARNING,
        }
        return levels.get(self, logging.INFO)


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """
    A span of source code, representing a range of characters.

    Attributes:
        start_line: 1-indexed starting line number
        start_col: 1-indexed starting column number
        end_line: 1-indexed ending line number
        end_col: 1-indexed ending column number (exclusive)
        filename: Optional filename for display
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    filename: str = "<input>"

    @classmethod
    def from_location(
        cls, line: int, col: int, length: int = 1, filename: str = "<input>"
    ) -> "SourceSpan":
        """Create a span from a single location with a given length."""
        return cls(
            start_line=line,
            start_col=col,
            end_line=line,
            end_col=col + length,
            filename=filename,
        )

    @classmethod
    def from_offset(
        cls, source: str, offset: int, length: int = 1, filename: str = "<input>"
    ) -> "SourceSpan":
        """Create a single-line span starting at a character offset."""
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        col = offset - (source.rfind("\n", 0, offset) + 1) + 1
        return cls.from_location(line, col, max(1, length), filename)

    def __str__(self) -> str:
        return f"{self.filename}:{self.start_line}:{self.start_col}"

    @property
    def is_multiline(self) -> bool:
        """Check if this span covers multiple lines."""
        return self.start_line != self.end_line

    @property
    def length(self) -> int:
        """Get the length of the span on a single line."""
        if self.is_multiline:
            return 1
        return max(1, self.end_col - self.start_col)


@dataclass(slots=True)
class DiagnosticLabel:
    """
    A label pointing to a specific span of source code.

    Attributes:
        span: The source span this label points to
        message: Optional message to display with the label
        is_primary: Whether this is the primary label (shown with ^^^)
    """

    span: SourceSpan
    message: str = ""
    is_primary: bool = True


@dataclass
class Diagnostic:
    """
    A diagnostic record delivered to a sink.

    Attributes:
        code: Error code (e.g., "E0203")
        level: Severity level
        message: The main diagnostic message
        position: Character offset of the offending token, None at end of input
        labels: Source code labels (present when the source text is known)
        notes: Additional notes to display
        helps: Help messages
    """

    code: str
    level: DiagnosticLevel
    message: str
    position: Optional[int] = None
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    helps: list[str] = field(default_factory=list)

    @property
    def primary_span(self) -> Optional[SourceSpan]:
        """The span of the primary label, if any."""
        if not self.labels:
            return None
        return next((l for l in self.labels if l.is_primary), self.labels[0]).span

    def render(self, source_code: str, use_color: bool = True) -> str:
        """
        Render this diagnostic as a formatted string.

        Args:
            source_code: The original source code for context
            use_color: Whether to use ANSI color codes

        Returns:
            A formatted multi-line string representation
        """
        lines: list[str] = []
        source_lines = source_code.splitlines()

        reset = "\033[0m" if use_color else ""
        bold = "\033[1m" if use_color else ""
        level_color = self.level.color_code() if use_color else ""
        blue = "\033[94m" if use_color else ""
        green = "\033[92m" if use_color else ""

        # Header line: error[E0203]: expected ';'
        level_str = self.level.value
        if self.code in ERROR_DESCRIPTIONS:
            header = (
                f"{level_color}{bold}{level_str}[{self.code}]{reset}: {bold}{self.message}{reset}"
            )
        else:
            header = f"{level_color}{bold}{level_str}{reset}: {bold}{self.message}{reset}"
        lines.append(header)

        span = self.primary_span
        if span is not None:
            lines.append(f"  {blue}-->{reset} {span}")
        elif self.position is not None:
            lines.append(f"  {blue}-->{reset} offset {self.position}")

        # Source context with labels
        if self.labels and source_lines:
            lines.append(f"   {blue}|{reset}")

            labels_by_line: dict[int, list[DiagnosticLabel]] = {}
            for label in self.labels:
                labels_by_line.setdefault(label.span.start_line, []).append(label)

            for line_num in sorted(labels_by_line):
                if 1 <= line_num <= len(source_lines):
                    lines.append(f"{blue}{line_num:3} |{reset} {source_lines[line_num - 1]}")

                    for label in labels_by_line[line_num]:
                        underline_char = "^" if label.is_primary else "-"
                        underline_color = level_color if label.is_primary else blue
                        padding = " " * (label.span.start_col - 1)
                        underline = underline_char * label.span.length
                        underline_line = (
                            f"   {blue}|{reset} {padding}{underline_color}{underline}{reset}"
                        )
                        if label.message:
                            underline_line += f" {underline_color}{label.message}{reset}"
                        lines.append(underline_line)

            lines.append(f"   {blue}|{reset}")

        for note in self.notes:
            lines.append(f"   {blue}={reset} {bold}note:{reset} {note}")

        for help_msg in self.helps:
            lines.append(f"   {blue}={reset} {green}help:{reset} {help_msg}")

        return "\n".join(lines)

    def to_simple_message(self) -> str:
        """Get a simple one-line error message."""
        if self.position is None:
            return f"[{self.code}] {self.message}"
        return f"[{self.code}] {self.message} (at {self.position})"


# =============================================================================
# Sinks
# =============================================================================


@runtime_checkable
class DiagnosticSink(Protocol):
    """Anything that can receive diagnostics from the front end."""

    def emit(self, diagnostic: Diagnostic) -> None:
        ...


class DiagnosticBuilder:
    """
    Fluent builder for constructing Diagnostic objects.

        emitter.error(ErrorCode.E0203, "expected ';'", span, position=9)
            .help("add ';'")
            .emit()
    """

    def __init__(
        self,
        sink: Optional[DiagnosticSink],
        code: str,
        level: DiagnosticLevel,
        message: str,
        primary_span: Optional[SourceSpan] = None,
        position: Optional[int] = None,
    ) -> None:
        self._sink = sink
        self._code = code
        self._level = level
        self._message = message
        self._position = position
        self._labels: list[DiagnosticLabel] = []
        self._notes: list[str] = []
        self._helps: list[str] = []

        if primary_span:
            self._labels.append(DiagnosticLabel(primary_span, "", True))

    def note(self, message: str) -> "DiagnosticBuilder":
        """Add a note."""
        self._notes.append(message)
        return self

    def help(self, message: str) -> "DiagnosticBuilder":
        """Add a help message."""
        self._helps.append(message)
        return self

    def build(self) -> Diagnostic:
        """Build the diagnostic without emitting."""
        return Diagnostic(
            code=self._code,
            level=self._level,
            message=self._message,
            position=self._position,
            labels=self._labels,
            notes=self._notes,
            helps=self._helps,
        )

    def emit(self) -> Diagnostic:
        """Build the diagnostic and deliver it to the sink."""
        diagnostic = self.build()
        if self._sink is not None:
            self._sink.emit(diagnostic)
        return diagnostic


class DiagnosticEmitter:
    """
    Collects and renders diagnostics for a source file.

    This is the default sink: it keeps every diagnostic in arrival order.

    Usage:
        emitter = DiagnosticEmitter(source, "example.ml")
        result = parse_source(source, sink=emitter)
        print(emitter.render_all())
    """

    def __init__(self, source: str = "", filename: str = "<input>") -> None:
        """
        Initialize the diagnostic emitter.

        Args:
            source: The source code being parsed
            filename: The filename for error reporting
        """
        self.source = source
        self.filename = filename
        self.diagnostics: list[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic to the collection."""
        self.diagnostics.append(diagnostic)

    def error(
        self,
        code: str,
        message: str,
        span: Optional[SourceSpan] = None,
        position: Optional[int] = None,
    ) -> DiagnosticBuilder:
        """Create an error diagnostic builder."""
        return DiagnosticBuilder(self, code, DiagnosticLevel.ERROR, message, span, position)

    def has_errors(self) -> bool:
        """Check if any error diagnostics have been emitted."""
        return any(d.level == DiagnosticLevel.ERROR for d in self.diagnostics)

    def error_count(self) -> int:
        """Count the number of error diagnostics."""
        return sum(1 for d in self.diagnostics if d.level == DiagnosticLevel.ERROR)

    def render_all(self, use_color: bool = True) -> str:
        """Render all diagnostics as a single string."""
        return "\n\n".join(d.render(self.source, use_color) for d in self.diagnostics)

    def clear(self) -> None:
        """Clear all diagnostics."""
        self.diagnostics.clear()


class LoggingSink:
    """Sink that writes each diagnostic to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("minilang.diagnostics")

    def emit(self, diagnostic: Diagnostic) -> None:
        self.logger.log(diagnostic.level.log_level(), diagnostic.to_simple_message())


# =============================================================================
# Error Conversion
# =============================================================================


# Operator characters the lexer accepts but no grammar rule consumes.
_UNSUPPORTED_OPERATORS = frozenset({"%", "|", "&", "=", "<", ">", "!"})


_ERROR_CODES: tuple[tuple[type[MiniLangError], str], ...] = (
    (LexerError, ErrorCode.E0208),
    (ExpectedTokenError, ErrorCode.E0203),
    (UnparseableFactorError, ErrorCode.E0204),
    (UnexpectedStatementError, ErrorCode.E0205),
    (NestingTooDeepError, ErrorCode.E0206),
)


def _error_code(error: MiniLangError) -> str:
    for error_type, code in _ERROR_CODES:
        if isinstance(error, error_type):
            return code
    raise TypeError(f"No error code for {type(error).__name__}")


def diagnostic_from_error(
    error: MiniLangError,
    source: str = "",
    filename: str = "<input>",
    sink: Optional[DiagnosticSink] = None,
) -> Diagnostic:
    """
    Convert a front-end error into a diagnostic and optionally emit it.

    Args:
        error: The lexer or parser error
        source: Source text; when given, the diagnostic gets a primary label
        filename: Filename shown in the location line
        sink: Optional sink that receives the diagnostic

    Returns:
        The diagnostic that was built.
    """
    span: Optional[SourceSpan] = None
    if source:
        token = getattr(error, "token", None)
        if token is not None:
            span = SourceSpan.from_offset(source, token.position, len(token.text), filename)
        elif error.position is not None:
            span = SourceSpan.from_offset(source, error.position, 1, filename)
        else:
            span = SourceSpan.from_offset(source, len(source.rstrip()), 1, filename)

    builder = DiagnosticBuilder(
        sink,
        _error_code(error),
        DiagnosticLevel.ERROR,
        error.message,
        span,
        error.position,
    )

    if isinstance(error, ExpectedTokenError) and error.expected.startswith("'"):
        builder.help(f"add {error.expected}")
    elif isinstance(error, UnexpectedStatementError):
        builder.help(
            "statements start with a type keyword, 'function', 'if', 'while' or 'for'"
        )

    token = getattr(error, "token", None)
    if token is not None and token.text in _UNSUPPORTED_OPERATORS:
        builder.note("comparison and logical operators are not part of expressions")

    return builder.emit()


__all__ = [
    "ErrorCode",
    "ERROR_DESCRIPTIONS",
    "DiagnosticLevel",
    "SourceSpan",
    "DiagnosticLabel",
    "Diagnostic",
    "DiagnosticSink",
    "DiagnosticBuilder",
    "DiagnosticEmitter",
    "LoggingSink",
    "diagnostic_from_error",
]
