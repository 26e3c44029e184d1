"""
MiniLang Utilities Package.

Common utilities for error handling, source locations, and diagnostics.
"""

from minilang.utils.diagnostics import (
    ERROR_DESCRIPTIONS,
    Diagnostic,
    DiagnosticBuilder,
    DiagnosticEmitter,
    DiagnosticLabel,
    DiagnosticLevel,
    DiagnosticSink,
    ErrorCode,
    LoggingSink,
    SourceSpan,
    diagnostic_from_error,
)
from minilang.utils.errors import (
    ExpectedTokenError,
    LexerError,
    MiniLangError,
    NestingTooDeepError,
    ParserError,
    SourceLocation,
    UnexpectedCharacterError,
    UnexpectedStatementError,
    UnparseableFactorError,
)

__all__ = [
    # Errors
    "MiniLangError",
    "LexerError",
    "UnexpectedCharacterError",
    "ParserError",
    "ExpectedTokenError",
    "UnexpectedStatementError",
    "UnparseableFactorError",
    "NestingTooDeepError",
    "SourceLocation",
    # Error codes
    "ErrorCode",
    "ERROR_DESCRIPTIONS",
    # Diagnostic types
    "DiagnosticLevel",
    "SourceSpan",
    "DiagnosticLabel",
    "Diagnostic",
    # Sinks
    "DiagnosticSink",
    "DiagnosticBuilder",
    "DiagnosticEmitter",
    "LoggingSink",
    "diagnostic_from_error",
]
