"""
Diagnostic conversion for editor integration.

This module converts front-end diagnostics into LSP-compatible diagnostic
messages so a language client can display lexer and parser errors.
"""

from lsprotocol import types

from minilang.compiler import parse_source
from minilang.utils.diagnostics import Diagnostic, DiagnosticLevel

_SEVERITY_MAP = {
    DiagnosticLevel.ERROR: types.DiagnosticSeverity.Error,
    DiagnosticLevel.WARNING: types.DiagnosticSeverity.Warning,
    DiagnosticLevel.NOTE: types.DiagnosticSeverity.Information,
    DiagnosticLevel.HELP: types.DiagnosticSeverity.Hint,
}


def to_lsp_diagnostic(diag: Diagnostic) -> types.Diagnostic:
    """
    Convert a front-end diagnostic into an LSP diagnostic.

    Args:
        diag: The compiler diagnostic

    Returns:
        The LSP diagnostic, with 0-indexed positions
    """
    severity = _SEVERITY_MAP.get(diag.level, types.DiagnosticSeverity.Error)

    line = 0
    character = 0
    end_line = 0
    end_character = 1

    span = diag.primary_span
    if span is not None:
        line = max(0, span.start_line - 1)
        character = max(0, span.start_col - 1)
        end_line = max(0, span.end_line - 1)
        end_character = max(0, span.end_col - 1)

    message_parts = [diag.message]
    for note in diag.notes:
        message_parts.append(f"note: {note}")
    for help_msg in diag.helps:
        message_parts.append(f"help: {help_msg}")

    return types.Diagnostic(
        range=types.Range(
            start=types.Position(line=line, character=character),
            end=types.Position(line=end_line, character=end_character),
        ),
        message="\n".join(message_parts),
        severity=severity,
        source="minilang",
        code=diag.code,
    )


class LspDiagnosticSink:
    """Sink collecting diagnostics already converted for a language client."""

    def __init__(self) -> None:
        self.diagnostics: list[types.Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(to_lsp_diagnostic(diagnostic))


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The MiniLang source code
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    sink = LspDiagnosticSink()
    parse_source(source, filename=uri, sink=sink)
    return sink.diagnostics
