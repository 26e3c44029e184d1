"""
MiniLang editor integration.

Converts front-end diagnostics to Language Server Protocol types.
"""

from minilang.lsp.diagnostics import (
    LspDiagnosticSink,
    get_diagnostics_for_document,
    to_lsp_diagnostic,
)

__all__ = [
    "LspDiagnosticSink",
    "get_diagnostics_for_document",
    "to_lsp_diagnostic",
]
