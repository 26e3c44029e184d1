"""
MiniLang Compiler Package.

This package contains the front-end components:
- Lexer: Tokenizes MiniLang source code
- Parser: Produces an Abstract Syntax Tree from tokens
- AST: Node definitions for the syntax tree
- Serializer: Converts the tree to dictionaries and JSON
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from minilang.compiler.ast_nodes import Program
from minilang.compiler.lexer import Lexer, tokenize
from minilang.compiler.parser import Parser
from minilang.compiler.serializer import AstSerializer, to_dict, to_json
from minilang.compiler.tokens import Token, TokenKind
from minilang.utils.diagnostics import Diagnostic, DiagnosticSink, diagnostic_from_error
from minilang.utils.errors import LexerError

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """
    Result of running the front end over one source text.

    Attributes:
        program: The best-effort tree, or None when tokenization failed
        tokens: The token stream (empty when tokenization failed)
        diagnostics: Every diagnostic produced, in order
    """

    program: Optional[Program]
    tokens: list[Token] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True only when a tree was built without any diagnostics."""
        return self.program is not None and not self.diagnostics


def parse_source(
    source: str,
    filename: str = "<input>",
    sink: Optional[DiagnosticSink] = None,
) -> ParseResult:
    """
    Tokenize and parse MiniLang source code.

    A lexer error aborts the pipeline; parse errors are recovered at the
    top-level statement boundary.

    Args:
        source: MiniLang source code string
        filename: Source filename for error reporting
        sink: Optional collaborator receiving each diagnostic

    Returns:
        ParseResult with the program (or None) and the diagnostics
    """
    try:
        tokens = Lexer(source, filename).tokenize()
    except LexerError as e:
        logger.debug(f"Tokenization of {filename} stopped: {e.message}")
        diagnostic = diagnostic_from_error(e, source, filename, sink)
        return ParseResult(program=None, diagnostics=[diagnostic])

    parser = Parser(tokens, sink=sink, source=source, filename=filename)
    program = parser.parse()
    return ParseResult(program=program, tokens=tokens, diagnostics=list(parser.diagnostics))


__all__ = [
    "Lexer",
    "Parser",
    "ParseResult",
    "Program",
    "Token",
    "TokenKind",
    "AstSerializer",
    "parse_source",
    "to_dict",
    "to_json",
    "tokenize",
]
