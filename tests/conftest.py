"""
Pytest configuration and shared fixtures for MiniLang tests.
"""

import pytest

from minilang.compiler.ast_nodes import Program
from minilang.compiler.lexer import Lexer
from minilang.compiler.parser import Parser
from minilang.compiler.tokens import Token
from minilang.utils.diagnostics import DiagnosticEmitter


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str, filename: str = "test.ml") -> Lexer:
        return Lexer(source, filename)

    return _create_lexer


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source code."""

    def _tokenize(source: str) -> list[Token]:
        lexer = lexer_factory(source)
        return lexer.tokenize()

    return _tokenize


@pytest.fixture
def emitter():
    """A collecting diagnostic sink."""
    return DiagnosticEmitter()


@pytest.fixture
def parser_factory(tokenize, emitter):
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str) -> Parser:
        tokens = tokenize(source)
        return Parser(tokens, sink=emitter, source=source, filename="test.ml")

    return _create_parser


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source code into AST."""

    def _parse(source: str) -> Program:
        parser = parser_factory(source)
        return parser.parse()

    return _parse
