"""
Integration tests for the complete MiniLang front end.

These tests run source text through tokenization, parsing and diagnostic
delivery together, the way a caller of ``parse_source`` sees them.
"""

import logging

import pytest

from minilang import ParseResult, parse_source, to_dict, to_json
from minilang.compiler.ast_nodes import (
    BinaryExpression,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    NumberLiteral,
    VariableDeclaration,
    WhileStatement,
)
from minilang.compiler.tokens import TokenKind
from minilang.utils.diagnostics import DiagnosticEmitter, ErrorCode, LoggingSink
from minilang.utils.errors import UnexpectedCharacterError


PROGRAM = """
function area(float w, float h) {
    float a = w * h;
    if a {
        string label = "big";
    }
}

int total = 0;
for (i = 0; i; i + 1) {
    while (total) {
        int step = (total + 1) / 2;
    }
}
"""


class TestParseSource:
    """Test the full pipeline on valid programs."""

    def test_valid_program(self):
        result = parse_source(PROGRAM, filename="program.ml")

        assert isinstance(result, ParseResult)
        assert result.success
        assert result.diagnostics == []
        assert result.tokens[0].kind == TokenKind.KEYWORD

        kinds = [type(s) for s in result.program.statements]
        assert kinds == [FunctionDeclaration, VariableDeclaration, ForStatement]

        func = result.program.statements[0]
        assert func.body[0].initializer == BinaryExpression(
            "*", Identifier("w"), Identifier("h")
        )

        loop = result.program.statements[2]
        assert isinstance(loop.body[0], WhileStatement)
        assert loop.body[0].body[0].initializer == BinaryExpression(
            "/",
            BinaryExpression("+", Identifier("total"), NumberLiteral(1.0)),
            NumberLiteral(2.0),
        )

    def test_program_position_is_first_token(self):
        result = parse_source("\n\n  int x = 1;")
        assert result.program.position == 4

    def test_empty_source(self):
        result = parse_source("")
        assert result.success
        assert result.program.statements == ()
        assert result.program.position is None

    def test_json_output(self):
        result = parse_source("int x = 5;")
        assert '"kind": "intVariableDeclaration"' in to_json(result.program)
        assert to_dict(result.program)["body"][0]["name"] == "x"


class TestPipelineErrors:
    """Errors from either stage reach the caller and the sink."""

    def test_lexer_error_aborts(self):
        emitter = DiagnosticEmitter()
        result = parse_source("int x = 5 @ 3;", sink=emitter)

        assert result.program is None
        assert result.tokens == []
        assert not result.success
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].code == ErrorCode.E0208
        assert result.diagnostics[0].position == 10
        assert emitter.diagnostics == result.diagnostics

    def test_parse_errors_keep_partial_program(self):
        result = parse_source("int a = 1; int b = ; int c = 3;")

        assert not result.success
        assert [s.name for s in result.program.statements] == ["a", "c"]
        assert [d.code for d in result.diagnostics] == [ErrorCode.E0204]

    def test_sink_sees_same_diagnostics(self):
        emitter = DiagnosticEmitter()
        result = parse_source("if x == 1 { }", sink=emitter)
        assert emitter.diagnostics == result.diagnostics
        assert len(result.diagnostics) == 5
        assert result.program.statements == ()

    def test_lexer_error_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="minilang.compiler")
        parse_source("@", filename="bad.ml")
        assert "Tokenization of bad.ml stopped" in caplog.text

    def test_logging_sink_end_to_end(self, caplog):
        caplog.set_level(logging.ERROR, logger="minilang.diagnostics")
        parse_source("while true { }", sink=LoggingSink())
        assert "[E0203] Expected '(' after 'while', found 'true' (at 6)" in caplog.text

    def test_lexer_error_can_be_raised_directly(self):
        from minilang import Lexer

        with pytest.raises(UnexpectedCharacterError):
            Lexer("int x = 5 @ 3;").tokenize()


class TestPipelineRobustness:
    """Inputs from real editors and pathological sources still yield a result."""

    def test_byte_order_mark_and_non_breaking_space(self):
        result = parse_source("\ufeffint x\u00a0= 5;")
        assert result.success
        assert result.program.statements == (VariableDeclaration("int", "x", NumberLiteral(5.0)),)

    @pytest.mark.parametrize(
        "source",
        [
            "int x = " + "(" * 400 + "1" + ")" * 400 + ";",
            "int x = " + "(" * 400 + ";",
        ],
    )
    def test_deep_nesting_yields_diagnostics(self, source):
        emitter = DiagnosticEmitter()
        result = parse_source(source, sink=emitter)

        assert isinstance(result, ParseResult)
        assert result.program is not None
        assert result.diagnostics[0].code == ErrorCode.E0206
        assert emitter.diagnostics == result.diagnostics
