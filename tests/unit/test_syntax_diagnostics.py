"""
Tests for MiniLang diagnostics: error codes, rendering and sinks.
"""

import logging

import pytest

from minilang.compiler import parse_source
from minilang.compiler.lexer import tokenize as tokenize_source
from minilang.compiler.parser import Parser
from minilang.utils.diagnostics import (
    ERROR_DESCRIPTIONS,
    Diagnostic,
    DiagnosticEmitter,
    DiagnosticLevel,
    DiagnosticSink,
    ErrorCode,
    LoggingSink,
    SourceSpan,
    diagnostic_from_error,
)
from minilang.utils.errors import NestingTooDeepError, ParserError, UnparseableFactorError


def first_diagnostic(source: str, filename: str = "example.ml") -> Diagnostic:
    result = parse_source(source, filename=filename)
    assert result.diagnostics, f"expected diagnostics for {source!r}"
    return result.diagnostics[0]


class TestErrorCodes:
    """Each error class maps to its own code."""

    def test_every_code_is_described(self):
        for code in (
            ErrorCode.E0203,
            ErrorCode.E0204,
            ErrorCode.E0205,
            ErrorCode.E0206,
            ErrorCode.E0208,
        ):
            assert code in ERROR_DESCRIPTIONS

    @pytest.mark.parametrize(
        "source, code",
        [
            ("int x = 5", ErrorCode.E0203),
            ("int x = ;", ErrorCode.E0204),
            ("x = 1;", ErrorCode.E0205),
            ("int x = 5 # 2;", ErrorCode.E0208),
            ("int x = " + "(" * 200 + "1;", ErrorCode.E0206),
        ],
    )
    def test_code_for_error(self, source, code):
        assert first_diagnostic(source).code == code

    def test_level_is_error(self):
        assert first_diagnostic("int x = ;").level == DiagnosticLevel.ERROR


class TestDiagnosticContent:
    """Positions, spans, notes and helps built from errors."""

    def test_position_matches_offending_token(self):
        diag = first_diagnostic("int x = ;")
        assert diag.position == 8
        span = diag.primary_span
        assert (span.start_line, span.start_col, span.end_col) == (1, 9, 10)

    def test_span_covers_whole_token(self):
        diag = first_diagnostic("bool x = int;")
        span = diag.primary_span
        assert span.start_col == 10
        assert span.length == 3

    def test_end_of_input_has_no_position(self):
        """The span still points just past the last character."""
        diag = first_diagnostic("int x = 5\n\n")
        assert diag.position is None
        span = diag.primary_span
        assert (span.start_line, span.start_col) == (1, 10)

    def test_missing_punctuation_gets_help(self):
        diag = first_diagnostic("int x = 5")
        assert diag.helps == ["add ';'"]

    def test_missing_identifier_has_no_add_help(self):
        diag = first_diagnostic("int = 5;")
        assert diag.helps == []

    def test_statement_error_lists_statement_starts(self):
        diag = first_diagnostic("x = 1;")
        assert "'function'" in diag.helps[0]

    def test_relational_operator_note(self):
        diag = first_diagnostic("if x == 1 { }")
        assert diag.notes == ["comparison and logical operators are not part of expressions"]
        assert diag.helps == ["add '{'"]

    def test_without_source_there_are_no_labels(self):
        parser = Parser(tokenize_source("int x = ;"))
        parser.parse()
        diag = parser.diagnostics[0]
        assert diag.labels == []
        assert diag.primary_span is None
        assert diag.position == 8


class TestDiagnosticRendering:
    """Rust-style rendering of a diagnostic."""

    def test_render_missing_semicolon(self):
        source = "int x = 5"
        rendered = first_diagnostic(source).render(source, use_color=False)
        lines = rendered.splitlines()
        assert lines[0] == "error[E0203]: Expected ';' after expression, found end of input"
        assert lines[1] == "  --> example.ml:1:10"
        assert "  1 | int x = 5" in lines
        assert "   |          ^" in lines
        assert lines[-1] == "   = help: add ';'"

    def test_render_underlines_token(self):
        source = "int a = 1;\nbool x = int;"
        rendered = first_diagnostic(source).render(source, use_color=False)
        assert "  2 | bool x = int;" in rendered
        assert "   |          ^^^" in rendered

    def test_render_without_source_uses_offset(self):
        diag = Diagnostic(ErrorCode.E0204, DiagnosticLevel.ERROR, "Invalid factor", position=8)
        rendered = diag.render("", use_color=False)
        assert rendered.splitlines() == ["error[E0204]: Invalid factor", "  --> offset 8"]

    def test_render_with_color(self):
        source = "int x = ;"
        rendered = first_diagnostic(source).render(source, use_color=True)
        assert "\033[91m" in rendered
        assert "\033[0m" in rendered

    def test_simple_message(self):
        assert first_diagnostic("int x = ;").to_simple_message().startswith("[E0204] Invalid factor")
        assert first_diagnostic("int x = ;").to_simple_message().endswith("(at 8)")
        assert first_diagnostic("int x = 5").to_simple_message() == (
            "[E0203] Expected ';' after expression, found end of input"
        )


class TestDiagnosticEmitter:
    """Tests for the collecting sink."""

    def test_is_a_sink(self):
        assert isinstance(DiagnosticEmitter(), DiagnosticSink)
        assert isinstance(LoggingSink(), DiagnosticSink)

    def test_collects_in_order(self):
        source = "int x = ; bool = true;"
        emitter = DiagnosticEmitter(source, "example.ml")
        parse_source(source, filename="example.ml", sink=emitter)
        assert emitter.has_errors()
        assert emitter.error_count() == len(emitter.diagnostics) == 4
        assert [d.code for d in emitter.diagnostics] == [
            ErrorCode.E0204,
            ErrorCode.E0203,
            ErrorCode.E0205,
            ErrorCode.E0205,
        ]

    def test_builder(self):
        emitter = DiagnosticEmitter()
        span = SourceSpan.from_location(1, 1)
        diag = emitter.error(ErrorCode.E0203, "Expected ';'", span, position=0).note(
            "first"
        ).help("second").emit()
        assert emitter.diagnostics == [diag]
        assert diag.notes == ["first"]
        assert diag.helps == ["second"]

    def test_render_all_and_clear(self):
        source = "int x = ;\nint y = ;"
        emitter = DiagnosticEmitter(source, "example.ml")
        parse_source(source, filename="example.ml", sink=emitter)
        rendered = emitter.render_all(use_color=False)
        assert rendered.count("error[E0204]") == 2
        emitter.clear()
        assert not emitter.has_errors()

    def test_valid_source_emits_nothing(self):
        emitter = DiagnosticEmitter()
        parse_source("int x = 5;", sink=emitter)
        assert emitter.diagnostics == []


class TestLoggingSink:
    """Tests for the logging sink."""

    def test_logs_at_error_level(self, caplog):
        caplog.set_level(logging.DEBUG, logger="minilang.diagnostics")
        parse_source("int x = ;", sink=LoggingSink())
        records = [r for r in caplog.records if r.name == "minilang.diagnostics"]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert records[0].getMessage().startswith("[E0204]")

    def test_custom_logger(self, caplog):
        logger = logging.getLogger("tests.minilang")
        caplog.set_level(logging.DEBUG, logger="tests.minilang")
        parse_source("}", sink=LoggingSink(logger))
        assert "[E0205] Expected statement, found '}' (at 0)" in caplog.text


class TestDiagnosticFromError:
    """Direct conversion of errors."""

    def test_emits_to_sink(self):
        emitter = DiagnosticEmitter()
        error = UnparseableFactorError(None)
        diag = diagnostic_from_error(error, sink=emitter)
        assert emitter.diagnostics == [diag]
        assert diag.position is None
        assert "found end of input" in diag.message

    def test_nesting_error(self):
        diag = diagnostic_from_error(NestingTooDeepError(150))
        assert diag.code == ErrorCode.E0206
        assert diag.message == "Nesting exceeds 150 levels at end of input"

    def test_error_without_code_is_rejected(self):
        """Errors without a code of their own are rejected, not mislabeled."""
        with pytest.raises(TypeError):
            diagnostic_from_error(ParserError("generic failure"))


class TestErrorMessages:
    """String form of front-end errors."""

    def test_offset_prefix_without_source(self):
        parser = Parser(tokenize_source("int x = ;"))
        parser.parse()
        assert str(parser.errors[0]).startswith("[offset 8] Invalid factor")

    def test_plain_message_at_end_of_input(self):
        parser = Parser(tokenize_source("int x = 5"))
        parser.parse()
        assert str(parser.errors[0]) == "Expected ';' after expression, found end of input"

    def test_caret_under_offending_token(self):
        source = "int a = 1;\nint b = ;"
        parser = Parser(tokenize_source(source), source=source, filename="x.ml")
        parser.parse()
        assert str(parser.errors[0]).splitlines() == [
            "[x.ml:2:9] Invalid factor: expected number, boolean, string, identifier "
            "or '(', found ';'",
            "    int b = ;",
            "            ^",
        ]
