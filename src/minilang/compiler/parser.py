"""
MiniLang Parser.

A recursive descent parser that transforms a token stream into an Abstract
Syntax Tree (AST). Each grammar rule is a method that commits to a production
using one token of lookahead; nothing is backtracked.

Grammar:
    Program             := Statement*
    Statement           := Declaration | IfStatement | WhileStatement | ForStatement
    Declaration         := TypeKeyword VariableDeclaration
                         | 'function' FunctionDeclaration
    VariableDeclaration := Identifier '=' Expression ';'
    FunctionDeclaration := Identifier '(' ParamList ')' Block
    ParamList           := (TypeKeyword Identifier (',' TypeKeyword Identifier)*)?
    Block               := '{' Statement* '}'
    IfStatement         := 'if' Expression Block
    WhileStatement      := 'while' '(' Expression ')' Block
    ForStatement        := 'for' '(' AssignmentExpression? ';' Expression ';'
                           Expression ')' Block
    AssignmentExpression := Identifier '=' Expression
    Expression          := Term
    Term                := Factor (('+'|'-'|'*'|'/') Factor)*
    Factor              := Number | Boolean | String | Identifier | '(' Expression ')'
"""

import logging
import re
from typing import Optional, Sequence

from minilang.compiler.ast_nodes import (
    AssignmentExpression,
    BinaryExpression,
    BooleanLiteral,
    Expression,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    NumberLiteral,
    Parameter,
    Program,
    Statement,
    StringLiteral,
    VariableDeclaration,
    WhileStatement,
)
from minilang.compiler.tokens import TERM_OPERATORS, TYPE_KEYWORDS, Token, TokenKind
from minilang.utils.diagnostics import Diagnostic, DiagnosticSink, diagnostic_from_error
from minilang.utils.errors import (
    ExpectedTokenError,
    NestingTooDeepError,
    ParserError,
    SourceLocation,
    UnexpectedStatementError,
    UnparseableFactorError,
    line_at,
)

logger = logging.getLogger(__name__)

_STRING_ESCAPE = re.compile(r'\\(["\\])')

# Combined depth of nested blocks and parenthesized expressions. Each level
# costs several Python frames, so this stays well under the recursion limit.
MAX_NESTING_DEPTH = 150


def unescape_string(text: str) -> str:
    """Strip the quotes from a string token and resolve ``\\"`` and ``\\\\``."""
    return _STRING_ESCAPE.sub(r"\1", text[1:-1])


class Parser:
    """
    Recursive descent parser for MiniLang.

    Parses a list of tokens into an Abstract Syntax Tree. A statement that
    fails to parse at the top level is reported to the diagnostic sink and
    skipped one token at a time; errors inside nested rules abort the whole
    enclosing top-level statement.

    Usage:
        parser = Parser(tokens, sink=emitter)
        ast = parser.parse()
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        sink: Optional[DiagnosticSink] = None,
        source: str = "",
        filename: str = "<input>",
    ) -> None:
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            sink: Optional collaborator receiving each diagnostic
            source: Optional source code for line/column information
            filename: Optional filename for error reporting
        """
        self.tokens = list(tokens)
        self.pos = 0
        self._sink = sink
        self._source = source
        self._filename = filename
        self.errors: list[ParserError] = []
        self.diagnostics: list[Diagnostic] = []
        self._depth = 0

    # -------------------------------------------------------------------------
    # Cursor
    # -------------------------------------------------------------------------

    @property
    def _current(self) -> Optional[Token]:
        """Get the lookahead token, or None at end of input."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _advance(self) -> Optional[Token]:
        """Consume and return the current token."""
        token = self._current
        if token is not None:
            self.pos += 1
        return token

    def _check(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        """Check if the current token has the given kind (and text)."""
        token = self._current
        return token is not None and token.is_(kind, text)

    def _match(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        """Consume the current token if it matches."""
        if self._check(kind, text):
            self._advance()
            return True
        return False

    def _expect(
        self,
        kind: TokenKind,
        text: Optional[str],
        expected: str,
        context: Optional[str] = None,
    ) -> Token:
        """Consume the current token if it matches, else raise an error."""
        if self._check(kind, text):
            return self._advance()
        raise self._expected(expected, context)

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def _context(self, token: Optional[Token]) -> tuple[Optional[SourceLocation], Optional[str]]:
        """Location and source line for a token, when the source is known."""
        if not self._source:
            return None, None
        offset = token.position if token is not None else len(self._source)
        location = SourceLocation.from_offset(self._source, offset, self._filename)
        return location, line_at(self._source, offset)

    def _expected(self, expected: str, context: Optional[str] = None) -> ExpectedTokenError:
        token = self._current
        location, source_line = self._context(token)
        return ExpectedTokenError(expected, token, location, source_line, context)

    def _too_deep(self) -> NestingTooDeepError:
        token = self._current
        location, source_line = self._context(token)
        return NestingTooDeepError(MAX_NESTING_DEPTH, token, location, source_line)

    def _enter_nesting(self) -> None:
        """Count one more level of nesting, failing past the limit."""
        if self._depth >= MAX_NESTING_DEPTH:
            raise self._too_deep()
        self._depth += 1

    def _report(self, error: ParserError) -> None:
        """Record a recovered error and deliver it to the sink."""
        diagnostic = diagnostic_from_error(error, self._source, self._filename, self._sink)
        self.errors.append(error)
        self.diagnostics.append(diagnostic)
        logger.debug(f"Skipping token after parse error at {error.position}: {error.message}")

    # -------------------------------------------------------------------------
    # Program Parsing
    # -------------------------------------------------------------------------

    def parse(self) -> Program:
        """
        Parse the entire program.

        Returns:
            The root Program AST node holding every statement that parsed.
        """
        statements: list[Statement] = []

        while self._current is not None:
            try:
                statements.append(self._parse_statement())
            except ParserError as e:
                self._report(e)
                self._advance()
            except RecursionError:
                self._depth = 0
                self._report(self._too_deep())
                self._advance()

        position = self.tokens[0].position if self.tokens else None
        return Program(tuple(statements), position=position)

    # -------------------------------------------------------------------------
    # Statement Parsing
    # -------------------------------------------------------------------------

    def _parse_statement(self) -> Statement:
        """Parse a single statement, dispatching on the leading keyword."""
        token = self._current

        if token is not None and token.kind == TokenKind.KEYWORD:
            if token.text in TYPE_KEYWORDS or token.text == "function":
                return self._parse_declaration()
            if token.text == "if":
                return self._parse_if()
            if token.text == "while":
                return self._parse_while()
            if token.text == "for":
                return self._parse_for()

        location, source_line = self._context(token)
        raise UnexpectedStatementError(token, location, source_line)

    def _parse_declaration(self) -> Statement:
        """
        Parse a variable or function declaration.

        Handles:
            int x = 1;
            function f(int a) { ... }
        """
        keyword = self._expect(TokenKind.KEYWORD, None, "declaration keyword")

        if keyword.text in TYPE_KEYWORDS:
            return self._parse_variable_declaration(keyword)
        if keyword.text == "function":
            return self._parse_function_declaration(keyword)

        location, source_line = self._context(keyword)
        raise ExpectedTokenError(
            "type keyword or 'function'", keyword, location, source_line
        )

    def _parse_variable_declaration(self, type_token: Token) -> VariableDeclaration:
        """Parse the rest of ``<type> name = expression;``."""
        name = self._parse_identifier("after type")
        self._expect(TokenKind.OPERATOR, "=", "'='", "after identifier")
        initializer = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ";", "';'", "after expression")

        return VariableDeclaration(
            declared_type=type_token.text,
            name=name.text,
            initializer=initializer,
            position=type_token.position,
        )

    def _parse_function_declaration(self, keyword: Token) -> FunctionDeclaration:
        """Parse the rest of ``function name(params) { body }``."""
        name = self._parse_identifier("as function name")
        parameters = self._parse_parameters()
        body = self._parse_block()

        return FunctionDeclaration(
            name=name.text,
            parameters=parameters,
            body=body,
            position=keyword.position,
        )

    def _parse_parameters(self) -> tuple[Parameter, ...]:
        """Parse a parenthesized, comma separated parameter list."""
        self._expect(TokenKind.PUNCTUATION, "(", "'('", "before parameter list")

        parameters: list[Parameter] = []
        if self._current is not None and self._current.kind == TokenKind.KEYWORD:
            parameters.append(self._parse_parameter())
            while self._match(TokenKind.PUNCTUATION, ","):
                parameters.append(self._parse_parameter())

        self._expect(TokenKind.PUNCTUATION, ")", "')'", "to close parameter list")
        return tuple(parameters)

    def _parse_parameter(self) -> Parameter:
        """Parse ``<type> name``."""
        token = self._current
        if token is None or token.kind != TokenKind.KEYWORD or token.text not in TYPE_KEYWORDS:
            raise self._expected("type keyword", "in parameter list")
        self._advance()

        name = self._parse_identifier("as parameter name")
        return Parameter(token.text, name.text, position=token.position)

    def _parse_if(self) -> IfStatement:
        """
        Parse an if statement.

        Handles:
            if cond { body }
        """
        keyword = self._advance()  # consume 'if'
        condition = self._parse_expression()
        body = self._parse_block()

        return IfStatement(condition=condition, body=body, position=keyword.position)

    def _parse_while(self) -> WhileStatement:
        """
        Parse a while loop.

        Handles:
            while (cond) { body }
        """
        keyword = self._advance()  # consume 'while'
        self._expect(TokenKind.PUNCTUATION, "(", "'('", "after 'while'")
        condition = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ")", "')'", "after while condition")
        body = self._parse_block()

        return WhileStatement(condition=condition, body=body, position=keyword.position)

    def _parse_for(self) -> ForStatement:
        """
        Parse a for loop.

        Handles:
            for (i = 0; cond; step) { body }
            for (; cond; step) { body }
        """
        keyword = self._advance()  # consume 'for'
        self._expect(TokenKind.PUNCTUATION, "(", "'('", "after 'for'")

        initializer: Optional[AssignmentExpression] = None
        if self._check(TokenKind.IDENTIFIER):
            initializer = self._parse_assignment()
        self._expect(TokenKind.PUNCTUATION, ";", "';'", "after initializer in 'for'")

        condition = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ";", "';'", "after condition in 'for'")

        increment = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ")", "')'", "after increment in 'for'")

        body = self._parse_block()

        return ForStatement(
            initializer=initializer,
            condition=condition,
            increment=increment,
            body=body,
            position=keyword.position,
        )

    def _parse_assignment(self) -> AssignmentExpression:
        """Parse ``name = expression``."""
        name = self._parse_identifier()
        self._expect(TokenKind.OPERATOR, "=", "'='", "in assignment")
        value = self._parse_expression()

        return AssignmentExpression(name=name.text, value=value, position=name.position)

    def _parse_block(self) -> tuple[Statement, ...]:
        """
        Parse a block of statements enclosed in braces.

        Handles:
            { stmt1 stmt2 ... }
        """
        self._enter_nesting()
        try:
            self._expect(TokenKind.PUNCTUATION, "{", "'{'", "to start block")
            statements: list[Statement] = []
            while self._current is not None and not self._check(TokenKind.PUNCTUATION, "}"):
                statements.append(self._parse_statement())

            self._expect(TokenKind.PUNCTUATION, "}", "'}'", "to end block")
        finally:
            self._depth -= 1
        return tuple(statements)

    def _parse_identifier(self, context: Optional[str] = None) -> Token:
        return self._expect(TokenKind.IDENTIFIER, None, "identifier", context)

    # -------------------------------------------------------------------------
    # Expression Parsing
    # -------------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        """Parse an expression. There is a single precedence tier."""
        return self._parse_term()

    def _parse_term(self) -> Expression:
        """Fold ``+ - * /`` left to right, all at the same precedence."""
        left = self._parse_factor()

        while (
            self._current is not None
            and self._current.kind == TokenKind.OPERATOR
            and self._current.text in TERM_OPERATORS
        ):
            operator = self._advance()
            right = self._parse_factor()
            left = BinaryExpression(
                operator=operator.text,
                left=left,
                right=right,
                position=left.position,
            )

        return left

    def _parse_factor(self) -> Expression:
        """Parse a literal, identifier, or parenthesized expression."""
        token = self._current

        if token is not None:
            if token.kind == TokenKind.NUMBER:
                self._advance()
                return NumberLiteral(float(token.text), position=token.position)
            if token.kind == TokenKind.BOOLEAN:
                self._advance()
                return BooleanLiteral(token.text == "true", position=token.position)
            if token.kind == TokenKind.STRING:
                self._advance()
                return StringLiteral(unescape_string(token.text), position=token.position)
            if token.kind == TokenKind.IDENTIFIER:
                self._advance()
                return Identifier(token.text, position=token.position)
            if token.is_(TokenKind.PUNCTUATION, "("):
                self._enter_nesting()
                self._advance()
                try:
                    expr = self._parse_expression()
                    self._expect(TokenKind.PUNCTUATION, ")", "')'", "to close grouped expression")
                finally:
                    self._depth -= 1
                return expr

        location, source_line = self._context(token)
        raise UnparseableFactorError(token, location, source_line)
