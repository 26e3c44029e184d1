"""
Abstract Syntax Tree (AST) node definitions for MiniLang.

This module defines all AST node types representing the structure of a
MiniLang program after parsing. Each node is immutable and records the offset
of the token it starts at. Positions are excluded from equality, so two trees
with the same shape compare equal wherever they came from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union


class ASTNode(ABC):
    """Base class for all AST nodes."""

    position: Optional[int]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create custom AST processors (serializers, printers,
    analyzers, etc.).
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


@dataclass(frozen=True, slots=True)
class Identifier(Expression):
    """
    An identifier expression.

    Example:
        x, counter, _tmp
    """

    name: str
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_identifier(self)


@dataclass(frozen=True, slots=True)
class NumberLiteral(Expression):
    """A numeric literal. Integers and decimals are both stored as float."""

    value: float
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_number_literal(self)


@dataclass(frozen=True, slots=True)
class BooleanLiteral(Expression):
    """A boolean literal (true/false)."""

    value: bool
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_boolean_literal(self)


@dataclass(frozen=True, slots=True)
class StringLiteral(Expression):
    """A string literal with its quotes removed and escapes resolved."""

    value: str
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_string_literal(self)


@dataclass(frozen=True, slots=True)
class BinaryExpression(Expression):
    """
    A binary operation.

    The grammar has a single precedence tier, so ``1 + 2 * 3`` builds
    ``(1 + 2) * 3``.
    """

    operator: str
    left: Expression
    right: Expression
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_expression(self)


# -----------------------------------------------------------------------------
# Statements
# -----------------------------------------------------------------------------


class Statement(ASTNode):
    """Base class for all statements."""

    pass


@dataclass(frozen=True, slots=True)
class Parameter:
    """
    A function parameter.

    Example:
        int a
    """

    declared_type: str
    name: str
    position: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class VariableDeclaration(Statement):
    """
    A typed variable declaration.

    Example:
        int x = 5;
    """

    declared_type: str
    name: str
    initializer: Expression
    position: Optional[int] = field(default=None, compare=False)

    @property
    def node_type(self) -> str:
        """Type-tagged label, e.g. ``intVariableDeclaration``."""
        return f"{self.declared_type}VariableDeclaration"

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable_declaration(self)


@dataclass(frozen=True, slots=True)
class AssignmentExpression(Statement):
    """
    An assignment, only valid as a for-loop initializer.

    Example:
        i = 0
    """

    name: str
    value: Expression
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_assignment_expression(self)


@dataclass(frozen=True, slots=True)
class FunctionDeclaration(Statement):
    """
    A function declaration.

    Example:
        function add(int a, int b) { int c = a + b; }
    """

    name: str
    parameters: tuple[Parameter, ...]
    body: tuple[Statement, ...]
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_declaration(self)


@dataclass(frozen=True, slots=True)
class IfStatement(Statement):
    """
    An if statement. The condition is not parenthesized.

    Example:
        if ready { int x = 1; }
    """

    condition: Expression
    body: tuple[Statement, ...]
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_if_statement(self)


@dataclass(frozen=True, slots=True)
class WhileStatement(Statement):
    """
    A while loop.

    Example:
        while (true) { int y = 1; }
    """

    condition: Expression
    body: tuple[Statement, ...]
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_statement(self)


@dataclass(frozen=True, slots=True)
class ForStatement(Statement):
    """
    A C-style for loop.

    Example:
        for (i = 0; i; i + 1) { int y = i; }
    """

    initializer: Optional[AssignmentExpression]
    condition: Expression
    increment: Expression
    body: tuple[Statement, ...]
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_for_statement(self)


# -----------------------------------------------------------------------------
# Program
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Program(ASTNode):
    """The root node: top-level statements in source order."""

    statements: tuple[Statement, ...] = ()
    position: Optional[int] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_program(self)


SyntaxNode = Union[Program, Statement, Expression]
