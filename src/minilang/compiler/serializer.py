"""
AST serialization.

Converts a syntax tree into plain dictionaries and JSON, the form in which
parse results are inspected and printed.

Example:
    >>> to_dict(parse_source("int x = 5;").program.statements[0])
    {'kind': 'intVariableDeclaration', 'declaredType': 'int', 'name': 'x',
     'initializer': {'kind': 'NumberLiteral', 'value': 5.0}}
"""

from __future__ import annotations

import json
from typing import Any

from minilang.compiler.ast_nodes import (
    AssignmentExpression,
    ASTNode,
    ASTVisitor,
    BinaryExpression,
    BooleanLiteral,
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


class AstSerializer(ASTVisitor):
    """Visitor producing JSON-compatible dictionaries."""

    def __init__(self, include_positions: bool = False) -> None:
        self.include_positions = include_positions

    def _node(self, node: ASTNode, kind: str, **fields: Any) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": kind, **fields}
        if self.include_positions:
            data["position"] = node.position
        return data

    def _body(self, body: tuple[Statement, ...]) -> list[dict[str, Any]]:
        return [self.visit(stmt) for stmt in body]

    def _parameter(self, param: Parameter) -> dict[str, Any]:
        data: dict[str, Any] = {"declaredType": param.declared_type, "name": param.name}
        if self.include_positions:
            data["position"] = param.position
        return data

    def visit_program(self, node: Program) -> dict[str, Any]:
        return self._node(node, "Program", body=self._body(node.statements))

    def visit_variable_declaration(self, node: VariableDeclaration) -> dict[str, Any]:
        return self._node(
            node,
            node.node_type,
            declaredType=node.declared_type,
            name=node.name,
            initializer=self.visit(node.initializer),
        )

    def visit_function_declaration(self, node: FunctionDeclaration) -> dict[str, Any]:
        return self._node(
            node,
            "FunctionDeclaration",
            name=node.name,
            parameters=[self._parameter(p) for p in node.parameters],
            body=self._body(node.body),
        )

    def visit_if_statement(self, node: IfStatement) -> dict[str, Any]:
        return self._node(
            node, "IfStatement", condition=self.visit(node.condition), body=self._body(node.body)
        )

    def visit_while_statement(self, node: WhileStatement) -> dict[str, Any]:
        return self._node(
            node, "WhileStatement", condition=self.visit(node.condition), body=self._body(node.body)
        )

    def visit_for_statement(self, node: ForStatement) -> dict[str, Any]:
        return self._node(
            node,
            "ForStatement",
            initializer=self.visit(node.initializer) if node.initializer else None,
            condition=self.visit(node.condition),
            increment=self.visit(node.increment),
            body=self._body(node.body),
        )

    def visit_assignment_expression(self, node: AssignmentExpression) -> dict[str, Any]:
        return self._node(node, "AssignmentExpression", name=node.name, value=self.visit(node.value))

    def visit_binary_expression(self, node: BinaryExpression) -> dict[str, Any]:
        return self._node(
            node,
            "BinaryExpression",
            operator=node.operator,
            left=self.visit(node.left),
            right=self.visit(node.right),
        )

    def visit_number_literal(self, node: NumberLiteral) -> dict[str, Any]:
        return self._node(node, "NumberLiteral", value=node.value)

    def visit_boolean_literal(self, node: BooleanLiteral) -> dict[str, Any]:
        return self._node(node, "BooleanLiteral", value=node.value)

    def visit_string_literal(self, node: StringLiteral) -> dict[str, Any]:
        return self._node(node, "StringLiteral", value=node.value)

    def visit_identifier(self, node: Identifier) -> dict[str, Any]:
        return self._node(node, "Identifier", name=node.name)


def to_dict(node: ASTNode, include_positions: bool = False) -> dict[str, Any]:
    """Serialize a node and its subtree to dictionaries."""
    return AstSerializer(include_positions).visit(node)


def to_json(node: ASTNode, indent: int = 2, include_positions: bool = False) -> str:
    """Serialize a node and its subtree to a JSON string."""
    return json.dumps(to_dict(node, include_positions), indent=indent, ensure_ascii=False)
