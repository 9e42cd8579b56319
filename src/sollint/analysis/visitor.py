"""
AST traversal shared by the detectors.

``AstVisitor`` dispatches to ``visit_<NodeClass>`` methods and falls back to
``generic_visit``, which descends into ``node.children()``. The helper
functions walk every statement of a function body, including the ones nested
in blocks, conditionals and loops.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .. import sol_ast as ast


class AstVisitor:
    """Read-only visitor over sollint AST nodes."""

    def visit(self, node: Optional[ast.Node]) -> None:
        if node is None:
            return
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            self.generic_visit(node)
        else:
            method(node)

    def generic_visit(self, node: ast.Node) -> None:
        for child in node.children():
            self.visit(child)

    def visit_all(self, nodes) -> None:
        for node in nodes or ():
            self.visit(node)


def nested_bodies(stmt: ast.Statement) -> List[List[ast.Statement]]:
    """Statement lists directly nested in ``stmt`` (branches, loop bodies, blocks)."""
    if isinstance(stmt, ast.BlockStatement):
        return [stmt.statements]
    if isinstance(stmt, ast.IfStatement):
        return [as_statements(stmt.consequence), as_statements(stmt.alternative)]
    if isinstance(stmt, (ast.ForStatement, ast.WhileStatement, ast.DoWhileStatement)):
        return [as_statements(stmt.body)]
    if isinstance(stmt, ast.TryStatement):
        return [stmt.body.statements] + [c.statements for c in stmt.catch_clauses]
    return []


def as_statements(stmt: Optional[ast.Statement]) -> List[ast.Statement]:
    """A branch or loop body as a statement list (unwrapping a plain block)."""
    if stmt is None:
        return []
    if type(stmt) is ast.BlockStatement:
        return stmt.statements
    return [stmt]


def iter_statements(statements: List[ast.Statement]) -> Iterator[ast.Statement]:
    """Every statement in source order, descending into nested bodies."""
    for stmt in statements or ():
        if stmt is None:
            continue
        yield stmt
        for body in nested_bodies(stmt):
            yield from iter_statements(body)


def expression_statements(statements: List[ast.Statement]) -> Iterator[ast.ExpressionStatement]:
    for stmt in iter_statements(statements):
        if isinstance(stmt, ast.ExpressionStatement) and stmt.expression is not None:
            yield stmt


def function_bodies(contract: ast.ContractDefinition) -> Iterator[Tuple[ast.FunctionDefinition, List[ast.Statement]]]:
    """(function, body) for every function-like item that has a body."""
    for function in contract.functions:
        if function.body is not None:
            yield function, function.body


def call_name(expr: Optional[ast.Expression]) -> Optional[str]:
    """``foo`` for a call ``foo(...)`` with a bare identifier callee."""
    if isinstance(expr, ast.CallExpression):
        return expr.callee_name
    return None
