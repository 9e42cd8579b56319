"""
Division whose right operand is a multiplication.

Flags an expression statement whose expression is ``a / (b * c)``:
a division at the top of the statement with a multiplication as its right
operand. The match is deliberately narrow. ``(a * b) / c``, a plain
``a / b`` and the same shape buried inside an assignment or a call
argument are not reported.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .. import sol_ast as ast
from ..config import LintConfig
from ..findings import Finding, RuleKind, Severity
from .base import Detector
from .visitor import expression_statements, function_bodies

logger = logging.getLogger("sollint.analysis.arithmetic_order")


def _is_binary(expr: Optional[ast.Expression], kind: ast.BinOpKind) -> bool:
    return isinstance(expr, ast.InfixExpression) and expr.operator == kind


def contains_div_before_mul(expr: Optional[ast.Expression]) -> bool:
    return _is_binary(expr, ast.BinOpKind.DIV) and _is_binary(expr.right, ast.BinOpKind.MUL)


def check_statement(stmt: ast.Statement) -> bool:
    if not isinstance(stmt, ast.ExpressionStatement):
        return False
    return contains_div_before_mul(stmt.expression)


class DivisionBeforeMultiplicationDetector(Detector):
    kind = RuleKind.DIVISION_BEFORE_MULTIPLICATION
    severity = Severity.MEDIUM
    description = "Division with a multiplication as its right operand may lose precision."
    suggestion = "Multiply before dividing, e.g. `(a * c) / b`, so truncation happens last."

    def detect(self, contract: ast.ContractDefinition, config: LintConfig) -> List[Finding]:
        findings: List[Finding] = []
        for function, body in function_bodies(contract):
            for stmt in expression_statements(body):
                if check_statement(stmt):
                    logger.debug("division before multiplication in %s.%s at line %s",
                                 contract.name, function.display_name, stmt.line)
                    findings.append(self.finding(
                        "Unsafe division before multiplication detected.",
                        contract,
                        function=function,
                        line=stmt.line,
                    ))
        return findings
