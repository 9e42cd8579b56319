"""
Unprotected destructive calls.

A function body is scanned in source order with a single ``protected``
flag. A call to a guard function (``require`` by default) sets the flag.
A call to a destructive builtin (``selfdestruct``/``suicide``) made while
the flag is clear is reported. By default scanning stops at the first
report for the function.

Nested bodies:

- a plain ``{ ... }`` or ``unchecked { ... }`` block always runs, so a
  guard inside it protects the statements after the block;
- a branch, loop or try/catch body may not run, so a guard inside it only
  protects the rest of that body.
"""

from __future__ import annotations

import logging
from typing import List

from .. import sol_ast as ast
from ..config import LintConfig
from ..findings import Finding, RuleKind, Severity
from .base import Detector
from .visitor import call_name, function_bodies, nested_bodies

logger = logging.getLogger("sollint.analysis.selfdestruct")


class _GuardScan:
    """Working state for one function body."""

    def __init__(self, guards, destructive, report_all: bool):
        self.guards = frozenset(guards)
        self.destructive = frozenset(destructive)
        self.report_all = report_all
        self.hits: List[ast.ExpressionStatement] = []
        self.done = False

    def scan(self, statements: List[ast.Statement], protected: bool = False) -> bool:
        """Scan ``statements``; return the guard flag after the last one."""
        for stmt in statements or ():
            if self.done:
                break
            if stmt is None:
                continue

            if isinstance(stmt, ast.ExpressionStatement):
                name = call_name(stmt.expression)
                if name in self.destructive and not protected:
                    self.hits.append(stmt)
                    if not self.report_all:
                        self.done = True
                elif name in self.guards:
                    protected = True
            elif isinstance(stmt, ast.BlockStatement):
                protected = self.scan(stmt.statements, protected)
            else:
                for body in nested_bodies(stmt):
                    self.scan(body, protected)
        return protected


def unprotected_calls(
    body: List[ast.Statement],
    guards=("require",),
    destructive=("selfdestruct", "suicide"),
    report_all: bool = False,
) -> List[ast.ExpressionStatement]:
    """Destructive call statements in ``body`` that run without a prior guard."""
    scan = _GuardScan(guards, destructive, report_all)
    scan.scan(body)
    return scan.hits


class UnprotectedSelfdestructDetector(Detector):
    kind = RuleKind.UNPROTECTED_SELFDESTRUCT
    severity = Severity.HIGH
    description = "Contract can be destroyed without a preceding access check."
    suggestion = "Guard the call, e.g. `require(msg.sender == owner);`, or remove it."

    def detect(self, contract: ast.ContractDefinition, config: LintConfig) -> List[Finding]:
        findings: List[Finding] = []
        for function, body in function_bodies(contract):
            hits = unprotected_calls(
                body,
                guards=config.guard_functions,
                destructive=config.destructive_functions,
                report_all=config.report_all_destructive_calls,
            )
            for stmt in hits:
                callee = call_name(stmt.expression)
                logger.debug("unprotected %s in %s.%s", callee, contract.name, function.display_name)
                findings.append(self.finding(
                    f"Unprotected `{callee}` call in function '{function.display_name}'",
                    contract,
                    function=function,
                    symbol=callee,
                    line=stmt.line,
                ))
        return findings

