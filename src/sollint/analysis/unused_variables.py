"""Unused state variables: declared minus used, one finding per name."""

from __future__ import annotations

from typing import Dict, List

from .. import sol_ast as ast
from ..config import LintConfig
from ..findings import Finding, RuleKind, Severity
from .base import Detector
from .symbols import SymbolCollector


class UnusedVariableDetector(Detector):
    kind = RuleKind.UNUSED_VARIABLE
    severity = Severity.LOW
    description = "State variable is declared but never used."
    suggestion = "Remove the variable or reference it where it is needed."

    def detect(self, contract: ast.ContractDefinition, config: LintConfig) -> List[Finding]:
        collector = SymbolCollector(count_nested_references=config.count_nested_references)
        symbols = collector.collect(contract)

        lines: Dict[ast.Identifier, int] = {}
        for var in contract.variables:
            if var.name is not None and var.name not in lines:
                lines[var.name] = var.line

        return [
            self.finding(
                f"Unused variable in contract '{contract.name}': '{name}'",
                contract,
                symbol=str(name),
                line=lines.get(name),
            )
            for name in symbols.unused()
        ]
