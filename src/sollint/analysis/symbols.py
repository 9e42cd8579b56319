"""
Declared / used symbol sets for a contract.

Declared symbols are the names of the contract's state variables, in
declaration order with duplicates collapsed. Unnamed declarations are
skipped.

Used symbols are, by default, the identifiers that appear as a bare
expression statement (``count;``) anywhere in a function body. With
``count_nested_references`` every identifier reference in function
bodies, modifier arguments and state-variable initializers counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Set

from .. import sol_ast as ast
from .visitor import AstVisitor, expression_statements, function_bodies

logger = logging.getLogger("sollint.analysis.symbols")


@dataclass
class ContractSymbols:
    declared: List[ast.Identifier] = field(default_factory=list)
    used: Set[ast.Identifier] = field(default_factory=set)

    def unused(self) -> List[ast.Identifier]:
        return unused_symbols(self.declared, self.used)


def unused_symbols(declared: List[ast.Identifier], used: Set[ast.Identifier]) -> List[ast.Identifier]:
    """Declared minus used, keeping declaration order."""
    return [name for name in declared if name not in used]


class _ReferenceCollector(AstVisitor):
    def __init__(self):
        self.references: Set[ast.Identifier] = set()

    def visit_Identifier(self, node: ast.Identifier) -> None:
        self.references.add(node)


class SymbolCollector:
    def __init__(self, count_nested_references: bool = False):
        self.count_nested_references = count_nested_references

    def collect(self, contract: ast.ContractDefinition) -> ContractSymbols:
        symbols = ContractSymbols(
            declared=self.declared(contract),
            used=self.used(contract),
        )
        logger.debug(
            "%s: %d declared, %d used",
            contract.name, len(symbols.declared), len(symbols.used),
        )
        return symbols

    def declared(self, contract: ast.ContractDefinition) -> List[ast.Identifier]:
        names: List[ast.Identifier] = []
        seen: Set[ast.Identifier] = set()
        for var in contract.variables:
            if var.name is None or var.name in seen:
                continue
            seen.add(var.name)
            names.append(var.name)
        return names

    def used(self, contract: ast.ContractDefinition) -> Set[ast.Identifier]:
        if self.count_nested_references:
            return self._all_references(contract)

        used: Set[ast.Identifier] = set()
        for _, body in function_bodies(contract):
            for stmt in expression_statements(body):
                if isinstance(stmt.expression, ast.Identifier):
                    used.add(stmt.expression)
        return used

    def _all_references(self, contract: ast.ContractDefinition) -> Set[ast.Identifier]:
        collector = _ReferenceCollector()
        for var in contract.variables:
            collector.visit(var.initial_value)
        for function in contract.functions:
            collector.visit_all(function.header.modifiers)
            collector.visit_all(function.body)
        return collector.references
