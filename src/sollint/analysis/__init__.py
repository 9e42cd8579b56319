"""
Static analysis over the sollint AST.
"""

from .base import Detector
from .engine import Analyzer, analyze_source
from .registry import Rule, RuleRegistry, default_registry
from .arithmetic_order import DivisionBeforeMultiplicationDetector
from .selfdestruct import UnprotectedSelfdestructDetector, unprotected_calls
from .symbols import ContractSymbols, SymbolCollector, unused_symbols
from .unused_variables import UnusedVariableDetector

__all__ = [
    "Analyzer",
    "analyze_source",
    "Detector",
    "Rule",
    "RuleRegistry",
    "default_registry",
    "ContractSymbols",
    "SymbolCollector",
    "unused_symbols",
    "UnusedVariableDetector",
    "DivisionBeforeMultiplicationDetector",
    "UnprotectedSelfdestructDetector",
    "unprotected_calls",
]
