"""
Rule registry.

Each rule is registered once as ``(kind, detector, applies_to)``. The
engine runs every enabled rule over every contract for which
``applies_to`` returns True; the default predicate accepts all contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from .. import sol_ast as ast
from ..config import LintConfig
from ..findings import RuleKind
from .arithmetic_order import DivisionBeforeMultiplicationDetector
from .base import Detector
from .selfdestruct import UnprotectedSelfdestructDetector
from .unused_variables import UnusedVariableDetector


def always(contract: ast.ContractDefinition) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    kind: RuleKind
    detector: Detector
    applies_to: Callable[[ast.ContractDefinition], bool] = always

    @property
    def severity(self):
        return self.detector.severity

    @property
    def description(self) -> str:
        return self.detector.description


class RuleRegistry:
    """Ordered collection of rules; iteration follows registration order."""

    def __init__(self):
        self._rules: Dict[RuleKind, Rule] = {}

    def register(
        self,
        detector: Detector,
        applies_to: Optional[Callable[[ast.ContractDefinition], bool]] = None,
    ) -> Rule:
        if detector.kind in self._rules:
            raise ValueError(f"Rule '{detector.kind.value}' is already registered")
        rule = Rule(detector.kind, detector, applies_to or always)
        self._rules[detector.kind] = rule
        return rule

    def get(self, kind: RuleKind) -> Optional[Rule]:
        return self._rules.get(kind)

    def enabled(self, config: LintConfig) -> List[Rule]:
        return [rule for rule in self if config.is_enabled(rule.kind)]

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, kind) -> bool:
        return kind in self._rules


def default_registry() -> RuleRegistry:
    registry = RuleRegistry()
    registry.register(UnusedVariableDetector())
    registry.register(DivisionBeforeMultiplicationDetector())
    registry.register(UnprotectedSelfdestructDetector())
    return registry
