"""
Findings & Reports
==================

Every detector emits ``Finding`` records; the engine collects them per
source file into an ``AnalysisReport`` that reporters render.

Findings are advisory. ``Severity`` exists so callers can choose an exit
status (``--fail-on``); it never changes what the detectors look for.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, threshold: "Severity") -> bool:
        return self.rank >= threshold.rank


_SEVERITY_RANK = {
    Severity.INFO: 0,
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}


class RuleKind(str, Enum):
    UNUSED_VARIABLE = "unused-variable"
    DIVISION_BEFORE_MULTIPLICATION = "division-before-multiplication"
    UNPROTECTED_SELFDESTRUCT = "unprotected-selfdestruct"


@dataclass
class Finding:
    """A single issue found in a contract."""
    rule: RuleKind
    severity: Severity
    message: str
    contract_name: str = ""
    function_name: str = ""
    symbol: str = ""
    line: Optional[int] = None
    suggestion: str = ""

    @property
    def location(self) -> str:
        loc = self.contract_name
        if self.function_name:
            loc = f"{loc}.{self.function_name}" if loc else self.function_name
        return loc

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "rule": self.rule.value,
            # Serialized form uses the Enum name (UPPERCASE)
            "severity": self.severity.name,
            "message": self.message,
            "contract": self.contract_name,
        }
        if self.function_name:
            d["function"] = self.function_name
        if self.symbol:
            d["symbol"] = self.symbol
        if self.line is not None:
            d["line"] = self.line
        if self.suggestion:
            d["suggestion"] = self.suggestion
        return d

    def __str__(self) -> str:
        loc = f" (line {self.line})" if self.line else ""
        where = f" in {self.location}" if self.location else ""
        return f"[{self.severity.value.upper()}] {self.rule.value}{where}{loc}: {self.message}"


@dataclass
class AnalysisReport:
    """Ordered findings for one source file."""
    filename: str = "<stdin>"
    started_at: float = field(default_factory=time.time)
    finished_at: float = 0.0
    findings: List[Finding] = field(default_factory=list)
    contracts_checked: int = 0
    functions_checked: int = 0

    @property
    def duration(self) -> float:
        return max(self.finished_at - self.started_at, 0.0)

    @property
    def passed(self) -> bool:
        """True if no high-severity findings."""
        return not any(f.severity == Severity.HIGH for f in self.findings)

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    def by_rule(self, rule: RuleKind) -> List[Finding]:
        return [f for f in self.findings if f.rule == rule]

    def has_findings_at_least(self, threshold: Severity) -> bool:
        return any(f.severity.at_least(threshold) for f in self.findings)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return (
            f"Analysis [{status}] for '{self.filename}': "
            f"{len(self.findings)} findings "
            f"(H={self.count(Severity.HIGH)} M={self.count(Severity.MEDIUM)} "
            f"L={self.count(Severity.LOW)} I={self.count(Severity.INFO)}) "
            f"in {self.contracts_checked} contracts, {self.duration:.3f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.filename,
            "passed": self.passed,
            "duration": round(self.duration, 4),
            "contracts_checked": self.contracts_checked,
            "functions_checked": self.functions_checked,
            "findings": [f.to_dict() for f in self.findings],
            "summary": self.summary(),
        }
