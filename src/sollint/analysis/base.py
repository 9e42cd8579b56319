"""
Base detector class.
"""

from __future__ import annotations

from typing import List, Optional

from .. import sol_ast as ast
from ..config import LintConfig
from ..findings import Finding, RuleKind, Severity


class Detector:
    """One rule: looks at a contract and returns findings.

    Subclasses set ``kind``, ``severity``, ``description`` and
    ``suggestion`` and implement ``detect``. Detectors are stateless; all
    working state lives inside a single ``detect`` call.
    """

    kind: RuleKind
    severity: Severity = Severity.INFO
    description: str = ""
    suggestion: str = ""

    def detect(self, contract: ast.ContractDefinition, config: LintConfig) -> List[Finding]:
        raise NotImplementedError("Subclasses must implement detect()")

    def finding(
        self,
        message: str,
        contract: ast.ContractDefinition,
        function: Optional[ast.FunctionDefinition] = None,
        symbol: str = "",
        line: Optional[int] = None,
    ) -> Finding:
        return Finding(
            rule=self.kind,
            severity=self.severity,
            message=message,
            contract_name=str(contract.name),
            function_name=function.display_name if function is not None else "",
            symbol=symbol,
            line=line,
            suggestion=self.suggestion,
        )
