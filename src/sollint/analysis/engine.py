"""
Analysis Engine
===============

Runs the registered rules over every contract of a parsed source unit and
collects their findings into one ``AnalysisReport`` per file.

Ordering is deterministic: contracts in source order, then rules in
registry order for each contract, then whatever order each detector
produces (declaration order for unused variables, statement order for the
others).

Usage::

    from sollint.analysis import Analyzer

    report = Analyzer().analyze_source(text, "Token.sol")
    for finding in report.findings:
        print(finding)
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from .. import sol_ast as ast
from ..config import LintConfig
from ..error_reporter import SolParseError, get_error_reporter
from ..findings import AnalysisReport, Finding
from ..parser.parser import parse_source
from ..runtime.file_flags import apply_file_flags, parse_file_flags
from .registry import RuleRegistry, default_registry

logger = logging.getLogger("sollint.analysis.engine")


class Analyzer:
    """Runs enabled rules over parsed source units."""

    def __init__(self, config: Optional[LintConfig] = None, registry: Optional[RuleRegistry] = None):
        self.config = config or LintConfig()
        self.registry = registry or default_registry()

    def analyze(
        self,
        source_unit: ast.SourceUnit,
        filename: str = "<stdin>",
        config: Optional[LintConfig] = None,
    ) -> AnalysisReport:
        config = config or self.config
        report = AnalysisReport(filename=filename)
        rules = self.registry.enabled(config)
        logger.info("Analyzing file: %s (%d rules)", filename, len(rules))

        for contract in source_unit.contracts:
            logger.info("Analyzing contract: %s", contract.name)
            report.contracts_checked += 1
            report.functions_checked += sum(1 for f in contract.functions if f.body is not None)
            for rule in rules:
                if not rule.applies_to(contract):
                    continue
                findings = rule.detector.detect(contract, config)
                logger.debug("%s: %s produced %d findings", contract.name, rule.kind.value, len(findings))
                report.findings.extend(findings)

        report.finished_at = time.time()
        logger.info(report.summary())
        return report

    def run(self, source_unit: ast.SourceUnit, reporter, filename: str = "<stdin>") -> AnalysisReport:
        """Analyze and hand the report to ``reporter``."""
        report = self.analyze(source_unit, filename)
        reporter.report(report)
        return report

    def analyze_source(self, source_code: str, filename: str = "<stdin>") -> AnalysisReport:
        """Lex, parse and analyze ``source_code``.

        Inline ``@sollint`` directives in the first lines of the file
        adjust the configuration for this file only. Raises
        ``SolSyntaxError`` for lexing problems and ``SolParseError`` when
        the parser reported errors; the rules are not run in either case.
        """
        try:
            source_unit, errors = parse_source(source_code, filename)
        finally:
            get_error_reporter().forget(filename)
        if errors:
            raise SolParseError(filename, errors)

        config = apply_file_flags(self.config, parse_file_flags(source_code))
        return self.analyze(source_unit, filename, config=config)

    def analyze_path(self, path: str) -> AnalysisReport:
        with open(path, "r", encoding="utf-8") as f:
            source_code = f.read()
        return self.analyze_source(source_code, filename=path)


def analyze_source(source_code: str, filename: str = "<stdin>", config: Optional[LintConfig] = None) -> List[Finding]:
    """Findings for ``source_code`` with the default rules."""
    return Analyzer(config).analyze_source(source_code, filename).findings
