"""
sollint - static checks for Solidity contract ASTs.

Three rules ship by default:

- ``unused-variable``: state variables that are never used;
- ``division-before-multiplication``: ``a / (b * c)`` expression statements;
- ``unprotected-selfdestruct``: ``selfdestruct``/``suicide`` reached before
  any ``require`` guard.
"""

__version__ = "0.1.0"

from .findings import AnalysisReport, Finding, RuleKind, Severity
from .config import LintConfig
from .error_reporter import ConfigError, SollintError, SolParseError, SolSyntaxError
from .analysis import Analyzer, analyze_source

__all__ = [
    "__version__",
    "Analyzer",
    "analyze_source",
    "AnalysisReport",
    "Finding",
    "RuleKind",
    "Severity",
    "LintConfig",
    "SollintError",
    "SolSyntaxError",
    "SolParseError",
    "ConfigError",
]
