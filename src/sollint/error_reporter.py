"""
Error reporting for sollint.

Lexing problems are raised as ``SolSyntaxError`` instances built by the
shared ``ErrorReporter``, which keeps the text of every registered source
so messages can show the offending line with a caret under the column::

    demo.sol:3:17: Unexpected character '$'
        uint256 total = $5;
                        ^
    Suggestion: Remove or replace this character.

Parse failures are collected by the parser and surfaced as a single
``SolParseError`` by the engine helpers.
"""

from __future__ import annotations

from typing import Dict, List, Optional


class SollintError(Exception):
    """Base class for every error raised by sollint."""


class SolSyntaxError(SollintError):
    """Raised by the lexer for malformed source text."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        filename: str = "<stdin>",
        suggestion: str = "",
        source_line: str = "",
    ):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        self.suggestion = suggestion
        self.source_line = source_line
        super().__init__(self.format())

    @property
    def location(self) -> str:
        if self.line is None:
            return self.filename
        if self.column is None:
            return f"{self.filename}:{self.line}"
        return f"{self.filename}:{self.line}:{self.column}"

    def format(self) -> str:
        parts = [f"{self.location}: {self.message}"]
        if self.source_line:
            parts.append(f"    {self.source_line}")
            if self.column:
                parts.append("    " + " " * (self.column - 1) + "^")
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return "\n".join(parts)


class SolParseError(SollintError):
    """A source file could not be parsed; ``errors`` holds the parser messages."""

    def __init__(self, filename: str, errors: List[str]):
        self.filename = filename
        self.errors = list(errors)
        first = self.errors[0] if self.errors else "unknown parse error"
        more = f" (+{len(self.errors) - 1} more)" if len(self.errors) > 1 else ""
        super().__init__(f"{filename}: {first}{more}")


class ConfigError(SollintError):
    """Invalid configuration value or unreadable configuration file."""


class ErrorReporter:
    """Keeps registered sources so errors can quote the offending line."""

    def __init__(self):
        self._sources: Dict[str, List[str]] = {}

    def register_source(self, filename: str, source: str) -> None:
        self._sources[filename] = source.splitlines()

    def get_source_line(self, filename: str, line: Optional[int]) -> str:
        lines = self._sources.get(filename)
        if not lines or not line or line > len(lines):
            return ""
        return lines[line - 1].rstrip()

    def report_error(
        self,
        error_cls,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        filename: str = "<stdin>",
        suggestion: str = "",
    ) -> SolSyntaxError:
        return error_cls(
            message,
            line=line,
            column=column,
            filename=filename,
            suggestion=suggestion,
            source_line=self.get_source_line(filename, line),
        )

    def forget(self, filename: str) -> None:
        self._sources.pop(filename, None)


_error_reporter = ErrorReporter()


def get_error_reporter() -> ErrorReporter:
    return _error_reporter
