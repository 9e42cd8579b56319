"""
sollint runtime helpers: inline per-file directives.
"""

from .file_flags import apply_file_flags, parse_file_flags

__all__ = ["apply_file_flags", "parse_file_flags"]
