# src/sollint/parser/__init__.py
"""
Parser module for the Solidity subset sollint analyzes.
"""

from .parser import Parser

__all__ = ["Parser"]
