# src/sollint/cli/__init__.py
