"""Codepack: packages free-form model output into file-system-ready projects."""

__version__ = "0.1.0"
