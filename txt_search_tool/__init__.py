"""Keyword search and replace for large line-oriented text files."""

__version__ = "1.0.0"
