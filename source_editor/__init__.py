"""Anchored source-text transformation engine."""

__version__ = "0.1.0"
