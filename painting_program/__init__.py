"""Painting Program: a minimal PyQt5 freehand drawing window."""

__version__ = "1.0.0"
