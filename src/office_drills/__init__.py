"""Micro-break reminder and exercise walkthrough engine."""

__version__ = "0.1.0"
