"""Annotation-driven help for task/action console applications."""

__version__ = "0.1.0"
