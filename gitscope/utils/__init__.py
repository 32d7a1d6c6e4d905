"""Utility functions for gitscope.

This package provides utility modules:
- text: Line and record splitting shared by the output parsers
"""

from .text import split_lines, split_records, join_path

__all__ = [
    "split_lines",
    "split_records",
    "join_path",
]
