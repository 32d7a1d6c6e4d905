"""Formatting utilities for gitscope.

This package renders snapshots for display, organized into logical modules:
- date: Date formatting
- status: Status reports and tables
- tree: Tree renderables
- blame: Blame listings
"""

# Date formatters
from .date import format_date

# Status formatters
from .status import format_kind, format_status_report, status_table

# Tree formatters
from .tree import tree_renderable

# Blame formatters
from .blame import format_blame, format_blame_line

__all__ = [
    # Date
    "format_date",
    # Status
    "format_kind",
    "format_status_report",
    "status_table",
    # Tree
    "tree_renderable",
    # Blame
    "format_blame",
    "format_blame_line",
]
